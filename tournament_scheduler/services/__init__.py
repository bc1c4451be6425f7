"""
Services for match scheduling, live rescheduling and validation.
"""

from .scheduler import TournamentScheduler, LiveRescheduler, schedule_matches, reschedule_matches
from .validator import ScheduleValidator, validate_schedule

__all__ = [
    "TournamentScheduler",
    "LiveRescheduler",
    "schedule_matches",
    "reschedule_matches",
    "ScheduleValidator",
    "validate_schedule"
]
