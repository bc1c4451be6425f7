"""
Tournament Match Scheduler.

Places bracket and pool matches on courts with dependency, rest time and
court setup constraints, and re-plans the remaining matches mid-event.
"""

from tournament_scheduler.core.config import API_VERSION
from tournament_scheduler.core.exceptions import (
    ErrorKind, FeasibilityCause, SchedulingError, ConfigurationError, FeasibilityError
)
from tournament_scheduler.models import (
    Team, Court, Match, SchedulerConfig, RescheduleConfig, CompletedScheduledMatch,
    ScheduledMatch, ScheduleSummary, ScheduleResult, ScheduleValidationResult
)
from tournament_scheduler.services import (
    schedule_matches, reschedule_matches, validate_schedule, ScheduleValidator
)

__version__ = API_VERSION

__all__ = [
    "ErrorKind",
    "FeasibilityCause",
    "SchedulingError",
    "ConfigurationError",
    "FeasibilityError",
    "Team",
    "Court",
    "Match",
    "SchedulerConfig",
    "RescheduleConfig",
    "CompletedScheduledMatch",
    "ScheduledMatch",
    "ScheduleSummary",
    "ScheduleResult",
    "ScheduleValidationResult",
    "schedule_matches",
    "reschedule_matches",
    "validate_schedule",
    "ScheduleValidator"
]
