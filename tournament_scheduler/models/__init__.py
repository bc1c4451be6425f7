"""
Data models for the scheduling system.
"""

from .models import (
    Identity,
    identity_key,
    participant_id,
    Team,
    Court,
    Match,
    SchedulerConfig,
    RescheduleConfig,
    CompletedScheduledMatch,
    ScheduledMatch,
    ScheduleSummary,
    ScheduleResult,
    TeamState,
    CourtState,
    TaskState,
    MatchTask,
    SchedulingConstraint,
    ScheduleValidationResult
)

__all__ = [
    "Identity",
    "identity_key",
    "participant_id",
    "Team",
    "Court",
    "Match",
    "SchedulerConfig",
    "RescheduleConfig",
    "CompletedScheduledMatch",
    "ScheduledMatch",
    "ScheduleSummary",
    "ScheduleResult",
    "TeamState",
    "CourtState",
    "TaskState",
    "MatchTask",
    "SchedulingConstraint",
    "ScheduleValidationResult"
]
