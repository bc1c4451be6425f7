"""
Request and response models for the scheduling API.

The same JSON bodies are accepted by the HTTP routes, the Celery tasks and the
command line, so every request model knows how to build the domain objects.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from tournament_scheduler.core.config import (
    DEFAULT_REST_TIME_MINUTES, DEFAULT_COURT_SETUP_MINUTES, DEFAULT_MATCH_ROUND
)
from tournament_scheduler.models import (
    Team, Court, Match, SchedulerConfig, RescheduleConfig, CompletedScheduledMatch,
    ScheduledMatch, ScheduleResult, ScheduleValidationResult
)

IdentityField = Union[str, int]


class TeamSchema(BaseModel):
    id: IdentityField
    name: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> Team:
        return Team(id=self.id, name=self.name, metadata=dict(self.metadata))


class CourtSchema(BaseModel):
    id: IdentityField
    name: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> Court:
        return Court(id=self.id, name=self.name, metadata=dict(self.metadata))


class MatchSchema(BaseModel):
    """A match; each team slot is a team object, a team id or a placeholder label."""
    id: IdentityField
    team1: Union[TeamSchema, IdentityField, None] = None
    team2: Union[TeamSchema, IdentityField, None] = None
    round: int = DEFAULT_MATCH_ROUND
    duration: float = 30
    dependencies: List[IdentityField] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> Match:
        def slot(value):
            return value.to_domain() if isinstance(value, TeamSchema) else value

        return Match(
            id=self.id,
            team1=slot(self.team1),
            team2=slot(self.team2),
            round=self.round,
            duration=self.duration,
            dependencies=list(self.dependencies),
            metadata=dict(self.metadata)
        )


class CompletedMatchSchema(BaseModel):
    match_id: IdentityField
    court_id: IdentityField
    actual_start_time: datetime
    actual_end_time: datetime
    team1_id: Optional[IdentityField] = None
    team2_id: Optional[IdentityField] = None

    def to_domain(self) -> CompletedScheduledMatch:
        return CompletedScheduledMatch(
            match_id=self.match_id,
            court_id=self.court_id,
            actual_start_time=self.actual_start_time,
            actual_end_time=self.actual_end_time,
            team1_id=self.team1_id,
            team2_id=self.team2_id
        )


class SchedulerConfigSchema(BaseModel):
    rest_time: float = DEFAULT_REST_TIME_MINUTES
    start_time: Optional[datetime] = None
    court_setup_time: float = DEFAULT_COURT_SETUP_MINUTES

    def to_domain(self) -> SchedulerConfig:
        return SchedulerConfig(
            rest_time=self.rest_time,
            start_time=self.start_time,
            court_setup_time=self.court_setup_time
        )


class RescheduleConfigSchema(SchedulerConfigSchema):
    current_time: Optional[datetime] = None
    completed_matches: List[CompletedMatchSchema] = Field(default_factory=list)

    def to_domain(self) -> RescheduleConfig:
        return RescheduleConfig(
            rest_time=self.rest_time,
            start_time=self.start_time,
            court_setup_time=self.court_setup_time,
            current_time=self.current_time,
            completed_matches=[completed.to_domain() for completed in self.completed_matches]
        )


class ScheduleRequest(BaseModel):
    """Request model for schedule generation."""
    matches: List[MatchSchema]
    courts: List[CourtSchema]
    config: SchedulerConfigSchema = Field(default_factory=SchedulerConfigSchema)

    def to_domain(self) -> Tuple[List[Match], List[Court], SchedulerConfig]:
        return (
            [match.to_domain() for match in self.matches],
            [court.to_domain() for court in self.courts],
            self.config.to_domain()
        )


class RescheduleRequest(ScheduleRequest):
    """Request model for a live reschedule."""
    config: RescheduleConfigSchema = Field(default_factory=RescheduleConfigSchema)


class ScheduledMatchSchema(BaseModel):
    """Response model for a single placed match."""
    match_id: IdentityField
    court_id: IdentityField
    start_time: datetime
    end_time: datetime
    round: int

    @classmethod
    def from_domain(cls, entry: ScheduledMatch) -> "ScheduledMatchSchema":
        return cls(
            match_id=entry.match_id,
            court_id=entry.court_id,
            start_time=entry.start_time,
            end_time=entry.end_time,
            round=entry.round
        )

    def to_domain(self) -> ScheduledMatch:
        return ScheduledMatch(
            match_id=self.match_id,
            court_id=self.court_id,
            start_time=self.start_time,
            end_time=self.end_time,
            round=self.round
        )


class ScheduleSummarySchema(BaseModel):
    total_matches: int
    total_duration: float
    courts_used: int
    end_time: datetime


class ScheduleResponse(BaseModel):
    """Response model for schedule generation."""
    success: bool
    message: str
    total_matches: int
    schedule: List[ScheduledMatchSchema]
    summary: ScheduleSummarySchema
    validation: Dict[str, Any]
    generation_time: float

    @classmethod
    def from_result(
        cls,
        result: ScheduleResult,
        validation: ScheduleValidationResult,
        generation_time: float,
        message: Optional[str] = None
    ) -> "ScheduleResponse":
        summary = result.summary
        return cls(
            success=True,
            message=message or f"Schedule generated successfully with {len(result)} matches",
            total_matches=len(result),
            schedule=[ScheduledMatchSchema.from_domain(entry) for entry in result.schedule],
            summary=ScheduleSummarySchema(
                total_matches=summary.total_matches,
                total_duration=summary.total_duration,
                courts_used=summary.courts_used,
                end_time=summary.end_time
            ),
            validation=validation_summary(validation),
            generation_time=generation_time
        )


class ValidateRequest(BaseModel):
    """Request model for auditing an existing schedule."""
    schedule: List[ScheduledMatchSchema]
    matches: List[MatchSchema]
    config: SchedulerConfigSchema = Field(default_factory=SchedulerConfigSchema)
    completed_matches: List[CompletedMatchSchema] = Field(default_factory=list)


class ValidationResponse(BaseModel):
    valid: bool
    errors: List[str]


def validation_summary(validation: ScheduleValidationResult) -> Dict[str, Any]:
    """Compact JSON view of a validation result."""
    counts: Dict[str, int] = {}
    for violation in validation.violations:
        counts[violation.constraint_type] = counts.get(violation.constraint_type, 0) + 1
    return {
        "is_valid": validation.is_valid,
        "violations": len(validation.violations),
        "by_type": counts,
        "errors": validation.errors
    }
