"""
Data models for the Tournament Match Scheduler.
Defines all data structures used throughout the application.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Set, Union
from enum import Enum


# Teams, courts and matches share one opaque identity type
Identity = Union[str, int]


def identity_key(identity: Identity) -> str:
    """Ordering key for an identity (lexicographic on its string form)."""
    return str(identity)


@dataclass
class Team:
    id: Identity
    name: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Team):
            return self.id == other.id
        return False


@dataclass
class Court:
    id: Identity
    name: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Court):
            return self.id == other.id
        return False


# A participant slot holds either a resolved team or a bare identity
# (a team id, or a placeholder such as "Winner QF1")
Participant = Union[Team, Identity, None]


def participant_id(participant: Participant) -> Optional[Identity]:
    if isinstance(participant, Team):
        return participant.id
    if participant is None or participant == "":
        return None
    return participant


@dataclass
class Match:
    id: Identity
    team1: Participant
    team2: Participant
    round: int = 1
    duration: float = 30  # minutes
    dependencies: List[Identity] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def participant_ids(self) -> List[Identity]:
        """Identities of the filled participant slots, in slot order."""
        ids = []
        for slot in (self.team1, self.team2):
            pid = participant_id(slot)
            if pid is not None:
                ids.append(pid)
        return ids

    def __str__(self):
        names = " vs ".join(str(pid) for pid in self.participant_ids)
        return f"{self.id} ({names}, round {self.round})"


@dataclass
class SchedulerConfig:
    rest_time: float  # minutes a team rests between two matches
    start_time: Optional[datetime] = None
    court_setup_time: float = 0  # minutes between two matches on one court


@dataclass(frozen=True)
class CompletedScheduledMatch:
    """A match already played, reported with its actual times and teams."""
    match_id: Identity
    court_id: Identity
    actual_start_time: datetime
    actual_end_time: datetime
    team1_id: Identity
    team2_id: Identity

    @property
    def participant_ids(self) -> List[Identity]:
        return [pid for pid in (self.team1_id, self.team2_id) if pid is not None and pid != ""]


@dataclass
class RescheduleConfig(SchedulerConfig):
    current_time: Optional[datetime] = None
    completed_matches: List[CompletedScheduledMatch] = field(default_factory=list)


@dataclass(frozen=True)
class ScheduledMatch:
    match_id: Identity
    court_id: Identity
    start_time: datetime
    end_time: datetime
    round: int

    def __str__(self):
        return (
            f"{self.match_id} on court {self.court_id}: "
            f"{self.start_time:%Y-%m-%d %H:%M}-{self.end_time:%H:%M} (round {self.round})"
        )


@dataclass(frozen=True)
class ScheduleSummary:
    total_matches: int
    total_duration: float  # minutes
    courts_used: int
    end_time: datetime


@dataclass
class ScheduleResult:
    schedule: List[ScheduledMatch] = field(default_factory=list)
    summary: Optional[ScheduleSummary] = None

    def __iter__(self) -> Iterator[ScheduledMatch]:
        return iter(self.schedule)

    def __len__(self) -> int:
        return len(self.schedule)

    def by_match(self) -> Dict[Identity, ScheduledMatch]:
        return {entry.match_id: entry for entry in self.schedule}

    def get_court_matches(self, court_id: Identity) -> List[ScheduledMatch]:
        return [entry for entry in self.schedule if entry.court_id == court_id]

    def get_round_matches(self, round_number: int) -> List[ScheduledMatch]:
        return [entry for entry in self.schedule if entry.round == round_number]


@dataclass
class TeamState:
    team_id: Identity
    available_at: datetime
    current_match: Optional[Identity] = None


@dataclass
class CourtState:
    court_id: Identity
    available_at: datetime
    current_match: Optional[Identity] = None


class TaskState(Enum):
    PENDING = "pending"  # waiting on dependencies
    READY = "ready"
    PLACED = "placed"


@dataclass
class MatchTask:
    match: Match
    remaining_dependencies: Set[Identity] = field(default_factory=set)
    state: TaskState = TaskState.PENDING

    @property
    def match_id(self) -> Identity:
        return self.match.id

    @property
    def priority(self):
        return (self.match.round, identity_key(self.match.id))


@dataclass
class SchedulingConstraint:
    constraint_type: str
    description: str
    affected_teams: List[Identity] = field(default_factory=list)
    affected_matches: List[Identity] = field(default_factory=list)


@dataclass
class ScheduleValidationResult:
    is_valid: bool = True
    violations: List[SchedulingConstraint] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.is_valid

    @property
    def errors(self) -> List[str]:
        return [violation.description for violation in self.violations]

    def add_violation(self, constraint: SchedulingConstraint):
        self.violations.append(constraint)
        self.is_valid = False

    def get_violations(self, constraint_type: str) -> List[SchedulingConstraint]:
        return [v for v in self.violations if v.constraint_type == constraint_type]

    def get_summary(self) -> str:
        summary = f"Schedule Valid: {self.is_valid}\n"
        summary += f"Violations: {len(self.violations)}\n"
        counts: Dict[str, int] = {}
        for violation in self.violations:
            counts[violation.constraint_type] = counts.get(violation.constraint_type, 0) + 1
        for constraint_type in sorted(counts):
            summary += f"  {constraint_type}: {counts[constraint_type]}\n"
        return summary
