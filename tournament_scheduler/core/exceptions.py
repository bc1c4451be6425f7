"""
Exceptions raised by the scheduling services.

Callers branch on ``error.kind`` to tell bad input (CONFIGURATION) apart from
constraints that cannot be satisfied (FEASIBILITY).
"""

from enum import Enum
from typing import List, Optional

from tournament_scheduler.models import Identity


class ErrorKind(Enum):
    CONFIGURATION = "configuration"
    FEASIBILITY = "feasibility"


class FeasibilityCause(Enum):
    DANGLING_DEPENDENCY = "dangling_dependency"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    DEADLOCK = "deadlock"


class SchedulingError(Exception):
    """Base class for all scheduling failures."""

    kind: ErrorKind = None


class ConfigurationError(SchedulingError):
    """Raised immediately when the input cannot be scheduled at all (no courts, no matches...)."""

    kind = ErrorKind.CONFIGURATION


class FeasibilityError(SchedulingError):
    """Raised when the placement loop cannot place every match."""

    kind = ErrorKind.FEASIBILITY

    def __init__(
        self,
        message: str,
        placed: int,
        total: int,
        unplaced: Optional[List[Identity]] = None,
        cause: FeasibilityCause = FeasibilityCause.DEADLOCK
    ):
        super().__init__(message)
        self.placed = placed
        self.total = total
        self.unplaced = list(unplaced or [])
        self.cause = cause

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "cause": self.cause.value,
            "message": str(self),
            "placed": self.placed,
            "total": self.total,
            "unplaced": self.unplaced
        }
