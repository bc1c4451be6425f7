"""
Team and court availability tracking for the placement loop.

A ResourcePool is owned by a single scheduling call. Court states are seeded
when the pool is built; team states are created the first time a team is
referenced.
"""

from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from tournament_scheduler.core.logging_config import get_logger
from tournament_scheduler.models import (
    Court, CourtState, TeamState, Identity, CompletedScheduledMatch
)

logger = get_logger(__name__)


def minutes(value: float) -> timedelta:
    return timedelta(minutes=value)


def is_aware(value: datetime) -> bool:
    """True for timezone-aware datetimes. Aware and naive values cannot be compared."""
    return value.tzinfo is not None and value.utcoffset() is not None


class ResourcePool:
    """
    Availability state for every team and court of one scheduling call.

    Args:
        courts: Courts available for play (kept in input order)
        origin: Initial availability of lazily created team states
        court_origin: Initial availability of the courts (defaults to origin)
    """

    def __init__(self, courts: List[Court], origin: datetime, court_origin: Optional[datetime] = None):
        self.origin = origin
        court_start = court_origin if court_origin is not None else origin
        self.courts: List[CourtState] = [
            CourtState(court_id=court.id, available_at=court_start) for court in courts
        ]
        self._courts_by_id: Dict[Identity, CourtState] = {state.court_id: state for state in self.courts}
        self.teams: Dict[Identity, TeamState] = {}

    def ensure_team(self, team_id: Identity) -> TeamState:
        state = self.teams.get(team_id)
        if state is None:
            state = TeamState(team_id=team_id, available_at=self.origin)
            self.teams[team_id] = state
        return state

    def get_court(self, court_id: Identity) -> Optional[CourtState]:
        return self._courts_by_id.get(court_id)

    def team_available(self, team_id: Identity, time: datetime) -> bool:
        state = self.teams.get(team_id)
        if state is None:
            return True  # Not tracked yet, so free
        return state.current_match is None and state.available_at <= time

    def teams_available(self, team_ids: Iterable[Identity], time: datetime) -> bool:
        return all(self.team_available(team_id, time) for team_id in team_ids)

    def court_available(self, court_id: Identity, time: datetime) -> bool:
        state = self._courts_by_id.get(court_id)
        if state is None:
            return False
        return state.current_match is None and state.available_at <= time

    def earliest_start(self, team_ids: Iterable[Identity], time: datetime) -> datetime:
        """Latest of `time` and every participant's availability. Courts are not considered."""
        earliest = time
        for team_id in team_ids:
            state = self.teams.get(team_id)
            if state is not None and state.available_at > earliest:
                earliest = state.available_at
        return earliest

    def find_court(self, time: datetime) -> Optional[Tuple[CourtState, datetime]]:
        """
        Pick a court for a match placed at `time`.

        Returns the first idle court free at `time`, otherwise the court that
        frees up first together with the moment it does.
        """
        earliest: Optional[CourtState] = None
        for court in self.courts:
            if court.current_match is None and court.available_at <= time:
                return court, time
            if earliest is None or court.available_at < earliest.available_at:
                earliest = court

        if earliest is None:
            return None
        return earliest, earliest.available_at

    def occupy(self, court: CourtState, team_ids: Iterable[Identity], match_id: Identity, end_time: datetime):
        court.current_match = match_id
        court.available_at = end_time
        for team_id in team_ids:
            # available_at is set when the match ends
            self.ensure_team(team_id).current_match = match_id

    def release(
        self,
        court_id: Identity,
        team_ids: Iterable[Identity],
        end_time: datetime,
        rest_time: float,
        court_setup_time: float
    ):
        court = self._courts_by_id.get(court_id)
        if court is not None:
            court.current_match = None
            court.available_at = end_time + minutes(court_setup_time)

        rest_end = end_time + minutes(rest_time)
        for team_id in team_ids:
            state = self.ensure_team(team_id)
            state.current_match = None
            state.available_at = rest_end

    def paint(self, completed: CompletedScheduledMatch, rest_time: float, court_setup_time: float):
        """Push court and team availability past a match that was already played."""
        court = self._courts_by_id.get(completed.court_id)
        if court is None:
            logger.warning(
                "Completed match %s was played on unknown court %s; court state left unchanged",
                completed.match_id, completed.court_id
            )
        else:
            court_free = completed.actual_end_time + minutes(court_setup_time)
            if court_free > court.available_at:
                court.available_at = court_free

        rest_end = completed.actual_end_time + minutes(rest_time)
        for team_id in completed.participant_ids:
            state = self.ensure_team(team_id)
            if rest_end > state.available_at:
                state.available_at = rest_end

    def next_availability_after(self, time: datetime) -> Optional[datetime]:
        """Earliest moment after `time` at which any team or court frees up, or None."""
        candidates = [
            state.available_at for state in self.teams.values() if state.available_at > time
        ]
        candidates.extend(court.available_at for court in self.courts if court.available_at > time)
        return min(candidates) if candidates else None
