"""
Match scheduler driven by a discrete-event simulation.

Implements a serial schedule-generation scheme (RCPSP family): matches whose
dependencies are satisfied wait in a priority queue and are placed one at a
time, at the earliest simulated instant where both teams have rested and a
court is free. Placement is feasibility-first; nothing here tries to minimise
the total duration of the tournament.

Handles:
- Sequential dependencies between matches (bracket DAG)
- Team non-ubiquity and mandatory rest time
- Court turnaround (setup) time
- Live rescheduling from already completed matches
"""

import heapq
import itertools
from collections import namedtuple
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from tournament_scheduler.core.exceptions import (
    ConfigurationError, FeasibilityError, FeasibilityCause
)
from tournament_scheduler.core.logging_config import get_logger
from tournament_scheduler.models import (
    Court, Match, MatchTask, SchedulerConfig, RescheduleConfig,
    ScheduledMatch, ScheduleResult, ScheduleSummary, Identity
)
from tournament_scheduler.services.dependency_graph import DependencyGraph, ReadyQueue
from tournament_scheduler.services.resources import ResourcePool, is_aware, minutes

logger = get_logger(__name__)


CompletionEvent = namedtuple("CompletionEvent", ["time", "match_id", "court_id", "team_ids"])


class TournamentScheduler:
    """
    Places every match of a tournament on a court and a time.

    One instance serves exactly one scheduling call: all team, court and
    queue state is private to it.
    """

    def __init__(self, matches: Sequence[Match], courts: Sequence[Court], config: SchedulerConfig):
        """
        Initialize the scheduler with matches, courts, and rules.

        Args:
            matches: Matches to place (dependencies reference other match ids)
            courts: Interchangeable courts available for play
            config: Rest time, court setup time and tournament start

        Raises:
            ConfigurationError: If the input cannot be scheduled at all
        """
        self._check_inputs(matches, courts, config)

        self.all_matches = list(matches)
        self.matches = self._pending_matches(self.all_matches)
        self.courts = list(courts)
        self.config = config
        self.rest_time = config.rest_time
        self.court_setup_time = config.court_setup_time or 0
        self.start_time = self._resolve_start_time(config)

        self.placed: List[ScheduledMatch] = []
        self.ready = ReadyQueue()
        self._events: List[tuple] = []
        self._sequence = itertools.count()

        self.resources = self._build_resources()
        self.graph = self._build_graph()

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _check_inputs(self, matches: Sequence[Match], courts: Sequence[Court], config: SchedulerConfig):
        if not matches:
            raise ConfigurationError("No matches to schedule")
        if not courts:
            raise ConfigurationError("No courts available")
        if config.rest_time is None or config.rest_time < 0:
            raise ConfigurationError(f"Rest time must be zero or positive, got {config.rest_time}")
        if config.court_setup_time is not None and config.court_setup_time < 0:
            raise ConfigurationError(
                f"Court setup time must be zero or positive, got {config.court_setup_time}"
            )

        seen = set()
        for match in matches:
            if match.id in seen:
                raise ConfigurationError(f"Duplicate match id: {match.id}")
            seen.add(match.id)
            if match.duration is None or match.duration <= 0:
                raise ConfigurationError(f"Match {match.id} must have a positive duration, got {match.duration}")

        court_ids = [court.id for court in courts]
        if len(set(court_ids)) != len(court_ids):
            raise ConfigurationError("Duplicate court ids in court list")

        times = [(name, value) for name, value in self._input_times(config) if value is not None]
        aware = [name for name, value in times if is_aware(value)]
        if aware and len(aware) != len(times):
            naive = [name for name, value in times if not is_aware(value)]
            raise ConfigurationError(
                "Cannot mix timezone-aware and naive times: "
                f"aware {', '.join(aware)}; naive {', '.join(naive)}"
            )

    def _input_times(self, config: SchedulerConfig) -> List[Tuple[str, Optional[datetime]]]:
        """Named input times that must all be naive or all be timezone-aware."""
        return [("start_time", config.start_time)]

    def _pending_matches(self, matches: List[Match]) -> List[Match]:
        return matches

    def _resolve_start_time(self, config: SchedulerConfig) -> datetime:
        return config.start_time or datetime.now()

    def _build_resources(self) -> ResourcePool:
        return ResourcePool(self.courts, self.start_time)

    def _build_graph(self) -> DependencyGraph:
        return DependencyGraph(self.matches)

    @property
    def clock_start(self) -> datetime:
        return self.start_time

    @property
    def start_floor(self) -> Optional[datetime]:
        """Earliest allowed start for any placement (None when unbounded)."""
        return None

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> ScheduleResult:
        """
        Run the simulation to completion.

        Returns:
            ScheduleResult ordered by start time

        Raises:
            FeasibilityError: If some matches can never be placed
        """
        logger.info(
            "Scheduling %d matches on %d courts (rest %s min, court setup %s min)",
            len(self.graph), len(self.courts), self.rest_time, self.court_setup_time
        )

        for task in self.graph.initial_ready():
            self.ready.enqueue(task)

        self._simulate()
        self._check_complete()

        result = self._build_result()
        logger.info(
            "Placed %d matches on %d courts, last match ends %s",
            result.summary.total_matches, result.summary.courts_used, result.summary.end_time
        )
        return result

    def _simulate(self):
        now = self.clock_start

        while self.ready or self._events:
            self._process_events(now)

            if self._place_next(now):
                continue  # Start over to keep priority order

            if not self.ready and not self._events:
                break

            next_time = self._next_time(now)
            if next_time is None:
                if self.ready:
                    raise self._feasibility_error("Scheduling deadlock detected")
                break
            now = next_time

    def _process_events(self, now: datetime):
        """Complete every match whose end time is at or before `now`."""
        while self._events and self._events[0][0] <= now:
            _, _, event = heapq.heappop(self._events)

            self.resources.release(
                event.court_id, event.team_ids, event.time,
                self.rest_time, self.court_setup_time
            )
            for task in self.graph.mark_completed(event.match_id):
                self.ready.enqueue(task)
                logger.debug("Match %s unlocked by completion of %s", task.match_id, event.match_id)

    def _place_next(self, now: datetime) -> bool:
        """Place the highest-priority match that can start at `now`. Returns True if one was placed."""
        for task in self.ready:
            team_ids = task.match.participant_ids
            if not self.resources.teams_available(team_ids, now):
                continue

            court_result = self.resources.find_court(now)
            if court_result is None:
                continue
            court, court_time = court_result

            start = max(court_time, self.resources.earliest_start(team_ids, now))
            floor = self.start_floor
            if floor is not None and floor > start:
                start = floor

            if start > now:
                continue

            self._place(task, court.court_id, start)
            return True

        return False

    def _place(self, task: MatchTask, court_id: Identity, start: datetime):
        match = task.match
        end = start + minutes(match.duration)
        team_ids = match.participant_ids

        self.placed.append(ScheduledMatch(
            match_id=match.id,
            court_id=court_id,
            start_time=start,
            end_time=end,
            round=match.round
        ))

        self.resources.occupy(self.resources.get_court(court_id), team_ids, match.id, end)
        heapq.heappush(
            self._events,
            (end, next(self._sequence), CompletionEvent(end, match.id, court_id, tuple(team_ids)))
        )

        self.ready.remove(match.id)
        self.graph.mark_placed(match.id)
        logger.debug("Placed %s on court %s at %s", match, court_id, start)

    def _next_time(self, now: datetime) -> Optional[datetime]:
        candidates = []
        if self._events:
            candidates.append(self._events[0][0])

        freed = self.resources.next_availability_after(now)
        if freed is not None:
            candidates.append(freed)

        floor = self.start_floor
        if floor is not None and floor > now:
            candidates.append(floor)

        return min(candidates) if candidates else None

    # ------------------------------------------------------------------
    # Result
    # ------------------------------------------------------------------

    def _check_complete(self):
        placed = self.graph.placed_count()
        total = len(self.graph)
        if placed != total:
            raise self._feasibility_error(
                f"Failed to schedule all matches. Scheduled: {placed}, Total: {total}"
            )

    def _feasibility_error(self, message: str) -> FeasibilityError:
        unplaced = [task.match_id for task in self.graph.unplaced()]
        dangling = {
            match_id: deps for match_id, deps in self.graph.dangling_references().items()
            if match_id in unplaced
        }
        cycle = self.graph.find_cycle()

        if dangling:
            cause = FeasibilityCause.DANGLING_DEPENDENCY
            details = "; ".join(
                f"{match_id} depends on unknown {', '.join(str(d) for d in deps)}"
                for match_id, deps in dangling.items()
            )
        elif cycle:
            cause = FeasibilityCause.CIRCULAR_DEPENDENCY
            details = "cycle " + " -> ".join(str(match_id) for match_id in cycle)
        else:
            cause = FeasibilityCause.DEADLOCK
            details = "no resource ever becomes available"

        logger.error("%s (%s)", message, details)
        return FeasibilityError(
            f"{message}. Cause: {cause.value} ({details})",
            placed=self.graph.placed_count(),
            total=len(self.graph),
            unplaced=unplaced,
            cause=cause
        )

    def _build_result(self) -> ScheduleResult:
        schedule = sorted(self.placed, key=lambda entry: entry.start_time)
        end_time = max((entry.end_time for entry in schedule), default=self.start_time)
        end_time = max(end_time, self.start_time)

        return ScheduleResult(
            schedule=schedule,
            summary=ScheduleSummary(
                total_matches=len(schedule),
                total_duration=(end_time - self.start_time).total_seconds() / 60,
                courts_used=len({entry.court_id for entry in schedule}),
                end_time=end_time
            )
        )


class LiveRescheduler(TournamentScheduler):
    """
    Re-plans the pending matches of a running tournament.

    Court and team availability is first painted from the matches already
    played, then the same placement loop runs from the current time. No match
    is ever placed before the current time.
    """

    def __init__(self, matches: Sequence[Match], courts: Sequence[Court], config: RescheduleConfig):
        if config.current_time is None:
            raise ConfigurationError("Reschedule requires the current time")

        self.current_time = config.current_time
        self.completed = list(config.completed_matches or [])
        self.completed_ids = {completed.match_id for completed in self.completed}

        known_ids = {match.id for match in matches}
        for completed in self.completed:
            if completed.match_id not in known_ids:
                logger.warning("Completed match %s is not part of the match list; ignored", completed.match_id)

        super().__init__(matches, courts, config)

    def _input_times(self, config: RescheduleConfig) -> List[Tuple[str, Optional[datetime]]]:
        times = super()._input_times(config)
        times.append(("current_time", config.current_time))
        for completed in self.completed:
            times.append((f"{completed.match_id}.actual_start_time", completed.actual_start_time))
            times.append((f"{completed.match_id}.actual_end_time", completed.actual_end_time))
        return times

    def _pending_matches(self, matches: List[Match]) -> List[Match]:
        # Only pending matches go through the placement loop
        return [match for match in matches if match.id not in self.completed_ids]

    def _resolve_start_time(self, config: RescheduleConfig) -> datetime:
        return config.start_time or config.current_time

    def _build_resources(self) -> ResourcePool:
        court_origin = self.config.start_time or self.current_time
        pool = ResourcePool(self.courts, origin=self.current_time, court_origin=court_origin)
        for completed in self.completed:
            pool.paint(completed, self.rest_time, self.court_setup_time)
        return pool

    def _build_graph(self) -> DependencyGraph:
        return DependencyGraph(self.matches, satisfied=self.completed_ids)

    @property
    def clock_start(self) -> datetime:
        return self.current_time

    @property
    def start_floor(self) -> Optional[datetime]:
        return self.current_time

    def run(self) -> ScheduleResult:
        logger.info(
            "Rescheduling from %s: %d completed, %d pending matches",
            self.current_time, len(self.all_matches) - len(self.matches), len(self.matches)
        )
        return super().run()

    def _build_result(self) -> ScheduleResult:
        schedule = sorted(self.placed, key=lambda entry: entry.start_time)

        ends = [entry.end_time for entry in schedule]
        ends.extend(completed.actual_end_time for completed in self.completed)
        end_time = max([self.current_time] + ends)

        return ScheduleResult(
            schedule=schedule,
            summary=ScheduleSummary(
                total_matches=len(schedule),
                total_duration=(end_time - self.start_time).total_seconds() / 60,
                courts_used=len({entry.court_id for entry in schedule}),
                end_time=end_time
            )
        )


def schedule_matches(matches: Sequence[Match], courts: Sequence[Court], config: SchedulerConfig) -> ScheduleResult:
    """
    Schedule matches respecting dependencies, rest time and court availability.

    Args:
        matches: List of matches to schedule (with dependencies)
        courts: List of available courts
        config: Rest time, start time and court setup time

    Returns:
        Schedule with assigned court and times for every match

    Raises:
        ConfigurationError: No matches, no courts, or malformed input
        FeasibilityError: Circular or dangling dependency, or deadlock
    """
    return TournamentScheduler(matches, courts, config).run()


def reschedule_matches(matches: Sequence[Match], courts: Sequence[Court], config: RescheduleConfig) -> ScheduleResult:
    """
    Live reschedule: re-place the pending matches after some have been played.

    Args:
        matches: All matches of the tournament (completed and pending)
        courts: Available courts
        config: Reschedule configuration with current time and completed matches

    Returns:
        Schedule of the pending matches only, none starting before the current time
    """
    return LiveRescheduler(matches, courts, config).run()
