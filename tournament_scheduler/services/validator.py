"""
Schedule validation module for the Tournament Match Scheduler.
Re-checks a produced schedule against every hard constraint, independently
of the placement loop.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from tournament_scheduler.core.logging_config import get_logger
from tournament_scheduler.services.resources import is_aware
from tournament_scheduler.models import (
    Match, ScheduledMatch, ScheduleResult, SchedulerConfig, CompletedScheduledMatch,
    SchedulingConstraint, ScheduleValidationResult, Identity
)

logger = get_logger(__name__)

# (start, end, match_id) occupancy interval
Interval = Tuple[object, object, Identity]


class ScheduleValidator:
    """
    Validates match schedules against all hard constraints.
    Never raises: every violation found is reported in the result.
    """

    def __init__(self, config: SchedulerConfig):
        """
        Args:
            config: Rest time (and optionally court setup time) to check against
        """
        self.rest_time = config.rest_time or 0
        self.court_setup_time = config.court_setup_time or 0

    def validate_schedule(
        self,
        schedule: Iterable[ScheduledMatch],
        matches: Sequence[Match],
        completed_matches: Optional[Iterable[CompletedScheduledMatch]] = None
    ) -> ScheduleValidationResult:
        """
        Validate a schedule against the match list.

        Args:
            schedule: Scheduled matches (a ScheduleResult is accepted too)
            matches: The matches the schedule was produced from
            completed_matches: Matches already played; they count as scheduled
                entries with their actual times and teams

        Returns:
            ScheduleValidationResult with all violations found
        """
        result = ScheduleValidationResult(is_valid=True)
        if isinstance(schedule, ScheduleResult):
            schedule = schedule.schedule
        entries = list(schedule)
        completed = list(completed_matches or [])

        match_map = {match.id: match for match in matches}

        # match_id -> (start, end, court, team ids)
        occupancy = self._collect_entries(entries, completed, match_map, result)

        # Time checks only run when every start and end can be compared
        if self._check_time_zones(occupancy, result):
            self._check_team_double_booking(occupancy, result)
            self._check_rest_time(occupancy, result)
            self._check_court_conflicts(occupancy, result)
            self._check_dependencies(occupancy, match_map, result)

        if result.is_valid:
            logger.info("Schedule of %d matches is valid", len(entries))
        else:
            logger.info("Schedule has %d violations", len(result.violations))
        return result

    def _collect_entries(
        self,
        entries: List[ScheduledMatch],
        completed: List[CompletedScheduledMatch],
        match_map: Dict[Identity, Match],
        result: ScheduleValidationResult
    ) -> Dict[Identity, tuple]:
        occupancy: Dict[Identity, tuple] = {}

        for done in completed:
            occupancy[done.match_id] = (
                done.actual_start_time, done.actual_end_time, done.court_id, done.participant_ids
            )

        for entry in entries:
            match = match_map.get(entry.match_id)
            if match is None:
                result.add_violation(SchedulingConstraint(
                    constraint_type="unknown_match",
                    description=f"Scheduled match {entry.match_id} is not in the match list",
                    affected_matches=[entry.match_id]
                ))
                continue

            if entry.match_id in occupancy:
                result.add_violation(SchedulingConstraint(
                    constraint_type="duplicate_entry",
                    description=f"Match {entry.match_id} is scheduled more than once",
                    affected_matches=[entry.match_id]
                ))
                continue

            occupancy[entry.match_id] = (
                entry.start_time, entry.end_time, entry.court_id, match.participant_ids
            )

        return occupancy

    def _check_time_zones(self, occupancy: Dict[Identity, tuple], result: ScheduleValidationResult) -> bool:
        """Check that all times are either naive or timezone-aware. Returns True when they are."""
        aware, naive = [], []
        for match_id, (start, end, _court, _teams) in occupancy.items():
            kinds = {is_aware(start), is_aware(end)}
            if True in kinds:
                aware.append(match_id)
            if False in kinds:
                naive.append(match_id)

        if aware and naive:
            # Report the smaller group as the offenders
            offenders = aware if len(aware) <= len(naive) else naive
            result.add_violation(SchedulingConstraint(
                constraint_type="invalid_time",
                description=(
                    "Schedule mixes timezone-aware and naive times; "
                    f"{'aware' if offenders is aware else 'naive'} times in "
                    f"{', '.join(str(match_id) for match_id in offenders)}"
                ),
                affected_matches=list(offenders)
            ))
            return False
        return True

    def _team_intervals(self, occupancy: Dict[Identity, tuple]) -> Dict[Identity, List[Interval]]:
        teams: Dict[Identity, List[Interval]] = defaultdict(list)
        for match_id, (start, end, _court, team_ids) in occupancy.items():
            for team_id in team_ids:
                teams[team_id].append((start, end, match_id))
        return teams

    def _check_team_double_booking(self, occupancy: Dict[Identity, tuple], result: ScheduleValidationResult):
        """Check that no team plays two matches at the same time."""
        for team_id, intervals in self._team_intervals(occupancy).items():
            for i, (start, end, match_id) in enumerate(intervals):
                for other_start, other_end, other_id in intervals[:i]:
                    if start < other_end and end > other_start:
                        result.add_violation(SchedulingConstraint(
                            constraint_type="team_double_booking",
                            description=(
                                f"Team {team_id} plays multiple matches simultaneously: "
                                f"{match_id} and {other_id}"
                            ),
                            affected_teams=[team_id],
                            affected_matches=[other_id, match_id]
                        ))

    def _check_rest_time(self, occupancy: Dict[Identity, tuple], result: ScheduleValidationResult):
        """Check the rest gap between consecutive matches of each team."""
        for team_id, intervals in self._team_intervals(occupancy).items():
            ordered = sorted(intervals, key=lambda interval: interval[0])
            for previous, current in zip(ordered, ordered[1:]):
                gap = (current[0] - previous[1]).total_seconds() / 60
                if gap < self.rest_time:
                    result.add_violation(SchedulingConstraint(
                        constraint_type="insufficient_rest",
                        description=(
                            f"Team {team_id} has insufficient rest between matches "
                            f"{previous[2]} and {current[2]}: "
                            f"{gap:.1f} minutes < {self.rest_time} minutes required"
                        ),
                        affected_teams=[team_id],
                        affected_matches=[previous[2], current[2]]
                    ))

    def _check_court_conflicts(self, occupancy: Dict[Identity, tuple], result: ScheduleValidationResult):
        """Check for court double-booking and missing court setup time."""
        courts: Dict[Identity, List[Interval]] = defaultdict(list)
        for match_id, (start, end, court_id, _teams) in occupancy.items():
            courts[court_id].append((start, end, match_id))

        for court_id, intervals in courts.items():
            ordered = sorted(intervals, key=lambda interval: interval[0])
            for previous, current in zip(ordered, ordered[1:]):
                gap = (current[0] - previous[1]).total_seconds() / 60
                if gap < 0:
                    result.add_violation(SchedulingConstraint(
                        constraint_type="court_double_booking",
                        description=(
                            f"Court {court_id} hosts overlapping matches {previous[2]} and {current[2]}"
                        ),
                        affected_matches=[previous[2], current[2]]
                    ))
                elif gap < self.court_setup_time:
                    result.add_violation(SchedulingConstraint(
                        constraint_type="insufficient_court_setup",
                        description=(
                            f"Court {court_id} has {gap:.1f} minutes between {previous[2]} and "
                            f"{current[2]} < {self.court_setup_time} minutes setup required"
                        ),
                        affected_matches=[previous[2], current[2]]
                    ))

    def _check_dependencies(
        self,
        occupancy: Dict[Identity, tuple],
        match_map: Dict[Identity, Match],
        result: ScheduleValidationResult
    ):
        """Check that every dependency is scheduled and ends before its dependent starts."""
        for match in match_map.values():
            scheduled = occupancy.get(match.id)
            if scheduled is None:
                continue

            for dep_id in match.dependencies or []:
                dep = occupancy.get(dep_id)
                if dep is None:
                    result.add_violation(SchedulingConstraint(
                        constraint_type="missing_dependency",
                        description=f"Match {match.id} depends on {dep_id} which is not scheduled",
                        affected_matches=[match.id, dep_id]
                    ))
                    continue

                if scheduled[0] < dep[1]:
                    result.add_violation(SchedulingConstraint(
                        constraint_type="dependency_order",
                        description=(
                            f"Match {match.id} starts before its dependency {dep_id} ends: "
                            f"{scheduled[0].isoformat()} < {dep[1].isoformat()}"
                        ),
                        affected_matches=[match.id, dep_id]
                    ))

    def generate_schedule_report(self, result: ScheduleResult) -> str:
        """
        Generate a human-readable report of the schedule, grouped by court.

        Args:
            result: The schedule to report on

        Returns:
            Formatted report string
        """
        lines = []
        lines.append("=" * 60)
        lines.append("TOURNAMENT SCHEDULE REPORT")
        lines.append("=" * 60)

        summary = result.summary
        if summary is not None:
            lines.append(f"Total Matches: {summary.total_matches}")
            lines.append(f"Courts Used: {summary.courts_used}")
            lines.append(f"Total Duration: {summary.total_duration:.0f} minutes")
            lines.append(f"Ends At: {summary.end_time:%Y-%m-%d %H:%M}")

        by_court: Dict[Identity, List[ScheduledMatch]] = defaultdict(list)
        for entry in result.schedule:
            by_court[entry.court_id].append(entry)

        for court_id in sorted(by_court, key=str):
            lines.append("")
            lines.append(f"Court {court_id}:")
            for entry in by_court[court_id]:
                lines.append(
                    f"  {entry.start_time:%H:%M}-{entry.end_time:%H:%M}  "
                    f"{entry.match_id} (round {entry.round})"
                )

        lines.append("=" * 60)
        return "\n".join(lines)


def validate_schedule(
    schedule: Iterable[ScheduledMatch],
    matches: Sequence[Match],
    config: SchedulerConfig,
    completed_matches: Optional[Iterable[CompletedScheduledMatch]] = None
) -> ScheduleValidationResult:
    """Validate a schedule against the hard constraints. Never raises."""
    return ScheduleValidator(config).validate_schedule(schedule, matches, completed_matches)
