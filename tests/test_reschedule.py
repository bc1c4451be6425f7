"""
Tests for live rescheduling from completed matches.
"""

from datetime import timezone

import pytest

from conftest import START, at, make_courts
from tournament_scheduler.core.exceptions import ConfigurationError, FeasibilityError, FeasibilityCause
from tournament_scheduler.models import CompletedScheduledMatch, Match, RescheduleConfig
from tournament_scheduler.services.scheduler import reschedule_matches
from tournament_scheduler.services.validator import validate_schedule


def _completed(match_id, court_id, start_minute, end_minute, team1, team2):
    return CompletedScheduledMatch(
        match_id=match_id,
        court_id=court_id,
        actual_start_time=at(start_minute),
        actual_end_time=at(end_minute),
        team1_id=team1,
        team2_id=team2
    )


@pytest.fixture
def semifinal_matches():
    return [
        Match(id="M1", team1="A", team2="B", round=1, duration=30),
        Match(id="M2", team1="C", team2="D", round=1, duration=30),
        Match(id="M3", team1="A", team2="C", round=2, duration=30, dependencies=["M1", "M2"]),
    ]


@pytest.fixture
def late_and_early_config():
    # M1 ran 3 minutes long, M2 finished 5 minutes early
    return RescheduleConfig(
        rest_time=15,
        start_time=START,
        current_time=at(35),
        completed_matches=[
            _completed("M1", "C1", 0, 33, "A", "B"),
            _completed("M2", "C2", 0, 25, "C", "D"),
        ]
    )


def test_dependent_match_follows_actual_completions(semifinal_matches, late_and_early_config):
    result = reschedule_matches(semifinal_matches, make_courts(2), late_and_early_config)

    placed = result.by_match()
    # Later actual end (M1 at +33) plus 15 minutes rest, not the planned +45
    assert placed["M3"].start_time == at(48)
    print("[PASS] Dependent match reflects actual completion times")


def test_completed_matches_are_not_returned(semifinal_matches, late_and_early_config):
    result = reschedule_matches(semifinal_matches, make_courts(2), late_and_early_config)

    assert [entry.match_id for entry in result] == ["M3"]
    assert result.summary.total_matches == 1


def test_reschedule_summary_covers_completed_matches(semifinal_matches, late_and_early_config):
    summary = reschedule_matches(semifinal_matches, make_courts(2), late_and_early_config).summary

    assert summary.end_time == at(78)
    assert summary.total_duration == 78
    assert summary.courts_used == 1


def test_no_match_starts_before_current_time(two_courts):
    matches = [
        Match(id="M1", team1="A", team2="B"),
        Match(id="M2", team1="C", team2="D"),
    ]
    config = RescheduleConfig(
        rest_time=15,
        start_time=START,
        current_time=at(60),
        completed_matches=[_completed("M1", "C1", 0, 10, "A", "B")]
    )

    placed = reschedule_matches(matches, two_courts, config).by_match()

    assert placed["M2"].start_time == at(60)


def test_painted_rest_time_reaches_past_current_time(two_courts):
    matches = [
        Match(id="M1", team1="A", team2="B"),
        Match(id="M2", team1="A", team2="C"),
    ]
    config = RescheduleConfig(
        rest_time=15,
        start_time=START,
        current_time=at(60),
        completed_matches=[_completed("M1", "C1", 20, 55, "A", "B")]
    )

    placed = reschedule_matches(matches, two_courts, config).by_match()

    assert placed["M2"].start_time == at(70)


def test_painted_court_setup_is_respected(one_court):
    matches = [
        Match(id="M1", team1="A", team2="B"),
        Match(id="M2", team1="C", team2="D"),
    ]
    config = RescheduleConfig(
        rest_time=0,
        start_time=START,
        court_setup_time=10,
        current_time=at(32),
        completed_matches=[_completed("M1", "C1", 0, 30, "A", "B")]
    )

    placed = reschedule_matches(matches, one_court, config).by_match()

    assert placed["M2"].start_time == at(40)


def test_mixed_completed_and_pending_dependencies(two_courts):
    matches = [
        Match(id="M1", team1="A", team2="B"),
        Match(id="M2", team1="C", team2="D"),
        Match(id="M3", team1="A", team2="C", round=2, dependencies=["M1", "M2"]),
    ]
    config = RescheduleConfig(
        rest_time=15,
        start_time=START,
        current_time=at(60),
        completed_matches=[_completed("M1", "C1", 0, 30, "A", "B")]
    )

    result = reschedule_matches(matches, two_courts, config)
    placed = result.by_match()

    assert set(placed) == {"M2", "M3"}
    assert placed["M2"].start_time == at(60)
    # Waits for the pending dependency only, then C's rest
    assert placed["M3"].start_time == at(105)


def test_all_matches_completed_returns_empty_schedule(two_courts):
    matches = [Match(id="M1", team1="A", team2="B")]
    config = RescheduleConfig(
        rest_time=15,
        start_time=START,
        current_time=at(60),
        completed_matches=[_completed("M1", "C1", 0, 30, "A", "B")]
    )

    result = reschedule_matches(matches, two_courts, config)

    assert len(result) == 0
    assert result.summary.end_time == at(60)
    assert result.summary.courts_used == 0


def test_unknown_completed_match_is_ignored(two_courts):
    matches = [Match(id="M1", team1="A", team2="B")]
    config = RescheduleConfig(
        rest_time=0,
        start_time=START,
        current_time=at(10),
        completed_matches=[_completed("GHOST", "C9", 0, 5, "X", "Y")]
    )

    placed = reschedule_matches(matches, two_courts, config).by_match()

    assert placed["M1"].start_time == at(10)


def test_current_time_is_required(semifinal_matches, two_courts):
    config = RescheduleConfig(rest_time=15, start_time=START)

    with pytest.raises(ConfigurationError):
        reschedule_matches(semifinal_matches, two_courts, config)


def test_missing_start_time_measures_from_current_time(two_courts):
    matches = [Match(id="M1", team1="A", team2="B", duration=30)]
    config = RescheduleConfig(rest_time=0, current_time=at(60))

    summary = reschedule_matches(matches, two_courts, config).summary

    assert summary.end_time == at(90)
    assert summary.total_duration == 30


def test_dangling_dependency_still_fails_in_live_mode(two_courts):
    matches = [
        Match(id="M1", team1="A", team2="B"),
        Match(id="M2", team1="C", team2="D", dependencies=["M1", "GHOST"]),
    ]
    config = RescheduleConfig(
        rest_time=0,
        start_time=START,
        current_time=at(40),
        completed_matches=[_completed("M1", "C1", 0, 30, "A", "B")]
    )

    with pytest.raises(FeasibilityError) as exc_info:
        reschedule_matches(matches, two_courts, config)

    assert exc_info.value.cause == FeasibilityCause.DANGLING_DEPENDENCY
    assert exc_info.value.total == 1


def test_reschedule_output_validates_against_completed_matches(semifinal_matches, late_and_early_config):
    result = reschedule_matches(semifinal_matches, make_courts(2), late_and_early_config)

    validation = validate_schedule(
        result, semifinal_matches, late_and_early_config,
        completed_matches=late_and_early_config.completed_matches
    )

    assert validation.is_valid, validation.get_summary()


def test_mixed_naive_and_aware_times_are_a_configuration_error(two_courts):
    matches = [
        Match(id="M1", team1="A", team2="B"),
        Match(id="M2", team1="A", team2="C"),
    ]
    config = RescheduleConfig(
        rest_time=15,
        current_time=at(60),
        completed_matches=[CompletedScheduledMatch(
            match_id="M1", court_id="C1",
            actual_start_time=at(0).replace(tzinfo=timezone.utc),
            actual_end_time=at(30).replace(tzinfo=timezone.utc),
            team1_id="A", team2_id="B"
        )]
    )

    with pytest.raises(ConfigurationError) as exc_info:
        reschedule_matches(matches, two_courts, config)

    assert "current_time" in str(exc_info.value)
    assert "M1.actual_end_time" in str(exc_info.value)


def test_all_aware_times_reschedule(two_courts):
    utc_start = START.replace(tzinfo=timezone.utc)
    matches = [
        Match(id="M1", team1="A", team2="B"),
        Match(id="M2", team1="A", team2="C"),
    ]
    config = RescheduleConfig(
        rest_time=15,
        current_time=at(60).replace(tzinfo=timezone.utc),
        completed_matches=[CompletedScheduledMatch(
            match_id="M1", court_id="C1",
            actual_start_time=utc_start, actual_end_time=at(55).replace(tzinfo=timezone.utc),
            team1_id="A", team2_id="B"
        )]
    )

    placed = reschedule_matches(matches, two_courts, config).by_match()

    assert placed["M2"].start_time == at(70).replace(tzinfo=timezone.utc)
