"""
Tests for team and court availability tracking.
"""

from conftest import START, at, make_courts
from tournament_scheduler.models import CompletedScheduledMatch
from tournament_scheduler.services.resources import ResourcePool


def _completed(match_id, court_id, end_minute, team1="A", team2="B"):
    return CompletedScheduledMatch(
        match_id=match_id, court_id=court_id,
        actual_start_time=at(end_minute - 30), actual_end_time=at(end_minute),
        team1_id=team1, team2_id=team2
    )


def test_untracked_team_is_available():
    pool = ResourcePool(make_courts(1), START)

    assert pool.team_available("A", START)
    assert pool.teams == {}


def test_find_court_prefers_first_idle_court():
    pool = ResourcePool(make_courts(2), START)

    court, time = pool.find_court(START)

    assert court.court_id == "C1"
    assert time == START


def test_find_court_falls_back_to_earliest_court():
    pool = ResourcePool(make_courts(2), START)
    pool.occupy(pool.get_court("C1"), ["A", "B"], "M1", at(40))
    pool.occupy(pool.get_court("C2"), ["C", "D"], "M2", at(30))

    court, time = pool.find_court(at(10))

    assert court.court_id == "C2"
    assert time == at(30)


def test_occupy_and_release():
    pool = ResourcePool(make_courts(1), START)
    pool.occupy(pool.get_court("C1"), ["A", "B"], "M1", at(30))

    assert not pool.team_available("A", at(10))
    assert not pool.court_available("C1", at(10))

    pool.release("C1", ["A", "B"], at(30), rest_time=15, court_setup_time=5)

    assert pool.court_available("C1", at(35))
    assert not pool.team_available("A", at(40))
    assert pool.teams_available(["A", "B"], at(45))


def test_earliest_start_ignores_courts():
    pool = ResourcePool(make_courts(1), START)
    pool.release("C1", ["A"], at(30), rest_time=15, court_setup_time=60)

    assert pool.earliest_start(["A", "B"], START) == at(45)
    assert pool.earliest_start(["B"], at(5)) == at(5)


def test_paint_only_moves_availability_forward():
    pool = ResourcePool(make_courts(1), START)

    pool.paint(_completed("M1", "C1", 50), rest_time=15, court_setup_time=0)
    pool.paint(_completed("M2", "C1", 40), rest_time=15, court_setup_time=0)

    assert pool.teams["A"].available_at == at(65)
    assert pool.get_court("C1").available_at == at(50)


def test_paint_skips_unknown_court():
    pool = ResourcePool(make_courts(1), START)

    pool.paint(_completed("M1", "C9", 50), rest_time=0, court_setup_time=0)

    assert pool.get_court("C1").available_at == START
    assert pool.teams["A"].available_at == at(50)


def test_next_availability_after_is_strict():
    pool = ResourcePool(make_courts(2), START)
    pool.release("C1", ["A"], at(30), rest_time=15, court_setup_time=0)

    assert pool.next_availability_after(START) == at(30)
    assert pool.next_availability_after(at(30)) == at(45)
    assert pool.next_availability_after(at(45)) is None
