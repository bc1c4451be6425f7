"""Shared fixtures for the scheduler test suite."""

from datetime import datetime, timedelta

import pytest

from tournament_scheduler.models import Court, Match, SchedulerConfig

START = datetime(2025, 6, 14, 9, 0)


def at(minutes_after_start: float) -> datetime:
    """Wall-clock time `minutes_after_start` minutes after the tournament start."""
    return START + timedelta(minutes=minutes_after_start)


def make_courts(count: int):
    return [Court(id=f"C{i}", name=f"Court {i}") for i in range(1, count + 1)]


@pytest.fixture
def start():
    return START


@pytest.fixture
def two_courts():
    return make_courts(2)


@pytest.fixture
def one_court():
    return make_courts(1)


@pytest.fixture
def disjoint_matches():
    return [
        Match(id="M1", team1="A", team2="B", round=1, duration=30),
        Match(id="M2", team1="C", team2="D", round=1, duration=30),
    ]


@pytest.fixture
def no_rest():
    return SchedulerConfig(rest_time=0, start_time=START)
