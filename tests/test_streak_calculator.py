"""
Tests for streak calculation.
"""

from datetime import date, timedelta

import pytest

from gitdash.models import Contribution
from gitdash.streak_calculator import (
    calculate_current_streak,
    calculate_longest_streak,
    calculate_streak,
)

TODAY = date(2026, 1, 20)


def days(*counts, end=TODAY):
    """Build consecutive contributions ending on `end`."""
    start = end - timedelta(days=len(counts) - 1)
    return [Contribution(start + timedelta(days=i), count) for i, count in enumerate(counts)]


def test_zero_day_breaks_continuity():
    """A zero-count day between active days ends the current streak."""
    result = calculate_streak(days(3, 0, 5), today=TODAY)

    assert result.current == 1
    assert result.longest == 1
    assert result.streak_active is True


def test_fourteen_consecutive_days():
    """Test 14 active days ending today."""
    result = calculate_streak(days(*[2] * 14), today=TODAY)

    assert result.current == 14
    assert result.longest == 14
    assert result.last_active_date == TODAY


def test_no_contributions_returns_zero_streak():
    """Test with no data returns zero streak."""
    result = calculate_streak([], today=TODAY)

    assert result.current == 0
    assert result.longest == 0
    assert result.streak_active is False
    assert result.last_active_date is None


def test_grace_when_today_is_zero():
    """A streak ending yesterday stays alive while today has no contributions yet."""
    result = calculate_streak(days(1, 1, 1, 0), today=TODAY)

    assert result.current == 3
    assert result.streak_active is False
    assert result.last_active_date == TODAY - timedelta(days=1)


def test_grace_when_today_is_missing():
    """Today not yet in the data counts the same as a zero day."""
    contributions = days(4, 2, end=TODAY - timedelta(days=1))

    assert calculate_current_streak(contributions, today=TODAY) == 2


def test_streak_broken_two_days_ago():
    """Test that missing both today and yesterday resets the streak."""
    contributions = days(5, 5, 0, 0)

    result = calculate_streak(contributions, today=TODAY)

    assert result.current == 0
    assert result.longest == 2


def test_stale_data_gives_zero_current():
    """Test data that ends well before today."""
    contributions = days(1, 1, 1, end=TODAY - timedelta(days=10))

    result = calculate_streak(contributions, today=TODAY)

    assert result.current == 0
    assert result.longest == 3


def test_gap_in_dates_breaks_streak():
    """Test that a missing date breaks the streak."""
    contributions = [
        Contribution(date(2026, 1, 16), 1),
        Contribution(date(2026, 1, 17), 1),
        # Gap: 2026-01-18 missing
        Contribution(date(2026, 1, 19), 1),
        Contribution(date(2026, 1, 20), 1),
    ]

    result = calculate_streak(contributions, today=TODAY)

    assert result.current == 2
    assert result.longest == 2


def test_future_entries_are_ignored_for_current():
    """Entries dated after today do not count towards the current streak."""
    contributions = days(1, 1, 6, end=TODAY + timedelta(days=1))

    result = calculate_streak(contributions, today=TODAY)

    assert result.current == 2
    assert result.last_active_date == TODAY
    assert result.streak_active is True


def test_longest_streak_in_the_past():
    """Test longest streak that is not the current one."""
    contributions = days(1, 1, 1, 1, 1, 0, 0, 1, 1)

    result = calculate_streak(contributions, today=TODAY)

    assert result.current == 2
    assert result.longest == 5


def test_longest_streak_only():
    assert calculate_longest_streak(days(0, 1, 1, 0, 1)) == 2
    assert calculate_longest_streak(days(0, 0, 0)) == 0
    assert calculate_longest_streak([]) == 0


@pytest.mark.parametrize(
    "counts",
    [
        (1,),
        (0, 1, 1),
        (1, 1, 0),
        (3, 0, 2, 2, 2),
        (1, 1, 1, 1, 0, 1, 1),
    ],
)
def test_longest_is_at_least_current(counts):
    result = calculate_streak(days(*counts), today=TODAY)

    assert result.longest >= result.current


def test_today_defaults_to_local_date():
    """Without an override, today's local date is used."""
    contributions = days(1, 1, end=date.today())

    assert calculate_current_streak(contributions) == 2
