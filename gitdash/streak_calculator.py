"""
Calculate contribution streaks from the daily contribution calendar.
"""

from datetime import date, timedelta
from typing import Optional, Sequence

from gitdash.models import Contribution, StreakInfo

ONE_DAY = timedelta(days=1)


def calculate_streak(
    contributions: Sequence[Contribution], today: Optional[date] = None
) -> StreakInfo:
    """
    Calculate streak information from daily contributions.

    Args:
        contributions: Daily contributions in non-decreasing date order,
            one entry per day
        today: Override today's date for testing. Defaults to the local date.

    Returns:
        StreakInfo with:
        - current: Consecutive active days ending today (or yesterday)
        - longest: Longest run of consecutive active days in the data
        - streak_active: Whether there are contributions today
        - last_active_date: Most recent date with contributions (or None)
    """
    if today is None:
        today = date.today()

    if not contributions:
        return StreakInfo()

    current = calculate_current_streak(contributions, today=today)
    longest = calculate_longest_streak(contributions)

    last_active_date = None
    for contribution in reversed(contributions):
        if contribution.count > 0 and contribution.date <= today:
            last_active_date = contribution.date
            break

    return StreakInfo(
        current=current,
        # Longest streak should be at least as long as current streak
        longest=max(longest, current),
        streak_active=last_active_date == today,
        last_active_date=last_active_date,
    )


def calculate_current_streak(
    contributions: Sequence[Contribution], today: Optional[date] = None
) -> int:
    """
    Count consecutive active days walking backwards from today.

    A day without contributions yet does not break the streak: if today is
    missing or zero, counting starts from yesterday instead. Entries dated
    after today are ignored.

    Args:
        contributions: Daily contributions in non-decreasing date order
        today: Override today's date for testing. Defaults to the local date.

    Returns:
        Current streak count
    """
    if not contributions:
        return 0

    if today is None:
        today = date.today()

    streak = 0
    expected = today

    for contribution in reversed(contributions):
        contribution_date = contribution.date

        if contribution_date > expected:
            continue

        if contribution_date == expected:
            if contribution.count > 0:
                streak += 1
                expected -= ONE_DAY
                continue
            if streak == 0 and expected == today:
                # Nothing yet today, keep counting from yesterday
                expected = today - ONE_DAY
                continue
            break

        # Gap before the expected date
        if streak == 0 and expected == today:
            expected = today - ONE_DAY
            if contribution_date == expected and contribution.count > 0:
                streak += 1
                expected -= ONE_DAY
                continue
        break

    return streak


def calculate_longest_streak(contributions: Sequence[Contribution]) -> int:
    """
    Calculate the longest streak in the contribution history.

    Args:
        contributions: Daily contributions in non-decreasing date order

    Returns:
        Longest streak count
    """
    longest = 0
    current = 0
    prev_date = None

    for contribution in contributions:
        # A missing day breaks the run
        if current > 0 and contribution.date != prev_date + ONE_DAY:
            current = 0

        if contribution.count > 0:
            current += 1
            longest = max(longest, current)
            prev_date = contribution.date
        else:
            current = 0

    return longest
