"""
Calculate summary statistics from the contribution calendar.
"""

from typing import Sequence

from gitdash.models import Contribution, Stats


def compute_stats(contributions: Sequence[Contribution]) -> Stats:
    """
    Calculate summary statistics in a single pass.

    Args:
        contributions: Daily contributions, one entry per day

    Returns:
        Stats with:
        - total: Sum of all contributions
        - active_days: Days with at least one contribution
        - total_days: Days covered by the data
        - average_per_day: total // total_days (0 for no data)
        - max_day: Highest single-day count
    """
    stats = Stats(total_days=len(contributions))

    for contribution in contributions:
        stats.total += contribution.count
        if contribution.count > 0:
            stats.active_days += 1
        stats.max_day = max(stats.max_day, contribution.count)

    if stats.total_days > 0:
        stats.average_per_day = stats.total // stats.total_days

    return stats
