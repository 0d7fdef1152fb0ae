"""
Contribution grid for the calendar heatmap.

Lays daily contribution counts out on a fixed 7 x 52 week-aligned grid and
maps counts to the 0-4 intensity levels used for coloring.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional, Sequence

from gitdash.models import Contribution

WEEKS_TO_DISPLAY = 52
DAYS_PER_WEEK = 7


def _empty_cells() -> list[list[int]]:
    return [[0] * WEEKS_TO_DISPLAY for _ in range(DAYS_PER_WEEK)]


@dataclass
class Grid:
    """
    Contribution counts indexed as cells[day_of_week][week].

    day_of_week runs 0 (Sunday) to 6 (Saturday). anchor is the Sunday that
    week 0 starts on, or None when the grid was built from no data.
    """

    cells: list[list[int]] = field(default_factory=_empty_cells)
    anchor: Optional[date] = None

    def count_at(self, day: date) -> int:
        """Return the count stored for a date, or 0 if it falls outside the grid."""
        position = grid_position(day, self.anchor) if self.anchor else None
        if position is None:
            return 0
        day_of_week, week = position
        return self.cells[day_of_week][week]


def sunday_index(day: date) -> int:
    """Weekday number with Sunday = 0 through Saturday = 6."""
    return day.isoweekday() % 7


def find_anchor(day: date) -> date:
    """Return the Sunday on or before the given date."""
    anchor = day
    while sunday_index(anchor) != 0:
        anchor -= timedelta(days=1)
    return anchor


def grid_position(day: date, anchor: date) -> Optional[tuple[int, int]]:
    """
    Map a date to its (day_of_week, week) cell.

    Returns None when the date lies outside the 52-week window that starts
    on the anchor.
    """
    week = (day - anchor).days // 7
    if 0 <= week < WEEKS_TO_DISPLAY:
        return sunday_index(day), week
    return None


def build_grid(contributions: Sequence[Contribution]) -> Grid:
    """
    Build the week-aligned grid from a contribution sequence.

    Contributions must be in non-decreasing date order; the first one decides
    the anchor. Dates beyond the 52-week window are dropped. If two
    contributions land on the same cell the later one wins.

    Args:
        contributions: Daily contributions, oldest first

    Returns:
        Grid with counts and the anchor Sunday
    """
    grid = Grid()
    if not contributions:
        return grid

    grid.anchor = find_anchor(contributions[0].date)

    for contribution in contributions:
        position = grid_position(contribution.date, grid.anchor)
        if position is None:
            continue
        day_of_week, week = position
        grid.cells[day_of_week][week] = contribution.count

    return grid


def classify_intensity(count: int) -> int:
    """
    Calculate intensity level for heatmap coloring.

    Args:
        count: Contributions for the day. Negative values are treated as 0.

    Returns:
        Level from 0-4:
            0: No contributions
            1: 1-3 contributions
            2: 4-6 contributions
            3: 7-9 contributions
            4: 10+ contributions
    """
    if count <= 0:
        return 0
    elif count <= 3:
        return 1
    elif count <= 6:
        return 2
    elif count <= 9:
        return 3
    else:
        return 4
