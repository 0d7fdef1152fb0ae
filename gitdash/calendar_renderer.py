"""
GitHub-style contribution calendar for the terminal.

Renders a title, a month label row, the 7 x 52 heatmap and a legend. When the
terminal is narrower than the graph, a warning box is shown instead.
"""

import io
from datetime import date, timedelta
from typing import Optional, Sequence

from rich import box
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.style import Style
from rich.text import Text

from gitdash.grid_builder import (
    DAYS_PER_WEEK,
    WEEKS_TO_DISPLAY,
    Grid,
    build_grid,
    classify_intensity,
)
from gitdash.models import Contribution
from gitdash.themes import Theme, get_theme

CELL_WIDTH = 2  # block + space
DAY_LABEL_WIDTH = 4
MIN_TERMINAL_WIDTH = DAY_LABEL_WIDTH + WEEKS_TO_DISPLAY * CELL_WIDTH
BLOCK_CHAR = "▄"  # lower half block, reads as a compact square

TITLE = "Contribution Activity"
MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
DAY_LABELS = ["", "Mon", "", "Wed", "", "Fri", ""]

WARNING_MESSAGE = "Increase terminal width to view contribution grid"
SHORT_WARNING_MESSAGE = "Increase width for graph"
NARROW_WARNING_MESSAGE = "Terminal too narrow"
MIN_BOX_WIDTH = 12


def month_label_row(anchor: Optional[date]) -> str:
    """
    Build the month name row that sits above the grid.

    A label is stamped at a week's column whenever that week starts in a
    different month than the previous week. The first week always gets one.
    Labels running past the last column are clipped.
    """
    if anchor is None:
        return ""

    total_width = WEEKS_TO_DISPLAY * CELL_WIDTH
    label_chars = [" "] * total_width

    current_month = None
    for week in range(WEEKS_TO_DISPLAY):
        week_start = anchor + timedelta(days=week * 7)
        if week_start.month == current_month:
            continue
        pos = week * CELL_WIDTH
        for i, ch in enumerate(MONTHS[week_start.month - 1]):
            if pos + i < total_width:
                label_chars[pos + i] = ch
        current_month = week_start.month

    return " " * DAY_LABEL_WIDTH + "".join(label_chars)


def _legend(theme: Theme) -> Text:
    legend = Text(" " * DAY_LABEL_WIDTH)
    legend.append("Less ", style=theme.gray)
    for level in range(5):
        legend.append(BLOCK_CHAR + " ", style=theme.level_color(level))
    legend.append("More", style=theme.gray)
    return legend


def calendar_text(grid: Grid, theme: Theme, title: str = TITLE, show_legend: bool = True) -> Text:
    """Render the full graph (title, months, grid, legend) as styled text."""
    text = Text(no_wrap=True)
    text.append(title, style=Style(bold=True, color=theme.blue))
    text.append("\n\n")
    text.append(month_label_row(grid.anchor), style=theme.gray)
    text.append("\n")

    for day in range(DAYS_PER_WEEK):
        text.append(DAY_LABELS[day].ljust(DAY_LABEL_WIDTH), style=theme.gray)
        for week in range(WEEKS_TO_DISPLAY):
            level = classify_intensity(grid.cells[day][week])
            text.append(BLOCK_CHAR, style=theme.level_color(level))
            text.append(" ")
        if day < DAYS_PER_WEEK - 1:
            text.append("\n")

    if show_legend:
        text.append("\n")
        text.append_text(_legend(theme))

    return text


def width_warning(current_width: int, theme: Theme, min_width: int = MIN_TERMINAL_WIDTH) -> Panel:
    """
    Build the box shown instead of the graph on narrow terminals.

    The message shrinks with the available width so it stays inside the box.
    """
    box_width = current_width - 4  # margin for the border

    message = WARNING_MESSAGE
    detail = f"Need {min_width} columns, have {current_width}"
    if box_width < 30:
        message = NARROW_WARNING_MESSAGE
        detail = ""
    elif box_width < len(WARNING_MESSAGE):
        message = SHORT_WARNING_MESSAGE
        detail = ""

    lines = [Text(message, style=Style(bold=True, color=theme.gray), justify="center")]
    if detail:
        lines.append(Text(""))
        lines.append(Text(detail, style=theme.subtle, justify="center"))

    return Panel(
        Group(*lines),
        box=box.ROUNDED,
        border_style=theme.blue,
        padding=(1, 2),
        width=max(box_width, MIN_BOX_WIDTH),
    )


def calendar_renderable(grid: Grid, terminal_width: int, theme: Theme) -> RenderableType:
    """Return the graph, or the width warning if the terminal is too narrow."""
    if terminal_width < MIN_TERMINAL_WIDTH:
        return width_warning(terminal_width, theme)
    return calendar_text(grid, theme)


def render_to_string(renderable: RenderableType, width: int, color: bool = True) -> str:
    """Render any rich renderable to a string, with or without ANSI colors."""
    console = Console(
        width=max(width, MIN_BOX_WIDTH),
        file=io.StringIO(),
        force_terminal=color,
        color_system="truecolor" if color else None,
        highlight=False,
        legacy_windows=False,
    )
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


def render_calendar(
    contributions: Sequence[Contribution],
    terminal_width: int,
    theme: Optional[Theme] = None,
    color: bool = True,
) -> str:
    """
    Render the contribution calendar for a terminal of the given width.

    Args:
        contributions: Daily contributions, oldest first
        terminal_width: Available columns
        theme: Colors to use. Defaults to the default theme.
        color: Emit ANSI color codes. Pass False for plain text.

    Returns:
        The rendered graph or the width warning box. Never raises.
    """
    theme = theme or get_theme(None)
    grid = build_grid(contributions)
    renderable = calendar_renderable(grid, terminal_width, theme)
    return render_to_string(renderable, terminal_width, color=color)
