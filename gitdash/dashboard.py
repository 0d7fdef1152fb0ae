"""
Terminal dashboard layout for gitdash.

Every section takes the Theme to draw with; the sections are assembled by
build_dashboard() into a single rich renderable.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from rich.console import Group, RenderableType
from rich.padding import Padding
from rich.style import Style
from rich.table import Table
from rich.text import Text

from gitdash.activity_analyzer import calculate_activity_stats
from gitdash.calendar_renderer import MIN_TERMINAL_WIDTH, calendar_renderable
from gitdash.grid_builder import build_grid
from gitdash.models import (
    ActivityEvent,
    DashboardData,
    LanguageStat,
    Profile,
    PullRequest,
    PushGranularity,
    Repository,
    TimeWindow,
)
from gitdash.stats_calculator import compute_stats
from gitdash.streak_calculator import calculate_streak
from gitdash.themes import Theme

MAX_LANGUAGES = 3
MAX_REPOS = 3
MAX_PULL_REQUESTS = 5
MAX_ACTIVITY_ITEMS = 10
MIN_BAR_WIDTH = 10


def format_time_ago(timestamp: datetime, now: Optional[datetime] = None) -> str:
    """
    Format a timestamp relative to now, e.g. "5m ago".

    Anything older than a week is shown as a date ("Jan 2").
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elapsed = now - timestamp

    if elapsed < timedelta(minutes=1):
        return "just now"
    elif elapsed < timedelta(hours=1):
        return f"{int(elapsed.total_seconds() // 60)}m ago"
    elif elapsed < timedelta(days=1):
        return f"{int(elapsed.total_seconds() // 3600)}h ago"
    elif elapsed < timedelta(days=7):
        return f"{elapsed.days}d ago"
    return f"{timestamp.strftime('%b')} {timestamp.day}"


def truncate(value: str, width: int) -> str:
    """Shorten a string to width characters, ending in "..." when cut."""
    if len(value) <= width:
        return value
    if width <= 3:
        return value[:max(width, 0)]
    return value[: width - 3] + "..."


def _title(text: str, theme: Theme) -> Text:
    return Text(text, style=Style(bold=True, color=theme.blue))


def _label(text: str, theme: Theme) -> Text:
    return Text(text, style=theme.gray)


def _accent(text: str, theme: Theme) -> Text:
    return Text(text, style=Style(bold=True, color=theme.green))


def render_header(
    profile: Optional[Profile], username: str, theme: Theme, repo_count: int = 0
) -> RenderableType:
    """
    Name, login, bio and profile counts.

    repo_count is the number of fetched repositories, which includes private
    and organization ones; the profile's public count is used when it is 0.
    """
    if profile is None:
        return _label(f"Loading profile for {username}...", theme)

    lines = []
    heading = Text(profile.name or profile.login, style=Style(bold=True, color=theme.foreground))
    if profile.name:
        heading.append(f"  @{profile.login}", style=theme.gray)
    lines.append(heading)

    if profile.bio:
        lines.append(Text(profile.bio, style=theme.foreground))

    details = [part for part in (profile.location, profile.company) if part]
    if profile.created_at:
        details.append(f"Joined {profile.created_at.strftime('%b %Y')}")
    if details:
        lines.append(_label(" • ".join(details), theme))

    counts = Text()
    fields = [
        ("Repos", repo_count or profile.public_repos),
        ("Gists", profile.public_gists),
        ("Followers", profile.followers),
        ("Following", profile.following),
    ]
    for i, (label, value) in enumerate(fields):
        if i:
            counts.append(" | ", style=theme.gray)
        counts.append(f"{label}: ", style=theme.gray)
        counts.append(f"{value}", style=Style(bold=True, color=theme.green))
    lines.append(counts)

    return Group(*lines)


def render_languages(languages: list[LanguageStat], width: int, theme: Theme) -> RenderableType:
    """Top languages with proportional bars."""
    lines: list[RenderableType] = [_title("Top Languages", theme), Text("")]
    if not languages:
        lines.append(_label("No language data", theme))
        return Group(*lines)

    max_bar_width = max(width - 25, MIN_BAR_WIDTH)
    for language in languages[:MAX_LANGUAGES]:
        lines.append(Text(f"{language.name:<12} {language.percentage * 100:5.1f}%",
                          style=theme.foreground))
        bar_width = max(int(language.percentage * max_bar_width), 1)
        lines.append(Text(" " * bar_width, style=Style(bgcolor=language.color)))
        lines.append(Text(""))

    return Group(*lines)


def render_streaks(
    data: DashboardData,
    theme: Theme,
    granularity: PushGranularity,
    window: TimeWindow,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
) -> RenderableType:
    """Total contributions, streaks, push rate and peak hour."""
    lines: list[RenderableType] = [_title("Contribution Stats", theme), Text("")]

    # An empty calendar shows zeros; activity stats still come from events
    stats = compute_stats(data.contributions)
    streak = calculate_streak(data.contributions, today=today)
    activity = calculate_activity_stats(data.activities, granularity, window, now=now)

    rows = [
        ("Total Contributions", f"{stats.total}"),
        ("Current Streak", f"{streak.current} days"),
        ("Longest Streak", f"{streak.longest} days"),
        (granularity.label, f"{activity.push_rate:.2f}"),
        (f"Peak Hour ({window.label})", activity.peak_hour),
    ]
    for label, value in rows:
        lines.append(_label(label, theme))
        lines.append(_accent(value, theme))
        lines.append(Text(""))

    return Group(*lines)


def render_top_repos(repositories: list[Repository], width: int, theme: Theme) -> RenderableType:
    """Most starred repositories."""
    lines: list[RenderableType] = [_title("Top Repositories", theme), Text("")]
    if not repositories:
        lines.append(_label("No repositories", theme))
        return Group(*lines)

    for repo in repositories[:MAX_REPOS]:
        lines.append(_label(truncate(repo.name, width - 2), theme))
        summary = f"★ {repo.stars}"
        if repo.language:
            summary += f" • {repo.language}"
        lines.append(_accent(summary, theme))
        lines.append(Text(""))

    return Group(*lines)


def _pull_request_status(pr: PullRequest, theme: Theme) -> Text:
    # Closed and merged states take priority over draft
    if pr.state == "closed":
        if pr.merged:
            return Text("✓", style=theme.purple)
        return Text("✗", style=theme.red)
    if pr.draft:
        return Text("◐", style=theme.dark)
    if pr.review_decision == "APPROVED":
        return Text("✓", style=theme.green)
    elif pr.review_decision == "CHANGES_REQUESTED":
        return Text("⚠", style=theme.red)
    elif pr.review_decision == "REVIEW_REQUIRED":
        return Text("⏳", style=theme.yellow)
    return Text("●", style=theme.gray)


def render_pull_requests(pull_requests: list[PullRequest], width: int, theme: Theme) -> RenderableType:
    """Open pull requests, or recently closed ones when none are open."""
    if not pull_requests:
        heading = "Pull Requests"
    elif pull_requests[0].state == "open":
        heading = f"Pull Requests ({len(pull_requests)} open)"
    else:
        heading = "Pull Requests (recent closed)"

    lines: list[RenderableType] = [_title(heading, theme), Text("")]
    if not pull_requests:
        lines.append(_label("No pull requests", theme))
        return Group(*lines)

    for pr in pull_requests[:MAX_PULL_REQUESTS]:
        line = _pull_request_status(pr, theme)
        line.append(" ")
        line.append(truncate(pr.title, max(width - 6, 10)), style=theme.foreground)
        lines.append(line)

        details = Text("  ")
        details.append(pr.repository, style=theme.gray)
        if pr.approved_count:
            details.append(f"  ✓ {pr.approved_count} approved", style=Style(bold=True, color=theme.green))
        if pr.changes_count:
            details.append(f"  ⚠ {pr.changes_count} changes", style=theme.red)
        if not pr.approved_count and not pr.changes_count and pr.comments:
            details.append(f"  💬 {pr.comments} comments", style=theme.gray)
        if pr.state == "open" and not pr.review_decision:
            details.append("  ⏳ awaiting review", style=theme.subtle)
        lines.append(details)
        lines.append(Text(""))

    return Group(*lines)


def render_activity(
    activities: list[ActivityEvent], theme: Theme, now: Optional[datetime] = None
) -> RenderableType:
    """Recent activity timeline."""
    lines: list[RenderableType] = [_title(f"Recent Activity ({len(activities)})", theme), Text("")]
    if not activities:
        lines.append(_label("No recent activity", theme))
        return Group(*lines)

    for activity in activities[:MAX_ACTIVITY_ITEMS]:
        line = Text()
        line.append(format_time_ago(activity.timestamp, now=now), style=theme.subtle)
        line.append(" ")
        line.append(activity.event_type, style=theme.gray)
        line.append(" ")
        if not activity.is_public:
            line.append("[private] ", style=theme.subtle)
        line.append(activity.repository, style=theme.foreground)
        line.append(" ")
        line.append(activity.action, style=theme.subtle)
        lines.append(line)

    return Group(*lines)


def render_status_bar(
    data: DashboardData, theme: Theme, granularity: PushGranularity, window: TimeWindow
) -> Text:
    """One-line summary of the active display options."""
    parts = [
        ("theme", theme.name),
        ("push stats", granularity.value),
        ("peak window", window.label),
    ]
    if data.is_own_profile:
        parts.append(("view", "PUBLIC" if data.public_only else "ALL"))

    bar = Text(style=Style(color=theme.gray, bgcolor=theme.subtle))
    for i, (name, value) in enumerate(parts):
        if i:
            bar.append(" | ", style=Style(color=theme.gray, bgcolor=theme.subtle))
        bar.append(f"{name}: ", style=Style(color=theme.foreground, bgcolor=theme.subtle))
        bar.append(f"[{value}]", style=Style(bold=True, color=theme.green, bgcolor=theme.subtle))
    return bar


def _columns(renderables: list[RenderableType], width: int, padding: int) -> Table:
    table = Table.grid(padding=(0, padding), expand=True)
    column_width = max((width - padding * (len(renderables) - 1)) // len(renderables), 1)
    for _ in renderables:
        table.add_column(width=column_width, vertical="top")
    table.add_row(*renderables)
    return table


def build_dashboard(
    data: DashboardData,
    width: int,
    theme: Theme,
    granularity: PushGranularity = PushGranularity.DAY,
    window: TimeWindow = TimeWindow.THIS_WEEK,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
) -> RenderableType:
    """
    Assemble the full dashboard for a terminal of the given width.

    Args:
        data: Fetched data for the user
        width: Terminal columns
        theme: Colors to draw with
        granularity: Unit for the push rate
        window: Lookback window for the peak hour
        today: Override today's date for streaks
        now: Override the current time for activity stats

    Returns:
        A rich renderable
    """
    margin = 2 if width > 100 else 1
    # Give the graph the full width when the margins would push it below its minimum
    if MIN_TERMINAL_WIDTH <= width < MIN_TERMINAL_WIDTH + margin * 2:
        margin = 0
    inner_width = max(width - margin * 2, 1)
    column_padding = 1 if width < 80 else 2

    third = max((inner_width - column_padding * 2) // 3, 1)
    half = max((inner_width - column_padding) // 2, 1)

    stats_row = _columns(
        [
            render_languages(data.languages, third, theme),
            render_streaks(data, theme, granularity, window, today=today, now=now),
            render_top_repos(data.repositories, third, theme),
        ],
        inner_width,
        column_padding,
    )
    activity_row = _columns(
        [
            render_pull_requests(data.pull_requests, half, theme),
            render_activity(data.activities, theme, now=now),
        ],
        inner_width,
        column_padding,
    )

    grid = build_grid(data.contributions)
    sections = [
        render_header(data.profile, data.username, theme, repo_count=data.repo_count),
        Text(""),
        calendar_renderable(grid, width, theme),
        Text(""),
        stats_row,
        activity_row,
    ]

    return Group(
        Padding(Group(*sections), (1, margin, 0, margin)),
        render_status_bar(data, theme, granularity, window),
    )
