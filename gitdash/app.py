"""
FastAPI web application for gitdash.

Serves the dashboard as an HTML page, its computed values as JSON and the
contribution calendar as plain text.
"""

from dataclasses import asdict
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from gitdash.activity_analyzer import calculate_activity_stats
from gitdash.calendar_renderer import DAY_LABELS, MIN_TERMINAL_WIDTH, month_label_row, render_calendar
from gitdash.config import GITHUB_TOKEN, GITHUB_USERNAME, REQUEST_TIMEOUT, THEME, validate_config
from gitdash.github_client import (
    GitHubClient,
    GitHubClientError,
    fetch_dashboard_data,
    resolve_username,
)
from gitdash.grid_builder import build_grid, classify_intensity
from gitdash.models import DashboardData, PushGranularity, TimeWindow
from gitdash.stats_calculator import compute_stats
from gitdash.streak_calculator import calculate_streak
from gitdash.themes import get_theme

app = FastAPI(
    title="gitdash",
    description="GitHub profile dashboard",
    version="0.1.0",
)

templates = Jinja2Templates(directory=Path(__file__).parent / "templates")


class StreakResponse(BaseModel):
    """Streak values for the dashboard."""

    current: int
    longest: int
    active: bool
    last_active_date: Optional[str] = None


class StatsResponse(BaseModel):
    """Contribution summary statistics."""

    total: int
    active_days: int
    total_days: int
    average_per_day: int
    max_day: int


class ActivityResponse(BaseModel):
    """Push rate and peak coding hour."""

    granularity: PushGranularity
    window: TimeWindow
    push_rate: float
    peak_hour: str
    hour_distribution: dict[int, int]


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


def _client() -> GitHubClient:
    """
    Create a GitHub client from configuration.

    Raises:
        HTTPException: on configuration errors
    """
    try:
        validate_config()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=f"Configuration error: {e}")
    return GitHubClient(GITHUB_TOKEN, timeout=REQUEST_TIMEOUT)


def _fetch_dashboard(username: Optional[str], public_only: bool) -> DashboardData:
    """
    Fetch dashboard data for a user, or the configured/authenticated user.

    Raises:
        HTTPException: on configuration or GitHub API errors
    """
    client = _client()
    try:
        username, is_own_profile = resolve_username(client, username or GITHUB_USERNAME)
        return fetch_dashboard_data(
            client, username, is_own_profile=is_own_profile, public_only=public_only
        )
    except GitHubClientError as e:
        raise HTTPException(status_code=502, detail=str(e))


def _dashboard_payload(
    data: DashboardData, granularity: PushGranularity, window: TimeWindow
) -> dict:
    stats = compute_stats(data.contributions)
    streak = calculate_streak(data.contributions)
    activity = calculate_activity_stats(data.activities, granularity, window)

    return {
        "username": data.username,
        "profile": asdict(data.profile) if data.profile else None,
        "stats": StatsResponse(**asdict(stats)),
        "streak": StreakResponse(
            current=streak.current,
            longest=streak.longest,
            active=streak.streak_active,
            last_active_date=streak.last_active_date.isoformat() if streak.last_active_date else None,
        ),
        "activity": ActivityResponse(
            granularity=granularity,
            window=window,
            push_rate=activity.push_rate,
            peak_hour=activity.peak_hour,
            hour_distribution=activity.hour_distribution,
        ),
        "languages": [asdict(language) for language in data.languages],
        "repo_count": data.repo_count,
        "repositories": [asdict(repo) for repo in data.repositories],
    }


@app.get("/", response_class=HTMLResponse)
def index(
    request: Request,
    username: Optional[str] = None,
    theme: Optional[str] = None,
    granularity: PushGranularity = PushGranularity.DAY,
    window: TimeWindow = TimeWindow.THIS_WEEK,
):
    """Render the dashboard page."""
    data = _fetch_dashboard(username, public_only=False)
    context = _dashboard_payload(data, granularity, window)

    # Heatmap rows as lists of cell colors, Sunday first
    active_theme = get_theme(theme or THEME)
    grid = build_grid(data.contributions)
    context["heatmap"] = [
        {
            "label": DAY_LABELS[day],
            "colors": [active_theme.level_color(classify_intensity(count)) for count in row],
        }
        for day, row in enumerate(grid.cells)
    ]
    context["month_labels"] = month_label_row(grid.anchor)
    context["theme"] = active_theme
    context["status"] = str(compute_stats(data.contributions))

    return templates.TemplateResponse(request, "index.html", context)


@app.get("/api/dashboard")
def get_dashboard(
    username: Optional[str] = None,
    granularity: PushGranularity = PushGranularity.DAY,
    window: TimeWindow = TimeWindow.THIS_WEEK,
    public_only: bool = False,
):
    """
    Get profile, contribution stats, streaks and activity stats.

    Returns:
        JSON with profile, stats, streak, activity, languages and repositories
    """
    data = _fetch_dashboard(username, public_only)
    return _dashboard_payload(data, granularity, window)


@app.get("/api/calendar", response_class=PlainTextResponse)
def get_calendar(
    username: Optional[str] = None,
    width: int = Query(MIN_TERMINAL_WIDTH, ge=1, le=1000),
    theme: Optional[str] = None,
    color: bool = False,
):
    """
    Get the contribution calendar as text.

    Returns:
        The rendered calendar, or the width warning for narrow widths
    """
    client = _client()

    try:
        username, _ = resolve_username(client, username or GITHUB_USERNAME)
        contributions = client.get_contributions(username)
    except GitHubClientError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return render_calendar(contributions, width, theme=get_theme(theme or THEME), color=color)
