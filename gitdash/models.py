"""
Data types shared by the dashboard.

Contributions and activity events are produced by the GitHub client and
consumed read-only by the grid, stats and analyzer modules.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Contribution:
    """One calendar day's contribution count."""

    date: date
    count: int

    def __post_init__(self):
        if self.count < 0:
            raise ValueError(
                f"Contribution count must be non-negative, got {self.count} for {self.date}"
            )


@dataclass(frozen=True)
class ActivityEvent:
    """A single entry from the user's activity feed."""

    event_type: str  # GitHub event tag, e.g. "PushEvent"
    timestamp: datetime  # timezone-aware, already in local time
    is_public: bool
    repository: str
    action: str = ""


@dataclass
class Stats:
    """Summary statistics over a contribution sequence."""

    total: int = 0
    active_days: int = 0
    total_days: int = 0
    average_per_day: int = 0
    max_day: int = 0

    def __str__(self) -> str:
        return (
            f"Total: {self.total} contributions | "
            f"Active: {self.active_days}/{self.total_days} days | "
            f"Avg: {self.average_per_day}/day | "
            f"Max: {self.max_day}/day"
        )


@dataclass
class StreakInfo:
    """Current and longest streak for a contribution sequence."""

    current: int = 0
    longest: int = 0
    streak_active: bool = False  # contributed today
    last_active_date: Optional[date] = None


class PushGranularity(str, Enum):
    """Time unit a push rate is normalized to."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @property
    def hours(self) -> float:
        return {
            PushGranularity.HOUR: 1.0,
            PushGranularity.DAY: 24.0,
            PushGranularity.WEEK: 24.0 * 7,
            PushGranularity.MONTH: 24.0 * 30,
        }[self]

    @property
    def label(self) -> str:
        return f"Pushes/{self.value.capitalize()}"

    def next(self) -> "PushGranularity":
        """Return the next granularity in the hour -> day -> week -> month cycle."""
        members = list(PushGranularity)
        return members[(members.index(self) + 1) % len(members)]


class TimeWindow(str, Enum):
    """Lookback window for the peak coding hour."""

    THIS_WEEK = "week"
    THIS_MONTH = "month"
    THIS_YEAR = "year"

    @property
    def days(self) -> int:
        return {
            TimeWindow.THIS_WEEK: 7,
            TimeWindow.THIS_MONTH: 30,
            TimeWindow.THIS_YEAR: 365,
        }[self]

    @property
    def label(self) -> str:
        return {
            TimeWindow.THIS_WEEK: "This Week",
            TimeWindow.THIS_MONTH: "This Month",
            TimeWindow.THIS_YEAR: "This Year",
        }[self]


@dataclass
class ActivityStats:
    """Push rate and peak hour derived from the activity feed."""

    push_rate: float = 0.0
    peak_hour: str = "No data"
    hour_distribution: dict[int, int] = field(default_factory=dict)


@dataclass
class Profile:
    """GitHub user profile."""

    login: str
    name: str = ""
    bio: str = ""
    location: str = ""
    company: str = ""
    avatar_url: str = ""
    public_repos: int = 0
    public_gists: int = 0
    followers: int = 0
    following: int = 0
    created_at: Optional[datetime] = None


@dataclass
class Repository:
    """A repository owned by or shared with the user."""

    name: str
    full_name: str = ""
    description: str = ""
    language: str = ""
    stars: int = 0
    forks: int = 0
    private: bool = False


@dataclass
class LanguageStat:
    """Share of the user's repositories written in one language."""

    name: str
    percentage: float  # 0..1
    color: str


@dataclass
class PullRequest:
    """A pull request authored by the user."""

    title: str
    repository: str
    state: str  # "open" or "closed"
    draft: bool = False
    merged: bool = False
    comments: int = 0
    url: str = ""
    review_decision: str = ""  # APPROVED, CHANGES_REQUESTED, REVIEW_REQUIRED or ""
    approved_count: int = 0
    changes_count: int = 0


@dataclass
class DashboardData:
    """Everything fetched for one user in a single refresh."""

    username: str
    profile: Optional[Profile] = None
    contributions: list[Contribution] = field(default_factory=list)
    languages: list[LanguageStat] = field(default_factory=list)
    repo_count: int = 0
    repositories: list[Repository] = field(default_factory=list)
    activities: list[ActivityEvent] = field(default_factory=list)
    pull_requests: list[PullRequest] = field(default_factory=list)
    is_own_profile: bool = False
    public_only: bool = False
