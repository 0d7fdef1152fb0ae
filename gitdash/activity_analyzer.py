"""
Push frequency and peak coding hour from the activity feed.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from gitdash.models import ActivityEvent, ActivityStats, PushGranularity, TimeWindow

PUSH_EVENT = "PushEvent"
NO_DATA = "No data"


def calculate_push_rate(
    events: Sequence[ActivityEvent], granularity: PushGranularity
) -> float:
    """
    Calculate push frequency over the span covered by the push events.

    The rate is the number of pushes divided by the time between the oldest
    and newest push, expressed in the requested unit. When every push shares
    one timestamp the span is taken to be a single unit.

    Args:
        events: Activity events in any order
        granularity: Unit to normalize the rate to

    Returns:
        Pushes per unit, or 0.0 when there are no push events
    """
    push_times = [event.timestamp for event in events if event.event_type == PUSH_EVENT]
    if not push_times:
        return 0.0

    span_hours = (max(push_times) - min(push_times)) / timedelta(hours=1)
    if span_hours == 0:
        span_hours = granularity.hours

    return len(push_times) / (span_hours / granularity.hours)


def _window_cutoff(window: TimeWindow, now: datetime) -> datetime:
    return now - timedelta(days=window.days)


def hour_distribution(
    events: Sequence[ActivityEvent], window: TimeWindow, now: Optional[datetime] = None
) -> dict[int, int]:
    """
    Count events per hour of day (0-23) within the lookback window.

    Events of every type are counted. Only hours with events appear in the
    result.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    cutoff = _window_cutoff(window, now)

    counts: dict[int, int] = {}
    for event in events:
        if event.timestamp < cutoff:
            continue
        hour = event.timestamp.hour
        counts[hour] = counts.get(hour, 0) + 1
    return counts


def to_12_hour(hour: int) -> tuple[int, str]:
    """Convert a 0-23 hour to (display hour, "AM"/"PM")."""
    period = "PM" if hour >= 12 else "AM"
    display = hour % 12
    if display == 0:
        display = 12
    return display, period


def format_hour_range(start: int, start_period: str, end: int, end_period: str) -> str:
    """
    Format an hour range, e.g. "2-3pm" or "11am-12pm".

    The meridiem is written once when both ends share it.
    """
    start_period = start_period.lower()
    end_period = end_period.lower()

    if start_period == end_period:
        return f"{start}-{end}{end_period}"
    return f"{start}{start_period}-{end}{end_period}"


def calculate_peak_hour(
    events: Sequence[ActivityEvent], window: TimeWindow, now: Optional[datetime] = None
) -> tuple[str, dict[int, int]]:
    """
    Find the hour of day with the most activity.

    Ties go to the earliest hour.

    Args:
        events: Activity events in any order, timestamps in local time
        window: How far back to look
        now: Override the current time for testing

    Returns:
        (label, distribution) where label is an hour range like "2-3pm", or
        "No data" when nothing falls in the window
    """
    distribution = hour_distribution(events, window, now=now)

    max_count = 0
    peak = 0
    for hour in sorted(distribution):
        if distribution[hour] > max_count:
            max_count = distribution[hour]
            peak = hour

    if max_count == 0:
        return NO_DATA, distribution

    start, start_period = to_12_hour(peak)
    end, end_period = to_12_hour((peak + 1) % 24)
    return format_hour_range(start, start_period, end, end_period), distribution


def calculate_activity_stats(
    events: Sequence[ActivityEvent],
    granularity: PushGranularity,
    window: TimeWindow,
    now: Optional[datetime] = None,
) -> ActivityStats:
    """Calculate push rate and peak coding hour together."""
    peak_hour, distribution = calculate_peak_hour(events, window, now=now)
    return ActivityStats(
        push_rate=calculate_push_rate(events, granularity),
        peak_hour=peak_hour,
        hour_distribution=distribution,
    )
