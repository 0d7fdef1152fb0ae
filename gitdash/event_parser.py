"""
Parse GitHub API responses into dashboard records.
"""

import logging
from datetime import date, datetime

from gitdash.models import ActivityEvent, Contribution

logger = logging.getLogger(__name__)


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp ("Z" suffix allowed) into local time."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed.astimezone()


def describe_action(event_type: str, payload: dict) -> str:
    """
    Create a human-readable description of an event.

    Args:
        event_type: GitHub event type, e.g. "PushEvent"
        payload: The event's payload dictionary

    Returns:
        Short description such as "Pushed 3 commit(s)"
    """
    if event_type == "PushEvent":
        if "size" in payload:
            return f"Pushed {payload['size']} commit(s)"
        commits = payload.get("commits")
        if isinstance(commits, list):
            return f"Pushed {len(commits)} commit(s)"
        return "Pushed commits"
    elif event_type == "CreateEvent":
        ref_type = payload.get("ref_type")
        return f"Created {ref_type}" if ref_type else "Created repository"
    elif event_type == "PullRequestEvent":
        action = payload.get("action")
        return f"Pull request {action}" if action else "Pull request activity"
    elif event_type == "IssuesEvent":
        action = payload.get("action")
        return f"Issue {action}" if action else "Issue activity"
    elif event_type == "WatchEvent":
        return "Starred repository"
    elif event_type == "ForkEvent":
        return "Forked repository"
    return event_type


def parse_activity_events(events: list[dict]) -> list[ActivityEvent]:
    """
    Parse activity events from the GitHub events API.

    Events without a usable timestamp are skipped.

    Args:
        events: List of GitHub API event dictionaries

    Returns:
        List of ActivityEvent in the order received
    """
    activity = []

    for event in events:
        event_type = event.get("type", "")
        timestamp = parse_timestamp(event.get("created_at", ""))
        if timestamp is None:
            logger.warning("Skipping %s event with bad timestamp: %r",
                           event_type or "unknown", event.get("created_at"))
            continue

        activity.append(
            ActivityEvent(
                event_type=event_type,
                timestamp=timestamp,
                is_public=bool(event.get("public", True)),
                repository=(event.get("repo") or {}).get("name", "unknown"),
                action=describe_action(event_type, event.get("payload") or {}),
            )
        )

    return activity


def parse_contribution_calendar(data: dict) -> list[Contribution]:
    """
    Flatten a GraphQL contribution calendar into daily contributions.

    Args:
        data: The "data" object of the contributionsCollection query

    Returns:
        Contributions in calendar order (oldest first)
    """
    user = data.get("user") or {}
    calendar = (user.get("contributionsCollection") or {}).get("contributionCalendar") or {}

    contributions = []
    for week in calendar.get("weeks", []):
        for day in week.get("contributionDays", []):
            try:
                contribution = Contribution(
                    date=date.fromisoformat(str(day.get("date", ""))),
                    count=int(day.get("contributionCount", 0)),
                )
            except (TypeError, ValueError) as e:
                logger.warning("Skipping malformed contribution day %r: %s", day, e)
                continue
            contributions.append(contribution)

    return contributions
