"""
gitdash: a GitHub profile dashboard for the terminal

Entry point for the application.
"""

import argparse
import logging
import sys
import time

from rich.console import Console
from rich.live import Live
from rich.text import Text

from gitdash.config import (
    GITHUB_TOKEN,
    GITHUB_USERNAME,
    LOG_LEVEL,
    REQUEST_TIMEOUT,
    THEME,
    validate_config,
)
from gitdash.dashboard import build_dashboard
from gitdash.github_client import (
    GitHubClient,
    GitHubClientError,
    fetch_dashboard_data,
    resolve_username,
)
from gitdash.models import PushGranularity, TimeWindow
from gitdash.themes import THEMES, get_theme

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gitdash",
        description="Show a GitHub profile dashboard in the terminal.",
    )
    parser.add_argument(
        "username", nargs="?",
        help="GitHub user to show (default: GITHUB_USERNAME, then the token's owner)",
    )
    parser.add_argument(
        "--granularity", "-g", choices=[g.value for g in PushGranularity],
        default=PushGranularity.DAY.value, help="Unit for the push rate",
    )
    parser.add_argument(
        "--window", "-w", choices=[w.value for w in TimeWindow],
        default=TimeWindow.THIS_WEEK.value, help="Lookback window for the peak coding hour",
    )
    parser.add_argument("--theme", "-t", choices=list(THEMES), help="Color theme")
    parser.add_argument(
        "--public-only", "-p", action="store_true",
        help="Hide private data when viewing your own profile",
    )
    parser.add_argument(
        "--watch", type=float, metavar="SECONDS",
        help="Refresh every SECONDS until interrupted",
    )
    parser.add_argument("--width", type=int, help="Override the terminal width")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    console = Console(width=args.width)

    # Validate configuration
    try:
        validate_config()
    except ValueError as e:
        console.print(Text("Configuration Error:", style="bold red"))
        console.print(Text(str(e)))
        return 1

    client = GitHubClient(GITHUB_TOKEN, timeout=REQUEST_TIMEOUT)
    theme = get_theme(args.theme or THEME)
    granularity = PushGranularity(args.granularity)
    window = TimeWindow(args.window)

    try:
        username, is_own_profile = resolve_username(client, args.username or GITHUB_USERNAME)
    except GitHubClientError as e:
        console.print(Text(f"Error: {e}", style="bold red"))
        return 1

    def render():
        data = fetch_dashboard_data(
            client, username, is_own_profile=is_own_profile, public_only=args.public_only
        )
        return build_dashboard(data, console.width, theme, granularity=granularity, window=window)

    try:
        with console.status(f"Fetching GitHub data for {username}..."):
            dashboard = render()
    except GitHubClientError as e:
        console.print(Text(f"Error: {e}", style="bold red"))
        return 1

    if not args.watch:
        console.print(dashboard)
        return 0

    try:
        with Live(dashboard, console=console, screen=True, auto_refresh=False) as live:
            while True:
                time.sleep(args.watch)
                try:
                    live.update(render(), refresh=True)
                except GitHubClientError as e:
                    # Keep showing the last good data
                    logger.warning("Refresh failed: %s", e)
    except KeyboardInterrupt:
        pass

    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
