"""
GitHub API client for fetching profile, contribution and activity data.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import requests

from gitdash.event_parser import (
    parse_activity_events,
    parse_contribution_calendar,
    parse_timestamp,
)
from gitdash.models import (
    ActivityEvent,
    Contribution,
    DashboardData,
    LanguageStat,
    Profile,
    PullRequest,
    Repository,
)

logger = logging.getLogger(__name__)

CONTRIBUTIONS_QUERY = """
query($username: String!) {
  user(login: $username) {
    contributionsCollection {
      contributionCalendar {
        weeks {
          contributionDays {
            contributionCount
            date
          }
        }
      }
    }
  }
}
"""

PULL_REQUESTS_QUERY = """
query($query: String!, $first: Int!) {
  search(query: $query, type: ISSUE, first: $first) {
    nodes {
      ... on PullRequest {
        title
        url
        state
        isDraft
        merged
        reviewDecision
        comments {
          totalCount
        }
        repository {
          nameWithOwner
        }
        approved: reviews(states: APPROVED) {
          totalCount
        }
        changes: reviews(states: CHANGES_REQUESTED) {
          totalCount
        }
      }
    }
  }
}
"""

LANGUAGE_COLORS = {
    "Go": "#00ADD8",
    "JavaScript": "#f1e05a",
    "TypeScript": "#3178c6",
    "Python": "#3572A5",
    "Rust": "#dea584",
    "Java": "#b07219",
    "C": "#555555",
    "C++": "#f34b7d",
    "Ruby": "#701516",
    "PHP": "#4F5D95",
    "Swift": "#ffac45",
    "Kotlin": "#A97BFF",
    "Shell": "#89e051",
    "HTML": "#e34c26",
    "CSS": "#563d7c",
}
DEFAULT_LANGUAGE_COLOR = "#858585"

PAGE_SIZE = 100
TOP_N = 5


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    pass


def get_language_color(language: str) -> str:
    """Return GitHub's color for a language, gray if unknown."""
    return LANGUAGE_COLORS.get(language, DEFAULT_LANGUAGE_COLOR)


def calculate_languages(repos: list[dict]) -> list[LanguageStat]:
    """
    Calculate each language's share of the user's repositories.

    Forks and repositories without a detected language are not counted.

    Args:
        repos: Repository dictionaries from the GitHub API

    Returns:
        LanguageStat list sorted by share (descending), then name
    """
    counts: dict[str, int] = {}
    for repo in repos:
        language = repo.get("language")
        if repo.get("fork") or not language:
            continue
        counts[language] = counts.get(language, 0) + 1

    total = sum(counts.values())
    languages = [
        LanguageStat(name=name, percentage=count / total, color=get_language_color(name))
        for name, count in counts.items()
    ]
    languages.sort(key=lambda lang: (-lang.percentage, lang.name))
    return languages


def _parse_profile(data: dict) -> Profile:
    return Profile(
        login=data.get("login", ""),
        name=data.get("name") or "",
        bio=data.get("bio") or "",
        location=data.get("location") or "",
        company=data.get("company") or "",
        avatar_url=data.get("avatar_url") or "",
        public_repos=data.get("public_repos", 0),
        public_gists=data.get("public_gists", 0),
        followers=data.get("followers", 0),
        following=data.get("following", 0),
        created_at=parse_timestamp(data.get("created_at") or ""),
    )


def _parse_repository(data: dict) -> Repository:
    return Repository(
        name=data.get("name", ""),
        full_name=data.get("full_name", ""),
        description=data.get("description") or "",
        language=data.get("language") or "",
        stars=data.get("stargazers_count", 0),
        forks=data.get("forks_count", 0),
        private=data.get("private", False),
    )


def _parse_pull_request(node: dict) -> PullRequest:
    state = (node.get("state") or "OPEN").upper()
    return PullRequest(
        title=node.get("title", ""),
        repository=(node.get("repository") or {}).get("nameWithOwner", ""),
        # GraphQL reports MERGED as its own state
        state="open" if state == "OPEN" else "closed",
        draft=bool(node.get("isDraft")),
        merged=state == "MERGED" or bool(node.get("merged")),
        comments=(node.get("comments") or {}).get("totalCount", 0),
        url=node.get("url", ""),
        review_decision=node.get("reviewDecision") or "",
        approved_count=(node.get("approved") or {}).get("totalCount", 0),
        changes_count=(node.get("changes") or {}).get("totalCount", 0),
    )


class GitHubClient:
    """Client for interacting with the GitHub REST and GraphQL APIs."""

    BASE_URL = "https://api.github.com"
    GRAPHQL_URL = "https://api.github.com/graphql"

    def __init__(self, token: str, timeout: float = 10.0):
        """
        Initialize the GitHub client.

        Args:
            token: GitHub personal access token
            timeout: Request timeout in seconds
        """
        self.token = token
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    def _request(
        self, method: str, url: str, not_found: str | None = None, **kwargs
    ) -> requests.Response:
        """
        Send a request and translate failures into GitHubClientError.

        Args:
            not_found: Message to use for a 404 response

        Raises:
            GitHubClientError: On network errors or non-2xx responses
        """
        logger.debug("%s %s %s", method, url, kwargs.get("params") or "")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise GitHubClientError(f"Could not reach GitHub: {e}") from e

        if response.status_code == 401:
            raise GitHubClientError(
                "Authentication failed. Check your GITHUB_TOKEN is valid."
            )
        elif response.status_code == 404:
            raise GitHubClientError(not_found or f"Not found on GitHub: {url}")
        elif response.status_code == 403:
            # Check for rate limiting
            remaining = response.headers.get("X-RateLimit-Remaining", "unknown")
            raise GitHubClientError(
                f"API rate limit exceeded or access forbidden. "
                f"Remaining requests: {remaining}"
            )
        elif response.status_code == 422:
            raise GitHubClientError(f"Invalid request: {response.text}")
        elif not response.ok:
            raise GitHubClientError(
                f"GitHub API error: {response.status_code} - {response.text}"
            )

        return response

    def _get(self, path: str, params: dict | None = None, not_found: str | None = None):
        url = f"{self.BASE_URL}{path}"
        return self._request("GET", url, not_found=not_found, params=params).json()

    def get_authenticated_user(self) -> Profile:
        """
        Fetch the profile of the token's owner.

        Returns:
            Profile of the authenticated user

        Raises:
            GitHubClientError: If the API request fails
        """
        return _parse_profile(self._get("/user"))

    def get_profile(self, username: str, include_private: bool = False) -> Profile:
        """
        Fetch a user's profile.

        Args:
            username: GitHub login
            include_private: Use the /user endpoint, which includes private
                counts. Only valid when username is the authenticated user.

        Returns:
            Profile for the user

        Raises:
            GitHubClientError: If the API request fails
        """
        if include_private:
            return _parse_profile(self._get("/user"))
        data = self._get(
            f"/users/{username}", not_found=f"User '{username}' not found on GitHub."
        )
        return _parse_profile(data)

    def get_contributions(self, username: str) -> list[Contribution]:
        """
        Fetch the last year of daily contribution counts via GraphQL.

        Args:
            username: GitHub login

        Returns:
            Contributions oldest first, one per day

        Raises:
            GitHubClientError: If the API request fails or returns errors
        """
        data = self._graphql(CONTRIBUTIONS_QUERY, {"username": username})
        return parse_contribution_calendar(data)

    def _graphql(self, query: str, variables: dict) -> dict:
        """
        Run a GraphQL query and return its "data" object.

        Raises:
            GitHubClientError: If the request fails or the response has errors
        """
        response = self._request(
            "POST", self.GRAPHQL_URL, json={"query": query, "variables": variables}
        )
        body = response.json()

        errors = body.get("errors")
        if errors:
            messages = "; ".join(error.get("message", "unknown error") for error in errors)
            raise GitHubClientError(f"GraphQL error: {messages}")

        return body.get("data") or {}

    def get_repositories(self, username: str, include_private: bool = False) -> list[Repository]:
        """
        Fetch all repositories for a user, following pagination.

        Args:
            username: GitHub login
            include_private: Include private and organization repositories.
                Only valid for the authenticated user.

        Returns:
            List of repositories in API order

        Raises:
            GitHubClientError: If the API request fails
        """
        raw = self._fetch_raw_repositories(username, include_private)
        return [_parse_repository(repo) for repo in raw]

    def get_languages(
        self, username: str, include_private: bool = False
    ) -> tuple[list[LanguageStat], int]:
        """
        Calculate the top languages across the user's repositories.

        Forks and repositories without a detected language are not counted.

        Returns:
            (top 5 languages by share of repositories, total repository count)

        Raises:
            GitHubClientError: If the API request fails
        """
        raw = self._fetch_raw_repositories(username, include_private)
        return calculate_languages(raw)[:TOP_N], len(raw)

    def get_top_repositories(
        self, username: str, include_private: bool = False
    ) -> list[Repository]:
        """
        Fetch the user's most starred repositories.

        Returns:
            Up to 5 repositories sorted by stars, descending

        Raises:
            GitHubClientError: If the API request fails
        """
        repos = self.get_repositories(username, include_private)
        repos.sort(key=lambda repo: repo.stars, reverse=True)
        return repos[:TOP_N]

    def get_recent_activity(
        self, username: str, include_private: bool = False
    ) -> list[ActivityEvent]:
        """
        Fetch the user's recent activity feed.

        Args:
            username: GitHub login
            include_private: Include private events (authenticated user only)

        Returns:
            List of ActivityEvent, newest first as returned by the API

        Raises:
            GitHubClientError: If the API request fails
        """
        not_found = f"User '{username}' not found on GitHub."
        if include_private:
            path, per_page = f"/users/{username}/events", 30
        else:
            path, per_page = f"/users/{username}/events/public", 20

        events = self._get(path, params={"per_page": per_page}, not_found=not_found)
        return parse_activity_events(events)

    def get_pull_requests(self, username: str, per_page: int = 20) -> list[PullRequest]:
        """
        Fetch pull requests authored by the user.

        Open pull requests are returned when there are any, otherwise the most
        recently closed ones. Each carries its review decision and the number
        of approving and change-requesting reviews.

        Args:
            username: GitHub login
            per_page: Maximum number of pull requests to return (max 100)

        Returns:
            List of PullRequest, most recently updated first

        Raises:
            GitHubClientError: If the API request fails
        """
        nodes = self._search_pull_requests(username, "open", per_page)
        if not nodes:
            nodes = self._search_pull_requests(username, "closed", per_page)

        return [_parse_pull_request(node) for node in nodes]

    def _search_pull_requests(self, username: str, state: str, per_page: int) -> list[dict]:
        variables = {
            "query": f"is:pr author:{username} state:{state} sort:updated-desc",
            "first": min(per_page, 100),
        }
        data = self._graphql(PULL_REQUESTS_QUERY, variables)
        # Non-PR nodes come back as empty objects
        return [node for node in (data.get("search") or {}).get("nodes", []) if node]

    def _fetch_raw_repositories(self, username: str, include_private: bool) -> list[dict]:
        if include_private:
            path = "/user/repos"
            params = {"affiliation": "owner,collaborator,organization_member"}
        else:
            path = f"/users/{username}/repos"
            params = {}

        repos = []
        page = 1
        while True:
            batch = self._get(path, params={**params, "per_page": PAGE_SIZE, "page": page})
            repos.extend(batch)
            # A short page is the last page
            if len(batch) < PAGE_SIZE:
                break
            page += 1
        return repos


def fetch_dashboard_data(
    client: GitHubClient,
    username: str,
    is_own_profile: bool = False,
    public_only: bool = False,
) -> DashboardData:
    """
    Fetch every data set the dashboard shows, concurrently.

    Private data is requested only when viewing the authenticated user's own
    profile and public_only is off.

    Args:
        client: Configured GitHub client
        username: GitHub login to show
        is_own_profile: Whether username is the token's owner
        public_only: Restrict an own-profile view to public data

    Returns:
        DashboardData for the user

    Raises:
        GitHubClientError: If any request fails
    """
    include_private = is_own_profile and not public_only

    with ThreadPoolExecutor(max_workers=6) as executor:
        profile = executor.submit(client.get_profile, username, include_private)
        contributions = executor.submit(client.get_contributions, username)
        languages = executor.submit(client.get_languages, username, include_private)
        repositories = executor.submit(client.get_top_repositories, username, include_private)
        activities = executor.submit(client.get_recent_activity, username, include_private)
        pull_requests = executor.submit(client.get_pull_requests, username)

        top_languages, repo_count = languages.result()
        data = DashboardData(
            username=username,
            profile=profile.result(),
            contributions=contributions.result(),
            languages=top_languages,
            repo_count=repo_count,
            repositories=repositories.result(),
            activities=activities.result(),
            pull_requests=pull_requests.result(),
            is_own_profile=is_own_profile,
            public_only=public_only,
        )

    logger.info(
        "Fetched %d contribution days and %d events for %s",
        len(data.contributions), len(data.activities), username,
    )
    return data


def resolve_username(client: GitHubClient, requested: str | None) -> tuple[str, bool]:
    """
    Decide which user to show and whether it is the token's owner.

    Args:
        client: Configured GitHub client
        requested: Username asked for, or None for the token's owner

    Returns:
        (username, is_own_profile)

    Raises:
        GitHubClientError: If no username was given and the token's owner
            cannot be looked up
    """
    try:
        authenticated = client.get_authenticated_user().login
    except GitHubClientError:
        if not requested:
            raise
        logger.warning("Could not look up the authenticated user, showing public data only")
        return requested, False

    if not requested:
        return authenticated, True
    return requested, requested.lower() == authenticated.lower()
