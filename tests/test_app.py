"""
Tests for the FastAPI web application.
"""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from gitdash.app import app
from gitdash.github_client import GitHubClientError
from gitdash.models import ActivityEvent, Contribution, DashboardData, Profile, Repository


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def dashboard_data():
    """Sample dashboard data for testing."""
    start = date(2026, 1, 4)
    pushed = datetime(2026, 1, 20, 10, 0, tzinfo=timezone.utc)
    return DashboardData(
        username="octo",
        profile=Profile(login="octo", name="The Octocat"),
        contributions=[Contribution(start + timedelta(days=i), i % 3) for i in range(6)],
        repo_count=1,
        repositories=[Repository(name="hello-world", stars=5)],
        activities=[
            ActivityEvent("PushEvent", pushed - timedelta(days=2), True, "octo/hello-world"),
            ActivityEvent("PushEvent", pushed, True, "octo/hello-world"),
        ],
    )


class TestHealthEndpoint:
    """Tests for the /health endpoint."""

    def test_health_returns_ok(self, client):
        """Health endpoint should return status ok."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestDashboardEndpoint:
    """Tests for the /api/dashboard endpoint."""

    @patch("gitdash.app.fetch_dashboard_data")
    @patch("gitdash.app.resolve_username", return_value=("octo", True))
    @patch("gitdash.app.GitHubClient")
    @patch("gitdash.app.validate_config")
    def test_dashboard_returns_expected_structure(
        self, mock_validate, mock_github_client, mock_resolve, mock_fetch, client, dashboard_data
    ):
        """Dashboard endpoint should return JSON with expected structure."""
        mock_fetch.return_value = dashboard_data

        response = client.get("/api/dashboard?username=octo&granularity=day&window=month")

        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "octo"
        assert data["profile"]["name"] == "The Octocat"
        # counts 0, 1, 2, 0, 1, 2
        assert data["stats"] == {
            "total": 6,
            "active_days": 4,
            "total_days": 6,
            "average_per_day": 1,
            "max_day": 2,
        }
        assert data["streak"]["longest"] == 2
        assert data["activity"]["push_rate"] == pytest.approx(1.0)
        assert data["activity"]["granularity"] == "day"
        assert data["activity"]["window"] == "month"
        assert data["repositories"][0]["name"] == "hello-world"
        assert data["repo_count"] == 1

    @patch("gitdash.app.validate_config", side_effect=ValueError("Missing required configuration: GITHUB_TOKEN"))
    def test_dashboard_handles_config_error(self, mock_validate, client):
        """Dashboard endpoint should return 500 on config error."""
        response = client.get("/api/dashboard")

        assert response.status_code == 500
        assert "Configuration error" in response.json()["detail"]

    @patch("gitdash.app.fetch_dashboard_data", side_effect=GitHubClientError("API rate limit exceeded"))
    @patch("gitdash.app.resolve_username", return_value=("octo", False))
    @patch("gitdash.app.GitHubClient")
    @patch("gitdash.app.validate_config")
    def test_dashboard_handles_github_error(
        self, mock_validate, mock_github_client, mock_resolve, mock_fetch, client
    ):
        """Dashboard endpoint should return 502 on GitHub API error."""
        response = client.get("/api/dashboard?username=octo")

        assert response.status_code == 502
        assert "rate limit" in response.json()["detail"]

    @patch("gitdash.app.validate_config")
    def test_dashboard_rejects_unknown_granularity(self, mock_validate, client):
        response = client.get("/api/dashboard?granularity=decade")

        assert response.status_code == 422


class TestCalendarEndpoint:
    """Tests for the /api/calendar endpoint."""

    @patch("gitdash.app.resolve_username", return_value=("octo", False))
    @patch("gitdash.app.GitHubClient")
    @patch("gitdash.app.validate_config")
    def test_calendar_plain_text(self, mock_validate, mock_github_client, mock_resolve, client, dashboard_data):
        mock_github_client.return_value.get_contributions.return_value = dashboard_data.contributions

        response = client.get("/api/calendar?username=octo&width=120")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "Contribution Activity" in response.text
        assert "\x1b[" not in response.text

    @patch("gitdash.app.resolve_username", return_value=("octo", False))
    @patch("gitdash.app.GitHubClient")
    @patch("gitdash.app.validate_config")
    def test_calendar_narrow_width(self, mock_validate, mock_github_client, mock_resolve, client):
        mock_github_client.return_value.get_contributions.return_value = []

        response = client.get("/api/calendar?width=80")

        assert response.status_code == 200
        assert "Need 108 columns, have 80" in response.text

    @patch("gitdash.app.resolve_username", return_value=("octo", False))
    @patch("gitdash.app.GitHubClient")
    @patch("gitdash.app.validate_config")
    def test_calendar_github_error(self, mock_validate, mock_github_client, mock_resolve, client):
        mock_github_client.return_value.get_contributions.side_effect = GitHubClientError("GraphQL error: nope")

        response = client.get("/api/calendar?username=octo")

        assert response.status_code == 502


class TestIndexPage:
    """Tests for the HTML dashboard page."""

    @patch("gitdash.app.fetch_dashboard_data")
    @patch("gitdash.app.resolve_username", return_value=("octo", False))
    @patch("gitdash.app.GitHubClient", return_value=MagicMock())
    @patch("gitdash.app.validate_config")
    def test_index_renders(self, mock_validate, mock_github_client, mock_resolve, mock_fetch, client, dashboard_data):
        mock_fetch.return_value = dashboard_data

        response = client.get("/?theme=dracula")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "The Octocat" in response.text
        assert "Contribution Activity" in response.text
        assert "hello-world" in response.text
        assert "#282a36" in response.text  # dracula background
