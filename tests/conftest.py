"""
Pytest configuration and fixtures for GitHub Repo Tracker tests.
"""

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import pytest

from repo_tracker.config import Settings
from repo_tracker.github_client import GitHubClient
from repo_tracker.models import (
    GitHubIssue,
    GitHubPullRequest,
    GitHubRelease,
    GitHubRepo,
    RepoActivity,
)
from repo_tracker.notifications import NotificationDispatcher
from repo_tracker.storage import InMemoryRepositoryStore


@pytest.fixture
def mock_settings() -> Settings:
    """Settings with no credentials and no waits."""
    return Settings(
        _env_file=None,
        github_token="",
        cron_secret="",
        resend_api_key="",
        telegram_bot_token="",
        telegram_chat_id="",
        polling_batch_delay_seconds=0,
        polling_rate_limit_cooldown_seconds=0,
        log_level="DEBUG",
        log_format="console",
    )


@pytest.fixture
def store() -> InMemoryRepositoryStore:
    """Empty in-memory repository store."""
    return InMemoryRepositoryStore()


@pytest.fixture
def mock_github_client() -> AsyncMock:
    """Mock GitHub client for testing."""
    return AsyncMock(spec=GitHubClient)


@pytest.fixture
def mock_dispatcher() -> AsyncMock:
    """Mock notification dispatcher for testing."""
    dispatcher = AsyncMock(spec=NotificationDispatcher)
    dispatcher.dispatch.return_value = {"email": "sent", "telegram": "skipped"}
    return dispatcher


@pytest.fixture
def sample_repo_data() -> dict[str, Any]:
    """Sample repository payload."""
    return {
        "id": 10270250,
        "name": "react",
        "full_name": "facebook/react",
        "description": "The library for web and native user interfaces.",
        "stargazers_count": 100,
        "open_issues_count": 12,
        "forks_count": 40,
        "created_at": "2013-05-24T16:15:54Z",
        "updated_at": "2024-01-15T10:00:00Z",
        "html_url": "https://github.com/facebook/react",
        "private": False,
    }


@pytest.fixture
def sample_issue_data() -> dict[str, Any]:
    """Sample issue payload."""
    return {
        "id": 1,
        "number": 101,
        "title": "Crash when rendering portals",
        "body": "Steps to reproduce...",
        "state": "open",
        "created_at": "2024-01-15T10:00:00Z",
        "updated_at": "2024-01-15T10:00:00Z",
        "html_url": "https://github.com/facebook/react/issues/101",
        "user": {"login": "octocat", "avatar_url": ""},
    }


@pytest.fixture
def sample_pr_data() -> dict[str, Any]:
    """Sample pull request payload."""
    return {
        "id": 2,
        "number": 102,
        "title": "Fix portal rendering",
        "body": None,
        "state": "open",
        "created_at": "2024-01-15T11:00:00Z",
        "updated_at": "2024-01-15T11:00:00Z",
        "html_url": "https://github.com/facebook/react/pull/102",
        "user": {"login": "hubot", "avatar_url": ""},
    }


@pytest.fixture
def sample_release_data() -> dict[str, Any]:
    """Sample release payload."""
    return {
        "id": 3,
        "tag_name": "v19.0.0",
        "name": "React 19",
        "body": "Release notes",
        "created_at": "2024-01-15T12:00:00Z",
        "published_at": "2024-01-15T12:30:00Z",
        "html_url": "https://github.com/facebook/react/releases/tag/v19.0.0",
        "author": {"login": "release-bot", "avatar_url": ""},
    }


@pytest.fixture
def make_activity(
    sample_repo_data: dict[str, Any],
    sample_issue_data: dict[str, Any],
    sample_pr_data: dict[str, Any],
    sample_release_data: dict[str, Any],
) -> Callable[..., RepoActivity]:
    """Factory for RepoActivity snapshots."""

    def _make(
        stars: int = 100,
        open_issues: int = 12,
        issues: int = 0,
        prs: int = 0,
        releases: int = 0,
        full_name: str = "facebook/react",
    ) -> RepoActivity:
        repo = GitHubRepo.model_validate(
            {
                **sample_repo_data,
                "full_name": full_name,
                "stargazers_count": stars,
                "open_issues_count": open_issues,
            }
        )
        return RepoActivity(
            repo=repo,
            new_issues=[
                GitHubIssue.model_validate({**sample_issue_data, "number": n})
                for n in range(issues)
            ],
            new_prs=[
                GitHubPullRequest.model_validate({**sample_pr_data, "number": n})
                for n in range(prs)
            ],
            new_releases=[
                GitHubRelease.model_validate(
                    {**sample_release_data, "tag_name": f"v{n}.0.0"}
                )
                for n in range(releases)
            ],
        )

    return _make
