"""
GitHub API client for the GitHub Repo Tracker.

This module provides a read-only GitHub REST client with optional token
authentication and error classification for the polling engine.
"""

import asyncio
from datetime import datetime
from typing import Any

import httpx
import structlog

from .config import Settings, is_well_formed_github_token
from .exceptions import (
    GitHubAPIError,
    NotFoundError,
    RateLimitError,
    UnauthorizedError,
)
from .models import (
    GitHubIssue,
    GitHubPullRequest,
    GitHubRelease,
    GitHubRepo,
    RepoActivity,
)

logger = structlog.get_logger(__name__)

USER_AGENT = "GitHub-Repo-Tracker"
API_VERSION = "2022-11-28"
PAGE_SIZE = 100


class GitHubClient:
    """
    GitHub REST API client.

    All methods are pure reads. Failures surface as NotFoundError,
    UnauthorizedError, RateLimitError, or GitHubAPIError.
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the GitHub client.

        Args:
            settings: Application settings
            transport: Optional httpx transport, used by tests
        """
        self.settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.github_api_url,
            headers=self._build_headers(settings.github_token),
            timeout=settings.github_request_timeout,
            transport=transport,
        )

    @staticmethod
    def _build_headers(token: str | None) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": USER_AGENT,
        }

        # Only send credentials that look like a real token
        if is_well_formed_github_token(token):
            headers["Authorization"] = f"Bearer {token}"
        elif token:
            logger.warning("Ignoring malformed GitHub token")

        return headers

    @property
    def is_authenticated(self) -> bool:
        """Check if requests carry an Authorization header."""
        return "Authorization" in self._client.headers

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Issue a GET request and classify failures."""
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error("GitHub request failed", path=path, error=str(e))
            raise GitHubAPIError(f"GitHub request failed: {e}") from e

        if response.is_success:
            return response.json()

        raise self._classify_error(path, response)

    @staticmethod
    def _classify_error(path: str, response: httpx.Response) -> Exception:
        """Map an unsuccessful response onto the error taxonomy."""
        status = response.status_code
        try:
            body = response.json()
        except ValueError:
            body = None

        # Proxies may answer with non-object JSON
        if isinstance(body, dict) and body.get("message"):
            message = str(body["message"])
        else:
            message = response.text or "GitHub API Error"

        context = {"path": path, "status_code": status}

        if status == 404:
            return NotFoundError(message, context)
        if status == 401:
            return UnauthorizedError(message, context)

        remaining = response.headers.get("x-ratelimit-remaining")
        is_rate_limited = (
            status == 429
            or (status == 403 and "rate limit" in message.lower())
            or (status == 403 and remaining == "0")
        )
        if is_rate_limited:
            reset = response.headers.get("x-ratelimit-reset")
            logger.warning(
                "GitHub rate limit reached",
                path=path,
                status_code=status,
                reset=reset,
            )
            return RateLimitError(
                message,
                reset_time=float(reset) if reset and reset.isdigit() else None,
                context=context,
            )

        return GitHubAPIError(message, status_code=status, context=context)

    async def get_repository(self, owner: str, repo: str) -> GitHubRepo:
        """
        Get repository metadata.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            Repository metadata
        """
        data = await self._get(f"/repos/{owner}/{repo}")
        return GitHubRepo.model_validate(data)

    async def get_issues(
        self, owner: str, repo: str, since: datetime | None = None
    ) -> list[GitHubIssue]:
        """
        Get issues, newest first, excluding pull requests.

        The ``since`` filter is applied by GitHub and matches issues
        *updated* at or after that time, not only newly created ones.

        Args:
            owner: Repository owner
            repo: Repository name
            since: Optional lower bound on update time

        Returns:
            List of issues
        """
        params: dict[str, Any] = {
            "state": "all",
            "sort": "created",
            "direction": "desc",
            "per_page": PAGE_SIZE,
        }
        if since:
            params["since"] = since.isoformat()

        data = await self._get(f"/repos/{owner}/{repo}/issues", params)

        # The issues endpoint also returns pull requests
        return [
            GitHubIssue.model_validate(item)
            for item in data
            if "pull_request" not in item
        ]

    async def get_pull_requests(
        self, owner: str, repo: str, since: datetime | None = None
    ) -> list[GitHubPullRequest]:
        """
        Get pull requests, newest first.

        Args:
            owner: Repository owner
            repo: Repository name
            since: Optional bound; only PRs created strictly after it are kept

        Returns:
            List of pull requests
        """
        params = {
            "state": "all",
            "sort": "created",
            "direction": "desc",
            "per_page": PAGE_SIZE,
        }
        data = await self._get(f"/repos/{owner}/{repo}/pulls", params)
        pulls = [GitHubPullRequest.model_validate(item) for item in data]

        if since:
            return [pr for pr in pulls if pr.created_at > since]
        return pulls

    async def get_releases(self, owner: str, repo: str) -> list[GitHubRelease]:
        """Get the most recent releases."""
        data = await self._get(
            f"/repos/{owner}/{repo}/releases", {"per_page": PAGE_SIZE}
        )
        return [GitHubRelease.model_validate(item) for item in data]

    async def get_repo_activity(
        self, owner: str, repo: str, last_checked: datetime | None = None
    ) -> RepoActivity:
        """
        Collect the activity of a repository since the last check.

        Args:
            owner: Repository owner
            repo: Repository name
            last_checked: Time of the previous successful check, if any

        Returns:
            RepoActivity with ``star_count_change`` left at 0
        """
        repo_data, issues, pulls, releases = await asyncio.gather(
            self.get_repository(owner, repo),
            self.get_issues(owner, repo, last_checked),
            self.get_pull_requests(owner, repo, last_checked),
            self.get_releases(owner, repo),
        )

        if last_checked:
            releases = [r for r in releases if r.created_at > last_checked]

        logger.debug(
            "Fetched repository activity",
            repository=repo_data.full_name,
            issues=len(issues),
            pull_requests=len(pulls),
            releases=len(releases),
        )

        return RepoActivity(
            repo=repo_data,
            new_issues=issues,
            new_prs=pulls,
            new_releases=releases,
            star_count_change=0,
        )
