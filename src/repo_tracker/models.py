"""
Data models for the GitHub Repo Tracker.

GitHub payloads are parsed into Pydantic models that ignore unknown fields;
users and tracked repositories serialize with the camelCase names the HTTP
API exposes.
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def _new_id() -> str:
    return uuid4().hex


class GitHubUser(BaseModel):
    """Author of an issue, pull request, or release."""

    model_config = ConfigDict(extra="ignore")

    login: str
    avatar_url: str = ""


class GitHubRepo(BaseModel):
    """Repository metadata returned by ``GET /repos/{owner}/{repo}``."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    full_name: str
    description: str | None = None
    stargazers_count: int = 0
    open_issues_count: int = 0
    forks_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    html_url: str = ""


class GitHubIssue(BaseModel):
    """An issue as returned by the issues endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: int
    number: int
    title: str
    body: str | None = None
    state: str = "open"
    created_at: datetime
    updated_at: datetime | None = None
    html_url: str = ""
    user: GitHubUser


class GitHubPullRequest(GitHubIssue):
    """A pull request as returned by the pulls endpoint."""


class GitHubRelease(BaseModel):
    """A release as returned by the releases endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: int
    tag_name: str
    name: str | None = None
    body: str | None = None
    created_at: datetime
    published_at: datetime | None = None
    html_url: str = ""
    author: GitHubUser


class RepoActivity(BaseModel):
    """Activity observed for one repository during one poll cycle."""

    repo: GitHubRepo
    new_issues: list[GitHubIssue] = Field(default_factory=list)
    new_prs: list[GitHubPullRequest] = Field(default_factory=list)
    new_releases: list[GitHubRelease] = Field(default_factory=list)
    star_count_change: int = 0


class User(BaseModel):
    """A notification recipient, identified by email."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    email: str
    created_at: datetime = Field(
        default_factory=utc_now, serialization_alias="createdAt"
    )


class NotificationPreferences(BaseModel):
    """Per-channel notification switches."""

    model_config = ConfigDict(populate_by_name=True)

    notify_issues: bool = Field(default=True, alias="notifyIssues")
    notify_stars: bool = Field(default=True, alias="notifyStars")
    notify_prs: bool = Field(default=True, alias="notifyPRs")
    notify_releases: bool = Field(default=True, alias="notifyReleases")


class PreferenceUpdate(BaseModel):
    """Partial change to the notification switches; omitted switches keep their value."""

    model_config = ConfigDict(populate_by_name=True)

    notify_issues: bool | None = Field(default=None, alias="notifyIssues")
    notify_stars: bool | None = Field(default=None, alias="notifyStars")
    notify_prs: bool | None = Field(default=None, alias="notifyPRs")
    notify_releases: bool | None = Field(default=None, alias="notifyReleases")

    def changes(self) -> dict[str, bool]:
        """Switches that were given a value."""
        return self.model_dump(include=set(PreferenceUpdate.model_fields), exclude_none=True)


class RepoStats(BaseModel):
    """Counters written back after a successful repository check."""

    last_issue_count: int
    last_star_count: int
    last_pr_count: int
    last_release_count: int


class TrackedRepo(BaseModel):
    """A (user, repository) registration with preferences and counters."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    repo_name: str = Field(alias="repoName")
    user_id: str = Field(alias="userId")
    notify_issues: bool = Field(default=True, alias="notifyIssues")
    notify_stars: bool = Field(default=True, alias="notifyStars")
    notify_prs: bool = Field(default=True, alias="notifyPRs")
    notify_releases: bool = Field(default=True, alias="notifyReleases")
    last_issue_count: int = Field(default=0, alias="lastIssueCount")
    last_star_count: int = Field(default=0, alias="lastStarCount")
    last_pr_count: int = Field(default=0, alias="lastPRCount")
    last_release_count: int = Field(default=0, alias="lastReleaseCount")
    last_checked_at: datetime | None = Field(default=None, alias="lastCheckedAt")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")

    def to_response(self) -> dict:
        """Serialize with the field names used by the HTTP API."""
        return self.model_dump(mode="json", by_alias=True, exclude={"user"})


class TrackedRepoWithUser(TrackedRepo):
    """A tracked repository joined with its owning user."""

    user: User
