"""
Repository registration flow for the GitHub Repo Tracker.

Handles the user-facing operations behind the repository endpoints: start
tracking, list, change notification preferences, and stop tracking.
"""

import structlog

from .exceptions import (
    ConflictError,
    NotFoundError,
    RepoNameValidationError,
    UnauthorizedError,
)
from .github_client import GitHubClient
from .models import NotificationPreferences, PreferenceUpdate, TrackedRepo
from .storage import RepositoryStore
from .utils import parse_repo_name

logger = structlog.get_logger(__name__)


class RegistrationService:
    """
    User-facing registration operations.

    Errors are raised from the exceptions module so the HTTP layer can map
    each one to a status code.
    """

    def __init__(self, github_client: GitHubClient, store: RepositoryStore):
        """
        Initialize the registration service.

        Args:
            github_client: GitHub API client used for existence checks
            store: Repository store
        """
        self.github_client = github_client
        self.store = store

    async def add_tracked_repo(
        self,
        email: str | None,
        repo_name: str | None,
        preferences: NotificationPreferences | None = None,
    ) -> TrackedRepo:
        """
        Start tracking a repository for the user with this email.

        Args:
            email: User email address
            repo_name: Repository full name (owner/repo)
            preferences: Notification switches, all enabled by default

        Returns:
            The new tracked repository

        Raises:
            RepoNameValidationError: Missing input or malformed name
            ConflictError: The user already tracks this repository
            NotFoundError: The repository does not exist on GitHub
        """
        if not repo_name or not email:
            raise RepoNameValidationError("Repository name and email are required")

        repo_ref = parse_repo_name(repo_name)
        if repo_ref is None:
            raise RepoNameValidationError(
                'Repository name must be in format "owner/repo"',
                context={"repo_name": repo_name},
            )

        preferences = preferences or NotificationPreferences()
        user = await self.store.get_or_create_user(email)

        if await self.store.find_tracked_repo(user.id, repo_name):
            raise ConflictError(
                "Repository is already being tracked",
                context={"repo_name": repo_name},
            )

        try:
            await self.github_client.get_repository(repo_ref.owner, repo_ref.repo)
        except NotFoundError as e:
            raise NotFoundError(
                "Repository not found on GitHub", context={"repo_name": repo_name}
            ) from e
        except UnauthorizedError:
            logger.warning(
                "GitHub API credentials not configured properly, "
                "skipping repository validation",
                repository=repo_name,
            )

        tracked_repo = await self.store.create_tracked_repo(
            user_id=user.id,
            repo_name=repo_name,
            notify_issues=preferences.notify_issues,
            notify_stars=preferences.notify_stars,
            notify_prs=preferences.notify_prs,
            notify_releases=preferences.notify_releases,
        )

        logger.info(
            "Repository tracked",
            repository=repo_name,
            tracked_repo_id=tracked_repo.id,
        )
        return tracked_repo

    async def list_tracked_repos(self, email: str | None) -> list[TrackedRepo]:
        """Get the repositories tracked by a user, newest first."""
        if not email:
            raise RepoNameValidationError("Email parameter is required")

        user = await self.store.find_user_by_email(email)
        if user is None:
            return []
        return await self.store.get_tracked_repos(user.id)

    async def update_preferences(
        self, repo_id: str, email: str | None, update: PreferenceUpdate
    ) -> TrackedRepo:
        """
        Change the notification switches of a tracked repository.

        Switches left unset in ``update`` keep their stored value.

        Raises:
            RepoNameValidationError: Missing email
            NotFoundError: No such repository owned by this user
        """
        tracked_repo = await self._get_owned(repo_id, email)
        return await self.store.update_tracked_repo(
            tracked_repo.id, **update.changes()
        )

    async def remove_tracked_repo(self, repo_id: str, email: str | None) -> TrackedRepo:
        """
        Stop tracking a repository.

        Raises:
            RepoNameValidationError: Missing email
            NotFoundError: No such repository owned by this user
        """
        if not email:
            raise RepoNameValidationError("Email parameter is required")

        user = await self.store.find_user_by_email(email)
        if user is None:
            raise NotFoundError("Tracked repository not found")

        removed = await self.store.remove_tracked_repo(repo_id, user.id)
        logger.info(
            "Repository untracked", repository=removed.repo_name, tracked_repo_id=repo_id
        )
        return removed

    async def _get_owned(self, repo_id: str, email: str | None) -> TrackedRepo:
        if not email:
            raise RepoNameValidationError("Email is required")

        user = await self.store.find_user_by_email(email)
        if user is not None:
            for tracked_repo in await self.store.get_tracked_repos(user.id):
                if tracked_repo.id == repo_id:
                    return tracked_repo

        raise NotFoundError(
            "Tracked repository not found", context={"repo_id": repo_id}
        )
