"""
Repository storage abstraction for the GitHub Repo Tracker.

Holds users and tracked repositories. The poller and the registration flow
only depend on the abstract RepositoryStore; InMemoryRepositoryStore is the
bundled backend.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from ..exceptions import ConflictError, NotFoundError
from ..models import (
    RepoStats,
    TrackedRepo,
    TrackedRepoWithUser,
    User,
    utc_now,
)

logger = logging.getLogger(__name__)

# Fields that may be changed after a tracked repository is created
MUTABLE_FIELDS = frozenset(
    {
        "notify_issues",
        "notify_stars",
        "notify_prs",
        "notify_releases",
        "last_issue_count",
        "last_star_count",
        "last_pr_count",
        "last_release_count",
        "last_checked_at",
    }
)


class RepositoryStore(ABC):
    """Abstract base class for user and tracked repository storage."""

    @abstractmethod
    async def find_user_by_email(self, email: str) -> User | None:
        """
        Find a user by email.

        Args:
            email: User email address

        Returns:
            User or None if not found
        """
        pass

    @abstractmethod
    async def get_or_create_user(self, email: str) -> User:
        """
        Get the user with this email, creating it on first use.

        Args:
            email: User email address

        Returns:
            Existing or newly created user
        """
        pass

    @abstractmethod
    async def create_tracked_repo(
        self,
        user_id: str,
        repo_name: str,
        notify_issues: bool = True,
        notify_stars: bool = True,
        notify_prs: bool = True,
        notify_releases: bool = True,
    ) -> TrackedRepo:
        """
        Start tracking a repository for a user.

        Raises:
            ConflictError: If the user already tracks this repository
        """
        pass

    @abstractmethod
    async def find_tracked_repo(
        self, user_id: str, repo_name: str
    ) -> TrackedRepo | None:
        """Find a user's registration for a repository."""
        pass

    @abstractmethod
    async def get_tracked_repos(self, user_id: str) -> list[TrackedRepo]:
        """
        Get a user's tracked repositories, newest first.

        Args:
            user_id: Owning user ID

        Returns:
            List of tracked repositories
        """
        pass

    @abstractmethod
    async def get_all_tracked_repos(self) -> list[TrackedRepoWithUser]:
        """
        Get every tracked repository joined with its owner.

        Ordered by last check time ascending, never-checked repositories first.
        """
        pass

    @abstractmethod
    async def update_tracked_repo(self, repo_id: str, **fields: Any) -> TrackedRepo:
        """
        Update mutable fields of a tracked repository.

        Raises:
            NotFoundError: If the repository does not exist
            ValueError: If a field is not mutable
        """
        pass

    @abstractmethod
    async def remove_tracked_repo(self, repo_id: str, user_id: str) -> TrackedRepo:
        """
        Stop tracking a repository on behalf of its owner.

        Raises:
            NotFoundError: If no repository with this ID belongs to the user
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the storage backend is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass

    async def update_repo_stats(
        self, repo_id: str, stats: RepoStats, checked_at: datetime | None = None
    ) -> TrackedRepo:
        """Write counters from a completed check and stamp the check time."""
        return await self.update_tracked_repo(
            repo_id,
            **stats.model_dump(),
            last_checked_at=checked_at or utc_now(),
        )


class InMemoryRepositoryStore(RepositoryStore):
    """In-memory storage backend. Records are lost on restart."""

    def __init__(self) -> None:
        """Initialize in-memory repository store."""
        self.users: dict[str, User] = {}
        self.tracked_repos: dict[str, TrackedRepo] = {}
        self._lock = asyncio.Lock()

    async def find_user_by_email(self, email: str) -> User | None:
        for user in self.users.values():
            if user.email == email:
                return user.model_copy()
        return None

    async def get_or_create_user(self, email: str) -> User:
        async with self._lock:
            existing = await self.find_user_by_email(email)
            if existing:
                return existing

            user = User(email=email)
            self.users[user.id] = user
            logger.info(f"Created user {user.id}")
            return user.model_copy()

    async def create_tracked_repo(
        self,
        user_id: str,
        repo_name: str,
        notify_issues: bool = True,
        notify_stars: bool = True,
        notify_prs: bool = True,
        notify_releases: bool = True,
    ) -> TrackedRepo:
        async with self._lock:
            if await self.find_tracked_repo(user_id, repo_name):
                raise ConflictError(
                    "Repository is already being tracked",
                    context={"user_id": user_id, "repo_name": repo_name},
                )

            tracked_repo = TrackedRepo(
                repo_name=repo_name,
                user_id=user_id,
                notify_issues=notify_issues,
                notify_stars=notify_stars,
                notify_prs=notify_prs,
                notify_releases=notify_releases,
            )
            self.tracked_repos[tracked_repo.id] = tracked_repo
            logger.info(f"Tracking {repo_name} for user {user_id}")
            return tracked_repo.model_copy()

    async def find_tracked_repo(
        self, user_id: str, repo_name: str
    ) -> TrackedRepo | None:
        for tracked_repo in self.tracked_repos.values():
            if tracked_repo.user_id == user_id and tracked_repo.repo_name == repo_name:
                return tracked_repo.model_copy()
        return None

    async def get_tracked_repos(self, user_id: str) -> list[TrackedRepo]:
        repos = [
            tracked_repo.model_copy()
            for tracked_repo in self.tracked_repos.values()
            if tracked_repo.user_id == user_id
        ]
        repos.sort(key=lambda r: r.created_at, reverse=True)
        return repos

    async def get_all_tracked_repos(self) -> list[TrackedRepoWithUser]:
        joined = [
            TrackedRepoWithUser(
                **tracked_repo.model_dump(),
                user=self.users[tracked_repo.user_id].model_copy(),
            )
            for tracked_repo in self.tracked_repos.values()
        ]
        # Never-checked repositories sort first
        joined.sort(
            key=lambda r: (r.last_checked_at is not None, r.last_checked_at or r.created_at)
        )
        return joined

    async def update_tracked_repo(self, repo_id: str, **fields: Any) -> TrackedRepo:
        unknown = set(fields) - MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {sorted(unknown)}")

        tracked_repo = self.tracked_repos.get(repo_id)
        if tracked_repo is None:
            raise NotFoundError(
                "Tracked repository not found", context={"repo_id": repo_id}
            )

        updated = tracked_repo.model_copy(update=fields)
        self.tracked_repos[repo_id] = updated
        logger.debug(f"Updated tracked repository {repo_id}: {sorted(fields)}")
        return updated.model_copy()

    async def remove_tracked_repo(self, repo_id: str, user_id: str) -> TrackedRepo:
        tracked_repo = self.tracked_repos.get(repo_id)
        if tracked_repo is None or tracked_repo.user_id != user_id:
            raise NotFoundError(
                "Tracked repository not found",
                context={"repo_id": repo_id, "user_id": user_id},
            )

        del self.tracked_repos[repo_id]
        logger.info(f"Stopped tracking {tracked_repo.repo_name} for user {user_id}")
        return tracked_repo

    async def health_check(self) -> bool:
        """Check if in-memory storage is healthy (always true for memory)."""
        return True

    def get_memory_stats(self) -> dict[str, Any]:
        """Get record counts."""
        return {
            "users_count": len(self.users),
            "tracked_repos_count": len(self.tracked_repos),
        }
