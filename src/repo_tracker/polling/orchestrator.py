"""
Polling orchestrator for the GitHub Repo Tracker.

This module runs one poll cycle over every tracked repository: it fetches
fresh activity from GitHub in small concurrent batches, diffs it against the
stored counters, persists the new counters, and dispatches notifications.
"""

import asyncio
import time
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, TypeVar

import structlog

from ..activity import diff_activity
from ..config import Settings
from ..exceptions import RateLimitError
from ..github_client import GitHubClient
from ..models import TrackedRepoWithUser, utc_now
from ..notifications import NotificationData, NotificationDispatcher
from ..storage import RepositoryStore
from ..utils import parse_repo_name

logger = structlog.get_logger(__name__)

T = TypeVar("T")

OUTCOME_CHECKED = "checked"
OUTCOME_NOTIFIED = "notified"
OUTCOME_FAILED = "failed"
OUTCOME_SKIPPED = "skipped"


def partition_batches(items: Sequence[T], batch_size: int) -> list[list[T]]:
    """Split items into consecutive batches of at most ``batch_size``."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return [
        list(items[start : start + batch_size])
        for start in range(0, len(items), batch_size)
    ]


@dataclass
class PollingCycleResult:
    """Summary of one poll cycle."""

    total_repos: int = 0
    checked: int = 0
    notified: int = 0
    failed: int = 0
    skipped: int = 0
    batches: int = 0
    duration_seconds: float = 0.0
    already_running: bool = False
    error: str | None = None

    def record(self, outcome: str) -> None:
        if outcome == OUTCOME_NOTIFIED:
            self.checked += 1
            self.notified += 1
        elif outcome == OUTCOME_CHECKED:
            self.checked += 1
        elif outcome == OUTCOME_SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalRepos": self.total_repos,
            "checked": self.checked,
            "notified": self.notified,
            "failed": self.failed,
            "skipped": self.skipped,
            "batches": self.batches,
        }


@dataclass
class PollingStatus:
    """Read-only snapshot of polling cadence."""

    total_repos: int
    last_polled: datetime | None
    next_poll: datetime


class PollingOrchestrator:
    """
    Orchestrates poll cycles across all tracked repositories.

    Batches run one after another; repositories inside a batch are checked
    concurrently. A failing repository is logged and left untouched so the
    next cycle retries it.
    """

    def __init__(
        self,
        github_client: GitHubClient,
        store: RepositoryStore,
        dispatcher: NotificationDispatcher,
        settings: Settings,
    ):
        """
        Initialize the polling orchestrator.

        Args:
            github_client: GitHub API client
            store: Repository store
            dispatcher: Notification dispatcher
            settings: Application settings
        """
        self.github_client = github_client
        self.store = store
        self.dispatcher = dispatcher
        self.settings = settings
        self.config = settings.polling_config

        self.is_running_flag = False

    def is_running(self) -> bool:
        """Check if a poll cycle is in progress."""
        return self.is_running_flag

    async def _delay(self, seconds: float) -> None:
        """Pause the cycle."""
        if seconds > 0:
            await asyncio.sleep(seconds)

    async def check_all_repositories(self) -> PollingCycleResult:
        """
        Run one poll cycle over every tracked repository.

        Never raises; unexpected failures are logged and reported on the
        returned result.

        Returns:
            Summary of the cycle
        """
        result = PollingCycleResult()

        if self.is_running_flag:
            logger.warning("Polling already running, skipping cycle")
            result.already_running = True
            return result

        self.is_running_flag = True
        cycle_start = time.monotonic()
        logger.info("Starting repository polling")

        try:
            tracked_repos = await self.store.get_all_tracked_repos()
            batches = partition_batches(tracked_repos, self.config.batch_size)
            result.total_repos = len(tracked_repos)
            result.batches = len(batches)

            logger.info(
                "Found repositories to check",
                total_repos=len(tracked_repos),
                batches=len(batches),
                batch_size=self.config.batch_size,
            )

            for index, batch in enumerate(batches):
                outcomes = await asyncio.gather(
                    *(self.check_repository(repo) for repo in batch),
                    return_exceptions=True,
                )

                for tracked_repo, outcome in zip(batch, outcomes):
                    if isinstance(outcome, BaseException):
                        logger.error(
                            "Repository check crashed",
                            repository=tracked_repo.repo_name,
                            error=str(outcome),
                        )
                        outcome = OUTCOME_FAILED
                    result.record(outcome)

                # Space out batches to respect GitHub rate limits
                if index < len(batches) - 1:
                    await self._delay(self.config.batch_delay_seconds)

        except Exception as e:
            logger.error("Error during repository polling", error=str(e))
            result.error = str(e)
        finally:
            self.is_running_flag = False

        result.duration_seconds = time.monotonic() - cycle_start
        logger.info(
            "Repository polling completed",
            duration_seconds=result.duration_seconds,
            **result.to_dict(),
        )
        return result

    async def check_repository(self, tracked_repo: TrackedRepoWithUser) -> str:
        """
        Check one repository for new activity.

        Args:
            tracked_repo: Tracked repository joined with its owner

        Returns:
            One of "checked", "notified", "failed" or "skipped"
        """
        repo_ref = parse_repo_name(tracked_repo.repo_name)
        if repo_ref is None:
            logger.error(
                "Invalid repository name",
                repository=tracked_repo.repo_name,
                tracked_repo_id=tracked_repo.id,
            )
            return OUTCOME_SKIPPED

        logger.debug("Checking repository", repository=tracked_repo.repo_name)

        try:
            activity = await self.github_client.get_repo_activity(
                repo_ref.owner, repo_ref.repo, tracked_repo.last_checked_at
            )
        except RateLimitError as e:
            logger.warning(
                "GitHub API rate limit reached, pausing polling",
                repository=tracked_repo.repo_name,
                cooldown_seconds=self.config.rate_limit_cooldown_seconds,
                error=str(e),
            )
            await self._delay(self.config.rate_limit_cooldown_seconds)
            return OUTCOME_FAILED
        except Exception as e:
            logger.error(
                "Error checking repository",
                repository=tracked_repo.repo_name,
                error=str(e),
            )
            return OUTCOME_FAILED

        diff = diff_activity(tracked_repo, activity)

        # Counters are written whether or not anything is sent
        try:
            await self.store.update_repo_stats(tracked_repo.id, diff.stats)
        except Exception as e:
            logger.error(
                "Failed to update repository stats",
                repository=tracked_repo.repo_name,
                error=str(e),
            )
            return OUTCOME_FAILED

        if not diff.has_new_activity:
            logger.debug("No new activity", repository=tracked_repo.repo_name)
            return OUTCOME_CHECKED

        logger.info(
            "New activity found, sending notifications",
            repository=tracked_repo.repo_name,
            channels=diff.channels,
            star_count_change=activity.star_count_change,
        )

        await self.dispatcher.dispatch(
            NotificationData(
                user=tracked_repo.user,
                tracked_repo=tracked_repo,
                activity=activity,
            )
        )
        return OUTCOME_NOTIFIED

    async def get_polling_status(self) -> PollingStatus:
        """
        Get the polling cadence derived from stored check times.

        Returns:
            Total repositories, latest check time, and expected next poll
        """
        tracked_repos = await self.store.get_all_tracked_repos()

        checked_times = [
            repo.last_checked_at for repo in tracked_repos if repo.last_checked_at
        ]
        last_polled = max(checked_times) if checked_times else None

        next_poll = (
            last_polled + timedelta(minutes=self.config.interval_minutes)
            if last_polled
            else utc_now()
        )

        return PollingStatus(
            total_repos=len(tracked_repos),
            last_polled=last_polled,
            next_poll=next_poll,
        )
