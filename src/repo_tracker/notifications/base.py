"""
Base notification channel abstract class.

This module defines the interface that all notification channels must implement.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..activity import (
    CHANNEL_ISSUES,
    CHANNEL_PULL_REQUESTS,
    CHANNEL_RELEASES,
    CHANNEL_STARS,
    active_channels,
)
from ..models import RepoActivity, TrackedRepo, User


@dataclass
class NotificationData:
    """Everything a channel needs to describe new activity to a user."""

    user: User
    tracked_repo: TrackedRepo
    activity: RepoActivity


def build_summary_lines(data: NotificationData) -> list[str]:
    """
    Summarize the activity the user opted into.

    Re-applies the per-channel gating so that channels never assume the
    caller already filtered.

    Args:
        data: Notification payload

    Returns:
        One line per firing channel, empty if there is nothing to send
    """
    activity = data.activity
    counts = {
        CHANNEL_ISSUES: f"📝 {len(activity.new_issues)} new issue(s)",
        CHANNEL_PULL_REQUESTS: f"🔄 {len(activity.new_prs)} new pull request(s)",
        CHANNEL_RELEASES: f"🚀 {len(activity.new_releases)} new release(s)",
        CHANNEL_STARS: f"⭐ {activity.star_count_change} new star(s)",
    }
    return [counts[channel] for channel in active_channels(data.tracked_repo, activity)]


class NotificationChannel(ABC):
    """
    Abstract base class for notification channels.

    A channel that is not configured must treat ``send`` as a no-op.
    """

    name: str = ""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """
        Check if the channel has the credentials it needs.

        Returns:
            True if the channel can deliver messages
        """
        pass

    @abstractmethod
    async def send(self, data: NotificationData) -> bool:
        """
        Deliver a notification.

        Args:
            data: Notification payload

        Returns:
            True if a message was sent, False if there was nothing to send
            or the channel is not configured

        Raises:
            NotificationError: If delivery failed
        """
        pass

    async def aclose(self) -> None:
        """Release any resources held by the channel."""
        return None
