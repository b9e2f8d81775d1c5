"""
Notification dispatcher.

Fans a notification out to every channel, keeping each channel's failure
away from the others.
"""

from collections.abc import Sequence

import structlog

from ..config import Settings
from .base import NotificationChannel, NotificationData
from .email import EmailNotificationChannel
from .telegram import TelegramNotificationChannel

logger = structlog.get_logger(__name__)

OUTCOME_SENT = "sent"
OUTCOME_SKIPPED = "skipped"
OUTCOME_FAILED = "failed"


class NotificationDispatcher:
    """
    Delivers activity notifications over all channels.

    Channels that are not configured silently skip; a failing channel is
    logged and never prevents the remaining channels from running.
    """

    def __init__(self, channels: Sequence[NotificationChannel]):
        """
        Initialize the dispatcher.

        Args:
            channels: Channels to deliver through, in order
        """
        self.channels = list(channels)

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotificationDispatcher":
        """Build a dispatcher with the email and Telegram channels."""
        config = settings.notification_config
        channels: list[NotificationChannel] = [
            EmailNotificationChannel(config),
            TelegramNotificationChannel(config),
        ]

        logger.info(
            "Notification channels initialized",
            configured=[c.name for c in channels if c.is_configured],
        )
        return cls(channels)

    async def dispatch(self, data: NotificationData) -> dict[str, str]:
        """
        Send a notification through every channel.

        Args:
            data: Notification payload

        Returns:
            Mapping of channel name to "sent", "skipped" or "failed"
        """
        outcomes: dict[str, str] = {}
        repo_name = data.tracked_repo.repo_name

        for channel in self.channels:
            try:
                sent = await channel.send(data)
                outcomes[channel.name] = OUTCOME_SENT if sent else OUTCOME_SKIPPED
            except Exception as e:
                outcomes[channel.name] = OUTCOME_FAILED
                logger.error(
                    "Failed to send notification",
                    channel=channel.name,
                    repository=repo_name,
                    error=str(e),
                )

        return outcomes

    async def aclose(self) -> None:
        """Close every channel."""
        for channel in self.channels:
            await channel.aclose()
