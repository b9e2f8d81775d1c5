"""
Telegram Bot API notification channel.

Posts a Markdown activity summary to a configured bot chat.
"""

import httpx
import structlog

from ..config import NotificationConfig
from ..exceptions import NotificationError
from .base import NotificationChannel, NotificationData, build_summary_lines

logger = structlog.get_logger(__name__)


# Characters with meaning in Telegram's legacy Markdown parse mode
MARKDOWN_SPECIAL_CHARS = ("\\", "_", "*", "`", "[")


def escape_markdown(text: str) -> str:
    """Escape text so Telegram renders it literally outside of entities."""
    for char in MARKDOWN_SPECIAL_CHARS:
        text = text.replace(char, f"\\{char}")
    return text


def render_telegram_message(data: NotificationData, summary: list[str]) -> str:
    """Render the Markdown text of an activity alert."""
    repo = data.activity.repo
    return (
        "🔔 *GitHub Activity Alert*\n\n"
        f"Repository: [{escape_markdown(repo.full_name)}]({repo.html_url})\n\n"
        + "\n".join(escape_markdown(line) for line in summary)
        + f"\n\nCheck it out: {escape_markdown(repo.html_url)}"
    )


class TelegramNotificationChannel(NotificationChannel):
    """Notification channel that sends messages via the Telegram Bot API."""

    name = "telegram"

    def __init__(
        self,
        config: NotificationConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.telegram_api_url,
            timeout=config.request_timeout,
            transport=transport,
        )

    def _endpoint(self) -> str:
        return f"/bot{self.config.telegram_bot_token}/sendMessage"

    @property
    def is_configured(self) -> bool:
        return self.config.telegram_enabled

    async def send(self, data: NotificationData) -> bool:
        if not self.is_configured:
            logger.debug("Telegram bot credentials not configured, skipping")
            return False

        summary = build_summary_lines(data)
        if not summary:
            return False

        repo_name = data.activity.repo.full_name
        payload = {
            "chat_id": self.config.telegram_chat_id,
            "text": render_telegram_message(data, summary),
            "parse_mode": "Markdown",
            "disable_web_page_preview": False,
        }

        try:
            response = await self._client.post(self._endpoint(), json=payload)
        except httpx.HTTPError as e:
            raise NotificationError(
                f"Telegram request failed: {e}", channel=self.name
            ) from e

        if not response.is_success:
            raise NotificationError(
                f"Telegram API error {response.status_code}: {response.text}",
                channel=self.name,
                context={"repository": repo_name},
            )

        logger.info("Telegram notification sent", repository=repo_name)
        return True

    async def aclose(self) -> None:
        await self._client.aclose()
