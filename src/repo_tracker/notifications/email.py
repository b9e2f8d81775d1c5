"""
Email notification channel.

Sends an HTML activity summary through the Resend HTTP API.
"""

from html import escape

import httpx
import structlog

from ..config import NotificationConfig
from ..exceptions import NotificationError
from .base import NotificationChannel, NotificationData, build_summary_lines

logger = structlog.get_logger(__name__)

MAX_LISTED_ISSUES = 5
MAX_LISTED_PRS = 5
MAX_LISTED_RELEASES = 3

_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: #24292e; color: white; padding: 20px; text-align: center; }
    .content { padding: 20px; background: #f6f8fa; }
    .notification { margin: 10px 0; padding: 10px; background: white; border-left: 4px solid #0366d6; }
    .footer { text-align: center; padding: 20px; color: #666; }
    a { color: #0366d6; text-decoration: none; }
"""


def _item(url: str, label: str, author: str) -> str:
    return (
        '<div class="notification">'
        f'<strong><a href="{escape(url)}">{escape(label)}</a></strong>'
        f"<br>by {escape(author)}</div>"
    )


def render_email_html(data: NotificationData, summary: list[str]) -> str:
    """Render the HTML body of an activity email."""
    activity = data.activity
    repo = activity.repo
    repo_link = f'<a href="{escape(repo.html_url)}">{escape(repo.full_name)}</a>'

    sections = [
        f"<h2>{repo_link}</h2>",
        f"<p>{escape(repo.description or 'No description available')}</p>",
        "<h3>Recent Activity:</h3>",
        *(f'<div class="notification">{escape(line)}</div>' for line in summary),
    ]

    if data.tracked_repo.notify_issues and activity.new_issues:
        sections.append("<h3>New Issues:</h3>")
        sections.extend(
            _item(issue.html_url, f"#{issue.number}: {issue.title}", issue.user.login)
            for issue in activity.new_issues[:MAX_LISTED_ISSUES]
        )

    if data.tracked_repo.notify_prs and activity.new_prs:
        sections.append("<h3>New Pull Requests:</h3>")
        sections.extend(
            _item(pr.html_url, f"#{pr.number}: {pr.title}", pr.user.login)
            for pr in activity.new_prs[:MAX_LISTED_PRS]
        )

    if data.tracked_repo.notify_releases and activity.new_releases:
        sections.append("<h3>New Releases:</h3>")
        sections.extend(
            _item(
                release.html_url,
                f"{release.tag_name}: {release.name or 'Unnamed Release'}",
                release.author.login,
            )
            for release in activity.new_releases[:MAX_LISTED_RELEASES]
        )

    content = "\n".join(sections)
    return f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>GitHub Activity Alert</title>
    <style>{_STYLE}</style>
  </head>
  <body>
    <div class="container">
      <div class="header"><h1>🔔 GitHub Activity Alert</h1></div>
      <div class="content">
{content}
      </div>
      <div class="footer">
        <p>You're receiving this because you're tracking {repo_link}</p>
        <p>GitHub Repo Tracker</p>
      </div>
    </div>
  </body>
</html>
"""


class EmailNotificationChannel(NotificationChannel):
    """Notification channel that emails the tracking user via Resend."""

    name = "email"

    def __init__(
        self,
        config: NotificationConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.resend_api_url,
            headers={"Authorization": f"Bearer {config.resend_api_key}"},
            timeout=config.request_timeout,
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return self.config.email_enabled

    async def send(self, data: NotificationData) -> bool:
        if not self.is_configured:
            logger.debug("Email channel not configured, skipping")
            return False

        summary = build_summary_lines(data)
        if not summary:
            return False

        repo_name = data.activity.repo.full_name
        payload = {
            "from": self.config.from_email,
            "to": [data.user.email],
            "subject": f"GitHub Activity: {repo_name}",
            "html": render_email_html(data, summary),
        }

        try:
            response = await self._client.post("/emails", json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise NotificationError(
                f"Failed to send email notification: {e}",
                channel=self.name,
                context={"repository": repo_name},
            ) from e

        logger.info(
            "Email notification sent", recipient=data.user.email, repository=repo_name
        )
        return True

    async def aclose(self) -> None:
        await self._client.aclose()
