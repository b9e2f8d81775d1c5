"""
Scheduled poll trigger for the GitHub Repo Tracker.

An external scheduler (for example a cron job every 10 minutes) calls this
endpoint to run one poll cycle.
"""

import hmac

import structlog
from fastapi import APIRouter, Header, Request
from fastapi.responses import JSONResponse

from ..models import utc_now
from ..polling import PollingOrchestrator

logger = structlog.get_logger(__name__)


class CronTrigger:
    """
    Poll cycle trigger.

    When a cron secret is configured, callers must send
    ``Authorization: Bearer <secret>``.
    """

    def __init__(self) -> None:
        """Initialize the cron trigger."""
        self.router = APIRouter()
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Set up trigger routes."""
        self.router.get("/cron")(self.handle_trigger)
        self.router.post("/cron")(self.handle_trigger)

    @staticmethod
    def _is_authorized(secret: str, authorization: str | None) -> bool:
        """
        Check the shared secret.

        Args:
            secret: Configured cron secret, empty to disable the check
            authorization: Authorization header value

        Returns:
            True if the request may trigger a cycle
        """
        if not secret:
            return True
        if not authorization:
            return False
        return hmac.compare_digest(authorization, f"Bearer {secret}")

    async def handle_trigger(
        self,
        request: Request,
        authorization: str | None = Header(None),
    ) -> JSONResponse:
        """
        Run one poll cycle.

        Args:
            request: FastAPI request object
            authorization: Authorization header

        Returns:
            JSON response with the cycle duration and counts
        """
        settings = request.app.state.settings
        if not self._is_authorized(settings.cron_secret, authorization):
            logger.warning("Rejected cron trigger with invalid secret")
            return JSONResponse({"error": "Unauthorized"}, status_code=401)

        logger.info("CRON job triggered - starting repository polling")
        orchestrator: PollingOrchestrator = request.app.state.orchestrator

        try:
            result = await orchestrator.check_all_repositories()
        except Exception as e:
            logger.error("CRON job failed", error=str(e))
            return JSONResponse(
                {
                    "error": "CRON job failed",
                    "message": str(e),
                    "timestamp": utc_now().isoformat(),
                },
                status_code=500,
            )

        duration_ms = int(result.duration_seconds * 1000)
        logger.info("CRON job completed", duration_ms=duration_ms)

        if result.already_running:
            message = "Repository polling already in progress"
        else:
            message = "Repository polling completed"

        return JSONResponse(
            {
                "success": result.error is None,
                "message": message,
                "duration": f"{duration_ms}ms",
                "timestamp": utc_now().isoformat(),
                **result.to_dict(),
            }
        )
