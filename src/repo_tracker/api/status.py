"""
Polling status endpoint for the GitHub Repo Tracker.
"""

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..models import utc_now
from ..polling import PollingOrchestrator

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/status")
async def get_status(request: Request) -> JSONResponse:
    """Report polling cadence and health."""
    orchestrator: PollingOrchestrator = request.app.state.orchestrator

    try:
        status = await orchestrator.get_polling_status()
    except Exception as e:
        logger.error("Error getting polling status", error=str(e))
        return JSONResponse(
            {
                "error": "Failed to get status",
                "isHealthy": False,
                "timestamp": utc_now().isoformat(),
            },
            status_code=500,
        )

    return JSONResponse(
        {
            "totalRepos": status.total_repos,
            "lastPolled": status.last_polled.isoformat() if status.last_polled else None,
            "nextPoll": status.next_poll.isoformat(),
            "isHealthy": True,
            "timestamp": utc_now().isoformat(),
        }
    )
