"""
Repository registration endpoints for the GitHub Repo Tracker.

Maps RegistrationService operations and their errors onto HTTP.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import (
    ConflictError,
    NotFoundError,
    RepoNameValidationError,
)
from ..models import NotificationPreferences, PreferenceUpdate
from ..registration import RegistrationService

logger = structlog.get_logger(__name__)

INTERNAL_ERROR = {"error": "Internal server error"}


class TrackRepoRequest(BaseModel):
    """Body of ``POST /api/repos``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    repo_name: str | None = Field(default=None, alias="repoName")
    email: str | None = None
    notify_issues: bool = Field(default=True, alias="notifyIssues")
    notify_stars: bool = Field(default=True, alias="notifyStars")
    notify_prs: bool = Field(default=True, alias="notifyPRs")
    notify_releases: bool = Field(default=True, alias="notifyReleases")

    @property
    def preferences(self) -> NotificationPreferences:
        return NotificationPreferences(
            notify_issues=self.notify_issues,
            notify_stars=self.notify_stars,
            notify_prs=self.notify_prs,
            notify_releases=self.notify_releases,
        )


class UpdatePreferencesRequest(PreferenceUpdate):
    """Body of ``PUT /api/repos/{repo_id}``; only the switches present are changed."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    email: str | None = None


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def _read_body(request: Request, model: type[BaseModel]) -> Any:
    try:
        return model.model_validate(await request.json())
    except (ValueError, PydanticValidationError):
        return None


class RepositoryRoutes:
    """HTTP routes for tracking, listing, updating and removing repositories."""

    def __init__(self) -> None:
        """Initialize the repository routes."""
        self.router = APIRouter()
        self._setup_routes()

    def _setup_routes(self) -> None:
        self.router.post("/repos")(self.add_repo)
        self.router.get("/repos")(self.list_repos)
        self.router.put("/repos/{repo_id}")(self.update_repo)
        self.router.delete("/repos/{repo_id}")(self.remove_repo)

    @staticmethod
    def _service(request: Request) -> RegistrationService:
        return request.app.state.registration_service

    async def add_repo(self, request: Request) -> JSONResponse:
        """Start tracking a repository."""
        body = await _read_body(request, TrackRepoRequest)
        if body is None:
            return _error("Invalid JSON payload", 400)

        try:
            tracked_repo = await self._service(request).add_tracked_repo(
                body.email, body.repo_name, body.preferences
            )
        except RepoNameValidationError as e:
            return _error(e.message, 400)
        except NotFoundError as e:
            return _error(e.message, 404)
        except ConflictError as e:
            return _error(e.message, 409)
        except Exception as e:
            logger.error("Error adding tracked repository", error=str(e))
            return JSONResponse(INTERNAL_ERROR, status_code=500)

        return JSONResponse(tracked_repo.to_response(), status_code=201)

    async def list_repos(self, request: Request, email: str | None = None) -> JSONResponse:
        """List the repositories tracked by an email address."""
        try:
            tracked_repos = await self._service(request).list_tracked_repos(email)
        except RepoNameValidationError as e:
            return _error(e.message, 400)
        except Exception as e:
            logger.error("Error fetching tracked repositories", error=str(e))
            return JSONResponse(INTERNAL_ERROR, status_code=500)

        return JSONResponse([repo.to_response() for repo in tracked_repos])

    async def update_repo(self, repo_id: str, request: Request) -> JSONResponse:
        """Change the notification preferences of a tracked repository."""
        body = await _read_body(request, UpdatePreferencesRequest)
        if body is None:
            return _error("Invalid JSON payload", 400)

        try:
            tracked_repo = await self._service(request).update_preferences(
                repo_id, body.email, body
            )
        except RepoNameValidationError as e:
            return _error(e.message, 400)
        except NotFoundError as e:
            return _error(e.message, 404)
        except Exception as e:
            logger.error("Error updating tracked repository", error=str(e))
            return JSONResponse(INTERNAL_ERROR, status_code=500)

        return JSONResponse(tracked_repo.to_response())

    async def remove_repo(
        self, repo_id: str, request: Request, email: str | None = None
    ) -> JSONResponse:
        """Stop tracking a repository."""
        try:
            await self._service(request).remove_tracked_repo(repo_id, email)
        except RepoNameValidationError as e:
            return _error(e.message, 400)
        except NotFoundError as e:
            return _error(e.message, 404)
        except Exception as e:
            logger.error("Error removing tracked repository", error=str(e))
            return JSONResponse(INTERNAL_ERROR, status_code=500)

        return JSONResponse({"success": True})
