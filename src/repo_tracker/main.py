"""
Main application entry point for the GitHub Repo Tracker.

This module sets up the FastAPI application, configures logging, and wires
the GitHub client, repository store, notification dispatcher and poller.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import CronTrigger, RepositoryRoutes, status_router
from .config import Settings, get_settings
from .github_client import GitHubClient
from .notifications import NotificationDispatcher
from .polling import PollingOrchestrator
from .registration import RegistrationService
from .storage import InMemoryRepositoryStore, RepositoryStore


def setup_logging(settings: Settings) -> None:
    """Configure structured logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level), format="%(message)s"
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if settings.log_format == "json"
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_app(
    settings: Settings | None = None,
    github_client: GitHubClient | None = None,
    store: RepositoryStore | None = None,
    dispatcher: NotificationDispatcher | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Components that are not passed in are constructed from settings when
    the application starts.

    Args:
        settings: Application settings
        github_client: GitHub API client
        store: Repository store
        dispatcher: Notification dispatcher

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        setup_logging(settings)
        logger = structlog.get_logger()

        logger.info("Starting GitHub Repo Tracker")
        logger.info(
            "Configuration loaded",
            github_token_configured=settings.has_github_token,
            batch_size=settings.polling_batch_size,
            cron_secret_configured=bool(settings.cron_secret),
            debug=settings.debug,
        )

        # Initialize services
        client = github_client or GitHubClient(settings)
        repo_store = store or InMemoryRepositoryStore()
        notifier = dispatcher or NotificationDispatcher.from_settings(settings)

        # Store services in app state
        app.state.settings = settings
        app.state.github_client = client
        app.state.store = repo_store
        app.state.dispatcher = notifier
        app.state.orchestrator = PollingOrchestrator(
            github_client=client,
            store=repo_store,
            dispatcher=notifier,
            settings=settings,
        )
        app.state.registration_service = RegistrationService(client, repo_store)

        yield

        logger.info("Shutting down GitHub Repo Tracker")
        if github_client is None:
            await client.aclose()
        if dispatcher is None:
            await notifier.aclose()

    app = FastAPI(
        title="GitHub Repo Tracker",
        description="Notifications for new GitHub issues, pull requests, releases and stars",
        version=__version__,
        lifespan=lifespan,
    )

    # Configure CORS
    if settings.enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["*"],
        )

    app.include_router(CronTrigger().router, prefix="/api", tags=["polling"])
    app.include_router(status_router, prefix="/api", tags=["polling"])
    app.include_router(RepositoryRoutes().router, prefix="/api", tags=["repos"])

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": "GitHub Repo Tracker", "version": __version__, "status": "active"}

    @app.get("/health")
    async def health_check(request: Request) -> dict[str, Any]:
        """Health check endpoint."""
        storage_ok = await request.app.state.store.health_check()
        return {"status": "healthy" if storage_ok else "unhealthy", "storage": storage_ok}

    return app


def main() -> None:
    """Main entry point."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings)
    logger = structlog.get_logger()

    server = settings.server_config

    logger.info(
        "Starting server", host=server.host, port=server.port, debug=server.debug
    )

    uvicorn.run(
        "repo_tracker.main:create_app",
        factory=True,
        host=server.host,
        port=server.port,
        reload=server.debug,
        log_config=None,  # We handle logging ourselves
    )


if __name__ == "__main__":
    main()
