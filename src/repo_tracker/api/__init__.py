"""
HTTP routes for the GitHub Repo Tracker.
"""

from .cron import CronTrigger
from .repos import RepositoryRoutes
from .status import router as status_router

__all__ = ["CronTrigger", "RepositoryRoutes", "status_router"]
