"""
GitHub Repo Tracker

Polls tracked GitHub repositories and notifies users by email or Telegram
about new issues, pull requests, releases, and stars.
"""

__version__ = "0.1.0"
__author__ = "GitHub Repo Tracker"
__email__ = "support@example.com"

from .config import Settings
from .exceptions import RepoTrackerError
from .github_client import GitHubClient
from .notifications import NotificationDispatcher
from .polling import PollingOrchestrator
from .storage import InMemoryRepositoryStore, RepositoryStore

__all__ = [
    "Settings",
    "GitHubClient",
    "NotificationDispatcher",
    "PollingOrchestrator",
    "RepositoryStore",
    "InMemoryRepositoryStore",
    "RepoTrackerError",
]
