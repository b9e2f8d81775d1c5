"""
Storage for the GitHub Repo Tracker.

This package provides the repository store interface consumed by the poller
and the registration flow, plus an in-memory backend.
"""

from .store import InMemoryRepositoryStore, RepositoryStore

__all__ = [
    "RepositoryStore",
    "InMemoryRepositoryStore",
]
