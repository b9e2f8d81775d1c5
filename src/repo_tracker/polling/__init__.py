"""
Polling system for the GitHub Repo Tracker.

This package contains the poll-cycle orchestrator that checks tracked
repositories for new activity.
"""

from .orchestrator import PollingCycleResult, PollingOrchestrator, PollingStatus

__all__ = ["PollingOrchestrator", "PollingCycleResult", "PollingStatus"]
