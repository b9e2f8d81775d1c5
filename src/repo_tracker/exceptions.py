"""
Custom exceptions for the GitHub Repo Tracker.

This module defines custom exception classes for better error handling
and debugging across the application.
"""

from typing import Any


class RepoTrackerError(Exception):
    """Base exception for GitHub Repo Tracker errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "REPO_TRACKER_ERROR"
        self.context = context or {}


class GitHubAPIError(RepoTrackerError):
    """Exception for GitHub API errors that fit no more specific category."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "GITHUB_API_ERROR", context)
        self.status_code = status_code


class NotFoundError(RepoTrackerError):
    """Exception for missing repositories or tracked records."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "NOT_FOUND", context)


class UnauthorizedError(RepoTrackerError):
    """Exception for missing or rejected GitHub credentials."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "UNAUTHORIZED", context)


class RateLimitError(RepoTrackerError):
    """Exception for rate limit related errors."""

    def __init__(
        self,
        message: str,
        reset_time: float | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "RATE_LIMIT_ERROR", context)
        self.reset_time = reset_time


class ConflictError(RepoTrackerError):
    """Exception for duplicate tracking registrations."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "CONFLICT", context)


class RepoNameValidationError(RepoTrackerError):
    """Exception for malformed or missing registration input."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "VALIDATION_ERROR", context)


class NotificationError(RepoTrackerError):
    """Exception for notification delivery errors."""

    def __init__(
        self,
        message: str,
        channel: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "NOTIFICATION_ERROR", context)
        self.channel = channel

