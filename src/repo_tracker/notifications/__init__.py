"""
Notification channels for the GitHub Repo Tracker.

This module provides the email and Telegram channels and the dispatcher that
isolates their failures from each other.
"""

from .base import NotificationChannel, NotificationData
from .dispatcher import NotificationDispatcher
from .email import EmailNotificationChannel
from .telegram import TelegramNotificationChannel

__all__ = [
    "NotificationChannel",
    "NotificationData",
    "NotificationDispatcher",
    "EmailNotificationChannel",
    "TelegramNotificationChannel",
]
