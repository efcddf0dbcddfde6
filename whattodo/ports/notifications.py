"""Notification port abstractions for reminder adapters."""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class NotificationEventType(str, Enum):
    """High-level reminder events exposed to notification adapters."""

    TASK_READY = "task_ready"
    TASK_SELECTED = "task_selected"
    TASK_COMPLETED = "task_completed"
    INFO = "info"


class NotificationPort(Protocol):
    """Port for delivering reminder notifications."""

    def notify_immediately(self, message: str, event_type: NotificationEventType) -> None:
        """Push an immediate notification for a reminder event."""
