"""Ports implemented by infrastructure adapters."""

from whattodo.ports.clock import Clock
from whattodo.ports.notifications import NotificationEventType, NotificationPort

__all__ = ["Clock", "NotificationEventType", "NotificationPort"]
