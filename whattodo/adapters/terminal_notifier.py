"""Terminal notification adapter writing reminder events to stdout."""

from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock

from whattodo.ports.notifications import NotificationEventType, NotificationPort


class TerminalNotifier(NotificationPort):
    """Simple notification adapter for local terminal usage."""

    __slots__ = ("_enable_bell", "_lock")

    def __init__(self, enable_bell: bool = False) -> None:
        self._enable_bell = enable_bell
        self._lock = Lock()

    def notify_immediately(self, message: str, event_type: NotificationEventType) -> None:
        now = datetime.now(timezone.utc).isoformat(timespec="seconds")
        # Called from the availability timer thread as well as the REPL.
        with self._lock:
            print(f"[{now}] [{event_type.value}] {message}")
            if self._enable_bell and event_type is NotificationEventType.TASK_READY:
                print("\a", end="")
