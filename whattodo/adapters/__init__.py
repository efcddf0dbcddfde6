"""Infrastructure adapters for the reminder engine."""

from whattodo.adapters.clock import SystemClock
from whattodo.adapters.snapshot import (
    Snapshot,
    SnapshotError,
    SnapshotStore,
    decode_snapshot,
    encode_snapshot,
)
from whattodo.adapters.terminal_notifier import TerminalNotifier

__all__ = [
    "Snapshot",
    "SnapshotError",
    "SnapshotStore",
    "SystemClock",
    "TerminalNotifier",
    "decode_snapshot",
    "encode_snapshot",
]
