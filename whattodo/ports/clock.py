"""Clock port so scheduling rules can be driven by fixed times in tests."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Supplies the current wall-clock time."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
