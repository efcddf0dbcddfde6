"""Priority tiers and their selection weights."""

from __future__ import annotations

from enum import IntEnum


class Priority(IntEnum):
    """Task priority; the value is the weight used for random selection."""

    LOW = 1
    MEDIUM = 2
    HIGH = 4
    URGENT = 64

    @property
    def weight(self) -> int:
        return int(self.value)

    @classmethod
    def from_value(cls, value: "Priority | int | str") -> "Priority":
        if isinstance(value, Priority):
            return value
        if isinstance(value, int):
            return cls(value)

        normalized = value.strip().lower()
        aliases = {
            "low": cls.LOW,
            "lo": cls.LOW,
            "medium": cls.MEDIUM,
            "med": cls.MEDIUM,
            "normal": cls.MEDIUM,
            "high": cls.HIGH,
            "hi": cls.HIGH,
            "urgent": cls.URGENT,
            "critical": cls.URGENT,
        }

        if normalized in aliases:
            return aliases[normalized]
        if normalized.isdigit():
            return cls(int(normalized))
        raise ValueError(f"Unknown priority: {value!r}")
