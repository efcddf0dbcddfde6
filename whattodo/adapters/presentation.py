"""Display text for enumerated task fields, and task summaries.

Keeps the mapping between what a user picks or reads ("High", "Wednesday",
"Last Day", "09:30 AM") and the domain values outside of the core.
"""

from __future__ import annotations

import re

from whattodo.domain.priority import Priority
from whattodo.domain.recurrence import (
    END_OF_DAY,
    LAST_DAY_OF_MONTH,
    START_OF_DAY,
    Month,
    RepeatUnit,
    Weekday,
)
from whattodo.domain.task import Task


ANY_TIME_LABEL = "Any Time"
ANY_DAY_LABEL = "Any Day"
ANY_MONTH_LABEL = "Any Month"
LAST_DAY_LABEL = "Last Day"

_ANY_WORDS = {"", "any", "whenever", "any time", "any day", "any month"}
_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s*$")

PRIORITY_LABELS: dict[Priority, str] = {
    Priority.LOW: "Low",
    Priority.MEDIUM: "Medium",
    Priority.HIGH: "High",
    Priority.URGENT: "Urgent",
}

REPEAT_UNIT_LABELS: dict[RepeatUnit, str] = {
    RepeatUnit.HOURLY: "Hour(s)",
    RepeatUnit.DAILY: "Day(s)",
    RepeatUnit.WEEKLY: "Week(s)",
    RepeatUnit.MONTHLY: "Month(s)",
    RepeatUnit.YEARLY: "Year(s)",
}

WEEKDAY_NAMES: dict[Weekday, str] = {day: day.name.capitalize() for day in Weekday}
MONTH_NAMES: dict[Month, str] = {month: month.name.capitalize() for month in Month}


# ----------------------------------------------------------------------
# Formatting
# ----------------------------------------------------------------------
def priority_label(priority: Priority) -> str:
    return PRIORITY_LABELS[priority]


def repeat_unit_label(unit: RepeatUnit) -> str:
    return REPEAT_UNIT_LABELS.get(unit, "")


def weekday_label(weekday: Weekday | None) -> str:
    if weekday is None:
        return ANY_DAY_LABEL
    return WEEKDAY_NAMES[weekday]


def month_label(month: Month | None) -> str:
    if month is None:
        return ANY_MONTH_LABEL
    return MONTH_NAMES[month]


def day_of_month_label(day_of_month: int | None) -> str:
    if day_of_month is None:
        return ANY_DAY_LABEL
    if day_of_month == LAST_DAY_OF_MONTH:
        return LAST_DAY_LABEL
    return _ordinal(day_of_month)


def format_time(minute_of_day: int | None) -> str:
    """Render minutes since midnight as ``hh:mm AM``."""
    if minute_of_day is None:
        return ANY_TIME_LABEL
    hour, minute = divmod(minute_of_day, 60)
    suffix = "AM" if hour < 12 else "PM"
    if hour > 12:
        hour -= 12
    if hour == 0:
        hour = 12
    return f"{hour:02d}:{minute:02d} {suffix}"


def task_summary(task: Task) -> str:
    """Multi-line, human-readable description of a task's settings."""
    lines: list[str] = []
    if task.description:
        lines.append(task.description)
    lines.append(f"Priority: {priority_label(task.priority)}")

    rule = task.recurrence
    if rule.unit is RepeatUnit.NONE:
        return "\n".join(lines)

    noun = repeat_unit_label(rule.unit).lower()
    lines.append(f"Repeat: Every {rule.interval} {noun}")

    if rule.unit is RepeatUnit.HOURLY:
        if rule.min_minute != START_OF_DAY or rule.max_minute != END_OF_DAY:
            lines.append(
                f"Between {format_time(rule.min_minute)} and {format_time(rule.max_minute)}"
            )
        return "\n".join(lines)

    if rule.unit is RepeatUnit.WEEKLY and rule.day_of_week is not None:
        lines.append(f"On {weekday_label(rule.day_of_week)}")
    if rule.unit in (RepeatUnit.MONTHLY, RepeatUnit.YEARLY) and rule.day_of_month is not None:
        lines.append(f"On the {day_of_month_label(rule.day_of_month)}")
    if rule.unit is RepeatUnit.YEARLY and rule.month is not None:
        lines.append(f"In {month_label(rule.month)}")
    if rule.minute is not None:
        lines.append(f"At {format_time(rule.minute)}")
    return "\n".join(lines)


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------
def parse_priority(text: Priority | int | str) -> Priority:
    if isinstance(text, str):
        for priority, label in PRIORITY_LABELS.items():
            if label.lower() == text.strip().lower():
                return priority
    return Priority.from_value(text)


def parse_repeat_unit(text: RepeatUnit | str) -> RepeatUnit:
    if isinstance(text, str):
        for unit, label in REPEAT_UNIT_LABELS.items():
            if label.lower() == text.strip().lower():
                return unit
    return RepeatUnit.from_value(text)


def parse_time(text: int | str | None) -> int | None:
    """Parse ``09:30 AM``, ``9:30pm`` or ``21:30`` into minutes since midnight.

    Wildcard words ("any", "whenever", blank) parse to ``None``.
    """
    if text is None or isinstance(text, int):
        return text
    if text.strip().lower() in _ANY_WORDS:
        return None

    match = _TIME_RE.match(text)
    if match is None:
        raise ValueError(f"Invalid time: {text!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    meridiem = (match.group(3) or "").upper()

    if meridiem:
        if not 1 <= hour <= 12:
            raise ValueError(f"Invalid time: {text!r}")
        if meridiem == "PM" and hour != 12:
            hour += 12
        elif meridiem == "AM" and hour == 12:
            hour = 0
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time: {text!r}")
    return hour * 60 + minute


def parse_weekday(text: Weekday | int | str) -> Weekday | None:
    if isinstance(text, Weekday):
        return text
    if isinstance(text, int):
        return None if text == 0 else Weekday(text)
    normalized = text.strip().lower()
    if normalized in _ANY_WORDS:
        return None
    for weekday, name in WEEKDAY_NAMES.items():
        if name.lower() == normalized or name[:3].lower() == normalized:
            return weekday
    raise ValueError(f"Unknown day of week: {text!r}")


def parse_month(text: Month | int | str) -> Month | None:
    if isinstance(text, Month):
        return text
    if isinstance(text, int):
        return None if text == 0 else Month(text)
    normalized = text.strip().lower()
    if normalized in _ANY_WORDS:
        return None
    if normalized.isdigit():
        return parse_month(int(normalized))
    for month, name in MONTH_NAMES.items():
        if name.lower() == normalized or name[:3].lower() == normalized:
            return month
    raise ValueError(f"Unknown month: {text!r}")


def parse_day_of_month(text: int | str) -> int | None:
    if isinstance(text, int):
        day = text
    else:
        normalized = text.strip().lower()
        if normalized in _ANY_WORDS:
            return None
        if normalized in {"last", "last day", "end"}:
            return LAST_DAY_OF_MONTH
        digits = re.sub(r"(st|nd|rd|th)$", "", normalized)
        if not digits.isdigit():
            raise ValueError(f"Unknown day of month: {text!r}")
        day = int(digits)

    if day == 0:
        return None
    if day == LAST_DAY_OF_MONTH or 1 <= day <= 31:
        return day
    raise ValueError(f"Day of month out of range: {text!r}")


def _ordinal(day: int) -> str:
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"
