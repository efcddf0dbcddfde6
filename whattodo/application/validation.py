"""Validation of user-entered task fields for the add/edit flows."""

from __future__ import annotations

from dataclasses import dataclass

from whattodo.adapters.presentation import (
    day_of_month_label,
    format_time,
    month_label,
    parse_day_of_month,
    parse_month,
    parse_priority,
    parse_repeat_unit,
    parse_time,
    parse_weekday,
    priority_label,
    repeat_unit_label,
    weekday_label,
)
from whattodo.domain.priority import Priority
from whattodo.domain.recurrence import (
    END_OF_DAY,
    START_OF_DAY,
    Month,
    RecurrenceRule,
    RepeatUnit,
    Weekday,
)
from whattodo.domain.task import Task


class TaskValidationError(ValueError):
    """Raised with every problem found in one add/edit attempt."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


@dataclass(slots=True)
class TaskDraft:
    """Raw add/edit form input; fields accept display text or typed values."""

    description: str = ""
    priority: Priority | int | str | None = None
    repeats: bool = False
    interval: int | str | None = None
    unit: RepeatUnit | str | None = None
    time: int | str | None = None
    day_of_week: Weekday | int | str | None = None
    day_of_month: int | str | None = None
    month: Month | int | str | None = None
    min_time: int | str | None = None
    max_time: int | str | None = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskDraft":
        """Pre-fill a draft with a task's current settings, as display text."""
        rule = task.recurrence
        draft = cls(
            description=task.description,
            priority=priority_label(task.priority),
            repeats=rule.is_repeating,
        )
        if not rule.is_repeating:
            return draft

        # Only the fields the unit uses, so switching units asks for the rest.
        draft.interval = str(rule.interval)
        draft.unit = repeat_unit_label(rule.unit)
        if rule.unit is RepeatUnit.HOURLY:
            draft.min_time = format_time(rule.min_minute)
            draft.max_time = format_time(rule.max_minute)
            return draft

        draft.time = format_time(rule.minute)
        if rule.unit is RepeatUnit.WEEKLY:
            draft.day_of_week = weekday_label(rule.day_of_week)
        elif rule.unit in (RepeatUnit.MONTHLY, RepeatUnit.YEARLY):
            draft.day_of_month = day_of_month_label(rule.day_of_month)
        if rule.unit is RepeatUnit.YEARLY:
            draft.month = month_label(rule.month)
        return draft


@dataclass(frozen=True, slots=True)
class ParsedDraft:
    description: str
    priority: Priority
    recurrence: RecurrenceRule


def validate_draft(draft: TaskDraft) -> list[str]:
    """Return every validation error in ``draft`` (empty when valid)."""
    errors, _ = _parse(draft)
    return errors


def parse_draft(draft: TaskDraft) -> ParsedDraft:
    errors, parsed = _parse(draft)
    if errors or parsed is None:
        raise TaskValidationError(errors)
    return parsed


def _parse(draft: TaskDraft) -> tuple[list[str], ParsedDraft | None]:
    errors: list[str] = []

    description = (draft.description or "").strip()
    if not description:
        errors.append("Description can't be empty")

    priority: Priority | None = None
    if _blank(draft.priority):
        errors.append("Priority can't be empty")
    else:
        try:
            priority = parse_priority(draft.priority)
        except ValueError:
            errors.append(f"Unknown priority: {draft.priority!r}")

    rule: RecurrenceRule | None = RecurrenceRule.once()
    if draft.repeats:
        rule = _parse_recurrence(draft, errors)

    if errors or priority is None or rule is None:
        return errors, None
    return errors, ParsedDraft(description=description, priority=priority, recurrence=rule)


def _parse_recurrence(draft: TaskDraft, errors: list[str]) -> RecurrenceRule | None:
    interval = _parse_interval(draft.interval, errors)

    unit: RepeatUnit | None = None
    if _blank(draft.unit):
        errors.append("Repeat type can't be empty")
    else:
        try:
            unit = parse_repeat_unit(draft.unit)
        except ValueError:
            errors.append(f"Unknown repeat type: {draft.unit!r}")
        if unit is RepeatUnit.NONE:
            errors.append("Repeat type can't be empty")
            unit = None

    minute = _parse_optional(parse_time, draft.time, errors)
    day_of_week: Weekday | None = None
    day_of_month: int | None = None
    month: Month | None = None
    min_minute, max_minute = START_OF_DAY, END_OF_DAY

    if unit is RepeatUnit.HOURLY:
        minute = None
        parsed_min = _parse_optional(parse_time, draft.min_time, errors)
        parsed_max = _parse_optional(parse_time, draft.max_time, errors)
        min_minute = START_OF_DAY if parsed_min is None else parsed_min
        max_minute = END_OF_DAY if parsed_max is None else parsed_max
        if min_minute >= max_minute:
            errors.append("From time should be earlier than to time")
    elif unit is RepeatUnit.WEEKLY:
        if _blank(draft.day_of_week):
            errors.append("Day of week can't be empty")
        else:
            day_of_week = _parse_optional(parse_weekday, draft.day_of_week, errors)
    elif unit in (RepeatUnit.MONTHLY, RepeatUnit.YEARLY):
        if _blank(draft.day_of_month):
            errors.append("Day of month can't be empty")
        else:
            day_of_month = _parse_optional(parse_day_of_month, draft.day_of_month, errors)
        if unit is RepeatUnit.YEARLY:
            if _blank(draft.month):
                errors.append("Month can't be empty")
            else:
                month = _parse_optional(parse_month, draft.month, errors)

    if errors or unit is None or interval is None:
        return None
    try:
        return RecurrenceRule(
            unit=unit,
            interval=interval,
            minute=minute,
            day_of_week=day_of_week,
            day_of_month=day_of_month,
            month=month,
            min_minute=min_minute,
            max_minute=max_minute,
        )
    except ValueError as exc:
        errors.append(str(exc))
        return None


def _parse_interval(value: int | str | None, errors: list[str]) -> int | None:
    if _blank(value):
        errors.append("Repeat interval can't be empty")
        return None
    if isinstance(value, bool):
        errors.append("Repeat interval should be a number")
        return None
    try:
        interval = int(value)
    except (TypeError, ValueError):
        errors.append("Repeat interval should be a number")
        return None
    if interval <= 0:
        errors.append("Repeat interval should be a positive number")
        return None
    return interval


def _parse_optional(parser, value, errors: list[str]):
    if value is None:
        return None
    try:
        return parser(value)
    except ValueError as exc:
        errors.append(str(exc))
        return None


def _blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
