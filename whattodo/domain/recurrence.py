"""Recurrence rules and the due-time calculator for repeating tasks."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum, IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from whattodo.domain.task import Task


LAST_DAY_OF_MONTH = 32
START_OF_DAY = 0
END_OF_DAY = 24 * 60 - 1

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class RepeatUnit(str, Enum):
    """Unit a repeating task's interval is counted in."""

    NONE = "none"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def from_value(cls, value: "RepeatUnit | str") -> "RepeatUnit":
        if isinstance(value, RepeatUnit):
            return value

        normalized = value.strip().lower()
        aliases = {
            "": cls.NONE,
            "once": cls.NONE,
            "hour": cls.HOURLY,
            "hours": cls.HOURLY,
            "hour(s)": cls.HOURLY,
            "day": cls.DAILY,
            "days": cls.DAILY,
            "day(s)": cls.DAILY,
            "week": cls.WEEKLY,
            "weeks": cls.WEEKLY,
            "week(s)": cls.WEEKLY,
            "month": cls.MONTHLY,
            "months": cls.MONTHLY,
            "month(s)": cls.MONTHLY,
            "year": cls.YEARLY,
            "years": cls.YEARLY,
            "year(s)": cls.YEARLY,
        }

        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


class Weekday(IntEnum):
    """Day of week; weeks run Sunday through Saturday."""

    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7

    @property
    def week_index(self) -> int:
        return self.value - 1

    @classmethod
    def of(cls, moment: datetime) -> "Weekday":
        return cls(moment.isoweekday() % 7 + 1)


class Month(IntEnum):
    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12


@dataclass(frozen=True, slots=True)
class RecurrenceRule:
    """How often a task repeats. ``None`` fields are wildcards ("any")."""

    unit: RepeatUnit = RepeatUnit.NONE
    interval: int = 0
    minute: int | None = None
    day_of_week: Weekday | None = None
    day_of_month: int | None = None
    month: Month | None = None
    min_minute: int = START_OF_DAY
    max_minute: int = END_OF_DAY

    def __post_init__(self) -> None:
        if self.unit is not RepeatUnit.NONE and self.interval < 1:
            raise ValueError("interval must be >= 1 for repeating tasks")
        if self.minute is not None and not START_OF_DAY <= self.minute <= END_OF_DAY:
            raise ValueError(f"minute out of range: {self.minute}")
        if self.day_of_month is not None and not (
            1 <= self.day_of_month <= 31 or self.day_of_month == LAST_DAY_OF_MONTH
        ):
            raise ValueError(f"day_of_month out of range: {self.day_of_month}")
        for bound in (self.min_minute, self.max_minute):
            if not START_OF_DAY <= bound <= END_OF_DAY:
                raise ValueError(f"time window bound out of range: {bound}")

    @classmethod
    def once(cls) -> "RecurrenceRule":
        return cls()

    @property
    def is_repeating(self) -> bool:
        return self.unit is not RepeatUnit.NONE


# ----------------------------------------------------------------------
# Epoch helpers
# ----------------------------------------------------------------------
def to_epoch_ms(moment: datetime) -> int:
    return (_aware(moment) - _EPOCH) // timedelta(milliseconds=1)


def from_epoch_ms(epoch_ms: int, tz: tzinfo | None = None) -> datetime:
    return (_EPOCH + timedelta(milliseconds=epoch_ms)).astimezone(tz or timezone.utc)


# ----------------------------------------------------------------------
# Calculator
# ----------------------------------------------------------------------
def compute_due_time(task: Task, now: datetime) -> datetime:
    """Return when ``task`` next becomes due, anchored on its last run.

    A task that never ran is anchored on ``now``. Non-repeating tasks are
    reported as due at the anchor. Day, week, month and year steps are
    wall-clock steps in the zone of ``now``, so ``now`` should carry a real
    zone rather than a fixed offset for daylight-saving changes to hold.
    """
    now = _aware(now)
    rule = task.recurrence
    anchor = from_epoch_ms(task.last_run, now.tzinfo) if task.last_run > 0 else now

    if rule.unit is RepeatUnit.HOURLY:
        # Hours are elapsed time, not wall-clock time.
        due = (anchor.astimezone(timezone.utc) + timedelta(hours=rule.interval)).astimezone(
            anchor.tzinfo
        )
        minute_of_day = due.hour * 60 + due.minute
        if minute_of_day > rule.max_minute:
            return _at_minute(due + timedelta(days=1), rule.min_minute)
        if minute_of_day < rule.min_minute:
            return _at_minute(due, rule.min_minute)
        return due

    if rule.unit is RepeatUnit.DAILY:
        return _with_time(anchor + timedelta(days=rule.interval), rule.minute)

    if rule.unit is RepeatUnit.WEEKLY:
        due = anchor + timedelta(weeks=rule.interval)
        if rule.day_of_week is not None:
            due = _snap_weekday(due, rule.day_of_week)
        return _with_time(due, rule.minute)

    if rule.unit is RepeatUnit.MONTHLY:
        # Step from the 1st so a 31st anchor cannot overflow a short month.
        year, month = _shift_month(anchor.year, anchor.month, rule.interval)
        day = _resolve_day(year, month, rule.day_of_month, fallback=1)
        return _with_time(anchor.replace(year=year, month=month, day=day), rule.minute)

    if rule.unit is RepeatUnit.YEARLY:
        year = anchor.year + rule.interval
        month = int(rule.month) if rule.month is not None else anchor.month
        day = _resolve_day(year, month, rule.day_of_month, fallback=anchor.day)
        return _with_time(anchor.replace(year=year, month=month, day=day), rule.minute)

    return anchor


def is_due(task: Task, now: datetime) -> bool:
    return compute_due_time(task, now) <= _aware(now)


def compute_default_last_run(task: Task, now: datetime) -> int:
    """Pick a last-run for a new task so its first due time is the next slot.

    The rule's day/time constraints are applied to ``now``; the result is then
    moved back one interval, or one interval less when that slot already
    passed. Hourly and non-repeating tasks start from ``now``.
    """
    now = _aware(now)
    rule = task.recurrence

    if rule.unit is RepeatUnit.DAILY:
        snapped = _with_time(now, rule.minute)
        steps = _steps_back(snapped, now, rule.interval)
        return to_epoch_ms(snapped - timedelta(days=steps))

    if rule.unit is RepeatUnit.WEEKLY:
        snapped = now
        if rule.day_of_week is not None:
            snapped = _snap_weekday(snapped, rule.day_of_week)
        snapped = _with_time(snapped, rule.minute)
        steps = _steps_back(snapped, now, rule.interval)
        return to_epoch_ms(snapped - timedelta(weeks=steps))

    if rule.unit is RepeatUnit.MONTHLY:
        day = _resolve_day(now.year, now.month, rule.day_of_month, fallback=now.day)
        snapped = _with_time(now.replace(day=day), rule.minute)
        steps = _steps_back(snapped, now, rule.interval)
        year, month = _shift_month(now.year, now.month, -steps)
        day = _resolve_day(year, month, rule.day_of_month, fallback=snapped.day)
        return to_epoch_ms(snapped.replace(year=year, month=month, day=day))

    if rule.unit is RepeatUnit.YEARLY:
        month = int(rule.month) if rule.month is not None else now.month
        day = _resolve_day(now.year, month, rule.day_of_month, fallback=now.day)
        snapped = _with_time(now.replace(month=month, day=day), rule.minute)
        steps = _steps_back(snapped, now, rule.interval)
        year = now.year - steps
        day = _resolve_day(year, month, rule.day_of_month, fallback=snapped.day)
        return to_epoch_ms(snapped.replace(year=year, day=day))

    return to_epoch_ms(now)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def _aware(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _at_minute(moment: datetime, minute_of_day: int) -> datetime:
    return moment.replace(
        hour=minute_of_day // 60,
        minute=minute_of_day % 60,
        second=0,
        microsecond=0,
    )


def _with_time(moment: datetime, minute_of_day: int | None) -> datetime:
    if minute_of_day is None:
        return moment
    return _at_minute(moment, minute_of_day)


def _snap_weekday(moment: datetime, weekday: Weekday) -> datetime:
    offset = weekday.week_index - Weekday.of(moment).week_index
    return moment + timedelta(days=offset)


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _resolve_day(year: int, month: int, day_of_month: int | None, *, fallback: int) -> int:
    last_day = calendar.monthrange(year, month)[1]
    if day_of_month == LAST_DAY_OF_MONTH:
        return last_day
    if day_of_month is None:
        return min(fallback, last_day)
    return min(day_of_month, last_day)


def _steps_back(snapped: datetime, now: datetime, interval: int) -> int:
    if snapped <= now:
        return interval - 1
    return interval
