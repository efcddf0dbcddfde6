"""Domain entities and pure scheduling rules."""

from whattodo.domain.priority import Priority
from whattodo.domain.recurrence import (
    LAST_DAY_OF_MONTH,
    Month,
    RecurrenceRule,
    RepeatUnit,
    Weekday,
)
from whattodo.domain.task import Task, TaskState

__all__ = [
    "LAST_DAY_OF_MONTH",
    "Month",
    "Priority",
    "RecurrenceRule",
    "RepeatUnit",
    "Task",
    "TaskState",
    "Weekday",
]
