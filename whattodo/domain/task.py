"""Task domain entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import uuid4

from .priority import Priority
from .recurrence import RecurrenceRule, to_epoch_ms


class TaskState(str, Enum):
    """Observable availability state of a task."""

    DONE = "done"
    WAITING = "waiting"
    READY = "ready"


def new_task_id() -> str:
    return uuid4().hex


@dataclass(slots=True)
class Task:
    """A single to-do item, either one-off or repeating."""

    description: str
    priority: Priority = Priority.LOW
    recurrence: RecurrenceRule = field(default_factory=RecurrenceRule.once)
    done: bool = False
    dependencies: set[str] = field(default_factory=set)
    last_run: int = 0
    task_id: str = field(default_factory=new_task_id)

    @property
    def weight(self) -> int:
        return self.priority.weight

    @property
    def is_repeating(self) -> bool:
        return self.recurrence.is_repeating

    @property
    def has_run(self) -> bool:
        return self.last_run > 0

    def mark_done(self, now: datetime) -> None:
        """Record a completion.

        Repeating tasks never stay done: completing one only advances
        ``last_run``. Marking an already-done one-off task is a no-op.
        """
        if self.is_repeating:
            self.last_run = to_epoch_ms(now)
            self.done = False
            return
        if self.done:
            return
        self.done = True
        self.last_run = to_epoch_ms(now)

    def requeue(self) -> None:
        self.done = False

    def add_dependency(self, task_id: str) -> None:
        if task_id == self.task_id:
            raise ValueError("A task cannot depend on itself")
        self.dependencies.add(task_id)

    def remove_dependency(self, task_id: str) -> None:
        self.dependencies.discard(task_id)
