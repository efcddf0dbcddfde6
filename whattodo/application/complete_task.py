"""Use case: complete task."""

from __future__ import annotations

from whattodo.application.runtime import ReminderRuntime
from whattodo.domain.task import Task


class CompleteTask:
    """Application use case for marking the selected (or a given) task done."""

    def __init__(self, runtime: ReminderRuntime) -> None:
        self._runtime = runtime

    def execute(self, task_id: str | None = None) -> Task | None:
        return self._runtime.complete_task(task_id=task_id)
