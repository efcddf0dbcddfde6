"""Use case: delete task."""

from __future__ import annotations

from whattodo.application.runtime import ReminderRuntime
from whattodo.domain.task import Task


class DeleteTask:
    """Application use case for permanently removing tasks."""

    def __init__(self, runtime: ReminderRuntime) -> None:
        self._runtime = runtime

    def execute(self, *task_ids: str) -> list[Task]:
        return [self._runtime.delete_task(task_id) for task_id in task_ids]
