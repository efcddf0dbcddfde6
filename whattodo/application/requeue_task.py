"""Use case: requeue task."""

from __future__ import annotations

from whattodo.application.runtime import ReminderRuntime
from whattodo.domain.task import Task


class RequeueTask:
    """Application use case for putting done tasks back in the queue."""

    def __init__(self, runtime: ReminderRuntime) -> None:
        self._runtime = runtime

    def execute(self, *task_ids: str) -> list[Task]:
        return [self._runtime.requeue_task(task_id) for task_id in task_ids]
