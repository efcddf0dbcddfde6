"""Use case: edit task."""

from __future__ import annotations

from whattodo.application.runtime import ReminderRuntime
from whattodo.application.validation import TaskDraft
from whattodo.domain.task import Task


class EditTask:
    """Application use case for changing an existing task's settings."""

    def __init__(self, runtime: ReminderRuntime) -> None:
        self._runtime = runtime

    def execute(self, task_id: str, draft: TaskDraft) -> Task:
        return self._runtime.edit_task(task_id, draft)
