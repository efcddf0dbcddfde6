"""Use case: create task."""

from __future__ import annotations

from whattodo.application.runtime import ReminderRuntime
from whattodo.application.validation import TaskDraft
from whattodo.domain.task import Task


class CreateTask:
    """Application use case for adding a task from form input."""

    def __init__(self, runtime: ReminderRuntime) -> None:
        self._runtime = runtime

    def execute(self, draft: TaskDraft, *, depends_on: tuple[str, ...] = ()) -> Task:
        task = self._runtime.create_task(draft)
        for dependency_id in depends_on:
            self._runtime.add_dependency(task.task_id, dependency_id)
        return task
