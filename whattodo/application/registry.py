"""In-memory registry of every task plus the currently selected task."""

from __future__ import annotations

import random
from datetime import datetime

from whattodo.adapters.snapshot import Snapshot, SnapshotError, decode_snapshot, encode_snapshot
from whattodo.application.validation import TaskDraft, parse_draft
from whattodo.domain import dependencies as graph
from whattodo.domain.recurrence import compute_default_last_run, compute_due_time, is_due
from whattodo.domain.selection import choose_weighted
from whattodo.domain.task import Task, TaskState


class TaskRegistry:
    """Owns all tasks keyed by id and the "currently selected" pointer.

    Not thread-safe: callers serialize access (see ``ReminderRuntime``).
    """

    __slots__ = ("tasks_by_id", "current_task_id", "_rng")

    def __init__(self, *, rng: random.Random | None = None) -> None:
        self.tasks_by_id: dict[str, Task] = {}
        self.current_task_id: str | None = None
        self._rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def put_task(self, task: Task) -> Task:
        self.tasks_by_id[task.task_id] = task
        return task

    def get_task(self, task_id: str) -> Task | None:
        return self.tasks_by_id.get(task_id)

    def require_task(self, task_id: str) -> Task:
        task = self.tasks_by_id.get(task_id)
        if task is None:
            raise KeyError(f"Unknown task id: {task_id}")
        return task

    def list_tasks(self) -> list[Task]:
        return list(self.tasks_by_id.values())

    def __len__(self) -> int:
        return len(self.tasks_by_id)

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------
    def is_available(self, task: Task, now: datetime) -> bool:
        if task.done:
            return False
        if task.is_repeating and not is_due(task, now):
            return False
        return graph.dependencies_satisfied(task, self.tasks_by_id)

    def task_state(self, task: Task, now: datetime) -> TaskState:
        if task.done:
            return TaskState.DONE
        if self.is_available(task, now):
            return TaskState.READY
        return TaskState.WAITING

    def available_tasks(self, now: datetime) -> list[Task]:
        return [task for task in self.tasks_by_id.values() if self.is_available(task, now)]

    def due_time(self, task: Task, now: datetime) -> datetime | None:
        if not task.is_repeating:
            return None
        return compute_due_time(task, now)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def next_task(self, now: datetime) -> Task | None:
        """Pick a ready task weighted by priority and remember it as selected."""
        chosen = choose_weighted(self.available_tasks(now), self._rng)
        self.current_task_id = chosen.task_id if chosen is not None else None
        return chosen

    def current_task(self) -> Task | None:
        if self.current_task_id is None:
            return None
        return self.tasks_by_id.get(self.current_task_id)

    # ------------------------------------------------------------------
    # Add / edit / delete
    # ------------------------------------------------------------------
    def create_task(self, draft: TaskDraft, now: datetime) -> Task:
        parsed = parse_draft(draft)
        task = Task(
            description=parsed.description,
            priority=parsed.priority,
            recurrence=parsed.recurrence,
        )
        task.last_run = compute_default_last_run(task, now)
        return self.put_task(task)

    def edit_task(self, task_id: str, draft: TaskDraft, now: datetime) -> Task:
        task = self.require_task(task_id)
        parsed = parse_draft(draft)
        task.description = parsed.description
        task.priority = parsed.priority
        task.recurrence = parsed.recurrence
        if task.last_run == 0:
            task.last_run = compute_default_last_run(task, now)
        return task

    def delete_task(self, task_id: str) -> Task:
        task = self.require_task(task_id)
        del self.tasks_by_id[task_id]
        if self.current_task_id == task_id:
            self.current_task_id = None
        self.prune_dangling_dependencies()
        return task

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------
    def mark_done(self, task_id: str | None, now: datetime) -> Task | None:
        """Complete ``task_id``, or the selected task when ``None``."""
        task = self._resolve_task(task_id)
        if task is None:
            return None
        task.mark_done(now)
        if self.current_task_id == task.task_id:
            self.current_task_id = None
        return task

    def requeue(self, task_id: str) -> Task:
        task = self.require_task(task_id)
        task.requeue()
        return task

    # ------------------------------------------------------------------
    # Dependencies
    # ------------------------------------------------------------------
    def add_dependency(self, task_id: str, dependency_id: str) -> Task:
        task = self.require_task(task_id)
        dependency = self.require_task(dependency_id)
        if graph.would_create_cycle(self.tasks_by_id, task, dependency):
            raise ValueError(
                f"'{task.description}' cannot depend on '{dependency.description}': "
                "that would create a dependency cycle"
            )
        task.add_dependency(dependency_id)
        return task

    def remove_dependency(self, task_id: str, dependency_id: str) -> Task:
        task = self.require_task(task_id)
        task.remove_dependency(dependency_id)
        return task

    def dependency_tasks(self, task: Task) -> list[Task]:
        return graph.resolve_dependencies(task, self.tasks_by_id)

    def dependents_of(self, task_id: str) -> list[Task]:
        return graph.dependents_of(task_id, self.tasks_by_id.values())

    def depends_on(self, task: Task, other: Task) -> bool:
        return graph.depends_on(self.tasks_by_id, task, other)

    def possible_dependency_targets(self, task_id: str | None = None) -> list[Task]:
        """Tasks a new task (``None``) or an existing one may depend on."""
        if task_id is None:
            return self.list_tasks()
        task = self.require_task(task_id)
        return graph.possible_dependency_targets(task, self.list_tasks(), is_edit=True)

    def prune_dangling_dependencies(self) -> int:
        """Drop dependency ids pointing at deleted tasks; return how many."""
        removed = 0
        for task in self.tasks_by_id.values():
            dangling = graph.dangling_dependencies(task, self.tasks_by_id)
            if dangling:
                task.dependencies -= dangling
                removed += len(dangling)
        return removed

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def save(self) -> bytes:
        return encode_snapshot(
            Snapshot(tasks=dict(self.tasks_by_id), current_task_id=self.current_task_id)
        )

    def load(self, data: bytes | None) -> bool:
        """Replace state from snapshot bytes; undecodable data leaves no tasks.

        Returns whether the snapshot was decoded.
        """
        try:
            snapshot = decode_snapshot(data) if data else Snapshot()
        except SnapshotError:
            self._apply(Snapshot())
            return False
        self._apply(snapshot)
        return True

    def restore(self, data: bytes) -> int:
        """Replace state from a backup, raising ``SnapshotError`` if invalid."""
        snapshot = decode_snapshot(data)
        snapshot.current_task_id = None
        self._apply(snapshot)
        return len(self.tasks_by_id)

    def _apply(self, snapshot: Snapshot) -> None:
        self.tasks_by_id = dict(snapshot.tasks)
        self.current_task_id = snapshot.current_task_id

    def _resolve_task(self, task_id: str | None) -> Task | None:
        if task_id is None:
            return self.current_task()
        return self.tasks_by_id.get(task_id)
