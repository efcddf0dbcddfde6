"""Application runtime wiring the task registry to a clock, storage and notifications."""

from __future__ import annotations

import random
from datetime import datetime
from pathlib import Path
from threading import RLock, Timer

from whattodo.adapters.clock import SystemClock
from whattodo.adapters.snapshot import SnapshotError, SnapshotStore
from whattodo.adapters.terminal_notifier import TerminalNotifier
from whattodo.application.registry import TaskRegistry
from whattodo.application.validation import TaskDraft
from whattodo.domain.task import Task, TaskState
from whattodo.ports.clock import Clock
from whattodo.ports.notifications import NotificationEventType, NotificationPort


DEFAULT_POLL_INTERVAL_MINUTES = 5.0
TASKS_FILE_NAME = "tasks.json"


class ReminderRuntime:
    """Single-user reminder runtime.

    Every command and the periodic availability check run under one lock, so
    the registry only ever sees one caller at a time.
    """

    __slots__ = (
        "registry",
        "clock",
        "notifier",
        "poll_interval_minutes",
        "_store",
        "_lock",
        "_enable_timers",
        "_poll_timer",
        "_ready_ids",
        "_closed",
    )

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        notifier: NotificationPort | None = None,
        rng: random.Random | None = None,
        persistence_dir: str | Path | None = None,
        enable_timers: bool = True,
        poll_interval_minutes: float = DEFAULT_POLL_INTERVAL_MINUTES,
    ) -> None:
        if poll_interval_minutes <= 0:
            raise ValueError("poll_interval_minutes must be > 0")

        self.clock: Clock = clock or SystemClock()
        self.notifier: NotificationPort = notifier or TerminalNotifier()
        self.poll_interval_minutes = poll_interval_minutes
        self.registry = TaskRegistry(rng=rng)

        self._lock = RLock()
        self._enable_timers = enable_timers
        self._poll_timer: Timer | None = None
        self._closed = False
        self._store = (
            SnapshotStore(Path(persistence_dir).expanduser().resolve() / TASKS_FILE_NAME)
            if persistence_dir
            else None
        )

        if self._store is not None:
            self._load_persisted_state_unlocked()

        self._ready_ids = {task.task_id for task in self.registry.available_tasks(self._now())}
        self._arm_poll_timer()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Stop the availability timer."""
        with self._lock:
            self._closed = True
            self._cancel_poll_timer()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def create_task(self, draft: TaskDraft) -> Task:
        with self._lock:
            task = self.registry.create_task(draft, self._now())
            self._persist_state_unlocked()
            return task

    def edit_task(self, task_id: str, draft: TaskDraft) -> Task:
        with self._lock:
            task = self.registry.edit_task(task_id, draft, self._now())
            self._persist_state_unlocked()
            return task

    def delete_task(self, task_id: str) -> Task:
        """Delete a task and announce the dependents it no longer blocks."""
        with self._lock:
            now = self._now()
            blocked = [
                dependent
                for dependent in self.registry.dependents_of(task_id)
                if not self.registry.is_available(dependent, now)
            ]
            task = self.registry.delete_task(task_id)
            self._ready_ids.discard(task_id)
            self._persist_state_unlocked()

            unblocked = [dependent for dependent in blocked if self.registry.is_available(dependent, now)]
            if unblocked:
                names = ", ".join(f"'{dependent.description}'" for dependent in unblocked)
                self.notifier.notify_immediately(
                    f"Deleting '{task.description}' unblocked {names}.",
                    NotificationEventType.INFO,
                )
            return task

    def complete_task(self, task_id: str | None = None) -> Task | None:
        with self._lock:
            task = self.registry.mark_done(task_id, self._now())
            if task is None:
                return None
            self._ready_ids.discard(task.task_id)
            self._persist_state_unlocked()
            self.notifier.notify_immediately(
                f"Completed '{task.description}'.",
                NotificationEventType.TASK_COMPLETED,
            )
            return task

    def requeue_task(self, task_id: str) -> Task:
        with self._lock:
            task = self.registry.requeue(task_id)
            self._persist_state_unlocked()
            return task

    def add_dependency(self, task_id: str, dependency_id: str) -> Task:
        with self._lock:
            task = self.registry.add_dependency(task_id, dependency_id)
            self._persist_state_unlocked()
            return task

    def remove_dependency(self, task_id: str, dependency_id: str) -> Task:
        with self._lock:
            task = self.registry.remove_dependency(task_id, dependency_id)
            self._persist_state_unlocked()
            return task

    # ------------------------------------------------------------------
    # Primary use case
    # ------------------------------------------------------------------
    def what_next(self) -> Task | None:
        """Pick the next task to work on, weighted by priority."""
        with self._lock:
            task = self.registry.next_task(self._now())
            self._persist_state_unlocked()
            if task is not None:
                self.notifier.notify_immediately(
                    f"Next up: '{task.description}'.",
                    NotificationEventType.TASK_SELECTED,
                )
            return task

    def check_availability(self) -> list[Task]:
        """Re-evaluate availability and announce tasks that just became ready.

        Announcements are held back while a selected task is still open.
        Returns the newly ready tasks.
        """
        with self._lock:
            pruned = self.registry.prune_dangling_dependencies()
            ready = self.registry.available_tasks(self._now())
            newly_ready = [task for task in ready if task.task_id not in self._ready_ids]
            self._ready_ids = {task.task_id for task in ready}

            if pruned:
                self._persist_state_unlocked()

            if newly_ready and not self._has_open_selection_unlocked():
                for task in newly_ready:
                    self.notifier.notify_immediately(
                        f"'{task.description}' is ready.",
                        NotificationEventType.TASK_READY,
                    )
            return newly_ready

    # ------------------------------------------------------------------
    # Backup / restore
    # ------------------------------------------------------------------
    def backup(self, path: str | Path) -> Path:
        with self._lock:
            store = SnapshotStore(path)
            store.write_bytes(self.registry.save())
            return store.path

    def restore(self, path: str | Path) -> int:
        """Replace every task with the contents of a backup file.

        Unlike loading the working file, a bad backup is reported to the
        caller as :class:`SnapshotError` and the current tasks are kept.
        """
        with self._lock:
            try:
                data = SnapshotStore(path).read_bytes()
            except OSError as exc:
                raise SnapshotError(f"Could not read backup {str(path)!r}: {exc}") from exc
            if data is None:
                raise SnapshotError(f"Backup file not found: {str(path)!r}")

            count = self.registry.restore(data)
            self._ready_ids = {task.task_id for task in self.registry.available_tasks(self._now())}
            self._persist_state_unlocked()
            task_word = "task" if count == 1 else "tasks"
            self.notifier.notify_immediately(
                f"Restored {count} {task_word} from backup.",
                NotificationEventType.INFO,
            )
            return count

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_tasks(self) -> list[Task]:
        """Return all tasks as a snapshot list."""
        with self._lock:
            return self.registry.list_tasks()

    def available_tasks(self) -> list[Task]:
        with self._lock:
            return self.registry.available_tasks(self._now())

    def get_task(self, task_id: str) -> Task | None:
        with self._lock:
            return self.registry.get_task(task_id)

    def current_task(self) -> Task | None:
        with self._lock:
            return self.registry.current_task()

    def task_state(self, task: Task) -> TaskState:
        with self._lock:
            return self.registry.task_state(task, self._now())

    def due_time(self, task: Task) -> datetime | None:
        with self._lock:
            return self.registry.due_time(task, self._now())

    def dependency_tasks(self, task: Task) -> list[Task]:
        with self._lock:
            return self.registry.dependency_tasks(task)

    def possible_dependency_targets(self, task_id: str | None = None) -> list[Task]:
        with self._lock:
            return self.registry.possible_dependency_targets(task_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _now(self) -> datetime:
        return self.clock.now()

    def _has_open_selection_unlocked(self) -> bool:
        current = self.registry.current_task()
        return current is not None and not current.done

    def _arm_poll_timer(self) -> None:
        if not self._enable_timers or self._closed:
            return

        self._cancel_poll_timer()
        self._poll_timer = Timer(self.poll_interval_minutes * 60.0, self._on_poll_timer)
        self._poll_timer.daemon = True
        self._poll_timer.start()

    def _on_poll_timer(self) -> None:
        with self._lock:
            if self._closed:
                return
            self.check_availability()
            self._arm_poll_timer()

    def _cancel_poll_timer(self) -> None:
        if self._poll_timer is not None:
            self._poll_timer.cancel()
            self._poll_timer = None

    def _persist_state_unlocked(self) -> None:
        if self._store is None:
            return
        self._store.write_bytes(self.registry.save())

    def _load_persisted_state_unlocked(self) -> None:
        if self._store is None:
            return

        try:
            data = self._store.read_bytes()
        except OSError:
            loaded = False
        else:
            if data is None:
                return
            loaded = self.registry.load(data)

        if not loaded:
            self.notifier.notify_immediately(
                f"Saved tasks in '{self._store.path}' could not be read; starting with no tasks.",
                NotificationEventType.INFO,
            )
