"""JSON snapshot codec and atomic file store for the task registry."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from whattodo.domain.priority import Priority
from whattodo.domain.recurrence import (
    END_OF_DAY,
    START_OF_DAY,
    Month,
    RecurrenceRule,
    RepeatUnit,
    Weekday,
)
from whattodo.domain.task import Task


ANY_TIME = -1
ANY_FIELD = 0

# Repeat type numbers used by older camelCase backup files.
_LEGACY_REPEAT_TYPES = {
    0: RepeatUnit.NONE,
    1: RepeatUnit.HOURLY,
    2: RepeatUnit.DAILY,
    3: RepeatUnit.WEEKLY,
    4: RepeatUnit.MONTHLY,
    5: RepeatUnit.YEARLY,
}


class SnapshotError(ValueError):
    """Raised when snapshot bytes cannot be decoded into tasks."""


@dataclass(slots=True)
class Snapshot:
    """Serializable registry state: tasks by id plus the selected task id."""

    tasks: dict[str, Task] = field(default_factory=dict)
    current_task_id: str | None = None


# ----------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------
def encode_snapshot(snapshot: Snapshot) -> bytes:
    payload = {
        "tasks": {
            task_id: _task_to_record(task)
            for task_id, task in snapshot.tasks.items()
        },
        "current_task_id": snapshot.current_task_id,
    }
    return json.dumps(payload, indent=2, sort_keys=True).encode("utf-8")


def _task_to_record(task: Task) -> dict[str, Any]:
    rule = task.recurrence
    return {
        "id": task.task_id,
        "description": task.description,
        "done": task.done,
        "priority": task.priority.weight,
        "repeat_unit": rule.unit.value,
        "repeat_interval": rule.interval,
        "dependencies": sorted(task.dependencies),
        "last_run": task.last_run,
        "minute": ANY_TIME if rule.minute is None else rule.minute,
        "day_of_month": ANY_FIELD if rule.day_of_month is None else rule.day_of_month,
        "day_of_week": ANY_FIELD if rule.day_of_week is None else int(rule.day_of_week),
        "month": ANY_FIELD if rule.month is None else int(rule.month),
        "min_minute": rule.min_minute,
        "max_minute": rule.max_minute,
    }


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------
def decode_snapshot(data: bytes | str) -> Snapshot:
    """Decode snapshot bytes, raising :class:`SnapshotError` on any defect."""
    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        payload = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SnapshotError(f"Snapshot is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict) or "tasks" not in payload:
        raise SnapshotError("Snapshot has no 'tasks' field")

    raw_tasks = payload["tasks"]
    if isinstance(raw_tasks, dict):
        rows = [(key, row) for key, row in raw_tasks.items()]
    elif isinstance(raw_tasks, list):
        rows = [(None, row) for row in raw_tasks]
    elif raw_tasks is None:
        rows = []
    else:
        raise SnapshotError("Snapshot 'tasks' must be an object or a list")

    tasks: dict[str, Task] = {}
    for key, row in rows:
        task = _task_from_record(row, fallback_id=key)
        tasks[task.task_id] = task

    current = payload.get("current_task_id", payload.get("currentTaskId"))
    if not isinstance(current, str) or current not in tasks:
        current = None
    return Snapshot(tasks=tasks, current_task_id=current)


def _task_from_record(row: object, *, fallback_id: str | None) -> Task:
    if not isinstance(row, dict):
        raise SnapshotError("Task record must be an object")

    task_id = row.get("id", fallback_id)
    if not isinstance(task_id, str) or not task_id.strip():
        raise SnapshotError("Task record has no id")

    try:
        rule = RecurrenceRule(
            unit=_repeat_unit(row),
            interval=_int(row, "repeat_interval", "repeatInterval", default=0),
            minute=_wildcard(_int(row, "minute", default=ANY_TIME), ANY_TIME),
            day_of_week=_optional(
                _wildcard(_int(row, "day_of_week", "dayOfWeek", default=ANY_FIELD), ANY_FIELD),
                Weekday,
            ),
            day_of_month=_wildcard(
                _int(row, "day_of_month", "dayOfMonth", default=ANY_FIELD),
                ANY_FIELD,
            ),
            month=_optional(_wildcard(_int(row, "month", default=ANY_FIELD), ANY_FIELD), Month),
            min_minute=_int(row, "min_minute", "minMinute", default=START_OF_DAY),
            max_minute=_int(row, "max_minute", "maxMinute", default=END_OF_DAY),
        )
        priority = Priority.from_value(_int(row, "priority", "weight", default=Priority.LOW.weight))
    except ValueError as exc:
        if isinstance(exc, SnapshotError):
            raise
        raise SnapshotError(f"Task {task_id}: {exc}") from exc

    description = row.get("description", "")
    done = row.get("done", False)
    dependencies = row.get("dependencies", [])
    if not isinstance(description, str):
        raise SnapshotError(f"Task {task_id}: description must be a string")
    if not isinstance(done, bool):
        raise SnapshotError(f"Task {task_id}: done must be a boolean")
    if not isinstance(dependencies, list) or not all(isinstance(item, str) for item in dependencies):
        raise SnapshotError(f"Task {task_id}: dependencies must be a list of ids")

    return Task(
        description=description,
        priority=priority,
        recurrence=rule,
        done=done,
        dependencies=set(dependencies) - {task_id},
        last_run=max(0, _int(row, "last_run", "lastRun", default=0)),
        task_id=task_id,
    )


def _repeat_unit(row: dict[str, Any]) -> RepeatUnit:
    if "repeat_unit" in row:
        raw = row["repeat_unit"]
        if not isinstance(raw, str):
            raise SnapshotError("repeat_unit must be a string")
        return RepeatUnit.from_value(raw)
    legacy = _int(row, "repeatType", default=0)
    if legacy not in _LEGACY_REPEAT_TYPES:
        raise SnapshotError(f"Unknown repeatType: {legacy}")
    return _LEGACY_REPEAT_TYPES[legacy]


def _int(row: dict[str, Any], *keys: str, default: int) -> int:
    for key in keys:
        if key not in row:
            continue
        value = row[key]
        if isinstance(value, bool) or not isinstance(value, int):
            raise SnapshotError(f"{key} must be an integer, got {value!r}")
        return value
    return default


def _wildcard(value: int, sentinel: int) -> int | None:
    if value == sentinel:
        return None
    return value


def _optional(value: int | None, enum_type: type) -> Any:
    if value is None:
        return None
    return enum_type(value)


# ----------------------------------------------------------------------
# File store
# ----------------------------------------------------------------------
class SnapshotStore:
    """Reads and atomically replaces one snapshot file."""

    __slots__ = ("path",)

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def read_bytes(self) -> bytes | None:
        if not self.path.exists():
            return None
        return self.path.read_bytes()

    def write_bytes(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(f"{self.path.suffix}.tmp")
        temp_path.write_bytes(data)
        temp_path.replace(self.path)
