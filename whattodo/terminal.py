"""Terminal adapter: a small command loop over the reminder runtime."""

from __future__ import annotations

import argparse
import shlex

from whattodo.adapters.presentation import format_time, parse_repeat_unit, task_summary
from whattodo.application.complete_task import CompleteTask
from whattodo.application.create_task import CreateTask
from whattodo.application.delete_task import DeleteTask
from whattodo.application.edit_task import EditTask
from whattodo.application.requeue_task import RequeueTask
from whattodo.application.runtime import ReminderRuntime
from whattodo.application.validation import TaskDraft, TaskValidationError
from whattodo.application.what_next import WhatNext
from whattodo.domain.recurrence import RepeatUnit
from whattodo.domain.task import Task


HELP_TEXT = """\
tasks | available | what | current | done [id] | requeue <id>... | delete <id>...
add <description> [--priority P] [--every N UNIT] [--on DAY] [--in MONTH]
    [--at TIME] [--from TIME] [--to TIME] [--after ID]...
edit <id> [same options as add; --description TEXT] | show <id>
depend <id> <dependency-id> | undepend <id> <dependency-id> | check
backup <path> | restore <path> | quit"""


class _CommandParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise ValueError(message)


def _task_options_parser(prog: str, *, editing: bool) -> _CommandParser:
    parser = _CommandParser(prog=prog, add_help=False)
    if editing:
        parser.add_argument("task_id")
        parser.add_argument("--description")
    else:
        parser.add_argument("description", nargs="+")
    parser.add_argument("--priority")
    parser.add_argument("--every", nargs=2, metavar=("N", "UNIT"))
    parser.add_argument("--once", action="store_true")
    parser.add_argument("--on")
    parser.add_argument("--in", dest="month")
    parser.add_argument("--at")
    parser.add_argument("--from", dest="min_time")
    parser.add_argument("--to", dest="max_time")
    parser.add_argument("--after", action="append", default=[])
    return parser


def _is_weekly(unit: RepeatUnit | str | None) -> bool:
    if unit is None:
        return False
    try:
        return parse_repeat_unit(unit) is RepeatUnit.WEEKLY
    except ValueError:
        return False


class TerminalAdapter:
    """Interactive terminal front end for one runtime."""

    __slots__ = (
        "_runtime",
        "_running",
        "_create",
        "_edit",
        "_complete",
        "_requeue",
        "_delete",
        "_what_next",
    )

    def __init__(self, runtime: ReminderRuntime) -> None:
        self._runtime = runtime
        self._running = False
        self._create = CreateTask(runtime)
        self._edit = EditTask(runtime)
        self._complete = CompleteTask(runtime)
        self._requeue = RequeueTask(runtime)
        self._delete = DeleteTask(runtime)
        self._what_next = WhatNext(runtime)

    def start(self) -> None:
        self._running = True
        print("What-to-do reminder started. Type 'help' for commands.")

        while self._running:
            try:
                raw = input("whattodo> ").strip()
            except EOFError:
                break
            except KeyboardInterrupt:
                break

            if not raw:
                continue
            if raw in {"quit", "exit"}:
                break

            try:
                print(self.handle(raw))
            except TaskValidationError as exc:
                print("Please fix the following:")
                for error in exc.errors:
                    print(f"  - {error}")
            except (KeyError, ValueError, OSError) as exc:
                print(f"Error: {exc}")

        self.stop()

    def stop(self) -> None:
        self._running = False

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def handle(self, raw: str) -> str:
        """Run one command line and return the text to show."""
        tokens = shlex.split(raw)
        command, args = tokens[0].lower(), tokens[1:]

        if command == "help":
            return HELP_TEXT
        if command == "tasks":
            return self._format_list(self._runtime.list_tasks())
        if command == "available":
            return self._format_list(self._runtime.available_tasks())
        if command == "what":
            task = self._what_next.execute()
            return task.description if task is not None else "Nothing to do right now."
        if command == "current":
            task = self._runtime.current_task()
            if task is None or task.done:
                return "No task selected. Type 'what' for one."
            return task.description
        if command == "done":
            task_id = self._resolve_id(args[0]) if args else None
            task = self._complete.execute(task_id)
            return f"Done: {task.description}" if task is not None else "No task selected."
        if command == "requeue":
            tasks = self._requeue.execute(*self._resolve_ids(args))
            return "\n".join(f"Requeued: {task.description}" for task in tasks)
        if command == "delete":
            tasks = self._delete.execute(*self._resolve_ids(args))
            return "\n".join(f"Deleted: {task.description}" for task in tasks)
        if command == "add":
            return self._add(args)
        if command == "edit":
            return self._edit_task(args)
        if command == "show":
            return self._show(self._require_one(args))
        if command == "depend":
            task_id, dependency_id = self._resolve_ids(args, expected=2)
            task = self._runtime.add_dependency(task_id, dependency_id)
            return self._show(task.task_id)
        if command == "undepend":
            task_id, dependency_id = self._resolve_ids(args, expected=2)
            task = self._runtime.remove_dependency(task_id, dependency_id)
            return self._show(task.task_id)
        if command == "check":
            ready = self._runtime.check_availability()
            return f"{len(ready)} task(s) became ready."
        if command == "backup":
            path = self._runtime.backup(self._require_arg(args, "path"))
            return f"Backed up to {path}"
        if command == "restore":
            count = self._runtime.restore(self._require_arg(args, "path"))
            return f"Restored {count} task(s)."
        return "Unknown command. Type 'help'."

    def _add(self, args: list[str]) -> str:
        options = _task_options_parser("add", editing=False).parse_args(args)
        draft = TaskDraft(description=" ".join(options.description), priority="Low")
        self._apply_options(draft, options)
        task = self._create.execute(
            draft,
            depends_on=tuple(self._resolve_id(prefix) for prefix in options.after),
        )
        return self._show(task.task_id)

    def _edit_task(self, args: list[str]) -> str:
        options = _task_options_parser("edit", editing=True).parse_args(args)
        task_id = self._resolve_id(options.task_id)
        draft = TaskDraft.from_task(self._require_task(task_id))
        if options.description:
            draft.description = options.description
        self._apply_options(draft, options)
        task = self._edit.execute(task_id, draft)
        for prefix in options.after:
            self._runtime.add_dependency(task.task_id, self._resolve_id(prefix))
        return self._show(task.task_id)

    @staticmethod
    def _apply_options(draft: TaskDraft, options: argparse.Namespace) -> None:
        if options.priority:
            draft.priority = options.priority
        if options.once:
            draft.repeats = False
        if options.every:
            draft.repeats = True
            draft.interval, draft.unit = options.every
        if options.on is not None:
            if _is_weekly(draft.unit):
                draft.day_of_week = options.on
            else:
                draft.day_of_month = options.on
        if options.month is not None:
            draft.month = options.month
        if options.at is not None:
            draft.time = options.at
        if options.min_time is not None:
            draft.min_time = options.min_time
        if options.max_time is not None:
            draft.max_time = options.max_time

    def _show(self, task_id: str) -> str:
        task = self._require_task(task_id)
        lines = [f"[{task.task_id[:8]}] {self._runtime.task_state(task).value}"]
        lines.append(task_summary(task))
        due = self._runtime.due_time(task)
        if due is not None:
            lines.append(f"Next due: {due:%Y-%m-%d} {format_time(due.hour * 60 + due.minute)}")
        for dependency in self._runtime.dependency_tasks(task):
            lines.append(f"After: [{dependency.task_id[:8]}] {dependency.description}")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _format_list(self, tasks: list[Task]) -> str:
        if not tasks:
            return "(no tasks)"
        rows = sorted(tasks, key=lambda task: task.description.lower())
        return "\n".join(
            f"[{task.task_id[:8]}] {self._runtime.task_state(task).value:<7} {task.description}"
            for task in rows
        )

    def _resolve_id(self, prefix: str) -> str:
        matches = [task.task_id for task in self._runtime.list_tasks() if task.task_id.startswith(prefix)]
        if not matches:
            raise KeyError(f"Unknown task id: {prefix}")
        if len(matches) > 1:
            raise ValueError(f"Ambiguous task id: {prefix}")
        return matches[0]

    def _resolve_ids(self, prefixes: list[str], *, expected: int | None = None) -> list[str]:
        if expected is not None and len(prefixes) != expected:
            raise ValueError(f"Expected {expected} task ids")
        if not prefixes and expected is None:
            raise ValueError("At least one task id is required")
        return [self._resolve_id(prefix) for prefix in prefixes]

    def _require_one(self, args: list[str]) -> str:
        return self._resolve_ids(args, expected=1)[0]

    def _require_task(self, task_id: str) -> Task:
        task = self._runtime.get_task(task_id)
        if task is None:
            raise KeyError(f"Unknown task id: {task_id}")
        return task

    @staticmethod
    def _require_arg(args: list[str], name: str) -> str:
        if not args:
            raise ValueError(f"Missing {name}")
        return args[0]
