"""Dependency graph queries between tasks.

Dependencies are stored as task ids on each task, so an edge may point at a
task that has since been deleted. Every query here treats such dangling ids
as absent and never mutates the tasks; pruning them is a separate step.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .task import Task


def resolve_dependencies(task: Task, tasks_by_id: Mapping[str, Task]) -> list[Task]:
    """Return the dependency tasks of ``task`` that still exist."""
    return [
        dependency
        for dependency_id in sorted(task.dependencies)
        if (dependency := tasks_by_id.get(dependency_id)) is not None
    ]


def dangling_dependencies(task: Task, tasks_by_id: Mapping[str, Task]) -> set[str]:
    return {dependency_id for dependency_id in task.dependencies if dependency_id not in tasks_by_id}


def dependency_satisfied(task: Task, dependency: Task) -> bool:
    """Whether ``dependency`` no longer blocks ``task``.

    A one-off dependency must be done. A repeating dependency must have run
    at least as recently as ``task`` last ran.
    """
    if not dependency.is_repeating:
        return dependency.done
    return dependency.last_run >= task.last_run


def dependencies_satisfied(task: Task, tasks_by_id: Mapping[str, Task]) -> bool:
    return all(
        dependency_satisfied(task, dependency)
        for dependency in resolve_dependencies(task, tasks_by_id)
    )


def depends_on(tasks_by_id: Mapping[str, Task], task: Task, other: Task) -> bool:
    """Whether ``task`` depends on ``other`` directly or transitively.

    Every task counts as depending on itself. Cycles in the stored graph are
    tolerated.
    """
    if task.task_id == other.task_id:
        return True

    visited: set[str] = {task.task_id}
    pending = list(task.dependencies)
    while pending:
        current_id = pending.pop()
        if current_id == other.task_id:
            return True
        if current_id in visited:
            continue
        visited.add(current_id)
        current = tasks_by_id.get(current_id)
        if current is not None:
            pending.extend(current.dependencies - visited)
    return False


def would_create_cycle(tasks_by_id: Mapping[str, Task], task: Task, dependency: Task) -> bool:
    """Whether adding the edge ``task -> dependency`` closes a cycle."""
    return depends_on(tasks_by_id, dependency, task)


def possible_dependency_targets(
    task: Task,
    all_tasks: Iterable[Task],
    *,
    is_edit: bool,
) -> list[Task]:
    """Tasks that ``task`` may be made to depend on.

    When editing an existing task, anything already depending on it (itself
    included) is excluded. A task being created has no dependents yet, so
    every existing task qualifies.
    """
    candidates = list(all_tasks)
    if not is_edit:
        return candidates

    tasks_by_id = {candidate.task_id: candidate for candidate in candidates}
    tasks_by_id.setdefault(task.task_id, task)
    return [
        candidate
        for candidate in candidates
        if not depends_on(tasks_by_id, candidate, task)
    ]


def dependents_of(task_id: str, all_tasks: Iterable[Task]) -> list[Task]:
    return [task for task in all_tasks if task_id in task.dependencies]
