"""Use case: 'what should I do next?' selection."""

from __future__ import annotations

from whattodo.application.runtime import ReminderRuntime
from whattodo.domain.task import Task


class WhatNext:
    """Application use case returning a priority-weighted pick of ready tasks."""

    def __init__(self, runtime: ReminderRuntime) -> None:
        self._runtime = runtime

    def execute(self) -> Task | None:
        return self._runtime.what_next()
