"""Recurring task reminder engine: what should I do next?"""

from whattodo.application.complete_task import CompleteTask
from whattodo.application.create_task import CreateTask
from whattodo.application.delete_task import DeleteTask
from whattodo.application.edit_task import EditTask
from whattodo.application.registry import TaskRegistry
from whattodo.application.requeue_task import RequeueTask
from whattodo.application.runtime import ReminderRuntime
from whattodo.application.validation import TaskDraft, TaskValidationError
from whattodo.application.what_next import WhatNext
from whattodo.domain.priority import Priority
from whattodo.domain.recurrence import RepeatUnit

__all__ = [
    "CompleteTask",
    "CreateTask",
    "DeleteTask",
    "EditTask",
    "Priority",
    "ReminderRuntime",
    "RepeatUnit",
    "RequeueTask",
    "TaskDraft",
    "TaskRegistry",
    "TaskValidationError",
    "WhatNext",
]
