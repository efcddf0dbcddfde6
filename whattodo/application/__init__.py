"""Application use cases for the reminder engine."""

from whattodo.application.complete_task import CompleteTask
from whattodo.application.create_task import CreateTask
from whattodo.application.delete_task import DeleteTask
from whattodo.application.edit_task import EditTask
from whattodo.application.registry import TaskRegistry
from whattodo.application.requeue_task import RequeueTask
from whattodo.application.runtime import ReminderRuntime
from whattodo.application.validation import TaskDraft, TaskValidationError
from whattodo.application.what_next import WhatNext

__all__ = [
    "CompleteTask",
    "CreateTask",
    "DeleteTask",
    "EditTask",
    "ReminderRuntime",
    "RequeueTask",
    "TaskDraft",
    "TaskRegistry",
    "TaskValidationError",
    "WhatNext",
]
