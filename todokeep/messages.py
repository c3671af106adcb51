from __future__ import annotations

from .errors import ErrorKind

MIN_TASK_LENGTH = 1
MAX_TASK_LENGTH = 500

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.TOO_SHORT: f"A task must have at least {MIN_TASK_LENGTH} character",
    ErrorKind.TOO_LONG: f"A task cannot be longer than {MAX_TASK_LENGTH} characters",
    ErrorKind.DUPLICATE: "This task already exists",
    ErrorKind.INVALID_ID: "Invalid task id",
    ErrorKind.NOT_FOUND: "Task not found",
    ErrorKind.INVALID_FILTER: "Invalid filter. Use: all, pending, completed",
    ErrorKind.PERSISTENCE_ERROR: "Could not save your tasks",
}

LOAD_ERROR = "Could not load your tasks"

SUCCESS_MESSAGES: dict[str, str] = {
    "added": "Task added",
    "updated": "Task updated",
    "deleted": "Task removed",
    "completed": "Task marked as completed",
    "uncompleted": "Task marked as pending",
    "cleared": "All tasks removed",
    "cleared_completed": "Completed tasks removed",
}

# (headline, hint) shown when a filtered listing is empty
EMPTY_STATES: dict[str, tuple[str, str]] = {
    "all": ("Your list is empty", "Add your first task"),
    "pending": ("Nothing pending", "You are all caught up"),
    "completed": ("No completed tasks yet", "Complete a few tasks to see them here"),
}


def error_message(kind: ErrorKind) -> str:
    return ERROR_MESSAGES[kind]


__all__ = [
    "MIN_TASK_LENGTH",
    "MAX_TASK_LENGTH",
    "ERROR_MESSAGES",
    "LOAD_ERROR",
    "SUCCESS_MESSAGES",
    "EMPTY_STATES",
    "error_message",
]
