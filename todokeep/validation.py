from __future__ import annotations

import html
import numbers
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .errors import ErrorKind
from .messages import MAX_TASK_LENGTH, MIN_TASK_LENGTH, error_message
from .models.task import Task

FILTERS: tuple[str, ...] = ("all", "pending", "completed")


@dataclass(slots=True, frozen=True)
class ValidationResult:
    valid: bool
    error: ErrorKind | None = None
    message: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def fail(cls, kind: ErrorKind) -> ValidationResult:
        return cls(valid=False, error=kind, message=error_message(kind))


def validate_task_text(text: Any) -> ValidationResult:
    if not isinstance(text, str) or not text:
        return ValidationResult.fail(ErrorKind.TOO_SHORT)
    length = len(text.strip())
    if length < MIN_TASK_LENGTH:
        return ValidationResult.fail(ErrorKind.TOO_SHORT)
    if length > MAX_TASK_LENGTH:
        return ValidationResult.fail(ErrorKind.TOO_LONG)
    return ValidationResult.ok()


def validate_task_duplicate(text: Any, existing_tasks: Iterable[Task]) -> ValidationResult:
    """Reject text equal to an existing task's text, ignoring case and outer whitespace."""
    if not isinstance(text, str) or not text:
        return ValidationResult.fail(ErrorKind.TOO_SHORT)
    candidate = text.strip().lower()
    if any(t.text.strip().lower() == candidate for t in existing_tasks):
        return ValidationResult.fail(ErrorKind.DUPLICATE)
    return ValidationResult.ok()


def validate_task_id(task_id: Any) -> ValidationResult:
    # bool is a numbers.Real subclass but never a task id
    if task_id is None or isinstance(task_id, bool) or not isinstance(task_id, numbers.Real):
        return ValidationResult.fail(ErrorKind.INVALID_ID)
    if not task_id > 0:
        return ValidationResult.fail(ErrorKind.INVALID_ID)
    return ValidationResult.ok()


def validate_filter(filter_name: Any) -> ValidationResult:
    if filter_name not in FILTERS:
        return ValidationResult.fail(ErrorKind.INVALID_FILTER)
    return ValidationResult.ok()


def sanitize(text: Any) -> str:
    """Trim and HTML-escape `& < > " '` (ampersand first)."""
    if not isinstance(text, str) or not text:
        return ""
    return html.escape(text.strip(), quote=True)


__all__ = [
    "FILTERS",
    "ValidationResult",
    "validate_task_text",
    "validate_task_duplicate",
    "validate_task_id",
    "validate_filter",
    "sanitize",
]
