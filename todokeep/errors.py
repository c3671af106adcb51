from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    TOO_SHORT = "TooShort"
    TOO_LONG = "TooLong"
    DUPLICATE = "Duplicate"
    INVALID_ID = "InvalidId"
    NOT_FOUND = "NotFound"
    INVALID_FILTER = "InvalidFilter"
    PERSISTENCE_ERROR = "PersistenceError"


class TaskError(Exception):
    """A failure surfaced to the caller as a kind + message pair.

    The message is user-facing text suitable for a transient notification.
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class PersistenceError(TaskError):
    """Reading or writing the durable copy of the task collection failed."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.PERSISTENCE_ERROR, message)


__all__ = ["ErrorKind", "TaskError", "PersistenceError"]
