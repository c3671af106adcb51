from __future__ import annotations

from .file_slot import FileSlot
from .interface import KeyValueSlot, QuotaExceededError, SlotError
from .memory_slot import MemorySlot
from .repository import DEFAULT_STORAGE_KEY, TaskRepository

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "FileSlot",
    "KeyValueSlot",
    "MemorySlot",
    "QuotaExceededError",
    "SlotError",
    "TaskRepository",
]
