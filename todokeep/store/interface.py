from __future__ import annotations

from typing import Protocol


class SlotError(Exception):
    """The underlying key-value storage could not complete a read or write."""


class QuotaExceededError(SlotError):
    """A write would push the slot past its configured size quota."""


class KeyValueSlot(Protocol):
    """Minimal durable key-value storage.

    Values are opaque strings. Keep this tiny so backends can be swapped
    without touching the repository.
    """

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    def delete(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""


__all__ = ["KeyValueSlot", "SlotError", "QuotaExceededError"]
