from __future__ import annotations

from .interface import KeyValueSlot, QuotaExceededError


class MemorySlot(KeyValueSlot):
    """Process-local slot. Nothing survives the process; useful for tests."""

    def __init__(self, *, max_bytes: int | None = None) -> None:
        self._values: dict[str, str] = {}
        self._max_bytes = max_bytes

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        size = len(value.encode("utf-8"))
        if self._max_bytes is not None and size > self._max_bytes:
            raise QuotaExceededError(
                f"value for {key!r} is {size} bytes; quota is {self._max_bytes}"
            )
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


__all__ = ["MemorySlot"]
