from __future__ import annotations

from typing import Any, cast

import redis

from .interface import KeyValueSlot, SlotError


class RedisSlot(KeyValueSlot):
    """Redis-backed key-value slot.

    Each key maps to one Redis string at `{prefix}:{key}`.
    """

    def __init__(
        self,
        *,
        url: str = "redis://localhost:6379/0",
        key_prefix: str = "todo",
        client: Any | None = None,
    ) -> None:
        if client is not None:
            self._redis = client
        else:
            # decode_responses=True returns str everywhere for easier JSON handling
            self._redis = redis.Redis.from_url(url, decode_responses=True)
        self._prefix = key_prefix.rstrip(":")

    def get_client(self) -> Any:
        return self._redis

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def get(self, key: str) -> str | None:
        try:
            raw = cast(str | bytes | None, self._redis.get(self._key(key)))
        except redis.exceptions.RedisError as exc:
            raise SlotError(f"redis read failed: {exc}") from exc
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        return raw

    def set(self, key: str, value: str) -> None:
        try:
            self._redis.set(self._key(key), value)
        except redis.exceptions.RedisError as exc:
            raise SlotError(f"redis write failed: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(self._key(key))
        except redis.exceptions.RedisError as exc:
            raise SlotError(f"redis delete failed: {exc}") from exc


__all__ = ["RedisSlot"]
