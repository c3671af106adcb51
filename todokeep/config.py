from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .store.file_slot import FileSlot
from .store.interface import KeyValueSlot
from .store.memory_slot import MemorySlot
from .store.repository import DEFAULT_STORAGE_KEY

DEFAULT_MAX_BYTES = 5 * 1024 * 1024
STORAGE_BACKENDS = ("file", "redis", "memory")


@dataclass(slots=True)
class TodoConfig:
    storage: str
    data_dir: Path
    storage_key: str
    max_bytes: int | None
    redis_url: str
    key_prefix: str


def _read_max_bytes(raw: str | None) -> int | None:
    value = (raw or "").strip()
    if not value:
        return DEFAULT_MAX_BYTES
    try:
        parsed = int(value)
    except ValueError:
        return DEFAULT_MAX_BYTES
    # 0 (or negative) turns the quota off
    return parsed if parsed > 0 else None


def load_config(env: dict[str, str] | None = None) -> TodoConfig:
    e: dict[str, Any] = dict(os.environ)
    if env:
        e.update(env)
    storage = (e.get("TODO_STORAGE") or "file").strip().lower()
    if storage not in STORAGE_BACKENDS:
        storage = "file"
    data_dir = (e.get("TODO_DATA_DIR") or "").strip() or "~/.todokeep"
    return TodoConfig(
        storage=storage,
        data_dir=Path(data_dir).expanduser(),
        storage_key=(e.get("TODO_STORAGE_KEY") or "").strip() or DEFAULT_STORAGE_KEY,
        max_bytes=_read_max_bytes(e.get("TODO_MAX_BYTES")),
        redis_url=e.get("REDIS_URL", "redis://localhost:6379/0"),
        key_prefix=e.get("TODO_STORE_PREFIX", "todo"),
    )


def build_slot(config: TodoConfig) -> KeyValueSlot:
    if config.storage == "redis":
        # Imported lazily so file/memory users never open a Redis connection pool
        from .store.redis_slot import RedisSlot

        return RedisSlot(url=config.redis_url, key_prefix=config.key_prefix)
    if config.storage == "memory":
        return MemorySlot(max_bytes=config.max_bytes)
    return FileSlot(config.data_dir, max_bytes=config.max_bytes)


__all__ = ["TodoConfig", "load_config", "build_slot", "DEFAULT_MAX_BYTES"]
