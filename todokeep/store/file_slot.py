from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path

from .interface import KeyValueSlot, QuotaExceededError, SlotError

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileSlot(KeyValueSlot):
    """Key-value slot backed by one file per key in a directory.

    - Writes go to a temp file in the same directory, then `os.replace`, so a
      crash never leaves a half-written value behind
    - `max_bytes` bounds the encoded size of a single value (None disables)
    """

    def __init__(self, directory: str | Path, *, max_bytes: int | None = None) -> None:
        self._dir = Path(directory).expanduser()
        self._max_bytes = max_bytes

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise SlotError(f"invalid storage key: {key!r}")
        return self._dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise SlotError(f"failed to read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        data = value.encode("utf-8")
        if self._max_bytes is not None and len(data) > self._max_bytes:
            raise QuotaExceededError(
                f"value for {key!r} is {len(data)} bytes; quota is {self._max_bytes}"
            )
        tmp_name: str | None = None
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self._dir)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as exc:
            raise SlotError(f"failed to write {path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise SlotError(f"failed to delete {path}: {exc}") from exc


__all__ = ["FileSlot"]
