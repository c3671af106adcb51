from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from todokeep.errors import ErrorKind, PersistenceError
from todokeep.messages import LOAD_ERROR, error_message
from todokeep.models import SCHEMA_VERSION, PersistedEnvelope, Task
from todokeep.observability import get_json_logger

from .interface import KeyValueSlot, SlotError

DEFAULT_STORAGE_KEY = "todoList"


class TaskRepository:
    """Stores the whole task collection as one versioned JSON value.

    Layout under the fixed key:
    - current: `{"version", "timestamp", "tasks": [...]}`
    - legacy: a bare JSON list of task records, read but never written
    """

    def __init__(
        self,
        slot: KeyValueSlot,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        version: str = SCHEMA_VERSION,
    ) -> None:
        self._slot = slot
        self.key = key
        self.version = version
        self._logger = get_json_logger("todokeep.store")

    def save(self, tasks: Iterable[Task]) -> None:
        envelope = PersistedEnvelope(version=self.version, tasks=list(tasks))
        payload = envelope.model_dump_json(by_alias=True)
        try:
            self._slot.set(self.key, payload)
        except SlotError as exc:
            self._logger.error(
                "save failed",
                exc_info=True,
                extra={"event": "save_failed", "key": self.key},
            )
            raise PersistenceError(error_message(ErrorKind.PERSISTENCE_ERROR)) from exc
        self._logger.debug(
            "tasks saved",
            extra={"event": "save", "key": self.key, "count": len(envelope.tasks)},
        )

    def load(self) -> list[Task]:
        try:
            raw = self._slot.get(self.key)
        except SlotError as exc:
            raise PersistenceError(LOAD_ERROR) from exc
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceError(LOAD_ERROR) from exc
        records = self._extract_records(data)
        try:
            tasks = [Task.model_validate(r) for r in records]
        except ValidationError as exc:
            raise PersistenceError(LOAD_ERROR) from exc
        if len({t.id for t in tasks}) != len(tasks):
            self._logger.warning(
                "stored tasks share an id", extra={"event": "duplicate_ids", "key": self.key}
            )
            raise PersistenceError(LOAD_ERROR)
        self._logger.debug(
            "tasks loaded",
            extra={"event": "load", "key": self.key, "count": len(tasks)},
        )
        return tasks

    def clear(self) -> None:
        try:
            self._slot.delete(self.key)
        except SlotError:
            self._logger.error(
                "clear failed",
                exc_info=True,
                extra={"event": "clear_failed", "key": self.key},
            )

    @staticmethod
    def _extract_records(data: Any) -> list[Any]:
        # Supports older payloads (bare list, no envelope)
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get("tasks"), list):
            return data["tasks"]
        raise PersistenceError(LOAD_ERROR)


__all__ = ["TaskRepository", "DEFAULT_STORAGE_KEY"]
