from __future__ import annotations

import datetime as _dt
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utc_now() -> _dt.datetime:
    return _dt.datetime.now(_dt.UTC)


class Task(BaseModel):
    """One to-do item.

    - `id` and `created_at` are fixed at construction
    - `text` is stored already sanitized; this model never validates or escapes it
    - serialized with the camelCase `createdAt` key used by the persisted format
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int | float = Field(frozen=True)
    text: str
    completed: bool = False
    created_at: _dt.datetime = Field(default_factory=_utc_now, alias="createdAt", frozen=True)

    @field_validator("id")
    @classmethod
    def _positive_id(cls, value: int | float) -> int | float:
        if (isinstance(value, float) and not math.isfinite(value)) or not value > 0:
            raise ValueError("id must be a positive finite number")
        return value

    def toggle(self) -> bool:
        self.completed = not self.completed
        return self.completed

    def update_text(self, new_text: str) -> None:
        self.text = new_text

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["Task"]
