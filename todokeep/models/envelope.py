from __future__ import annotations

import datetime

from pydantic import BaseModel, Field

from .task import Task

SCHEMA_VERSION = "1.0.0"


class PersistedEnvelope(BaseModel):
    """Versioned wrapper around the whole task collection.

    This is the single value written to the durable slot. Older payloads that
    are a bare list of task records are accepted by the repository and never
    produced by this model.
    """

    version: str = SCHEMA_VERSION
    timestamp: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC)
    )
    tasks: list[Task] = Field(default_factory=list)


__all__ = ["PersistedEnvelope", "SCHEMA_VERSION"]
