from __future__ import annotations

from .envelope import SCHEMA_VERSION, PersistedEnvelope
from .task import Task

__all__ = ["PersistedEnvelope", "SCHEMA_VERSION", "Task"]
