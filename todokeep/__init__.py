from __future__ import annotations

from .config import TodoConfig, build_slot, load_config
from .errors import ErrorKind, PersistenceError, TaskError
from .models import PersistedEnvelope, Task
from .service import TodoService
from .store import TaskRepository
from .validation import sanitize

__version__ = "0.1.0"


def open_service(config: TodoConfig | None = None) -> TodoService:
    """Build a TodoService over the configured storage backend."""
    cfg = config or load_config()
    repository = TaskRepository(build_slot(cfg), key=cfg.storage_key)
    return TodoService(repository)


__all__ = [
    "ErrorKind",
    "PersistedEnvelope",
    "PersistenceError",
    "Task",
    "TaskError",
    "TaskRepository",
    "TodoConfig",
    "TodoService",
    "load_config",
    "open_service",
    "sanitize",
]
