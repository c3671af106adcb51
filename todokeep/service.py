from __future__ import annotations

import math
from typing import Any, NoReturn

from .errors import ErrorKind, PersistenceError, TaskError
from .messages import error_message
from .models.task import Task
from .observability import get_json_logger, get_metrics
from .store.repository import TaskRepository
from .validation import (
    ValidationResult,
    sanitize,
    validate_filter,
    validate_task_duplicate,
    validate_task_id,
    validate_task_text,
)

# Alias keeps annotations unambiguous next to the `list` method below
TaskList = list[Task]


class TodoService:
    """Owns the live task collection.

    Every successful mutation is written through to the repository before the
    call returns. Validation failures raise `TaskError` and leave the
    collection untouched. A `PersistenceError` means the in-memory change was
    applied but not stored; it is not rolled back.

    Tasks handed out are copies. Changing them has no effect on the service.
    """

    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository
        self._tasks: TaskList = []
        self._next_id = 1
        self._logger = get_json_logger("todokeep.service")
        self._metrics = get_metrics()
        self._load()

    # ----------------------------
    # Mutations
    # ----------------------------
    def add(self, text: Any) -> Task:
        self._count("add")
        self._check("add", validate_task_text(text))
        clean = sanitize(text)
        # stored texts are sanitized, so compare in that form
        self._check("add", validate_task_duplicate(clean, self._tasks))

        task = Task(id=self._allocate_id(), text=clean)
        self._tasks.append(task)
        self._logger.info("task added", extra={"event": "task_added", "task_id": task.id})
        self._persist("add")
        return task.model_copy()

    def remove(self, task_id: Any) -> bool:
        self._count("remove")
        self._check("remove", validate_task_id(task_id))

        remaining = [t for t in self._tasks if t.id != task_id]
        if len(remaining) == len(self._tasks):
            self._fail("remove", ErrorKind.NOT_FOUND)
        self._tasks = remaining
        self._logger.info("task removed", extra={"event": "task_removed", "task_id": task_id})
        self._persist("remove")
        return True

    def toggle(self, task_id: Any) -> Task:
        self._count("toggle")
        self._check("toggle", validate_task_id(task_id))

        task = self._find("toggle", task_id)
        completed = task.toggle()
        self._logger.info(
            "task toggled",
            extra={
                "event": "task_toggled",
                "task_id": task.id,
                "metadata": {"completed": completed},
            },
        )
        self._persist("toggle")
        return task.model_copy()

    def edit(self, task_id: Any, new_text: Any) -> Task:
        # Edits skip the duplicate check that add() performs.
        self._count("edit")
        self._check("edit", validate_task_id(task_id))
        self._check("edit", validate_task_text(new_text))

        task = self._find("edit", task_id)
        task.update_text(sanitize(new_text))
        self._logger.info("task edited", extra={"event": "task_edited", "task_id": task.id})
        self._persist("edit")
        return task.model_copy()

    def clear_completed(self) -> int:
        self._count("clear_completed")
        remaining = [t for t in self._tasks if not t.completed]
        removed = len(self._tasks) - len(remaining)
        if removed == 0:
            return 0
        self._tasks = remaining
        self._logger.info(
            "completed tasks removed", extra={"event": "completed_cleared", "count": removed}
        )
        self._persist("clear_completed")
        return removed

    def clear(self) -> int:
        """Drop every task and the stored copy. Storage errors are only logged."""
        self._count("clear")
        removed = len(self._tasks)
        self._tasks = []
        self._repository.clear()
        self._logger.info("all tasks removed", extra={"event": "cleared", "count": removed})
        return removed

    # ----------------------------
    # Queries
    # ----------------------------
    def get(self, task_id: Any) -> Task:
        self._check("get", validate_task_id(task_id))
        return self._find("get", task_id).model_copy()

    def list(self, filter_name: str = "all") -> TaskList:
        self._check("list", validate_filter(filter_name))
        if filter_name == "pending":
            return [t.model_copy() for t in self._tasks if not t.completed]
        if filter_name == "completed":
            return [t.model_copy() for t in self._tasks if t.completed]
        return [t.model_copy() for t in self._tasks]

    def stats(self) -> dict[str, int]:
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        return {"total": total, "completed": completed, "pending": total - completed}

    # ----------------------------
    # Internals
    # ----------------------------
    def _load(self) -> None:
        try:
            tasks = self._repository.load()
        except PersistenceError:
            # Nobody is listening for errors yet; start empty
            self._logger.error(
                "load failed; starting with an empty list",
                exc_info=True,
                extra={"event": "load_failed"},
            )
            tasks = []
        self._tasks = tasks
        if tasks:
            self._next_id = math.floor(max(t.id for t in tasks)) + 1
        self._logger.info("tasks loaded", extra={"event": "loaded", "count": len(tasks)})

    def _allocate_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    def _find(self, op: str, task_id: Any) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        self._fail(op, ErrorKind.NOT_FOUND)

    def _persist(self, op: str) -> None:
        try:
            self._repository.save(self._tasks)
        except PersistenceError:
            self._metrics.increment(
                "task_errors", {"op": op, "kind": ErrorKind.PERSISTENCE_ERROR.value}
            )
            raise

    def _check(self, op: str, result: ValidationResult) -> None:
        if not result.valid and result.error is not None:
            self._fail(op, result.error)

    def _fail(self, op: str, kind: ErrorKind) -> NoReturn:
        err = TaskError(kind, error_message(kind))
        self._metrics.increment("task_errors", {"op": op, "kind": kind.value})
        self._logger.info(
            "operation rejected",
            extra={"event": "rejected", "op": op, "error_kind": kind.value},
        )
        raise err

    def _count(self, op: str) -> None:
        self._metrics.increment("task_ops", {"op": op})


__all__ = ["TodoService", "TaskList"]
