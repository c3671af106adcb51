from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Callable
from typing import Any

from .errors import TaskError
from .messages import EMPTY_STATES, SUCCESS_MESSAGES
from .models.task import Task
from .observability import set_log_level, set_log_stream
from .service import TodoService
from .validation import FILTERS

ServiceFactory = Callable[[], TodoService]


def _coerce_id(raw: str) -> Any:
    """Turn a command-line id into a number; anything else is left for validation to reject."""
    value = raw.strip()
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def _confirm(prompt: str, assume_yes: bool) -> bool:
    if assume_yes:
        return True
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    return f"[{mark}] {task.id}  {task.text}"


def _emit(args: argparse.Namespace, payload: dict[str, Any], text: str) -> None:
    if args.json:
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
    else:
        sys.stdout.write(text + "\n")


def _cmd_add(service: TodoService, args: argparse.Namespace) -> int:
    task = service.add(args.text)
    text = f"{SUCCESS_MESSAGES['added']}: {_format_task(task)}"
    _emit(args, {"task": task.to_record()}, text)
    return 0


def _cmd_list(service: TodoService, args: argparse.Namespace) -> int:
    tasks = service.list(args.filter)
    if args.json:
        _emit(args, {"tasks": [t.to_record() for t in tasks]}, "")
        return 0
    if not tasks:
        headline, hint = EMPTY_STATES[args.filter]
        _emit(args, {}, f"{headline}. {hint}.")
        return 0
    _emit(args, {}, "\n".join(_format_task(t) for t in tasks))
    return 0


def _cmd_toggle(service: TodoService, args: argparse.Namespace) -> int:
    task = service.toggle(_coerce_id(args.id))
    msg = SUCCESS_MESSAGES["completed" if task.completed else "uncompleted"]
    _emit(args, {"task": task.to_record()}, f"{msg}: {_format_task(task)}")
    return 0


def _cmd_edit(service: TodoService, args: argparse.Namespace) -> int:
    task = service.edit(_coerce_id(args.id), args.text)
    text = f"{SUCCESS_MESSAGES['updated']}: {_format_task(task)}"
    _emit(args, {"task": task.to_record()}, text)
    return 0


def _cmd_rm(service: TodoService, args: argparse.Namespace) -> int:
    task_id = _coerce_id(args.id)
    # Look the task up first so a bad id fails before prompting
    task = service.get(task_id)
    if not _confirm(f"Remove task {task.id} ({task.text})?", args.yes):
        _emit(args, {"ok": False, "cancelled": True}, "Cancelled")
        return 0
    service.remove(task_id)
    _emit(args, {"ok": True}, SUCCESS_MESSAGES["deleted"])
    return 0


def _cmd_stats(service: TodoService, args: argparse.Namespace) -> int:
    stats = service.stats()
    text = f"total={stats['total']} completed={stats['completed']} pending={stats['pending']}"
    _emit(args, stats, text)
    return 0


def _cmd_clear_completed(service: TodoService, args: argparse.Namespace) -> int:
    if not _confirm("Remove all completed tasks?", args.yes):
        _emit(args, {"removed": 0, "cancelled": True}, "Cancelled")
        return 0
    removed = service.clear_completed()
    _emit(args, {"removed": removed}, f"{SUCCESS_MESSAGES['cleared_completed']} ({removed})")
    return 0


def _cmd_clear(service: TodoService, args: argparse.Namespace) -> int:
    if not _confirm("Remove ALL tasks?", args.yes):
        _emit(args, {"removed": 0, "cancelled": True}, "Cancelled")
        return 0
    removed = service.clear()
    _emit(args, {"removed": removed}, f"{SUCCESS_MESSAGES['cleared']} ({removed})")
    return 0


_COMMANDS: dict[str, Callable[[TodoService, argparse.Namespace], int]] = {
    "add": _cmd_add,
    "list": _cmd_list,
    "toggle": _cmd_toggle,
    "edit": _cmd_edit,
    "rm": _cmd_rm,
    "stats": _cmd_stats,
    "clear-completed": _cmd_clear_completed,
    "clear": _cmd_clear,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("todokeep")
    parser.add_argument("--json", action="store_true", help="Print machine-readable output")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Override LOG_LEVEL for this run",
    )
    sub = parser.add_subparsers(dest="cmd")

    p_add = sub.add_parser("add", help="Add a task")
    p_add.add_argument("text")

    p_list = sub.add_parser("list", help="List tasks")
    p_list.add_argument("--filter", choices=list(FILTERS), default="all")

    p_toggle = sub.add_parser("toggle", help="Flip a task between pending and completed")
    p_toggle.add_argument("id")

    p_edit = sub.add_parser("edit", help="Replace a task's text")
    p_edit.add_argument("id")
    p_edit.add_argument("text")

    p_rm = sub.add_parser("rm", help="Remove a task")
    p_rm.add_argument("id")
    p_rm.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    sub.add_parser("stats", help="Show task counts")

    p_cc = sub.add_parser("clear-completed", help="Remove every completed task")
    p_cc.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    p_clear = sub.add_parser("clear", help="Remove every task")
    p_clear.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    return parser


def _default_factory() -> TodoService:
    from . import open_service

    return open_service()


def main(argv: list[str] | None = None, *, service_factory: ServiceFactory | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cmd = str(getattr(args, "cmd", None) or "list")
    if cmd == "list" and not hasattr(args, "filter"):
        args.filter = "all"

    # stdout carries command output only
    set_log_stream(sys.stderr)
    if args.log_level:
        set_log_level(args.log_level)
    service = (service_factory or _default_factory)()
    try:
        return _COMMANDS[cmd](service, args)
    except TaskError as exc:
        if args.json:
            sys.stdout.write(json.dumps({"error": exc.to_dict()}) + "\n")
        sys.stderr.write(f"error: {exc.kind.value}: {exc.message}\n")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
