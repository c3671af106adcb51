from __future__ import annotations

import datetime as dt
import json
import logging
import os
import sys
from collections.abc import Mapping
from typing import Any, TextIO


def _iso_now() -> str:
    return dt.datetime.now(dt.UTC).isoformat()


def _build_base_payload(record: logging.LogRecord) -> dict[str, Any]:
    service = getattr(record, "service", None) or os.getenv("SERVICE_NAME") or record.name
    return {
        "ts": _iso_now(),
        "level": record.levelname.lower(),
        "service": service,
        "msg": record.getMessage(),
    }


def _add_standard_extras(payload: dict[str, Any], record: logging.LogRecord) -> None:
    for attr in (
        "event",
        "op",
        "task_id",
        "key",
        "count",
        "error_kind",
        "metadata",
    ):
        if hasattr(record, attr):
            payload[attr] = getattr(record, attr)


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = _build_base_payload(record)
        _add_standard_extras(payload, record)
        # Attach error fields if present, keeping the JSON single-line
        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["err_type"] = getattr(exc_type, "__name__", str(exc_type))
            if exc_value is not None:
                payload["err"] = str(exc_value)
            payload["stack"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ConsoleLogFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("%(message)s")

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        ts = _iso_now()[11:19]  # HH:MM:SS
        parts: list[str] = [ts, record.levelname.upper(), record.name]

        event = getattr(record, "event", None)
        if event:
            parts.append(str(event))
        task_id = getattr(record, "task_id", None)
        if task_id is not None:
            parts.append(f"task={task_id}")
        kind = getattr(record, "error_kind", None)
        if kind:
            parts.append(f"kind={kind}")
        parts.append("-")
        parts.append(record.getMessage())
        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _choose_formatter() -> logging.Formatter:
    format_pref = (os.getenv("LOG_FORMAT") or "").strip().lower() or "auto"
    if format_pref == "auto":
        try:
            if sys.stdout.isatty():
                return ConsoleLogFormatter()
        except Exception:
            pass
        return JsonLogFormatter()
    if format_pref == "console":
        return ConsoleLogFormatter()
    return JsonLogFormatter()


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    name = (value or "").strip().upper()
    if not name:
        return default
    level = getattr(logging, name, None)
    return level if isinstance(level, int) else default


# prefix -> level, set by set_log_level and checked before the environment
_level_overrides: dict[str, int] = {}
# prefix -> stream, set by set_log_stream; stdout otherwise
_stream_overrides: dict[str, TextIO] = {}


def _matches(logger_name: str, prefix: str) -> bool:
    return logger_name == prefix or logger_name.startswith(prefix + ".")


def _level_for_logger(logger_name: str) -> int:
    for prefix, forced in _level_overrides.items():
        if _matches(logger_name, prefix):
            return forced
    base_level = _parse_level(os.getenv("LOG_LEVEL"), logging.INFO)
    overrides = (os.getenv("LOG_MODULE_LEVELS") or "").strip()
    if not overrides:
        return base_level
    for entry in overrides.split(","):
        entry = entry.strip()
        if not entry or "=" not in entry:
            continue
        prefix, lvl = entry.split("=", 1)
        prefix = prefix.strip()
        if not prefix:
            continue
        if _matches(logger_name, prefix):
            return _parse_level(lvl, base_level)
    return base_level


def _stream_for_logger(logger_name: str) -> TextIO:
    for prefix, stream in _stream_overrides.items():
        if _matches(logger_name, prefix):
            return stream
    return sys.stdout


def get_json_logger(name: str = "todokeep") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(stream=_stream_for_logger(name))
        handler.setFormatter(_choose_formatter())
        logger.addHandler(handler)
        logger.setLevel(_level_for_logger(name))
        logger.propagate = False
    return logger


def set_log_level(level: int | str | None, prefix: str = "todokeep") -> None:
    """Force one level on every logger under prefix, including ones created later.

    Passing None drops the override and goes back to LOG_LEVEL/LOG_MODULE_LEVELS.
    """
    if level is None:
        _level_overrides.pop(prefix, None)
    else:
        _level_overrides[prefix] = level if isinstance(level, int) else _parse_level(level)
    for name in list(logging.Logger.manager.loggerDict):
        if _matches(name, prefix):
            logging.getLogger(name).setLevel(_level_for_logger(name))


def set_log_stream(stream: TextIO | None, prefix: str = "todokeep") -> None:
    """Point the handlers of every logger under prefix at stream.

    None goes back to the current sys.stdout.
    """
    if stream is None:
        _stream_overrides.pop(prefix, None)
    else:
        _stream_overrides[prefix] = stream
    for name in list(logging.Logger.manager.loggerDict):
        if not _matches(name, prefix):
            continue
        target = _stream_for_logger(name)
        for handler in logging.getLogger(name).handlers:
            # no setStream(): it flushes the old stream, which may already be closed
            if isinstance(handler, logging.StreamHandler):
                handler.stream = target


class Metrics:
    def __init__(self) -> None:
        self._counters: dict[tuple[str, tuple[tuple[str, str], ...]], int] = {}

    def increment(
        self,
        name: str,
        labels: Mapping[str, str] | None = None,
        amount: int = 1,
    ) -> None:
        label_items: tuple[tuple[str, str], ...] = tuple(sorted((labels or {}).items()))
        key = (name, label_items)
        self._counters[key] = self._counters.get(key, 0) + amount

    def value(self, name: str, labels: Mapping[str, str] | None = None) -> int:
        label_items: tuple[tuple[str, str], ...] = tuple(sorted((labels or {}).items()))
        return self._counters.get((name, label_items), 0)

    def snapshot(self) -> list[dict[str, Any]]:
        out: list[dict[str, Any]] = []
        for (name, label_items), value in sorted(self._counters.items()):
            out.append(
                {
                    "name": name,
                    "labels": dict(label_items),
                    "value": value,
                }
            )
        return out


# ----------------------------
# Metrics singleton
# ----------------------------

_metrics_singleton: Metrics | None = None


def get_metrics() -> Metrics:
    global _metrics_singleton
    if _metrics_singleton is None:
        _metrics_singleton = Metrics()
    return _metrics_singleton


def reset_metrics() -> None:
    global _metrics_singleton
    _metrics_singleton = Metrics()


__all__ = [
    "ConsoleLogFormatter",
    "JsonLogFormatter",
    "Metrics",
    "get_json_logger",
    "get_metrics",
    "reset_metrics",
    "set_log_level",
    "set_log_stream",
]
