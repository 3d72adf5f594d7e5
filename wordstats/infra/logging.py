"""Logging setup for wordstats.

Loggers are named ``wordstats.<program>.<task>`` and all write through one
stderr handler configured with ``dictConfig``; stdout carries only results.
Each worker thread tags its records with the file it is fetching through a
small MDC (mapped diagnostic context) kept in a ``contextvars`` variable.

Environment:
- ``WS_LOG_LEVEL``: TRACE, DEBUG, INFO, WARN, ERROR, FATAL (default: WARN)
- ``WS_LOG_JSON``: 1 for one JSON object per line (default: 0)
"""

from __future__ import annotations

import contextvars
import json
import logging
import logging.config
import os
from typing import Any, Dict, Optional

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}

_MDC: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar("wordstats_mdc", default={})

_CONFIGURED = False


def mdc_put(key: str, value: Any) -> None:
    _MDC.set({**_MDC.get(), key: value})


def mdc_clear() -> None:
    _MDC.set({})


class MDCFilter(logging.Filter):
    """Attach the current thread's MDC as ``record.mdc`` and ``record.mdc_suffix``."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = _MDC.get()
        record.mdc = ctx
        record.mdc_suffix = (
            " | MDC: " + " ".join(f"{k}={v}" for k, v in ctx.items()) if ctx else ""
        )
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        if getattr(record, "mdc", None):
            payload["mdc"] = record.mdc
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _level_from_env() -> int:
    name = os.getenv("WS_LOG_LEVEL", "WARN").strip().upper()
    name = _LEVEL_ALIASES.get(name, name)
    if name == "TRACE":
        return TRACE_LEVEL
    return getattr(logging, name, logging.WARNING)


def build_logging_config() -> Dict[str, Any]:
    level = _level_from_env()
    json_layout = os.getenv("WS_LOG_JSON", "").strip().lower() in {"1", "true", "yes", "on"}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"mdc": {"()": MDCFilter}},
        "formatters": {
            "pattern": {
                "format": "[%(asctime)s][%(levelname)s][%(name)s][%(threadName)s] "
                "%(message)s%(mdc_suffix)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {"()": JSONFormatter},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "json" if json_layout else "pattern",
                "filters": ["mdc"],
                "stream": "ext://sys.stderr",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
    }


def init_logging(force: bool = False) -> None:
    """Apply :func:`build_logging_config`; repeated calls are no-ops unless ``force``."""
    global _CONFIGURED
    if _CONFIGURED and not force:
        return
    logging.config.dictConfig(build_logging_config())
    _CONFIGURED = True


def get_unified_logger(program: str, task_type: str) -> logging.Logger:
    # Configure on first use unless the host application already has handlers.
    if not _CONFIGURED and not logging.getLogger().handlers:
        init_logging()
    return logging.getLogger(f"wordstats.{program}.{task_type}")


def _emit(program: str, task_type: str, tag: str, payload: Dict[str, Any]) -> None:
    get_unified_logger(program, task_type).info(
        "[%s] %s", tag, json.dumps(payload, ensure_ascii=False)
    )


def log_task_start(program: str, task_type: str, details: Optional[Dict[str, Any]] = None) -> None:
    _emit(program, task_type, "TASK START", dict(details or {}))


def log_task_end(
    program: str, task_type: str, success: bool, details: Optional[Dict[str, Any]] = None
) -> None:
    _emit(program, task_type, "TASK END", {"success": success, **(details or {})})


def log_batch_end(program: str, task_type: str, total: int, failed: int, elapsed: float) -> None:
    _emit(
        program,
        task_type,
        "BATCH",
        {"total": total, "success": total - failed, "failed": failed, "elapsed": elapsed},
    )


def log_error(program: str, task_type: str, error: BaseException, context: str = "") -> None:
    exc_info = (type(error), error, error.__traceback__)
    msg = f"{context} | {error}" if context else str(error)
    get_unified_logger(program, task_type).error("%s", msg, exc_info=exc_info)
