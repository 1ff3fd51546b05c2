# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Loguru setup with a per-request correlation id on every line."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")

# Records emitted before setup_logging() still need the extra key.
_logger.configure(extra={"correlation_id": "-"})

# Third-party loggers that are too chatty at DEBUG.
_QUIET_LOGGERS = {"werkzeug": logging.INFO, "sqlalchemy": logging.WARNING, "redis": logging.WARNING}


class _InterceptHandler(logging.Handler):
    """Forwards stdlib logging (Flask, werkzeug, SQLAlchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(depth=6, exception=record.exc_info).bind(
            correlation_id=_CORRELATION_ID.get()
        ).log(level, record.getMessage())


class ContextualLogger:
    """Proxy for loguru that injects correlation ids via ContextVar."""

    def __getattr__(self, name: str) -> Any:
        return getattr(_logger.bind(correlation_id=_CORRELATION_ID.get()), name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or "-")


def clear_correlation_id() -> None:
    _CORRELATION_ID.set("-")


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    """(Re)install sinks. ``LOG_FILE`` adds a plain-text file sink next to stderr."""
    resolved = "DEBUG" if debug_mode else (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    common: dict[str, Any] = {
        "level": resolved,
        "format": _FMT,
        "filter": sanitize_record,
        "backtrace": False,
        "diagnose": False,
    }

    _logger.remove()
    _logger.add(sys.stderr, colorize=True, **common)

    log_file = os.getenv("LOG_FILE")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        _logger.add(log_file, colorize=False, enqueue=True, encoding="utf-8", **common)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


logger = ContextualLogger()

__all__ = [
    "clear_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
