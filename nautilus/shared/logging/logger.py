# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Loguru setup with per-request context.

Every record carries the request's correlation id and, once a guard has
authenticated the caller, the user id. Both live in ``ContextVar``s so
threaded request handling never mixes them up.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> "
    "<yellow>u={extra[user_id]}</yellow> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default="-")
_USER_ID: ContextVar[str] = ContextVar("user_id", default="-")

_logger.configure(extra={"correlation_id": "-", "user_id": "-"})

_QUIET_LOGGERS = {
    "werkzeug": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
}


def _context() -> dict[str, str]:
    return {"correlation_id": _CORRELATION_ID.get(), "user_id": _USER_ID.get()}


def _default_log_file() -> Path:
    configured = os.getenv("LOG_FILE")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parents[2] / "instance" / "nautilus.log"


class _InterceptHandler(logging.Handler):
    """Forwards stdlib records (werkzeug, SQLAlchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)
        _logger.opt(depth=6, exception=record.exc_info).bind(**_context()).log(
            level, record.getMessage()
        )


class ContextualLogger:
    """Proxy for loguru that binds the current request context on each call."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(**_context()), name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or "-")


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def set_request_user(user_id: int | None) -> None:
    _USER_ID.set(str(user_id) if user_id is not None else "-")


def clear_correlation_id() -> None:
    _CORRELATION_ID.set("-")
    _USER_ID.set("-")


def setup_logging(
    level: str | None = None,
    *,
    debug_mode: bool = False,
    log_file: str | os.PathLike[str] | None = None,
) -> None:
    if debug_mode and not level:
        level = "DEBUG"
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    path = Path(log_file) if log_file else _default_log_file()
    path.parent.mkdir(parents=True, exist_ok=True)

    _logger.remove()
    _logger.add(
        sys.stderr,
        level=level,
        format=_FMT,
        filter=sanitize_record,
        colorize=True,
        backtrace=False,
        diagnose=False,
    )
    _logger.add(
        str(path),
        level=level,
        format=_FMT,
        filter=sanitize_record,
        colorize=False,
        backtrace=False,
        diagnose=False,
        enqueue=True,
        rotation="10 MB",
        retention=5,
        encoding="utf-8",
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


logger = ContextualLogger()

__all__ = [
    "logger",
    "setup_logging",
    "set_correlation_id",
    "set_request_user",
    "clear_correlation_id",
    "get_correlation_id",
]
