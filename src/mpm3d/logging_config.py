"""
Logging setup for mpm3d.

Every module logs through ``get_logger(__name__)`` under the ``mpm3d``
namespace. Nothing is emitted until the application calls
``configure_logging()`` once, typically at the top of a driver script.

Environment variables:
- MPM3D_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL. Default: INFO
- MPM3D_LOG_FORMAT: 'text' or 'json'. Default: text
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Optional

ROOT_LOGGER = "mpm3d"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_KEYS = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with the MPI rank when it was passed as extra."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = {k: v for k, v in record.__dict__.items() if k not in _RECORD_KEYS}
        if extra:
            data["extra"] = extra
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class TextFormatter(logging.Formatter):
    """TIMESTAMP LEVEL [logger] message, with file:line for DEBUG and ERROR."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        name = record.name
        if name.startswith(ROOT_LOGGER + "."):
            name = name[len(ROOT_LOGGER) + 1:]

        line = f"{timestamp} {record.levelname:8s} [{name}] {record.getMessage()}"
        if record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL):
            line += f" ({record.filename}:{record.lineno})"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def get_log_level() -> int:
    """Log level from MPM3D_LOG_LEVEL, INFO when unset or unknown."""
    return _LEVELS.get(os.environ.get("MPM3D_LOG_LEVEL", "INFO").upper(), logging.INFO)


def get_log_format() -> str:
    """Log format from MPM3D_LOG_FORMAT, 'text' when unset or unknown."""
    name = os.environ.get("MPM3D_LOG_FORMAT", "text").lower()
    return name if name in ("text", "json") else "text"


def configure_logging(level: Optional[int] = None, format_type: Optional[str] = None) -> None:
    """
    Attach a single stderr handler to the ``mpm3d`` logger.

    Args:
        level: Logging level, read from MPM3D_LOG_LEVEL when None
        format_type: 'text' or 'json', read from MPM3D_LOG_FORMAT when None
    """
    if level is None:
        level = get_log_level()
    if format_type is None:
        format_type = get_log_format()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if format_type == "json" else TextFormatter())

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    root.propagate = False

    root.debug("Logging configured: level=%s, format=%s",
               logging.getLevelName(level), format_type)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, placed under the ``mpm3d`` namespace."""
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
