"""Logging configuration for HiveRoute.

Configurable via environment variables (the HIVE_ variants win):
- HIVE_LOG_LEVEL / LOG_LEVEL: DEBUG, INFO, WARNING, ERROR. Default: INFO
- HIVE_LOG_FORMAT / LOG_FORMAT: 'text' or 'json'. Default: text

Query-scoped fields passed through ``extra=`` (``query_id``, ``species``,
``protocol``) are rendered inline by the text formatter and nested under
``extra`` by the JSON formatter.

Usage:
    from hiveroute.logging_config import configure_logging
    configure_logging()  # Call once at host startup
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import Any, ClassVar

LOGGER_NAMESPACE = "hiveroute"

# Extra fields promoted into the text line when present on a record
QUERY_FIELDS: tuple[str, ...] = ("query_id", "species", "protocol")

_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "msecs",
        "relativeCreated",
        "taskName",
    }
)


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the non-standard attributes attached through ``extra=``."""
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON string with log data.
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno >= logging.ERROR:
            log_data["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extras = _record_extras(record)
        if extras:
            log_data["extra"] = extras

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Single-line text formatter.

    Format: TIMESTAMP LEVEL [LOGGER] MESSAGE {query_id=.. species=..}
    """

    LEVEL_COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[1;31m",  # Bold red
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize formatter.

        Args:
            use_colors: Whether to use ANSI colors in output.
        """
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as text.

        Args:
            record: Log record to format.

        Returns:
            Formatted string.
        """
        timestamp = datetime.now(UTC).strftime("%H:%M:%S.%f")[:-3]
        level = record.levelname

        if self.use_colors:
            color = self.LEVEL_COLORS.get(level, "")
            level_str = f"{color}{level:8s}{self.RESET}"
        else:
            level_str = f"{level:8s}"

        logger_name = record.name.removeprefix(f"{LOGGER_NAMESPACE}.")
        parts = [f"{timestamp} {level_str} [{logger_name}] {record.getMessage()}"]

        query_fields = [
            f"{key}={getattr(record, key)}" for key in QUERY_FIELDS if hasattr(record, key)
        ]
        if query_fields:
            parts.append(" {" + " ".join(query_fields) + "}")

        if record.levelno >= logging.ERROR:
            parts.append(f" ({record.filename}:{record.lineno})")

        if record.exc_info:
            parts.append(f"\n{self.formatException(record.exc_info)}")

        return "".join(parts)


def _env(name: str, default: str) -> str:
    """Read HIVE_<name>, then <name>, then the default."""
    return os.environ.get(f"HIVE_{name}") or os.environ.get(name) or default


def get_log_level() -> int:
    """Get log level from environment.

    Returns:
        Logging level constant (e.g., logging.INFO).
    """
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(_env("LOG_LEVEL", "INFO").upper(), logging.INFO)


def get_log_format() -> str:
    """Get log format ('text' or 'json') from environment."""
    format_name = _env("LOG_FORMAT", "text").lower()
    if format_name not in ("text", "json"):
        return "text"
    return format_name


def configure_logging(
    level: int | None = None,
    format_type: str | None = None,
    use_colors: bool = True,
) -> None:
    """Configure the ``hiveroute`` logger tree.

    Safe to call more than once; existing handlers are replaced.

    Args:
        level: Log level. If None, reads from the environment.
        format_type: 'text' or 'json'. If None, reads from the environment.
        use_colors: Whether to use colors in text format (only if stderr is TTY).
    """
    if level is None:
        level = get_log_level()
    if format_type is None:
        format_type = get_log_format()

    handler = logging.StreamHandler(sys.stderr)
    if format_type == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter(use_colors=use_colors))

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False

    # Route uvicorn's access log through the same handler when serving
    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_access.handlers.clear()
    uvicorn_access.addHandler(handler)
    uvicorn_access.setLevel(level)
    uvicorn_access.propagate = False

    root_logger.debug(
        "Logging configured: level=%s, format=%s",
        logging.getLevelName(level),
        format_type,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``hiveroute`` namespace.

    Args:
        name: Module name (typically __name__).

    Returns:
        Logger instance.
    """
    if not name.startswith(LOGGER_NAMESPACE):
        name = f"{LOGGER_NAMESPACE}.{name}"
    return logging.getLogger(name)
