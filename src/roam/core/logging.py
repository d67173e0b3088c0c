"""
Roam Structured Logging

Provides consistent logging across the roam package with:
- Environment-based configuration via ROAM_LOG_LEVEL
- JSON-formatted output option for machine parsing
- Module-specific loggers

Usage:
    from roam.core.logging import get_logger

    logger = get_logger(__name__)
    logger.debug("Attempt %d: radius=%.2f km", attempt, radius_km)
    logger.warning("Loop generation exhausted", extra={"classification": "coastline"})

Environment Variables:
    ROAM_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR)
    ROAM_DEBUG: If set, enables DEBUG level
    ROAM_LOG_JSON: If set, output JSON-formatted logs
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Optional

from .config import get_settings

# LogRecord attributes that are not user-supplied "extra" fields
_RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
        "taskName",
    }
)


def _get_log_level() -> int:
    return get_settings().log_level_int


def _is_json_output() -> bool:
    return get_settings().log_json


class RoamFormatter(logging.Formatter):
    """
    Formatter for Roam logs.

    Supports both human-readable and JSON output.
    """

    def __init__(self, json_output: bool = False) -> None:
        super().__init__()
        self.json_output = json_output

    def format(self, record: logging.LogRecord) -> str:
        if self.json_output:
            timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
            return self._format_json(record, timestamp)
        return self._format_text(record)

    def _format_text(self, record: logging.LogRecord) -> str:
        """Format as human-readable text."""
        module = record.name.split(".")[-1] if "." in record.name else record.name

        msg = f"[ROAM {record.levelname}] [{module}] {record.getMessage()}"

        if record.exc_info:
            exc_text = "".join(traceback.format_exception(*record.exc_info))
            msg += f"\n{exc_text}"

        return msg

    def _format_json(self, record: logging.LogRecord, timestamp: str) -> str:
        """Format as JSON for machine parsing."""
        log_data: dict[str, Any] = {
            "timestamp": timestamp,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(log_data, default=str)


# Module-level logger cache
_loggers: dict[str, logging.Logger] = {}
_handler: Optional[logging.Handler] = None


def _get_handler() -> logging.Handler:
    """Get or create the shared stderr handler."""
    global _handler
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(RoamFormatter(json_output=_is_json_output()))
    return _handler


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the given module name.

    Args:
        name: Module name (typically __name__)

    Returns:
        Configured logger instance
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)
    logger.setLevel(_get_log_level())
    logger.addHandler(_get_handler())
    logger.propagate = False

    _loggers[name] = logger
    return logger


def reset_logging() -> None:
    """
    Reset all Roam loggers to default state.

    Restores propagate=True and level=NOTSET on every roam.* logger and
    drops the shared handler, so pytest's caplog can capture records.
    Used by test fixtures to prevent cross-test logging pollution.
    """
    global _handler

    manager = logging.Logger.manager
    for name in list(manager.loggerDict.keys()):
        if name == "roam" or name.startswith("roam."):
            logger_or_placeholder = manager.loggerDict[name]
            if isinstance(logger_or_placeholder, logging.Logger):
                logger_or_placeholder.propagate = True
                logger_or_placeholder.setLevel(logging.NOTSET)

    for logger in _loggers.values():
        if _handler is not None:
            logger.removeHandler(_handler)

    _handler = None
