"""
Tests for Roam Structured Logging.

Tests logger configuration, formatters, and utility functions.
"""

from __future__ import annotations

import json
import logging
import sys

from roam.core.logging import RoamFormatter, get_logger, reset_logging


def _record(name: str = "roam.services.loop_planning.controller", **kwargs) -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=kwargs.pop("level", logging.INFO),
        pathname="controller.py",
        lineno=10,
        msg=kwargs.pop("msg", "Loop accepted on attempt %d"),
        args=kwargs.pop("args", (2,)),
        exc_info=kwargs.pop("exc_info", None),
    )


# =============================================================================
# RoamFormatter Tests
# =============================================================================


class TestRoamFormatter:
    """Test RoamFormatter class."""

    def test_text_format_basic(self):
        """Text format includes level and module."""
        formatted = RoamFormatter(json_output=False).format(_record())

        assert formatted == "[ROAM INFO] [controller] Loop accepted on attempt 2"

    def test_text_format_with_exception(self):
        try:
            raise ValueError("oracle exploded")
        except ValueError:
            exc_info = sys.exc_info()

        formatted = RoamFormatter().format(_record(level=logging.ERROR, exc_info=exc_info))

        assert "[ROAM ERROR]" in formatted
        assert "ValueError: oracle exploded" in formatted

    def test_json_format(self):
        record = _record()
        record.classification = "coastline"

        data = json.loads(RoamFormatter(json_output=True).format(record))

        assert data["level"] == "INFO"
        assert data["logger"] == "roam.services.loop_planning.controller"
        assert data["message"] == "Loop accepted on attempt 2"
        assert data["classification"] == "coastline"
        assert "timestamp" in data
        assert "args" not in data


# =============================================================================
# Logger Factory Tests
# =============================================================================


class TestGetLogger:
    """Test get_logger and its shared handler."""

    def test_cached_per_name(self):
        assert get_logger("roam.test.cached") is get_logger("roam.test.cached")

    def test_level_from_settings(self, monkeypatch):
        monkeypatch.setenv("ROAM_LOG_LEVEL", "ERROR")
        from roam.core.config import reset_settings

        reset_settings()
        logger = get_logger("roam.test.level_from_settings")

        assert logger.level == logging.ERROR

    def test_does_not_propagate(self):
        logger = get_logger("roam.test.propagate")

        assert logger.propagate is False
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, RoamFormatter)

    def test_reset_logging_restores_propagation(self):
        logger = get_logger("roam.test.reset")
        reset_logging()

        assert logger.propagate is True
        assert logger.level == logging.NOTSET
        assert logger.handlers == []
