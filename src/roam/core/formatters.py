"""
Roam Output Formatters

Timestamp helpers shared by CLI output.
"""

from __future__ import annotations

from datetime import datetime, timezone


def format_datetime(dt: datetime) -> str:
    """Format datetime as ISO 8601 with a Z suffix."""
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def get_utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_utc_timestamp() -> str:
    """
    Get current UTC timestamp string.

    Returns:
        ISO format timestamp like "2026-01-15T12:30:00Z"
    """
    return format_datetime(get_utc_now())
