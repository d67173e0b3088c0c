"""
Roam Core Module

Shared infrastructure: configuration, logging, constants and the routing
oracle client.
"""

from .config import RoamSettings, get_settings, reset_settings
from .formatters import get_utc_timestamp
from .logging import get_logger
from .oracle_client import (
    AsyncRoutingClient,
    OracleError,
    PointNotFoundError,
    parse_route_response,
)

__all__ = [
    "AsyncRoutingClient",
    "OracleError",
    "PointNotFoundError",
    "RoamSettings",
    "get_logger",
    "get_settings",
    "get_utc_timestamp",
    "parse_route_response",
    "reset_settings",
]
