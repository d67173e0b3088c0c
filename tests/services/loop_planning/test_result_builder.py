"""
Tests for Loop Planning Result Builder.

Tests the RouteSummary dataclass and user_message mapping.
"""

from __future__ import annotations

import pytest

from roam.core.oracle_client import OracleError
from roam.models.geo import Point
from roam.models.routes import Route
from roam.services.loop_planning.errors import (
    LoopExhaustedError,
    NoRoutesGeneratedError,
    StartUnroutableError,
)
from roam.services.loop_planning.result_builder import RouteSummary, user_message

# =============================================================================
# RouteSummary Tests
# =============================================================================


class TestRouteSummary:
    """Test RouteSummary dataclass."""

    def test_from_route_rounds_units(self):
        route = Route(geometry=(), distance_km=40.04, elevation_gain_m=123.6)

        summary = RouteSummary.from_route(route)

        assert summary.distance_km == 40.0
        assert summary.distance_mi == 24.9
        assert summary.elevation_gain_m == 124
        assert summary.elevation_gain_ft == 406
        assert isinstance(summary.elevation_gain_m, int)

    def test_to_dict_with_start(self):
        start = Point(lat=41.9794, lng=2.8214)
        route = Route(geometry=(), distance_km=62.0, elevation_gain_m=500.0)

        data = RouteSummary.from_route(route, start).to_dict()

        assert data == {
            "distance_km": 62.0,
            "distance_mi": 38.5,
            "elevation_gain_m": 500,
            "elevation_gain_ft": 1640,
            "start": {"lat": 41.9794, "lng": 2.8214},
        }

    def test_to_dict_without_start(self):
        data = RouteSummary.from_metrics(1.0, 0.0).to_dict()

        assert "start" not in data

    def test_frozen(self):
        summary = RouteSummary.from_metrics(1.0, 0.0)

        with pytest.raises((TypeError, AttributeError)):
            summary.distance_km = 5.0  # type: ignore


# =============================================================================
# user_message Tests
# =============================================================================


class TestUserMessage:
    """Test error-to-text mapping."""

    def test_start_unroutable(self):
        message = user_message(StartUnroutableError(41.9, 2.8))

        assert "starting point" in message

    def test_coastline(self):
        message = user_message(LoopExhaustedError("coastline", attempts=7))

        assert "coastline" in message
        assert "inland" in message

    def test_sparse_roads(self):
        message = user_message(LoopExhaustedError("sparse_roads", attempts=4))

        assert "sparse" in message

    def test_no_routes(self):
        message = user_message(NoRoutesGeneratedError(3, "Start location is not near any routable roads"))

        assert message.startswith("Could not generate any routes in this area.")

    def test_timeout(self):
        message = user_message(OracleError("Routing request timed out after 30.0s"))

        assert "too long" in message

    def test_rate_limit(self):
        message = user_message(OracleError("Routing error 429: API limit reached", status_code=429))

        assert "busy" in message

    def test_generic_oracle_error(self):
        message = user_message(OracleError("Routing error 500: boom", status_code=500))

        assert "routing service returned an error" in message

    def test_unknown(self):
        assert "went wrong" in user_message(RuntimeError("?"))
