"""
Tests for geodesic primitives.
"""

from __future__ import annotations

import math

import pytest

from roam.models.geo import Point
from roam.services.loop_planning.geo import (
    distance_km,
    initial_bearing,
    normalize_bearing,
    project,
    to_degrees,
    to_radians,
)

SF = Point(lat=37.7749, lng=-122.4194)
LA = Point(lat=34.0522, lng=-118.2437)


class TestConversions:
    def test_round_trip(self):
        assert to_degrees(to_radians(123.4)) == pytest.approx(123.4)

    @pytest.mark.parametrize("bearing,expected", [(0, 0), (360, 0), (-30, 330), (725, 5)])
    def test_normalize_bearing(self, bearing, expected):
        assert normalize_bearing(bearing) == pytest.approx(expected)


class TestDistance:
    """Test haversine distance."""

    def test_known_distance(self):
        """San Francisco to Los Angeles is roughly 559 km."""
        assert distance_km(SF, LA) == pytest.approx(559, abs=3)

    def test_symmetric(self):
        assert distance_km(SF, LA) == pytest.approx(distance_km(LA, SF))

    def test_zero(self):
        assert distance_km(SF, SF) == 0.0

    def test_antipodal(self):
        far = distance_km(Point(0.0, 0.0), Point(0.0, 180.0))

        assert far == pytest.approx(math.pi * 6371.0)


class TestProject:
    """Test destination-point projection."""

    @pytest.mark.parametrize("bearing", [0, 45, 90, 180, 270, 333])
    @pytest.mark.parametrize("dist", [0.5, 5.0, 50.0])
    def test_round_trip_distance(self, bearing, dist):
        projected = project(SF, bearing, dist)

        assert distance_km(SF, projected) == pytest.approx(dist, rel=1e-6)

    def test_round_trip_bearing(self):
        projected = project(SF, 75.0, 10.0)

        assert initial_bearing(SF, projected) == pytest.approx(75.0, abs=1e-6)

    def test_north_from_equator(self):
        projected = project(Point(0.0, 10.0), 0.0, 111.195)

        assert projected.lat == pytest.approx(1.0, abs=1e-3)
        assert projected.lng == pytest.approx(10.0)

    def test_longitude_wraps(self):
        projected = project(Point(0.0, 179.9), 90.0, 50.0)

        assert -180.0 <= projected.lng < -179.0

    def test_zero_distance(self):
        projected = project(SF, 123.0, 0.0)

        assert projected.lat == pytest.approx(SF.lat)
        assert projected.lng == pytest.approx(SF.lng)


class TestInitialBearing:
    @pytest.mark.parametrize(
        "b,expected",
        [
            (Point(1.0, 0.0), 0.0),
            (Point(0.0, 1.0), 90.0),
            (Point(-1.0, 0.0), 180.0),
            (Point(0.0, -1.0), 270.0),
        ],
    )
    def test_cardinal(self, b, expected):
        assert initial_bearing(Point(0.0, 0.0), b) == pytest.approx(expected)
