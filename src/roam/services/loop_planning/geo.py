"""
Geodesic primitives on a spherical earth.

Pure functions over Points. Bearings are compass degrees: 0 = north,
clockwise positive, interpreted mod 360.
"""

from __future__ import annotations

import math

from ...core.constants import EARTH_RADIUS_KM
from ...models.geo import Point


def to_radians(deg: float) -> float:
    return deg * math.pi / 180.0


def to_degrees(rad: float) -> float:
    return rad * 180.0 / math.pi


def normalize_bearing(bearing_deg: float) -> float:
    """Map any bearing into [0, 360)."""
    return bearing_deg % 360.0


def distance_km(a: Point, b: Point) -> float:
    """Great-circle (haversine) distance between two points in kilometers."""
    d_lat = to_radians(b.lat - a.lat)
    d_lng = to_radians(b.lng - a.lng)
    sin_lat = math.sin(d_lat / 2)
    sin_lng = math.sin(d_lng / 2)
    h = sin_lat * sin_lat + math.cos(to_radians(a.lat)) * math.cos(
        to_radians(b.lat)
    ) * sin_lng * sin_lng
    # Rounding can push h a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, h)))


def project(origin: Point, bearing_deg: float, dist_km: float) -> Point:
    """
    Project a point at a given distance and bearing from an origin.

    Args:
        origin: Start point
        bearing_deg: Compass bearing in degrees (0 = north, 90 = east)
        dist_km: Distance in kilometers

    Returns:
        The projected point, longitude wrapped to [-180, 180)
    """
    d = dist_km / EARTH_RADIUS_KM
    brng = to_radians(normalize_bearing(bearing_deg))
    lat1 = to_radians(origin.lat)
    lng1 = to_radians(origin.lng)

    lat2 = math.asin(
        math.sin(lat1) * math.cos(d) + math.cos(lat1) * math.sin(d) * math.cos(brng)
    )
    lng2 = lng1 + math.atan2(
        math.sin(brng) * math.sin(d) * math.cos(lat1),
        math.cos(d) - math.sin(lat1) * math.sin(lat2),
    )

    lng_deg = (to_degrees(lng2) + 540.0) % 360.0 - 180.0
    return Point(lat=to_degrees(lat2), lng=lng_deg)


def initial_bearing(a: Point, b: Point) -> float:
    """Forward azimuth from a to b, in [0, 360)."""
    lat1 = to_radians(a.lat)
    lat2 = to_radians(b.lat)
    d_lng = to_radians(b.lng - a.lng)
    y = math.sin(d_lng) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lng)
    return normalize_bearing(to_degrees(math.atan2(y, x)))
