"""
Geographic value types.
"""

from __future__ import annotations

from dataclasses import dataclass

Coordinate3D = tuple[float, float, float]
"""Path vertex: (latitude, longitude, elevation in meters)."""


@dataclass(frozen=True)
class Point:
    """A WGS-84 position in decimal degrees."""

    lat: float
    lng: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_coordinate(cls, coord: Coordinate3D) -> Point:
        """Drop the elevation component of a path vertex."""
        return cls(lat=coord[0], lng=coord[1])
