"""
Route data structures.

Routes are immutable: an edit builds a new Route that shares every
untouched Segment object with its predecessor.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Literal, Optional

from .geo import Coordinate3D, Point

WaypointRole = Literal["start", "via"]


def new_waypoint_id() -> str:
    """Generate a stable opaque waypoint identifier."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Waypoint:
    """
    An editable pin on a route.

    The id survives moves so a UI can track a pin independently of its
    position in the waypoint list.
    """

    id: str
    point: Point
    role: WaypointRole = "via"

    def moved_to(self, point: Point) -> Waypoint:
        """Same pin, new position."""
        return Waypoint(id=self.id, point=point, role=self.role)

    def to_dict(self) -> dict:
        return {"id": self.id, "lat": self.point.lat, "lng": self.point.lng, "role": self.role}


@dataclass(frozen=True)
class RoutedPath:
    """A single parsed oracle response."""

    geometry: tuple[Coordinate3D, ...]
    distance_km: float
    elevation_gain_m: float


@dataclass(frozen=True)
class Segment:
    """
    One leg of an editable route, produced by a single two-point oracle call.

    ``segments[i]`` connects ``waypoints[i]`` to ``waypoints[i + 1]``.
    """

    from_point: Point
    to_point: Point
    geometry: tuple[Coordinate3D, ...]
    distance_km: float
    elevation_gain_m: float

    @classmethod
    def from_path(cls, from_point: Point, to_point: Point, path: RoutedPath) -> Segment:
        return cls(
            from_point=from_point,
            to_point=to_point,
            geometry=path.geometry,
            distance_km=path.distance_km,
            elevation_gain_m=path.elevation_gain_m,
        )

    def to_dict(self) -> dict:
        return {
            "from": self.from_point.to_dict(),
            "to": self.to_point.to_dict(),
            "geometry": [list(c) for c in self.geometry],
            "distance_km": self.distance_km,
            "elevation_gain_m": self.elevation_gain_m,
        }


@dataclass(frozen=True)
class Route:
    """
    A stitched loop.

    ``segments`` and ``waypoints`` are present only on editable routes;
    when present, ``len(segments) == len(waypoints) - 1``.
    """

    geometry: tuple[Coordinate3D, ...]
    distance_km: float
    elevation_gain_m: float
    segments: Optional[tuple[Segment, ...]] = None
    waypoints: Optional[tuple[Waypoint, ...]] = None

    @property
    def is_editable(self) -> bool:
        return self.segments is not None and self.waypoints is not None

    @property
    def via_count(self) -> int:
        if not self.waypoints:
            return 0
        return sum(1 for wp in self.waypoints if wp.role == "via")

    @classmethod
    def from_path(cls, path: RoutedPath) -> Route:
        """Wrap a whole-loop oracle response as a non-editable route."""
        return cls(
            geometry=path.geometry,
            distance_km=path.distance_km,
            elevation_gain_m=path.elevation_gain_m,
        )

    def to_dict(self) -> dict:
        data: dict = {
            "geometry": [list(c) for c in self.geometry],
            "distance_km": self.distance_km,
            "elevation_gain_m": self.elevation_gain_m,
        }
        if self.segments is not None:
            data["segments"] = [s.to_dict() for s in self.segments]
        if self.waypoints is not None:
            data["waypoints"] = [w.to_dict() for w in self.waypoints]
        return data
