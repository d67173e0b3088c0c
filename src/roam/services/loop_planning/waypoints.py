"""
Loop Waypoint Planner.

Turns a start point, a target distance and compass bearings into the
ordered point sequence handed to the routing oracle.

The loop center is offset from the start along the loop direction, so the
start sits on the circumference and the ride goes out and around instead
of radiating from a hub. Waypoints are then placed on that circle and
visited in a single clockwise sweep that begins opposite the loop
direction, which is where the start point lies.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from ...core import constants
from ...models.geo import Coordinate3D, Point
from .geo import initial_bearing, normalize_bearing, project


@dataclass(frozen=True)
class WaypointPlan:
    """Geometry of one loop attempt."""

    start: Point
    center: Point
    radius_km: float
    loop_direction: float
    points: tuple[Point, ...]
    """Via points in visiting order (start excluded)."""

    def loop_points(self) -> list[Point]:
        """Closed point sequence: ``[start, *points, start]``."""
        return build_loop_points(self.start, self.points)


def calculate_radius(
    target_distance_km: float,
    stretch_factor: float = constants.STRETCH_FACTOR,
) -> float:
    """
    Calculate the waypoint radius from a target distance.

    Roads are longer than straight lines, so the circle is shrunk by the
    stretch factor.
    """
    return target_distance_km / (2 * math.pi * stretch_factor)


def loop_center(start: Point, loop_direction: float, radius_km: float) -> Point:
    """Project the loop center one radius away from the start."""
    return project(start, loop_direction, radius_km)


def _sweep_key(bearing: float, loop_direction: float) -> float:
    start_angle = loop_direction + 180.0
    return (bearing - start_angle) % 360.0


def sort_bearings_clockwise(bearings: Sequence[float], loop_direction: float) -> list[float]:
    """
    Order bearings for a single clockwise sweep around the loop center.

    The sweep starts at ``loop_direction + 180``. Python's sort is stable,
    so equal keys keep their input order.
    """
    return sorted(bearings, key=lambda b: _sweep_key(b, loop_direction))


def plan_waypoints(
    start: Point,
    bearings: Sequence[float],
    radius_km: float,
    named: Sequence[Point] = (),
    rotation_deg: float = 0.0,
    max_waypoints: int = constants.MAX_WAYPOINTS,
) -> WaypointPlan:
    """
    Build the ordered via points for one attempt.

    Named waypoints take priority slots; bearing-derived waypoints fill
    whatever remains of ``max_waypoints``. Every bearing, including the
    loop direction, is shifted by ``rotation_deg``. Named waypoints never
    move, but they are slotted into the clockwise sweep by their bearing
    from the loop center.

    Args:
        start: Loop start/finish
        bearings: Compass bearings; the first is the loop direction
        radius_km: Loop radius
        named: Pre-geocoded waypoints that must be visited
        rotation_deg: Cumulative rotation applied by the retry controller
        max_waypoints: Oracle point-count ceiling minus the start/finish

    Returns:
        WaypointPlan with center, radius and ordered via points
    """
    named = list(named)[:max_waypoints]
    free_slots = max_waypoints - len(named)
    rotated = [normalize_bearing(b + rotation_deg) for b in bearings]

    if rotated:
        direction = rotated[0]
    elif named:
        direction = initial_bearing(start, named[0])
    else:
        direction = normalize_bearing(rotation_deg)

    center = loop_center(start, direction, radius_km)

    placed: list[tuple[float, Point]] = [(initial_bearing(center, p), p) for p in named]
    placed.extend((b, project(center, b, radius_km)) for b in rotated[:free_slots])
    placed.sort(key=lambda item: _sweep_key(item[0], direction))

    return WaypointPlan(
        start=start,
        center=center,
        radius_km=radius_km,
        loop_direction=direction,
        points=tuple(p for _, p in placed),
    )


def build_loop_points(start: Point, via: Sequence[Point]) -> list[Point]:
    """Close a via sequence into a loop: ``[start, *via, start]``."""
    return [start, *via, start]


def calculate_elevation_gain(geometry: Sequence[Coordinate3D]) -> float:
    """Total climbing along a path: the sum of positive elevation deltas."""
    gain = 0.0
    for prev, cur in zip(geometry, geometry[1:]):
        diff = cur[2] - prev[2]
        if diff > 0:
            gain += diff
    return gain
