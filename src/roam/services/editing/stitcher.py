"""
Segment Stitcher.

An editable route is routed leg by leg: one two-point oracle call per pair
of adjacent waypoints. Legs are requested concurrently and stitched back
together in leg order.

Stitching drops the first vertex of every leg after the first, since it
duplicates the previous leg's last vertex. Distance and elevation gain are
plain sums over the legs.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Optional

from ...core.logging import get_logger
from ...core.oracle_client import PointNotFoundError
from ...models.geo import Coordinate3D, Point
from ...models.routes import Route, RoutedPath, Segment, Waypoint, new_waypoint_id

logger = get_logger(__name__)

SegmentRouter = Callable[[Point, Point], Awaitable[RoutedPath]]
"""Async callable routing one leg, e.g. ``AsyncRoutingClient.route_segment``."""


async def route_legs(
    route_segment: SegmentRouter,
    points: Sequence[Point],
    offset: int = 0,
) -> tuple[Segment, ...]:
    """
    Route every adjacent pair of points concurrently.

    Args:
        route_segment: Leg router
        points: Ordered points; produces ``len(points) - 1`` legs
        offset: Index of ``points[0]`` in the enclosing waypoint list,
            used to report an unroutable point by its global index

    Returns:
        Segments in leg order

    Raises:
        PointNotFoundError: A leg endpoint is off the road network; the
            index refers to the enclosing point list
        OracleError: Any other leg failure; the whole group fails
    """
    pairs = list(zip(points, points[1:]))
    results = await asyncio.gather(
        *(route_segment(a, b) for a, b in pairs),
        return_exceptions=True,
    )

    segments: list[Segment] = []
    for leg, ((a, b), result) in enumerate(zip(pairs, results, strict=True)):
        if isinstance(result, PointNotFoundError):
            raise result.reindexed(offset + leg) from result
        if isinstance(result, BaseException):
            raise result
        segments.append(Segment.from_path(a, b, result))
    return tuple(segments)


def stitch(
    segments: Sequence[Segment],
    waypoints: Optional[Sequence[Waypoint]] = None,
) -> Route:
    """
    Concatenate legs into one Route.

    Raises:
        ValueError: If there are no segments, or the waypoint count does not
            match the segment count
    """
    if not segments:
        raise ValueError("Cannot stitch an empty segment list")
    if waypoints is not None and len(waypoints) != len(segments) + 1:
        raise ValueError(
            f"Expected {len(segments) + 1} waypoints for {len(segments)} segments, "
            f"got {len(waypoints)}"
        )

    geometry: list[Coordinate3D] = list(segments[0].geometry)
    for segment in segments[1:]:
        geometry.extend(segment.geometry[1:])

    return Route(
        geometry=tuple(geometry),
        distance_km=sum(s.distance_km for s in segments),
        elevation_gain_m=sum(s.elevation_gain_m for s in segments),
        segments=tuple(segments),
        waypoints=tuple(waypoints) if waypoints is not None else None,
    )


def make_waypoints(points: Sequence[Point]) -> tuple[Waypoint, ...]:
    """
    Waypoints for a closed loop ``[start, *via, start]``.

    The start pin appears at both ends as the same object.
    """
    if len(points) < 3:
        raise ValueError("A loop needs a start, at least one via point and a finish")
    start = Waypoint(id=new_waypoint_id(), point=points[0], role="start")
    via = tuple(Waypoint(id=new_waypoint_id(), point=p) for p in points[1:-1])
    return (start, *via, start)


async def build_editable_route(route_segment: SegmentRouter, points: Sequence[Point]) -> Route:
    """Route a closed loop leg by leg and attach segments and waypoints."""
    waypoints = make_waypoints(points)
    segments = await route_legs(route_segment, points)
    logger.debug("Stitched %d legs", len(segments))
    return stitch(segments, waypoints)


def editable_router(route_segment: SegmentRouter) -> Callable[[Sequence[Point]], Awaitable[Route]]:
    """Adapt a leg router into a whole-loop router producing editable routes."""

    async def _route(points: Sequence[Point]) -> Route:
        return await build_editable_route(route_segment, points)

    return _route
