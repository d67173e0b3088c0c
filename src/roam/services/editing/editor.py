"""
Incremental Route Editor.

Edits touch only the legs adjacent to the edited waypoint:
- move: re-route the two legs meeting at the waypoint
- add: split one leg into two
- remove: merge the two legs meeting at the waypoint into one

The new legs are spliced into the segment array and the whole route is
re-stitched. Untouched Segment objects are carried over by reference.
The start/finish pin cannot be moved or removed.
"""

from __future__ import annotations

from typing import Optional

from ...core.logging import get_logger
from ...core.oracle_client import OracleError
from ...models.geo import Point
from ...models.routes import Route, Waypoint, new_waypoint_id
from .errors import EditRejectedError, RerouteError
from .stitcher import SegmentRouter, route_legs, stitch

logger = get_logger(__name__)


# =============================================================================
# Waypoint list edits (validation + optimistic state)
# =============================================================================


def _require_editable(route: Route, operation: str) -> tuple[Waypoint, ...]:
    if not route.is_editable or not route.waypoints:
        raise EditRejectedError(operation, "route has no editable waypoints")
    return route.waypoints


def _require_interior(waypoints: tuple[Waypoint, ...], index: int, operation: str) -> None:
    if index in (0, len(waypoints) - 1):
        raise EditRejectedError(operation, "the start/finish point cannot be changed")
    if not 0 < index < len(waypoints) - 1:
        raise EditRejectedError(operation, f"waypoint index {index} is out of range")


def moved_waypoints(route: Route, index: int, point: Point) -> tuple[Waypoint, ...]:
    """Waypoint list after moving ``waypoints[index]`` to ``point``."""
    waypoints = _require_editable(route, "move waypoint")
    _require_interior(waypoints, index, "move waypoint")
    updated = list(waypoints)
    updated[index] = waypoints[index].moved_to(point)
    return tuple(updated)


def added_waypoints(
    route: Route,
    after_segment: int,
    point: Point,
    waypoint_id: Optional[str] = None,
) -> tuple[Waypoint, ...]:
    """
    Waypoint list after inserting ``point`` into ``segments[after_segment]``.

    Pass ``waypoint_id`` to keep the id of a pin already shown to the user.
    """
    waypoints = _require_editable(route, "add waypoint")
    if not 0 <= after_segment < len(waypoints) - 1:
        raise EditRejectedError("add waypoint", f"segment index {after_segment} is out of range")
    updated = list(waypoints)
    updated.insert(after_segment + 1, Waypoint(id=waypoint_id or new_waypoint_id(), point=point))
    return tuple(updated)


def removed_waypoints(route: Route, index: int) -> tuple[Waypoint, ...]:
    """Waypoint list after dropping ``waypoints[index]``."""
    waypoints = _require_editable(route, "remove waypoint")
    _require_interior(waypoints, index, "remove waypoint")
    if route.via_count < 2:
        raise EditRejectedError("remove waypoint", "a loop needs at least one via point")
    return waypoints[:index] + waypoints[index + 1 :]


# =============================================================================
# Editor
# =============================================================================


class RouteEditor:
    """
    Applies single-waypoint edits to an editable Route.

    Every edit returns a new Route; the input route is never modified.

    Example:
        editor = RouteEditor(client.route_segment)
        route = await editor.move_waypoint(route, 2, Point(37.80, -122.41))
    """

    def __init__(self, route_segment: SegmentRouter) -> None:
        self.route_segment = route_segment

    async def _splice(
        self,
        route: Route,
        waypoints: tuple[Waypoint, ...],
        first_leg: int,
        replaced_legs: int,
        leg_points: list[Point],
        operation: str,
    ) -> Route:
        assert route.segments is not None
        try:
            new_legs = await route_legs(self.route_segment, leg_points, offset=first_leg)
        except OracleError as e:
            logger.debug("%s failed: %s", operation, e)
            raise RerouteError(operation, e) from e

        segments = list(route.segments)
        segments[first_leg : first_leg + replaced_legs] = new_legs
        return stitch(segments, waypoints)

    async def move_waypoint(self, route: Route, index: int, point: Point) -> Route:
        """
        Move a via waypoint and re-route its two adjacent legs.

        Raises:
            EditRejectedError: The index is the start/finish or out of range
            RerouteError: Routing either leg failed
        """
        waypoints = moved_waypoints(route, index, point)
        leg_points = [waypoints[index - 1].point, point, waypoints[index + 1].point]
        return await self._splice(route, waypoints, index - 1, 2, leg_points, "move waypoint")

    async def add_waypoint(
        self,
        route: Route,
        after_segment: int,
        point: Point,
        waypoint_id: Optional[str] = None,
    ) -> Route:
        """
        Insert a via waypoint into one leg, splitting it in two.

        The new waypoint gets ``waypoint_id`` if given, else a fresh id.

        Raises:
            EditRejectedError: The segment index is out of range
            RerouteError: Routing either new leg failed
        """
        waypoints = added_waypoints(route, after_segment, point, waypoint_id)
        leg_points = [
            waypoints[after_segment].point,
            point,
            waypoints[after_segment + 2].point,
        ]
        return await self._splice(
            route, waypoints, after_segment, 1, leg_points, "add waypoint"
        )

    async def remove_waypoint(self, route: Route, index: int) -> Route:
        """
        Remove a via waypoint, merging its two legs into one.

        Raises:
            EditRejectedError: The index is the start/finish, out of range,
                or the route would be left without a via point
            RerouteError: Routing the merged leg failed
        """
        waypoints = removed_waypoints(route, index)
        leg_points = [waypoints[index - 1].point, waypoints[index].point]
        return await self._splice(route, waypoints, index - 1, 2, leg_points, "remove waypoint")
