"""
Route Editing Service.

Leg-by-leg routing, stitching and incremental waypoint edits.

Usage:
    from roam.services.editing import EditSession, RouteEditor

    session = EditSession(RouteEditor(client.route_segment), route)
    updated = await session.move_waypoint(1, point)
"""

from __future__ import annotations

__all__ = [
    # Stitching
    "SegmentRouter",
    "build_editable_route",
    "editable_router",
    "make_waypoints",
    "route_legs",
    "stitch",
    # Editing
    "RouteEditor",
    "EditSession",
    "reroute_segment",
    # Errors
    "EditError",
    "EditRejectedError",
    "RerouteError",
]


def __getattr__(name: str):
    """Lazy import to avoid circular dependencies."""
    if name in (
        "SegmentRouter",
        "build_editable_route",
        "editable_router",
        "make_waypoints",
        "route_legs",
        "stitch",
    ):
        from . import stitcher

        return getattr(stitcher, name)

    if name == "RouteEditor":
        from .editor import RouteEditor

        return RouteEditor

    if name == "EditSession":
        from .session import EditSession

        return EditSession

    if name == "reroute_segment":
        from .segment import reroute_segment

        return reroute_segment

    if name in ("EditError", "EditRejectedError", "RerouteError"):
        from . import errors

        return getattr(errors, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
