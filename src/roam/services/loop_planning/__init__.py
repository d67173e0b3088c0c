"""
Loop Planning Service.

Loop generation shared between the CLI and other transports. Provides the
geodesic primitives, the star-shape analyzer, the waypoint planner, the
convergence controller and result construction utilities.

Usage:
    from roam.services.loop_planning import LoopPlanningService

    async with AsyncRoutingClient() as client:
        service = LoopPlanningService(client)
        outcome = await service.generate_loop(request)
"""

from __future__ import annotations

__all__ = [
    # Core service
    "LoopPlanningService",
    # Controller
    "ConvergenceController",
    "ConvergencePolicy",
    "LoopOutcome",
    # Errors
    "LoopPlanningError",
    "StartUnroutableError",
    "LoopExhaustedError",
    "NoRoutesGeneratedError",
    # Geometry
    "distance_km",
    "project",
    "initial_bearing",
    "is_star_shaped",
    # Waypoints
    "WaypointPlan",
    "calculate_radius",
    "plan_waypoints",
    "build_loop_points",
    # Result utilities
    "RouteSummary",
    "user_message",
]


def __getattr__(name: str):
    """Lazy import to avoid circular dependencies."""
    # Planner service
    if name == "LoopPlanningService":
        from .planner import LoopPlanningService

        return LoopPlanningService

    # Controller
    if name in ("ConvergenceController", "ConvergencePolicy", "LoopOutcome"):
        from . import controller

        return getattr(controller, name)

    # Errors
    if name in (
        "LoopPlanningError",
        "StartUnroutableError",
        "LoopExhaustedError",
        "NoRoutesGeneratedError",
    ):
        from . import errors

        return getattr(errors, name)

    # Geometry
    if name in ("distance_km", "project", "initial_bearing"):
        from . import geo

        return getattr(geo, name)
    if name == "is_star_shaped":
        from .shape import is_star_shaped

        return is_star_shaped

    # Waypoints
    if name in ("WaypointPlan", "calculate_radius", "plan_waypoints", "build_loop_points"):
        from . import waypoints

        return getattr(waypoints, name)

    # Result utilities
    if name in ("RouteSummary", "user_message"):
        from . import result_builder

        return getattr(result_builder, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
