"""
Roam Services.

Loop generation and incremental route editing.
"""

from __future__ import annotations

__all__ = [
    # Loop planning service
    "LoopPlanningService",
    "loop_planning",
    # Route editing
    "RouteEditor",
    "EditSession",
    "editing",
]


def __getattr__(name: str):
    """Lazy import services to avoid circular imports."""
    if name == "LoopPlanningService":
        from .loop_planning.planner import LoopPlanningService

        return LoopPlanningService
    if name == "loop_planning":
        from . import loop_planning

        return loop_planning
    if name == "RouteEditor":
        from .editing.editor import RouteEditor

        return RouteEditor
    if name == "EditSession":
        from .editing.session import EditSession

        return EditSession
    if name == "editing":
        from . import editing

        return editing
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
