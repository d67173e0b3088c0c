"""
Loop Planning Result Builder.

Provides transport-agnostic result construction for generated loops.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ...core import constants
from ...core.oracle_client import OracleError
from ...models.geo import Point
from ...models.routes import Route
from .errors import LoopExhaustedError, NoRoutesGeneratedError, StartUnroutableError


@dataclass(frozen=True)
class RouteSummary:
    """
    Caller-facing loop metrics.

    Transport layers (CLI, HTTP) use these to build their specific responses.
    """

    distance_km: float
    """Distance rounded to 0.1 km."""

    distance_mi: float
    """Distance rounded to 0.1 mi."""

    elevation_gain_m: int
    """Total climbing, whole meters."""

    elevation_gain_ft: int
    """Total climbing, whole feet."""

    start: Optional[Point] = None
    """Loop start/finish, if known."""

    @classmethod
    def from_route(cls, route: Route, start: Optional[Point] = None) -> RouteSummary:
        return cls.from_metrics(route.distance_km, route.elevation_gain_m, start)

    @classmethod
    def from_metrics(
        cls,
        distance_km: float,
        elevation_gain_m: float,
        start: Optional[Point] = None,
    ) -> RouteSummary:
        """Round raw km/m metrics into both unit systems."""
        return cls(
            distance_km=round(distance_km, 1),
            distance_mi=round(distance_km * constants.KM_TO_MI, 1),
            elevation_gain_m=round(elevation_gain_m),
            elevation_gain_ft=round(elevation_gain_m * constants.M_TO_FT),
            start=start,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "distance_km": self.distance_km,
            "distance_mi": self.distance_mi,
            "elevation_gain_m": self.elevation_gain_m,
            "elevation_gain_ft": self.elevation_gain_ft,
        }
        if self.start is not None:
            data["start"] = self.start.to_dict()
        return data


def user_message(exc: BaseException) -> str:
    """
    Map a routing failure to text a rider can act on.

    Args:
        exc: Any exception raised while generating or editing a route

    Returns:
        Short caller-facing explanation
    """
    if isinstance(exc, StartUnroutableError):
        return (
            "Your starting point isn't near any roads I can route on. "
            "Try a location on or next to a road."
        )
    if isinstance(exc, LoopExhaustedError):
        if exc.classification == "coastline":
            return (
                "I couldn't find enough roads around that area; it may be too close "
                f"to water or the coastline. {exc.suggestion}."
            )
        return f"I couldn't build a loop from there; the roads look sparse. {exc.suggestion}."
    if isinstance(exc, NoRoutesGeneratedError):
        return str(exc)
    if isinstance(exc, OracleError):
        lowered = exc.message.lower()
        if "timed out" in lowered or "timeout" in lowered:
            return "The routing service took too long to respond. Please try again."
        if exc.status_code == 429 or "rate limit" in lowered:
            return "The routing service is busy right now. Please wait a moment and try again."
        return "The routing service returned an error. Please try again."
    return "Something went wrong while planning the route."
