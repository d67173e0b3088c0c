"""
Loop Planning Service Errors.

Domain-specific exceptions for loop generation.
These errors are independent of the transport layer (CLI, HTTP, etc.).
"""

from __future__ import annotations

from typing import Literal

ExhaustedClassification = Literal["coastline", "sparse_roads"]


class LoopPlanningError(Exception):
    """Base exception for loop planning operations."""

    pass


class StartUnroutableError(LoopPlanningError):
    """Raised when the start point cannot be snapped to any road."""

    def __init__(self, lat: float, lng: float, attempts: int = 1):
        self.lat = lat
        self.lng = lng
        self.attempts = attempts
        super().__init__(
            f"Start location is not near any routable roads ({lat:.5f}, {lng:.5f})"
        )


class LoopExhaustedError(LoopPlanningError):
    """
    Raised when every retry budget ran out without a usable loop.

    ``classification`` tells the caller why:
    - coastline: waypoints kept landing off the road network (water, coast)
    - sparse_roads: the oracle never produced a loop at all
    """

    def __init__(
        self,
        classification: ExhaustedClassification,
        attempts: int,
        suggestion: str | None = None,
    ):
        self.classification = classification
        self.attempts = attempts
        if classification == "coastline":
            self.suggestion = suggestion or "Try starting further inland or a shorter distance"
            message = (
                f"Could not find routable roads for loop waypoints after {attempts} attempts; "
                "the area may be too close to water or the coastline"
            )
        else:
            self.suggestion = suggestion or "Try a different starting point"
            message = (
                f"Could not generate a loop after {attempts} attempts; "
                "the road network may be too sparse"
            )
        super().__init__(message)


class NoRoutesGeneratedError(LoopPlanningError):
    """Raised when every requested route variant failed."""

    def __init__(self, variants: int, reason: str | None = None):
        self.variants = variants
        self.reason = reason or "Unknown routing error"
        super().__init__(f"Could not generate any routes in this area. {self.reason}")
