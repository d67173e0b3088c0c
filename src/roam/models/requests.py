"""
Pydantic models for loop generation and segment re-routing requests.

Requests arrive from collaborators outside the core (the conversational
layer, a map UI) and are validated here before any oracle call is made.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core import constants
from .geo import Point


class RoamModel(BaseModel):
    """
    Base model for Roam requests.

    Configuration:
    - frozen: Prevents accidental mutation, enables hashing
    - extra="forbid": Catches typos in field names during construction
    """

    model_config = ConfigDict(frozen=True, extra="forbid")


class Coordinate(RoamModel):
    """Wire form of a position: finite lat/lng in degrees."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    @field_validator("lat", "lng")
    @classmethod
    def must_be_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("coordinate must be a finite number")
        return v

    def to_point(self) -> Point:
        return Point(lat=self.lat, lng=self.lng)


class LoopRequest(RoamModel):
    """
    Parameters for one loop generation.

    ``elevation_character`` and ``road_preference`` are carried through
    untouched for the caller; the geometry engine does not interpret them.
    """

    start: Coordinate
    target_distance_km: float = Field(gt=0, description="Desired loop length")
    stretch_factor: float = Field(
        default=constants.STRETCH_FACTOR,
        gt=0,
        description="Road distance / straight-line distance",
    )
    elevation_character: str = "rolling"
    road_preference: str = "any"
    waypoint_bearings: tuple[float, ...] = Field(
        default=(0.0, 120.0, 240.0),
        max_length=constants.MAX_WAYPOINTS,
        description="Compass bearings, 0 = north; the first sets the loop direction",
    )
    named_waypoints: tuple[Coordinate, ...] = Field(
        default=(),
        max_length=constants.MAX_WAYPOINTS,
        description="Pre-geocoded places the loop must visit",
    )

    @field_validator("waypoint_bearings")
    @classmethod
    def normalize_bearings(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        for bearing in v:
            if not math.isfinite(bearing):
                raise ValueError("bearings must be finite numbers")
        return tuple(b % 360.0 for b in v)

    @model_validator(mode="after")
    def require_via_source(self) -> LoopRequest:
        if not self.waypoint_bearings and not self.named_waypoints:
            raise ValueError("at least one waypoint bearing or named waypoint is required")
        return self

    @property
    def start_point(self) -> Point:
        return self.start.to_point()

    @property
    def named_points(self) -> tuple[Point, ...]:
        return tuple(c.to_point() for c in self.named_waypoints)

    def with_bearings(self, bearings: tuple[float, ...]) -> LoopRequest:
        """Copy of this request for a different bearing variant."""
        data = self.model_dump()
        data["waypoint_bearings"] = tuple(bearings)
        return LoopRequest.model_validate(data)


class SegmentRequest(RoamModel):
    """Body of a single-leg re-route: ``{"from": {...}, "to": {...}}``."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    from_: Coordinate = Field(alias="from")
    to: Coordinate
