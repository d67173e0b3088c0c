"""
Roam Models

Value types for geometry and routes, plus validated request models.
"""

from roam.models.geo import Coordinate3D, Point
from roam.models.requests import (
    Coordinate,
    LoopRequest,
    SegmentRequest,
)
from roam.models.routes import (
    Route,
    RoutedPath,
    Segment,
    Waypoint,
    WaypointRole,
    new_waypoint_id,
)

__all__ = [
    "Coordinate",
    "Coordinate3D",
    "LoopRequest",
    "Point",
    "Route",
    "RoutedPath",
    "Segment",
    "SegmentRequest",
    "Waypoint",
    "WaypointRole",
    "new_waypoint_id",
]
