"""
Star/spoke pattern detection.

A well-formed loop stays away from its center through the middle of the
ride. When the oracle routes every leg back through the hub instead of
around a perimeter, the path passes close to the center mid-ride.

This is a cheap necessary-but-not-sufficient heuristic, not a
self-intersection test: a loop can cross itself far from the center and
still pass, and that is accepted.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from ...core import constants
from ...models.geo import Coordinate3D, Point
from .geo import distance_km


def trimmed_middle(
    geometry: Sequence[Coordinate3D],
    trim_fraction: float = constants.STAR_TRIM_FRACTION,
) -> Sequence[Coordinate3D]:
    """
    Drop the first and last ``trim_fraction`` of the path.

    At least one point is trimmed from each end.
    """
    trim_count = max(math.floor(len(geometry) * trim_fraction), 1)
    return geometry[trim_count : len(geometry) - trim_count]


def is_star_shaped(
    geometry: Sequence[Coordinate3D],
    center: Point,
    radius_km: float,
    trim_fraction: float = constants.STAR_TRIM_FRACTION,
    threshold_fraction: float = constants.STAR_THRESHOLD_FRACTION,
) -> bool:
    """
    Detect whether a loop geometry forms a star/spoke pattern.

    Args:
        geometry: Path vertices in traversal order
        center: Loop center (not the start point)
        radius_km: Nominal loop radius
        trim_fraction: Fraction of points ignored at each end
        threshold_fraction: Spoke threshold as a fraction of the radius

    Returns:
        True if any point in the trimmed middle is strictly closer to the
        center than ``threshold_fraction * radius_km``
    """
    if len(geometry) < constants.STAR_MIN_POINTS:
        return False

    threshold_km = radius_km * threshold_fraction

    for coord in trimmed_middle(geometry, trim_fraction):
        if distance_km(center, Point.from_coordinate(coord)) < threshold_km:
            return True

    return False
