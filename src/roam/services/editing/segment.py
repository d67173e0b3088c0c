"""
Single-leg re-route.

A lightweight pass-through to the routing oracle used while a map UI
drags a pin: route ``from`` → ``to`` and report rounded metrics.
"""

from __future__ import annotations

from typing import Any, Union

from ...core.oracle_client import AsyncRoutingClient
from ...models.requests import SegmentRequest
from ..loop_planning.result_builder import RouteSummary


async def reroute_segment(
    client: AsyncRoutingClient,
    request: Union[SegmentRequest, dict[str, Any]],
) -> dict[str, Any]:
    """
    Route one leg and build the response payload.

    Args:
        client: Open routing client
        request: SegmentRequest or its wire form ``{"from": {...}, "to": {...}}``

    Returns:
        Dict with geometry (``[lat, lng, ele]`` vertices), distance in km/mi
        rounded to 0.1 and elevation gain in m/ft rounded to whole units

    Raises:
        pydantic.ValidationError: Missing or non-finite coordinates
        OracleError: Routing failed
    """
    if not isinstance(request, SegmentRequest):
        request = SegmentRequest.model_validate(request)

    path = await client.route_segment(request.from_.to_point(), request.to.to_point())
    summary = RouteSummary.from_metrics(path.distance_km, path.elevation_gain_m)

    return {
        "geometry": [list(c) for c in path.geometry],
        **summary.to_dict(),
    }
