"""
Roam Routing Commands

Loop generation and single-leg re-routing against the routing oracle.
Both commands need GRAPHHOPPER_API_KEY (or ROAM_ORACLE_BASE_URL pointing
at a keyless instance).
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Any

from pydantic import ValidationError

from ..core import AsyncRoutingClient, OracleError, get_logger, get_utc_timestamp
from ..models.requests import LoopRequest
from ..services.editing.errors import EditError
from ..services.editing.segment import reroute_segment
from ..services.loop_planning.errors import LoopPlanningError
from ..services.loop_planning.planner import LoopPlanningService
from ..services.loop_planning.result_builder import RouteSummary, user_message

logger = get_logger(__name__)


def _error_result(error_type: str, message: str, query_ts: str, **extra: Any) -> dict:
    result = {"error": error_type, "message": message, "query_timestamp": query_ts}
    result.update(extra)
    return result


# =============================================================================
# Loop Command
# =============================================================================


def cmd_loop(args: argparse.Namespace) -> dict:
    """
    Generate a loop ride from a start coordinate.

    Args:
        args: Parsed arguments with lat, lng, distance, bearings, stretch,
            editable

    Returns:
        Loop summary, route geometry and generation status
    """
    query_ts = get_utc_timestamp()

    try:
        data: dict[str, Any] = {
            "start": {"lat": args.lat, "lng": args.lng},
            "target_distance_km": args.distance,
        }
        if args.bearings:
            data["waypoint_bearings"] = tuple(args.bearings)
        if args.stretch is not None:
            data["stretch_factor"] = args.stretch
        request = LoopRequest.model_validate(data)
    except ValidationError as e:
        return _error_result("invalid_request", str(e), query_ts)

    async def generate():
        async with AsyncRoutingClient() as client:
            service = LoopPlanningService(client)
            if args.editable:
                return await service.generate_editable_loop(request)
            return await service.generate_loop(request)

    try:
        outcome = asyncio.run(generate())
        route = outcome.raise_for_state()
    except LoopPlanningError as e:
        return _error_result("loop_failed", user_message(e), query_ts, detail=str(e))
    except OracleError as e:
        return _error_result("oracle_error", user_message(e), query_ts, detail=e.message)

    summary = RouteSummary.from_route(route, request.start_point)
    return {
        "query_timestamp": query_ts,
        "status": outcome.state,
        "classification": outcome.classification,
        "oracle_calls": outcome.oracle_calls,
        "star_shaped": outcome.is_star,
        "summary": summary.to_dict(),
        "route": route.to_dict(),
    }


# =============================================================================
# Segment Command
# =============================================================================


def cmd_segment(args: argparse.Namespace) -> dict:
    """
    Route a single leg between two coordinates.

    Args:
        args: Parsed arguments with from_lat, from_lng, to_lat, to_lng

    Returns:
        Leg geometry with rounded distance and climbing
    """
    query_ts = get_utc_timestamp()
    body = {
        "from": {"lat": args.from_lat, "lng": args.from_lng},
        "to": {"lat": args.to_lat, "lng": args.to_lng},
    }

    async def fetch():
        async with AsyncRoutingClient() as client:
            return await reroute_segment(client, body)

    try:
        result = asyncio.run(fetch())
    except ValidationError as e:
        return _error_result(
            "invalid_request",
            'Request must include valid "from" and "to" coordinates with lat/lng numbers',
            query_ts,
            detail=str(e),
        )
    except (OracleError, EditError) as e:
        return _error_result("oracle_error", user_message(e), query_ts, detail=str(e))

    result["query_timestamp"] = query_ts
    return result


# =============================================================================
# Parser Registration
# =============================================================================


def register_parsers(subparsers: argparse._SubParsersAction) -> None:
    """Register routing command parsers."""

    # Loop command
    loop_parser = subparsers.add_parser("loop", help="Generate a loop ride from a start point")
    loop_parser.add_argument("lat", type=float, help="Start latitude")
    loop_parser.add_argument("lng", type=float, help="Start longitude")
    loop_parser.add_argument(
        "--distance",
        "-d",
        type=float,
        required=True,
        metavar="KM",
        help="Target loop distance in kilometers",
    )
    loop_parser.add_argument(
        "--bearings",
        nargs="+",
        type=float,
        metavar="DEG",
        help="Waypoint compass bearings; the first sets the loop direction (default: 0 120 240)",
    )
    loop_parser.add_argument(
        "--stretch",
        type=float,
        default=None,
        help="Road/straight-line distance ratio (default: 1.3)",
    )
    loop_parser.add_argument(
        "--editable",
        action="store_true",
        help="Route leg by leg and include segments and waypoints",
    )
    loop_parser.set_defaults(func=cmd_loop)

    # Segment command
    segment_parser = subparsers.add_parser("segment", help="Route a single leg between two points")
    segment_parser.add_argument("from_lat", type=float, help="From latitude")
    segment_parser.add_argument("from_lng", type=float, help="From longitude")
    segment_parser.add_argument("to_lat", type=float, help="To latitude")
    segment_parser.add_argument("to_lng", type=float, help="To longitude")
    segment_parser.set_defaults(func=cmd_segment)
