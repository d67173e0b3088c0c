"""
Roam - loop ride generation and incremental re-routing

Builds cycling loops of a target length around a start point by asking a
routing oracle (GraphHopper-compatible) for roads through waypoints placed
on a circle, retrying until the loop is close to the requested distance
and not star-shaped. Editable loops are routed leg by leg so a single
waypoint edit re-routes only its adjacent legs.

Usage as library:
    from roam.core import AsyncRoutingClient
    from roam.models import LoopRequest
    from roam.services.loop_planning import LoopPlanningService

    request = LoopRequest.model_validate(
        {"start": {"lat": 37.77, "lng": -122.42}, "target_distance_km": 40}
    )
    async with AsyncRoutingClient() as client:
        outcome = await LoopPlanningService(client).generate_loop(request)
        route = outcome.raise_for_state()

Usage as CLI:
    python -m roam loop 37.77 -122.42 --distance 40
    python -m roam segment 37.77 -122.42 37.80 -122.41

Package structure:
    roam/
    ├── core/           # Config, logging, constants, oracle client
    ├── models/         # Geometry/route value types, request models
    ├── services/
    │   ├── loop_planning/  # Geo, star shape, waypoints, controller
    │   └── editing/        # Stitcher, editor, edit session
    └── commands/       # CLI command handlers
"""

__version__ = "0.1.0"
