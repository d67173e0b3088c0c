"""
Loop Convergence Controller.

Drives repeated oracle calls until a loop is both close enough to the
target distance and not star-shaped, or a retry budget runs out.

Two independent budgets:
- shape/distance: spent by every parsed-but-rejected attempt
- unroutable waypoint: spent by every point-not-found on an interior point

The controller is a small state machine. Each oracle call yields one
AttemptEvent; the transition table maps the event to a handler that
updates the per-request RetryState and returns the next LoopState.

When the shape/distance budget runs out, the best star-free attempt is
returned even if a star-shaped attempt was closer to the target distance:
loop shape dominates distance accuracy.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Literal, Optional, Union

from ...core.logging import get_logger
from ...core.oracle_client import PointNotFoundError
from ...models.geo import Point
from ...models.routes import Route, RoutedPath
from .errors import LoopExhaustedError, StartUnroutableError
from .shape import is_star_shaped
from .waypoints import WaypointPlan, calculate_radius, plan_waypoints

if TYPE_CHECKING:
    from ...core.config import RoamSettings
    from ...models.requests import LoopRequest

logger = get_logger(__name__)

Router = Callable[[Sequence[Point]], Awaitable[Union[RoutedPath, Route]]]
"""Async callable routing an ordered point list (whole loop or stitched legs)."""

LoopState = Literal["attempting", "accepted", "exhausted", "fatal"]
Classification = Literal[
    "accepted",
    "best_effort",
    "coastline",
    "sparse_roads",
    "start_unroutable",
]


class AttemptEvent(str, Enum):
    """What a single oracle call told the controller."""

    ACCEPTABLE = "acceptable"
    NEEDS_ADJUSTMENT = "needs_adjustment"
    WAYPOINT_UNROUTABLE = "waypoint_unroutable"
    START_UNROUTABLE = "start_unroutable"


# =============================================================================
# Policy
# =============================================================================


@dataclass(frozen=True)
class ConvergencePolicy:
    """
    Tunables for the retry loop.

    The defaults are empirical; they are kept configurable rather than
    derived.
    """

    distance_tolerance: float = 0.2
    max_retries: int = 3
    max_unroutable_retries: int = 7
    max_waypoints: int = 3
    star_trim_fraction: float = 0.10
    star_threshold_fraction: float = 0.25
    star_rotation_deg: float = 30.0
    unroutable_rotation_deg: float = 45.0
    unroutable_radius_shrink: float = 0.95

    @classmethod
    def from_settings(cls, settings: Optional[RoamSettings] = None) -> ConvergencePolicy:
        """Build a policy from RoamSettings (environment overrides)."""
        if settings is None:
            from ...core.config import get_settings

            settings = get_settings()
        return cls(
            distance_tolerance=settings.distance_tolerance,
            max_retries=settings.max_retries,
            max_unroutable_retries=settings.max_unroutable_retries,
            max_waypoints=settings.max_waypoints,
            star_trim_fraction=settings.star_trim_fraction,
            star_threshold_fraction=settings.star_threshold_fraction,
            star_rotation_deg=settings.star_rotation_deg,
            unroutable_rotation_deg=settings.unroutable_rotation_deg,
            unroutable_radius_shrink=settings.unroutable_radius_shrink,
        )


# =============================================================================
# Per-request State
# =============================================================================


@dataclass(frozen=True)
class AttemptRecord:
    """A parsed oracle response and how it scored."""

    route: Route
    plan: WaypointPlan
    oracle_call: int
    ratio: float
    delta: float
    is_star: bool
    distance_ok: bool


@dataclass
class RetryState:
    """
    Mutable state of one loop request.

    Lives for a single ``run()`` call; never shared between requests.
    """

    radius_km: float
    rotation_deg: float = 0.0
    shape_retries_used: int = 0
    unroutable_retries_used: int = 0
    oracle_calls: int = 0
    best: Optional[AttemptRecord] = None
    best_non_star: Optional[AttemptRecord] = None
    last_error: Optional[str] = field(default=None, repr=False)

    def record(self, attempt: AttemptRecord) -> None:
        """Track the best attempt by distance delta, overall and star-free."""
        if self.best is None or attempt.delta < self.best.delta:
            self.best = attempt
        if not attempt.is_star and (
            self.best_non_star is None or attempt.delta < self.best_non_star.delta
        ):
            self.best_non_star = attempt

    def fallback(self) -> Optional[AttemptRecord]:
        """Star-free beats closer-to-target."""
        return self.best_non_star or self.best


# =============================================================================
# Outcome
# =============================================================================


@dataclass(frozen=True)
class LoopOutcome:
    """Typed result of a loop request."""

    state: LoopState
    classification: Classification
    start: Point
    oracle_calls: int
    route: Optional[Route] = None
    plan: Optional[WaypointPlan] = None
    is_star: bool = False
    distance_delta: Optional[float] = None

    @property
    def accepted(self) -> bool:
        return self.state == "accepted"

    def raise_for_state(self) -> Route:
        """
        Return the route, or raise the typed error when there is none.

        Raises:
            StartUnroutableError: The start point is off the road network
            LoopExhaustedError: Budgets ran out without any usable loop
        """
        if self.state == "fatal":
            raise StartUnroutableError(self.start.lat, self.start.lng, self.oracle_calls)
        if self.route is None:
            classification = "coastline" if self.classification == "coastline" else "sparse_roads"
            raise LoopExhaustedError(classification, self.oracle_calls)
        return self.route


# =============================================================================
# Controller
# =============================================================================


class ConvergenceController:
    """
    Retry loop balancing distance accuracy against loop shape.

    Example:
        controller = ConvergenceController(client.route)
        outcome = await controller.run(request)
        route = outcome.raise_for_state()
    """

    def __init__(self, router: Router, policy: Optional[ConvergencePolicy] = None) -> None:
        self.router = router
        self.policy = policy or ConvergencePolicy.from_settings()
        self._transitions: dict[AttemptEvent, Callable[..., LoopState]] = {
            AttemptEvent.ACCEPTABLE: self._on_acceptable,
            AttemptEvent.NEEDS_ADJUSTMENT: self._on_needs_adjustment,
            AttemptEvent.WAYPOINT_UNROUTABLE: self._on_waypoint_unroutable,
            AttemptEvent.START_UNROUTABLE: self._on_start_unroutable,
        }

    # -------------------------------------------------------------------------
    # Transition handlers
    # -------------------------------------------------------------------------

    def _on_acceptable(self, state: RetryState, record: AttemptRecord) -> LoopState:
        return "accepted"

    def _on_needs_adjustment(self, state: RetryState, record: AttemptRecord) -> LoopState:
        if record.is_star:
            state.rotation_deg += self.policy.star_rotation_deg
        if record.ratio > 0:
            state.radius_km /= record.ratio
        state.shape_retries_used += 1
        if state.shape_retries_used > self.policy.max_retries:
            return "exhausted"
        return "attempting"

    def _on_waypoint_unroutable(self, state: RetryState, record: None = None) -> LoopState:
        state.unroutable_retries_used += 1
        state.rotation_deg += self.policy.unroutable_rotation_deg
        state.radius_km *= self.policy.unroutable_radius_shrink
        if state.unroutable_retries_used >= self.policy.max_unroutable_retries:
            return "exhausted"
        return "attempting"

    def _on_start_unroutable(self, state: RetryState, record: None = None) -> LoopState:
        return "fatal"

    # -------------------------------------------------------------------------
    # Attempt evaluation
    # -------------------------------------------------------------------------

    def _score(
        self,
        routed: Union[RoutedPath, Route],
        plan: WaypointPlan,
        target_km: float,
        oracle_call: int,
    ) -> AttemptRecord:
        route = routed if isinstance(routed, Route) else Route.from_path(routed)
        ratio = route.distance_km / target_km
        delta = abs(ratio - 1)
        star = is_star_shaped(
            route.geometry,
            plan.center,
            plan.radius_km,
            trim_fraction=self.policy.star_trim_fraction,
            threshold_fraction=self.policy.star_threshold_fraction,
        )
        return AttemptRecord(
            route=route,
            plan=plan,
            oracle_call=oracle_call,
            ratio=ratio,
            delta=delta,
            is_star=star,
            distance_ok=delta <= self.policy.distance_tolerance,
        )

    # -------------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------------

    async def run(self, request: LoopRequest) -> LoopOutcome:
        """
        Generate a loop for one request.

        Returns:
            LoopOutcome; never raises for unroutable points or budget
            exhaustion

        Raises:
            OracleError: Transient oracle failures, surfaced unchanged
        """
        start = request.start_point
        target_km = request.target_distance_km
        state = RetryState(radius_km=calculate_radius(target_km, request.stretch_factor))
        loop_state: LoopState = "attempting"
        record: Optional[AttemptRecord] = None
        event = AttemptEvent.NEEDS_ADJUSTMENT

        while loop_state == "attempting":
            plan = plan_waypoints(
                start,
                request.waypoint_bearings,
                state.radius_km,
                named=request.named_points,
                rotation_deg=state.rotation_deg,
                max_waypoints=self.policy.max_waypoints,
            )
            points = plan.loop_points()
            state.oracle_calls += 1
            logger.debug(
                "Attempt %d: radius=%.2f km rotation=%.0f deg points=%d",
                state.oracle_calls,
                state.radius_km,
                state.rotation_deg,
                len(points),
            )

            record = None
            try:
                routed = await self.router(points)
            except PointNotFoundError as e:
                state.last_error = e.message
                if e.point_index in (0, len(points) - 1):
                    event = AttemptEvent.START_UNROUTABLE
                else:
                    event = AttemptEvent.WAYPOINT_UNROUTABLE
                logger.debug("Point %d unroutable: %s", e.point_index, e.message)
            else:
                record = self._score(routed, plan, target_km, state.oracle_calls)
                state.record(record)
                if record.distance_ok and not record.is_star:
                    event = AttemptEvent.ACCEPTABLE
                else:
                    event = AttemptEvent.NEEDS_ADJUSTMENT
                logger.debug(
                    "Attempt %d: %.1f km (ratio %.2f) star=%s",
                    state.oracle_calls,
                    record.route.distance_km,
                    record.ratio,
                    record.is_star,
                )

            loop_state = self._transitions[event](state, record)

        return self._finish(loop_state, event, state, start, record)

    def _finish(
        self,
        loop_state: LoopState,
        event: AttemptEvent,
        state: RetryState,
        start: Point,
        record: Optional[AttemptRecord],
    ) -> LoopOutcome:
        if loop_state == "accepted" and record is not None:
            logger.info(
                "Loop accepted on attempt %d: %.1f km",
                state.oracle_calls,
                record.route.distance_km,
            )
            return self._outcome("accepted", "accepted", state, start, record)

        if loop_state == "fatal":
            logger.warning("Start point unroutable: %s", state.last_error)
            return LoopOutcome(
                state="fatal",
                classification="start_unroutable",
                start=start,
                oracle_calls=state.oracle_calls,
            )

        best = state.fallback()
        if event == AttemptEvent.WAYPOINT_UNROUTABLE:
            classification: Classification = "coastline"
        elif best is None:
            classification = "sparse_roads"
        else:
            classification = "best_effort"

        logger.warning(
            "Loop generation exhausted after %d oracle calls (%s)",
            state.oracle_calls,
            classification,
        )
        return self._outcome("exhausted", classification, state, start, best)

    @staticmethod
    def _outcome(
        loop_state: LoopState,
        classification: Classification,
        state: RetryState,
        start: Point,
        record: Optional[AttemptRecord],
    ) -> LoopOutcome:
        return LoopOutcome(
            state=loop_state,
            classification=classification,
            start=start,
            oracle_calls=state.oracle_calls,
            route=record.route if record else None,
            plan=record.plan if record else None,
            is_star=record.is_star if record else False,
            distance_delta=record.delta if record else None,
        )
