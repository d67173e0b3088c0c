"""
Tests for the loop convergence controller.

Uses scripted whole-loop routers; no HTTP.
"""

from __future__ import annotations

import logging

import pytest

from roam.core.oracle_client import OracleError, PointNotFoundError
from roam.models.geo import Point
from roam.models.requests import LoopRequest
from roam.services.loop_planning.controller import (
    ConvergenceController,
    ConvergencePolicy,
)
from roam.services.loop_planning.errors import LoopExhaustedError, StartUnroutableError
from roam.services.loop_planning.geo import distance_km
from roam.services.loop_planning.waypoints import calculate_radius
from tests.fakes import Reply, ScriptedRouter

GIRONA = {"lat": 41.9794, "lng": 2.8214}


def pnf(index: int) -> PointNotFoundError:
    return PointNotFoundError(f"Cannot find point {index}", point_index=index, status_code=400)


@pytest.fixture
def request_60km() -> LoopRequest:
    return LoopRequest.model_validate(
        {"start": GIRONA, "target_distance_km": 60.0, "waypoint_bearings": [0, 120, 240]}
    )


@pytest.fixture
def policy() -> ConvergencePolicy:
    return ConvergencePolicy()


# =============================================================================
# Policy
# =============================================================================


class TestConvergencePolicy:
    def test_defaults(self):
        policy = ConvergencePolicy()

        assert policy.distance_tolerance == 0.2
        assert policy.max_retries == 3
        assert policy.max_unroutable_retries == 7

    def test_from_settings(self, monkeypatch):
        monkeypatch.setenv("ROAM_MAX_RETRIES", "5")
        from roam.core.config import reset_settings

        reset_settings()

        assert ConvergencePolicy.from_settings().max_retries == 5


# =============================================================================
# End-to-end Scenarios
# =============================================================================


@pytest.mark.asyncio
class TestConvergenceScenarios:
    """Accept, exhaust and fatal paths."""

    async def test_accepts_first_attempt(self, request_60km, policy):
        router = ScriptedRouter([Reply(62.0)])

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert outcome.state == "accepted"
        assert outcome.classification == "accepted"
        assert outcome.oracle_calls == 1
        assert outcome.route.distance_km == 62.0
        assert outcome.is_star is False
        assert outcome.plan.radius_km == pytest.approx(7.34, abs=0.01)
        assert outcome.raise_for_state() is outcome.route

    async def test_always_star_stops_after_budget(self, request_60km, policy):
        router = ScriptedRouter([Reply(90.0, star=True)])

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert len(router.calls) == policy.max_retries + 1 == 4
        assert outcome.state == "exhausted"
        assert outcome.classification == "best_effort"
        assert outcome.route.distance_km == 90.0
        assert outcome.is_star is True

    async def test_start_unroutable_is_fatal(self, request_60km, policy):
        router = ScriptedRouter([pnf(0)])

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert len(router.calls) == 1
        assert outcome.state == "fatal"
        assert outcome.classification == "start_unroutable"
        assert outcome.route is None
        with pytest.raises(StartUnroutableError):
            outcome.raise_for_state()

    async def test_finish_unroutable_is_fatal(self, request_60km, policy):
        router = ScriptedRouter([pnf(4)])

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert len(router.calls) == 1
        assert outcome.state == "fatal"

    async def test_transient_error_propagates(self, request_60km, policy):
        router = ScriptedRouter([OracleError("Routing request timed out after 30.0s")])

        with pytest.raises(OracleError, match="timed out"):
            await ConvergenceController(router, policy).run(request_60km)

        assert len(router.calls) == 1


# =============================================================================
# Budgets
# =============================================================================


@pytest.mark.asyncio
class TestRetryBudgets:
    """The shape/distance and unroutable budgets are independent."""

    async def test_interior_unroutable_exhausts_as_coastline(self, request_60km, policy):
        router = ScriptedRouter([pnf(2)])

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert len(router.calls) == 7
        assert outcome.state == "exhausted"
        assert outcome.classification == "coastline"
        assert outcome.route is None
        with pytest.raises(LoopExhaustedError) as exc_info:
            outcome.raise_for_state()
        assert exc_info.value.classification == "coastline"

    async def test_unroutable_budget_ignores_shape_budget(self, request_60km):
        policy = ConvergencePolicy(max_retries=0)
        router = ScriptedRouter([pnf(1)])

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert len(router.calls) == 7
        assert outcome.classification == "coastline"

    async def test_unroutable_does_not_consume_shape_budget(self, request_60km, policy):
        router = ScriptedRouter([pnf(1), pnf(2), pnf(3), Reply(90.0, star=True)])

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert len(router.calls) == 3 + policy.max_retries + 1
        assert outcome.classification == "best_effort"

    async def test_coastline_keeps_best_parsed_route(self, request_60km, policy):
        router = ScriptedRouter([Reply(120.0), pnf(2)])

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert len(router.calls) == 1 + 7
        assert outcome.classification == "coastline"
        assert outcome.route.distance_km == 120.0
        assert outcome.raise_for_state().distance_km == 120.0

    async def test_fallback_prefers_non_star_over_closer_star(self, request_60km, policy):
        router = ScriptedRouter(
            [
                Reply(61.0, star=True),
                Reply(100.0),
                Reply(90.0, star=True),
                Reply(95.0, star=True),
            ]
        )

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert len(router.calls) == 4
        assert outcome.route.distance_km == 100.0
        assert outcome.is_star is False

    async def test_fallback_best_overall_when_all_star(self, request_60km, policy):
        router = ScriptedRouter(
            [
                Reply(90.0, star=True),
                Reply(66.0, star=True),
                Reply(100.0, star=True),
                Reply(80.0, star=True),
            ]
        )

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert outcome.route.distance_km == 66.0


# =============================================================================
# Adjustments
# =============================================================================


@pytest.mark.asyncio
class TestAdjustments:
    """Radius and rotation changes between attempts."""

    async def test_radius_scaled_by_distance_ratio(self, request_60km, policy):
        router = ScriptedRouter([Reply(30.0), Reply(60.0)])

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert outcome.oracle_calls == 2
        assert outcome.plan.radius_km == pytest.approx(2 * calculate_radius(60.0))
        first, second = router.calls
        start = Point(**GIRONA)
        assert distance_km(start, second[1]) == pytest.approx(
            2 * distance_km(start, first[1]), rel=1e-3
        )

    async def test_star_rotates_thirty_degrees(self, request_60km, policy):
        router = ScriptedRouter([Reply(60.0, star=True), Reply(60.0)])

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert outcome.state == "accepted"
        assert outcome.plan.loop_direction == pytest.approx(30.0)
        assert outcome.plan.radius_km == pytest.approx(calculate_radius(60.0))

    async def test_unroutable_rotates_and_shrinks(self, request_60km, policy):
        router = ScriptedRouter([pnf(2), Reply(60.0)])

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert outcome.state == "accepted"
        assert outcome.plan.loop_direction == pytest.approx(45.0)
        assert outcome.plan.radius_km == pytest.approx(calculate_radius(60.0) * 0.95)

    async def test_tolerance_boundary(self, request_60km, policy):
        router = ScriptedRouter([Reply(72.0)])

        outcome = await ConvergenceController(router, policy).run(request_60km)

        assert outcome.state == "accepted"

    async def test_logs_exhaustion(self, request_60km, policy, caplog):
        router = ScriptedRouter([pnf(2)])

        with caplog.at_level(logging.WARNING):
            await ConvergenceController(router, policy).run(request_60km)

        assert any("exhausted" in r.getMessage() for r in caplog.records)
