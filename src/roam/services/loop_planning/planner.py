"""
Loop Planning Service.

Core loop generation service shared between the CLI and any other
transport. Wires the routing client into the convergence controller,
either as a single whole-loop call per attempt or as stitched legs when
the caller wants an editable route.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ...core.logging import get_logger
from ..editing.stitcher import editable_router
from .controller import ConvergenceController, ConvergencePolicy, LoopOutcome
from .errors import NoRoutesGeneratedError

if TYPE_CHECKING:
    from ...core.oracle_client import AsyncRoutingClient
    from ...models.requests import LoopRequest

logger = get_logger(__name__)


@dataclass
class LoopPlanningService:
    """
    Unified loop generation service.

    Example:
        async with AsyncRoutingClient() as client:
            service = LoopPlanningService(client)
            outcome = await service.generate_loop(request)
            route = outcome.raise_for_state()
    """

    client: AsyncRoutingClient
    policy: Optional[ConvergencePolicy] = None

    def __post_init__(self) -> None:
        if self.policy is None:
            self.policy = ConvergencePolicy.from_settings()

    async def generate_loop(self, request: LoopRequest) -> LoopOutcome:
        """
        Generate a loop with one whole-loop oracle call per attempt.

        Raises:
            OracleError: Transient oracle failures
        """
        controller = ConvergenceController(self.client.route, self.policy)
        return await controller.run(request)

    async def generate_editable_loop(self, request: LoopRequest) -> LoopOutcome:
        """
        Generate a loop routed leg by leg.

        The outcome's route carries segments and waypoints, ready for
        RouteEditor / EditSession.

        Raises:
            OracleError: Transient oracle failures
        """
        controller = ConvergenceController(editable_router(self.client.route_segment), self.policy)
        return await controller.run(request)

    async def _generate_variant(
        self,
        request: LoopRequest,
        bearings: Sequence[float],
        editable: bool,
    ) -> LoopOutcome:
        request = request.with_bearings(tuple(bearings))
        if editable:
            outcome = await self.generate_editable_loop(request)
        else:
            outcome = await self.generate_loop(request)
        outcome.raise_for_state()
        return outcome

    async def generate_options(
        self,
        request: LoopRequest,
        variants: Sequence[Sequence[float]],
        editable: bool = False,
    ) -> list[LoopOutcome]:
        """
        Generate several loop options concurrently, one per bearing set.

        A variant with invalid bearings fails on its own and is dropped
        like any other failed variant.

        Args:
            request: Base request; only ``waypoint_bearings`` varies
            variants: Bearing sets, one per option
            editable: Route options leg by leg

        Returns:
            Outcomes of the variants that produced a route, in variant order

        Raises:
            NoRoutesGeneratedError: Every variant failed
        """
        tasks = [
            self._generate_variant(request, bearings, editable) for bearings in variants
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes: list[LoopOutcome] = []
        first_failure: Optional[BaseException] = None
        for index, result in enumerate(results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                logger.warning("Route variant %d failed: %s", index, result)
                if first_failure is None:
                    first_failure = result
                continue
            outcomes.append(result)

        if not outcomes:
            reason = str(first_failure) if first_failure is not None else None
            raise NoRoutesGeneratedError(len(tasks), reason)
        return outcomes
