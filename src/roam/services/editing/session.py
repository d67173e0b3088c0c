"""
Route Edit Session.

Owns the committed Route and the waypoints currently shown to the user.

Each edit:
1. Validates against the committed route (invalid edits change nothing)
2. Bumps the generation counter and cancels the in-flight edit, if any
3. Shows the edited waypoints immediately (optimistic display)
4. Re-routes the affected legs

When the edit finishes it is committed only if its generation is still
current. A superseded edit is discarded silently: no commit, no error.
A failed current edit restores the display to the committed waypoints and
raises RerouteError; the committed route is unchanged.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Optional

from ...core.logging import get_logger
from ...models.geo import Point
from ...models.routes import Route, Waypoint
from .editor import RouteEditor, added_waypoints, moved_waypoints, removed_waypoints
from .errors import EditRejectedError

logger = get_logger(__name__)


class EditSession:
    """
    Latest-wins edit session for one editable route.

    Usage:
        session = EditSession(RouteEditor(client.route_segment), route)
        updated = await session.move_waypoint(2, Point(37.80, -122.41))
        if updated is None:
            ...  # superseded by a newer edit
    """

    def __init__(self, editor: RouteEditor, route: Route) -> None:
        if not route.is_editable:
            raise EditRejectedError("start edit session", "route has no editable waypoints")
        self.editor = editor
        self._route = route
        self._display: tuple[Waypoint, ...] = route.waypoints or ()
        self._generation = 0
        self._task: Optional[asyncio.Task[Route]] = None

    @property
    def route(self) -> Route:
        """The last committed route."""
        return self._route

    @property
    def display_waypoints(self) -> tuple[Waypoint, ...]:
        """Waypoints to render, including any in-flight optimistic edit."""
        return self._display

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> None:
        """Abandon the in-flight edit, if any, and restore the display."""
        self._generation += 1
        if self.pending:
            assert self._task is not None
            self._task.cancel()
        self._display = self._route.waypoints or ()

    async def move_waypoint(self, index: int, point: Point) -> Optional[Route]:
        display = moved_waypoints(self._route, index, point)
        return await self._apply(
            "move waypoint",
            display,
            lambda route: self.editor.move_waypoint(route, index, point),
        )

    async def add_waypoint(self, after_segment: int, point: Point) -> Optional[Route]:
        display = added_waypoints(self._route, after_segment, point)
        # The committed pin keeps the id shown while the edit is pending
        waypoint_id = display[after_segment + 1].id
        return await self._apply(
            "add waypoint",
            display,
            lambda route: self.editor.add_waypoint(route, after_segment, point, waypoint_id),
        )

    async def remove_waypoint(self, index: int) -> Optional[Route]:
        display = removed_waypoints(self._route, index)
        return await self._apply(
            "remove waypoint",
            display,
            lambda route: self.editor.remove_waypoint(route, index),
        )

    async def _apply(
        self,
        operation: str,
        display: tuple[Waypoint, ...],
        edit: Callable[[Route], Awaitable[Route]],
    ) -> Optional[Route]:
        """
        Run one edit under a fresh generation token.

        Returns:
            The committed route, or None if a newer edit superseded this one

        Raises:
            RerouteError: The edit failed while still current
        """
        self.cancel()
        token = self._generation
        self._display = display

        task = asyncio.ensure_future(edit(self._route))
        self._task = task
        try:
            updated = await task
        except asyncio.CancelledError:
            if token != self._generation:
                logger.debug("Discarded superseded %s (generation %d)", operation, token)
                return None
            self._display = self._route.waypoints or ()
            raise
        except Exception:
            if token != self._generation:
                logger.debug("Discarded failure of superseded %s", operation)
                return None
            self._display = self._route.waypoints or ()
            raise

        if token != self._generation:
            logger.debug("Discarded stale result of %s (generation %d)", operation, token)
            return None

        self._route = updated
        self._display = updated.waypoints or ()
        self._task = None
        logger.debug("Committed %s (generation %d)", operation, token)
        return updated
