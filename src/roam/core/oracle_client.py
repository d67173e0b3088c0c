"""
Roam Routing Oracle Client

Async HTTP client for a GraphHopper-compatible routing service using httpx.

Two call shapes:
- route(points): one call over an ordered point list (whole loop)
- route_segment(a, b): one leg between two points

No retry happens here. A transient failure surfaces as OracleError and
the caller decides; an unroutable point surfaces as PointNotFoundError
carrying the offending point's index.
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from typing import Any, Optional

import httpx

from ..models.geo import Point
from ..models.routes import RoutedPath
from . import constants
from .config import get_settings
from .logging import get_logger

logger = get_logger(__name__)

_POINT_INDEX_RE = re.compile(r"Cannot find point (\d+)")


# =============================================================================
# Exceptions
# =============================================================================


class OracleError(Exception):
    """Exception raised for routing oracle failures."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.response = response or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to JSON-serializable dict."""
        result: dict[str, Any] = {"error": "oracle_error", "message": self.message}
        if self.status_code:
            result["status_code"] = self.status_code
        return result


class PointNotFoundError(OracleError):
    """
    The oracle could not snap one of the request points to a road.

    ``point_index`` is the position of that point in the request's point list.
    """

    def __init__(
        self,
        message: str,
        point_index: int,
        status_code: Optional[int] = None,
        response: Optional[dict[str, Any]] = None,
    ) -> None:
        self.point_index = point_index
        super().__init__(message, status_code=status_code, response=response)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["error"] = "point_not_found"
        result["point_index"] = self.point_index
        return result

    def reindexed(self, offset: int) -> PointNotFoundError:
        """Same failure, index shifted into an enclosing point list."""
        return PointNotFoundError(
            self.message,
            point_index=self.point_index + offset,
            status_code=self.status_code,
            response=self.response,
        )


# =============================================================================
# Response Parsing
# =============================================================================


def parse_route_response(data: Any) -> RoutedPath:
    """
    Convert an oracle response body into a RoutedPath.

    The oracle returns ``[lng, lat, ele]`` vertices and meters; Roam works
    in ``(lat, lng, ele)`` and kilometers.

    Raises:
        OracleError: If the body carries no usable path
    """
    from ..services.loop_planning.waypoints import calculate_elevation_gain

    try:
        path = data["paths"][0]
        raw_coords = path["points"]["coordinates"]
        distance_m = float(path["distance"])
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise OracleError(f"Malformed routing response: {e!r}") from e

    geometry = tuple(
        (float(c[1]), float(c[0]), float(c[2]) if len(c) > 2 else 0.0) for c in raw_coords
    )

    ascend = path.get("ascend")
    elevation_gain = float(ascend) if ascend is not None else calculate_elevation_gain(geometry)

    return RoutedPath(
        geometry=geometry,
        distance_km=distance_m / 1000.0,
        elevation_gain_m=elevation_gain,
    )


def _error_message(response: httpx.Response) -> tuple[str, dict[str, Any]]:
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        return response.text or f"HTTP {response.status_code}", {}
    if not isinstance(body, dict):
        return str(body), {}
    return str(body.get("message") or response.text), body


def _mentions_point_not_found(text: str) -> bool:
    return any(marker in text for marker in constants.POINT_NOT_FOUND_MARKERS)


def _find_point_index(message: str, body: dict[str, Any]) -> Optional[int]:
    """Locate the unroutable point's index in an oracle error body, if any."""
    texts = [message]
    for hint in body.get("hints") or []:
        if not isinstance(hint, dict):
            continue
        hint_text = f"{hint.get('details', '')} {hint.get('message', '')}"
        if isinstance(hint.get("point_index"), int) and _mentions_point_not_found(hint_text):
            return hint["point_index"]
        texts.append(str(hint.get("message", "")))

    for text in texts:
        if _mentions_point_not_found(text):
            match = _POINT_INDEX_RE.search(text)
            if match:
                return int(match.group(1))
    return None


def classify_oracle_error(response: httpx.Response) -> OracleError:
    """
    Classify a non-2xx oracle response.

    Returns:
        PointNotFoundError if the body identifies an unroutable point,
        OracleError otherwise
    """
    message, body = _error_message(response)
    point_index = _find_point_index(message, body)
    if point_index is not None:
        return PointNotFoundError(
            message,
            point_index=point_index,
            status_code=response.status_code,
            response=body,
        )
    return OracleError(
        f"Routing error {response.status_code}: {message}",
        status_code=response.status_code,
        response=body,
    )


# =============================================================================
# Async Client
# =============================================================================


class AsyncRoutingClient:
    """
    Async client for the routing oracle.

    Must be used as an async context manager to ensure proper connection
    pooling.

    Usage:
        async with AsyncRoutingClient(api_key="...") as client:
            path = await client.route([start, wp1, wp2, start])
            leg = await client.route_segment(a, b)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        profile: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize the routing client. Unset arguments come from RoamSettings.

        Args:
            api_key: Oracle API key (sent as the ``key`` query parameter)
            base_url: Oracle base URL
            profile: Routing profile (e.g. "bike")
            timeout: Request timeout in seconds (default: 30)
        """
        settings = get_settings()
        self.api_key: Optional[str] = (
            api_key if api_key is not None else settings.graphhopper_api_key
        )
        self.base_url: str = base_url or settings.oracle_base_url
        self.profile: str = profile or settings.oracle_profile
        self.timeout: float = timeout if timeout is not None else settings.oracle_timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> AsyncRoutingClient:
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            headers={"Accept": "application/json", "Content-Type": "application/json"},
        )
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def build_body(self, points: Sequence[Point]) -> dict[str, Any]:
        """Request body for an ordered point list."""
        return {
            "points": [[p.lng, p.lat] for p in points],
            "profile": self.profile,
            "points_encoded": False,
            "elevation": True,
            "instructions": False,
            "calc_points": True,
        }

    async def route(self, points: Sequence[Point]) -> RoutedPath:
        """
        Route through an ordered list of points in one call.

        Args:
            points: Two or more points, visited in order

        Returns:
            Parsed best path

        Raises:
            PointNotFoundError: If a point cannot be snapped to a road
            OracleError: On HTTP, network or parsing failures
        """
        if len(points) < 2:
            raise OracleError("At least two points are required for routing")
        if not self._client:
            raise OracleError("Client not initialized. Use 'async with' context manager.")

        params = {"key": self.api_key} if self.api_key else None
        logger.debug("Routing %d points (profile=%s)", len(points), self.profile)

        try:
            response = await self._client.post(
                constants.GRAPHHOPPER_ROUTE_PATH,
                params=params,
                json=self.build_body(points),
            )
        except httpx.TimeoutException as e:
            raise OracleError(f"Routing request timed out after {self.timeout}s: {e}") from e
        except httpx.RequestError as e:
            raise OracleError(f"Network error: {e}") from e

        if response.is_error:
            error = classify_oracle_error(response)
            logger.debug("Oracle rejected request: %s", error.message)
            raise error

        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise OracleError(
                "Routing response was not valid JSON", status_code=response.status_code
            ) from e

        return parse_route_response(data)

    async def route_segment(self, from_point: Point, to_point: Point) -> RoutedPath:
        """Route a single leg between two points."""
        return await self.route([from_point, to_point])
