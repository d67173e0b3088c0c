"""
Roam Test Suite - Shared Fixtures and Configuration

Singletons (settings, logging) are reset around every test so environment
overrides made with monkeypatch never leak between tests.
"""

import pytest

from roam.models.geo import Point

# San Francisco, Golden Gate Park
SF_START = Point(lat=37.7694, lng=-122.4862)


@pytest.fixture(autouse=True)
def reset_all_singletons(monkeypatch):
    """
    Reset module-level singletons before and after each test.

    Also removes ambient oracle/tunable environment variables so tests see
    the documented defaults.
    """

    def do_reset():
        from roam.core.config import reset_settings
        from roam.core.logging import reset_logging

        reset_settings()
        reset_logging()

    for var in ("GRAPHHOPPER_API_KEY", "ROAM_ORACLE_BASE_URL", "ROAM_MAX_RETRIES"):
        monkeypatch.delenv(var, raising=False)

    do_reset()
    yield
    do_reset()


@pytest.fixture
def start_point() -> Point:
    return SF_START


@pytest.fixture
def loop_request_data() -> dict:
    """Wire form of a 40 km loop from SF_START."""
    return {
        "start": {"lat": SF_START.lat, "lng": SF_START.lng},
        "target_distance_km": 40.0,
    }
