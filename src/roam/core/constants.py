"""
Roam Constants

Shared constants for the routing oracle, unit conversions and the
default tunables of the loop generation engine.
"""

# =============================================================================
# Routing Oracle Configuration
# =============================================================================

GRAPHHOPPER_BASE_URL = "https://graphhopper.com/api/1"
GRAPHHOPPER_ROUTE_PATH = "/route"
DEFAULT_PROFILE = "bike"
DEFAULT_ORACLE_TIMEOUT = 30.0  # seconds

# Substrings in an oracle error body that identify an unroutable point
POINT_NOT_FOUND_MARKERS = (
    "PointNotFoundException",
    "Cannot find point",
)

# =============================================================================
# Geodesy
# =============================================================================

EARTH_RADIUS_KM = 6371.0

# =============================================================================
# Unit Conversions
# =============================================================================

KM_TO_MI = 0.621371
M_TO_FT = 3.28084

# =============================================================================
# Loop Generation Defaults
#
# Empirically chosen; every value can be overridden through RoamSettings
# or a ConvergencePolicy.
# =============================================================================

STRETCH_FACTOR = 1.3  # road distance / straight-line distance
DISTANCE_TOLERANCE = 0.2  # accepted |actual/target - 1|
MAX_RETRIES = 3  # shape/distance retries (attempts = MAX_RETRIES + 1)
MAX_UNROUTABLE_RETRIES = 7  # interior point-not-found budget
MAX_WAYPOINTS = 3  # start + 3 waypoints + start = oracle point ceiling

STAR_TRIM_FRACTION = 0.10  # geometry trimmed at each end before star test
STAR_THRESHOLD_FRACTION = 0.25  # of radius; closer than this is a spoke
STAR_MIN_POINTS = 5  # shorter geometries are never classified as stars

STAR_ROTATION_DEG = 30.0  # bearing shift after a star-shaped attempt
UNROUTABLE_ROTATION_DEG = 45.0  # bearing shift after an unroutable waypoint
UNROUTABLE_RADIUS_SHRINK = 0.95  # radius factor after an unroutable waypoint
