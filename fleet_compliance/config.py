"""Central configuration for the fleet route compliance engine.

All values are constants imported by the rest of the package. Thresholds can
be overridden through environment variables (optionally via a local `.env`).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Geodesy
# ---------------------------------------------------------------------------
# Mean Earth radius (metres) used by the haversine formula.
EARTH_RADIUS_M = 6_371_000.0


# ---------------------------------------------------------------------------
# Route compliance
# ---------------------------------------------------------------------------
# A GPS sample within this many metres of the planned route is compliant.
COMPLIANCE_TOLERANCE_M = _env_float("COMPLIANCE_TOLERANCE_M", 500.0)

# Number of straight-line intervals used to approximate the planned route.
# The route therefore carries PLANNED_ROUTE_INTERVALS + 1 waypoints.
PLANNED_ROUTE_INTERVALS = _env_int("PLANNED_ROUTE_INTERVALS", 20)

# Result reported when there is no GPS evidence to judge (empty track or a
# job without both endpoints). Trips with GPS outages are not penalised.
DEFAULT_COMPLIANCE_PERCENT = 100.0

# Trips below this compliance percentage are flagged as deviating in reports.
ROUTE_DEVIATION_ALERT_PERCENT = _env_float("ROUTE_DEVIATION_ALERT_PERCENT", 90.0)

# Maximum number of planned routes memoised in-process.
PLANNED_ROUTE_CACHE_SIZE = _env_int("PLANNED_ROUTE_CACHE_SIZE", 256)


# ---------------------------------------------------------------------------
# Unscheduled stop detection
# ---------------------------------------------------------------------------
# Minimum stationary duration (minutes) reported as a stop.
STOP_THRESHOLD_MINUTES = _env_float("STOP_THRESHOLD_MINUTES", 10.0)

# Consecutive samples closer than this (metres) count as stationary.
STOP_DISTANCE_THRESHOLD_M = _env_float("STOP_DISTANCE_THRESHOLD_M", 100.0)

# Stops starting closer than this (metres) to the destination are arrival
# dwell, not anomalies. Deliberately wider than the clustering threshold.
DESTINATION_RADIUS_M = _env_float("DESTINATION_RADIUS_M", 200.0)


# ---------------------------------------------------------------------------
# Trip completion
# ---------------------------------------------------------------------------
# Estimated fuel burn per odometer kilometre when no fuel log is available.
FUEL_LITRES_PER_KM = _env_float("FUEL_LITRES_PER_KM", 0.08)


# ---------------------------------------------------------------------------
# Excel formatting
# ---------------------------------------------------------------------------
# Automatically size columns after writing each sheet (openpyxl only).
EXCEL_AUTOSIZE_COLUMNS = True
EXCEL_AUTOSIZE_MAX_WIDTH = 50  # characters
EXCEL_AUTOSIZE_MIN_WIDTH = 6  # characters
EXCEL_AUTOSIZE_PADDING = 2  # extra characters added to the detected max
EXCEL_AUTOSIZE_MAX_ROWS = 5000  # skip autosize for very large sheets

# Column order for the unscheduled stops sheet.
STOP_COLUMN_ORDER = [
    "Start Time",
    "Latitude",
    "Longitude",
    "Duration (min)",
    "Address",
]
