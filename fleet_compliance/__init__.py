"""Fleet route compliance and unscheduled stop detection package."""

from .errors import CoordinateRangeError, TrackFormatError
from .geometry import (
    ComplianceResult,
    ComplianceSettings,
    RouteComplianceEvaluator,
    UnscheduledStop,
    UnscheduledStopDetector,
    build_planned_route,
    detect_unscheduled_stops,
    evaluate_route_compliance,
)
from .models import Coordinate, GpsSample, Job, TripStatus
from .trips import TripCompletion, summarise_trip_completion

__all__ = [
    "Coordinate",
    "GpsSample",
    "Job",
    "TripStatus",
    "ComplianceResult",
    "ComplianceSettings",
    "RouteComplianceEvaluator",
    "UnscheduledStop",
    "UnscheduledStopDetector",
    "build_planned_route",
    "detect_unscheduled_stops",
    "evaluate_route_compliance",
    "TripCompletion",
    "summarise_trip_completion",
    "CoordinateRangeError",
    "TrackFormatError",
]
