"""Trip geometry engine: route compliance scoring and unscheduled stops.

Every function in this package is pure and synchronous, so evaluations for
different trips can run concurrently without coordination.
"""

from .models import (
    FULL_COMPLIANCE,
    ComplianceResult,
    ComplianceSettings,
    PlannedRoute,
    UnscheduledStop,
)
from .geo import distance_to_segment, haversine_distance, interpolate, path_length
from .planning import RouteBuilder, build_planned_route, clear_planned_route_cache
from .compliance import (
    RouteComplianceEvaluator,
    compute_deviations,
    evaluate_route_compliance,
)
from .stops import (
    MotionState,
    UnscheduledStopDetector,
    detect_unscheduled_stops,
    iter_unscheduled_stops,
)

__all__ = [
    "FULL_COMPLIANCE",
    "ComplianceResult",
    "ComplianceSettings",
    "PlannedRoute",
    "UnscheduledStop",
    "distance_to_segment",
    "haversine_distance",
    "interpolate",
    "path_length",
    "RouteBuilder",
    "build_planned_route",
    "clear_planned_route_cache",
    "RouteComplianceEvaluator",
    "compute_deviations",
    "evaluate_route_compliance",
    "MotionState",
    "UnscheduledStopDetector",
    "detect_unscheduled_stops",
    "iter_unscheduled_stops",
]
