"""Dataclasses describing compliance settings and engine results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..config import (
    COMPLIANCE_TOLERANCE_M,
    DEFAULT_COMPLIANCE_PERCENT,
    DESTINATION_RADIUS_M,
    PLANNED_ROUTE_INTERVALS,
    STOP_DISTANCE_THRESHOLD_M,
    STOP_THRESHOLD_MINUTES,
)
from ..models import Coordinate


PlannedRoute = Tuple[Coordinate, ...]


@dataclass(frozen=True, slots=True)
class ComplianceSettings:
    """Thresholds shared by the route evaluator and the stop detector."""

    tolerance_m: float = COMPLIANCE_TOLERANCE_M
    stop_threshold_minutes: float = STOP_THRESHOLD_MINUTES
    stop_distance_threshold_m: float = STOP_DISTANCE_THRESHOLD_M
    waypoint_intervals: int = PLANNED_ROUTE_INTERVALS
    destination_radius_m: float = DESTINATION_RADIUS_M

    def __post_init__(self) -> None:
        if self.waypoint_intervals < 1:
            raise ValueError("waypoint_intervals must be at least 1")
        for name in (
            "tolerance_m",
            "stop_threshold_minutes",
            "stop_distance_threshold_m",
            "destination_radius_m",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")


@dataclass(frozen=True, slots=True)
class ComplianceResult:
    """How closely a GPS track followed the planned route."""

    compliance_percent: float
    max_deviation_m: int
    average_deviation_m: int


# Returned when there is no evidence of deviation to assess.
FULL_COMPLIANCE = ComplianceResult(
    compliance_percent=DEFAULT_COMPLIANCE_PERCENT,
    max_deviation_m=0,
    average_deviation_m=0,
)


@dataclass(frozen=True, slots=True)
class UnscheduledStop:
    """A sustained stationary period away from the trip destination."""

    latitude: float
    longitude: float
    start_time: datetime
    duration_minutes: float
    address: Optional[str] = None
