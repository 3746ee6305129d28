"""Values the trip coordinator writes to a trip record when it completes.

The trip state machine and persistence live with the coordinator. This module
only computes the completion figures: odometer distance, estimated fuel,
efficiency, and route compliance of the accumulated GPS track.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, Sequence

from .config import FUEL_LITRES_PER_KM, ROUTE_DEVIATION_ALERT_PERCENT
from .geometry import (
    ComplianceResult,
    ComplianceSettings,
    RouteComplianceEvaluator,
    path_length,
)
from .models import GpsSample, Job, TripStatus
from .track import coordinates_from_samples
from .utils import round_half_away

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TripCompletion:
    """Completion figures for a single trip."""

    distance_travelled: float
    fuel_used: float
    fuel_efficiency: float
    compliance: ComplianceResult
    gps_distance_m: int
    status: TripStatus = TripStatus.COMPLETED

    @property
    def route_compliance_percent(self) -> float:
        return self.compliance.compliance_percent


def estimate_fuel(distance_km: float) -> tuple[float, float]:
    """Return ``(fuel_used_litres, efficiency_km_per_litre)`` for a distance."""

    fuel_used = distance_km * FUEL_LITRES_PER_KM
    efficiency = distance_km / fuel_used if fuel_used > 0 else 0.0
    return fuel_used, efficiency


def summarise_trip_completion(
    job: Job,
    track: Sequence[GpsSample],
    end_odometer: float,
    start_odometer: Optional[float] = None,
    settings: Optional[ComplianceSettings] = None,
) -> TripCompletion:
    """Compute the figures stored on a trip when the driver ends it.

    Compliance falls back to the fully compliant default when the job lacks
    either endpoint or no GPS samples were recorded.
    """

    distance = end_odometer - (start_odometer or 0.0)
    fuel_used, efficiency = estimate_fuel(distance)
    path = coordinates_from_samples(track)
    evaluator = RouteComplianceEvaluator(settings)
    compliance = evaluator.evaluate(path, job.pickup, job.delivery)
    gps_distance = int(round_half_away(path_length(path)))
    LOGGER.info(
        "Trip completed: distance=%.1f km fuel=%.2f L compliance=%.1f%% (%d samples)",
        distance,
        fuel_used,
        compliance.compliance_percent,
        len(path),
    )
    return TripCompletion(
        distance_travelled=distance,
        fuel_used=fuel_used,
        fuel_efficiency=efficiency,
        compliance=compliance,
        gps_distance_m=gps_distance,
    )


def has_route_deviation(
    result: ComplianceResult, threshold_percent: float = ROUTE_DEVIATION_ALERT_PERCENT
) -> bool:
    return result.compliance_percent < threshold_percent
