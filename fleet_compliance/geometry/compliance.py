"""Route compliance scoring of an actual GPS path against the planned route."""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from ..config import COMPLIANCE_TOLERANCE_M
from ..models import Coordinate
from ..utils import round_half_away
from .geo import distance_to_segment
from .models import FULL_COMPLIANCE, ComplianceResult, ComplianceSettings, PlannedRoute
from .planning import RouteBuilder, build_planned_route

DistanceArray = NDArray[np.float64]

LOGGER = logging.getLogger(__name__)


def compute_deviations(
    actual_path: Sequence[Coordinate],
    waypoints: PlannedRoute,
) -> DistanceArray:
    """Return each sample's distance (m) to the closest point on the polyline.

    Every consecutive waypoint pair is treated as a segment, so a sample lying
    between two waypoints is measured against the line, not the vertices.
    """

    if len(waypoints) < 2:
        raise ValueError("Planned route needs at least two waypoints")
    segments = list(zip(waypoints[:-1], waypoints[1:]))
    deviations = np.empty(len(actual_path), dtype=float)
    for idx, point in enumerate(actual_path):
        deviations[idx] = min(
            distance_to_segment(point, seg_start, seg_end)
            for seg_start, seg_end in segments
        )
    return deviations


def _whole_metres(value: float) -> int:
    rounded = round_half_away(value)
    # NaN/inf from malformed coordinates propagate instead of raising.
    return int(rounded) if math.isfinite(rounded) else rounded  # type: ignore[return-value]


def summarise_deviations(
    deviations: DistanceArray, tolerance_m: float
) -> ComplianceResult:
    """Reduce a deviation array to the compliance percentage and statistics."""

    count = len(deviations)
    if count == 0:
        return FULL_COMPLIANCE
    # Ties at exactly the tolerance count as compliant.
    compliant = int(np.count_nonzero(deviations <= tolerance_m))
    return ComplianceResult(
        compliance_percent=round_half_away(compliant / count * 100, 1),
        max_deviation_m=_whole_metres(float(np.max(deviations))),
        average_deviation_m=_whole_metres(math.fsum(deviations) / count),
    )


class RouteComplianceEvaluator:
    """Score GPS tracks against a planned route built from the job endpoints."""

    def __init__(
        self,
        settings: Optional[ComplianceSettings] = None,
        route_builder: RouteBuilder = build_planned_route,
    ) -> None:
        self.settings = settings or ComplianceSettings()
        self._route_builder = route_builder

    def evaluate(
        self,
        actual_path: Sequence[Coordinate],
        expected_start: Optional[Coordinate],
        expected_end: Optional[Coordinate],
    ) -> ComplianceResult:
        """Return the compliance result for ``actual_path``.

        An empty path or a missing endpoint yields the fully compliant default:
        no data is treated as no evidence of deviation.
        """

        if not actual_path or expected_start is None or expected_end is None:
            return FULL_COMPLIANCE
        waypoints = self._route_builder(
            expected_start, expected_end, self.settings.waypoint_intervals
        )
        deviations = compute_deviations(actual_path, waypoints)
        result = summarise_deviations(deviations, self.settings.tolerance_m)
        LOGGER.debug(
            "Evaluated %d samples against %d waypoints: %.1f%% compliant, max=%sm avg=%sm",
            len(actual_path),
            len(waypoints),
            result.compliance_percent,
            result.max_deviation_m,
            result.average_deviation_m,
        )
        return result


def evaluate_route_compliance(
    actual_path: Sequence[Coordinate],
    expected_start: Optional[Coordinate],
    expected_end: Optional[Coordinate],
    tolerance_m: float = COMPLIANCE_TOLERANCE_M,
) -> ComplianceResult:
    """Functional wrapper around :class:`RouteComplianceEvaluator`."""

    evaluator = RouteComplianceEvaluator(ComplianceSettings(tolerance_m=tolerance_m))
    return evaluator.evaluate(actual_path, expected_start, expected_end)
