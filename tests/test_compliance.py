"""Tests for route compliance scoring."""

from __future__ import annotations

import math
from typing import List

import numpy as np
import pytest

from fleet_compliance.geometry import (
    FULL_COMPLIANCE,
    ComplianceSettings,
    RouteComplianceEvaluator,
    build_planned_route,
    compute_deviations,
    evaluate_route_compliance,
)
from fleet_compliance.geometry.geo import haversine_distance
from fleet_compliance.models import Coordinate

EQUATOR_START = Coordinate(0.0, 0.0)
EQUATOR_END = Coordinate(0.0, 0.1)


def test_following_planned_route_is_fully_compliant(
    pickup: Coordinate, delivery: Coordinate
) -> None:
    path = list(build_planned_route(pickup, delivery, 20))
    result = evaluate_route_compliance(path, pickup, delivery)
    assert result.compliance_percent == 100.0
    assert result.max_deviation_m == 0
    assert result.average_deviation_m == 0


def test_empty_path_defaults_to_full_compliance(
    pickup: Coordinate, delivery: Coordinate
) -> None:
    result = evaluate_route_compliance([], pickup, delivery)
    assert result == FULL_COMPLIANCE
    assert result.compliance_percent == 100
    assert result.max_deviation_m == 0
    assert result.average_deviation_m == 0


def test_missing_endpoint_defaults_to_full_compliance(pickup: Coordinate) -> None:
    far_away = [Coordinate(10.0, 10.0)]
    assert evaluate_route_compliance(far_away, pickup, None) == FULL_COMPLIANCE
    assert evaluate_route_compliance(far_away, None, pickup) == FULL_COMPLIANCE


def test_tolerance_boundary_is_inclusive() -> None:
    route = build_planned_route(EQUATOR_START, EQUATOR_END, 20)
    point = Coordinate(0.002, 0.0525)
    deviation = float(compute_deviations([point], route)[0])
    assert deviation > 0

    at_boundary = evaluate_route_compliance([point], EQUATOR_START, EQUATOR_END, deviation)
    assert at_boundary.compliance_percent == 100.0

    just_inside = evaluate_route_compliance(
        [point], EQUATOR_START, EQUATOR_END, deviation - 1.0
    )
    assert just_inside.compliance_percent == 0.0


def test_deviation_measured_against_polyline_not_vertices() -> None:
    # Midway between two waypoints: the nearest vertex is ~300 m away, the
    # line itself only ~111 m.
    route = build_planned_route(EQUATOR_START, EQUATOR_END, 20)
    point = Coordinate(0.001, 0.0025)
    deviation = float(compute_deviations([point], route)[0])
    assert deviation == pytest.approx(
        haversine_distance(point, Coordinate(0.0, 0.0025)), rel=1e-6
    )


def test_partial_compliance_statistics() -> None:
    path = [
        Coordinate(0.0, 0.01),
        Coordinate(0.0, 0.02),
        Coordinate(0.0, 0.03),
        Coordinate(0.1, 0.05),  # ~11.1 km north of the route
    ]
    result = evaluate_route_compliance(path, EQUATOR_START, EQUATOR_END)
    far = haversine_distance(Coordinate(0.1, 0.05), Coordinate(0.0, 0.05))
    assert result.compliance_percent == 75.0
    assert result.max_deviation_m == pytest.approx(far, abs=1)
    assert result.average_deviation_m == pytest.approx(far / 4, abs=1)
    assert isinstance(result.max_deviation_m, int)
    assert isinstance(result.average_deviation_m, int)


def test_compliance_percent_rounds_to_one_decimal() -> None:
    path = [Coordinate(0.0, 0.01), Coordinate(0.0, 0.02), Coordinate(0.5, 0.05)]
    result = evaluate_route_compliance(path, EQUATOR_START, EQUATOR_END)
    assert result.compliance_percent == 66.7


def test_compliance_percent_rounds_halves_up() -> None:
    # 1 of 16 compliant is exactly 6.25%, which banker's rounding would report as 6.2.
    path = [Coordinate(0.0, 0.05)] + [Coordinate(1.0, 0.05)] * 15
    result = evaluate_route_compliance(path, EQUATOR_START, EQUATOR_END)
    assert result.compliance_percent == 6.3


def test_evaluation_is_idempotent(pickup: Coordinate, delivery: Coordinate) -> None:
    path = [
        Coordinate(51.501, -0.11),
        Coordinate(51.51, -0.09),
        Coordinate(51.49, -0.05),
        Coordinate(51.5003, -0.021),
    ]
    first = evaluate_route_compliance(path, pickup, delivery)
    second = evaluate_route_compliance(list(path), pickup, delivery)
    assert first == second


def test_evaluator_uses_settings_and_route_builder() -> None:
    calls: List[tuple] = []

    def offset_builder(start: Coordinate, end: Coordinate, intervals: int):
        calls.append((start, end, intervals))
        return (Coordinate(1.0, 0.0), Coordinate(1.0, 0.1))

    settings = ComplianceSettings(tolerance_m=1000.0, waypoint_intervals=7)
    evaluator = RouteComplianceEvaluator(settings, route_builder=offset_builder)
    result = evaluator.evaluate([Coordinate(0.0, 0.05)], EQUATOR_START, EQUATOR_END)

    assert calls == [(EQUATOR_START, EQUATOR_END, 7)]
    assert result.compliance_percent == 0.0
    assert result.max_deviation_m == pytest.approx(111_195, abs=1)


def test_compute_deviations_returns_array_per_sample() -> None:
    route = build_planned_route(EQUATOR_START, EQUATOR_END, 20)
    path = [Coordinate(0.0, 0.01), Coordinate(0.01, 0.05), Coordinate(0.0, 0.2)]
    deviations = compute_deviations(path, route)
    assert isinstance(deviations, np.ndarray)
    assert deviations.shape == (3,)
    assert deviations[0] == pytest.approx(0.0, abs=1e-6)
    assert deviations[2] == pytest.approx(
        haversine_distance(Coordinate(0.0, 0.2), EQUATOR_END)
    )


def test_compute_deviations_requires_a_segment() -> None:
    with pytest.raises(ValueError):
        compute_deviations([EQUATOR_START], (EQUATOR_START,))


def test_nan_sample_propagates_through_evaluation() -> None:
    result = evaluate_route_compliance(
        [Coordinate(float("nan"), 0.0)], EQUATOR_START, EQUATOR_END
    )
    assert result.compliance_percent == 0.0
    assert math.isnan(result.max_deviation_m)
    assert math.isnan(result.average_deviation_m)
