"""Tests for trip completion figures."""

from __future__ import annotations

from typing import List

import pytest

from fleet_compliance.geometry import FULL_COMPLIANCE, ComplianceResult, ComplianceSettings
from fleet_compliance.geometry.geo import haversine_distance
from fleet_compliance.models import Coordinate, GpsSample, Job, TripStatus
from fleet_compliance.trips import (
    estimate_fuel,
    has_route_deviation,
    summarise_trip_completion,
)

from conftest import make_track


def test_completion_on_planned_route(job: Job, on_route_track: List[GpsSample]) -> None:
    completion = summarise_trip_completion(
        job, on_route_track, end_odometer=1220.0, start_odometer=1200.0
    )
    assert completion.status is TripStatus.COMPLETED
    assert completion.distance_travelled == pytest.approx(20.0)
    assert completion.fuel_used == pytest.approx(1.6)
    assert completion.fuel_efficiency == pytest.approx(12.5)
    assert completion.route_compliance_percent == 100.0
    assert completion.compliance.max_deviation_m == 0
    expected_gps = haversine_distance(job.pickup, job.delivery)
    assert completion.gps_distance_m == pytest.approx(expected_gps, abs=1)


def test_missing_job_endpoint_defaults_to_full_compliance(
    pickup: Coordinate,
) -> None:
    far_track = make_track([(10.0, 10.0, 0), (10.1, 10.0, 5)])
    completion = summarise_trip_completion(Job(pickup=pickup), far_track, end_odometer=50.0)
    assert completion.compliance == FULL_COMPLIANCE
    assert completion.distance_travelled == 50.0


def test_empty_track_defaults_to_full_compliance(job: Job) -> None:
    completion = summarise_trip_completion(job, [], end_odometer=10.0, start_odometer=None)
    assert completion.compliance == FULL_COMPLIANCE
    assert completion.gps_distance_m == 0


def test_settings_tolerance_flows_through(job: Job) -> None:
    # ~1.1 km north of the route midpoint.
    track = make_track([(job.pickup.lat + 0.01, -0.07, 0)])
    strict = summarise_trip_completion(job, track, end_odometer=5.0)
    lenient = summarise_trip_completion(
        job, track, end_odometer=5.0, settings=ComplianceSettings(tolerance_m=2000.0)
    )
    assert strict.route_compliance_percent == 0.0
    assert lenient.route_compliance_percent == 100.0


def test_zero_distance_has_zero_efficiency() -> None:
    assert estimate_fuel(0.0) == (0.0, 0.0)


@pytest.mark.parametrize(
    "percent, flagged",
    [(89.9, True), (90.0, False), (100.0, False), (0.0, True)],
)
def test_has_route_deviation(percent: float, flagged: bool) -> None:
    result = ComplianceResult(percent, 0, 0)
    assert has_route_deviation(result) is flagged


def test_deviation_threshold_override() -> None:
    assert has_route_deviation(ComplianceResult(95.0, 0, 0), threshold_percent=99.0)
