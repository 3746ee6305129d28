"""Benchmark route compliance and stop detection with large GPS tracks."""

from __future__ import annotations

import argparse
import statistics
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from fleet_compliance.geometry import (  # noqa: E402
    ComplianceSettings,
    RouteComplianceEvaluator,
    UnscheduledStopDetector,
    clear_planned_route_cache,
)
from fleet_compliance.models import Coordinate, GpsSample  # noqa: E402

PICKUP = Coordinate(51.50, -0.30)
DELIVERY = Coordinate(51.60, 0.10)


@dataclass(slots=True)
class StageDurations:
    """Timing measurements (in seconds) for one evaluation."""

    compliance: float
    stops: float

    @property
    def total(self) -> float:
        return self.compliance + self.stops


@dataclass(slots=True)
class BenchmarkSummary:
    """Aggregated statistics for multiple benchmark iterations."""

    point_count: int
    waypoint_intervals: int
    iterations: int
    mean_compliance_ms: float
    mean_stops_ms: float
    mean_total_ms: float
    worst_total_ms: float


def _build_track(point_count: int) -> List[GpsSample]:
    """Generate a zig-zagging track along the route sampled every 5 seconds."""

    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    samples = []
    for idx in range(point_count):
        t = idx / max(point_count - 1, 1)
        wobble = 0.002 if idx % 50 < 25 else -0.002
        samples.append(
            GpsSample(
                lat=PICKUP.lat + t * (DELIVERY.lat - PICKUP.lat) + wobble,
                lng=PICKUP.lng + t * (DELIVERY.lng - PICKUP.lng),
                timestamp=start + timedelta(seconds=5 * idx),
            )
        )
    return samples


def _run_iteration(
    track: List[GpsSample], settings: ComplianceSettings
) -> StageDurations:
    path = [sample.coordinate for sample in track]
    clear_planned_route_cache()

    start = time.perf_counter()
    RouteComplianceEvaluator(settings).evaluate(path, PICKUP, DELIVERY)
    compliance = time.perf_counter() - start

    start = time.perf_counter()
    UnscheduledStopDetector(settings).detect(track, DELIVERY)
    stops = time.perf_counter() - start

    return StageDurations(compliance=compliance, stops=stops)


def run_benchmark(
    point_count: int,
    iterations: int,
    waypoint_intervals: int,
) -> BenchmarkSummary:
    """Benchmark the engine and return aggregated timings."""

    if point_count < 2:
        raise ValueError("point_count must be at least 2")
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    settings = ComplianceSettings(waypoint_intervals=waypoint_intervals)
    track = _build_track(point_count)
    durations = [_run_iteration(track, settings) for _ in range(iterations)]

    return BenchmarkSummary(
        point_count=point_count,
        waypoint_intervals=waypoint_intervals,
        iterations=iterations,
        mean_compliance_ms=statistics.fmean(d.compliance for d in durations) * 1000.0,
        mean_stops_ms=statistics.fmean(d.stops for d in durations) * 1000.0,
        mean_total_ms=statistics.fmean(d.total for d in durations) * 1000.0,
        worst_total_ms=max(d.total for d in durations) * 1000.0,
    )


def _format_summary(summary: BenchmarkSummary) -> Dict[str, float]:
    return {
        "point_count": summary.point_count,
        "waypoint_intervals": summary.waypoint_intervals,
        "iterations": summary.iterations,
        "mean_compliance_ms": summary.mean_compliance_ms,
        "mean_stops_ms": summary.mean_stops_ms,
        "mean_total_ms": summary.mean_total_ms,
        "worst_total_ms": summary.worst_total_ms,
    }


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark route compliance on long, densely sampled tracks",
    )
    parser.add_argument("--points", type=int, default=20000)
    parser.add_argument("--intervals", type=int, default=20)
    parser.add_argument("--iterations", type=int, default=3)
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    summary = run_benchmark(args.points, args.iterations, args.intervals)
    for key, value in _format_summary(summary).items():
        if key in {"point_count", "waypoint_intervals", "iterations"}:
            print(f"{key}: {value}")
        else:
            print(f"{key}: {value:.3f}")


if __name__ == "__main__":
    main()
