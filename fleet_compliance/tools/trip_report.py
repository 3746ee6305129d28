"""Score a recorded GPS track offline and report compliance and stops."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .. import config
from ..errors import CoordinateRangeError, TrackFormatError
from ..geometry import (
    ComplianceSettings,
    UnscheduledStopDetector,
    build_planned_route,
)
from ..models import Job
from ..reporting import route_overlay_payload, write_trip_report
from ..track import coordinates_from_samples, load_track, parse_coordinate
from ..trips import TripCompletion, has_route_deviation, summarise_trip_completion
from ..utils import json_dumps_sorted


def _build_parser() -> argparse.ArgumentParser:
    """Return the CLI argument parser for the trip report tool."""

    parser = argparse.ArgumentParser(
        description=(
            "Evaluate a GPS track against the straight-line route between a"
            " job's pickup and delivery, and list unscheduled stops."
        )
    )
    parser.add_argument("--track", type=Path, required=True, help="CSV or JSON track")
    parser.add_argument("--pickup", help="Pickup coordinate as 'lat,lng'")
    parser.add_argument("--delivery", help="Delivery coordinate as 'lat,lng'")
    parser.add_argument("--trip-id", default="trip")
    parser.add_argument(
        "--tolerance-m",
        type=float,
        default=config.COMPLIANCE_TOLERANCE_M,
        help=f"Compliance tolerance in metres (default: {config.COMPLIANCE_TOLERANCE_M:g})",
    )
    parser.add_argument(
        "--stop-minutes",
        type=float,
        default=config.STOP_THRESHOLD_MINUTES,
        help="Minimum stationary minutes reported as a stop",
    )
    parser.add_argument(
        "--stop-distance-m",
        type=float,
        default=config.STOP_DISTANCE_THRESHOLD_M,
        help="Maximum metres between samples considered stationary",
    )
    parser.add_argument("--start-odometer", type=float, default=0.0)
    parser.add_argument("--end-odometer", type=float, default=0.0)
    parser.add_argument("--output", type=Path, help="Optional Excel report path")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the route overlay payload as JSON",
    )
    return parser


def _log_summary(trip_id: str, completion: TripCompletion, stop_count: int) -> None:
    compliance = completion.compliance
    logging.info(
        "Trip %s: compliance %.1f%% (max %sm, avg %sm), %d unscheduled stop(s)",
        trip_id,
        compliance.compliance_percent,
        compliance.max_deviation_m,
        compliance.average_deviation_m,
        stop_count,
    )
    if has_route_deviation(compliance):
        logging.warning("Trip %s deviated from the planned route", trip_id)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``python -m fleet_compliance.tools.trip_report``."""

    parser = _build_parser()
    args = parser.parse_args(argv)

    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )

    try:
        settings = ComplianceSettings(
            tolerance_m=args.tolerance_m,
            stop_threshold_minutes=args.stop_minutes,
            stop_distance_threshold_m=args.stop_distance_m,
            waypoint_intervals=config.PLANNED_ROUTE_INTERVALS,
            destination_radius_m=config.DESTINATION_RADIUS_M,
        )
        pickup = parse_coordinate(args.pickup) if args.pickup else None
        delivery = parse_coordinate(args.delivery) if args.delivery else None
        track = load_track(args.track)
    except (TrackFormatError, CoordinateRangeError, FileNotFoundError) as exc:
        logging.error("Failed to load trip data: %s", exc)
        return 1
    except ValueError as exc:
        logging.error("%s", exc)
        return 1

    job = Job(pickup=pickup, delivery=delivery)
    if not job.has_planned_route:
        logging.info("No planned route; compliance defaults to fully compliant")
    completion = summarise_trip_completion(
        job,
        track,
        end_odometer=args.end_odometer,
        start_odometer=args.start_odometer,
        settings=settings,
    )
    stops = UnscheduledStopDetector(settings).detect(track, delivery)
    _log_summary(args.trip_id, completion, len(stops))

    if args.output:
        write_trip_report(args.output, args.trip_id, completion, stops)
    if args.json:
        planned = build_planned_route(pickup, delivery, settings.waypoint_intervals)
        payload = route_overlay_payload(
            planned, coordinates_from_samples(track), stops
        )
        payload["compliance"] = {
            "compliance_percent": completion.compliance.compliance_percent,
            "max_deviation_m": completion.compliance.max_deviation_m,
            "average_deviation_m": completion.compliance.average_deviation_m,
        }
        print(json_dumps_sorted(payload))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
