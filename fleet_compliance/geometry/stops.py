"""Unscheduled stop detection over a chronologically ordered GPS track.

The detector is a two-state machine (moving / stopped) driven by consecutive
sample pairs. A pair closer than the distance threshold opens or extends a
stationary run; the first pair that moves apart closes it. Closed runs lasting
at least the stop threshold are reported unless they start near the trip
destination, where a long dwell is the expected arrival.

The track must be sorted ascending by timestamp. The detector consumes it in
the order given and never reorders or mutates it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

from ..config import (
    DESTINATION_RADIUS_M,
    STOP_DISTANCE_THRESHOLD_M,
    STOP_THRESHOLD_MINUTES,
)
from ..models import Coordinate, GpsSample
from .geo import haversine_distance
from .models import ComplianceSettings, UnscheduledStop


class MotionState(Enum):
    MOVING = "moving"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class StationaryRun:
    """Consecutive samples that stayed within the distance threshold."""

    first: GpsSample
    last: GpsSample
    sample_count: int

    @property
    def duration_minutes(self) -> float:
        return (self.last.timestamp - self.first.timestamp).total_seconds() / 60.0

    def extend(self, sample: GpsSample) -> "StationaryRun":
        return StationaryRun(self.first, sample, self.sample_count + 1)


@dataclass(frozen=True, slots=True)
class DetectorState:
    motion: MotionState = MotionState.MOVING
    run: Optional[StationaryRun] = None


MOVING = DetectorState()


def advance(
    state: DetectorState,
    prev: GpsSample,
    curr: GpsSample,
    distance_threshold_m: float,
) -> Tuple[DetectorState, Optional[StationaryRun]]:
    """Apply one sample pair; return the next state and any run it closed."""

    stationary = (
        haversine_distance(prev.coordinate, curr.coordinate) < distance_threshold_m
    )
    if stationary:
        if state.run is None:
            run = StationaryRun(first=prev, last=curr, sample_count=2)
        else:
            run = state.run.extend(curr)
        return DetectorState(MotionState.STOPPED, run), None
    if state.motion is MotionState.STOPPED:
        return MOVING, state.run
    return state, None


def is_near_destination(
    location: Coordinate,
    destination: Optional[Coordinate],
    radius_m: float = DESTINATION_RADIUS_M,
) -> bool:
    if destination is None:
        return False
    return haversine_distance(location, destination) < radius_m


def run_to_stop(
    run: StationaryRun,
    destination: Optional[Coordinate],
    stop_threshold_minutes: float,
    destination_radius_m: float = DESTINATION_RADIUS_M,
) -> Optional[UnscheduledStop]:
    """Return the stop a closed run represents, or ``None`` if it is not one."""

    # A single isolated sample cannot establish a stationary period.
    if run.sample_count < 2:
        return None
    duration = run.duration_minutes
    if duration < stop_threshold_minutes:
        return None
    if is_near_destination(run.first.coordinate, destination, destination_radius_m):
        return None
    return UnscheduledStop(
        latitude=run.first.lat,
        longitude=run.first.lng,
        start_time=run.first.timestamp,
        duration_minutes=duration,
    )


def iter_unscheduled_stops(
    track: Sequence[GpsSample],
    destination: Optional[Coordinate] = None,
    stop_threshold_minutes: float = STOP_THRESHOLD_MINUTES,
    distance_threshold_m: float = STOP_DISTANCE_THRESHOLD_M,
    destination_radius_m: float = DESTINATION_RADIUS_M,
) -> Iterator[UnscheduledStop]:
    """Lazily yield unscheduled stops in track order."""

    if len(track) < 2:
        return
    state = MOVING
    for prev, curr in zip(track[:-1], track[1:]):
        state, closed = advance(state, prev, curr, distance_threshold_m)
        if closed is not None:
            stop = run_to_stop(
                closed, destination, stop_threshold_minutes, destination_radius_m
            )
            if stop is not None:
                yield stop
    # The track may end while the vehicle is still stationary.
    if state.run is not None:
        stop = run_to_stop(
            state.run, destination, stop_threshold_minutes, destination_radius_m
        )
        if stop is not None:
            yield stop


def detect_unscheduled_stops(
    track: Sequence[GpsSample],
    destination: Optional[Coordinate] = None,
    stop_threshold_minutes: float = STOP_THRESHOLD_MINUTES,
    distance_threshold_m: float = STOP_DISTANCE_THRESHOLD_M,
    destination_radius_m: float = DESTINATION_RADIUS_M,
) -> List[UnscheduledStop]:
    """Return every unscheduled stop in ``track``."""

    return list(
        iter_unscheduled_stops(
            track,
            destination,
            stop_threshold_minutes,
            distance_threshold_m,
            destination_radius_m,
        )
    )


class UnscheduledStopDetector:
    """Stop detector bound to a :class:`ComplianceSettings` instance."""

    def __init__(self, settings: Optional[ComplianceSettings] = None) -> None:
        self.settings = settings or ComplianceSettings()

    def iter_stops(
        self, track: Sequence[GpsSample], destination: Optional[Coordinate] = None
    ) -> Iterator[UnscheduledStop]:
        return iter_unscheduled_stops(
            track,
            destination,
            stop_threshold_minutes=self.settings.stop_threshold_minutes,
            distance_threshold_m=self.settings.stop_distance_threshold_m,
            destination_radius_m=self.settings.destination_radius_m,
        )

    def detect(
        self, track: Sequence[GpsSample], destination: Optional[Coordinate] = None
    ) -> List[UnscheduledStop]:
        return list(self.iter_stops(track, destination))
