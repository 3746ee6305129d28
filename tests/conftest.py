"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable coordinate and GPS track
factories shared by the geometry, trip and reporting tests.
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Tuple

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from fleet_compliance.geometry import clear_planned_route_cache
from fleet_compliance.models import Coordinate, GpsSample, Job


# Roughly 11 m of latitude; well inside the 100 m stationary threshold.
JITTER_DEG = 0.0001
# Roughly 1 km of latitude.
KM_DEG = 0.009

TRACK_START = datetime(2025, 3, 3, 8, 0, tzinfo=timezone.utc)


# --- Factory helpers -------------------------------------------------
def make_sample(lat: float, lng: float, minutes: float) -> GpsSample:
    return GpsSample(lat=lat, lng=lng, timestamp=TRACK_START + timedelta(minutes=minutes))


def make_track(points: Iterable[Tuple[float, float, float]]) -> List[GpsSample]:
    """Build samples from ``(lat, lng, minutes_after_start)`` triples."""

    return [make_sample(lat, lng, minutes) for lat, lng, minutes in points]


# --- Fixtures --------------------------------------------------------
@pytest.fixture(autouse=True)
def clear_route_cache():
    clear_planned_route_cache()
    yield
    clear_planned_route_cache()


@pytest.fixture
def pickup() -> Coordinate:
    return Coordinate(lat=51.5000, lng=-0.1200)


@pytest.fixture
def delivery() -> Coordinate:
    return Coordinate(lat=51.5000, lng=-0.0200)


@pytest.fixture
def job(pickup: Coordinate, delivery: Coordinate) -> Job:
    return Job(pickup=pickup, delivery=delivery)


@pytest.fixture
def on_route_track(pickup: Coordinate, delivery: Coordinate) -> List[GpsSample]:
    """Ten samples two minutes apart along the straight pickup->delivery line."""

    step = (delivery.lng - pickup.lng) / 9
    return make_track(
        (pickup.lat, pickup.lng + i * step, i * 2.0) for i in range(10)
    )
