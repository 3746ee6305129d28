"""Distance and interpolation primitives over WGS84 coordinates.

Interpolation and segment projection work linearly in lat/lng space, which is
an acceptable approximation at the scale of a single delivery route. Routes
spanning large distances or crossing the anti-meridian are not handled.
Coordinates are expected to be within WGS84 bounds; range checks happen at
the track boundary (see :mod:`fleet_compliance.track`).
"""

from __future__ import annotations

import math
from typing import Sequence

from ..config import EARTH_RADIUS_M
from ..models import Coordinate


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Return the great-circle distance between two coordinates in metres."""

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    delta_lat = math.radians(b.lat - a.lat)
    delta_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lng / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def interpolate(a: Coordinate, b: Coordinate, t: float) -> Coordinate:
    """Return the point at fraction ``t`` along the straight line from a to b."""

    # Weighted form keeps both endpoints exact at t == 0 and t == 1.
    return Coordinate(
        lat=(1.0 - t) * a.lat + t * b.lat,
        lng=(1.0 - t) * a.lng + t * b.lng,
    )


def distance_to_segment(
    point: Coordinate, seg_start: Coordinate, seg_end: Coordinate
) -> float:
    """Return metres from ``point`` to the closest location on the segment."""

    seg_lat = seg_end.lat - seg_start.lat
    seg_lng = seg_end.lng - seg_start.lng
    length_sq = seg_lat * seg_lat + seg_lng * seg_lng
    if length_sq == 0:
        return haversine_distance(point, seg_start)
    t = (
        (point.lat - seg_start.lat) * seg_lat + (point.lng - seg_start.lng) * seg_lng
    ) / length_sq
    t_clamped = min(max(t, 0.0), 1.0)
    return haversine_distance(point, interpolate(seg_start, seg_end, t_clamped))


def path_length(points: Sequence[Coordinate]) -> float:
    """Return the summed haversine length of a polyline in metres."""

    if len(points) < 2:
        return 0.0
    return sum(
        haversine_distance(prev, curr) for prev, curr in zip(points[:-1], points[1:])
    )
