"""Planned-route construction from a job's pickup and delivery coordinates."""

from __future__ import annotations

from threading import RLock
from typing import Callable, Optional, Tuple

from cachetools import LRUCache

from ..config import PLANNED_ROUTE_CACHE_SIZE, PLANNED_ROUTE_INTERVALS
from ..models import Coordinate
from .geo import interpolate
from .models import PlannedRoute

# (pickup, delivery, intervals) -> planned route. A road-network lookup can
# replace the straight-line builder as long as it honours this signature.
RouteBuilder = Callable[[Coordinate, Coordinate, int], PlannedRoute]

_RouteCacheKey = Tuple[Coordinate, Coordinate, int]

# Module-level LRU cache; routes are immutable tuples so sharing is safe.
_planned_route_cache: LRUCache[_RouteCacheKey, PlannedRoute] = LRUCache(
    maxsize=max(1, PLANNED_ROUTE_CACHE_SIZE)
)
_planned_route_cache_lock = RLock()


def build_planned_route(
    pickup: Optional[Coordinate],
    delivery: Optional[Coordinate],
    intervals: int = PLANNED_ROUTE_INTERVALS,
) -> PlannedRoute:
    """Return ``intervals + 1`` waypoints on the straight line pickup -> delivery.

    The first and last waypoints equal ``pickup`` and ``delivery`` exactly.
    An empty route is returned when either endpoint is missing.
    """

    if pickup is None or delivery is None:
        return ()
    if intervals < 1:
        raise ValueError("intervals must be at least 1")

    cache_key: _RouteCacheKey = (pickup, delivery, int(intervals))
    with _planned_route_cache_lock:
        cached = _planned_route_cache.get(cache_key)
    if cached is not None:
        return cached

    route = tuple(
        interpolate(pickup, delivery, i / intervals) for i in range(intervals + 1)
    )
    with _planned_route_cache_lock:
        _planned_route_cache[cache_key] = route
    return route


def clear_planned_route_cache() -> None:
    with _planned_route_cache_lock:
        _planned_route_cache.clear()
