from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class Coordinate:
    """WGS84 latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class GpsSample:
    """A single timestamped fix from a trip's GPS track."""

    lat: float
    lng: float
    timestamp: datetime
    speed: Optional[float] = None
    heading: Optional[float] = None
    altitude: Optional[float] = None
    accuracy: Optional[float] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.lat, self.lng)


@dataclass(frozen=True, slots=True)
class Job:
    # Either endpoint may be missing on jobs created without a geocoded address
    pickup: Optional[Coordinate] = None
    delivery: Optional[Coordinate] = None

    @property
    def has_planned_route(self) -> bool:
        return self.pickup is not None and self.delivery is not None


class TripStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DELAYED = "delayed"
