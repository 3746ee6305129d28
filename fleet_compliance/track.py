"""Boundary helpers turning raw GPS payloads into validated, sorted tracks.

The geometry engine trusts its inputs. Range checks and chronological sorting
happen here, where samples enter the system.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from .errors import CoordinateRangeError, TrackFormatError
from .models import Coordinate, GpsSample
from .utils import parse_iso_datetime, to_utc_aware

LOGGER = logging.getLogger(__name__)

_OPTIONAL_FIELDS = ("speed", "heading", "altitude", "accuracy")


def validate_coordinate(lat: float, lng: float) -> None:
    """Raise :class:`CoordinateRangeError` unless lat/lng are valid WGS84."""

    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise CoordinateRangeError(f"Non-finite coordinate ({lat}, {lng})")
    if not -90.0 <= lat <= 90.0:
        raise CoordinateRangeError(f"Latitude {lat} outside [-90, 90]")
    if not -180.0 <= lng <= 180.0:
        raise CoordinateRangeError(f"Longitude {lng} outside [-180, 180]")


def parse_coordinate(raw: str) -> Coordinate:
    """Parse a ``"lat,lng"`` string into a validated coordinate."""

    parts = [part.strip() for part in raw.split(",")]
    if len(parts) != 2:
        raise ValueError(f"Expected 'lat,lng', got '{raw}'")
    try:
        lat, lng = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise ValueError(f"Expected numeric 'lat,lng', got '{raw}'") from exc
    validate_coordinate(lat, lng)
    return Coordinate(lat, lng)


def _coerce_timestamp(value: Any) -> datetime:
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if isinstance(value, datetime):
        return to_utc_aware(value)
    if isinstance(value, str):
        parsed = parse_iso_datetime(value)
        if parsed is not None:
            return to_utc_aware(parsed)
    raise TrackFormatError(f"Unparseable timestamp: {value!r}")


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    # pandas fills missing CSV cells with NaN
    return None if math.isnan(number) else number


def sample_from_record(record: Mapping[str, Any]) -> GpsSample:
    """Build a :class:`GpsSample` from an ingestion payload mapping."""

    if not isinstance(record, Mapping):
        raise TrackFormatError("GPS record must be an object")
    missing = [k for k in ("latitude", "longitude", "timestamp") if record.get(k) is None]
    if missing:
        raise TrackFormatError(f"GPS record missing fields: {', '.join(missing)}")
    try:
        lat = float(record["latitude"])
        lng = float(record["longitude"])
    except (TypeError, ValueError) as exc:
        raise TrackFormatError("GPS record has non-numeric coordinates") from exc
    optional = {name: _optional_float(record.get(name)) for name in _OPTIONAL_FIELDS}
    return GpsSample(
        lat=lat,
        lng=lng,
        timestamp=_coerce_timestamp(record["timestamp"]),
        **optional,
    )


def samples_from_records(records: Iterable[Mapping[str, Any]]) -> List[GpsSample]:
    return [sample_from_record(record) for record in records]


def normalise_track(samples: Iterable[GpsSample]) -> List[GpsSample]:
    """Validate coordinates and return samples sorted ascending by timestamp.

    The sort is stable, so samples sharing a timestamp keep ingestion order.
    """

    track = list(samples)
    for sample in track:
        validate_coordinate(sample.lat, sample.lng)
    ordered = sorted(track, key=lambda sample: sample.timestamp)
    if ordered != track:
        LOGGER.debug("Reordered %d GPS samples chronologically", len(track))
    return ordered


def coordinates_from_samples(samples: Sequence[GpsSample]) -> List[Coordinate]:
    return [sample.coordinate for sample in samples]


def load_track(path: str | Path) -> List[GpsSample]:
    """Read a GPS track from a ``.csv`` or ``.json`` file.

    CSV files need ``latitude``, ``longitude`` and ``timestamp`` columns. JSON
    files hold either a list of records or an object with a ``points`` list.
    The returned track is validated and sorted.
    """

    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Track file not found: {file_path}")
    suffix = file_path.suffix.lower()
    if suffix == ".csv":
        try:
            frame = pd.read_csv(file_path, dtype={"timestamp": str})
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise TrackFormatError(f"Unable to read CSV track {file_path}") from exc
        records: Any = frame.to_dict(orient="records")
    elif suffix == ".json":
        try:
            with file_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            raise TrackFormatError(f"Invalid JSON in track {file_path}") from exc
        records = payload.get("points") if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            raise TrackFormatError(f"No GPS points found in {file_path}")
    else:
        raise TrackFormatError(f"Unsupported track format '{suffix}'")
    track = normalise_track(samples_from_records(records))
    LOGGER.info("Loaded %d GPS samples from %s", len(track), file_path)
    return track
