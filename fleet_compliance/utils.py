"""General utility helpers shared across modules."""

from __future__ import annotations

import json
import math
from datetime import datetime, date, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any


def round_half_away(value: float, ndigits: int = 0) -> float:
    """Round ``value`` to ``ndigits`` decimals, halves away from zero.

    Python's :func:`round` uses banker's rounding, which would report 12.25%
    as 12.2. Non-finite values are returned unchanged.
    """

    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def parse_iso_datetime(raw: str) -> datetime | None:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z``."""

    text = raw.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def to_utc_aware(value: datetime) -> datetime:
    """Return ``value`` as a UTC-aware datetime; naive values are taken as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _normalise_value(value: Any) -> Any:
    """Convert objects to JSON-friendly representations."""

    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_normalise_value(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _normalise_value(val) for key, val in value.items()}
    return value


def json_dumps_sorted(value: Any) -> str:
    """Return canonical JSON for hashing / comparisons."""

    normalised = _normalise_value(value)
    return json.dumps(normalised, sort_keys=True, separators=(",", ":"))
