"""Central error types used across the application."""

from __future__ import annotations


class TrackFormatError(RuntimeError):
    """Raised when a GPS track payload or file cannot be parsed."""


class CoordinateRangeError(ValueError):
    """Raised when a coordinate is non-finite or outside WGS84 bounds."""


__all__ = [
    "TrackFormatError",
    "CoordinateRangeError",
]
