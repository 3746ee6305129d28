"""Command line helpers for offline trip analysis."""

__all__ = ["trip_report"]
