"""Tabular and JSON views of compliance results for reporting layers."""

from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path
from typing import Any, Iterable, Sequence

import pandas as pd
import polyline
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from .config import (
    EXCEL_AUTOSIZE_COLUMNS,
    EXCEL_AUTOSIZE_MAX_ROWS,
    EXCEL_AUTOSIZE_MAX_WIDTH,
    EXCEL_AUTOSIZE_MIN_WIDTH,
    EXCEL_AUTOSIZE_PADDING,
    STOP_COLUMN_ORDER,
)
from .geometry import UnscheduledStop
from .models import Coordinate
from .trips import TripCompletion, has_route_deviation
from .utils import round_half_away

COMPLIANCE_SHEET = "Compliance"
STOPS_SHEET = "Unscheduled Stops"
EXCEL_DATETIME_FORMAT = "yyyy-mm-dd hh:mm:ss"
# Google polyline precision used by common web map clients.
POLYLINE_PRECISION = 5

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(patternType="solid", fgColor="FFD9E1F2")
HEADER_BORDER = Border(
    left=Side(style="thin", color="000000"),
    right=Side(style="thin", color="000000"),
    top=Side(style="thin", color="000000"),
    bottom=Side(style="thin", color="000000"),
)

PathInput = str | Path | PathLike[str]

LOGGER = logging.getLogger(__name__)


def stops_frame(stops: Iterable[UnscheduledStop]) -> pd.DataFrame:
    """Return one row per stop; durations are rounded to whole minutes."""

    rows = [
        {
            "Start Time": stop.start_time,
            "Latitude": stop.latitude,
            "Longitude": stop.longitude,
            "Duration (min)": int(round_half_away(stop.duration_minutes)),
            "Address": stop.address or "",
        }
        for stop in stops
    ]
    return pd.DataFrame(rows, columns=STOP_COLUMN_ORDER)


def completion_row(trip_id: str, completion: TripCompletion) -> dict[str, Any]:
    compliance = completion.compliance
    return {
        "Trip": trip_id,
        "Status": completion.status.value,
        "Distance (km)": round(completion.distance_travelled, 1),
        "GPS Distance (m)": completion.gps_distance_m,
        "Fuel Used (L)": round(completion.fuel_used, 2),
        "Fuel Efficiency (km/L)": round(completion.fuel_efficiency, 2),
        "Route Compliance (%)": compliance.compliance_percent,
        "Max Deviation (m)": compliance.max_deviation_m,
        "Average Deviation (m)": compliance.average_deviation_m,
        "Route Deviation": has_route_deviation(compliance),
    }


def completion_frame(rows: Sequence[tuple[str, TripCompletion]]) -> pd.DataFrame:
    return pd.DataFrame([completion_row(trip_id, done) for trip_id, done in rows])


def route_overlay_payload(
    planned: Sequence[Coordinate],
    actual: Sequence[Coordinate],
    stops: Sequence[UnscheduledStop] = (),
) -> dict[str, Any]:
    """Return a JSON-ready dict describing planned vs actual routes and stops."""

    return {
        "planned_polyline": _encode(planned),
        "actual_polyline": _encode(actual),
        "planned_point_count": len(planned),
        "actual_point_count": len(actual),
        "stops": [
            {
                "latitude": stop.latitude,
                "longitude": stop.longitude,
                "start_time": stop.start_time.isoformat(),
                "duration_minutes": round_half_away(stop.duration_minutes, 1),
                "address": stop.address,
            }
            for stop in stops
        ],
    }


def _encode(points: Sequence[Coordinate]) -> str:
    if not points:
        return ""
    return polyline.encode(
        [(point.lat, point.lng) for point in points], POLYLINE_PRECISION
    )


def write_trip_report(
    filepath: PathInput,
    trip_id: str,
    completion: TripCompletion,
    stops: Sequence[UnscheduledStop],
) -> Path:
    """Write compliance figures and unscheduled stops to an Excel workbook."""

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    summary = completion_frame([(trip_id, completion)])
    stops_df = stops_frame(stops)
    # Excel cannot store timezone-aware datetimes.
    if not stops_df.empty:
        stops_df["Start Time"] = pd.to_datetime(
            stops_df["Start Time"], utc=True
        ).dt.tz_localize(None)
    with pd.ExcelWriter(
        path, engine="openpyxl", datetime_format=EXCEL_DATETIME_FORMAT
    ) as writer:
        for sheet_name, frame in ((COMPLIANCE_SHEET, summary), (STOPS_SHEET, stops_df)):
            frame.to_excel(writer, sheet_name=sheet_name, index=False)
            ws = writer.sheets[sheet_name]
            _style_header_row(ws, len(frame.columns))
            _autosize(ws)
    LOGGER.info(
        "Wrote trip report for %s to %s (stops=%d)", trip_id, path, len(stops_df)
    )
    return path


def _style_header_row(ws: Worksheet, max_col: int) -> None:
    for col_idx in range(1, max_col + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.border = HEADER_BORDER


def _autosize(ws: Worksheet) -> None:
    if not EXCEL_AUTOSIZE_COLUMNS or ws.max_row > EXCEL_AUTOSIZE_MAX_ROWS:
        return
    for col_cells in ws.columns:
        col_letter = getattr(col_cells[0], "column_letter", None)
        if not col_letter:
            continue
        max_len = max(
            (len(str(cell.value)) for cell in col_cells if cell.value is not None),
            default=0,
        )
        ws.column_dimensions[col_letter].width = min(
            EXCEL_AUTOSIZE_MAX_WIDTH,
            max(EXCEL_AUTOSIZE_MIN_WIDTH, max_len + EXCEL_AUTOSIZE_PADDING),
        )
