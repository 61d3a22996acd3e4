"""Fixed-precision result rows and the Excel workbook writer."""

from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path
from typing import Any, Dict, Sequence

import pandas as pd
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from .config import (
    EXCEL_AUTOSIZE_COLUMNS,
    EXCEL_AUTOSIZE_MAX_WIDTH,
    EXCEL_AUTOSIZE_MIN_WIDTH,
    EXCEL_AUTOSIZE_PADDING,
    METRIC_PRECISION,
    UNIT_PRECISION,
)
from .models import AggregateResult, MeasurementResult

MEASUREMENTS_SHEET = "Measurements"
AVERAGE_SHEET = "Average"

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(patternType="solid", fgColor="FFC6EFCE")
HEADER_BORDER = Border(
    left=Side(style="thin", color="000000"),
    right=Side(style="thin", color="000000"),
    top=Side(style="thin", color="000000"),
    bottom=Side(style="thin", color="000000"),
)

MEASUREMENT_COLUMNS = [
    "Measurement",
    "Perimeter (m)",
    "Area (m2)",
    "Acres",
    "Hectares",
    "Guntha",
    "Cents",
    "Points Recorded",
    "Polygon Points",
    "Avg Accuracy (m)",
    "Skipped Points",
    "Data Quality (%)",
    "Area Mode",
    "Degraded Precision",
    "Self Intersecting",
    "Live Distance (m)",
    "Trimmed Points",
]
AVERAGE_COLUMNS = [
    "Measurements Averaged",
    "Average Perimeter (m)",
    "Average Area (m2)",
    "Acres",
    "Hectares",
    "Guntha",
    "Cents",
]

LOGGER = logging.getLogger(__name__)

PathInput = str | Path | PathLike[str]
Row = Dict[str, Any]


def _metric(value: float) -> float:
    return round(float(value), METRIC_PRECISION)


def _unit(value: float) -> float:
    return round(float(value), UNIT_PRECISION)


def result_to_row(result: MeasurementResult) -> Row:
    return {
        "Measurement": result.measurement_index,
        "Perimeter (m)": _metric(result.perimeter_m),
        "Area (m2)": _metric(result.area_m2),
        "Acres": _unit(result.acres),
        "Hectares": _unit(result.hectares),
        "Guntha": _unit(result.guntha),
        "Cents": _unit(result.cents),
        "Points Recorded": result.points_recorded,
        "Polygon Points": result.closed_polygon_point_count,
        "Avg Accuracy (m)": _metric(result.avg_accuracy_m),
        "Skipped Points": result.skipped_point_count,
        "Data Quality (%)": _metric(result.data_quality_percent),
        "Area Mode": result.area_mode.value,
        "Degraded Precision": result.degraded_precision,
        "Self Intersecting": result.self_intersecting,
        "Live Distance (m)": _metric(result.live_distance_m),
        "Trimmed Points": result.trimmed_point_count,
    }


def aggregate_to_row(aggregate: AggregateResult) -> Row:
    return {
        "Measurements Averaged": aggregate.count,
        "Average Perimeter (m)": _metric(aggregate.perimeter_m),
        "Average Area (m2)": _metric(aggregate.area_m2),
        "Acres": _unit(aggregate.acres),
        "Hectares": _unit(aggregate.hectares),
        "Guntha": _unit(aggregate.guntha),
        "Cents": _unit(aggregate.cents),
    }


def _style_header(ws: Worksheet) -> None:
    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.border = HEADER_BORDER


def _autosize(ws: Worksheet) -> None:
    if not EXCEL_AUTOSIZE_COLUMNS:
        return
    for col_cells in ws.columns:
        max_len = 0
        col_letter = getattr(col_cells[0], "column_letter", None)
        for cell in col_cells:
            if cell.value is None:
                continue
            max_len = max(max_len, len(str(cell.value)))
        width = min(
            EXCEL_AUTOSIZE_MAX_WIDTH,
            max(EXCEL_AUTOSIZE_MIN_WIDTH, max_len + EXCEL_AUTOSIZE_PADDING),
        )
        if col_letter:
            ws.column_dimensions[col_letter].width = width


def _write_sheet(
    writer: pd.ExcelWriter,
    sheet_name: str,
    rows: Sequence[Row],
    columns: Sequence[str],
) -> None:
    # Explicit columns keep the header row even when there are no rows.
    df = pd.DataFrame(list(rows), columns=list(columns))
    df.to_excel(writer, sheet_name=sheet_name, index=False)
    ws = writer.sheets[sheet_name]
    _style_header(ws)
    _autosize(ws)


def write_measurements(
    path: PathInput,
    results: Sequence[MeasurementResult],
    aggregate: AggregateResult | None = None,
) -> Path:
    """Write results (and the average when given) to an ``.xlsx`` workbook."""

    out_path = Path(path)
    rows = [result_to_row(r) for r in results]
    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        _write_sheet(writer, MEASUREMENTS_SHEET, rows, MEASUREMENT_COLUMNS)
        if aggregate is not None:
            _write_sheet(
                writer, AVERAGE_SHEET, [aggregate_to_row(aggregate)], AVERAGE_COLUMNS
            )
    LOGGER.info("Wrote %d measurements to %s", len(results), out_path)
    return out_path


__all__ = [
    "AVERAGE_SHEET",
    "MEASUREMENTS_SHEET",
    "aggregate_to_row",
    "result_to_row",
    "write_measurements",
]
