from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

import pandas as pd

from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import EXTRACTION_FAILURE, NO_ROWS, ErrorRecord
from ..models.extraction_result import ExtractionResult
from ..models.import_row import RawImportRow
from ..models.layout import CellField, SheetLayout, default_layout
from ..rounding import round_half_up
from .reader import cell_value, read_workbook, select_target_sheet

"""Sheet extractor for the cutting plans workbook.

Reads the fixed (but irregular) cell layout described by a SheetLayout into a
list of RawImportRow:

1. pick the target sheet by marker substring (first sheet if none matches)
2. read the anchors: project name and reference date
3. scan rows from layout.start_row while row < layout.end_row; a row with
   neither label id nor lot code ends the table
4. every scanned row expands into one RawImportRow per slot of its parallel
   value groups (dimension / weight / quantity); short groups repeat their
   first value

Failure policy: extract_sheets() and extract_file() never raise. Any error
while reading cells, or a scan that yields nothing, returns exactly one
fallback row so the user is never blocked. The reason is returned as the
result's warning, logged at WARN level and recorded in the error log buffer
when one is given.
"""

__all__ = [
    "ExtractionFailure",
    "extract_rows",
    "extract_sheets",
    "extract_file",
    "fallback_row",
    "resolve_reference_date",
    "format_cell_text",
    "positive_number",
]

logger = logging.getLogger(__name__)

# Day N of the legacy spreadsheet date serial maps to SERIAL_EPOCH + (N - 2)
# days; the legacy format counts a nonexistent 1900-02-29.
SERIAL_EPOCH = date(1900, 1, 1)
SERIAL_CORRECTION_DAYS = 2


class ExtractionFailure(Exception):
    """Raised by extract_rows when the grid cannot be interpreted."""


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def format_cell_text(value: Any) -> str:
    """Render a cell value as label text.

    Integral floats lose their ".0" (pandas reads 3 as 3.0 in numeric columns).
    Absent cells render as an empty string.
    """
    if value is None:
        return ""
    if _is_number(value):
        f = float(value)
        if math.isfinite(f) and f.is_integer():
            return str(int(f))
        return str(value)
    return str(value).strip()


def positive_number(value: Any) -> float | None:
    """Return the value as a float when it is present and strictly positive.

    Numeric strings are accepted; anything else is rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if _is_number(value):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.replace(",", "."))
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def resolve_reference_date(value: Any, today: date | None = None) -> str:
    """Resolve the reference date cell to a YYYY-MM-DD string.

    - native date / datetime (incl. pandas Timestamp): used as is
    - number: legacy day serial, SERIAL_EPOCH + (N - 2) days
    - anything else, or an out-of-range serial: today
    """
    fallback = (today or date.today()).isoformat()
    if value is None:
        return fallback
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if _is_number(value):
        try:
            resolved = SERIAL_EPOCH + timedelta(days=float(value) - SERIAL_CORRECTION_DAYS)
        except (OverflowError, ValueError):
            logger.debug(f"date serial out of range: {value!r}")
            return fallback
        return resolved.isoformat()
    return fallback


def _read_group(grid: pd.DataFrame, row: int, fields: list[CellField]) -> list[Any]:
    values: list[Any] = []
    for f in fields:
        raw = cell_value(grid, row + f.row, f.column)
        if positive_number(raw) is not None:
            values.append(raw)
    return values


def _pick(values: list[Any], i: int) -> Any:
    if i < len(values):
        return values[i]
    return values[0] if values else None


def extract_rows(grid: pd.DataFrame, layout: SheetLayout | None = None, today: date | None = None) -> list[RawImportRow]:
    """Scan one sheet grid into raw import rows.

    Pure scanning routine: no fallback, errors propagate as ExtractionFailure.
    """
    layout = layout or default_layout()
    if not isinstance(grid, pd.DataFrame):
        raise ExtractionFailure(f"expected a DataFrame grid, got {type(grid).__name__}")

    anchors = layout.anchors()
    keys = layout.keys()
    attributes = layout.attributes()
    groups = layout.groups()

    project_name = layout.default_project_name
    if "project_name" in anchors:
        a = anchors["project_name"]
        project_name = format_cell_text(cell_value(grid, a.row, a.column)) or layout.default_project_name

    date_value = None
    if "reference_date" in anchors:
        a = anchors["reference_date"]
        date_value = cell_value(grid, a.row, a.column)
    row_date = resolve_reference_date(date_value, today)

    rows: list[RawImportRow] = []
    row_index = layout.start_row
    while row_index < layout.end_row:
        key_values = {name: cell_value(grid, row_index + f.row, f.column) for name, f in keys.items()}
        if all(v is None for v in key_values.values()):
            logger.debug(f"end of table at row {row_index + 1}")
            break

        thickness = ""
        if "thickness" in attributes:
            t = attributes["thickness"]
            thickness = format_cell_text(cell_value(grid, row_index + t.row, t.column))

        dimensions = _read_group(grid, row_index, groups["dimension"])
        weights = _read_group(grid, row_index, groups["weight"])
        quantities = _read_group(grid, row_index, groups["quantity"])

        n = max(len(dimensions), len(weights), len(quantities))
        if n == 0:
            logger.debug(f"row {row_index + 1} has no values, skipped")
            row_index += 1
            continue

        label_cell = key_values.get("label_id")
        lot_cell = key_values.get("lot_code")
        for i in range(n):
            dimension = _pick(dimensions, i)
            weight = _pick(weights, i)
            quantity_value = positive_number(_pick(quantities, i))
            quantity = int(quantity_value) if quantity_value is not None else 0
            if quantity <= 0:
                continue
            weight_value = positive_number(weight)
            rows.append(
                RawImportRow(
                    date=row_date,
                    label_id=format_cell_text(label_cell) or layout.auto_label_id(len(rows)),
                    project_name=project_name,
                    lot_code=format_cell_text(lot_cell) or layout.synthesize_lot_code(row_index),
                    dimension=f"{thickness}x{format_cell_text(dimension)}",
                    weight=round_half_up(weight_value) if weight_value is not None else 0,
                    quantity=quantity,
                    source_row_number=row_index + 1,
                )
            )
        row_index += 1

    return rows


def fallback_row(layout: SheetLayout | None = None, row_date: str | None = None) -> RawImportRow:
    """The fixed demo row returned when extraction fails or finds nothing."""
    fb = (layout or default_layout()).fallback
    return RawImportRow(
        date=row_date or date.today().isoformat(),
        label_id=fb.label_id,
        project_name=fb.project_name,
        lot_code=fb.lot_code,
        dimension=fb.dimension,
        weight=fb.weight,
        quantity=fb.quantity,
        source_row_number=None,
    )


def _fallback_result(
    layout: SheetLayout,
    sheet_name: str | None,
    warning: str,
    error_type: str,
    row_date: str | None,
    file_name: str,
    error_log: ErrorLogBuffer | None,
) -> ExtractionResult:
    logger.warning(f"{warning} -> using fallback row")
    if error_log is not None:
        error_log.append(
            ErrorRecord.for_workbook(file_name, sheet_name, error_type, warning)
        )
    return ExtractionResult(
        rows=[fallback_row(layout, row_date)],
        sheet_name=sheet_name,
        warning=warning,
        used_fallback=True,
    )


def extract_sheets(
    sheets: Mapping[str, pd.DataFrame],
    layout: SheetLayout | None = None,
    today: date | None = None,
    error_log: ErrorLogBuffer | None = None,
    file_name: str = "<memory>",
) -> ExtractionResult:
    """Extract import rows from already parsed sheets, applying the fallback policy."""
    layout = layout or default_layout()
    sheet_name: str | None = None
    try:
        sheet_name = select_target_sheet(list(sheets.keys()), layout.sheet_markers)
        grid = sheets[sheet_name]
        rows = extract_rows(grid, layout, today)
    except Exception as e:
        # Deliberate: a broken sheet must not block the user, it yields the demo row.
        return _fallback_result(
            layout,
            sheet_name,
            f"extraction failed: {e}",
            EXTRACTION_FAILURE,
            (today or date.today()).isoformat(),
            file_name,
            error_log,
        )

    if not rows:
        anchors = layout.anchors()
        date_value = None
        if "reference_date" in anchors:
            a = anchors["reference_date"]
            date_value = cell_value(grid, a.row, a.column)
        return _fallback_result(
            layout,
            sheet_name,
            f"no label rows found in sheet '{sheet_name}'",
            NO_ROWS,
            resolve_reference_date(date_value, today),
            file_name,
            error_log,
        )

    logger.info(f"extracted {len(rows)} rows from sheet '{sheet_name}'")
    return ExtractionResult(rows=rows, sheet_name=sheet_name)


def extract_file(
    path: Path,
    layout: SheetLayout | None = None,
    today: date | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ExtractionResult:
    """Read a workbook from disk and extract its import rows.

    Read errors fall under the same policy as cell errors: fallback row plus
    warning, never an exception.
    """
    layout = layout or default_layout()
    try:
        sheets = read_workbook(path)
    except Exception as e:
        return _fallback_result(
            layout,
            None,
            f"extraction failed: {e}",
            EXTRACTION_FAILURE,
            (today or date.today()).isoformat(),
            path.name,
            error_log,
        )
    return extract_sheets(sheets, layout, today, error_log, file_name=path.name)
