from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import pandas as pd

"""Workbook reading helpers.

Sheets are read raw (header=None) so that grid coordinates match the 0-based
row/column indices used by the sheet layout. No NA conversion is applied to
strings: a cell holding "NA" is a lot code, not a missing value.
"""

__all__ = [
    "WorkbookReadError",
    "read_workbook",
    "select_target_sheet",
    "cell_value",
]

logger = logging.getLogger(__name__)


class WorkbookReadError(Exception):
    """Raised when the workbook file cannot be opened or parsed."""


def read_workbook(path: Path, target_sheets: Iterable[str] | None = None) -> dict[str, pd.DataFrame]:
    """Read a workbook returning raw DataFrames keyed by sheet name.

    Parameters
    ----------
    path: workbook path (.xlsx)
    target_sheets: restrict to these sheet names (None reads every sheet)

    The returned dict keeps the workbook's sheet order.
    """
    if not path.exists():
        raise WorkbookReadError(f"workbook not found: {path}")
    try:
        xls = pd.ExcelFile(path)
    except Exception as e:
        raise WorkbookReadError(f"cannot open workbook {path.name}: {e}") from e

    wanted = set(target_sheets) if target_sheets is not None else None
    dfs: dict[str, pd.DataFrame] = {}
    with xls:
        for name in xls.sheet_names:
            if wanted is not None and str(name) not in wanted:
                continue
            df = xls.parse(name, header=None, keep_default_na=False, na_values=[""])
            dfs[str(name)] = df
    return dfs


def select_target_sheet(sheet_names: Sequence[str], markers: Iterable[str]) -> str:
    """Pick the first sheet whose name contains one of the markers.

    Falls back to the first sheet when no name matches. Matching is a plain
    case-sensitive substring test; the marker list carries the spelling
    variants (accented and ASCII).
    """
    if not sheet_names:
        raise WorkbookReadError("workbook has no sheets")
    marker_list = list(markers)
    for name in sheet_names:
        if any(m in name for m in marker_list):
            return name
    logger.debug(f"no sheet matches markers {marker_list}, using first sheet '{sheet_names[0]}'")
    return sheet_names[0]


def _is_absent(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_value(grid: pd.DataFrame, row: int, column: int) -> Any:
    """Return the value at (row, column), or None when the cell is absent.

    Out-of-range coordinates, NaN/NaT and blank strings all count as absent.
    String values are returned stripped.
    """
    if row < 0 or column < 0:
        return None
    n_rows, n_cols = grid.shape
    if row >= n_rows or column >= n_cols:
        return None
    value = grid.iat[row, column]
    if _is_absent(value):
        return None
    if isinstance(value, str):
        return value.strip()
    return value
