# Shared pytest fixtures
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from labelkit.logging.init import reset_logging

GRID_ROWS = 25
GRID_COLS = 24

# Column indices of the cutting plans sheet
COL_LOT = 2  # C
COL_THICKNESS = 5  # F
QTY_COLS = (8, 11, 14)  # I, L, O
DIM_COLS = (9, 12, 15)  # J, M, P
WEIGHT_COLS = (10, 13, 16)  # K, N, Q
COL_LABEL = 22  # W


def _plan_row(
    row: int,
    label: Any = None,
    lot: Any = None,
    thickness: Any = None,
    dims: tuple[Any, ...] = (),
    weights: tuple[Any, ...] = (),
    qtys: tuple[Any, ...] = (),
) -> dict[tuple[int, int], Any]:
    """Cells of one scanned row, keyed by (row, column)."""
    cells: dict[tuple[int, int], Any] = {}
    if label is not None:
        cells[(row, COL_LABEL)] = label
    if lot is not None:
        cells[(row, COL_LOT)] = lot
    if thickness is not None:
        cells[(row, COL_THICKNESS)] = thickness
    for cols, values in ((DIM_COLS, dims), (WEIGHT_COLS, weights), (QTY_COLS, qtys)):
        for col, value in zip(cols, values, strict=False):
            cells[(row, col)] = value
    return cells


def _build_grid(cells: dict[tuple[int, int], Any], n_rows: int = GRID_ROWS, n_cols: int = GRID_COLS) -> pd.DataFrame:
    data: list[list[Any]] = [[None] * n_cols for _ in range(n_rows)]
    for (r, c), value in cells.items():
        data[r][c] = value
    return pd.DataFrame(data, dtype=object)


@pytest.fixture(autouse=True)
def _reset_logging_state():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch, tmp_path: Path) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "logs").mkdir()
    monkeypatch.chdir(tmp_path)
    for var in ("LABELKIT_LAYOUT", "LABELKIT_LOG_DIR"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture()
def plan_cells() -> dict[tuple[int, int], Any]:
    """A small cutting plan: two label groups then the end-of-table sentinel."""
    cells: dict[tuple[int, int], Any] = {
        (0, 0): "BOBİN RAPORU",
        (4, 2): "TARIMSAL",
        (6, 21): datetime(2025, 3, 14),
    }
    cells.update(_plan_row(7, label="A108", lot="25/627", thickness=3, dims=(171,), weights=(6005,), qtys=(7,)))
    cells.update(
        _plan_row(8, label="B200", lot="25/628", thickness=2, dims=(100, 120), weights=(1000, 1500), qtys=(2, 3))
    )
    return cells


@pytest.fixture()
def make_workbook(tmp_path: Path) -> Callable[..., Path]:
    """Write {sheet name: cells} to an .xlsx file; sheet order is preserved."""
    def _make(sheets: dict[str, dict[tuple[int, int], Any]], name: str = "plans.xlsx") -> Path:
        path = tmp_path / name
        with pd.ExcelWriter(path) as writer:
            for sheet, cells in sheets.items():
                _build_grid(cells).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return path
    return _make


@pytest.fixture()
def plan_row() -> Callable[..., dict[tuple[int, int], Any]]:
    return _plan_row


@pytest.fixture()
def build_grid() -> Callable[..., pd.DataFrame]:
    return _build_grid
