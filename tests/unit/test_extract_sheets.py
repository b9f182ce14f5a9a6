from __future__ import annotations

import json
from datetime import date
from pathlib import Path

from labelkit.excel.extractor import extract_file, extract_sheets, fallback_row
from labelkit.logging.error_log import ErrorLogBuffer

TODAY = date(2025, 6, 1)


def test_extract_sheets_picks_marker_sheet(build_grid, plan_cells):
    sheets = {
        "Özet": build_grid({(0, 0): "özet"}),
        "DİLME PLANLARI": build_grid(plan_cells),
    }

    result = extract_sheets(sheets, today=TODAY)

    assert result.ok
    assert result.sheet_name == "DİLME PLANLARI"
    assert not result.used_fallback
    assert len(result.rows) == 3


def test_extract_sheets_without_marker_uses_first_sheet(build_grid, plan_cells):
    sheets = {"Sayfa1": build_grid(plan_cells), "Sayfa2": build_grid({})}

    result = extract_sheets(sheets, today=TODAY)

    assert result.sheet_name == "Sayfa1"
    assert len(result.rows) == 3


def test_zero_rows_returns_fallback_row_with_warning(build_grid):
    # Masked on purpose: the user always gets a usable row, but the warning
    # and the error log record make the failure visible.
    error_log = ErrorLogBuffer()
    grid = build_grid({(4, 2): "TARIMSAL", (6, 21): 45000})

    result = extract_sheets({"DİLME PLANLARI": grid}, today=TODAY, error_log=error_log)

    assert result.used_fallback
    assert result.warning is not None and "no label rows" in result.warning
    assert result.rows == [fallback_row(row_date="2023-03-15")]
    assert [r.error_type for r in error_log.records] == ["NO_ROWS"]


def test_extraction_error_returns_fallback_row(build_grid):
    error_log = ErrorLogBuffer()

    result = extract_sheets({"DİLME PLANLARI": "not a grid"}, today=TODAY, error_log=error_log)  # type: ignore[dict-item]

    assert result.used_fallback
    assert result.warning is not None and result.warning.startswith("extraction failed")
    assert len(result.rows) == 1
    row = result.rows[0]
    assert (row.label_id, row.project_name, row.lot_code, row.dimension, row.weight, row.quantity) == (
        "A108", "TARIMSAL", "25/627", "3x171", 6005, 7,
    )
    assert row.date == "2025-06-01"
    assert row.source_row_number is None
    record = error_log.records[0]
    assert record.error_type == "EXTRACTION_FAILURE"
    assert record.sheet == "DİLME PLANLARI"
    assert record.row == -1


def test_empty_workbook_returns_fallback_row():
    result = extract_sheets({}, today=TODAY)

    assert result.used_fallback
    assert result.sheet_name is None
    assert result.rows[0].label_id == "A108"


def test_extract_file_reads_workbook(make_workbook, plan_cells):
    path = make_workbook({"Özet": {(0, 0): "özet"}, "DİLME PLANLARI": plan_cells})

    result = extract_file(path, today=TODAY)

    assert result.ok
    assert [r.label_id for r in result.rows] == ["A108", "B200", "B200"]
    assert result.rows[0].dimension == "3x171"
    assert result.rows[0].date == "2025-03-14"
    assert [r.quantity for r in result.rows] == [7, 2, 3]


def test_extract_file_unreadable_workbook(tmp_path: Path, temp_workdir: Path):
    bad = tmp_path / "bad.xlsx"
    bad.write_bytes(b"garbage")
    error_log = ErrorLogBuffer()

    result = extract_file(bad, today=TODAY, error_log=error_log)

    assert result.used_fallback
    assert result.rows[0].label_id == "A108"
    log_path = error_log.flush()
    assert log_path is not None
    entry = json.loads(log_path.read_text(encoding="utf-8").strip())
    assert entry["file"] == "bad.xlsx"
    assert entry["error_type"] == "EXTRACTION_FAILURE"
