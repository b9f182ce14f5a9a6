from __future__ import annotations

import json
from pathlib import Path

from labelkit.logging.error_log import ErrorLogBuffer, ErrorRecord

KEYS = {"timestamp", "file", "sheet", "row", "error_type", "message"}


def test_error_record_creation_and_json_line():
    rec = ErrorRecord.create(
        file="plans.xlsx",
        sheet="DİLME PLANLARI",
        row=-1,
        error_type="NO_ROWS",
        message="no label rows found",
    )
    data = json.loads(rec.to_json_line())
    assert data["sheet"] == "DİLME PLANLARI"
    assert data["row"] == -1
    assert data["timestamp"].endswith("Z")
    assert set(data.keys()) == KEYS
    # non-ASCII kept as is
    assert "DİLME" in rec.to_json_line()


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("a.xlsx", "S", -1, "EXTRACTION_FAILURE", "boom"))
    buf.append(ErrorRecord.create("a.xlsx", "S", -1, "NO_ROWS", "empty"))

    path = buf.flush()

    assert path is not None and path.exists()
    assert path.parent == Path("logs")
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    assert all(set(json.loads(line)) == KEYS for line in lines)
    assert len(buf) == 0


def test_error_log_buffer_empty_flush_writes_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_error_log_buffer_multiple_flushes_append(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "custom")
    buf.append(ErrorRecord.create("f.xlsx", "S", 1, "NO_ROWS", "x"))
    first = buf.flush()
    assert first is not None
    size1 = first.stat().st_size

    buf.append(ErrorRecord.create("f.xlsx", "S", 2, "NO_ROWS", "y"))
    second = buf.flush()

    assert first == second
    assert second.stat().st_size > size1


def test_workbook_level_record_uses_placeholder_sheet_and_row():
    rec = ErrorRecord.for_workbook("plans.xlsx", None, "EXTRACTION_FAILURE", "file is not a zip file")
    assert (rec.sheet, rec.row) == ("<WORKBOOK>", -1)


def test_skipped_row_record_keeps_sheet_row():
    rec = ErrorRecord.for_skipped_row("plans.xlsx", "DİLME PLANLARI", 9, "invalid label number format: 'AUTO-2'")
    assert (rec.error_type, rec.sheet, rec.row) == ("ROW_SKIPPED", "DİLME PLANLARI", 9)
    assert ErrorRecord.for_skipped_row("plans.xlsx", None, None, "x").row == -1


def test_error_log_buffer_counts_by_type(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    assert buf.counts() == {}
    buf.append(ErrorRecord.for_workbook("a.xlsx", "S", "NO_ROWS", "empty"))
    buf.append(ErrorRecord.for_skipped_row("a.xlsx", "S", 8, "bad"))
    buf.append(ErrorRecord.for_skipped_row("a.xlsx", "S", 9, "bad"))
    assert buf.counts() == {"NO_ROWS": 1, "ROW_SKIPPED": 2}
