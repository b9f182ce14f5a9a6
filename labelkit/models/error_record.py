from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""One line of the import error log.

Three kinds of problems end up here:
- EXTRACTION_FAILURE: the workbook or sheet could not be read and the demo
  row was substituted
- NO_ROWS: the sheet was read but its label table was empty (demo row again)
- ROW_SKIPPED: a selected row could not be expanded into labels

Workbook-level entries carry row=-1; ROW_SKIPPED carries the sheet row.
"""

__all__ = [
    "ErrorRecord",
    "EXTRACTION_FAILURE",
    "NO_ROWS",
    "ROW_SKIPPED",
    "WORKBOOK_ROW",
    "WORKBOOK_SHEET",
]

EXTRACTION_FAILURE = "EXTRACTION_FAILURE"
NO_ROWS = "NO_ROWS"
ROW_SKIPPED = "ROW_SKIPPED"

WORKBOOK_ROW = -1
WORKBOOK_SHEET = "<WORKBOOK>"  # no sheet was selected yet


@dataclass(frozen=True)
class ErrorRecord:
    timestamp: str  # ISO8601 UTC, 'Z' suffix
    file: str  # workbook file name
    sheet: str
    row: int  # 1-based sheet row, or WORKBOOK_ROW
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    @classmethod
    def for_workbook(cls, file: str, sheet: str | None, error_type: str, message: str) -> ErrorRecord:
        """Entry for a problem with the sheet as a whole (fallback row used)."""
        return cls.create(file, sheet or WORKBOOK_SHEET, WORKBOOK_ROW, error_type, message)

    @classmethod
    def for_skipped_row(cls, file: str, sheet: str | None, row: int | None, message: str) -> ErrorRecord:
        """Entry for a selected row that produced no labels."""
        return cls.create(
            file,
            sheet or WORKBOOK_SHEET,
            row if row is not None else WORKBOOK_ROW,
            ROW_SKIPPED,
            message,
        )

    def to_json_line(self) -> str:
        # exactly the six fields; Turkish sheet names stay readable
        return json.dumps(asdict(self), ensure_ascii=False)
