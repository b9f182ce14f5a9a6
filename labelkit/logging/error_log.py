from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from pathlib import Path

from labelkit.models.error_record import ErrorRecord

"""Error log of one import run.

The extractor never raises on a bad workbook; it substitutes the demo row and
appends an ErrorRecord here instead. The import session does the same for
selected rows that yield no labels. Records stay in memory until flush(),
which appends them as JSON Lines to logs/errors-YYYYMMDD-HHMMSS.log (UTC).
A run with nothing to report leaves no file behind.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir if logs_dir is not None else LOGS_DIR

    @property
    def file_path(self) -> Path:
        """Log file of this run; the directory is created and the name fixed on first access."""
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def counts(self) -> dict[str, int]:
        """Buffered records per error_type, e.g. {"NO_ROWS": 1}."""
        return dict(Counter(r.error_type for r in self._records))

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the run's log file and empty the buffer.

        Returns None (and creates nothing) when no record was buffered.
        """
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
