from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Any

from ..excel.extractor import extract_file
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import ErrorRecord
from ..models.extraction_result import ExtractionResult
from ..models.import_row import RawImportRow
from ..models.label_record import LabelRecord
from ..models.layout import SheetLayout, default_layout
from .generator import BatchResult, generate_batch
from .label_store import LabelStore

"""Import session: workbook -> preview rows -> selection/edit -> labels.

Drives the multi-row import flow. Rows are extracted once per loaded file;
the user selects any number of them, may revise a selected row's copy, and
generate() expands the selection into the label store. At most one
extraction runs at a time and everything happens synchronously.
"""

__all__ = [
    "EmptySelectionError",
    "ImportSession",
]

logger = logging.getLogger(__name__)


class EmptySelectionError(Exception):
    """generate() was called with no rows selected."""


class ImportSession:
    def __init__(
        self,
        store: LabelStore,
        layout: SheetLayout | None = None,
        error_log: ErrorLogBuffer | None = None,
        today: date | None = None,
    ) -> None:
        self.store = store
        self.layout = layout or default_layout()
        self.error_log = error_log
        self.today = today
        self.result: ExtractionResult | None = None
        self.file_name = "<memory>"
        self._rows: list[RawImportRow] = []
        self._selected: list[int] = []

    @property
    def rows(self) -> list[RawImportRow]:
        return list(self._rows)

    @property
    def selected(self) -> list[int]:
        return list(self._selected)

    def load(self, path: Path) -> ExtractionResult:
        """Extract the preview rows of a workbook, resetting any previous selection."""
        logger.info(f"Importing workbook: {path.name}")
        result = extract_file(path, self.layout, self.today, self.error_log)
        self.load_result(result)
        self.file_name = path.name
        return result

    def load_result(self, result: ExtractionResult) -> None:
        self.result = result
        self.file_name = "<memory>"
        self._rows = list(result.rows)
        self._selected = []

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._rows):
            raise IndexError(f"row index out of range: {index} (rows={len(self._rows)})")

    def select(self, indices: Iterable[int]) -> None:
        """Replace the selection; order follows the preview, duplicates collapse."""
        chosen = set()
        for i in indices:
            self._check_index(i)
            chosen.add(i)
        self._selected = sorted(chosen)

    def select_all(self) -> None:
        self._selected = list(range(len(self._rows)))

    def toggle(self, index: int) -> None:
        self._check_index(index)
        if index in self._selected:
            self._selected.remove(index)
        else:
            self._selected = sorted([*self._selected, index])

    def edit(self, index: int, **changes: Any) -> RawImportRow:
        """Revise one row before generation; sibling rows are not affected."""
        self._check_index(index)
        revised = self._rows[index].edit(**changes)
        self._rows[index] = revised
        return revised

    def generate(self) -> tuple[BatchResult, list[LabelRecord]]:
        """Generate labels for the selected rows and add them to the store.

        Skipped rows are recorded as ROW_SKIPPED in the error log, if any.
        """
        if not self._selected:
            raise EmptySelectionError("no import rows selected")
        batch = generate_batch([self._rows[i] for i in self._selected])
        if self.error_log is not None:
            sheet = self.result.sheet_name if self.result is not None else None
            for row, error in zip(batch.skipped_rows, batch.errors):
                self.error_log.append(ErrorRecord.for_skipped_row(self.file_name, sheet, row, str(error)))
        records = self.store.bulk_insert(batch.labels) if batch.labels else []
        return batch, records

    def reset(self) -> None:
        self.result = None
        self.file_name = "<memory>"
        self._rows = []
        self._selected = []
