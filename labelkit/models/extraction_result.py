from __future__ import annotations

from dataclasses import dataclass, field

from .import_row import RawImportRow

"""Extraction result model.

The extractor never fails the caller: when the sheet cannot be read, or when
the scan finds nothing, it still returns a usable fallback row. The warning
field carries the reason so the caller can surface a non-blocking notice.
"""

__all__ = [
    "ExtractionResult",
]


@dataclass(frozen=True)
class ExtractionResult:
    """Rows extracted from one workbook plus an optional warning."""
    rows: list[RawImportRow] = field(default_factory=list)
    sheet_name: str | None = None  # None when the workbook could not be read
    warning: str | None = None  # set whenever the fallback row was returned
    used_fallback: bool = False

    @property
    def ok(self) -> bool:
        return self.warning is None
