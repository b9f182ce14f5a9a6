from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

"""RawImportRow model for the spreadsheet import flow.

A RawImportRow is one candidate label group read mechanically from the cutting
plans sheet, before the user confirms or edits it. It only lives for the
duration of an import session and is consumed by the label sequence generator.
"""

__all__ = [
    "RawImportRow",
]


@dataclass(frozen=True)
class RawImportRow:
    """One label group extracted from a sheet row.

    The row_number-like locator (source_row_number) refers to the 1-based row
    in the sheet so the preview can point the user back at the source cell.
    """
    date: str  # YYYY-MM-DD, reference date of the sheet
    label_id: str  # starting label number, or AUTO-<n> placeholder
    project_name: str  # sheet-wide constant, becomes the label material
    lot_code: str  # per row, or synthesized from the row index
    dimension: str  # "<thickness>x<width>" (string concatenation)
    weight: int  # aggregate weight of the group, rounded
    quantity: int  # number of labels to generate (> 0)
    source_row_number: int | None = None  # None for the fallback row

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError(f"quantity must be positive, got {self.quantity}")

    def edit(self, **changes: Any) -> RawImportRow:
        """Return a revised copy of this row (edit-before-generate).

        The original row is left untouched so sibling rows and the preview
        keep their extracted values.
        """
        unknown = set(changes) - set(self.__dataclass_fields__)
        if unknown:
            raise TypeError(f"unknown import row fields: {sorted(unknown)}")
        return replace(self, **changes)
