from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Declarative sheet layout for the cutting plans workbook.

The fixed cell coordinates of the import sheet are described as a table of
CellField entries instead of being hard-coded in the scanning routine. The
extractor only knows about roles; which cell means what lives here (and can be
overridden from config/layout.yml, see labelkit.config.loader).

Coordinates are 0-based (row index, column index). Column letters in comments
are for orientation only.
"""

__all__ = [
    "FieldRole",
    "CellField",
    "FallbackRow",
    "SheetLayout",
    "default_layout",
    "DEFAULT_SHEET_MARKERS",
]


class FieldRole(Enum):
    """Role of a cell field within the layout.

    - ANCHOR: single cell at an absolute row, read once per sheet
    - KEY: identifying cell of a scanned row; both keys empty ends the scan
    - ATTRIBUTE: per-row constant (e.g. thickness)
    - GROUP: one of several parallel value cells of a scanned row
    """
    ANCHOR = "anchor"
    KEY = "key"
    ATTRIBUTE = "attribute"
    GROUP = "group"


@dataclass(frozen=True)
class CellField:
    name: str
    column: int
    role: FieldRole
    row: int = 0  # absolute row for ANCHOR, offset from the scanned row otherwise


@dataclass(frozen=True)
class FallbackRow:
    """Demo values returned when extraction fails or finds nothing."""
    label_id: str = "A108"
    project_name: str = "TARIMSAL"
    lot_code: str = "25/627"
    dimension: str = "3x171"
    weight: int = 6005
    quantity: int = 7


DEFAULT_SHEET_MARKERS: tuple[str, ...] = (
    "DİLME PLANLARI",
    "DILME PLANLARI",
    "DİLME",
    "CUTTING PLANS",
)


def _default_fields() -> tuple[CellField, ...]:
    return (
        CellField("project_name", 2, FieldRole.ANCHOR, row=4),  # C5
        CellField("reference_date", 21, FieldRole.ANCHOR, row=6),  # V7
        CellField("label_id", 22, FieldRole.KEY),  # W
        CellField("lot_code", 2, FieldRole.KEY),  # C
        CellField("thickness", 5, FieldRole.ATTRIBUTE),  # F
        CellField("dimension", 9, FieldRole.GROUP),  # J
        CellField("dimension", 12, FieldRole.GROUP),  # M
        CellField("dimension", 15, FieldRole.GROUP),  # P
        CellField("weight", 10, FieldRole.GROUP),  # K
        CellField("weight", 13, FieldRole.GROUP),  # N
        CellField("weight", 16, FieldRole.GROUP),  # Q
        CellField("quantity", 8, FieldRole.GROUP),  # I
        CellField("quantity", 11, FieldRole.GROUP),  # L
        CellField("quantity", 14, FieldRole.GROUP),  # O
    )


@dataclass(frozen=True)
class SheetLayout:
    """Cell layout plus the defaults applied while scanning."""
    fields: tuple[CellField, ...] = field(default_factory=_default_fields)
    sheet_markers: tuple[str, ...] = DEFAULT_SHEET_MARKERS
    start_row: int = 7  # first data row (sheet row 8)
    end_row: int = 20  # exclusive
    default_project_name: str = "Proje Adı"
    lot_prefix: str = "25/"
    lot_base: int = 600  # synthesized lot = lot_prefix + (lot_base + row index)
    auto_label_prefix: str = "AUTO-"
    fallback: FallbackRow = field(default_factory=FallbackRow)

    def __post_init__(self) -> None:
        if self.start_row < 0 or self.end_row < self.start_row:
            raise ValueError(
                f"invalid scan window: start_row={self.start_row} end_row={self.end_row}"
            )
        groups = self.groups()
        missing = {"dimension", "weight", "quantity"} - set(groups)
        if missing:
            raise ValueError(f"layout missing value groups: {sorted(missing)}")
        if not self.keys():
            raise ValueError("layout needs at least one key field (end-of-table sentinel)")

    def _by_role(self, role: FieldRole) -> dict[str, CellField]:
        return {f.name: f for f in self.fields if f.role is role}

    def anchors(self) -> dict[str, CellField]:
        return self._by_role(FieldRole.ANCHOR)

    def keys(self) -> dict[str, CellField]:
        return self._by_role(FieldRole.KEY)

    def attributes(self) -> dict[str, CellField]:
        return self._by_role(FieldRole.ATTRIBUTE)

    def groups(self) -> dict[str, list[CellField]]:
        """Group fields by name, keeping declaration order within a group."""
        out: dict[str, list[CellField]] = {}
        for f in self.fields:
            if f.role is FieldRole.GROUP:
                out.setdefault(f.name, []).append(f)
        return out

    def synthesize_lot_code(self, row_index: int) -> str:
        return f"{self.lot_prefix}{self.lot_base + row_index}"

    def auto_label_id(self, emitted: int) -> str:
        return f"{self.auto_label_prefix}{emitted + 1}"


def default_layout() -> SheetLayout:
    """Return the built-in layout of the cutting plans sheet."""
    return SheetLayout()
