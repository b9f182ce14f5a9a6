from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

"""Label models.

LabelData is the payload produced by the generator and by manual form entry;
LabelRecord is the same payload once the label store has assigned it a
surrogate id.
"""

__all__ = [
    "LabelData",
    "LabelRecord",
]


@dataclass(frozen=True)
class LabelData:
    """Printable label content without a surrogate id."""
    label_number: str  # ^[A-Z]+[0-9]+$
    material: str
    dimension: str
    lot_code: str
    weight: int
    date: str  # YYYY-MM-DD

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LabelRecord:
    """A label owned by the in-memory label store."""
    id: int  # process-local surrogate key
    label_number: str
    material: str
    dimension: str
    lot_code: str
    weight: int
    date: str

    @classmethod
    def from_data(cls, record_id: int, data: LabelData) -> LabelRecord:
        return cls(id=record_id, **asdict(data))

    @property
    def data(self) -> LabelData:
        values = asdict(self)
        values.pop("id")
        return LabelData(**values)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
