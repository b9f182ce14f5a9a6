from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models.label_record import LabelData, LabelRecord
from .generator import FormatError, LABEL_NUMBER_PATTERN

"""In-memory label collection.

Owns the LabelRecord list for one session. Surrogate ids are assigned here as
max(existing ids, 0) + offset, so ids never collide within a session even
after deletes. Nothing is persisted.
"""

__all__ = [
    "LabelNotFoundError",
    "LabelStore",
    "normalize_label_number",
]

logger = logging.getLogger(__name__)


class LabelNotFoundError(KeyError):
    """No label with the given id."""


def normalize_label_number(value: str) -> str:
    """Strip and upper-case a manually entered label number, then check its format."""
    normalized = (value or "").strip().upper()
    if not LABEL_NUMBER_PATTERN.match(normalized):
        raise FormatError(value)
    return normalized


def _normalized(data: LabelData) -> LabelData:
    number = normalize_label_number(data.label_number)
    if number == data.label_number:
        return data
    return LabelData(
        label_number=number,
        material=data.material,
        dimension=data.dimension,
        lot_code=data.lot_code,
        weight=data.weight,
        date=data.date,
    )


class LabelStore:
    """Label collection of one session; ids and order are kept stable across updates."""

    def __init__(self) -> None:
        self._labels: list[LabelRecord] = []

    def __len__(self) -> int:
        return len(self._labels)

    def _next_id_base(self) -> int:
        return max((label.id for label in self._labels), default=0)

    def _index_of(self, label_id: int) -> int:
        for i, label in enumerate(self._labels):
            if label.id == label_id:
                return i
        raise LabelNotFoundError(label_id)

    def create(self, data: LabelData) -> LabelRecord:
        record = LabelRecord.from_data(self._next_id_base() + 1, _normalized(data))
        self._labels.append(record)
        logger.debug(f"label created id={record.id} number={record.label_number}")
        return record

    def update(self, label_id: int, data: LabelData) -> LabelRecord:
        i = self._index_of(label_id)
        record = LabelRecord.from_data(label_id, _normalized(data))
        self._labels[i] = record
        logger.debug(f"label updated id={label_id}")
        return record

    def delete(self, label_id: int) -> None:
        i = self._index_of(label_id)
        del self._labels[i]
        logger.debug(f"label deleted id={label_id}")

    def get(self, label_id: int) -> LabelRecord:
        return self._labels[self._index_of(label_id)]

    def list(self) -> list[LabelRecord]:
        return list(self._labels)

    def bulk_insert(self, datas: Iterable[LabelData]) -> list[LabelRecord]:
        """Insert generated labels; ids are base + 1, base + 2, ...

        Every label number is checked before anything is inserted.
        """
        normalized = [_normalized(d) for d in datas]
        base = self._next_id_base()
        records = [LabelRecord.from_data(base + offset, d) for offset, d in enumerate(normalized, start=1)]
        self._labels.extend(records)
        logger.info(f"{len(records)} labels added")
        return records

    def search(self, term: str) -> list[LabelRecord]:
        """Case-insensitive match on label number, material or lot code."""
        needle = term.strip().lower()
        if not needle:
            return self.list()
        return [
            label
            for label in self._labels
            if needle in label.label_number.lower()
            or needle in label.material.lower()
            or needle in label.lot_code.lower()
        ]

    def total_weight(self, labels: Iterable[LabelRecord] | None = None) -> int:
        """Summed weight of `labels` (e.g. a search result), or of the whole collection."""
        return sum(label.weight for label in (self._labels if labels is None else labels))

    def clear(self) -> None:
        self._labels.clear()
