from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models.import_row import RawImportRow
from ..models.label_record import LabelData
from ..rounding import round_half_up

"""Label sequence generator.

Expands one group (an import row, or a manually filled form) into `quantity`
labels numbered sequentially from the group's starting identifier:

    A108 x 3  ->  A108, A109, A110

The aggregate weight is split evenly and rounded per label; the remainder is
not redistributed. Numbering restarts for every group from its own starting
identifier; there is no counter shared between groups, so expand() is a pure
function of its inputs.
"""

__all__ = [
    "LABEL_NUMBER_PATTERN",
    "DEFAULT_MATERIAL",
    "FormatError",
    "GenerationForm",
    "BatchResult",
    "parse_label_number",
    "expand",
    "generate_from_form",
    "generate_batch",
]

logger = logging.getLogger(__name__)

LABEL_NUMBER_PATTERN = re.compile(r"^([A-Z]+)(\d+)$")
DEFAULT_MATERIAL = "TARIMSAL"


class FormatError(ValueError):
    """Starting identifier does not match <LETTERS><DIGITS> (e.g. A108)."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"invalid label number format: {identifier!r} (expected e.g. A108)")


def parse_label_number(value: str) -> tuple[str, int]:
    """Split a label number into (prefix, number).

    >>> parse_label_number("A108")
    ('A', 108)
    """
    match = LABEL_NUMBER_PATTERN.match(value or "")
    if match is None:
        raise FormatError(value)
    return match.group(1), int(match.group(2))


@dataclass(frozen=True)
class GenerationForm:
    """Manual generation form (also the per-row override in multi-row mode)."""
    starting_value: str
    quantity: int
    aggregate_weight: float
    material: str
    dimension: str
    lot_code: str
    date: str

    @classmethod
    def from_row(cls, row: RawImportRow) -> GenerationForm:
        """Prefill the form from an extracted row."""
        return cls(
            starting_value=row.label_id,
            quantity=row.quantity,
            aggregate_weight=row.weight,
            material=row.project_name or DEFAULT_MATERIAL,
            dimension=row.dimension,
            lot_code=row.lot_code,
            date=row.date,
        )


@dataclass(frozen=True)
class BatchResult:
    """Outcome of a multi-row generation: labels plus the rows that were skipped.

    errors and skipped_rows are parallel: skipped_rows holds the sheet row
    number of each skipped row (None for rows built by hand).
    """
    labels: list[LabelData] = field(default_factory=list)
    errors: list[ValueError] = field(default_factory=list)
    skipped_rows: list[int | None] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.errors)


def expand(row: RawImportRow | GenerationForm, override: GenerationForm | None = None) -> list[LabelData]:
    """Expand one group into sequential labels.

    The override, when given, replaces every field of the row (it is the
    user's revised copy of the row's form).

    Raises:
        FormatError: starting identifier does not match the pattern
        ValueError: quantity is not a positive integer
    """
    form = override or (row if isinstance(row, GenerationForm) else GenerationForm.from_row(row))
    prefix, start = parse_label_number(form.starting_value)
    quantity = int(form.quantity)
    if quantity < 1:
        raise ValueError(f"quantity must be at least 1, got {form.quantity}")

    per_label_weight = round_half_up(float(form.aggregate_weight) / quantity)
    return [
        LabelData(
            label_number=f"{prefix}{start + k}",
            material=form.material,
            dimension=form.dimension,
            lot_code=form.lot_code,
            weight=per_label_weight,
            date=form.date,
        )
        for k in range(quantity)
    ]


def generate_from_form(form: GenerationForm) -> list[LabelData]:
    """Single-form mode: all or nothing, FormatError propagates to the caller."""
    labels = expand(form)
    logger.info(f"generated {len(labels)} labels from {form.starting_value}")
    return labels


def generate_batch(
    rows: Sequence[RawImportRow],
    overrides: dict[int, GenerationForm] | None = None,
) -> BatchResult:
    """Multi-row mode: expand each row, skipping rows that cannot be expanded.

    A row is skipped on a bad identifier (FormatError) or on a quantity below
    one coming from its override.

    overrides maps an index into `rows` to the user's edited form for that row.
    Valid rows still produce labels when a sibling fails (partial success).
    """
    overrides = overrides or {}
    labels: list[LabelData] = []
    errors: list[ValueError] = []
    skipped_rows: list[int | None] = []
    for index, row in enumerate(rows):
        try:
            labels.extend(expand(row, overrides.get(index)))
        except ValueError as e:
            logger.warning(f"row {row.source_row_number or index + 1} skipped: {e}")
            errors.append(e)
            skipped_rows.append(row.source_row_number)
    logger.info(f"generated {len(labels)} labels from {len(rows) - len(errors)}/{len(rows)} rows")
    return BatchResult(labels=labels, errors=errors, skipped_rows=skipped_rows)
