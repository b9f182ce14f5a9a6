from __future__ import annotations

from ..models.extraction_result import ExtractionResult
from .generator import BatchResult

"""Summary line rendering for an import run.

Format:
SUMMARY sheet={sheet} rows={rows} selected={selected} labels={labels}
skipped={skipped} fallback={yes|no}
"""


def render_summary_line(result: ExtractionResult, batch: BatchResult | None, selected: int = 0) -> str:
    """Render the SUMMARY line of an import run.

    Examples:
        >>> from labelkit.models.extraction_result import ExtractionResult
        >>> render_summary_line(ExtractionResult(rows=[], sheet_name="DİLME PLANLARI"), None)
        'SUMMARY sheet=DİLME PLANLARI rows=0 selected=0 labels=0 skipped=0 fallback=no'
    """
    sheet = result.sheet_name if result.sheet_name is not None else "-"
    labels = len(batch.labels) if batch is not None else 0
    skipped = batch.skipped if batch is not None else 0
    return (
        f"SUMMARY sheet={sheet} "
        f"rows={len(result.rows)} "
        f"selected={selected} "
        f"labels={labels} "
        f"skipped={skipped} "
        f"fallback={'yes' if result.used_fallback else 'no'}"
    )
