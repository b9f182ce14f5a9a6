from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pandas as pd

from labelkit.config.loader import ConfigError, load_layout, load_settings
from labelkit.logging.error_log import ErrorLogBuffer
from labelkit.logging.init import log_summary, set_debug, setup_logging
from labelkit.models.extraction_result import ExtractionResult
from labelkit.services.import_session import EmptySelectionError, ImportSession
from labelkit.services.label_store import LabelStore
from labelkit.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load settings (.env) and the sheet layout
- Extract the preview rows of the workbook (fallback row on failure)
- --inspect-data: print the rows and exit
- Otherwise generate labels for the selected rows (all by default), optionally
  write them to CSV, and log the SUMMARY line
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2

PREVIEW_COLUMNS = ["label_id", "project_name", "lot_code", "dimension", "weight", "quantity", "date"]


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="labelkit", description="Cutting plans workbook -> inventory labels")
    p.add_argument("workbook", type=Path, help="Workbook (.xlsx) to import")
    p.add_argument("--layout", type=Path, default=None, help="Sheet layout YAML (default: config/layout.yml)")
    p.add_argument("--rows", default=None, help="Preview rows to generate, 1-based, comma separated (default: all)")
    p.add_argument("--start", default=None, help="Starting label number for a single selected row (e.g. A108)")
    p.add_argument("--output", type=Path, default=None, help="Write generated labels to this CSV file")
    p.add_argument("--inspect-data", action="store_true", help="Print extracted rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _parse_rows(value: str) -> list[int]:
    """'1,3' -> [0, 2] (0-based preview indices)."""
    indices = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit() or int(part) < 1:
            raise ValueError(f"invalid row number: {part!r}")
        indices.append(int(part) - 1)
    if not indices:
        raise ValueError("no rows given")
    return indices


def _inspect_data(result: ExtractionResult) -> int:
    print(f"SHEET: {result.sheet_name if result.sheet_name is not None else '-'}")
    if result.warning:
        print(f"  warning: {result.warning}")
    frame = pd.DataFrame(
        [{c: getattr(r, c) for c in PREVIEW_COLUMNS} for r in result.rows],
        columns=PREVIEW_COLUMNS,
    )
    frame.index = range(1, len(frame) + 1)
    print(frame.to_string())
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when argv is None; an explicit [] means no arguments.
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    settings = load_settings()
    try:
        layout = load_layout(args.layout or settings.layout_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if not args.workbook.exists():
        logger.error(f"workbook not found: {args.workbook}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer(settings.log_dir)
    store = LabelStore()
    session = ImportSession(store, layout, error_log)
    result = session.load(args.workbook)
    if result.warning:
        logger.warning(f"notice: {result.warning}")

    try:
        if args.inspect_data:
            return _inspect_data(result)

        try:
            if args.rows:
                session.select(_parse_rows(args.rows))
            else:
                session.select_all()
        except (ValueError, IndexError) as e:
            logger.error(f"rows: {e}")
            return EXIT_FATAL

        if args.start:
            if len(session.selected) != 1:
                logger.error("--start needs exactly one selected row")
                return EXIT_FATAL
            session.edit(session.selected[0], label_id=args.start.strip().upper())

        try:
            batch, records = session.generate()
        except EmptySelectionError as e:
            logger.error(f"generate: {e}")
            return EXIT_FATAL

        if records:
            logger.info(f"{len(records)} labels, total weight {store.total_weight(records)}")

        if args.output is not None and records:
            pd.DataFrame([r.to_dict() for r in records]).to_csv(args.output, index=False)
            logger.info(f"wrote {len(records)} labels to {args.output}")

        log_summary(render_summary_line(result, batch, len(session.selected))[len("SUMMARY "):])

        if not records:
            return EXIT_FATAL
        if result.used_fallback or batch.skipped:
            return EXIT_PARTIAL
        return EXIT_SUCCESS
    finally:
        counts = error_log.counts()
        path = error_log.flush()
        if path is not None:
            breakdown = " ".join(f"{k}={v}" for k, v in sorted(counts.items()))
            logger.info(f"error log: {path} ({breakdown})")

