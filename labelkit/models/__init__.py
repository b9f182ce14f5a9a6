"""Domain models for the label catalog.

This package contains the dataclasses shared by the sheet extractor, the label
sequence generator and the in-memory label store.
"""

from .extraction_result import ExtractionResult
from .import_row import RawImportRow
from .label_record import LabelData, LabelRecord
from .layout import CellField, FieldRole, SheetLayout, default_layout

__all__ = [
    # Layout models
    "CellField",
    "FieldRole",
    "SheetLayout",
    "default_layout",
    # Import models
    "RawImportRow",
    "ExtractionResult",
    # Label models
    "LabelData",
    "LabelRecord",
]
