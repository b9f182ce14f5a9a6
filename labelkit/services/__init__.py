"""Generation, import session and label store services."""

from .generator import BatchResult, FormatError, GenerationForm, expand, generate_batch, generate_from_form
from .import_session import EmptySelectionError, ImportSession
from .label_store import LabelNotFoundError, LabelStore

__all__ = [
    "BatchResult",
    "FormatError",
    "GenerationForm",
    "expand",
    "generate_batch",
    "generate_from_form",
    "EmptySelectionError",
    "ImportSession",
    "LabelNotFoundError",
    "LabelStore",
]
