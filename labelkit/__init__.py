"""labelkit: inventory label catalog with spreadsheet import and sequential label generation."""

__version__ = "0.1.0"
