from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from dotenv import load_dotenv
from jsonschema.exceptions import ValidationError

from ..models.layout import CellField, FieldRole, SheetLayout, default_layout

"""Configuration loading.

Responsibilities:
- Load an optional YAML sheet layout (config/layout.yml) and validate it
  against the bundled JSON schema
- Merge the layout over the built-in default: every section present in the
  YAML replaces the matching part of the default, missing sections keep it
- Read runtime settings from the environment (.env via python-dotenv)
"""

SCHEMA_PATH = Path(__file__).with_name("layout_schema.json")
DEFAULT_LAYOUT_PATH = Path("config/layout.yml")

ENV_LAYOUT = "LABELKIT_LAYOUT"
ENV_LOG_DIR = "LABELKIT_LOG_DIR"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    layout_path: Path | None
    log_dir: Path


def _validate_layout_schema(data: dict[str, Any]) -> None:
    """Validate layout data against the JSON schema.

    Raises:
        ConfigError: the schema file is missing or not valid JSON, or the
            layout fails validation (unknown keys, wrong types, ...)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"layout schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"layout validation failed: {e.message}") from e


def _merge_fields(base: SheetLayout, data: dict[str, Any]) -> tuple[CellField, ...]:
    fields = list(base.fields)

    if "anchors" in data:
        fields = [f for f in fields if f.role is not FieldRole.ANCHOR]
        fields.extend(
            CellField(name, spec["column"], FieldRole.ANCHOR, row=spec["row"])
            for name, spec in data["anchors"].items()
        )

    if "row_fields" in data:
        fields = [f for f in fields if f.role not in (FieldRole.KEY, FieldRole.ATTRIBUTE)]
        for name, spec in data["row_fields"].items():
            role = FieldRole.KEY if spec["role"] == "key" else FieldRole.ATTRIBUTE
            fields.append(CellField(name, spec["column"], role, row=spec.get("row_offset", 0)))

    for group_name, columns in data.get("groups", {}).items():
        fields = [f for f in fields if not (f.role is FieldRole.GROUP and f.name == group_name)]
        fields.extend(CellField(group_name, col, FieldRole.GROUP) for col in columns)

    return tuple(fields)


def layout_from_dict(data: dict[str, Any], base: SheetLayout | None = None) -> SheetLayout:
    """Build a SheetLayout from validated layout data."""
    base = base or default_layout()
    scan = data.get("scan", {})
    defaults = data.get("defaults", {})
    fallback = replace(base.fallback, **data["fallback"]) if "fallback" in data else base.fallback
    try:
        return SheetLayout(
            fields=_merge_fields(base, data),
            sheet_markers=tuple(data.get("sheet_markers", base.sheet_markers)),
            start_row=scan.get("start_row", base.start_row),
            end_row=scan.get("end_row", base.end_row),
            default_project_name=defaults.get("project_name", base.default_project_name),
            lot_prefix=defaults.get("lot_prefix", base.lot_prefix),
            lot_base=defaults.get("lot_base", base.lot_base),
            auto_label_prefix=defaults.get("auto_label_prefix", base.auto_label_prefix),
            fallback=fallback,
        )
    except ValueError as e:
        raise ConfigError(f"invalid layout: {e}") from e


def load_layout(path: Path | None = None) -> SheetLayout:
    """Load the sheet layout.

    With no path the default layout file is used when it exists, otherwise
    the built-in layout. An explicit path must exist.
    """
    if path is None:
        if not DEFAULT_LAYOUT_PATH.exists():
            return default_layout()
        path = DEFAULT_LAYOUT_PATH
    if not path.exists():
        raise ConfigError(f"layout file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"layout must be a mapping, got {type(data).__name__}")

    _validate_layout_schema(data)
    return layout_from_dict(data)


def load_settings(env_file: Path | None = None) -> Settings:
    """Read runtime settings, letting values from .env override the process environment."""
    env_path = env_file if env_file is not None else Path(".env")
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=True)
    layout = os.getenv(ENV_LAYOUT)
    return Settings(
        layout_path=Path(layout) if layout else None,
        log_dir=Path(os.getenv(ENV_LOG_DIR, "logs")),
    )
