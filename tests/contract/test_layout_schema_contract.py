from __future__ import annotations

import json

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from labelkit.config.loader import SCHEMA_PATH

"""Layout schema contract: the shipped example layout validates, bad ones do not."""

EXAMPLE_LAYOUT = SCHEMA_PATH.parents[2] / "config" / "layout.example.yml"


@pytest.fixture()
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_layout_schema_valid_example(schema):
    jsonschema.validate({}, schema)
    jsonschema.validate(
        {
            "sheet_markers": ["DİLME PLANLARI"],
            "scan": {"start_row": 7, "end_row": 20},
            "anchors": {"project_name": {"row": 4, "column": 2}},
            "row_fields": {"label_id": {"column": 22, "role": "key"}},
            "groups": {"dimension": [9, 12, 15]},
            "defaults": {"lot_prefix": "25/", "lot_base": 600},
            "fallback": {"label_id": "A108", "weight": 6005, "quantity": 7},
        },
        schema,
    )


@pytest.mark.skipif(not EXAMPLE_LAYOUT.exists(), reason="example layout not shipped with the package")
def test_example_layout_file_is_valid(schema):
    data = yaml.safe_load(EXAMPLE_LAYOUT.read_text(encoding="utf-8"))
    jsonschema.validate(data, schema)


@pytest.mark.parametrize(
    "data",
    [
        {"unknown": 1},
        {"scan": {"start_row": -1}},
        {"anchors": {"project_name": {"row": 4}}},
        {"row_fields": {"label_id": {"column": 22, "role": "group"}}},
        {"groups": {"colour": [1]}},
        {"groups": {"weight": []}},
        {"fallback": {"quantity": 0}},
        {"sheet_markers": []},
    ],
)
def test_layout_schema_rejects(schema, data):
    with pytest.raises(ValidationError):
        jsonschema.validate(data, schema)
