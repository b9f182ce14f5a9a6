from __future__ import annotations

import pytest

from labelkit.models.layout import CellField, FieldRole, SheetLayout, default_layout


def test_default_layout_table():
    layout = default_layout()

    anchors = layout.anchors()
    assert (anchors["project_name"].row, anchors["project_name"].column) == (4, 2)
    assert (anchors["reference_date"].row, anchors["reference_date"].column) == (6, 21)
    assert {name: f.column for name, f in layout.keys().items()} == {"label_id": 22, "lot_code": 2}
    assert layout.attributes()["thickness"].column == 5
    groups = {name: [f.column for f in fields] for name, fields in layout.groups().items()}
    assert groups == {"dimension": [9, 12, 15], "weight": [10, 13, 16], "quantity": [8, 11, 14]}
    assert (layout.start_row, layout.end_row) == (7, 20)


def test_lot_and_auto_id_synthesis():
    layout = default_layout()
    assert layout.synthesize_lot_code(12) == "25/612"
    assert layout.auto_label_id(0) == "AUTO-1"


def test_layout_requires_all_groups():
    fields = tuple(f for f in default_layout().fields if f.name != "weight")
    with pytest.raises(ValueError):
        SheetLayout(fields=fields)


def test_layout_requires_key_field():
    fields = tuple(f for f in default_layout().fields if f.role is not FieldRole.KEY)
    with pytest.raises(ValueError):
        SheetLayout(fields=fields)


def test_layout_rejects_bad_window():
    with pytest.raises(ValueError):
        SheetLayout(start_row=10, end_row=5)


def test_cell_field_defaults_to_row_offset_zero():
    assert CellField("thickness", 5, FieldRole.ATTRIBUTE).row == 0
