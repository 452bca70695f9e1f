"""Pytest configuration and shared fixtures."""

from unittest.mock import Mock

import pytest

from importpreview.preview import (
    FieldDescriptor,
    ImportLogEntry,
    ImportPreview,
    PreviewEvents,
    PreviewPayload,
)
from importpreview.schema import DocTypeMeta, SchemaField


@pytest.fixture
def item_meta() -> DocTypeMeta:
    """Item doctype named by its item code."""
    return DocTypeMeta(
        name="Item",
        autoname="field:item_code",
        fields=[
            SchemaField(fieldname="item_code", label="Item Code", reqd=True),
            SchemaField(fieldname="item_name", label="Item Name"),
            SchemaField(
                fieldname="item_group", label="Item Group", fieldtype="Link", options="Item Group"
            ),
            SchemaField(fieldname="description", label="Description", fieldtype="Text"),
            SchemaField(fieldname="sb_details", label="Details", fieldtype="Section Break"),
            SchemaField(
                fieldname="uoms", label="UOMs", fieldtype="Table", options="UOM Conversion Detail"
            ),
        ],
    )


@pytest.fixture
def item_fields() -> list[FieldDescriptor]:
    """Field descriptors of an Item upload, serial number first."""
    return [
        FieldDescriptor(label="Sr. No", parent="Item", skip_import=True),
        FieldDescriptor(fieldname="item_code", label="Item Code", parent="Item"),
        FieldDescriptor(fieldname="item_name", label="Item Name", parent="Item"),
        FieldDescriptor(label="Legacy Ref", parent="Item", skip_import=True),
        FieldDescriptor(fieldname="uom", label="UOM", parent="UOM Conversion Detail"),
    ]


@pytest.fixture
def item_payload(item_fields) -> PreviewPayload:
    """Preview data for three uploaded items."""
    return PreviewPayload(
        fields=item_fields,
        header_row=["Item Code", "Item Name", "Old Ref", "UOM"],
        data=[
            [1, "ITM-001", "Widget", None, "Nos"],
            [2, "ITM-002", None, "X-9", "Box"],
            [3, "ITM-003", "Bolt", "", None],
        ],
        warnings=["Row 2: Value missing for Item Name", "", "   "],
    )


@pytest.fixture
def import_log() -> list[ImportLogEntry]:
    """Rows 1 and 3 imported, row 2 failed."""
    return [
        ImportLogEntry(success=True, row_indexes=[1, 3], docname="ITM-001"),
        ImportLogEntry(success=False, row_indexes=[2], messages=["Item Group is required"]),
    ]


@pytest.fixture
def mock_events() -> PreviewEvents:
    """Controller callbacks recorded with mocks."""
    return PreviewEvents(remap_column=Mock(), skip_import=Mock())


@pytest.fixture
def preview(item_meta, item_payload, import_log, mock_events) -> ImportPreview:
    """A preview of the Item upload."""
    return ImportPreview(item_meta, item_payload, import_log=import_log, events=mock_events)
