"""Data models for the import preview grid."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


# A row is a list of cell values aligned to column order; cell 0 is the serial number
Row = list[Any]


class ColumnKind(str, Enum):
    """Classification of a preview column."""

    MAPPED = "mapped"  # Imported into the field named by the column id
    SKIPPED = "skipped"  # Shown for reference, never treated as data


class FieldDescriptor(BaseModel):
    """A field of the import template, index-aligned with the header row."""

    fieldname: str = ""
    label: str
    parent: str  # Doctype owning the field (differs from target for child tables)
    skip_import: bool = False


class Column(BaseModel):
    """A column of the preview grid."""

    id: str
    title: str
    header_index: int  # Position in the uploaded header row, -1 for the serial column
    kind: ColumnKind
    editable: bool
    focusable: bool
    is_serial: bool = False
    source_header: Optional[str] = None  # Header text as uploaded, when known
    descriptor: FieldDescriptor

    @property
    def mapped(self) -> bool:
        return self.kind == ColumnKind.MAPPED

    @property
    def fieldname(self) -> Optional[str]:
        return self.descriptor.fieldname if self.mapped else None


class ImportLogEntry(BaseModel):
    """Outcome of one previous import attempt."""

    success: bool
    row_indexes: list[Any] = Field(default_factory=list)  # Serial numbers covered
    docname: Optional[str] = None
    messages: list[str] = Field(default_factory=list)


class PreviewPayload(BaseModel):
    """Raw preview data handed over by the import controller."""

    fields: list[FieldDescriptor]
    data: list[list[Any]] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    header_row: list[Any] = Field(default_factory=list)


class RemapIntent(BaseModel):
    """Request to map an uploaded column onto another field."""

    header_index: int
    fieldname: str
    created_at: datetime = Field(default_factory=_utc_now)


class SkipImportIntent(BaseModel):
    """Request to leave an uploaded column out of the import."""

    header_index: int
    created_at: datetime = Field(default_factory=_utc_now)


class RemapDialog(BaseModel):
    """A pending field-picker dialog opened for one column."""

    dialog_id: str
    header_index: int
    column_id: str
    title: str
    generation: int  # Model generation the dialog was opened against
    created_at: datetime = Field(default_factory=_utc_now)


class CellView(BaseModel):
    """Presentation of a single grid cell."""

    value: Any = ""
    muted: bool = False
    imported: bool = False  # Serial cell of a row already imported successfully
    background: Optional[str] = None


class ColumnStyle(BaseModel):
    """Presentation hints for a column header and its cells."""

    header_background: Optional[str] = None
    header_color: Optional[str] = None
    cell_background: Optional[str] = None


class NoPreviewDataError(Exception):
    """Exception raised when a preview has no field descriptors to build from."""

    pass


class UnknownColumnError(Exception):
    """Exception raised when a header index matches no current column."""

    def __init__(self, header_index: int):
        self.header_index = header_index
        super().__init__(f"No column with header index {header_index}")


class StaleColumnError(Exception):
    """Exception raised when a dialog outlived the column model it was opened on."""

    def __init__(self, dialog: RemapDialog, generation: int):
        self.dialog = dialog
        self.generation = generation
        super().__init__(
            f"Remap dialog {dialog.dialog_id} was opened on preview generation "
            f"{dialog.generation}, current generation is {generation}"
        )


class ColumnView(BaseModel):
    """A column as handed to the grid widget."""

    id: str
    title: str
    header_index: int
    kind: ColumnKind
    editable: bool
    focusable: bool
    is_serial: bool = False
    source_header: Optional[str] = None
    style: ColumnStyle


class PreviewView(BaseModel):
    """Everything the grid widget needs to draw the preview."""

    doctype: str
    generation: int
    columns: list[ColumnView]
    rows: list[list[CellView]]
    warnings: list[str] = Field(default_factory=list)
    options: dict[str, Any] = Field(default_factory=dict)
