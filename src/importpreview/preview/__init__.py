"""Import preview grid: column model, row annotation and user actions."""

from .models import (
    CellView,
    Column,
    ColumnKind,
    ColumnStyle,
    ColumnView,
    FieldDescriptor,
    ImportLogEntry,
    NoPreviewDataError,
    PreviewPayload,
    PreviewView,
    RemapDialog,
    RemapIntent,
    Row,
    SkipImportIntent,
    StaleColumnError,
    UnknownColumnError,
)
from .annotator import ImportLogIndex, normalize_rows, was_imported
from .builder import ColumnModelBuilder, build_columns, random_column_id
from .handlers import MutationHandlers, PreviewEvents, find_column
from .dialogs import RemapDialogHandler
from .session import ImportPreview, PreviewGrid, aggregate_warnings
from .cache import PreviewCache

__all__ = [
    "CellView",
    "Column",
    "ColumnKind",
    "ColumnStyle",
    "ColumnView",
    "FieldDescriptor",
    "ImportLogEntry",
    "NoPreviewDataError",
    "PreviewPayload",
    "PreviewView",
    "RemapDialog",
    "RemapIntent",
    "Row",
    "SkipImportIntent",
    "StaleColumnError",
    "UnknownColumnError",
    "ImportLogIndex",
    "normalize_rows",
    "was_imported",
    "ColumnModelBuilder",
    "build_columns",
    "random_column_id",
    "MutationHandlers",
    "PreviewEvents",
    "find_column",
    "RemapDialogHandler",
    "ImportPreview",
    "PreviewGrid",
    "aggregate_warnings",
    "PreviewCache",
]
