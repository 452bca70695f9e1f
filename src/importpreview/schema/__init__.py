"""Target record schema collaborators."""

from .models import (
    DocTypeMeta,
    FieldOption,
    SchemaField,
    UnknownDocTypeError,
)
from .registry import SchemaRegistry, column_picker_options

__all__ = [
    "DocTypeMeta",
    "FieldOption",
    "SchemaField",
    "UnknownDocTypeError",
    "SchemaRegistry",
    "column_picker_options",
]
