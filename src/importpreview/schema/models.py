"""Data models for target record schemas."""

from typing import Optional
from pydantic import BaseModel, Field

# Field types that only shape the form layout and never hold a value
NO_VALUE_FIELD_TYPES = frozenset(
    {
        "Section Break",
        "Column Break",
        "Tab Break",
        "HTML",
        "Button",
        "Heading",
        "Image",
        "Fold",
    }
)


class SchemaField(BaseModel):
    """A single field of a doctype as declared by the schema store."""

    fieldname: str
    label: str
    fieldtype: str = "Data"
    options: Optional[str] = None  # Link target / child doctype / select values
    reqd: bool = False

    @property
    def holds_value(self) -> bool:
        return self.fieldtype not in NO_VALUE_FIELD_TYPES


class DocTypeMeta(BaseModel):
    """Metadata for a target record type."""

    name: str
    autoname: Optional[str] = None  # e.g. "field:item_code", "hash", "naming_series:"
    fields: list[SchemaField] = Field(default_factory=list)

    def naming_field(self) -> Optional[str]:
        """Return the fieldname bound by a ``field:`` naming rule, if any."""
        if self.autoname and self.autoname.startswith("field:"):
            return self.autoname[len("field:"):].strip() or None
        return None

    def get_field(self, fieldname: str) -> Optional[SchemaField]:
        for df in self.fields:
            if df.fieldname == fieldname:
                return df
        return None


class FieldOption(BaseModel):
    """An entry offered by the remap field picker."""

    label: str
    value: str


class UnknownDocTypeError(Exception):
    """Exception raised when a doctype has not been loaded into the registry."""

    pass
