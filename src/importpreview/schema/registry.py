"""In-memory lookup of doctype metadata."""

import logging
from typing import Optional

from ..config import settings
from .models import DocTypeMeta, FieldOption, UnknownDocTypeError

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Holds doctype metadata loaded before a preview is built."""

    def __init__(self, metas: Optional[list[DocTypeMeta]] = None):
        self._metas: dict[str, DocTypeMeta] = {}
        for meta in metas or []:
            self.register(meta)

    def register(self, meta: DocTypeMeta) -> DocTypeMeta:
        """Add or replace the metadata for a doctype."""
        self._metas[meta.name] = meta
        logger.info(f"Registered doctype '{meta.name}' with {len(meta.fields)} fields")
        return meta

    def get(self, doctype: str) -> DocTypeMeta:
        """
        Look up a doctype by name.

        Raises:
            UnknownDocTypeError: If the doctype was never registered
        """
        meta = self._metas.get(doctype)
        if meta is None:
            raise UnknownDocTypeError(f"Doctype '{doctype}' is not loaded")
        return meta

    def has(self, doctype: str) -> bool:
        return doctype in self._metas

    def names(self) -> list[str]:
        return sorted(self._metas)


def column_picker_options(meta: DocTypeMeta) -> list[FieldOption]:
    """
    List the fields a column can be remapped to.

    Layout-only fields are left out; the identifier field, when the
    naming rule binds one, is labelled the same way its column would be.
    """
    naming_field = meta.naming_field()
    options = []
    for df in meta.fields:
        if not df.holds_value:
            continue
        label = df.label
        if df.fieldname == naming_field:
            label = f"{settings.identifier_label} ({df.label})"
        options.append(FieldOption(label=label, value=df.fieldname))
    return options
