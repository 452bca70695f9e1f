"""Column model construction from field descriptors."""

import logging
import uuid
from typing import Any, Callable, Optional, Sequence

from ..config import settings
from ..schema import DocTypeMeta
from .models import Column, ColumnKind, FieldDescriptor, NoPreviewDataError

logger = logging.getLogger(__name__)


def random_column_id(length: Optional[int] = None) -> str:
    """Generate an opaque identity for a column that maps to no field."""
    length = length or settings.column_id_length
    return uuid.uuid4().hex[:length]


class ColumnModelBuilder:
    """
    Builds the ordered column model of an import preview.

    One column is produced per field descriptor, in descriptor order. The
    descriptor at position ``i`` sits at ``i - 1`` in the uploaded header
    row; position 0 is the synthetic serial-number column.
    """

    def __init__(self, id_factory: Optional[Callable[[], str]] = None):
        self.id_factory = id_factory or random_column_id

    def build(
        self,
        fields: Sequence[FieldDescriptor],
        meta: DocTypeMeta,
        header_row: Optional[Sequence[Any]] = None,
    ) -> list[Column]:
        """
        Build columns for the target doctype.

        Args:
            fields: Field descriptors, index 0 being the serial-number descriptor
            meta: Metadata of the target doctype (only its naming rule is read)
            header_row: Uploaded header labels, used for display only

        Returns:
            Columns in descriptor order

        Raises:
            NoPreviewDataError: If there are no field descriptors
            ValueError: If two mapped descriptors share a fieldname
        """
        if not fields:
            raise NoPreviewDataError(f"No fields to preview for '{meta.name}'")

        header_row = list(header_row or [])
        used_ids: set[str] = set()
        fieldnames = {df.fieldname for df in fields if not df.skip_import}
        columns = []

        for i, df in enumerate(fields):
            header_index = i - 1
            source_header = None
            if 0 <= header_index < len(header_row) and header_row[header_index] is not None:
                source_header = str(header_row[header_index])

            if df.skip_import:
                column = self._skipped_column(df, i, header_index, used_ids | fieldnames)
            else:
                column = self._mapped_column(df, header_index, meta)
                if column.id in used_ids:
                    raise ValueError(
                        f"Field '{df.fieldname}' is mapped to more than one column"
                    )

            column.source_header = source_header
            used_ids.add(column.id)
            columns.append(column)

        skipped = sum(1 for column in columns if not column.mapped)
        logger.info(
            f"Built {len(columns)} columns for '{meta.name}' "
            f"({len(columns) - skipped} mapped, {skipped} skipped)"
        )
        return columns

    def _skipped_column(
        self,
        df: FieldDescriptor,
        position: int,
        header_index: int,
        taken: set[str],
    ) -> Column:
        column_id = self.id_factory()
        while column_id in taken:
            column_id = self.id_factory()

        return Column(
            id=column_id,
            title=df.label,
            header_index=header_index,
            kind=ColumnKind.SKIPPED,
            editable=False,
            focusable=False,
            is_serial=position == 0 and df.label == settings.serial_no_label,
            descriptor=df,
        )

    def _mapped_column(
        self, df: FieldDescriptor, header_index: int, meta: DocTypeMeta
    ) -> Column:
        title = df.label
        if df.parent != meta.name:
            title = f"{df.label} ({df.parent})"
        if meta.naming_field() == df.fieldname:
            title = f"{settings.identifier_label} ({df.label})"

        return Column(
            id=df.fieldname,
            title=title,
            header_index=header_index,
            kind=ColumnKind.MAPPED,
            editable=True,
            focusable=True,
            descriptor=df,
        )


def build_columns(
    fields: Sequence[FieldDescriptor],
    meta: DocTypeMeta,
    header_row: Optional[Sequence[Any]] = None,
) -> list[Column]:
    """Build a column model with the default id generator."""
    return ColumnModelBuilder().build(fields, meta, header_row)
