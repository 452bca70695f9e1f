"""Import preview session: column model, live grid and user actions."""

import copy
import logging
from typing import Any, Iterable, Optional

from ..schema import DocTypeMeta
from .annotator import ImportLogIndex, normalize_rows
from .builder import ColumnModelBuilder
from .dialogs import RemapDialogHandler
from .handlers import MutationHandlers, PreviewEvents
from .models import (
    CellView,
    Column,
    ColumnView,
    ImportLogEntry,
    PreviewPayload,
    PreviewView,
    RemapDialog,
    RemapIntent,
    Row,
    SkipImportIntent,
)
from .styling import column_style, format_cell, grid_options

logger = logging.getLogger(__name__)


def aggregate_warnings(warnings: Iterable[Optional[str]]) -> list[str]:
    """Collect the preview warnings to show above the grid, in order."""
    return [warning for warning in warnings if warning and warning.strip()]


class PreviewGrid:
    """Live cell content of the grid, edited in place by the user."""

    def __init__(self, rows: Optional[list[Row]] = None):
        self._rows: list[Row] = copy.deepcopy(rows or [])

    def refresh(self, rows: list[Row]):
        """Replace all content, dropping any edits."""
        self._rows = copy.deepcopy(rows)

    def append_row(self, width: int):
        self._rows.append([""] * width)

    def set_cell(self, row_index: int, column_index: int, value: Any):
        row = self._rows[row_index]
        if column_index >= len(row):
            row.extend([""] * (column_index + 1 - len(row)))
        row[column_index] = value

    def get_rows(self) -> list[Row]:
        """Return a copy of the current content."""
        return [list(row) for row in self._rows]

    def row(self, row_index: int) -> Row:
        return self._rows[row_index]

    def __len__(self) -> int:
        return len(self._rows)


class ImportPreview:
    """
    Editable preview of an import against a target doctype.

    The preview is rebuilt from scratch on every refresh. Remap and skip
    actions are forwarded to the controller through ``events`` and do not
    touch the columns; rows added and cells edited locally only live until
    the next refresh.
    """

    def __init__(
        self,
        meta: DocTypeMeta,
        preview_data: PreviewPayload,
        import_log: Optional[list[ImportLogEntry]] = None,
        events: Optional[PreviewEvents] = None,
        builder: Optional[ColumnModelBuilder] = None,
    ):
        self.meta = meta
        self.preview_data = preview_data
        self.import_log: list[ImportLogEntry] = list(import_log or [])
        self.builder = builder or ColumnModelBuilder()
        self.handlers = MutationHandlers(events)
        self.dialogs = RemapDialogHandler()

        self.generation = 0
        self.columns: list[Column] = []
        self.data: list[Row] = []
        self.warnings: list[str] = []
        self.grid = PreviewGrid()
        self.log_index = ImportLogIndex()

        self.refresh()

    @property
    def doctype(self) -> str:
        return self.meta.name

    def refresh(
        self,
        preview_data: Optional[PreviewPayload] = None,
        import_log: Optional[list[ImportLogEntry]] = None,
    ):
        """
        Rebuild columns and rows from preview data.

        Args:
            preview_data: New preview data (keeps the current one if omitted)
            import_log: New import log (keeps the current one if omitted)

        Raises:
            NoPreviewDataError: If the preview data has no fields; the
                preview is left as it was
        """
        preview_data = self.preview_data if preview_data is None else preview_data
        import_log = self.import_log if import_log is None else list(import_log)

        columns = self.builder.build(preview_data.fields, self.meta, preview_data.header_row)
        data = normalize_rows(preview_data.data)

        self.preview_data = preview_data
        self.import_log = import_log
        self.columns = columns
        self.data = data
        self.warnings = aggregate_warnings(preview_data.warnings)
        self.log_index = ImportLogIndex(import_log)
        self.grid.refresh(data)
        self.generation += 1

        logger.info(
            f"Refreshed preview of '{self.doctype}' (generation {self.generation}): "
            f"{len(columns)} columns, {len(data)} rows, {len(self.warnings)} warnings"
        )

    # User actions

    def add_row(self):
        """Append a blank row to the grid."""
        self.grid.append_row(len(self.columns))

    def set_cell(self, row_index: int, column_index: int, value: Any):
        """
        Edit a cell of the live grid.

        Raises:
            IndexError: If the cell is outside the grid or its column is not editable
        """
        if not 0 <= row_index < len(self.grid):
            raise IndexError(f"Row {row_index} is outside the preview")
        if not 0 <= column_index < len(self.columns):
            raise IndexError(f"Column {column_index} is outside the preview")
        if not self.columns[column_index].editable:
            raise IndexError(f"Column {column_index} is not editable")
        self.grid.set_cell(row_index, column_index, value)

    def remap_column(self, header_index: int, fieldname: Optional[str]) -> Optional[RemapIntent]:
        return self.handlers.remap_column(self.columns, header_index, fieldname)

    def skip_import(self, header_index: int) -> Optional[SkipImportIntent]:
        return self.handlers.skip_import(self.columns, header_index)

    def open_remap_dialog(self, header_index: int) -> RemapDialog:
        return self.dialogs.open(self.columns, header_index, self.generation)

    def confirm_remap(self, dialog_id: str, fieldname: Optional[str]) -> Optional[RemapIntent]:
        return self.dialogs.confirm(
            dialog_id, fieldname, self.columns, self.generation, self.handlers
        )

    def cancel_remap(self, dialog_id: str) -> bool:
        return self.dialogs.cancel(dialog_id)

    # Reading

    def was_imported(self, row: Row) -> bool:
        return self.log_index.was_imported(row)

    def render_cell(self, row_index: int, column_index: int) -> CellView:
        row = self.grid.row(row_index)
        column = self.columns[column_index]
        value = row[column_index] if column_index < len(row) else ""
        return format_cell(value, row, column, self.log_index)

    def to_flat_rows(self) -> list[list[Any]]:
        """Current grid content as plain rows, skipped columns included."""
        return self.grid.get_rows()

    def view(self) -> PreviewView:
        columns = [
            ColumnView(
                id=column.id,
                title=column.title,
                header_index=column.header_index,
                kind=column.kind,
                editable=column.editable,
                focusable=column.focusable,
                is_serial=column.is_serial,
                source_header=column.source_header,
                style=column_style(column),
            )
            for column in self.columns
        ]
        rows = [
            [self.render_cell(i, j) for j in range(len(self.columns))]
            for i in range(len(self.grid))
        ]
        return PreviewView(
            doctype=self.doctype,
            generation=self.generation,
            columns=columns,
            rows=rows,
            warnings=self.warnings,
            options=grid_options(),
        )
