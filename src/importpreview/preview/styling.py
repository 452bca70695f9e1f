"""Presentation hints for preview columns and cells."""

from typing import Any, Callable

from ..config import settings
from .annotator import ImportLogIndex
from .models import CellView, Column, ColumnKind, ColumnStyle, Row

# Shade tokens of the UI palette, "<color>-<shade>"
MAPPED_HEADER = ColumnStyle(
    header_background="green-extra-light",
    header_color="green-dark",
)
SKIPPED_HEADER = ColumnStyle(
    header_background="orange-extra-light",
    header_color="orange-dark",
    cell_background="white-light",
)
SERIAL_HEADER = ColumnStyle()

IMPORT_SUCCESS_ICON = {"name": "checkbox-circle-line", "fill": "green-dark", "width": "16px"}

HEADER_ACTIONS = [
    {"action": "remap_column", "label": "Remap Column"},
    {"action": "skip_import", "label": "Skip Import"},
]


def column_style(column: Column) -> ColumnStyle:
    """Header and cell colors for a column."""
    if column.mapped:
        return MAPPED_HEADER
    if column.is_serial:
        return SERIAL_HEADER
    return SKIPPED_HEADER


def _format_mapped(value: Any, row: Row, column: Column, log_index: ImportLogIndex) -> CellView:
    return CellView(value=value)


def _format_skipped(value: Any, row: Row, column: Column, log_index: ImportLogIndex) -> CellView:
    return CellView(
        value=value,
        muted=True,
        imported=column.is_serial and log_index.was_imported(row),
        background=column_style(column).cell_background,
    )


CELL_FORMATTERS: dict[ColumnKind, Callable[[Any, Row, Column, ImportLogIndex], CellView]] = {
    ColumnKind.MAPPED: _format_mapped,
    ColumnKind.SKIPPED: _format_skipped,
}


def format_cell(value: Any, row: Row, column: Column, log_index: ImportLogIndex) -> CellView:
    """Render a cell with the formatter registered for its column kind."""
    return CELL_FORMATTERS[column.kind](value, row, column, log_index)


def grid_options() -> dict:
    """Options handed to the grid widget."""
    return {
        "layout": "fixed",
        "cell_height": settings.grid_cell_height,
        "serial_no_column": False,
        "checkbox_column": False,
        "paste_from_clipboard": True,
        "header_actions": HEADER_ACTIONS,
        "import_success_icon": IMPORT_SUCCESS_ICON,
    }
