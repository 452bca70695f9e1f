"""Remap and skip-import actions on preview columns."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .models import Column, RemapIntent, SkipImportIntent

logger = logging.getLogger(__name__)


@dataclass
class PreviewEvents:
    """Callbacks of the controller that owns the mapping configuration."""

    remap_column: Optional[Callable[[int, str], None]] = None
    skip_import: Optional[Callable[[int], None]] = None


def find_column(columns: Sequence[Column], header_index: int) -> Optional[Column]:
    """Return the column sitting at a header index, if any."""
    for column in columns:
        if column.header_index == header_index:
            return column
    return None


class MutationHandlers:
    """
    Turns header actions into intents for the controller.

    Neither action changes the column model: the controller persists the
    new mapping and hands back a fresh preview, which is then rebuilt.
    """

    def __init__(self, events: Optional[PreviewEvents] = None):
        self.events = events or PreviewEvents()

    def remap_column(
        self,
        columns: Sequence[Column],
        header_index: int,
        fieldname: Optional[str],
    ) -> Optional[RemapIntent]:
        """
        Ask the controller to map a column onto another field.

        Args:
            columns: Current column model
            header_index: Header index of the column to remap
            fieldname: Field chosen in the field picker

        Returns:
            The emitted intent, or None when nothing was dispatched
        """
        if not fieldname:
            logger.debug(f"Remap of column {header_index} dropped: no field chosen")
            return None

        if find_column(columns, header_index) is None:
            logger.warning(f"Remap dropped: no column with header index {header_index}")
            return None

        intent = RemapIntent(header_index=header_index, fieldname=fieldname)
        if self.events.remap_column:
            self.events.remap_column(intent.header_index, intent.fieldname)
        logger.info(f"Remap requested: column {header_index} -> '{fieldname}'")
        return intent

    def skip_import(
        self, columns: Sequence[Column], header_index: int
    ) -> Optional[SkipImportIntent]:
        """Ask the controller to leave a column out of the import."""
        if find_column(columns, header_index) is None:
            logger.warning(f"Skip dropped: no column with header index {header_index}")
            return None

        intent = SkipImportIntent(header_index=header_index)
        if self.events.skip_import:
            self.events.skip_import(intent.header_index)
        logger.info(f"Skip import requested for column {header_index}")
        return intent
