"""Pending remap dialogs for the field picker."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from .handlers import MutationHandlers, find_column
from .models import Column, RemapDialog, RemapIntent, StaleColumnError, UnknownColumnError

logger = logging.getLogger(__name__)


class RemapDialogHandler:
    """Tracks field-picker dialogs between opening and confirmation."""

    def __init__(self, ttl: timedelta = timedelta(hours=1)):
        self._pending: dict[str, RemapDialog] = {}
        self._ttl = ttl

    def open(self, columns: Sequence[Column], header_index: int, generation: int) -> RemapDialog:
        """
        Open a remap dialog for a column.

        Raises:
            UnknownColumnError: If no column sits at the header index
        """
        column = find_column(columns, header_index)
        if column is None:
            raise UnknownColumnError(header_index)

        dialog = RemapDialog(
            dialog_id=str(uuid.uuid4()),
            header_index=header_index,
            column_id=column.id,
            title=f"Remap Column: {column.title}",
            generation=generation,
        )
        self._pending[dialog.dialog_id] = dialog
        logger.info(f"Opened remap dialog {dialog.dialog_id} for column {header_index}")
        return dialog

    def get(self, dialog_id: str) -> Optional[RemapDialog]:
        """
        Get a pending dialog by ID.

        Returns None if the dialog is unknown or expired.
        """
        dialog = self._pending.get(dialog_id)
        if dialog is None:
            return None

        if datetime.now(timezone.utc) - dialog.created_at > self._ttl:
            logger.info(f"Remap dialog {dialog_id} has expired")
            del self._pending[dialog_id]
            return None

        return dialog

    def confirm(
        self,
        dialog_id: str,
        fieldname: Optional[str],
        columns: Sequence[Column],
        generation: int,
        handlers: MutationHandlers,
    ) -> Optional[RemapIntent]:
        """
        Confirm a dialog with the chosen field.

        The dialog is checked against the current column model: the column
        it was opened on must still sit at the same header index.

        Returns:
            The emitted intent, or None when no field was chosen (the
            dialog stays open)

        Raises:
            ValueError: If the dialog is unknown or expired
            StaleColumnError: If the column model changed under the dialog
        """
        dialog = self.get(dialog_id)
        if dialog is None:
            raise ValueError(f"Remap dialog {dialog_id} not found or expired")

        if not fieldname:
            return None

        if dialog.generation != generation:
            current = find_column(columns, dialog.header_index)
            if current is None or current.id != dialog.column_id:
                del self._pending[dialog_id]
                logger.warning(
                    f"Rejected stale remap dialog {dialog_id} for column {dialog.header_index}"
                )
                raise StaleColumnError(dialog, generation)

        intent = handlers.remap_column(columns, dialog.header_index, fieldname)
        del self._pending[dialog_id]
        return intent

    def cancel(self, dialog_id: str) -> bool:
        """Close a dialog without remapping. Returns False if it was not pending."""
        if dialog_id in self._pending:
            del self._pending[dialog_id]
            logger.info(f"Cancelled remap dialog {dialog_id}")
            return True
        return False

    def cleanup_expired(self) -> int:
        """Remove expired dialogs and return how many were dropped."""
        now = datetime.now(timezone.utc)
        expired = [
            dialog_id
            for dialog_id, dialog in self._pending.items()
            if now - dialog.created_at > self._ttl
        ]
        for dialog_id in expired:
            del self._pending[dialog_id]
        return len(expired)

    def pending_count(self) -> int:
        return len(self._pending)
