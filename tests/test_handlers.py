"""Tests for remap and skip-import actions."""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from importpreview.preview import (
    MutationHandlers,
    PreviewEvents,
    RemapDialogHandler,
    RemapIntent,
    SkipImportIntent,
    StaleColumnError,
    UnknownColumnError,
    build_columns,
    find_column,
)


@pytest.fixture
def columns(item_fields, item_meta):
    return build_columns(item_fields, item_meta)


@pytest.fixture
def handlers(mock_events):
    return MutationHandlers(mock_events)


class TestFindColumn:
    """Test column lookup by header index."""

    def test_found(self, columns):
        assert find_column(columns, 1).id == "item_name"
        assert find_column(columns, -1).is_serial is True

    def test_missing(self, columns):
        assert find_column(columns, 4) is None
        assert find_column(columns, -2) is None


class TestRemapColumn:
    """Test the remap action."""

    def test_emits_intent(self, handlers, columns, mock_events):
        """Test a remap is forwarded to the controller."""
        intent = handlers.remap_column(columns, 2, "description")

        assert isinstance(intent, RemapIntent)
        assert intent.header_index == 2
        assert intent.fieldname == "description"
        mock_events.remap_column.assert_called_once_with(2, "description")
        mock_events.skip_import.assert_not_called()

    def test_does_not_touch_columns(self, handlers, columns):
        """Test the column model is left for the next refresh to change."""
        before = [c.model_dump() for c in columns]

        handlers.remap_column(columns, 2, "description")

        assert [c.model_dump() for c in columns] == before

    def test_unknown_header_index(self, handlers, columns, mock_events):
        """Test no event for a column that does not exist."""
        assert handlers.remap_column(columns, 99, "description") is None
        assert handlers.remap_column(columns, -5, "description") is None
        mock_events.remap_column.assert_not_called()

    def test_missing_fieldname(self, handlers, columns, mock_events):
        """Test a remap without a chosen field is not dispatched."""
        assert handlers.remap_column(columns, 2, None) is None
        assert handlers.remap_column(columns, 2, "") is None
        mock_events.remap_column.assert_not_called()

    def test_without_listener(self, columns):
        """Test the intent is still returned when nobody listens."""
        intent = MutationHandlers().remap_column(columns, 0, "item_group")

        assert intent.fieldname == "item_group"


class TestSkipImport:
    """Test the skip-import action."""

    def test_emits_intent(self, handlers, columns, mock_events):
        """Test a skip is forwarded to the controller."""
        intent = handlers.skip_import(columns, 1)

        assert isinstance(intent, SkipImportIntent)
        assert intent.header_index == 1
        mock_events.skip_import.assert_called_once_with(1)
        mock_events.remap_column.assert_not_called()

    def test_does_not_touch_columns(self, handlers, columns):
        """Test the column stays mapped until the next refresh."""
        handlers.skip_import(columns, 1)

        assert find_column(columns, 1).mapped is True

    def test_unknown_header_index(self, handlers, columns, mock_events):
        """Test no event for a column that does not exist."""
        assert handlers.skip_import(columns, 10) is None
        mock_events.skip_import.assert_not_called()

    def test_repeated_skip_emits_each_time(self, handlers, columns, mock_events):
        """Test each action is a separate command."""
        handlers.skip_import(columns, 1)
        handlers.skip_import(columns, 1)

        assert mock_events.skip_import.call_count == 2


class TestRemapDialogHandler:
    """Test the field-picker dialog lifecycle."""

    def test_open(self, columns):
        """Test opening a dialog on a column."""
        dialogs = RemapDialogHandler()

        dialog = dialogs.open(columns, 2, generation=1)

        assert dialog.header_index == 2
        assert dialog.column_id == columns[3].id
        assert dialog.title == "Remap Column: Legacy Ref"
        assert dialogs.pending_count() == 1

    def test_open_unknown_column(self, columns):
        """Test a dialog cannot be opened on a missing column."""
        with pytest.raises(UnknownColumnError):
            RemapDialogHandler().open(columns, 42, generation=1)

    def test_confirm_emits_remap(self, columns, handlers, mock_events):
        """Test confirming dispatches the remap and closes the dialog."""
        dialogs = RemapDialogHandler()
        dialog = dialogs.open(columns, 2, generation=1)

        intent = dialogs.confirm(dialog.dialog_id, "item_group", columns, 1, handlers)

        assert intent.header_index == 2
        assert intent.fieldname == "item_group"
        mock_events.remap_column.assert_called_once_with(2, "item_group")
        assert dialogs.pending_count() == 0

    def test_confirm_without_field(self, columns, handlers, mock_events):
        """Test confirming with no field keeps the dialog open."""
        dialogs = RemapDialogHandler()
        dialog = dialogs.open(columns, 2, generation=1)

        assert dialogs.confirm(dialog.dialog_id, "", columns, 1, handlers) is None
        assert dialogs.pending_count() == 1
        mock_events.remap_column.assert_not_called()

    def test_confirm_unknown_dialog(self, columns, handlers):
        """Test confirming a dialog that was never opened."""
        with pytest.raises(ValueError):
            RemapDialogHandler().confirm("missing", "item_group", columns, 1, handlers)

    def test_stale_dialog_rejected(self, columns, item_fields, item_meta, handlers, mock_events):
        """Test a dialog opened before a refresh cannot remap a rebuilt column."""
        dialogs = RemapDialogHandler()
        dialog = dialogs.open(columns, 2, generation=1)
        rebuilt = build_columns(item_fields, item_meta)

        with pytest.raises(StaleColumnError):
            dialogs.confirm(dialog.dialog_id, "item_group", rebuilt, 2, handlers)

        mock_events.remap_column.assert_not_called()
        assert dialogs.pending_count() == 0

    def test_stale_dialog_when_column_removed(self, columns, item_fields, item_meta, handlers):
        """Test a dialog whose column is gone after a refresh."""
        dialogs = RemapDialogHandler()
        dialog = dialogs.open(columns, 3, generation=1)
        rebuilt = build_columns(item_fields[:3], item_meta)

        with pytest.raises(StaleColumnError):
            dialogs.confirm(dialog.dialog_id, "item_group", rebuilt, 2, handlers)

    def test_same_field_column_survives_refresh(
        self, columns, item_fields, item_meta, handlers, mock_events
    ):
        """Test a mapped column rebuilt with the same field is still accepted."""
        dialogs = RemapDialogHandler()
        dialog = dialogs.open(columns, 1, generation=1)
        rebuilt = build_columns(item_fields, item_meta)

        intent = dialogs.confirm(dialog.dialog_id, "description", rebuilt, 2, handlers)

        assert intent.header_index == 1
        mock_events.remap_column.assert_called_once_with(1, "description")

    def test_cancel(self, columns):
        """Test cancelling closes the dialog without remapping."""
        dialogs = RemapDialogHandler()
        dialog = dialogs.open(columns, 2, generation=1)

        assert dialogs.cancel(dialog.dialog_id) is True
        assert dialogs.cancel(dialog.dialog_id) is False
        assert dialogs.get(dialog.dialog_id) is None

    def test_expired_dialog(self, columns, handlers):
        """Test dialogs older than the TTL are dropped."""
        dialogs = RemapDialogHandler(ttl=timedelta(seconds=-1))
        dialog = dialogs.open(columns, 2, generation=1)

        assert dialogs.get(dialog.dialog_id) is None
        with pytest.raises(ValueError):
            dialogs.confirm(dialog.dialog_id, "item_group", columns, 1, handlers)

    def test_cleanup_expired(self, columns):
        """Test expired dialogs are swept."""
        dialogs = RemapDialogHandler(ttl=timedelta(seconds=-1))
        dialogs.open(columns, 1, generation=1)
        dialogs.open(columns, 2, generation=1)

        assert dialogs.cleanup_expired() == 2
        assert dialogs.pending_count() == 0


class TestPreviewEvents:
    """Test the controller callback holder."""

    def test_defaults(self):
        events = PreviewEvents()

        assert events.remap_column is None
        assert events.skip_import is None

    def test_callbacks(self):
        on_skip = Mock()
        events = PreviewEvents(skip_import=on_skip)

        events.skip_import(3)

        on_skip.assert_called_once_with(3)
