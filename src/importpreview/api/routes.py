"""API routes for importpreview."""

import logging
import uuid
from typing import Any, Optional
from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException

from .. import __version__
from ..config import settings
from ..preview import (
    ImportLogEntry,
    ImportPreview,
    NoPreviewDataError,
    PreviewCache,
    PreviewEvents,
    PreviewPayload,
    StaleColumnError,
    UnknownColumnError,
    find_column,
)
from ..schema import (
    DocTypeMeta,
    SchemaRegistry,
    UnknownDocTypeError,
    column_picker_options,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Global instances
_registry: Optional[SchemaRegistry] = None
_cache: Optional[PreviewCache] = None

# Intents emitted per preview since its last refresh
_intents: dict[str, list[dict[str, Any]]] = {}


def get_registry() -> SchemaRegistry:
    """Get the global schema registry."""
    global _registry
    if _registry is None:
        _registry = SchemaRegistry()
    return _registry


def get_cache() -> PreviewCache:
    """Get the global preview cache."""
    global _cache
    if _cache is None:
        _cache = PreviewCache(default_ttl_seconds=settings.preview_ttl_seconds)
    return _cache


def reset_state():
    """Drop all schemas, previews and recorded intents."""
    global _registry, _cache
    _registry = None
    _cache = None
    _intents.clear()


def _controller_events(preview_id: str) -> PreviewEvents:
    """Events that record intents for the caller, who owns the mapping."""
    pending = _intents.setdefault(preview_id, [])

    def on_remap(header_index: int, fieldname: str):
        pending.append(
            {"event": "remap_column", "header_index": header_index, "fieldname": fieldname}
        )

    def on_skip(header_index: int):
        pending.append({"event": "skip_import", "header_index": header_index})

    return PreviewEvents(remap_column=on_remap, skip_import=on_skip)


async def _cleanup_expired():
    """Drop expired previews along with their recorded intents."""
    cache = get_cache()
    dropped = await cache.cleanup_expired_async()
    for preview_id in [pid for pid in _intents if pid not in cache]:
        del _intents[preview_id]
    if dropped:
        logger.info(f"Dropped {dropped} expired previews")


async def _get_preview(preview_id: str) -> ImportPreview:
    await _cleanup_expired()
    preview = await get_cache().get_async(preview_id)
    if preview is None:
        _intents.pop(preview_id, None)
        raise HTTPException(status_code=404, detail=f"Preview {preview_id} not found or expired")
    preview.dialogs.cleanup_expired()
    return preview


def _require_column(preview: ImportPreview, header_index: int):
    if find_column(preview.columns, header_index) is None:
        raise HTTPException(status_code=404, detail=str(UnknownColumnError(header_index)))


def _validate_fieldname(preview: ImportPreview, fieldname: Optional[str]):
    if not fieldname:
        return
    options = {option.value for option in column_picker_options(preview.meta)}
    if fieldname not in options:
        raise HTTPException(
            status_code=422,
            detail=f"'{fieldname}' is not a field of '{preview.doctype}'",
        )


class CreatePreviewRequest(BaseModel):
    """Request to open a preview."""

    doctype: str
    preview_data: PreviewPayload
    import_log: list[ImportLogEntry] = Field(default_factory=list)


class RefreshPreviewRequest(BaseModel):
    """Request to rebuild a preview from new data."""

    preview_data: PreviewPayload
    import_log: Optional[list[ImportLogEntry]] = None


class CellEditRequest(BaseModel):
    """Request to edit one grid cell."""

    row_index: int
    column_index: int
    value: Any = ""


class RemapRequest(BaseModel):
    """Field chosen for a column."""

    fieldname: Optional[str] = None


# Health


@router.get("/health")
async def health():
    """Service health."""
    await _cleanup_expired()
    return {
        "status": "ok",
        "version": __version__,
        "schemas": len(get_registry().names()),
        "previews": get_cache().size(),
    }


# Schema endpoints


@router.put("/schemas/{doctype}")
async def register_schema(doctype: str, meta: DocTypeMeta):
    """Load doctype metadata used to build previews."""
    if meta.name != doctype:
        raise HTTPException(
            status_code=400,
            detail=f"Doctype in path '{doctype}' does not match body '{meta.name}'",
        )
    get_registry().register(meta)
    return {"status": "ok", "doctype": doctype, "fields": len(meta.fields)}


@router.get("/schemas/{doctype}")
async def get_schema(doctype: str):
    """Get loaded doctype metadata."""
    try:
        return get_registry().get(doctype)
    except UnknownDocTypeError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/schemas/{doctype}/fields")
async def get_field_options(doctype: str):
    """Fields a column can be remapped to."""
    try:
        meta = get_registry().get(doctype)
    except UnknownDocTypeError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"doctype": doctype, "options": column_picker_options(meta)}


# Preview endpoints


@router.post("/previews")
async def create_preview(request: CreatePreviewRequest):
    """Build a preview of an import."""
    try:
        meta = get_registry().get(request.doctype)
    except UnknownDocTypeError as e:
        raise HTTPException(status_code=404, detail=str(e))

    await _cleanup_expired()
    cache = get_cache()
    preview_id = str(uuid.uuid4())
    try:
        preview = ImportPreview(
            meta,
            request.preview_data,
            import_log=request.import_log,
            events=_controller_events(preview_id),
        )
    except NoPreviewDataError as e:
        _intents.pop(preview_id, None)
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        _intents.pop(preview_id, None)
        raise HTTPException(status_code=422, detail=str(e))

    await cache.store_async(preview, preview_id=preview_id)
    logger.info(f"Opened preview {preview_id} for '{request.doctype}'")
    return {"preview_id": preview_id, "preview": preview.view()}


@router.get("/previews/{preview_id}")
async def get_preview(preview_id: str):
    """Get the grid model of a preview."""
    preview = await _get_preview(preview_id)
    return preview.view()


@router.post("/previews/{preview_id}/refresh")
async def refresh_preview(preview_id: str, request: RefreshPreviewRequest):
    """Rebuild a preview from new preview data, dropping local edits."""
    preview = await _get_preview(preview_id)
    try:
        preview.refresh(request.preview_data, request.import_log)
    except NoPreviewDataError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    _intents.setdefault(preview_id, []).clear()
    return preview.view()


@router.delete("/previews/{preview_id}")
async def delete_preview(preview_id: str):
    """Discard a preview."""
    removed = await get_cache().remove_async(preview_id)
    if not removed:
        raise HTTPException(status_code=404, detail=f"Preview {preview_id} not found")
    _intents.pop(preview_id, None)
    return {"status": "ok", "message": f"Preview {preview_id} deleted"}


@router.post("/previews/{preview_id}/rows")
async def add_row(preview_id: str):
    """Append a blank row to the grid."""
    preview = await _get_preview(preview_id)
    preview.add_row()
    return {"row_count": len(preview.grid)}


@router.put("/previews/{preview_id}/cells")
async def edit_cell(preview_id: str, request: CellEditRequest):
    """Edit a cell of the grid."""
    preview = await _get_preview(preview_id)
    try:
        preview.set_cell(request.row_index, request.column_index, request.value)
    except IndexError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "ok", "cell": preview.render_cell(request.row_index, request.column_index)}


@router.get("/previews/{preview_id}/rows/flat")
async def get_flat_rows(preview_id: str):
    """Current grid content as plain rows for submission."""
    preview = await _get_preview(preview_id)
    return {"rows": preview.to_flat_rows()}


@router.get("/previews/{preview_id}/intents")
async def get_intents(preview_id: str):
    """Remap and skip intents emitted since the last refresh."""
    await _get_preview(preview_id)
    return {"intents": list(_intents.get(preview_id, []))}


# Column actions


@router.post("/previews/{preview_id}/columns/{header_index}/skip")
async def skip_import(preview_id: str, header_index: int):
    """Ask for a column to be left out of the import."""
    preview = await _get_preview(preview_id)
    _require_column(preview, header_index)
    intent = preview.skip_import(header_index)
    return {"dispatched": intent is not None, "intent": intent}


@router.post("/previews/{preview_id}/columns/{header_index}/remap")
async def remap_column(preview_id: str, header_index: int, request: RemapRequest):
    """Ask for a column to be mapped onto another field."""
    preview = await _get_preview(preview_id)
    _require_column(preview, header_index)
    _validate_fieldname(preview, request.fieldname)
    intent = preview.remap_column(header_index, request.fieldname)
    return {"dispatched": intent is not None, "intent": intent}


@router.post("/previews/{preview_id}/columns/{header_index}/remap-dialog")
async def open_remap_dialog(preview_id: str, header_index: int):
    """Open the field picker for a column."""
    preview = await _get_preview(preview_id)
    try:
        dialog = preview.open_remap_dialog(header_index)
    except UnknownColumnError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"dialog": dialog, "options": column_picker_options(preview.meta)}


@router.post("/previews/{preview_id}/remap-dialogs/{dialog_id}/confirm")
async def confirm_remap_dialog(preview_id: str, dialog_id: str, request: RemapRequest):
    """Confirm the field picker with the chosen field."""
    preview = await _get_preview(preview_id)
    _validate_fieldname(preview, request.fieldname)
    try:
        intent = preview.confirm_remap(dialog_id, request.fieldname)
    except StaleColumnError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"dispatched": intent is not None, "intent": intent}


@router.delete("/previews/{preview_id}/remap-dialogs/{dialog_id}")
async def cancel_remap_dialog(preview_id: str, dialog_id: str):
    """Close the field picker without remapping."""
    preview = await _get_preview(preview_id)
    if not preview.cancel_remap(dialog_id):
        raise HTTPException(status_code=404, detail=f"Remap dialog {dialog_id} not found")
    return {"status": "ok"}
