"""
BookmarkHub v1 - Import Routes

Upload a browser export and run it through the import orchestrator.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from config import get_config
from ingest.db import BookmarkStorage
from ingest.orchestrator import ImportOrchestrator
from shared.errors import FormatError, ValidationError
from shared.events import EventBus

from ..deps import get_bus, get_storage, get_user_id
from ..models import ErrorResponse, ImportResponse

router = APIRouter(tags=["Import"])


@router.post(
    "/import",
    response_model=ImportResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Unreadable or malformed document"},
        422: {"model": ErrorResponse, "description": "Invalid request"},
        502: {"model": ErrorResponse, "description": "Storage rejected the import"},
    },
)
async def import_bookmarks(
    file: UploadFile = File(..., description="Bookmarks HTML export"),
    dialect: Optional[str] = Form(None),
    collection_id: Optional[str] = Form(None),
    user_id: str = Depends(get_user_id),
    storage: BookmarkStorage = Depends(get_storage),
    bus: EventBus = Depends(get_bus),
):
    """
    Import an uploaded bookmarks export.

    Listeners on the event bus are notified before the response is sent.
    """
    cfg = get_config()
    content = await file.read()
    if len(content) > cfg.imports.max_bytes:
        raise ValidationError(
            f"Bookmarks file is too large ({len(content)} bytes, limit {cfg.imports.max_bytes})"
        )
    try:
        document = content.decode(cfg.imports.encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise FormatError("Uploaded file is not valid text", detail=str(e)) from e

    orchestrator = ImportOrchestrator(storage, bus, encoding=cfg.imports.encoding)
    result = await orchestrator.run_document(
        document,
        user_id,
        dialect or cfg.imports.default_dialect,
        collection_id=collection_id,
        source=file.filename,
    )
    return ImportResponse(state=result.state.value, parsed=result.parsed, imported=result.imported)
