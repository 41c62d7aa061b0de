"""
BookmarkHub v1 - Collection Routes

Collections and their folder trees.
"""

from fastapi import APIRouter, Depends

from ingest.db import BookmarkStorage
from ingest.orchestrator import FolderService
from shared.events import EventBus

from ..deps import get_bus, get_storage, get_user_id
from ..models import CollectionOut, FolderCreateRequest, FolderOut, FolderTreeOut

router = APIRouter(prefix="/collections", tags=["Collections"])


@router.get("", response_model=list[CollectionOut])
async def list_collections(
    user_id: str = Depends(get_user_id),
    storage: BookmarkStorage = Depends(get_storage),
):
    """List the user's collections, most recently updated first."""
    collections = await storage.get_user_collections(user_id)
    return [CollectionOut(**c.to_dict()) for c in collections]


@router.get("/{collection_id}/folders", response_model=list[FolderTreeOut])
async def get_folder_tree(
    collection_id: str,
    user_id: str = Depends(get_user_id),
    storage: BookmarkStorage = Depends(get_storage),
    bus: EventBus = Depends(get_bus),
):
    """
    Get the folder forest of a collection.

    Each root carries its nested children; folders whose parent is gone
    are returned as roots.
    """
    forest = await FolderService(storage, bus).load_tree(user_id, collection_id)
    return [FolderTreeOut(**node.to_dict()) for node in forest]


@router.post("/{collection_id}/folders", response_model=FolderOut, status_code=201)
async def create_folder(
    collection_id: str,
    request: FolderCreateRequest,
    user_id: str = Depends(get_user_id),
    storage: BookmarkStorage = Depends(get_storage),
    bus: EventBus = Depends(get_bus),
):
    """Create a folder, optionally under a parent folder."""
    folder = await FolderService(storage, bus).create_folder(
        user_id, collection_id, request.name, request.parent_id
    )
    return FolderOut(**folder.to_dict())
