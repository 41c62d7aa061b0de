"""
BookmarkHub v1 - Request Dependencies

Accessors for the objects the application lifespan places on app.state.
"""

from typing import Optional

from fastapi import Header, Request

from config import get_config
from ingest.db import BookmarkStorage
from shared.errors import ValidationError
from shared.events import EventBus


def get_storage(request: Request) -> BookmarkStorage:
    return request.app.state.storage


def get_bus(request: Request) -> EventBus:
    return request.app.state.bus


def get_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """User from the X-User-Id header, falling back to DEFAULT_USER_ID"""
    user_id = x_user_id or get_config().app.default_user_id
    if not user_id:
        raise ValidationError("An authenticated user is required")
    return user_id
