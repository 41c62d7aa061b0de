"""
BookmarkHub v1 - Web API Pydantic Models

Models for API requests and responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response model"""
    error: str = Field(..., description="Stable error kind")
    message: str = Field(..., description="Human-readable message")
    detail: Optional[str] = Field(None, description="Detailed error information")


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    database: str


class ImportResponse(BaseModel):
    """Result of an upload import"""
    state: str
    parsed: int
    imported: int


class BookmarkOut(BaseModel):
    url: str
    title: str
    added_at: datetime
    tags: list[str] = Field(default_factory=list)


class CollectionOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    bookmark_count: int
    updated_at: datetime


class FolderCreateRequest(BaseModel):
    """Request body for creating a folder"""
    name: str = Field(..., description="Folder name (1-50 characters)")
    parent_id: Optional[str] = Field(None, description="Parent folder id, omitted for a root")


class FolderOut(BaseModel):
    id: str
    name: str
    collection_id: str
    parent_id: Optional[str] = None
    path: Optional[str] = None


class FolderTreeOut(BaseModel):
    id: str
    name: str
    depth: int
    children: list["FolderTreeOut"] = Field(default_factory=list)


class TagOut(BaseModel):
    id: str
    name: str
    bg_color: str
    gradient_to: str = Field(..., description="Lighter tone for the tag gradient")
    count: int
    created_at: datetime


class TimelineGroupOut(BaseModel):
    group: str
    label: str
    bookmarks: list[BookmarkOut]


class ActivityOut(BaseModel):
    kind: str
    at: datetime
    summary: str
