"""
BookmarkHub v1 - Web API Routes
"""

from .imports import router as imports_router
from .collections import router as collections_router
from .library import router as library_router

__all__ = ["imports_router", "collections_router", "library_router"]
