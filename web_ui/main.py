"""
BookmarkHub v1 - Web API Main Application

FastAPI application exposing the import and organization core as JSON.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import configure_logging, get_config, load_env
from ingest.db import BookmarkDB, BookmarkStorage
from shared.errors import (
    BookmarkHubError,
    CycleError,
    FormatError,
    ImportIOError,
    StorageError,
    ValidationError,
)
from shared.events import EventBus

from . import __version__
from .activity import ActivityFeed
from .models import ErrorResponse, HealthResponse
from .routes import collections_router, imports_router, library_router

load_env()
configure_logging()
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    FormatError: 400,
    ImportIOError: 400,
    ValidationError: 422,
    CycleError: 409,
    StorageError: 502,
}


def error_status(error: BookmarkHubError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status
    return 500


def create_app(
    storage: Optional[BookmarkStorage] = None,
    bus: Optional[EventBus] = None,
) -> FastAPI:
    """
    Build the application.

    Without a storage argument the lifespan connects a BookmarkDB using
    DATABASE_URL. The event bus is created here once and shared by every
    route through app.state.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info("Web API starting...")
        owned_db: Optional[BookmarkDB] = None

        if app.state.storage is None:
            cfg = get_config()
            if not cfg.database.url:
                raise RuntimeError("DATABASE_URL environment variable not set")
            owned_db = BookmarkDB(
                cfg.database.url,
                min_size=cfg.database.pool_min_size,
                max_size=cfg.database.pool_max_size,
                default_tag_color=cfg.tags.default_color,
            )
            await owned_db.connect()
            app.state.storage = owned_db
            logger.info("Database connected")

        app.state.activity.attach(app.state.bus)

        yield

        app.state.activity.detach(app.state.bus)
        if owns_bus:
            app.state.bus.clear()
        if owned_db is not None:
            await owned_db.disconnect()
            app.state.storage = None
        logger.info("Web API shutting down")

    app = FastAPI(
        title="BookmarkHub API",
        description="Import, organize and tag browser bookmarks",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.storage = storage
    owns_bus = bus is None
    app.state.bus = bus or EventBus()
    app.state.activity = ActivityFeed()

    @app.exception_handler(BookmarkHubError)
    async def handle_core_error(request: Request, exc: BookmarkHubError):
        status = error_status(exc)
        log = logger.error if status >= 500 else logger.warning
        log(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.message}")
        return JSONResponse(
            status_code=status,
            content=ErrorResponse(
                error=exc.kind,
                message=exc.message,
                detail=exc.detail,
            ).model_dump(),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        storage = request.app.state.storage
        db_status = "disconnected"
        if isinstance(storage, BookmarkDB):
            try:
                async with storage.connection() as conn:
                    await conn.fetchval("SELECT 1")
                db_status = "connected"
            except StorageError:
                db_status = "disconnected"
        elif storage is not None:
            db_status = "external"

        return HealthResponse(
            status="degraded" if db_status == "disconnected" else "healthy",
            version=__version__,
            database=db_status,
        )

    app.include_router(imports_router)
    app.include_router(collections_router)
    app.include_router(library_router)
    return app


app = create_app()


# Run with: uvicorn web_ui.main:app --host 0.0.0.0 --port 8000
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
