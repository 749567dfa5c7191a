"""Main entry point for the Lignum board service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from lignum.api.v1 import (
    attachments_router,
    boards_router,
    cards_router,
    chat_router,
    columns_router,
    labels_router,
    notifications_router,
    realtime_router,
    users_router,
)
from lignum.core.logging import configure_logging
from lignum.core.settings import settings
from lignum.db.session import SessionLocal
from lignum.services.access import AccessGuard
from lignum.services.broadcaster import RoomBroadcaster
from lignum.services.errors import BoardError
from lignum.services.locking import BoardLocks

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Lignum API",
    description="Collaborative kanban boards with realtime sync",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(boards_router, prefix="/api/v1")
app.include_router(columns_router, prefix="/api/v1")
app.include_router(cards_router, prefix="/api/v1")
app.include_router(labels_router, prefix="/api/v1")
app.include_router(attachments_router, prefix="/api/v1")
app.include_router(chat_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(realtime_router)


@app.exception_handler(BoardError)
async def board_error_handler(_request: Request, exc: BoardError) -> JSONResponse:
    """Translate domain errors raised by the handlers into HTTP responses."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    app.state.broadcaster = RoomBroadcaster(AccessGuard(SessionLocal))
    app.state.board_locks = BoardLocks()
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Lignum API",
        "version": settings.app_version,
        "description": "Collaborative kanban boards with realtime sync",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("lignum.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
