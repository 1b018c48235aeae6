"""FastAPI application factory.

Lifespan
--------
On startup the app opens the configured store (shared across all requests
via ``request.app.state.store``) unless one was injected through
``create_app(store=...)``.  On shutdown it closes the store it opened.

Errors
------
Every failure is returned as ``{"success": false, "error": "..."}``:
malformed input → 400, anything else → 500.

Routers
-------
    /local-models-analytics   tracking, stats and export endpoints
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.api.responses import failure
from backend.api.routers import analytics as analytics_router
from backend.db import open_store
from backend.db.base import Store
from backend.errors import TrackerError, ValidationError
from backend.log import get_logger

logger = get_logger("api")


async def _tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return failure(str(exc), 400)
    logger.error(
        "request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return failure(str(exc), 500)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return failure("Malformed request body", 400)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return failure(str(exc), 500)


def create_app(store: Optional[Store] = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        store: Use this store instead of opening the configured one.  The
            caller keeps ownership and closes it.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Open the store on startup and close it on shutdown."""
        owned = store is None
        app.state.store = store if store is not None else open_store()
        try:
            yield
        finally:
            if owned:
                app.state.store.close()

    app = FastAPI(
        title="Clone Tracker API",
        description=(
            "Records website-clone generation attempts and reports per-model "
            "and per-provider performance statistics."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TrackerError, _tracker_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(
        analytics_router.router,
        prefix="/local-models-analytics",
        tags=["analytics"],
    )

    return app


# Module-level instance used by uvicorn:
#   uvicorn backend.api.app:app --reload
app = create_app()
