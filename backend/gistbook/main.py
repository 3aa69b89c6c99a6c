"""
Gistbook Backend - FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the app, attaches a RecordStore to app.state,
       registers middleware, exception handlers, routers and static assets.
Who:   uvicorn imports `gistbook.main:app` (directly or via gistbook.server);
       tests call create_app(store=...) with a store on a temporary file.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐              │
    │  │  Req ID  │→│ Access log  │→│ CORS │              │
    │  └──────────┘ └─────────────┘ └──────┘              │
    │                                                     │
    │  Routes:                                            │
    │  /api/snippets  /api/subjects  /health  /  /static  │
    │                                                     │
    │  Exception Handlers:                                │
    │  Missing→400  NotFound→404  Duplicate/InUse→409     │
    │  StoreError→500  anything else→500                  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging → RecordStore.initialize() (schema + seed)
    Shutdown: RecordStore.shutdown() (dispose engine)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from gistbook import __version__
from gistbook.config import settings
from gistbook.database import RecordStore
from gistbook.exceptions import (
    DuplicateNameError,
    GistbookError,
    MissingFieldError,
    NotFoundError,
    StoreError,
    SubjectInUseError,
)
from gistbook.middleware.logging import RequestLoggingMiddleware
from gistbook.middleware.request_id import RequestIDMiddleware, request_id_var
from gistbook.routes import health, pages, snippets, subjects
from gistbook.routes.pages import STATIC_DIR

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before the store is initialized.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Access lines come from gistbook.access instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, then schema creation and default-subject seed.
    Shutdown: close the store's connections.

    A store that cannot be initialized aborts startup: the StoreError
    propagates and uvicorn exits.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Gistbook %s starting up...", __version__)

    store: RecordStore = app.state.store
    await store.initialize()

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    logger.info("Gistbook shutting down...")
    await store.shutdown()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy:
        MissingFieldError   → 400 missing_field
        NotFoundError       → 404 not_found
        DuplicateNameError  → 409 duplicate_name
        SubjectInUseError   → 409 subject_in_use
        StoreError          → 500 server_error (generic message)
        GistbookError       → 500 server_error
        Exception           → 500 internal_server_error

    Store and unexpected errors are logged with their context here; the
    response body never includes driver messages or stack traces.
    """

    @app.exception_handler(MissingFieldError)
    async def handle_missing_field(request: Request, exc: MissingFieldError):
        rid = request_id_var.get("")
        logger.warning("[%s] Missing field: %s", rid, exc.context.get("field"))
        return JSONResponse(
            status_code=400,
            content={
                "error": "missing_field",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(DuplicateNameError)
    async def handle_duplicate_name(request: Request, exc: DuplicateNameError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=409,
            content={
                "error": "duplicate_name",
                "message": exc.message,
                "details": {"name": exc.name},
                "request_id": rid,
            },
        )

    @app.exception_handler(SubjectInUseError)
    async def handle_subject_in_use(request: Request, exc: SubjectInUseError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=409,
            content={
                "error": "subject_in_use",
                "message": exc.message,
                "details": {"name": exc.name, "snippet_count": exc.snippet_count},
                "request_id": rid,
            },
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(GistbookError)
    async def handle_gistbook_error(request: Request, exc: GistbookError):
        rid = request_id_var.get("")
        logger.error("[%s] Unhandled application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store: Optional[RecordStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: RecordStore to serve from. Defaults to one built from
               settings.database_url. Tests pass their own.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Gistbook API",
        description=(
            "Personal snippet organizer. Snippets are filed under subjects; "
            "subject names are unique ignoring case and a subject cannot be "
            "deleted while snippets refer to it."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.store = store if store is not None else RecordStore(
        settings.database_url,
        echo=settings.log_level == "DEBUG",
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(snippets.router)
    app.include_router(subjects.router)
    app.include_router(health.router)
    app.include_router(pages.router)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    return app


# uvicorn expects `gistbook.main:app` to be importable
app = create_app()
