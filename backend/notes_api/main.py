"""
Notes API: FastAPI Application Factory
=======================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers and routers;
       the lifespan hook builds the NoteStore and tears it down.
Who:   uvicorn (notes_api.main:app), the `notes-api` console script, tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Req ID → Logging → GZip → CORS        │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────────┐ ┌──────────────┐  │
    │  │ /api/notes (list/add/upd/del)│ │ GET /health  │  │
    │  └──────────────────────────────┘ └──────────────┘  │
    │                                                     │
    │  Exception Handlers (all envelope-shaped):          │
    │  RequestValidationError→200 │ NotesApiError→200     │
    │  Exception→500                                      │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → engine → NoteStore on app.state → create schema
    Shutdown: dispose the store's engine
"""

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from notes_api import __version__
from notes_api.config import Settings, settings
from notes_api.database import build_engine
from notes_api.exceptions import NotesApiError, StorageError
from notes_api.middleware.logging import RequestLoggingMiddleware
from notes_api.middleware.request_id import RequestIDMiddleware, request_id_var
from notes_api.routes import health, notes
from notes_api.schemas.note import Envelope
from notes_api.services.note_store import NoteStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the whole process.

    One stdout handler, ISO-ish timestamps. Called once at startup, before
    anything else logs.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party chatter
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

def _lifespan_for(app_settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Build the shared NoteStore on startup; dispose it on shutdown."""
        setup_logging(app_settings.log_level)
        logger.info("Notes API %s starting up...", __version__)

        store = NoteStore(
            build_engine(app_settings),
            operation_timeout=app_settings.db_operation_timeout,
        )
        app.state.note_store = store
        app.state.started_at = time.time()

        # Keep serving if the database is down: handlers report StorageError
        # envelopes and /health reports unhealthy until it comes back.
        try:
            await store.create_schema()
        except StorageError as e:
            logger.error("Could not prepare notes table: %s", e.message)

        logger.info(
            "Server ready at http://%s:%d",
            app_settings.backend_host,
            app_settings.backend_port,
        )

        yield

        logger.info("Notes API shutting down...")
        await store.dispose()
        logger.info("Shutdown complete.")

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _record_failure(request: Request, message: str) -> Envelope:
    """Build a failure envelope and leave its outcome for the access log."""
    request.state.envelope_success = False
    request.state.envelope_message = message
    return Envelope.failure(message)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map failures that escape the route handlers to envelopes.

    Handler hierarchy:
        RequestValidationError → 200, success=false (malformed JSON or types)
        NotesApiError          → 200, success=false, error's message
        Exception (fallback)   → 500, success=false, generic message
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = exc.errors()
        logger.warning("[%s] Request validation failed: %s", rid, errors)
        detail = errors[0].get("msg", "invalid value") if errors else "invalid value"
        envelope = _record_failure(request, f"Invalid request: {detail}")
        return JSONResponse(
            status_code=200,
            content=envelope.model_dump(exclude_none=True),
        )

    @app.exception_handler(NotesApiError)
    async def handle_notes_error(request: Request, exc: NotesApiError):
        rid = request_id_var.get("")
        logger.warning("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        envelope = _record_failure(request, exc.message)
        return JSONResponse(
            status_code=200,
            content=envelope.model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=Envelope.failure(
                "An unexpected error occurred. Please try again or contact support."
            ).model_dump(exclude_none=True),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build from; defaults to the environment.

    Returns:
        A configured FastAPI instance. The NoteStore is attached by the
        lifespan hook (or directly by tests via app.state.note_store).
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Notes API",
        description="Minimal CRUD service for notes with JSON envelope responses.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=_lifespan_for(app_settings),
    )
    # Reset by the lifespan at startup; set here for apps served without it
    app.state.started_at = time.time()

    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run(
        "notes_api.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
