"""
Bookshelf Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn bookshelf.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────┐ ┌──────┐ │
    │  │ Req ID   │→│  Logging        │→│ GZip │→│ CORS │ │
    │  └──────────┘ └─────────────────┘ └──────┘ └──────┘ │
    │                                                     │
    │  Routes:                                            │
    │  ┌───────────────────────────────┐ ┌─────────────┐  │
    │  │ GET/POST /api/books           │ │ GET /health │  │
    │  │ GET/PUT/DELETE /api/books/{id}│ └─────────────┘  │
    │  └───────────────────────────────┘                  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Database→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   configure logging, optionally create tables (DB_CREATE_ALL)
    Shutdown:  dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from bookshelf import __version__
from bookshelf.config import settings
from bookshelf.database import create_tables, dispose_engine
from bookshelf.exceptions import (
    BookshelfError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from bookshelf.middleware.logging import RequestLoggingMiddleware
from bookshelf.middleware.request_id import RequestIDMiddleware, request_id_var
from bookshelf.routes import books, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    log_format = (
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,  # Override any existing logging config
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Run startup before the yield and shutdown after it."""
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Bookshelf Backend %s starting up...", __version__)

    if settings.use_in_memory_store:
        logger.warning("Using in-memory book store; data will not survive a restart")
    elif settings.db_create_all:
        await create_tables()
        logger.info("Database tables ensured (DB_CREATE_ALL)")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield  # Application runs here

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Bookshelf Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_status(status_code: int) -> int:
    """
    Status code to send for an application error.

    With LEGACY_ERROR_STATUS=true, client errors (400, 404) are reported as
    500, the way the first version of this API reported every failure.
    """
    if settings.legacy_error_status and status_code in (400, 404):
        return 500
    return status_code


def error_response(
    status_code: int,
    message: str,
    code: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """
    Build the JSON error body shared by every handler.

    The catch-all handler runs outside RequestIDMiddleware, so the
    X-Request-ID header is set here as well.
    """
    rid = request_id_var.get("")
    content: Dict[str, Any] = {
        "error": message,
        "code": code,
        "request_id": rid,
    }
    if details:
        content["details"] = details
    headers = {"X-Request-ID": rid} if rid else None
    return JSONResponse(
        status_code=error_status(status_code), content=content, headers=headers
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        RequestValidationError  → 400 Bad Request (malformed JSON, bad path id)
        NotFoundError           → 404 Not Found
        DatabaseError           → 500 Internal Server Error
        BookshelfError (base)   → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error (unexpected errors)

    Only ValidationError exposes its context (which fields failed);
    everything else is logged server-side.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent invalid input — tell them what's wrong."""
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(exc.status_code, exc.message, exc.code, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body was not a JSON object, or the path id was not an integer."""
        errors = exc.errors()
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in errors]
        first = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), fields)
        return error_response(
            400,
            f"Invalid request: {first}",
            ValidationError.code,
            {"fields": fields},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        """Requested resource doesn't exist."""
        return error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """Store failure — fixed message to the client, details logged server-side."""
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(BookshelfError)
    async def handle_bookshelf_error(request: Request, exc: BookshelfError):
        """Any other application error."""
        logger.error(
            "[%s] Application error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for truly unexpected errors.

        Stack trace is logged server-side ONLY (never in response).
        """
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return error_response(
            500,
            "An unexpected error occurred. Please try again or contact support.",
            "internal_server_error",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    Tests create fresh instances; uvicorn uses the module-level `app`.
    """
    app = FastAPI(
        title="Bookshelf API",
        description="CRUD API for book records: title, author and publication year.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(books.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
