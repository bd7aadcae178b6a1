"""
SnippetBox Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance;
       the store handle can be passed in (tests) or is built in the lifespan.
Who:   uvicorn (`uvicorn snippetbox.main:app`) and the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                        │
    │  ┌──────────┐ ┌────────────┐ ┌──────┐ ┌──────┐           │
    │  │  Req ID  │→│ Access Log │→│ GZip │→│ CORS │           │
    │  └──────────┘ └────────────┘ └──────┘ └──────┘           │
    │                                                          │
    │  Routes (under API_PREFIX):                              │
    │  auth │ languages │ categories │ tags │ snippets │ health │
    │                                                          │
    │  Exception Handlers:                                     │
    │  400 validation │ 401 │ 403 │ 404 │ 409 │ 500            │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config check → Database (unless injected) → schema
    Shutdown: dispose the Database this app created
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from snippetbox import __version__
from snippetbox.config import settings
from snippetbox.database import Database
from snippetbox.exceptions import (
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    SnippetBoxError,
    UnauthorizedError,
    ValidationError,
)
from snippetbox.middleware import RequestIDMiddleware, RequestLoggingMiddleware, request_id_var
from snippetbox.routes import auth, categories, health, languages, snippets, tags

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Warn about an unsafe configuration (the server still starts)
        3. Build the Database unless one was injected into create_app()
        4. Create missing tables when AUTO_CREATE_SCHEMA is on

    Shutdown:
        Dispose the Database if this lifespan created it.
    """
    setup_logging()
    logger.info("SnippetBox Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        app.state.database = Database.from_settings(settings)
    database: Database = app.state.database

    if settings.auto_create_schema:
        await database.create_schema()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("SnippetBox Backend shutting down...")
    if owns_database:
        await database.dispose()
        app.state.database = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    content = {"error": error, "message": message}
    if details:
        content["details"] = details
    content["request_id"] = request_id_var.get("") or getattr(request.state, "request_id", "")
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception hierarchy onto HTTP responses.

    Handler hierarchy:
        ValidationError, RequestValidationError → 400
        UnauthorizedError                       → 401 (+ WWW-Authenticate)
        ForbiddenError                          → 403
        NotFoundError                           → 404
        ConflictError                           → 409
        InternalError / DatabaseError           → 500 (generic message)
        SnippetBoxError, Exception              → 500

    Internal details (SQL, stack traces) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("Validation error: %s", exc.message)
        return _error_response(request, 400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        # Malformed JSON body or a non-integer path id
        errors = [
            {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        logger.warning("Request validation failed: %s", errors)
        return _error_response(
            request, 400, "validation_error", "Invalid request", {"errors": errors}
        )

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return _error_response(
            request, 401, "unauthorized", exc.message, headers={"WWW-Authenticate": "Bearer"}
        )

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return _error_response(request, 403, "forbidden", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(request, 404, "not_found", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(request, 409, "conflict", exc.message)

    @app.exception_handler(InternalError)
    async def handle_internal_error(request: Request, exc: InternalError):
        logger.error("Internal error: %s | Context: %s", exc.message, exc.context)
        return _error_response(
            request, 500, "server_error", "An internal error occurred. Please try again later."
        )

    @app.exception_handler(SnippetBoxError)
    async def handle_snippetbox_error(request: Request, exc: SnippetBoxError):
        logger.error("Unhandled application error: %s | Context: %s", exc.message, exc.context)
        return _error_response(request, 500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return _error_response(
            request,
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: A ready store handle. When given, the lifespan uses it and
            leaves disposing it to the caller (tests pass a temp-file SQLite).
    """
    app = FastAPI(
        title="SnippetBox API",
        description="Personal code-snippet manager: multi-file snippets, tags, categories and languages.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.database = database

    # Middleware executes in REVERSE order of addition:
    # RequestID → Access Log → GZip → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    prefix = settings.api_prefix
    app.include_router(auth.router, prefix=prefix)
    app.include_router(languages.router, prefix=prefix)
    app.include_router(categories.router, prefix=prefix)
    app.include_router(tags.router, prefix=prefix)
    app.include_router(snippets.router, prefix=prefix)
    app.include_router(health.router, prefix=prefix)
    if prefix:
        app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `snippetbox.main:app` to be importable
app = create_app()
