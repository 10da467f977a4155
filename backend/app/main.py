"""
Biodex Backend - FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting,
       exception handling and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │  Middleware: RequestID → Logging → Session → CORS   │
    ├─────────────────────────────────────────────────────┤
    │  Pages: /, /users, /species, /species/{id}/...      │
    │  API:   /api/profiles, /api/species[/{id}]          │
    │  Ops:   /health                                     │
    ├─────────────────────────────────────────────────────┤
    │  Services: ProfileService, SpeciesService,          │
    │            SpeciesEditor, NotificationQueue         │
    ├─────────────────────────────────────────────────────┤
    │  Async SQLAlchemy (profiles, species)               │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, report missing secrets, log readiness
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import Response
from starlette.status import HTTP_303_SEE_OTHER

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import (
    AuthenticationRequiredError,
    BiodexError,
    DatabaseError,
    EditorStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, pages, profiles, species, species_pages
from app.templating import templates

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
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup before the yield, shutdown after it."""
    setup_logging()
    logger.info("=" * 60)
    logger.info("Biodex Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: the landing page and /health still work, and every
        # protected page redirects to "/" until the auth secret is set
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Biodex Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _is_api_request(request: Request) -> bool:
    return request.url.path.startswith("/api")


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Response:
    """JSON envelope for the API, the error page for everything else."""
    rid = request_id_var.get("")
    if _is_api_request(request):
        content: Dict[str, Any] = {"error": error, "message": message, "request_id": rid}
        if details:
            content["details"] = details
        return JSONResponse(status_code=status_code, content=content, headers=headers)

    # The session is not touched here: the catch-all handler runs outside
    # SessionMiddleware
    return templates.TemplateResponse(
        request,
        "error.html",
        {
            "notifications": [],
            "status_code": status_code,
            "message": message,
            "details": details or {},
            "request_id": rid,
        },
        status_code=status_code,
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        ValidationError              → 400
        AuthenticationRequiredError  → 303 to "/" (pages) / 401 (API)
        PermissionDeniedError        → 403
        NotFoundError                → 404
        EditorStateError             → 409
        DatabaseError                → 500 (generic message)
        BiodexError (base)           → 500
        Exception (fallback)         → 500 (stack trace logged only)
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("[%s] Validation error: %s", request_id_var.get(""), exc.errors)
        return _error_response(
            request, 400, "validation_error", exc.message, details={"errors": exc.errors}
        )

    @app.exception_handler(AuthenticationRequiredError)
    async def handle_authentication_required(request: Request, exc: AuthenticationRequiredError):
        if _is_api_request(request):
            return _error_response(
                request, 401, "authentication_required", exc.message,
                headers={"WWW-Authenticate": "Bearer"},
            )
        return RedirectResponse(url="/", status_code=HTTP_303_SEE_OTHER)

    @app.exception_handler(PermissionDeniedError)
    async def handle_permission_denied(request: Request, exc: PermissionDeniedError):
        return _error_response(request, 403, "permission_denied", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(request, 404, "not_found", exc.message)

    @app.exception_handler(EditorStateError)
    async def handle_editor_state(request: Request, exc: EditorStateError):
        return _error_response(request, 409, "invalid_editor_state", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _error_response(
            request, 500, "server_error",
            "An internal error occurred. Please try again later.",
        )

    @app.exception_handler(BiodexError)
    async def handle_application_error(request: Request, exc: BiodexError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return _error_response(request, 500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error_response(
            request, 500, "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Middleware executes in REVERSE order of addition: adding
    CORS → Session → Logging → RequestID makes RequestID run first.
    """
    app = FastAPI(
        title="Biodex",
        description=(
            "Species and profile records over a hosted auth service and database. "
            "Signed-in users browse profiles and species and manage the species they authored."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )

    # Flashed notifications only; the auth token lives in its own cookie
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie="biodex_flash",
        same_site="lax",
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(pages.router)
    app.include_router(species_pages.router)
    app.include_router(profiles.router)
    app.include_router(species.router)
    app.include_router(health.router)

    return app


# uvicorn expects `app.main:app` to be importable
app = create_app()
