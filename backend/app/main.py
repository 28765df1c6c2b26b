"""
DeviceLab Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌──────────────┐ ┌──────────┐              │
    │  │ Req ID   │→│ Access Log   │→│  CORS    │              │
    │  └──────────┘ └──────────────┘ └──────────┘              │
    │                                                          │
    │  Routes:                                                 │
    │  /devices   /scenes   /tests   /health   /docs           │
    │                                                          │
    │  Exception Handlers:                                     │
    │  MissingParameter/InvalidId/Validation→400 │ NotFound→404│
    │  Unknown route→404 │ Unsupported method→405              │
    │  DuplicateKey→409 │ Database→500 │ anything else→500     │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, optionally create tables, log banner
    Shutdown: dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import settings
from app.database import create_tables, dispose_engine
from app.exceptions import (
    DatabaseError,
    DeviceLabError,
    DuplicateKeyError,
    InvalidIdFormatError,
    MissingParameterError,
    NotFoundError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import devices, health, scenes, tests

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2026-01-15T12:00:00 [INFO] app.services.device_service: Device created: ...
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("DeviceLab Backend %s starting up...", __version__)
    logger.info(
        "Store: %s",
        settings.database_dsn.render_as_string(hide_password=True),
    )

    if settings.create_tables_on_startup:
        await create_tables()
        logger.info("Store tables ensured")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("DeviceLab Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _describe_validation_errors(exc: RequestValidationError) -> list:
    """Turn FastAPI's error list into 'field: problem' strings."""
    messages = []
    for err in exc.errors():
        location = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location)
        messages.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return messages


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        MissingParameterError   → 400 missing_parameter
        InvalidIdFormatError    → 400 invalid_id_format
        ValidationError         → 400 validation_error
        RequestValidationError  → 400 validation_error (malformed body/query)
        HTTPException (routing) → 404 not_found "Route not found", else its own status
        NotFoundError           → 404 not_found
        DuplicateKeyError       → 409 duplicate_key
        DatabaseError           → 500 server_error
        DeviceLabError (base)   → 500 server_error
        Exception (fallback)    → 500 internal_server_error

    Every body carries `message`; stack traces stay in the server log.
    """

    @app.exception_handler(MissingParameterError)
    async def handle_missing_parameter(request: Request, exc: MissingParameterError):
        return _error_response(400, "missing_parameter", exc.message, exc.context)

    @app.exception_handler(InvalidIdFormatError)
    async def handle_invalid_id(request: Request, exc: InvalidIdFormatError):
        return _error_response(400, "invalid_id_format", exc.message, exc.context)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = _describe_validation_errors(exc)
        message = f"Validation error: {', '.join(errors)}"
        logger.warning("[%s] %s", request_id_var.get(""), message)
        return _error_response(400, "validation_error", message, {"errors": errors})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported methods end up here, not in a route
        if exc.status_code == 404:
            return _error_response(404, "not_found", "Route not found", headers=exc.headers)
        return _error_response(exc.status_code, "http_error", str(exc.detail), headers=exc.headers)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(DuplicateKeyError)
    async def handle_duplicate_key(request: Request, exc: DuplicateKeyError):
        return _error_response(409, "duplicate_key", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(DeviceLabError)
    async def handle_app_error(request: Request, exc: DeviceLabError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error_response(
            500,
            "internal_server_error",
            "Something went wrong! Please try again later.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="DeviceLab API",
        description=(
            "Manage devices, the scenes configured on them and the tests run "
            "against each scene."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentials with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(devices.router)
    app.include_router(scenes.router)
    app.include_router(tests.router)
    app.include_router(health.router)

    return app


app = create_app()
