"""
CityInfo API: FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       with its own entity store, mail service, middleware, exception
       handlers and routers.
Who:   Called by uvicorn to start the server (uvicorn cityinfo.main:app)
       and by the tests (one app per test).

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                      FastAPI App                        │
    │                                                         │
    │  Middleware:   Request ID → Logging → GZip → CORS       │
    │                                                         │
    │  Routes:       /api/cities                              │
    │                /api/cities/{id}/pointsofinterest        │
    │                /health                                  │
    │                                                         │
    │  Exception Handlers:                                    │
    │    ValidationError / RequestValidationError → 400       │
    │    NotFoundError → 404 │ DatabaseError / other → 500    │
    └─────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   logging, then (database store) create schema + seed
    Shutdown:  dispose the database engine
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
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cityinfo import __version__
from cityinfo.config import settings
from cityinfo.database import async_session_factory, dispose_engine, init_database
from cityinfo.exceptions import (
    CityInfoError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from cityinfo.middleware.logging import RequestLoggingMiddleware
from cityinfo.middleware.request_id import RequestIDMiddleware, request_id_var
from cityinfo.routes import cities, health, points_of_interest
from cityinfo.services.data_store import CitiesDataStore
from cityinfo.services.mail_base import MailService
from cityinfo.services.mail_service import create_mail_service
from cityinfo.services.validation import errors_from_pydantic

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

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Database store with auto-create: create tables, insert seed rows
    Shutdown:
        1. Dispose database engine (close all pooled connections)
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("CityInfo API starting up (store=%s)...", app.state.store_backend)

    if (
        app.state.store_backend == "database"
        and settings.database_auto_create
        and app.state.session_factory is async_session_factory
    ):
        await init_database()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("CityInfo API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and JSON error bodies.

    Handler hierarchy:
        ValidationError         → 400 Bad Request (field errors in details.errors)
        RequestValidationError  → 400 Bad Request (same shape)
        NotFoundError           → 404 Not Found
        DatabaseError           → 500 Internal Server Error (generic message)
        CityInfoError (base)    → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error

    Responses never carry stack traces or SQL; those are logged server-side.
    """

    def _validation_response(errors: dict, message: str) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": message,
                "details": {"errors": errors},
                "request_id": request_id_var.get(""),
            },
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.errors)
        return _validation_response(exc.errors, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed or structurally invalid input, reported as 400 like our own rules."""
        errors = errors_from_pydantic(exc.errors())
        logger.warning("[%s] Request validation error: %s", request_id_var.get(""), errors)
        return _validation_response(errors, "One or more validation errors occurred.")

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": request_id_var.get(""),
            },
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "A problem happened while handling your request.",
                "request_id": rid,
            },
        )

    @app.exception_handler(CityInfoError)
    async def handle_application_error(request: Request, exc: CityInfoError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "A problem happened while handling your request.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500, full stack trace in the log only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected fault happened. Try again later.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    store_backend: Optional[str] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    mail_service: Optional[MailService] = None,
    cities_store: Optional[CitiesDataStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store_backend: "memory" or "database"; defaults to settings.store_backend.
        session_factory: Session factory for the database store; defaults to
            the module-level factory bound to settings.database_url.
        mail_service: Notification sender; defaults to the one named by
            settings.mail_service.
        cities_store: In-memory store; a freshly seeded one by default.

    Returns:
        Fully configured FastAPI instance. Each call owns its own store.
    """
    app = FastAPI(
        title="CityInfo API",
        description="Cities and their points of interest.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Application State (dependency sources) ────────────────────────────
    backend = store_backend or settings.store_backend
    app.state.store_backend = backend
    app.state.session_factory = session_factory or async_session_factory
    app.state.cities_store = (
        (cities_store or CitiesDataStore()) if backend == "memory" else None
    )
    app.state.mail_service = mail_service or create_mail_service()

    # ── Register Middleware ───────────────────────────────────────────────
    # Executed in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Location"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(cities.router)
    app.include_router(points_of_interest.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `cityinfo.main:app` to be importable
app = create_app()
