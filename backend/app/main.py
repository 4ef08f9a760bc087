"""
Product Catalog Backend — FastAPI Application Factory
=======================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() builds the engine, image store and
       upload handler from Settings, registers middleware, exception
       handlers and routes, and returns the app.
Who:   Called by uvicorn (uvicorn app.main:app) or the `catalog-api` script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Req ID → Logging → GZip → CORS        │
    │                                                     │
    │  Routes:                                            │
    │    /products   /products/{id}   /uploads/{name}     │
    │    /health                                          │
    │                                                     │
    │  Exception Handlers:                                │
    │    NotFound→404 │ Validation→500 │ DB→500 │ File→500│
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create the upload directory
    3. Create missing tables (unless DB_CREATE_TABLES=false)

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import Settings, settings
from app.database import build_engine, build_session_factory, create_tables, dispose_engine
from app.exceptions import (
    CatalogError,
    DatabaseError,
    FileStorageError,
    NotFoundError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import health, products, uploads
from app.services.image_store import ImageStore
from app.services.upload_handler import UploadHandler

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output goes to stdout so containers capture it.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # These log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, upload directory, tables. Shutdown: dispose the engine.

    Objects themselves are built in create_app(); this only runs their
    start-up and tear-down steps.
    """
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("Product catalog backend starting up...")

    app.state.image_store.ensure_directory()

    if app_settings.db_create_tables:
        await create_tables(app.state.engine)

    logger.info("Server ready at http://%s:%d", app_settings.host, app_settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Product catalog backend shutting down...")
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(code: str, message: str, **extra) -> dict:
    return {"error": code, "message": message, "request_id": request_id_var.get(""), **extra}


# Error kind → (HTTP status, error code, log level)
ERROR_RESPONSES = {
    NotFoundError: (404, "not_found", logging.INFO),
    ValidationError: (500, "validation_error", logging.WARNING),
    DatabaseError: (500, "database_error", logging.ERROR),
    FileStorageError: (500, "file_storage_error", logging.ERROR),
}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the application's error kinds to HTTP responses.

    Handler hierarchy:
        NotFoundError     → 404
        ValidationError   → 500 (message and offending fields returned)
        DatabaseError     → 500 (generic message, details logged)
        FileStorageError  → 500
        Exception         → 500 (unexpected errors)

    Context is only returned to the client for validation errors; for the
    rest it goes to the log.
    """

    async def handle_catalog_error(request: Request, exc: CatalogError):
        status_code, code, level = ERROR_RESPONSES[type(exc)]
        logger.log(
            level,
            "[%s] %s %s: %s | Context: %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            exc.message,
            exc.context,
        )
        extra = {"details": exc.context} if isinstance(exc, ValidationError) else {}
        return JSONResponse(status_code=status_code, content=_error_body(code, exc.message, **extra))

    for error_type in ERROR_RESPONSES:
        app.add_exception_handler(error_type, handle_catalog_error)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace is logged server-side only, never returned."""
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body("internal_server_error", "An unexpected error occurred."),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Configuration to build the app from. Defaults to the
                      module-level settings loaded from the environment;
                      tests pass their own.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Product Catalog API",
        description="Create, list, update and delete catalog products with optional images.",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Collaborators ─────────────────────────────────────────────────────
    engine = build_engine(app_settings)
    image_store = ImageStore(app_settings.upload_dir)

    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.image_store = image_store
    app.state.upload_handler = UploadHandler(image_store, app_settings.upload_url_prefix)

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(products.router)
    app.include_router(uploads.router, prefix=f"/{app_settings.upload_url_prefix}")
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Entry point for the `catalog-api` console script."""
    import uvicorn

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
