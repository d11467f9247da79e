"""
Library Catalog — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires settings, the store/service pair, middleware,
       exception handlers and routers. `app` is the module-level instance
       served by uvicorn (uvicorn library_catalog.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:   Request ID → Logging → CORS          │
    │                                                     │
    │  Routes:       /api/books/*          /health        │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐  │
    │  │ LibraryError → HTTP_STATUS_BY_KIND[exc.kind] │  │
    │  │ RequestValidationError → 422                 │  │
    │  │ Exception    → 500                           │  │
    │  └──────────────────────────────────────────────┘  │
    │                                                     │
    │  app.state:    settings, book_service (→ store)     │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from library_catalog import __version__
from library_catalog.config import Settings, settings as default_settings
from library_catalog.exceptions import LibraryError
from library_catalog.middleware import RequestIDMiddleware, RequestLoggingMiddleware, request_id_var
from library_catalog.routes import books, health
from library_catalog.services.book_service import BookService
from library_catalog.store import BookStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Called once from the lifespan, before the first request is served.
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # RequestLoggingMiddleware already writes one line per request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("%s %s starting up...", app_settings.app_name, __version__)
    logger.info("Catalog loaded with %d books", app.state.book_service.count_books())
    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("%s shutting down...", app_settings.app_name)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler table:
        LibraryError            → status from HTTP_STATUS_BY_KIND (400 / 404 / 409 / 500)
        RequestValidationError  → 422 (body or params fail the request schema)
        Exception               → 500 Internal Server Error (unexpected errors)

    Every body follows ErrorResponse: error, message, details, request_id.
    """

    @app.exception_handler(LibraryError)
    async def handle_library_error(request: Request, exc: LibraryError):
        rid = request_id_var.get("")
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        logger.log(
            level,
            "[%s] %s on %s %s: %s",
            rid,
            exc.kind.value,
            request.method,
            request.url.path,
            exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.kind.value,
                "message": exc.message,
                "details": exc.context or None,
                "request_id": rid,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """
        Schema failures (wrong types, malformed JSON, missing body).

        Why keep 422: these are rejected before BookService runs, unlike the
        business 400s. Only the body is reshaped to match ErrorResponse.
        """
        rid = request_id_var.get("")
        logger.warning("[%s] Request validation failed on %s %s", rid, request.method, request.url.path)
        return JSONResponse(
            status_code=422,
            content={
                "error": "request_validation_error",
                "message": "The request body or parameters are malformed",
                "details": {"errors": jsonable_encoder(exc.errors())},
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Generic 500; the stack trace is logged, never returned."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to use; defaults to the module singleton.
                  Each call builds a fresh BookStore, so separate apps never
                  share catalog state.

    Returns: Fully configured FastAPI instance.
    """
    app_settings = settings or default_settings

    app = FastAPI(
        title=app_settings.app_name,
        description=(
            "In-memory library catalog: create, read, update, delete and search "
            "books, and borrow or return them."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.book_service = BookService(BookStore(seed=app_settings.seed_catalog))

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(books.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` with uvicorn using the configured host/port."""
    uvicorn.run(
        "library_catalog.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
