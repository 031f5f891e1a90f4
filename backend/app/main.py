"""
BileMo API — FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes app configuration, middleware registration, route mounting,
       exception mapping and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌──────┐     │
    │  │  Req ID  │→│ Access Log  │→│ GZip │→│ CORS │     │
    │  └──────────┘ └─────────────┘ └──────┘ └──────┘     │
    │                                                     │
    │  Routes:                                            │
    │  /api/login_check  /api/customers  /api/products    │
    │  /api/users        /health                          │
    │                                                     │
    │  State:                                             │
    │  app.state.list_cache  (TagAwareCache + tag graph)  │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ Unauthorized→401 │ Forbidden→403  │
    │  NotFound→404   │ anything else→500                 │
    └─────────────────────────────────────────────────────┘
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

from app import __version__
from app.cache import ListCache, TagAwareCache
from app.config import settings
from app.database import dispose_engine
from app.exceptions import ApiError, UnauthorizedError, ValidationFailedError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import auth, customers, health, products, users
from app.schemas.common import violations_from_errors
from app.schemas.views import EMBEDS

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

    # These log every statement / connection at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Validate security-critical configuration (logged, not fatal, so
           local runs with the development secret still start)
    Shutdown:
        1. Drop cached pages
        2. Dispose database engine (close all pooled connections)
    """
    setup_logging()
    logger.info("BileMo API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)

    yield

    logger.info("BileMo API shutting down...")
    app.state.list_cache.store.clear()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    # The catch-all handler runs outside the request-ID middleware, after the
    # ContextVar was reset; request.state still holds the value.
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def _error_body(request: Request, exc: ApiError) -> dict:
    return {
        "error": exc.error_code,
        "message": exc.message,
        "request_id": _request_id(request),
    }


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        ValidationFailedError   → 400 with `violations`
        RequestValidationError  → 400 with `violations` (body/query parsing)
        UnauthorizedError       → 401 + WWW-Authenticate: Bearer
        ApiError (Forbidden, NotFound, ...) → exc.status_code
        Exception (fallback)    → 500, details logged server-side only
    """

    @app.exception_handler(ValidationFailedError)
    async def handle_validation_failed(request: Request, exc: ValidationFailedError):
        logger.warning("[%s] Validation failed: %s", _request_id(request), exc.violations)
        body = _error_body(request, exc)
        body["violations"] = exc.violations
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        violations = violations_from_errors(exc.errors())
        logger.warning("[%s] Invalid request: %s", _request_id(request), violations)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Validation failed",
                "violations": violations,
                "request_id": _request_id(request),
            },
        )

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error("[%s] %s | Context: %s", _request_id(request), exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s", _request_id(request), exc.error_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=_error_body(request, exc))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all: database failures and bugs end up here.
        Stack trace is logged server-side ONLY (never in response).
        """
        rid = _request_id(request)
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

def create_app(cache_store: Optional[TagAwareCache] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        cache_store: Store backing the list cache. Defaults to a fresh
                     in-memory TagAwareCache using CACHE_DEFAULT_TTL; tests
                     pass their own to inspect or pre-fill it.
    """
    app = FastAPI(
        title="BileMo API",
        description=(
            "Catalogue and customer management API. Customers manage their own "
            "users; administrators manage customers and products."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Created here rather than in lifespan: in-process test transports
    # don't run lifespan events and the cache must exist regardless.
    store = cache_store if cache_store is not None else TagAwareCache(
        default_ttl=settings.cache_default_ttl
    )
    app.state.list_cache = ListCache(store, EMBEDS)

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in REVERSE order of addition (last added = first to run)
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

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(customers.router)
    app.include_router(products.router)
    app.include_router(users.router)
    app.include_router(health.router)

    return app


# uvicorn expects `app.main:app` to be importable
app = create_app()
