"""StoreHub API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storehub.api.admin import router as admin_router
from storehub.api.health import router as health_router
from storehub.api.middleware import error_response, setup_middleware
from storehub.api.storefront import router as storefront_router
from storehub.infrastructure.config import settings
from storehub.infrastructure.database import engine
from storehub.infrastructure.logging import configure_logging
from storehub.infrastructure.observability import get_error_reporter

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    configure_logging(settings.log_level)
    reporter = get_error_reporter()
    logger.info(
        "Starting StoreHub API",
        version=settings.api_version,
        environment=settings.environment,
        debug=settings.debug,
        error_reporting=reporter.enabled,
    )

    yield

    logger.info("Shutting down StoreHub API")
    await reporter.flush()
    await engine.dispose()


app = FastAPI(
    title="StoreHub API",
    description="Storefront catalog and inventory administration",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(storefront_router)
app.include_router(admin_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return error_response(
        exc.status_code,
        error_code,
        message,
        getattr(request.state, "request_id", None),
        details=details,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return error_response(
        500,
        "INTERNAL_ERROR",
        "An internal error occurred",
        getattr(request.state, "request_id", None),
    )
