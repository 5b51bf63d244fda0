"""HTTP middleware and the shared error envelope.

Every error leaving the API, whether raised by a route, by FastAPI
validation or by a crash, is rendered through ``error_response`` so clients
always see ``{error_code, message, details, request_id}``.
"""

import re
import time
from typing import Any, Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from storehub.infrastructure.observability import get_error_reporter

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied IDs are echoed into logs and headers, so keep them tame
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

# Probe endpoints hit every few seconds; logged at debug only
QUIET_PATHS = frozenset({"/health", "/ready"})


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    request_id: str | None,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render the API error envelope.

    Args:
        status_code: HTTP status.
        error_code: Machine-readable code, e.g. ``PRODUCT_NOT_FOUND``.
        message: Human-readable message.
        request_id: Correlation ID of the failing request, if known.
        details: Extra structured context (list or dict).
        headers: Extra response headers.

    Returns:
        JSON response carrying the envelope.
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details if details is not None else [],
            "request_id": request_id,
        },
        headers=headers,
    )


def resolve_request_id(raw: str | None) -> str:
    """Reuse a well-formed incoming request ID, otherwise mint one."""
    if raw and _REQUEST_ID_PATTERN.match(raw):
        return raw
    return str(uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Correlate logs and responses with a request ID.

    The ID is bound into structlog's context for the whole request, stored
    on ``request.state`` for exception handlers and echoed back in the
    ``X-Request-ID`` header.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            log = logger.debug if request.url.path in QUIET_PATHS else logger.info
            log(
                "Request completed",
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.unbind_contextvars("request_id", "method", "path")


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn crashes that escape the routes into a reported 500 envelope."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception("Unhandled exception", error=str(e))
            get_error_reporter().report(
                "api.unhandled",
                e,
                {"method": request.method, "path": request.url.path},
            )
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "INTERNAL_ERROR",
                "An internal error occurred",
                getattr(request.state, "request_id", None),
            )


def setup_middleware(app: FastAPI) -> None:
    """Install middleware; the last one added runs first.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestIdMiddleware)
