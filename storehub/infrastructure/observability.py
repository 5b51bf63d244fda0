"""Error observation.

Every degraded read in the service is reported here with a context label,
the error and extra metadata. Reports are written to the structured log
and, when a Sentry DSN is configured, forwarded to Sentry's store endpoint
as a background task. Reporting never raises into the caller.
"""

import asyncio
import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlsplit
from uuid import uuid4

import httpx
import structlog

from storehub.infrastructure.config import settings

logger = structlog.get_logger()

CLIENT_NAME = "storehub-observer/1.0.0"


# ============================================================================
# DSN Parsing
# ============================================================================


@dataclass(frozen=True)
class SentryDsn:
    """Parsed Sentry DSN.

    Attributes:
        scheme: URL scheme (http/https).
        host: Host including port.
        project_id: Sentry project ID.
        public_key: Public key used in the auth header.
        path: Optional path prefix before the project ID.
    """

    scheme: str
    host: str
    project_id: str
    public_key: str
    path: str

    @property
    def store_url(self) -> str:
        """Endpoint that accepts store events."""
        return f"{self.scheme}://{self.host}{self.path}/api/{self.project_id}/store/"


def parse_sentry_dsn(dsn: str | None) -> SentryDsn | None:
    """Parse a DSN of the form ``scheme://key@host[/path]/project``.

    Args:
        dsn: Raw DSN string.

    Returns:
        Parsed DSN, or None when the DSN is empty or malformed.
    """
    if not dsn:
        return None

    try:
        parts = urlsplit(dsn)
        host = parts.netloc.rsplit("@", 1)[-1]
    except ValueError:
        return None

    if not parts.scheme or not host or not parts.username:
        return None

    segments = [s for s in parts.path.rstrip("/").split("/") if s]
    if not segments:
        return None

    base_path = "/".join(segments[:-1])
    return SentryDsn(
        scheme=parts.scheme,
        host=host,
        project_id=segments[-1],
        public_key=parts.username,
        path=f"/{base_path}" if base_path else "",
    )


# ============================================================================
# Reporter
# ============================================================================


def _serialize_error(error: Any) -> dict[str, str | None]:
    """Convert anything raised or returned as an error into plain fields."""
    if isinstance(error, BaseException):
        return {"message": str(error) or type(error).__name__, "name": type(error).__name__}
    if isinstance(error, str):
        return {"message": error, "name": None}
    try:
        return {"message": json.dumps(error, default=str), "name": None}
    except (TypeError, ValueError):
        return {"message": "Unknown error", "name": None}


class ErrorReporter:
    """Fire-and-forget error reporter.

    Example usage:
        reporter = ErrorReporter(dsn=settings.sentry_dsn)
        reporter.report("catalog.fetch_products", exc, {"page": 2})
    """

    def __init__(
        self,
        dsn: str | None = None,
        environment: str = "development",
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize reporter.

        Args:
            dsn: Sentry DSN; sending is disabled when empty or invalid.
            environment: Environment name attached to events.
            timeout: HTTP timeout for the store request.
            transport: Optional httpx transport (used by tests).
        """
        self.dsn = parse_sentry_dsn(dsn)
        self.environment = environment
        self.timeout = timeout
        self.transport = transport
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def enabled(self) -> bool:
        """Whether events are forwarded to Sentry."""
        return self.dsn is not None

    def report(
        self,
        context: str,
        error: Any,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Record an error.

        Args:
            context: Label of the operation that failed (e.g. "catalog.fetch_brands").
            error: Exception or error payload.
            extra: Additional metadata.
        """
        extra = extra or {}
        serialized = _serialize_error(error)

        logger.error(
            "Error reported",
            context=context,
            error=serialized["message"],
            error_type=serialized["name"],
            **{f"extra_{k}": v for k, v in extra.items()},
        )

        if self.dsn is None:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return

        task = loop.create_task(self._send(context, serialized, extra))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def build_event(
        self,
        context: str,
        serialized: dict[str, str | None],
        extra: dict[str, Any],
    ) -> dict[str, Any]:
        """Build a Sentry store event payload."""
        return {
            "event_id": uuid4().hex,
            "level": "error",
            "platform": "python",
            "logger": context,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": self.environment,
            "message": serialized["message"],
            "tags": {"context": context},
            "extra": {**extra, "name": serialized["name"]},
        }

    def auth_header(self) -> str:
        """Build the X-Sentry-Auth header value."""
        assert self.dsn is not None
        return ", ".join(
            [
                "Sentry sentry_version=7",
                f"sentry_client={CLIENT_NAME}",
                f"sentry_timestamp={int(time.time())}",
                f"sentry_key={self.dsn.public_key}",
            ]
        )

    async def _send(
        self,
        context: str,
        serialized: dict[str, str | None],
        extra: dict[str, Any],
    ) -> None:
        assert self.dsn is not None
        payload = self.build_event(context, serialized, extra)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.post(
                    self.dsn.store_url,
                    content=json.dumps(payload, default=str),
                    headers={
                        "Content-Type": "application/json",
                        "X-Sentry-Auth": self.auth_header(),
                    },
                )
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(
                "Failed to forward error report",
                context=context,
                error=str(e),
            )

    async def flush(self) -> None:
        """Wait for in-flight reports (used on shutdown)."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)


# Global reporter instance
_error_reporter: ErrorReporter | None = None


def get_error_reporter() -> ErrorReporter:
    """Get the error reporter singleton.

    Returns:
        ErrorReporter instance.
    """
    global _error_reporter
    if _error_reporter is None:
        _error_reporter = ErrorReporter(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
        )
    return _error_reporter


def reset_error_reporter() -> None:
    """Drop the singleton so the next call rebuilds it from settings."""
    global _error_reporter
    _error_reporter = None


def report_error(
    context: str,
    error: Any,
    extra: dict[str, Any] | None = None,
) -> None:
    """Report an error through the global reporter."""
    get_error_reporter().report(context, error, extra)
