"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from datetime import datetime, timezone
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storehub.api.dependencies import get_session_factory, write_mode_service
from storehub.api.schemas import HealthResponse, ReadinessResponse
from storehub.application.write_mode_service import WriteModeService
from storehub.infrastructure.config import settings

logger = structlog.get_logger()

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def health_check(
    write_mode: Annotated[WriteModeService, Depends(write_mode_service)],
) -> HealthResponse | JSONResponse:
    """Check service health and report the write-mode flag.

    Returns:
        Health status. 503 with ``status="error"`` when the flag could not
        be read; ``writes_enabled`` then carries the fail-open value.
    """
    flag = await write_mode.read_status(context="api.health.config")
    health = HealthResponse(
        status="ok" if flag.read_ok else "error",
        timestamp=datetime.now(timezone.utc),
        environment=settings.environment,
        version=settings.api_version,
        writes_enabled=flag.writes_enabled,
    )
    if not flag.read_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=health.model_dump(mode="json"),
        )
    return health


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
)
async def readiness_check(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> ReadinessResponse | JSONResponse:
    """Check if service is ready to accept requests.

    Returns:
        Readiness status, 503 when the database is unreachable.
    """
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Readiness check failed", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "database": "unreachable"},
        )
    return ReadinessResponse(status="ready", database="ok")
