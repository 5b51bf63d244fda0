"""Shared FastAPI dependencies.

Service providers are plain functions so tests can swap them through
``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storehub.application.access_service import AccessService, get_access_service
from storehub.application.product_lifecycle_service import ProductLifecycleService
from storehub.application.write_mode_service import (
    WriteModeService,
    get_write_mode_service,
)
from storehub.catalog.service import CatalogService, get_catalog_service
from storehub.domain.exceptions import DomainError
from storehub.infrastructure.auth_client import Identity, extract_access_token
from storehub.infrastructure.database import async_session_factory

# ============================================================================
# Error Translation
# ============================================================================


HTTP_STATUS_BY_ERROR_CODE: dict[str, int] = {
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "ADMIN_REQUIRED": status.HTTP_403_FORBIDDEN,
    "PRODUCT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "WRITES_DISABLED": status.HTTP_423_LOCKED,
    "ACCESS_CHECK_FAILED": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def domain_http_error(error: DomainError) -> HTTPException:
    """Convert a domain error into an HTTPException with the error envelope.

    Args:
        error: Domain error raised by a service.

    Returns:
        HTTPException to raise from the route.
    """
    status_code = HTTP_STATUS_BY_ERROR_CODE.get(
        error.error_code, status.HTTP_400_BAD_REQUEST
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return HTTPException(
        status_code=status_code,
        detail={
            "error_code": error.error_code,
            "message": error.message,
            "details": error.details,
        },
        headers=headers,
    )


# ============================================================================
# Providers
# ============================================================================


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory used by readiness checks."""
    return async_session_factory


def catalog_service() -> CatalogService:
    """Catalog service provider."""
    return get_catalog_service()


def write_mode_service() -> WriteModeService:
    """Write mode service provider."""
    return get_write_mode_service()


def access_service() -> AccessService:
    """Access service provider."""
    return get_access_service()


def lifecycle_service(
    write_mode: Annotated[WriteModeService, Depends(write_mode_service)],
) -> ProductLifecycleService:
    """Product lifecycle service bound to the current write mode service."""
    return ProductLifecycleService(write_mode=write_mode)


async def require_admin(
    request: Request,
    access: Annotated[AccessService, Depends(access_service)],
) -> Identity:
    """Require an authenticated admin.

    The access token comes from the Bearer header or the session cookie.

    Raises:
        HTTPException: 401, 403 or 503 depending on the failed check.
    """
    token = extract_access_token(request.headers.get("Authorization"), request.cookies)
    try:
        return await access.require_admin(token)
    except DomainError as e:
        raise domain_http_error(e) from e
