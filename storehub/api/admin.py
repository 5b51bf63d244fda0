"""Admin API endpoints.

Every route requires a signed-in identity on the admin allow-list:
- GET /admin/inventory - all products regardless of status
- GET /admin/write-mode - current write mode
- PUT /admin/write-mode - toggle write mode
- POST /admin/products/{id}/archive - soft delete a product
- POST /admin/products/{id}/restore - restore a product to draft
"""

import asyncio
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends

from storehub.api.dependencies import (
    catalog_service,
    domain_http_error,
    lifecycle_service,
    require_admin,
    write_mode_service,
)
from storehub.api.schemas import (
    ErrorResponse,
    InventoryProductSchema,
    InventoryResponse,
    ProductLifecycleResponse,
    TaxonomyResponse,
    WriteModeResponse,
    WriteModeUpdateRequest,
)
from storehub.application.product_lifecycle_service import ProductLifecycleService
from storehub.application.write_mode_service import WriteModeService
from storehub.catalog.models import Product
from storehub.catalog.service import CatalogService
from storehub.domain.exceptions import DomainError
from storehub.infrastructure.auth_client import Identity

logger = structlog.get_logger()

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)

AdminIdentity = Annotated[Identity, Depends(require_admin)]


# ============================================================================
# Converters
# ============================================================================


def lifecycle_to_response(product: Product) -> ProductLifecycleResponse:
    """Convert an updated product row to the lifecycle response."""
    return ProductLifecycleResponse(
        id=str(product.id),
        status=getattr(product.status, "value", product.status),
        deleted_at=product.deleted_at,
        updated_by=product.updated_by,
        updated_at=product.updated_at,
    )


# ============================================================================
# Inventory
# ============================================================================


@router.get(
    "/inventory",
    response_model=InventoryResponse,
    summary="List inventory",
    description="Every product including drafts, archived and soft-deleted ones.",
)
async def list_inventory(
    admin: AdminIdentity,
    catalog: Annotated[CatalogService, Depends(catalog_service)],
    write_mode: Annotated[WriteModeService, Depends(write_mode_service)],
) -> InventoryResponse:
    """List all products with taxonomy and the current write mode.

    Args:
        admin: Signed-in admin.
        catalog: Catalog service.
        write_mode: Write mode service.

    Returns:
        Inventory listing.
    """
    products, taxonomy, flag = await asyncio.gather(
        catalog.list_inventory(),
        catalog.load_taxonomy(),
        write_mode.read_status(),
    )
    return InventoryResponse(
        products=[InventoryProductSchema.model_validate(p) for p in products],
        total=len(products),
        taxonomy=TaxonomyResponse.model_validate(taxonomy),
        writes_enabled=flag.writes_enabled,
    )


# ============================================================================
# Write Mode
# ============================================================================


@router.get("/write-mode", response_model=WriteModeResponse, summary="Get write mode")
async def get_write_mode(
    admin: AdminIdentity,
    write_mode: Annotated[WriteModeService, Depends(write_mode_service)],
) -> WriteModeResponse:
    """Read the write-mode flag (fail-open)."""
    return WriteModeResponse(writes_enabled=await write_mode.is_writes_enabled())


@router.put("/write-mode", response_model=WriteModeResponse, summary="Set write mode")
async def set_write_mode(
    body: WriteModeUpdateRequest,
    admin: AdminIdentity,
    write_mode: Annotated[WriteModeService, Depends(write_mode_service)],
) -> WriteModeResponse:
    """Toggle the write-mode flag.

    Allowed while writes are disabled, otherwise the flag could never be
    switched back on.

    Args:
        body: New flag value.
        admin: Signed-in admin.
        write_mode: Write mode service.

    Returns:
        Stored flag value.
    """
    stored = await write_mode.set_writes_enabled(body.writes_enabled, user_id=admin.id)
    return WriteModeResponse(writes_enabled=stored)


# ============================================================================
# Product Lifecycle
# ============================================================================


@router.post(
    "/products/{product_id}/archive",
    response_model=ProductLifecycleResponse,
    responses={404: {"model": ErrorResponse}, 423: {"model": ErrorResponse}},
    summary="Archive a product",
)
async def archive_product(
    product_id: str,
    admin: AdminIdentity,
    service: Annotated[ProductLifecycleService, Depends(lifecycle_service)],
) -> ProductLifecycleResponse:
    """Soft delete a product.

    Raises:
        HTTPException: 404 for unknown products, 423 while writes are disabled.
    """
    try:
        product = await service.archive(product_id, user_id=admin.id)
    except DomainError as e:
        raise domain_http_error(e) from e
    return lifecycle_to_response(product)


@router.post(
    "/products/{product_id}/restore",
    response_model=ProductLifecycleResponse,
    responses={404: {"model": ErrorResponse}, 423: {"model": ErrorResponse}},
    summary="Restore a product",
)
async def restore_product(
    product_id: str,
    admin: AdminIdentity,
    service: Annotated[ProductLifecycleService, Depends(lifecycle_service)],
) -> ProductLifecycleResponse:
    """Restore an archived product to draft.

    Raises:
        HTTPException: 404 for unknown products, 423 while writes are disabled.
    """
    try:
        product = await service.restore(product_id, user_id=admin.id)
    except DomainError as e:
        raise domain_http_error(e) from e
    return lifecycle_to_response(product)
