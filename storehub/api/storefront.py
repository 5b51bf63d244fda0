"""Storefront API endpoints.

Provides the public catalog:
- GET /products - filtered, sorted, paginated catalog page
- GET /products/{slug} - product detail
- GET /taxonomy - facet values for the filter panel
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from storehub.api.dependencies import catalog_service
from storehub.api.schemas import (
    CatalogPageResponse,
    ErrorResponse,
    ProductSchema,
    TaxonomyResponse,
)
from storehub.catalog.filters import collect_query_params, parse_catalog_params
from storehub.catalog.service import CatalogService

router = APIRouter(tags=["Storefront"])


@router.get(
    "/products",
    response_model=CatalogPageResponse,
    summary="Browse the catalog",
    description=(
        "Filter by search term, brand, color, size, tag, product type and "
        "price range. Malformed parameters are ignored, never rejected."
    ),
)
async def list_products(
    request: Request,
    service: Annotated[CatalogService, Depends(catalog_service)],
    q: str | None = Query(default=None, description="Search name, description or slug"),
    brand: list[str] | None = Query(default=None, description="Brand IDs"),
    color: list[str] | None = Query(default=None, description="Color IDs"),
    size: list[str] | None = Query(default=None, description="Size IDs"),
    tag: list[str] | None = Query(default=None, description="Tag IDs"),
    product_type_id: list[str] | None = Query(default=None, description="Product type IDs"),
    min_price: str | None = Query(default=None, description="Lower price bound"),
    max_price: str | None = Query(default=None, description="Upper price bound"),
    sort: str | None = Query(default=None, description="newest, price-asc or price-desc"),
    page: str | None = Query(default=None, description="Page number (1-based)"),
) -> CatalogPageResponse:
    """Render a catalog page.

    The declared parameters document the query-string contract; parsing
    reads the raw query string so malformed values degrade to defaults.

    Args:
        request: Incoming request.
        service: Catalog service.

    Returns:
        Products, pagination and taxonomy.
    """
    filters = parse_catalog_params(collect_query_params(request.query_params.multi_items()))
    page_result = await service.browse(filters)
    return CatalogPageResponse.model_validate(page_result)


@router.get(
    "/products/{slug}",
    response_model=ProductSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Get product details",
)
async def get_product(
    slug: str,
    service: Annotated[CatalogService, Depends(catalog_service)],
) -> ProductSchema:
    """Get a visible product by slug.

    Args:
        slug: Product slug.
        service: Catalog service.

    Returns:
        Product details.

    Raises:
        HTTPException: If the product is not available.
    """
    product = await service.get_product_by_slug(slug)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error_code": "PRODUCT_NOT_FOUND",
                "message": f"Product not found: {slug}",
            },
        )
    return ProductSchema.model_validate(product)


@router.get(
    "/taxonomy",
    response_model=TaxonomyResponse,
    summary="List facet values",
)
async def get_taxonomy(
    service: Annotated[CatalogService, Depends(catalog_service)],
) -> TaxonomyResponse:
    """List brands, colors, sizes, tags and product types.

    Args:
        service: Catalog service.

    Returns:
        Facet values; a facet that failed to load is empty.
    """
    taxonomy = await service.load_taxonomy()
    return TaxonomyResponse.model_validate(taxonomy)
