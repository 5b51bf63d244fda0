"""API schemas for StoreHub.

Pydantic models for request/response validation and serialization.
Catalog views are plain dataclasses; these schemas read them via
``from_attributes``.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from storehub.catalog.filters import CatalogSort


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | list[Any] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class ViewSchema(BaseModel):
    """Base for schemas populated from catalog view objects."""

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Taxonomy Schemas
# ============================================================================


class BrandSchema(ViewSchema):
    """Brand facet value."""

    id: int
    name: str


class ColorSchema(ViewSchema):
    """Color facet value."""

    id: int
    name: str
    hex: str | None = None


class SizeSchema(ViewSchema):
    """Size facet value."""

    id: int
    label: str


class TagSchema(ViewSchema):
    """Tag facet value."""

    id: int
    name: str
    slug: str | None = None


class ProductTypeSchema(ViewSchema):
    """Product type facet value."""

    id: int
    name: str


class TaxonomyResponse(ViewSchema):
    """All facet values in display order."""

    brands: list[BrandSchema] = Field(default_factory=list)
    colors: list[ColorSchema] = Field(default_factory=list)
    sizes: list[SizeSchema] = Field(default_factory=list)
    tags: list[TagSchema] = Field(default_factory=list)
    product_types: list[ProductTypeSchema] = Field(default_factory=list)


# ============================================================================
# Product Schemas
# ============================================================================


class ImageSchema(ViewSchema):
    """Product image."""

    id: str
    url: str
    alt_text: str | None = None
    width: int | None = None
    height: int | None = None
    is_default: bool = False
    variant_id: str | None = None


class VariantSchema(ViewSchema):
    """Product variant."""

    id: str
    sku: str
    price: Decimal
    stock_qty: int
    is_active: bool
    is_sellable: bool
    color: ColorSchema | None = None
    size: SizeSchema | None = None


class ProductSchema(ViewSchema):
    """Catalog product with derived price range and stock."""

    id: str
    slug: str
    name: str
    description: str | None = None
    base_price: Decimal
    lowest_price: Decimal = Field(..., description="Lowest reference variant price")
    highest_price: Decimal = Field(..., description="Highest reference variant price")
    available_stock: int = Field(..., description="Stock across reference variants")
    brand: BrandSchema | None = None
    product_type: ProductTypeSchema | None = None
    variants: list[VariantSchema] = Field(default_factory=list)
    images: list[ImageSchema] = Field(default_factory=list)
    default_image: ImageSchema | None = None
    tags: list[TagSchema] = Field(default_factory=list)
    size_labels: list[str] = Field(default_factory=list)
    color_labels: list[str] = Field(default_factory=list)
    created_at: datetime | None = None


class InventoryProductSchema(ProductSchema):
    """Product as shown in the admin workspace."""

    status: str | None = None
    deleted_at: datetime | None = None


# ============================================================================
# Catalog Page Schemas
# ============================================================================


class CatalogFiltersSchema(ViewSchema):
    """Parsed catalog filters, echoed back to the client."""

    search: str | None = None
    brand_ids: list[int] = Field(default_factory=list)
    color_ids: list[int] = Field(default_factory=list)
    size_ids: list[int] = Field(default_factory=list)
    tag_ids: list[int] = Field(default_factory=list)
    product_type_ids: list[int] = Field(default_factory=list)
    min_price: float | None = None
    max_price: float | None = None
    sort: CatalogSort = CatalogSort.NEWEST
    page: int = 1


class CatalogPageResponse(ViewSchema):
    """One catalog page."""

    products: list[ProductSchema]
    total: int = Field(..., description="Total matching products")
    page: int = Field(..., description="Current page number")
    page_size: int = Field(..., description="Items per page")
    total_pages: int
    has_next: bool
    has_prev: bool
    next_query: str | None = Field(default=None, description="Query string of the next page")
    prev_query: str | None = Field(default=None, description="Query string of the previous page")
    filters: CatalogFiltersSchema
    taxonomy: TaxonomyResponse | None = None


# ============================================================================
# Health Schemas
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    environment: str
    version: str
    writes_enabled: bool


class ReadinessResponse(BaseModel):
    """Readiness check response schema."""

    status: str
    database: str


# ============================================================================
# Admin Schemas
# ============================================================================


class WriteModeResponse(BaseModel):
    """Current write mode."""

    writes_enabled: bool


class WriteModeUpdateRequest(BaseModel):
    """Request to toggle write mode."""

    writes_enabled: bool = Field(..., description="Whether inventory writes are allowed")


class InventoryResponse(BaseModel):
    """Admin inventory listing."""

    products: list[InventoryProductSchema]
    total: int
    taxonomy: TaxonomyResponse
    writes_enabled: bool


class ProductLifecycleResponse(BaseModel):
    """Result of an archive or restore."""

    id: str
    status: str
    deleted_at: datetime | None = None
    updated_by: str | None = None
    updated_at: datetime | None = None
