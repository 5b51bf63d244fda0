"""Catalog view models.

Reshapes joined product rows into the denormalized view the storefront
renders: price range, aggregate stock, flattened tags and a cover image.
Everything here is pure; nothing is cached or written back.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

# ============================================================================
# Summaries
# ============================================================================


@dataclass(frozen=True)
class BrandSummary:
    """Brand facet value."""

    id: int
    name: str


@dataclass(frozen=True)
class ColorSummary:
    """Color facet value with its swatch."""

    id: int
    name: str
    hex: str | None = None


@dataclass(frozen=True)
class SizeSummary:
    """Size facet value."""

    id: int
    label: str


@dataclass(frozen=True)
class TagSummary:
    """Tag facet value."""

    id: int
    name: str
    slug: str | None = None


@dataclass(frozen=True)
class ProductTypeSummary:
    """Product type facet value."""

    id: int
    name: str


@dataclass(frozen=True)
class ImageSummary:
    """Product image as rendered."""

    id: str
    url: str
    alt_text: str | None = None
    width: int | None = None
    height: int | None = None
    is_default: bool = False
    variant_id: str | None = None


# ============================================================================
# Catalog view
# ============================================================================


@dataclass
class CatalogVariant:
    """Variant as rendered, with resolved color and size."""

    id: str
    sku: str
    price: Decimal
    stock_qty: int
    is_active: bool
    color_id: int | None = None
    size_id: int | None = None
    color: ColorSummary | None = None
    size: SizeSummary | None = None

    @property
    def is_sellable(self) -> bool:
        """Active and in stock."""
        return self.is_active and self.stock_qty > 0


@dataclass
class CatalogProduct:
    """Product with derived pricing and stock.

    ``lowest_price``, ``highest_price`` and ``available_stock`` are computed
    from the reference variants on every fetch.
    """

    id: str
    slug: str
    name: str
    description: str | None
    base_price: Decimal
    created_at: datetime | None
    brand: BrandSummary | None
    product_type: ProductTypeSummary | None
    variants: list[CatalogVariant]
    images: list[ImageSummary]
    tags: list[TagSummary]
    lowest_price: Decimal
    highest_price: Decimal
    available_stock: int
    status: str | None = None
    deleted_at: datetime | None = None

    @property
    def default_image(self) -> ImageSummary | None:
        """Image flagged as default, else the first image, else None."""
        for image in self.images:
            if image.is_default:
                return image
        return self.images[0] if self.images else None

    @property
    def size_labels(self) -> list[str]:
        """Distinct size labels of the variants, first-seen order."""
        return _distinct(v.size.label for v in self.variants if v.size and v.size.label)

    @property
    def color_labels(self) -> list[str]:
        """Distinct color names of the variants, first-seen order."""
        return _distinct(v.color.name for v in self.variants if v.color and v.color.name)


def _distinct(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


# ============================================================================
# Transformation
# ============================================================================


def select_reference_variants(variants: Sequence[Any]) -> list[Any]:
    """Pick the variants that drive displayed price and stock.

    Tiers, first non-empty wins:
        1. sellable variants (active and stock > 0);
        2. active variants regardless of stock;
        3. every variant.

    An empty result means the product has no variants at all and the base
    price is the only price signal.

    Args:
        variants: Variant rows (anything with ``is_active`` and ``is_sellable``).

    Returns:
        Reference variants.
    """
    sellable = [v for v in variants if v.is_sellable]
    if sellable:
        return sellable
    active = [v for v in variants if v.is_active]
    if active:
        return active
    return list(variants)


def _brand(row: Any) -> BrandSummary | None:
    return BrandSummary(id=row.id, name=row.name) if row is not None else None


def _product_type(row: Any) -> ProductTypeSummary | None:
    return ProductTypeSummary(id=row.id, name=row.name) if row is not None else None


def to_catalog_variant(row: Any) -> CatalogVariant:
    """Map a variant row to its view."""
    color = getattr(row, "color", None)
    size = getattr(row, "size", None)
    return CatalogVariant(
        id=str(row.id),
        sku=row.sku,
        price=Decimal(row.price),
        stock_qty=row.stock_qty or 0,
        is_active=bool(row.is_active),
        color_id=row.color_id,
        size_id=row.size_id,
        color=ColorSummary(id=color.id, name=color.name, hex=color.hex) if color else None,
        size=SizeSummary(id=size.id, label=size.label) if size else None,
    )


def to_image_summary(row: Any) -> ImageSummary:
    """Map an image row to its view."""
    return ImageSummary(
        id=str(row.id),
        url=row.url,
        alt_text=row.alt_text,
        width=row.width,
        height=row.height,
        is_default=bool(getattr(row, "is_default", False)),
        variant_id=str(row.variant_id) if getattr(row, "variant_id", None) else None,
    )


def to_catalog_product(row: Any) -> CatalogProduct:
    """Transform a joined product row into a CatalogProduct.

    Args:
        row: Product row with ``variants``, ``images`` and ``tags`` loaded
            (``tags`` holds association rows exposing ``.tag``).

    Returns:
        Catalog view of the product.
    """
    variants = list(getattr(row, "variants", None) or [])
    base_price = Decimal(row.base_price)

    reference = select_reference_variants(variants)
    price_samples = [Decimal(v.price) for v in reference] or [base_price]
    available_stock = sum(max(v.stock_qty or 0, 0) for v in reference)

    tags = [
        TagSummary(id=entry.tag.id, name=entry.tag.name, slug=entry.tag.slug)
        for entry in (getattr(row, "tags", None) or [])
        if entry is not None and getattr(entry, "tag", None) is not None
    ]

    status = getattr(row, "status", None)
    return CatalogProduct(
        id=str(row.id),
        slug=row.slug,
        name=row.name,
        description=row.description,
        base_price=base_price,
        created_at=getattr(row, "created_at", None),
        brand=_brand(getattr(row, "brand", None)),
        product_type=_product_type(getattr(row, "product_type", None)),
        variants=[to_catalog_variant(v) for v in variants],
        images=[to_image_summary(i) for i in (getattr(row, "images", None) or [])],
        tags=tags,
        lowest_price=min(price_samples),
        highest_price=max(price_samples),
        available_stock=available_stock,
        status=getattr(status, "value", status),
        deleted_at=getattr(row, "deleted_at", None),
    )
