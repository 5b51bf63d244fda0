"""SQLAlchemy models for the footwear catalog.

Defines products, variants, images, tags and the taxonomy tables
(brands, colors, sizes, product types) that facets are built from.
"""

import enum
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storehub.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductStatus(str, enum.Enum):
    """Product lifecycle status."""

    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


# ============================================================================
# Taxonomy
# ============================================================================


class Brand(Base):
    """Footwear brand."""

    __tablename__ = "brands"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(140), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Brand(id={self.id}, name={self.name})>"


class Color(Base):
    """Variant color with an optional display swatch."""

    __tablename__ = "colors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(80), nullable=False)
    hex: Mapped[str | None] = mapped_column(String(9), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Color(id={self.id}, name={self.name})>"


class Size(Base):
    """Variant size. Displayed in ``sort_order``, not alphabetically."""

    __tablename__ = "sizes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    label: Mapped[str] = mapped_column(String(40), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Size(id={self.id}, label={self.label})>"


class Tag(Base):
    """Free-form product tag."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(140), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class ProductType(Base):
    """Product type (e.g. sneakers, boots, sandals)."""

    __tablename__ = "product_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(140), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


# ============================================================================
# Products
# ============================================================================


class Product(Base):
    """Product entity in the catalog.

    A product is visible on the storefront only while it is ``active`` and
    not soft-deleted. Products are never hard-deleted: archiving sets
    ``deleted_at`` and forces ``archived``; restoring clears ``deleted_at``
    and resets the status to ``draft``.

    Attributes:
        id: Unique product identifier (UUID).
        slug: URL-safe unique identifier derived from the name.
        name: Product name.
        description: Product description.
        base_price: Fallback price when no variant carries one.
        status: Lifecycle status.
        brand_id: Brand reference (nullable).
        product_type_id: Product type reference (nullable).
        deleted_at: Soft-delete marker.
        created_by: User that created the product.
        updated_by: User that last changed the product.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    slug: Mapped[str] = mapped_column(String(160), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[ProductStatus] = mapped_column(
        Enum(
            ProductStatus,
            name="product_status",
            values_callable=lambda e: [member.value for member in e],
        ),
        nullable=False,
        default=ProductStatus.DRAFT,
        index=True,
    )
    brand_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("brands.id", ondelete="SET NULL"), nullable=True, index=True
    )
    product_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("product_types.id", ondelete="SET NULL"), nullable=True, index=True
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    brand: Mapped[Brand | None] = relationship("Brand")
    product_type: Mapped[ProductType | None] = relationship("ProductType")
    variants: Mapped[list["ProductVariant"]] = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariant.created_at",
    )
    images: Mapped[list["ProductImage"]] = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImage.created_at",
    )
    tags: Mapped[list["ProductTag"]] = relationship(
        "ProductTag",
        cascade="all, delete-orphan",
        order_by="ProductTag.created_at",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, slug={self.slug})>"

    @property
    def is_visible(self) -> bool:
        """Whether the storefront may show this product."""
        return self.status == ProductStatus.ACTIVE and self.deleted_at is None


class ProductVariant(Base):
    """Sellable size/color combination of a product.

    Either color or size may be missing ("TBD"). A variant is sellable when
    it is active and has stock.
    """

    __tablename__ = "product_variants"
    __table_args__ = (
        CheckConstraint("stock_qty >= 0", name="ck_product_variants_stock_non_negative"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    product_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    color_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("colors.id", ondelete="SET NULL"), nullable=True, index=True
    )
    size_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sizes.id", ondelete="SET NULL"), nullable=True, index=True
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    sku: Mapped[str] = mapped_column(String(80), nullable=False, unique=True)
    stock_qty: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    product: Mapped[Product] = relationship("Product", back_populates="variants")
    color: Mapped[Color | None] = relationship("Color")
    size: Mapped[Size | None] = relationship("Size")

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductVariant(id={self.id}, sku={self.sku})>"

    @property
    def is_sellable(self) -> bool:
        """Active and in stock."""
        return bool(self.is_active) and (self.stock_qty or 0) > 0


class ProductImage(Base):
    """Product image, optionally pinned to one variant."""

    __tablename__ = "product_images"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    product_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    variant_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("product_variants.id", ondelete="SET NULL"),
        nullable=True,
    )
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    storage_path: Mapped[str | None] = mapped_column(String(500), nullable=True)
    alt_text: Mapped[str | None] = mapped_column(String(300), nullable=True)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    # Relationships
    product: Mapped[Product] = relationship("Product", back_populates="images")


class ProductTag(Base):
    """Association between a product and a tag."""

    __tablename__ = "product_tags"

    product_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    # Relationships
    tag: Mapped[Tag | None] = relationship("Tag")
