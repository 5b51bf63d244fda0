"""Product repository for database operations.

Executes composed catalog queries and the single-table taxonomy reads.
"""

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storehub.catalog.models import (
    Brand,
    Color,
    Product,
    ProductStatus,
    ProductType,
    Size,
    Tag,
)
from storehub.catalog.query import CatalogQuery, catalog_load_options


class ProductRepository:
    """Repository for Product database operations.

    Handles all database interactions for products including
    filtering, sorting, and pagination.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            rows, total = await repo.find_catalog_page(
                CatalogQuery.from_filters(filters)
            )
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def find_catalog_page(self, query: CatalogQuery) -> tuple[list[Product], int]:
        """Run a composed catalog query.

        Args:
            query: Composed catalog query.

        Returns:
            Tuple of (products on the requested page, total matching products).
        """
        total = (await self.session.execute(query.count_statement())).scalar_one()
        if total == 0 or query.offset >= total:
            return [], total

        result = await self.session.execute(query.page_statement())
        return list(result.scalars().unique().all()), total

    async def find_one(self, query: CatalogQuery) -> Product | None:
        """Run a composed query and return its first product, if any."""
        result = await self.session.execute(query.page_statement())
        return result.scalars().first()

    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID regardless of status.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    async def list_inventory(self) -> Sequence[Product]:
        """List every product, newest first, with all variants and images.

        Drafts, archived and soft-deleted products are included.

        Returns:
            Sequence of products.
        """
        result = await self.session.execute(
            select(Product)
            .order_by(Product.created_at.desc(), Product.id.asc())
            .options(*catalog_load_options())
        )
        return result.scalars().unique().all()

    async def archive(self, product: Product, user_id: str, now: datetime) -> Product:
        """Soft delete a product.

        Args:
            product: Product to archive.
            user_id: Acting admin.
            now: Timestamp to record.

        Returns:
            Updated product.
        """
        product.deleted_at = now
        product.status = ProductStatus.ARCHIVED
        product.updated_by = user_id
        product.updated_at = now
        await self.session.flush()
        return product

    async def restore(self, product: Product, user_id: str, now: datetime) -> Product:
        """Undo a soft delete and return the product to draft.

        Args:
            product: Product to restore.
            user_id: Acting admin.
            now: Timestamp to record.

        Returns:
            Updated product.
        """
        product.deleted_at = None
        product.status = ProductStatus.DRAFT
        product.updated_by = user_id
        product.updated_at = now
        await self.session.flush()
        return product


class TaxonomyRepository:
    """Single-table reads for facet values."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def get_brands(self) -> Sequence[Brand]:
        """Brands ordered by name."""
        result = await self.session.execute(select(Brand).order_by(Brand.name, Brand.id))
        return result.scalars().all()

    async def get_colors(self) -> Sequence[Color]:
        """Colors ordered by name."""
        result = await self.session.execute(select(Color).order_by(Color.name, Color.id))
        return result.scalars().all()

    async def get_sizes(self) -> Sequence[Size]:
        """Sizes in their explicit display order."""
        result = await self.session.execute(select(Size).order_by(Size.sort_order, Size.id))
        return result.scalars().all()

    async def get_tags(self) -> Sequence[Tag]:
        """Tags ordered by name."""
        result = await self.session.execute(select(Tag).order_by(Tag.name, Tag.id))
        return result.scalars().all()

    async def get_product_types(self) -> Sequence[ProductType]:
        """Product types ordered by name."""
        result = await self.session.execute(
            select(ProductType).order_by(ProductType.name, ProductType.id)
        )
        return result.scalars().all()
