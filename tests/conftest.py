"""Shared fixtures.

Database tests run against a throwaway SQLite file through aiosqlite, with
the production ORM models. Each session gets its own connection (NullPool)
so concurrent reads behave as they do against PostgreSQL.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, AsyncGenerator
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from storehub.catalog.models import (
    Brand,
    Color,
    Product,
    ProductImage,
    ProductStatus,
    ProductTag,
    ProductType,
    ProductVariant,
    Size,
    Tag,
)
from storehub.infrastructure.database import Base
from storehub.infrastructure.models import AdminUserModel, AppConfigModel
from storehub.infrastructure.observability import ErrorReporter

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def session_factory(tmp_path: Path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory bound to a fresh SQLite database."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'storehub.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def reporter() -> MagicMock:
    """Error reporter double that records calls."""
    return MagicMock(spec=ErrorReporter)


# ============================================================================
# Seeding
# ============================================================================


class CatalogSeeder:
    """Inserts catalog rows for tests.

    Products get increasing ``created_at`` values in insertion order unless
    one is given, so "newest first" is the reverse insertion order.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory
        self._created = 0

    async def add(self, *rows: Any) -> None:
        async with self.session_factory() as session:
            session.add_all(rows)
            await session.commit()

    async def brand(self, name: str) -> Brand:
        row = Brand(name=name, slug=name.lower().replace(" ", "-"))
        await self.add(row)
        return row

    async def color(self, name: str, hex: str | None = None) -> Color:
        row = Color(name=name, hex=hex)
        await self.add(row)
        return row

    async def size(self, label: str, sort_order: int = 0) -> Size:
        row = Size(label=label, sort_order=sort_order)
        await self.add(row)
        return row

    async def tag(self, name: str) -> Tag:
        row = Tag(name=name, slug=name.lower().replace(" ", "-"))
        await self.add(row)
        return row

    async def product_type(self, name: str) -> ProductType:
        row = ProductType(name=name, slug=name.lower().replace(" ", "-"))
        await self.add(row)
        return row

    async def product(
        self,
        name: str,
        *,
        slug: str | None = None,
        description: str | None = None,
        base_price: str = "100.00",
        status: ProductStatus = ProductStatus.ACTIVE,
        brand_id: int | None = None,
        product_type_id: int | None = None,
        variants: list[dict[str, Any]] | None = None,
        images: list[dict[str, Any]] | None = None,
        tag_ids: list[int] | None = None,
        created_at: datetime | None = None,
        deleted_at: datetime | None = None,
    ) -> Product:
        """Insert a product.

        ``variants`` entries accept ``price``, ``stock_qty``, ``is_active``,
        ``color_id`` and ``size_id``. By default a product gets one sellable
        variant priced at its base price.
        """
        self._created += 1
        if variants is None:
            variants = [{"price": base_price, "stock_qty": 5}]

        product = Product(
            slug=slug or f"{name.lower().replace(' ', '-')}-{self._created}",
            name=name,
            description=description,
            base_price=Decimal(base_price),
            status=status,
            brand_id=brand_id,
            product_type_id=product_type_id,
            created_at=created_at or BASE_TIME + timedelta(minutes=self._created),
            deleted_at=deleted_at,
            variants=[
                ProductVariant(
                    sku=f"SKU-{uuid4().hex[:12]}",
                    price=Decimal(str(v["price"])),
                    stock_qty=v.get("stock_qty", 5),
                    is_active=v.get("is_active", True),
                    color_id=v.get("color_id"),
                    size_id=v.get("size_id"),
                    created_at=BASE_TIME + timedelta(seconds=i),
                )
                for i, v in enumerate(variants)
            ],
            images=[
                ProductImage(
                    url=img["url"],
                    alt_text=img.get("alt_text"),
                    is_default=img.get("is_default", False),
                    created_at=BASE_TIME + timedelta(seconds=i),
                )
                for i, img in enumerate(images or [])
            ],
            tags=[ProductTag(tag_id=tag_id) for tag_id in tag_ids or []],
        )
        await self.add(product)
        return product

    async def admin(self, user_id: str) -> None:
        await self.add(AdminUserModel(user_id=user_id))

    async def app_config(self, writes_enabled: bool) -> None:
        await self.add(AppConfigModel(writes_enabled=writes_enabled))


@pytest_asyncio.fixture
async def seed(session_factory: async_sessionmaker[AsyncSession]) -> CatalogSeeder:
    """Catalog seeder bound to the test database."""
    return CatalogSeeder(session_factory)
