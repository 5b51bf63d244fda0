"""Shared fixtures for API tests.

Services are replaced through ``app.dependency_overrides`` with doubles so
the HTTP layer is tested without a database or auth provider.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from storehub.api.dependencies import (
    access_service,
    catalog_service,
    lifecycle_service,
    require_admin,
    write_mode_service,
)
from storehub.application.access_service import AccessService
from storehub.application.product_lifecycle_service import ProductLifecycleService
from storehub.application.write_mode_service import WriteModeService, WriteModeStatus
from storehub.catalog.service import CatalogService
from storehub.catalog.taxonomy import CatalogTaxonomy
from storehub.catalog.views import (
    BrandSummary,
    CatalogProduct,
    CatalogVariant,
    ColorSummary,
    ImageSummary,
    SizeSummary,
    TagSummary,
)
from storehub.infrastructure.auth_client import Identity
from storehub.main import app

ADMIN = Identity(id="11111111-1111-1111-1111-111111111111", email="admin@example.com")


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create test client and clear overrides afterwards."""
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_product() -> CatalogProduct:
    """A catalog product view."""
    return CatalogProduct(
        id="7b0c6d1e-5f0a-4c1b-9a55-0d7f6f0b1a01",
        slug="trail-runner",
        name="Trail Runner",
        description="Grippy outsole",
        base_price=Decimal("100.00"),
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        brand=BrandSummary(id=7, name="Acme"),
        product_type=None,
        variants=[
            CatalogVariant(
                id="v1",
                sku="TR-RED-S",
                price=Decimal("60.00"),
                stock_qty=2,
                is_active=True,
                color_id=1,
                size_id=1,
                color=ColorSummary(id=1, name="Red", hex="#ff0000"),
                size=SizeSummary(id=1, label="S"),
            ),
            CatalogVariant(
                id="v2",
                sku="TR-RED-M",
                price=Decimal("120.00"),
                stock_qty=3,
                is_active=True,
                color_id=1,
                size_id=2,
                color=ColorSummary(id=1, name="Red", hex="#ff0000"),
                size=SizeSummary(id=2, label="M"),
            ),
        ],
        images=[ImageSummary(id="i1", url="https://cdn.example.com/tr.jpg", is_default=True)],
        tags=[TagSummary(id=3, name="Sale", slug="sale")],
        lowest_price=Decimal("60.00"),
        highest_price=Decimal("120.00"),
        available_stock=5,
        status="active",
    )


@pytest.fixture
def taxonomy() -> CatalogTaxonomy:
    """Facet values."""
    return CatalogTaxonomy(
        brands=[BrandSummary(id=7, name="Acme")],
        colors=[ColorSummary(id=1, name="Red", hex="#ff0000")],
        sizes=[SizeSummary(id=1, label="S"), SizeSummary(id=2, label="M")],
        tags=[TagSummary(id=3, name="Sale", slug="sale")],
        product_types=[],
    )


@pytest.fixture
def catalog(taxonomy: CatalogTaxonomy) -> MagicMock:
    """Catalog service double installed on the app."""
    service = MagicMock(spec=CatalogService)
    service.load_taxonomy = AsyncMock(return_value=taxonomy)
    service.get_product_by_slug = AsyncMock(return_value=None)
    service.list_inventory = AsyncMock(return_value=[])
    app.dependency_overrides[catalog_service] = lambda: service
    return service


@pytest.fixture
def write_mode() -> MagicMock:
    """Write mode service double installed on the app (writes enabled)."""
    service = MagicMock(spec=WriteModeService)
    service.read_status = AsyncMock(return_value=WriteModeStatus(writes_enabled=True))
    service.is_writes_enabled = AsyncMock(return_value=True)
    service.set_writes_enabled = AsyncMock(side_effect=lambda enabled, user_id=None: enabled)
    app.dependency_overrides[write_mode_service] = lambda: service
    return service


@pytest.fixture
def lifecycle() -> MagicMock:
    """Lifecycle service double installed on the app."""
    service = MagicMock(spec=ProductLifecycleService)
    service.archive = AsyncMock()
    service.restore = AsyncMock()
    app.dependency_overrides[lifecycle_service] = lambda: service
    return service


@pytest.fixture
def as_admin() -> Identity:
    """Treat every request as coming from an admin."""
    app.dependency_overrides[require_admin] = lambda: ADMIN
    return ADMIN


@pytest.fixture
def access() -> MagicMock:
    """Access service double installed on the app."""
    service = MagicMock(spec=AccessService)
    service.require_admin = AsyncMock(return_value=ADMIN)
    app.dependency_overrides[access_service] = lambda: service
    return service
