"""Tests for admin endpoints."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from storehub.catalog.models import Product, ProductStatus
from storehub.catalog.views import CatalogProduct
from storehub.domain.exceptions import (
    AccessCheckFailedError,
    AdminAccessDeniedError,
    AuthenticationRequiredError,
    ProductNotFoundError,
    WritesDisabledError,
)
from storehub.infrastructure.auth_client import Identity

PRODUCT_ID = "7b0c6d1e-5f0a-4c1b-9a55-0d7f6f0b1a01"


def product_row(status: ProductStatus, deleted: bool) -> Product:
    """Detached product row as returned by the lifecycle service."""
    now = datetime(2026, 3, 1, tzinfo=timezone.utc)
    return Product(
        id=PRODUCT_ID,
        slug="trail-runner",
        name="Trail Runner",
        status=status,
        deleted_at=now if deleted else None,
        updated_by="admin",
        updated_at=now,
    )


class TestAdminAccess:
    """Tests for the admin access gate."""

    def test_token_forwarded_from_bearer_header(
        self, client: TestClient, access: MagicMock, write_mode: MagicMock
    ) -> None:
        """The Bearer token is passed to the access check."""
        response = client.get("/admin/write-mode", headers={"Authorization": "Bearer tok-1"})

        assert response.status_code == 200
        access.require_admin.assert_awaited_once_with("tok-1")

    def test_token_forwarded_from_cookie(
        self, client: TestClient, access: MagicMock, write_mode: MagicMock
    ) -> None:
        """The session cookie is used without a header."""
        client.cookies.set("sb-access-token", "cookie-tok")

        response = client.get("/admin/write-mode")

        assert response.status_code == 200
        access.require_admin.assert_awaited_once_with("cookie-tok")

    def test_unauthenticated(self, client: TestClient, access: MagicMock) -> None:
        """Anonymous callers get 401."""
        access.require_admin = AsyncMock(side_effect=AuthenticationRequiredError())

        response = client.get("/admin/inventory")

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_not_admin(self, client: TestClient, access: MagicMock) -> None:
        """Signed-in non-admins get 403."""
        access.require_admin = AsyncMock(side_effect=AdminAccessDeniedError("user-2"))

        response = client.get("/admin/inventory", headers={"Authorization": "Bearer t"})

        assert response.status_code == 403
        data = response.json()
        assert data["error_code"] == "ADMIN_REQUIRED"
        assert data["details"] == {"user_id": "user-2"}

    def test_lookup_failure(self, client: TestClient, access: MagicMock) -> None:
        """A failed allow-list lookup gives 503."""
        access.require_admin = AsyncMock(side_effect=AccessCheckFailedError("user-1"))

        response = client.post(f"/admin/products/{PRODUCT_ID}/archive")

        assert response.status_code == 503
        assert response.json()["error_code"] == "ACCESS_CHECK_FAILED"


class TestInventory:
    """Tests for GET /admin/inventory."""

    def test_lists_products_taxonomy_and_flag(
        self,
        client: TestClient,
        as_admin: Identity,
        catalog: MagicMock,
        write_mode: MagicMock,
        sample_product: CatalogProduct,
    ) -> None:
        """Inventory bundles products, taxonomy and write mode."""
        catalog.list_inventory = AsyncMock(return_value=[sample_product])

        response = client.get("/admin/inventory")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["products"][0]["status"] == "active"
        assert data["writes_enabled"] is True
        assert [b["name"] for b in data["taxonomy"]["brands"]] == ["Acme"]


class TestWriteMode:
    """Tests for the write-mode endpoints."""

    def test_get(self, client: TestClient, as_admin: Identity, write_mode: MagicMock) -> None:
        """Current flag is returned."""
        write_mode.is_writes_enabled = AsyncMock(return_value=False)

        response = client.get("/admin/write-mode")

        assert response.status_code == 200
        assert response.json() == {"writes_enabled": False}

    def test_put(self, client: TestClient, as_admin: Identity, write_mode: MagicMock) -> None:
        """Toggling stores the flag and records the admin."""
        response = client.put("/admin/write-mode", json={"writes_enabled": False})

        assert response.status_code == 200
        assert response.json() == {"writes_enabled": False}
        write_mode.set_writes_enabled.assert_awaited_once_with(False, user_id=as_admin.id)

    def test_put_requires_boolean(
        self, client: TestClient, as_admin: Identity, write_mode: MagicMock
    ) -> None:
        """Invalid bodies are rejected by validation."""
        response = client.put("/admin/write-mode", json={})

        assert response.status_code == 422


class TestProductLifecycle:
    """Tests for archive and restore endpoints."""

    def test_archive(self, client: TestClient, as_admin: Identity, lifecycle: MagicMock) -> None:
        """Archiving returns the updated status."""
        lifecycle.archive = AsyncMock(return_value=product_row(ProductStatus.ARCHIVED, True))

        response = client.post(f"/admin/products/{PRODUCT_ID}/archive")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == PRODUCT_ID
        assert data["status"] == "archived"
        assert data["deleted_at"] is not None
        lifecycle.archive.assert_awaited_once_with(PRODUCT_ID, user_id=as_admin.id)

    def test_restore(self, client: TestClient, as_admin: Identity, lifecycle: MagicMock) -> None:
        """Restoring returns a draft without a deletion marker."""
        lifecycle.restore = AsyncMock(return_value=product_row(ProductStatus.DRAFT, False))

        response = client.post(f"/admin/products/{PRODUCT_ID}/restore")

        assert response.status_code == 200
        assert response.json()["status"] == "draft"
        assert response.json()["deleted_at"] is None

    def test_writes_disabled(
        self, client: TestClient, as_admin: Identity, lifecycle: MagicMock
    ) -> None:
        """View-only mode returns 423."""
        lifecycle.archive = AsyncMock(side_effect=WritesDisabledError())

        response = client.post(f"/admin/products/{PRODUCT_ID}/archive")

        assert response.status_code == 423
        assert response.json()["error_code"] == "WRITES_DISABLED"

    def test_not_found(self, client: TestClient, as_admin: Identity, lifecycle: MagicMock) -> None:
        """Unknown products return 404."""
        lifecycle.restore = AsyncMock(side_effect=ProductNotFoundError("nope"))

        response = client.post("/admin/products/nope/restore")

        assert response.status_code == 404
        assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"
