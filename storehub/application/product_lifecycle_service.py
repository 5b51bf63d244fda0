"""Product lifecycle transitions.

Archive (soft delete) and restore for the admin workspace. Both are
guarded by the write-mode flag.
"""

from datetime import datetime, timezone
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storehub.application.write_mode_service import WriteModeService
from storehub.catalog.models import Product
from storehub.catalog.repository import ProductRepository
from storehub.domain.exceptions import ProductNotFoundError
from storehub.infrastructure.database import async_session_factory

logger = structlog.get_logger()


def _is_uuid(value: str) -> bool:
    try:
        UUID(value)
    except (TypeError, ValueError):
        return False
    return True


class ProductLifecycleService:
    """Service for archiving and restoring products.

    Example usage:
        service = ProductLifecycleService(write_mode=get_write_mode_service())
        product = await service.archive(product_id, user_id=admin.id)
        assert product.status == ProductStatus.ARCHIVED
    """

    def __init__(
        self,
        write_mode: WriteModeService,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
    ) -> None:
        """Initialize service.

        Args:
            write_mode: Write-mode flag service guarding mutations.
            session_factory: Factory for the write session.
        """
        self.write_mode = write_mode
        self.session_factory = session_factory

    async def archive(self, product_id: str, user_id: str) -> Product:
        """Soft delete a product.

        Args:
            product_id: Product ID.
            user_id: Acting admin.

        Returns:
            Updated product.

        Raises:
            WritesDisabledError: If view-only mode is active.
            ProductNotFoundError: If the product does not exist.
        """
        return await self._transition(product_id, user_id, archive=True)

    async def restore(self, product_id: str, user_id: str) -> Product:
        """Undo a soft delete; the product returns as a draft.

        Args:
            product_id: Product ID.
            user_id: Acting admin.

        Returns:
            Updated product.

        Raises:
            WritesDisabledError: If view-only mode is active.
            ProductNotFoundError: If the product does not exist.
        """
        return await self._transition(product_id, user_id, archive=False)

    async def _transition(self, product_id: str, user_id: str, archive: bool) -> Product:
        await self.write_mode.ensure_writes_enabled()

        if not _is_uuid(product_id):
            raise ProductNotFoundError(product_id)

        now = datetime.now(timezone.utc)
        async with self.session_factory() as session:
            repo = ProductRepository(session)
            product = await repo.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)

            if archive:
                await repo.archive(product, user_id, now)
            else:
                await repo.restore(product, user_id, now)
            await session.commit()

        logger.info(
            "Product archived" if archive else "Product restored",
            product_id=product_id,
            status=product.status.value,
            user_id=user_id,
        )
        return product
