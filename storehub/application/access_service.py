"""Admin access control.

An admin request needs a signed-in identity (resolved by the auth
provider) whose user ID is present in the ``admin_users`` allow-list.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storehub.domain.exceptions import (
    AccessCheckFailedError,
    AdminAccessDeniedError,
    AuthenticationRequiredError,
)
from storehub.infrastructure.auth_client import AuthClient, Identity, get_auth_client
from storehub.infrastructure.database import async_session_factory
from storehub.infrastructure.models import AdminUserModel
from storehub.infrastructure.observability import ErrorReporter, get_error_reporter

logger = structlog.get_logger()


class AccessService:
    """Resolves callers and enforces the admin allow-list.

    Example usage:
        service = get_access_service()
        identity = await service.require_admin(token)
    """

    def __init__(
        self,
        auth_client: AuthClient | None = None,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
        reporter: ErrorReporter | None = None,
    ) -> None:
        """Initialize service.

        Args:
            auth_client: Auth provider client (defaults to the global one).
            session_factory: Factory for the allow-list lookup session.
            reporter: Error reporter (defaults to the global one).
        """
        self.auth_client = auth_client or get_auth_client()
        self.session_factory = session_factory
        self.reporter = reporter or get_error_reporter()

    async def require_user(self, token: str | None) -> Identity:
        """Resolve the caller or fail.

        Args:
            token: Caller's access token.

        Returns:
            Signed-in identity.

        Raises:
            AuthenticationRequiredError: If there is no valid identity.
        """
        identity = await self.auth_client.get_user(token)
        if identity is None:
            raise AuthenticationRequiredError()
        return identity

    async def is_admin(self, user_id: str) -> bool:
        """Check the allow-list. Store errors propagate."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(AdminUserModel.user_id).where(AdminUserModel.user_id == user_id).limit(1)
            )
            return result.first() is not None

    async def require_admin(self, token: str | None) -> Identity:
        """Resolve the caller and require admin access.

        Args:
            token: Caller's access token.

        Returns:
            Signed-in admin identity.

        Raises:
            AuthenticationRequiredError: If there is no valid identity.
            AccessCheckFailedError: If the allow-list could not be read.
            AdminAccessDeniedError: If the identity is not an admin.
        """
        identity = await self.require_user(token)

        try:
            allowed = await self.is_admin(identity.id)
        except Exception as e:
            self.reporter.report("access.require_admin.lookup", e, {"user_id": identity.id})
            raise AccessCheckFailedError(identity.id) from e

        if not allowed:
            logger.warning("Admin access denied", user_id=identity.id)
            raise AdminAccessDeniedError(identity.id)

        return identity


# Global service instance
_access_service: AccessService | None = None


def get_access_service() -> AccessService:
    """Get the access service singleton.

    Returns:
        AccessService instance.
    """
    global _access_service
    if _access_service is None:
        _access_service = AccessService()
    return _access_service


def reset_access_service() -> None:
    """Drop the singleton (used by tests)."""
    global _access_service
    _access_service = None
