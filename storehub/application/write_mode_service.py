"""Write mode service.

Reads and toggles the global ``writes_enabled`` flag stored in
``app_config``. The flag is read fresh on every call and never cached in
process. A failed or empty read is treated as enabled (fail-open) so a
transient store error cannot lock administrators out.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storehub.domain.exceptions import WritesDisabledError
from storehub.infrastructure.database import async_session_factory
from storehub.infrastructure.models import AppConfigModel
from storehub.infrastructure.observability import ErrorReporter, get_error_reporter

logger = structlog.get_logger()


@dataclass(frozen=True)
class WriteModeStatus:
    """Result of a flag read.

    Attributes:
        writes_enabled: Effective flag value (True when the read failed).
        read_ok: Whether the config store answered.
    """

    writes_enabled: bool
    read_ok: bool = True


async def _latest_config(session: AsyncSession) -> AppConfigModel | None:
    result = await session.execute(
        select(AppConfigModel).order_by(AppConfigModel.id.desc()).limit(1)
    )
    return result.scalar_one_or_none()


class WriteModeService:
    """Service for the inventory write-mode flag.

    Example usage:
        service = get_write_mode_service()
        await service.ensure_writes_enabled()  # raises WritesDisabledError
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
        reporter: ErrorReporter | None = None,
    ) -> None:
        """Initialize service.

        Args:
            session_factory: Factory for per-call sessions.
            reporter: Error reporter (defaults to the global one).
        """
        self.session_factory = session_factory
        self.reporter = reporter or get_error_reporter()

    async def read_status(self, context: str = "write_mode.read") -> WriteModeStatus:
        """Read the flag, reporting whether the read succeeded.

        Args:
            context: Error context label used if the read fails.

        Returns:
            WriteModeStatus; ``writes_enabled`` is True when no row exists
            or the read failed.
        """
        try:
            async with self.session_factory() as session:
                row = await _latest_config(session)
        except Exception as e:
            self.reporter.report(context, e)
            return WriteModeStatus(writes_enabled=True, read_ok=False)

        if row is None or row.writes_enabled is None:
            return WriteModeStatus(writes_enabled=True)
        return WriteModeStatus(writes_enabled=bool(row.writes_enabled))

    async def is_writes_enabled(self) -> bool:
        """Current flag value, fail-open."""
        status = await self.read_status()
        return status.writes_enabled

    async def ensure_writes_enabled(self) -> None:
        """Guard a mutation.

        Raises:
            WritesDisabledError: If view-only mode is active.
        """
        if not await self.is_writes_enabled():
            raise WritesDisabledError()

    async def set_writes_enabled(self, enabled: bool, user_id: str | None = None) -> bool:
        """Toggle the flag.

        Updates the authoritative (latest) row, or inserts the first one.
        Allowed regardless of the current value.

        Args:
            enabled: New flag value.
            user_id: Acting admin, for the log.

        Returns:
            The stored value.
        """
        try:
            async with self.session_factory() as session:
                row = await _latest_config(session)
                if row is None:
                    session.add(AppConfigModel(writes_enabled=enabled))
                else:
                    row.writes_enabled = enabled
                await session.commit()
        except Exception as e:
            self.reporter.report("write_mode.update", e, {"writes_enabled": enabled})
            raise

        logger.info("Write mode updated", writes_enabled=enabled, user_id=user_id)
        return enabled


# Global service instance
_write_mode_service: WriteModeService | None = None


def get_write_mode_service() -> WriteModeService:
    """Get the write mode service singleton.

    Returns:
        WriteModeService instance.
    """
    global _write_mode_service
    if _write_mode_service is None:
        _write_mode_service = WriteModeService()
    return _write_mode_service


def reset_write_mode_service() -> None:
    """Drop the singleton (used by tests)."""
    global _write_mode_service
    _write_mode_service = None
