"""SQLAlchemy models for service configuration tables.

Provides ORM models for the admin allow-list and the app_config feature flag.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from storehub.infrastructure.database import Base


class AdminUserModel(Base):
    """Admin allow-list entry.

    A signed-in identity may use the admin workspace only when its user ID
    is present in this table.
    """

    __tablename__ = "admin_users"

    user_id = Column(String(36), primary_key=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class AppConfigModel(Base):
    """Global configuration row.

    The row with the highest ID is authoritative. ``writes_enabled`` gates
    every inventory mutation.
    """

    __tablename__ = "app_config"

    id = Column(Integer, primary_key=True, autoincrement=True)
    writes_enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
