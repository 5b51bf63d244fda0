"""Create admin_users and app_config tables.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create admin_users and app_config tables."""
    op.create_table(
        'admin_users',
        sa.Column('user_id', sa.String(36), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    op.create_table(
        'app_config',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('writes_enabled', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Seed the flag so the first read finds a row
    op.execute("INSERT INTO app_config (writes_enabled) VALUES (true)")


def downgrade() -> None:
    """Drop admin_users and app_config tables."""
    op.drop_table('app_config')
    op.drop_table('admin_users')
