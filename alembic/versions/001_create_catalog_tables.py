"""Create taxonomy, products, variants, images and tags tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

product_status = postgresql.ENUM('draft', 'active', 'archived', name='product_status', create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create catalog tables."""
    product_status.create(op.get_bind(), checkfirst=True)

    # Taxonomy tables
    op.create_table(
        'brands',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('slug', sa.String(140), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_table(
        'colors',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(80), nullable=False),
        sa.Column('hex', sa.String(9), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'sizes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('label', sa.String(40), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('slug', sa.String(140), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_table(
        'product_types',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('slug', sa.String(140), nullable=False, unique=True),
        *_timestamps(),
    )

    # Products table
    op.create_table(
        'products',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('slug', sa.String(160), nullable=False, unique=True),
        sa.Column('name', sa.String(160), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('base_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('status', product_status, nullable=False, server_default='draft', index=True),
        sa.Column('brand_id', sa.Integer(), sa.ForeignKey('brands.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('product_type_id', sa.Integer(), sa.ForeignKey('product_types.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(36), nullable=True),
        sa.Column('updated_by', sa.String(36), nullable=True),
        *_timestamps(),
    )

    # Product variants table
    op.create_table(
        'product_variants',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('product_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('color_id', sa.Integer(), sa.ForeignKey('colors.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('size_id', sa.Integer(), sa.ForeignKey('sizes.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('sku', sa.String(80), nullable=False, unique=True),
        sa.Column('stock_qty', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        *_timestamps(),
        sa.CheckConstraint('stock_qty >= 0', name='ck_product_variants_stock_non_negative'),
    )

    # Product images table
    op.create_table(
        'product_images',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('product_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('variant_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('product_variants.id', ondelete='SET NULL'), nullable=True),
        sa.Column('url', sa.String(1000), nullable=False),
        sa.Column('storage_path', sa.String(500), nullable=True),
        sa.Column('alt_text', sa.String(300), nullable=True),
        sa.Column('width', sa.Integer(), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Product tags association
    op.create_table(
        'product_tags',
        sa.Column('product_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag_id', sa.Integer(), sa.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_table('product_tags')
    op.drop_table('product_images')
    op.drop_table('product_variants')
    op.drop_table('products')
    op.drop_table('product_types')
    op.drop_table('tags')
    op.drop_table('sizes')
    op.drop_table('colors')
    op.drop_table('brands')
    product_status.drop(op.get_bind(), checkfirst=True)
