"""initial schema: accounts, catalog, banners, audit

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    ]

def upgrade():
    op.create_table('accounts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=128), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=False),
        sa.Column('shop_name', sa.String(length=128)),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='PENDING'),
        *_timestamps(),
    )
    op.create_index('ix_accounts_email', 'accounts', ['email'], unique=True)
    op.create_index('ix_accounts_role', 'accounts', ['role'])
    op.create_index('ix_accounts_status', 'accounts', ['status'])

    for tbl in ('brands', 'generics'):
        op.create_table(tbl,
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(length=128), nullable=False),
        )
        op.create_index(f'ix_{tbl}_name', tbl, ['name'], unique=True)

    op.create_table('catalog_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('sku', sa.String(length=64), nullable=False),
        sa.Column('mrp_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('sell_price_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('cost_price_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('image_url', sa.String(length=512), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('generic_id', sa.Integer(), sa.ForeignKey('generics.id'), nullable=True),
        sa.Column('brand_id', sa.Integer(), sa.ForeignKey('brands.id'), nullable=True),
        sa.Column('status', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('availability', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('accounts.id'), nullable=False),
        *_timestamps(),
    )
    # unique SKU is what makes create-with-retry safe under concurrent inserts
    op.create_index('ix_catalog_items_sku', 'catalog_items', ['sku'], unique=True)
    op.create_index('ix_catalog_items_name', 'catalog_items', ['name'])
    op.create_index('ix_catalog_items_category', 'catalog_items', ['category'])
    op.create_index('ix_catalog_items_status', 'catalog_items', ['status'])
    op.create_index('ix_catalog_items_generic_id', 'catalog_items', ['generic_id'])
    op.create_index('ix_catalog_items_brand_id', 'catalog_items', ['brand_id'])

    op.create_table('advertisements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('image_url', sa.String(length=512), nullable=False),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('hyperlink', sa.String(length=512)),
        sa.Column('is_visible', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('ix_advertisements_category', 'advertisements', ['category'])

    op.create_table('promotion_modals',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('image_url', sa.String(length=512), nullable=False),
        sa.Column('hyperlink', sa.String(length=512)),
        sa.Column('is_visible', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    # Partial unique indexes: at most one visible row per banner table
    op.create_index('uq_advertisements_single_visible', 'advertisements', ['is_visible'], unique=True,
                    sqlite_where=sa.text('is_visible = 1'), postgresql_where=sa.text('is_visible'))
    op.create_index('uq_promotion_modals_single_visible', 'promotion_modals', ['is_visible'], unique=True,
                    sqlite_where=sa.text('is_visible = 1'), postgresql_where=sa.text('is_visible'))

    op.create_table('audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('actor_account_id', sa.Integer(), nullable=False),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('entity', sa.String(length=64)),
        sa.Column('entity_id', sa.String(length=64)),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'))
    )
    op.create_index('ix_audit_logs_actor_account_id', 'audit_logs', ['actor_account_id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_entity_id', 'audit_logs', ['entity_id'])


def downgrade():
    for tbl in ['audit_logs', 'promotion_modals', 'advertisements', 'catalog_items', 'generics', 'brands', 'accounts']:
        op.drop_table(tbl)
