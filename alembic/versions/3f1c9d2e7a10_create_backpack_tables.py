"""create_backpack_tables

Revision ID: 3f1c9d2e7a10
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9d2e7a10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create users, organizations, items, tags, allocator counters and reset tokens."""
    op.create_table(
        'organizations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_organizations_id', 'organizations', ['id'])

    op.create_table(
        'users',
        sa.Column('email', sa.String(length=255), primary_key=True),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('prefix', sa.String(length=10), nullable=True),
        sa.Column('active_organization_id', sa.Integer(), sa.ForeignKey('organizations.id'), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'organization_users',
        sa.Column(
            'organization_id',
            sa.Integer(),
            sa.ForeignKey('organizations.id', ondelete='CASCADE'),
            primary_key=True,
        ),
        sa.Column(
            'user_email',
            sa.String(length=255),
            sa.ForeignKey('users.email', ondelete='CASCADE', onupdate='CASCADE'),
            primary_key=True,
        ),
    )

    op.create_table(
        'items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('backpack_id', sa.String(length=20), nullable=False),
        sa.Column('description', sa.String(length=1000), nullable=True),
        sa.Column('added_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column(
            'user_email',
            sa.String(length=255),
            sa.ForeignKey('users.email', ondelete='CASCADE', onupdate='CASCADE'),
            nullable=False,
        ),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('items.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_items_id', 'items', ['id'])
    op.create_index('ix_items_backpack_id', 'items', ['backpack_id'])
    op.create_index('ix_items_user_email', 'items', ['user_email'])
    op.create_index('ix_items_parent_id', 'items', ['parent_id'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=20), nullable=False),
        sa.Column(
            'organization_id',
            sa.Integer(),
            sa.ForeignKey('organizations.id', ondelete='CASCADE'),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index('ix_tags_id', 'tags', ['id'])
    op.create_index('ix_tags_organization_id', 'tags', ['organization_id'])

    op.create_table(
        'item_tags',
        sa.Column('item_id', sa.Integer(), sa.ForeignKey('items.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag_id', sa.Integer(), sa.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'backpack_id_next_numbers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('backpack_id', sa.String(length=20), nullable=False, unique=True),
        sa.Column('number', sa.Integer(), nullable=False),
    )

    op.create_table(
        'reset_tokens',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('token', sa.String(length=30), nullable=False),
        sa.Column('expired_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column(
            'user_email',
            sa.String(length=255),
            sa.ForeignKey('users.email', ondelete='CASCADE', onupdate='CASCADE'),
            nullable=False,
        ),
    )
    op.create_index('ix_reset_tokens_token', 'reset_tokens', ['token'], unique=True)
    op.create_index('ix_reset_tokens_user_email', 'reset_tokens', ['user_email'])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_index('ix_reset_tokens_user_email', table_name='reset_tokens')
    op.drop_index('ix_reset_tokens_token', table_name='reset_tokens')
    op.drop_table('reset_tokens')
    op.drop_table('backpack_id_next_numbers')
    op.drop_table('item_tags')
    op.drop_index('ix_tags_organization_id', table_name='tags')
    op.drop_index('ix_tags_id', table_name='tags')
    op.drop_table('tags')
    op.drop_index('ix_items_parent_id', table_name='items')
    op.drop_index('ix_items_user_email', table_name='items')
    op.drop_index('ix_items_backpack_id', table_name='items')
    op.drop_index('ix_items_id', table_name='items')
    op.drop_table('items')
    op.drop_table('organization_users')
    op.drop_table('users')
    op.drop_index('ix_organizations_id', table_name='organizations')
    op.drop_table('organizations')
