"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create initial database schema:
    - users table: Accounts, API keys and the default owner
    - url_mappings table: Short code -> URL mappings with clicks and expiry
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    if 'users' not in existing_tables:
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('password_hash', sa.String(length=255), nullable=False),
            sa.Column('api_key', sa.String(length=64), nullable=True),
            sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_users_email', 'users', ['email'], unique=True)
        op.create_index('ix_users_api_key', 'users', ['api_key'], unique=True)

    if 'url_mappings' not in existing_tables:
        op.create_table(
            'url_mappings',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('short_code', sa.String(length=32), nullable=False),
            sa.Column('original_url', sa.Text(), nullable=False),
            sa.Column('owner_id', sa.Integer(), nullable=False),
            sa.Column('clicks', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(['owner_id'], ['users.id']),
            sa.PrimaryKeyConstraint('id')
        )

        # Unique index is the source of truth for short code uniqueness
        op.create_index(
            'ix_url_mappings_short_code',
            'url_mappings',
            ['short_code'],
            unique=True
        )
        op.create_index('ix_url_mappings_owner_id', 'url_mappings', ['owner_id'])
        op.create_index('ix_url_mappings_expires_at', 'url_mappings', ['expires_at'])


def downgrade() -> None:
    """Drop all tables and indexes."""
    op.drop_index('ix_url_mappings_expires_at', table_name='url_mappings')
    op.drop_index('ix_url_mappings_owner_id', table_name='url_mappings')
    op.drop_index('ix_url_mappings_short_code', table_name='url_mappings')
    op.drop_table('url_mappings')

    op.drop_index('ix_users_api_key', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
