"""create users, wallets, goals and cache tables

Revision ID: a1c0f3e9b2d4
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision: str = 'a1c0f3e9b2d4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, wallets, goals, wallet_data_cache and metadata_cache."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('username', sa.String(64), nullable=False, unique=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('tier', sa.String(32), nullable=False, server_default='free'),
        sa.Column('preferences', JSONB(), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.func.now()),
    )

    op.create_table(
        'wallets',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False, index=True),
        sa.Column('address', sa.String(128), nullable=False),
        sa.Column('label', sa.String(255), nullable=False),
        sa.Column('chain', sa.String(32), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.UniqueConstraint('user_id', 'address', 'chain', name='uq_wallet_user_address_chain'),
    )
    op.create_index('ix_wallets_user_chain', 'wallets', ['user_id', 'chain'])

    op.create_table(
        'goals',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('status', sa.String(32), nullable=False, server_default='active'),
        sa.Column('progress', sa.Float(), nullable=False, server_default='0'),
        sa.Column('coin', sa.String(64), nullable=False),
        sa.Column('coin_symbol', sa.String(16), nullable=False),
        sa.Column('current_amount', sa.Float(), nullable=False),
        sa.Column('target_amount', sa.Float(), nullable=False),
        sa.Column('target_date', sa.Date(), nullable=True),
        sa.Column('wallet_id', sa.String(36), nullable=True),
        sa.Column('wallet_address', sa.String(128), nullable=True),
        sa.Column('wallet_chain', sa.String(32), nullable=True),
        sa.Column('goal_type', sa.String(16), nullable=False),
        sa.Column('parent_goal_id', sa.String(36), nullable=True, index=True),
        sa.Column('is_aggregate', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('milestones', JSONB(), nullable=False, server_default='[]'),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False),
    )

    op.create_table(
        'wallet_data_cache',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('wallet_id', sa.String(36), nullable=False, index=True),
        sa.Column('data_type', sa.String(64), nullable=False),
        sa.Column('data', JSONB(), nullable=False),
        sa.Column('last_fetched', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.UniqueConstraint('wallet_id', 'data_type', name='uq_wallet_data_cache_key'),
    )

    op.create_table(
        'metadata_cache',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('coin_type', sa.String(512), nullable=False, unique=True),
        sa.Column('metadata', JSONB(), nullable=False),
        sa.Column('last_fetched', sa.TIMESTAMP(timezone=True), nullable=False),
    )


def downgrade() -> None:
    """Drop core tables."""
    op.drop_table('metadata_cache')
    op.drop_table('wallet_data_cache')
    op.drop_table('goals')
    op.drop_index('ix_wallets_user_chain', table_name='wallets')
    op.drop_table('wallets')
    op.drop_table('users')
