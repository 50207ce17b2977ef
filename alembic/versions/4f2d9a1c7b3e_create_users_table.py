"""create users table

Revision ID: 4f2d9a1c7b3e
Revises:
Create Date: 2026-10-19 10:00:00.000000

Creates the users table for local (username/password) and Google accounts.

The table is designed to:
1. Keep usernames unique (unique index, the backstop for concurrent signups)
2. Allow Google-only accounts (hashed_password nullable)
3. Link at most one user per Google account (unique, nullable google_id)
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f2d9a1c7b3e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the users table."""
    op.create_table(
        'users',
        # Primary key
        sa.Column('id', sa.Uuid(), nullable=False),

        # Identity
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('fullname', sa.String(length=100), nullable=False),

        # Credentials (either or both)
        sa.Column('hashed_password', sa.String(length=255), nullable=True),
        sa.Column('google_id', sa.String(length=255), nullable=True),

        # Profile
        sa.Column('avatar', sa.String(length=2048), nullable=True),

        # Timestamps
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),

        sa.PrimaryKeyConstraint('id'),
    )

    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)
    op.create_index(op.f('ix_users_google_id'), 'users', ['google_id'], unique=True)
    op.create_index(op.f('ix_users_created_at'), 'users', ['created_at'], unique=False)


def downgrade() -> None:
    """Drop the users table."""
    op.drop_index(op.f('ix_users_created_at'), table_name='users')
    op.drop_index(op.f('ix_users_google_id'), table_name='users')
    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_table('users')
