"""create_profiles_and_swap_requests

Revision ID: 4b1d7e2a9c30
Revises:
Create Date: 2026-09-14 10:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4b1d7e2a9c30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles and swap_requests tables."""
    op.create_table('profiles',
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('skills_offered', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('skills_wanted', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('availability', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('is_public', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('profile_picture', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('user_id'),
    )
    op.create_index('ix_profiles_is_public', 'profiles', ['is_public'], unique=False)

    # No FK to profiles; AdminService removes a deleted user's requests itself
    op.create_table('swap_requests',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('from_user_id', sa.UUID(), nullable=False),
        sa.Column('from_user_name', sa.String(length=100), nullable=False),
        sa.Column('to_user_id', sa.UUID(), nullable=False),
        sa.Column('to_user_name', sa.String(length=100), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')",
            name='ck_swap_requests_status',
        ),
        sa.CheckConstraint('from_user_id <> to_user_id', name='ck_swap_requests_not_self'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_swap_requests_from_user_created',
        'swap_requests',
        ['from_user_id', 'created_at'],
        unique=False,
    )
    op.create_index(
        'ix_swap_requests_to_user_created',
        'swap_requests',
        ['to_user_id', 'created_at'],
        unique=False,
    )


def downgrade() -> None:
    """Drop swap_requests and profiles tables."""
    op.drop_index('ix_swap_requests_to_user_created', table_name='swap_requests')
    op.drop_index('ix_swap_requests_from_user_created', table_name='swap_requests')
    op.drop_table('swap_requests')
    op.drop_index('ix_profiles_is_public', table_name='profiles')
    op.drop_table('profiles')
