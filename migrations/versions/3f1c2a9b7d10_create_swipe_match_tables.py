"""create swipe match tables

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, projects, applications and the swipes ledger.

    The two unique constraints on swipes make the store itself reject a
    second decision by the same swiper on the same project or user, so two
    concurrent requests cannot both insert.
    """
    op.create_table(
        'users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('role', sa.String(length=100), nullable=True),
        sa.Column('experience', sa.String(length=50), nullable=True),
        sa.Column('time_commitment', sa.String(length=50), nullable=True),
        sa.Column('tech_tags', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'projects',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('owner_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('looking_for', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_projects_id', 'projects', ['id'])
    op.create_index('ix_projects_owner_id', 'projects', ['owner_id'])
    op.create_index('ix_projects_is_active', 'projects', ['is_active'])

    op.create_table(
        'applications',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('project_id', sa.UUID(), nullable=False),
        sa.Column('blurb', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'project_id', name='unique_user_project_application'),
    )
    op.create_index('ix_applications_id', 'applications', ['id'])
    op.create_index('ix_applications_user_id', 'applications', ['user_id'])
    op.create_index('ix_applications_project_id', 'applications', ['project_id'])
    op.create_index('ix_applications_status', 'applications', ['status'])
    op.create_index('ix_applications_created_at', 'applications', ['created_at'])

    op.create_table(
        'swipes',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('swiper_id', sa.UUID(), nullable=False),
        sa.Column('target_project_id', sa.UUID(), nullable=True),
        sa.Column('target_user_id', sa.UUID(), nullable=True),
        sa.Column('direction', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['swiper_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['target_project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['target_user_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('swiper_id', 'target_project_id', name='unique_swiper_project_swipe'),
        sa.UniqueConstraint('swiper_id', 'target_user_id', name='unique_swiper_user_swipe'),
        sa.CheckConstraint(
            '(target_project_id IS NOT NULL AND target_user_id IS NULL) OR '
            '(target_project_id IS NULL AND target_user_id IS NOT NULL)',
            name='check_swipe_single_target'
        ),
        sa.CheckConstraint("direction IN ('like', 'pass')", name='check_swipe_direction'),
    )
    op.create_index('ix_swipes_id', 'swipes', ['id'])
    op.create_index('ix_swipes_swiper_id', 'swipes', ['swiper_id'])
    op.create_index('ix_swipes_target_project_id', 'swipes', ['target_project_id'])
    op.create_index('ix_swipes_target_user_id', 'swipes', ['target_user_id'])
    op.create_index('ix_swipes_created_at', 'swipes', ['created_at'])

    # Reciprocal-like lookups: WHERE swiper_id = X AND target_* = Y AND direction = 'like'
    op.create_index(
        'idx_swipes_project_likes',
        'swipes',
        ['target_project_id', 'swiper_id'],
        postgresql_where=sa.text("direction = 'like'"),
    )
    op.create_index(
        'idx_swipes_user_likes',
        'swipes',
        ['target_user_id', 'swiper_id'],
        postgresql_where=sa.text("direction = 'like'"),
    )


def downgrade() -> None:
    """Drop the swipe match tables."""
    op.drop_index('idx_swipes_user_likes', table_name='swipes')
    op.drop_index('idx_swipes_project_likes', table_name='swipes')
    op.drop_index('ix_swipes_created_at', table_name='swipes')
    op.drop_index('ix_swipes_target_user_id', table_name='swipes')
    op.drop_index('ix_swipes_target_project_id', table_name='swipes')
    op.drop_index('ix_swipes_swiper_id', table_name='swipes')
    op.drop_index('ix_swipes_id', table_name='swipes')
    op.drop_table('swipes')

    op.drop_index('ix_applications_created_at', table_name='applications')
    op.drop_index('ix_applications_status', table_name='applications')
    op.drop_index('ix_applications_project_id', table_name='applications')
    op.drop_index('ix_applications_user_id', table_name='applications')
    op.drop_index('ix_applications_id', table_name='applications')
    op.drop_table('applications')

    op.drop_index('ix_projects_is_active', table_name='projects')
    op.drop_index('ix_projects_owner_id', table_name='projects')
    op.drop_index('ix_projects_id', table_name='projects')
    op.drop_table('projects')

    op.drop_index('ix_users_username', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
