"""
User repository. Point lookups come from BaseRepository; the listing
queries below back the debug routes.
"""

from __future__ import annotations
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.models.application import Application
from app.models.user import User
from .base import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    def __init__(self):
        """Initialize with User model."""
        super().__init__(User)

    async def list_users(self, db: AsyncSession, limit: int = 10) -> list[User]:
        """First ``limit`` users by signup time."""
        try:
            stmt = select(User).order_by(User.created_at, User.id).limit(limit)
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing users: {e}")
            raise

    async def get_ids_without_application(
        self,
        db: AsyncSession,
        project_id: UUID,
        exclude_id: UUID,
        limit: int
    ) -> list[UUID]:
        """
        Ids of users who have not applied to the project yet.

        Args:
            db: Active database session
            project_id: UUID of the project
            exclude_id: User left out of the result (the project's owner)
            limit: Maximum number of ids

        Returns:
            User ids ordered by signup time
        """
        applied = select(Application.user_id).where(Application.project_id == project_id)
        try:
            stmt = (
                select(User.id)
                .where(User.id != exclude_id, User.id.not_in(applied))
                .order_by(User.created_at, User.id)
                .limit(limit)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching users without application on {project_id}: {e}")
            raise
