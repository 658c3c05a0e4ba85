"""
Project repository for the read-only project queries the swipe core needs.
"""

from __future__ import annotations
from uuid import UUID
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.models.project import Project
from .base import BaseRepository

logger = logging.getLogger(__name__)


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project model."""

    def __init__(self):
        """Initialize with Project model."""
        super().__init__(Project)

    async def get_active_not_owned_by(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> list[Project]:
        """
        Get every active project the user does not own, with owner loaded.

        Args:
            db: Active database session
            user_id: UUID of the user who will swipe

        Returns:
            List of projects ordered by id

        Example:
            projects = await repo.get_active_not_owned_by(db, user_id)
            print(f"{len(projects)} projects before swipe exclusion")
        """
        try:
            stmt = (
                select(Project)
                .where(
                    and_(
                        Project.is_active == True,
                        Project.owner_id != user_id
                    )
                )
                .options(selectinload(Project.owner))
                .order_by(Project.id)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())

        except SQLAlchemyError as e:
            logger.error(f"Error fetching candidate projects for user {user_id}: {e}")
            raise
