"""
Application repository. Applications are written by the applications API;
the swipe core reads who applied to a project, and the debug routes seed
pending applications for local testing.
"""

from __future__ import annotations
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.models.application import Application
from .base import BaseRepository

logger = logging.getLogger(__name__)


class ApplicationRepository(BaseRepository[Application]):
    """Repository for Application model."""

    def __init__(self):
        """Initialize with Application model."""
        super().__init__(Application)

    async def get_applicant_ids(
        self,
        db: AsyncSession,
        project_id: UUID
    ) -> set[UUID]:
        """
        Ids of every user with an application on the project, any status.

        Args:
            db: Active database session
            project_id: UUID of the project

        Returns:
            Set of user ids
        """
        try:
            stmt = select(Application.user_id).where(Application.project_id == project_id)
            result = await db.execute(stmt)
            return set(result.scalars().all())

        except SQLAlchemyError as e:
            logger.error(f"Error fetching applicants for project {project_id}: {e}")
            raise

    async def create_many(
        self,
        db: AsyncSession,
        project_id: UUID,
        user_ids: list[UUID],
        blurb: str
    ) -> list[Application]:
        """
        Insert one pending application per user and flush them together.

        Raises:
            IntegrityError: If a user already applied to the project
        """
        applications = [
            Application(user_id=user_id, project_id=project_id, blurb=blurb, status="pending")
            for user_id in user_ids
        ]
        try:
            db.add_all(applications)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error creating applications for project {project_id}: {e}")
            await db.rollback()
            raise
        return applications
