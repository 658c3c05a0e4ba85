"""
Debug helpers for local testing of the swipe deck. Only reachable through
the debug router, which is mounted when debug routes are enabled.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging
import structlog

from app.core.exceptions import InvalidStateError, NotFoundError, StoreError
from app.models.application import Application
from app.models.user import User
from app.repositories.application_repository import ApplicationRepository
from app.repositories.project_repository import ProjectRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)
event_log = structlog.get_logger(__name__)

DEBUG_USER_LIMIT = 10
SEED_APPLICATION_COUNT = 3
SEED_BLURB = "I'm interested in joining this project!"


class DebugService:
    """Inspect users and seed applications so the user deck has candidates."""

    def __init__(
        self,
        user_repo: Optional[UserRepository] = None,
        project_repo: Optional[ProjectRepository] = None,
        application_repo: Optional[ApplicationRepository] = None
    ):
        self.user_repo = user_repo or UserRepository()
        self.project_repo = project_repo or ProjectRepository()
        self.application_repo = application_repo or ApplicationRepository()

    async def list_users(self, db: AsyncSession, limit: int = DEBUG_USER_LIMIT) -> list[User]:
        try:
            return await self.user_repo.list_users(db, limit=limit)
        except SQLAlchemyError as e:
            raise StoreError("Failed to list users") from e

    async def seed_applications(
        self,
        db: AsyncSession,
        project_id: UUID,
        count: int = SEED_APPLICATION_COUNT
    ) -> list[Application]:
        """
        Create pending applications on a project from users who have not
        applied yet. The owner never applies to their own project.

        Raises:
            NotFoundError: Project does not exist
            InvalidStateError: No user is left to apply
            StoreError: Store failure
        """
        try:
            project = await self.project_repo.get(db, project_id)
            if project is None:
                raise NotFoundError("Project not found")

            user_ids = await self.user_repo.get_ids_without_application(
                db, project_id, exclude_id=project.owner_id, limit=count
            )
            if not user_ids:
                raise InvalidStateError("No users found to create applications")

            applications = await self.application_repo.create_many(
                db, project_id, user_ids, blurb=SEED_BLURB
            )
        except SQLAlchemyError as e:
            logger.error(f"Error seeding applications for project {project_id}: {e}")
            raise StoreError("Failed to create applications") from e

        event_log.warning(
            "applications_seeded",
            project_id=str(project_id),
            count=len(applications),
        )
        return applications
