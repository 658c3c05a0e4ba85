"""
Candidate selection for the swipe deck.

Picks the next project a user has not decided on yet, and the next
interested user a project owner has not decided on yet. The random pick is
delegated to an injectable ``chooser`` so tests can make it deterministic.
"""

from __future__ import annotations
from typing import Callable, Optional, Sequence, TypeVar
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging
import random

from app.core.exceptions import ForbiddenError, NotFoundError, StoreError, SwipeMatchError
from app.models.project import Project
from app.models.user import User
from app.repositories.application_repository import ApplicationRepository
from app.repositories.project_repository import ProjectRepository
from app.repositories.swipe_repository import SwipeRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")
Chooser = Callable[[Sequence[T]], T]


class CandidateService:
    """
    Service computing candidate pools and drawing one candidate.

    Pools:
    - Projects for a user: active projects the user does not own and has
      not swiped on.
    - Users for a project: applicants and likers of the project, minus the
      owner and minus users the owner already swiped on.
    """

    def __init__(
        self,
        swipe_repo: Optional[SwipeRepository] = None,
        project_repo: Optional[ProjectRepository] = None,
        user_repo: Optional[UserRepository] = None,
        application_repo: Optional[ApplicationRepository] = None,
        chooser: Optional[Chooser] = None
    ):
        """
        Initialize service with repositories.

        Args:
            swipe_repo: SwipeRepository instance (creates new if None)
            project_repo: ProjectRepository instance (creates new if None)
            user_repo: UserRepository instance (creates new if None)
            application_repo: ApplicationRepository instance (creates new if None)
            chooser: Picks one element of a non-empty sequence
                (defaults to random.choice)
        """
        self.swipe_repo = swipe_repo or SwipeRepository()
        self.project_repo = project_repo or ProjectRepository()
        self.user_repo = user_repo or UserRepository()
        self.application_repo = application_repo or ApplicationRepository()
        self.chooser = chooser or random.choice

    async def next_project(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> Optional[Project]:
        """
        Draw a project the user has not swiped on yet.

        Args:
            db: Active database session
            user_id: UUID of the swiping user

        Returns:
            Project with owner loaded, or None when the pool is empty

        Raises:
            StoreError: If a store query fails
        """
        try:
            projects = await self.project_repo.get_active_not_owned_by(db, user_id)
            swiped_ids = await self.swipe_repo.get_swiped_project_ids(db, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error building project pool for user {user_id}: {e}")
            raise StoreError("Failed to fetch next project") from e

        pool = [project for project in projects if project.id not in swiped_ids]
        if not pool:
            logger.info(f"No project candidates left for user {user_id}")
            return None

        # Stable order so the pick depends only on the chooser
        pool.sort(key=lambda project: str(project.id))
        return self.chooser(pool)

    async def next_user(
        self,
        db: AsyncSession,
        project_id: UUID,
        caller_id: Optional[UUID] = None
    ) -> Optional[User]:
        """
        Draw an interested user the project owner has not swiped on yet.

        Args:
            db: Active database session
            project_id: UUID of the project the owner is reviewing for
            caller_id: Authenticated caller; must own the project when given

        Returns:
            User, or None when the pool is empty

        Raises:
            NotFoundError: If the project does not exist
            ForbiddenError: If caller_id is given and does not own the project
            StoreError: If a store query fails
        """
        try:
            project = await self.project_repo.get(db, project_id)
            if not project:
                raise NotFoundError("Project not found")

            if caller_id is not None and project.owner_id != caller_id:
                raise ForbiddenError("Only the project owner can review its candidates")

            applicant_ids = await self.application_repo.get_applicant_ids(db, project_id)
            liker_ids = await self.swipe_repo.get_liker_ids(db, project_id)
            swiped_ids = await self.swipe_repo.get_swiped_user_ids(db, project.owner_id)

            eligible = (applicant_ids | liker_ids) - swiped_ids - {project.owner_id}
            if not eligible:
                logger.info(f"No user candidates left for project {project_id}")
                return None

            chosen_id = self.chooser(sorted(eligible, key=str))
            user = await self.user_repo.get(db, chosen_id)
            if not user:
                raise NotFoundError("User not found")
            return user

        except SwipeMatchError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error building user pool for project {project_id}: {e}")
            raise StoreError("Failed to fetch next user") from e
