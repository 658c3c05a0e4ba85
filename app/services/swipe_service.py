"""
Swipe service: the write path of the swipe deck.

This module validates a decision, rejects duplicates and invalid targets,
writes the swipe to the ledger and, for likes, asks the match service
whether the like completed a match. Each operation performs at most one
insert and only after every check has passed; callers commit.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging
import structlog

from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    StoreError,
    SwipeMatchError,
    ValidationError,
)
from app.models.swipe import Swipe, SwipeDirection
from app.repositories.project_repository import ProjectRepository
from app.repositories.swipe_repository import SwipeRepository
from app.repositories.user_repository import UserRepository
from app.services.match_service import MatchService, TARGET_PROJECT, TARGET_USER

logger = logging.getLogger(__name__)
event_log = structlog.get_logger(__name__)

VALID_DIRECTIONS = {d.value for d in SwipeDirection}


def validate_direction(direction: Optional[str]) -> str:
    """Reject anything but the literal "like" or "pass"."""
    if not direction:
        raise ValidationError("direction is required")
    if direction not in VALID_DIRECTIONS:
        raise ValidationError("Invalid direction. Must be 'like' or 'pass'")
    return direction


class SwipeService:
    """
    Service recording swipes on projects and on users.

    Business rules:
    - One decision per (swiper, target); a repeat is a conflict, also when
      two requests race past the duplicate check (store constraint)
    - Projects must exist and be active
    - Nobody swipes on their own project, owners never swipe on themselves
    - For user swipes the swiper is always the project's owner
    """

    def __init__(
        self,
        swipe_repo: Optional[SwipeRepository] = None,
        project_repo: Optional[ProjectRepository] = None,
        user_repo: Optional[UserRepository] = None,
        match_service: Optional[MatchService] = None
    ):
        """
        Initialize service with repositories.

        Args:
            swipe_repo: SwipeRepository instance (creates new if None)
            project_repo: ProjectRepository instance (creates new if None)
            user_repo: UserRepository instance (creates new if None)
            match_service: MatchService instance (creates new if None)
        """
        self.swipe_repo = swipe_repo or SwipeRepository()
        self.project_repo = project_repo or ProjectRepository()
        self.user_repo = user_repo or UserRepository()
        self.match_service = match_service or MatchService(
            swipe_repo=self.swipe_repo,
            project_repo=self.project_repo
        )

    async def record_project_swipe(
        self,
        db: AsyncSession,
        user_id: UUID,
        project_id: UUID,
        direction: str
    ) -> dict:
        """
        Record a user's like/pass on a project.

        Order of checks: direction, duplicate, project exists, project
        active, not the user's own project.

        Args:
            db: Active database session
            user_id: UUID of the swiping user
            project_id: UUID of the project
            direction: "like" or "pass"

        Returns:
            Dict with success, swipe and message; on a match also
            match=True and project_id

        Raises:
            ValidationError: Bad direction (no store access happens)
            ConflictError: The user already swiped on the project
            NotFoundError: The project does not exist
            InvalidStateError: The project is inactive or owned by the user
            StoreError: A store call failed

        Example:
            result = await service.record_project_swipe(db, user.id, project.id, "like")
            await db.commit()
        """
        validate_direction(direction)

        try:
            if await self.swipe_repo.get_project_swipe(db, user_id, project_id):
                raise ConflictError("User has already swiped on this project")

            project = await self.project_repo.get(db, project_id)
            if not project:
                raise NotFoundError("Project not found")

            if not project.is_active:
                raise InvalidStateError("Project is no longer active")

            if project.owner_id == user_id:
                raise InvalidStateError("Cannot swipe on your own project")

            swipe = await self._insert(
                db,
                swiper_id=user_id,
                direction=direction,
                target_project_id=project_id,
                conflict_message="User has already swiped on this project",
            )

            is_match = False
            if direction == SwipeDirection.LIKE.value:
                is_match = await self.match_service.detect(
                    db, user_id, project_id, TARGET_PROJECT
                )

        except SwipeMatchError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error recording swipe by {user_id} on project {project_id}: {e}")
            raise StoreError("Failed to record swipe") from e

        event_log.info(
            "project_swipe_recorded",
            swiper_id=str(user_id),
            project_id=str(project_id),
            direction=direction,
            match=is_match,
        )

        response = {
            "success": True,
            "swipe": swipe,
            "message": "Project liked!" if direction == SwipeDirection.LIKE.value else "Project passed",
        }
        if is_match:
            response["match"] = True
            response["project_id"] = project_id
        return response

    async def record_user_swipe(
        self,
        db: AsyncSession,
        user_id: UUID,
        project_id: UUID,
        direction: str,
        caller_id: Optional[UUID] = None
    ) -> dict:
        """
        Record a project owner's like/pass on a user.

        The swiper written to the ledger is the project's owner as stored,
        never an id taken from the request.

        Args:
            db: Active database session
            user_id: UUID of the user being swiped on
            project_id: UUID of the project the owner reviews for
            direction: "like" or "pass"
            caller_id: Authenticated caller; must own the project when given

        Returns:
            Dict with success, swipe and message; on a match also
            match=True, user_id and project_id

        Raises:
            ValidationError: Bad direction (no store access happens)
            NotFoundError: The project or the user does not exist
            ForbiddenError: The caller does not own the project
            InvalidStateError: The project is inactive or the target is its owner
            ConflictError: The owner already swiped on the user
            StoreError: A store call failed
        """
        validate_direction(direction)

        try:
            project = await self.project_repo.get(db, project_id)
            if not project:
                raise NotFoundError("Project not found")

            owner_id = project.owner_id
            if caller_id is not None and caller_id != owner_id:
                raise ForbiddenError("Only the project owner can swipe on its candidates")

            if not project.is_active:
                raise InvalidStateError("Project is no longer active")

            if owner_id == user_id:
                raise InvalidStateError("Cannot swipe on project owner")

            if not await self.user_repo.exists(db, user_id):
                raise NotFoundError("User not found")

            if await self.swipe_repo.get_user_swipe(db, owner_id, user_id):
                raise ConflictError("Project owner has already swiped on this user")

            swipe = await self._insert(
                db,
                swiper_id=owner_id,
                direction=direction,
                target_user_id=user_id,
                conflict_message="Project owner has already swiped on this user",
            )

            is_match = False
            if direction == SwipeDirection.LIKE.value:
                is_match = await self.match_service.detect(
                    db, owner_id, user_id, TARGET_USER, project_id=project_id
                )

        except SwipeMatchError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error recording swipe on user {user_id} for project {project_id}: {e}")
            raise StoreError("Failed to record swipe") from e

        event_log.info(
            "user_swipe_recorded",
            swiper_id=str(owner_id),
            user_id=str(user_id),
            project_id=str(project_id),
            direction=direction,
            match=is_match,
        )

        response = {
            "success": True,
            "swipe": swipe,
            "message": "User liked!" if direction == SwipeDirection.LIKE.value else "User passed",
        }
        if is_match:
            response["match"] = True
            response["user_id"] = user_id
            response["project_id"] = project_id
        return response

    async def _insert(
        self,
        db: AsyncSession,
        swiper_id: UUID,
        direction: str,
        conflict_message: str,
        target_project_id: Optional[UUID] = None,
        target_user_id: Optional[UUID] = None
    ) -> Swipe:
        """
        Write the swipe, turning a unique-constraint violation into a conflict.

        A concurrent request for the same pair can pass the duplicate check
        before either insert lands; the store rejects the loser. Any other
        integrity failure (e.g. a dangling foreign key) is a store error.
        """
        try:
            return await self.swipe_repo.record(
                db,
                swiper_id,
                direction,
                target_project_id=target_project_id,
                target_user_id=target_user_id,
            )
        except IntegrityError as e:
            if target_project_id is not None:
                existing = await self.swipe_repo.get_project_swipe(db, swiper_id, target_project_id)
            else:
                existing = await self.swipe_repo.get_user_swipe(db, swiper_id, target_user_id)
            if existing:
                logger.warning(f"Duplicate swipe by {swiper_id} rejected by the store")
                raise ConflictError(conflict_message) from e
            raise StoreError("Failed to record swipe") from e

    async def clear_swipes(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> int:
        """
        Delete every swipe made by a user. Debug use only.

        Returns:
            Number of deleted swipes
        """
        try:
            deleted = await self.swipe_repo.delete_by_swiper(db, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error clearing swipes for user {user_id}: {e}")
            raise StoreError("Failed to clear swipes") from e

        event_log.warning("swipes_cleared", swiper_id=str(user_id), deleted=deleted)
        return deleted

    async def check_health(self, db: AsyncSession) -> None:
        """Probe the swipes table; raises StoreError when it does not respond."""
        try:
            await self.swipe_repo.ping(db)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
