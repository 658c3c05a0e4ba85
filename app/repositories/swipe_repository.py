"""
Swipe repository: the append-only ledger of like/pass decisions.

This module provides the point lookups used for duplicate checks and match
detection, the exclusion sets used by candidate selection, and the single
join that lists mutual likes.
"""

from __future__ import annotations
from datetime import datetime
from typing import NamedTuple, Optional
from uuid import UUID
from sqlalchemy import select, and_, or_, delete as sql_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased
import logging

from app.models.swipe import Swipe, SwipeDirection
from app.models.project import Project
from app.models.user import User
from .base import BaseRepository

logger = logging.getLogger(__name__)


class MutualLike(NamedTuple):
    """A (project, member) pair where both sides liked each other."""
    project: Project
    member: User
    member_liked_at: datetime
    owner_liked_at: datetime


class SwipeRepository(BaseRepository[Swipe]):
    """
    Repository for the Swipe ledger.

    Provides methods for:
    - Recording a swipe on a project or on a user
    - Looking up an existing decision for a (swiper, target) pair
    - Checking for reciprocal likes
    - Listing ids a swiper already decided on
    - Listing mutual likes for a user in one query
    """

    def __init__(self):
        """Initialize with Swipe model."""
        super().__init__(Swipe)

    async def record(
        self,
        db: AsyncSession,
        swiper_id: UUID,
        direction: str,
        target_project_id: Optional[UUID] = None,
        target_user_id: Optional[UUID] = None
    ) -> Swipe:
        """
        Insert a swipe row targeting exactly one project or one user.

        Args:
            db: Active database session
            swiper_id: UUID of the deciding user
            direction: "like" or "pass"
            target_project_id: Project being swiped on (project swipes)
            target_user_id: User being swiped on (user swipes)

        Returns:
            The flushed Swipe

        Raises:
            ValueError: If not exactly one target is given
            IntegrityError: If the swiper already decided on this target

        Example:
            swipe = await repo.record(db, user_id, "like", target_project_id=project_id)
            await db.commit()
        """
        if (target_project_id is None) == (target_user_id is None):
            raise ValueError("A swipe targets exactly one project or one user")

        return await self.create(db, {
            "swiper_id": swiper_id,
            "direction": direction,
            "target_project_id": target_project_id,
            "target_user_id": target_user_id,
        })

    async def get_project_swipe(
        self,
        db: AsyncSession,
        swiper_id: UUID,
        project_id: UUID
    ) -> Optional[Swipe]:
        """Get the swiper's decision on a project, if any."""
        try:
            stmt = select(Swipe).where(
                and_(
                    Swipe.swiper_id == swiper_id,
                    Swipe.target_project_id == project_id
                )
            )
            result = await db.execute(stmt)
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching swipe by {swiper_id} on project {project_id}: {e}")
            raise

    async def get_user_swipe(
        self,
        db: AsyncSession,
        swiper_id: UUID,
        user_id: UUID
    ) -> Optional[Swipe]:
        """Get the swiper's decision on another user, if any."""
        try:
            stmt = select(Swipe).where(
                and_(
                    Swipe.swiper_id == swiper_id,
                    Swipe.target_user_id == user_id
                )
            )
            result = await db.execute(stmt)
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching swipe by {swiper_id} on user {user_id}: {e}")
            raise

    async def has_liked_project(
        self,
        db: AsyncSession,
        swiper_id: UUID,
        project_id: UUID
    ) -> bool:
        """Return True if the swiper liked the project."""
        try:
            stmt = select(Swipe.id).where(
                and_(
                    Swipe.swiper_id == swiper_id,
                    Swipe.target_project_id == project_id,
                    Swipe.direction == SwipeDirection.LIKE.value
                )
            ).limit(1)
            result = await db.execute(stmt)
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            logger.error(f"Error checking like by {swiper_id} on project {project_id}: {e}")
            raise

    async def has_liked_user(
        self,
        db: AsyncSession,
        swiper_id: UUID,
        user_id: UUID
    ) -> bool:
        """Return True if the swiper liked the user."""
        try:
            stmt = select(Swipe.id).where(
                and_(
                    Swipe.swiper_id == swiper_id,
                    Swipe.target_user_id == user_id,
                    Swipe.direction == SwipeDirection.LIKE.value
                )
            ).limit(1)
            result = await db.execute(stmt)
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            logger.error(f"Error checking like by {swiper_id} on user {user_id}: {e}")
            raise

    async def get_swiped_project_ids(
        self,
        db: AsyncSession,
        swiper_id: UUID
    ) -> set[UUID]:
        """Ids of every project the swiper already decided on, either direction."""
        try:
            stmt = select(Swipe.target_project_id).where(
                and_(
                    Swipe.swiper_id == swiper_id,
                    Swipe.target_project_id.isnot(None)
                )
            )
            result = await db.execute(stmt)
            return set(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching swiped projects for {swiper_id}: {e}")
            raise

    async def get_swiped_user_ids(
        self,
        db: AsyncSession,
        swiper_id: UUID
    ) -> set[UUID]:
        """Ids of every user the swiper already decided on, either direction."""
        try:
            stmt = select(Swipe.target_user_id).where(
                and_(
                    Swipe.swiper_id == swiper_id,
                    Swipe.target_user_id.isnot(None)
                )
            )
            result = await db.execute(stmt)
            return set(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching swiped users for {swiper_id}: {e}")
            raise

    async def get_liker_ids(
        self,
        db: AsyncSession,
        project_id: UUID
    ) -> set[UUID]:
        """Ids of every user who liked the project."""
        try:
            stmt = select(Swipe.swiper_id).where(
                and_(
                    Swipe.target_project_id == project_id,
                    Swipe.direction == SwipeDirection.LIKE.value
                )
            )
            result = await db.execute(stmt)
            return set(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching likers of project {project_id}: {e}")
            raise

    async def get_mutual_likes(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> list[MutualLike]:
        """
        List every mutual like the user takes part in, as member or as owner.

        A mutual like is a like from a member on a project together with a
        like from that project's owner on the member. Both sides are joined
        in one statement.

        Args:
            db: Active database session
            user_id: UUID of the member or owner

        Returns:
            List of MutualLike rows, unordered
        """
        member_swipe = aliased(Swipe)
        owner_swipe = aliased(Swipe)
        member = aliased(User)

        try:
            stmt = (
                select(Project, member, member_swipe.created_at, owner_swipe.created_at)
                .select_from(Project)
                .join(
                    member_swipe,
                    and_(
                        member_swipe.target_project_id == Project.id,
                        member_swipe.direction == SwipeDirection.LIKE.value
                    )
                )
                .join(
                    owner_swipe,
                    and_(
                        owner_swipe.swiper_id == Project.owner_id,
                        owner_swipe.target_user_id == member_swipe.swiper_id,
                        owner_swipe.direction == SwipeDirection.LIKE.value
                    )
                )
                .join(member, member.id == member_swipe.swiper_id)
                .where(
                    or_(
                        member_swipe.swiper_id == user_id,
                        Project.owner_id == user_id
                    )
                )
            )
            result = await db.execute(stmt)
            return [MutualLike(*row) for row in result.all()]
        except SQLAlchemyError as e:
            logger.error(f"Error fetching mutual likes for {user_id}: {e}")
            raise

    async def delete_by_swiper(
        self,
        db: AsyncSession,
        swiper_id: UUID
    ) -> int:
        """Delete every swipe made by the swiper. Debug use only."""
        try:
            stmt = sql_delete(Swipe).where(Swipe.swiper_id == swiper_id)
            result = await db.execute(stmt)
            await db.flush()
            return result.rowcount or 0
        except SQLAlchemyError as e:
            logger.error(f"Error clearing swipes for {swiper_id}: {e}")
            await db.rollback()
            raise
