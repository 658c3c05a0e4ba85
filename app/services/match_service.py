"""
Match detection and listing.

A match between a user and a project exists when the user liked the project
and the project's owner liked the user. Matches are never stored; they are
read from the swipe ledger whenever they are needed.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.core.exceptions import StoreError, ValidationError
from app.repositories.project_repository import ProjectRepository
from app.repositories.swipe_repository import MutualLike, SwipeRepository

logger = logging.getLogger(__name__)

TARGET_PROJECT = "project"
TARGET_USER = "user"


def build_match_id(member_id: UUID, project_id: UUID) -> str:
    return f"{member_id}_{project_id}"


class MatchService:
    """
    Service for reciprocal-like checks and match listing.

    Detection runs right after a fresh like has been written and only reads.
    Listing uses a single join over the ledger instead of one lookup per
    candidate swipe.
    """

    def __init__(
        self,
        swipe_repo: Optional[SwipeRepository] = None,
        project_repo: Optional[ProjectRepository] = None
    ):
        self.swipe_repo = swipe_repo or SwipeRepository()
        self.project_repo = project_repo or ProjectRepository()

    async def detect(
        self,
        db: AsyncSession,
        swiper_id: UUID,
        target_id: UUID,
        target_type: str,
        project_id: Optional[UUID] = None
    ) -> bool:
        """
        Check whether a fresh like completes a match.

        Args:
            db: Active database session
            swiper_id: Who just liked (a user, or a project owner)
            target_id: What was liked (a project id, or a user id)
            target_type: "project" or "user"
            project_id: Project the owner was reviewing for; required when
                target_type is "user"

        Returns:
            True if the reciprocal like exists

        Raises:
            ValidationError: On an unknown target type or missing project_id
            StoreError: If a store query fails
        """
        if target_type == TARGET_PROJECT:
            return await self.detect_project_match(db, swiper_id, target_id)
        if target_type == TARGET_USER:
            if project_id is None:
                raise ValidationError("project_id is required to detect a match on a user")
            return await self.detect_user_match(db, target_id, project_id)
        raise ValidationError(f"Unknown swipe target type: {target_type}")

    async def detect_project_match(
        self,
        db: AsyncSession,
        user_id: UUID,
        project_id: UUID
    ) -> bool:
        """A user liked a project: has the project's owner liked the user?"""
        try:
            project = await self.project_repo.get(db, project_id)
            if not project:
                return False
            return await self.swipe_repo.has_liked_user(db, project.owner_id, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error detecting match for user {user_id} on project {project_id}: {e}")
            raise StoreError("Failed to check for a match") from e

    async def detect_user_match(
        self,
        db: AsyncSession,
        user_id: UUID,
        project_id: UUID
    ) -> bool:
        """An owner liked a user: has the user liked the owner's project?"""
        try:
            return await self.swipe_repo.has_liked_project(db, user_id, project_id)
        except SQLAlchemyError as e:
            logger.error(f"Error detecting match for project {project_id} on user {user_id}: {e}")
            raise StoreError("Failed to check for a match") from e

    async def get_matches(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> list[dict]:
        """
        List every match the user is part of, as member or as project owner.

        Each match is keyed by ``<member_id>_<project_id>`` and stamped with
        the later of its two like timestamps, i.e. the like that completed
        it. Newest first.

        Args:
            db: Active database session
            user_id: UUID of the user

        Returns:
            List of dicts with match_id, role, project, user and matched_at

        Raises:
            StoreError: If the store query fails
        """
        try:
            rows = await self.swipe_repo.get_mutual_likes(db, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching matches for user {user_id}: {e}")
            raise StoreError("Failed to fetch matches") from e

        matches: dict[str, dict] = {}
        for row in rows:
            match_id = build_match_id(row.member.id, row.project.id)
            if match_id in matches:
                continue
            matches[match_id] = {
                "match_id": match_id,
                "role": "member" if row.member.id == user_id else "owner",
                "project": row.project,
                "user": row.member,
                "matched_at": _completed_at(row),
            }

        return sorted(
            matches.values(),
            key=lambda m: (m["matched_at"] is not None, m["matched_at"] or 0),
            reverse=True,
        )


def _completed_at(row: MutualLike):
    stamps = [ts for ts in (row.member_liked_at, row.owner_liked_at) if ts is not None]
    return max(stamps) if stamps else None
