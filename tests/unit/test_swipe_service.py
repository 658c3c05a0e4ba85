"""
Unit tests for SwipeService.

All database I/O is replaced with AsyncMock objects so tests run without a
real database.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from app.models.project import Project
from app.models.swipe import Swipe
from app.services.swipe_service import SwipeService, validate_direction


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
def _make_project(
    owner_id: uuid.UUID | None = None,
    is_active: bool = True,
) -> Project:
    project = Project()
    project.id = uuid.uuid4()
    project.owner_id = owner_id or uuid.uuid4()
    project.title = "Side project"
    project.is_active = is_active
    return project


def _make_swipe(
    swiper_id: uuid.UUID,
    direction: str = "like",
    target_project_id: uuid.UUID | None = None,
    target_user_id: uuid.UUID | None = None,
) -> Swipe:
    swipe = Swipe()
    swipe.id = uuid.uuid4()
    swipe.swiper_id = swiper_id
    swipe.target_project_id = target_project_id
    swipe.target_user_id = target_user_id
    swipe.direction = direction
    swipe.created_at = datetime.now(timezone.utc)
    return swipe


def _make_service(
    project: Project | None = None,
    existing_swipe: Swipe | None = None,
    recorded_swipe: Swipe | None = None,
    is_match: bool = False,
    user_exists: bool = True,
) -> tuple[SwipeService, MagicMock, MagicMock, MagicMock]:
    swipe_repo = MagicMock()
    swipe_repo.get_project_swipe = AsyncMock(return_value=existing_swipe)
    swipe_repo.get_user_swipe = AsyncMock(return_value=existing_swipe)
    swipe_repo.record = AsyncMock(return_value=recorded_swipe)

    project_repo = MagicMock()
    project_repo.get = AsyncMock(return_value=project)

    user_repo = MagicMock()
    user_repo.exists = AsyncMock(return_value=user_exists)

    match_service = MagicMock()
    match_service.detect = AsyncMock(return_value=is_match)

    service = SwipeService(
        swipe_repo=swipe_repo,
        project_repo=project_repo,
        user_repo=user_repo,
        match_service=match_service,
    )
    return service, swipe_repo, project_repo, match_service


def _integrity_error() -> IntegrityError:
    return IntegrityError("INSERT INTO swipes", {}, Exception("UNIQUE constraint failed"))


# ---------------------------------------------------------------------------
# validate_direction
# ---------------------------------------------------------------------------
class TestValidateDirection:
    @pytest.mark.parametrize("direction", ["like", "pass"])
    def test_accepts_known_literals(self, direction):
        assert validate_direction(direction) == direction

    @pytest.mark.parametrize("direction", ["maybe", "LIKE", "", None])
    def test_rejects_everything_else(self, direction):
        with pytest.raises(ValidationError):
            validate_direction(direction)


# ---------------------------------------------------------------------------
# record_project_swipe
# ---------------------------------------------------------------------------
class TestRecordProjectSwipe:
    @pytest.mark.asyncio
    async def test_invalid_direction_touches_no_repository(self):
        service, swipe_repo, project_repo, _ = _make_service()
        db = AsyncMock()

        with pytest.raises(ValidationError):
            await service.record_project_swipe(db, uuid.uuid4(), uuid.uuid4(), "maybe")

        swipe_repo.get_project_swipe.assert_not_called()
        project_repo.get.assert_not_called()
        swipe_repo.record.assert_not_called()
        db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_swipe_raises_conflict(self):
        user_id = uuid.uuid4()
        project = _make_project()
        existing = _make_swipe(user_id, "pass", target_project_id=project.id)
        service, swipe_repo, project_repo, _ = _make_service(project=project, existing_swipe=existing)

        with pytest.raises(ConflictError):
            await service.record_project_swipe(AsyncMock(), user_id, project.id, "pass")

        # Conflict is decided before the project is even loaded
        project_repo.get.assert_not_called()
        swipe_repo.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_project_raises_not_found(self):
        service, swipe_repo, _, _ = _make_service(project=None)

        with pytest.raises(NotFoundError):
            await service.record_project_swipe(AsyncMock(), uuid.uuid4(), uuid.uuid4(), "like")
        swipe_repo.record.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("direction", ["like", "pass"])
    async def test_inactive_project_rejected(self, direction):
        project = _make_project(is_active=False)
        service, swipe_repo, _, _ = _make_service(project=project)

        with pytest.raises(InvalidStateError) as exc_info:
            await service.record_project_swipe(AsyncMock(), uuid.uuid4(), project.id, direction)
        assert "no longer active" in exc_info.value.message
        swipe_repo.record.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("direction", ["like", "pass"])
    async def test_own_project_rejected(self, direction):
        owner_id = uuid.uuid4()
        project = _make_project(owner_id=owner_id)
        service, swipe_repo, _, _ = _make_service(project=project)

        with pytest.raises(InvalidStateError) as exc_info:
            await service.record_project_swipe(AsyncMock(), owner_id, project.id, direction)
        assert "own project" in exc_info.value.message
        swipe_repo.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_like_without_reciprocal_is_not_a_match(self):
        user_id = uuid.uuid4()
        project = _make_project()
        swipe = _make_swipe(user_id, "like", target_project_id=project.id)
        service, swipe_repo, _, match_service = _make_service(project=project, recorded_swipe=swipe)
        db = AsyncMock()

        result = await service.record_project_swipe(db, user_id, project.id, "like")

        swipe_repo.record.assert_called_once_with(
            db, user_id, "like", target_project_id=project.id, target_user_id=None
        )
        match_service.detect.assert_called_once_with(db, user_id, project.id, "project")
        assert result["success"] is True
        assert result["swipe"] is swipe
        assert result["message"] == "Project liked!"
        assert "match" not in result
        assert "project_id" not in result

    @pytest.mark.asyncio
    async def test_like_with_reciprocal_is_a_match(self):
        user_id = uuid.uuid4()
        project = _make_project()
        swipe = _make_swipe(user_id, "like", target_project_id=project.id)
        service, _, _, _ = _make_service(project=project, recorded_swipe=swipe, is_match=True)

        result = await service.record_project_swipe(AsyncMock(), user_id, project.id, "like")

        assert result["match"] is True
        assert result["project_id"] == project.id

    @pytest.mark.asyncio
    async def test_pass_skips_match_detection(self):
        user_id = uuid.uuid4()
        project = _make_project()
        swipe = _make_swipe(user_id, "pass", target_project_id=project.id)
        service, _, _, match_service = _make_service(project=project, recorded_swipe=swipe, is_match=True)

        result = await service.record_project_swipe(AsyncMock(), user_id, project.id, "pass")

        match_service.detect.assert_not_called()
        assert result["message"] == "Project passed"
        assert "match" not in result

    @pytest.mark.asyncio
    async def test_lost_insert_race_becomes_conflict(self):
        user_id = uuid.uuid4()
        project = _make_project()
        winner = _make_swipe(user_id, "like", target_project_id=project.id)
        service, swipe_repo, _, _ = _make_service(project=project)
        # Nothing visible at check time, the concurrent winner is visible afterwards
        swipe_repo.get_project_swipe = AsyncMock(side_effect=[None, winner])
        swipe_repo.record = AsyncMock(side_effect=_integrity_error())

        with pytest.raises(ConflictError):
            await service.record_project_swipe(AsyncMock(), user_id, project.id, "like")

    @pytest.mark.asyncio
    async def test_other_integrity_failure_is_store_error(self):
        project = _make_project()
        service, swipe_repo, _, _ = _make_service(project=project)
        swipe_repo.record = AsyncMock(side_effect=_integrity_error())

        with pytest.raises(StoreError):
            await service.record_project_swipe(AsyncMock(), uuid.uuid4(), project.id, "like")

    @pytest.mark.asyncio
    async def test_store_failure_is_store_error(self):
        service, swipe_repo, _, _ = _make_service()
        swipe_repo.get_project_swipe = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection refused"))
        )

        with pytest.raises(StoreError):
            await service.record_project_swipe(AsyncMock(), uuid.uuid4(), uuid.uuid4(), "like")


# ---------------------------------------------------------------------------
# record_user_swipe
# ---------------------------------------------------------------------------
class TestRecordUserSwipe:
    @pytest.mark.asyncio
    async def test_swiper_is_resolved_from_project_owner(self):
        owner_id = uuid.uuid4()
        target_id = uuid.uuid4()
        project = _make_project(owner_id=owner_id)
        swipe = _make_swipe(owner_id, "pass", target_user_id=target_id)
        service, swipe_repo, _, _ = _make_service(project=project, recorded_swipe=swipe)
        db = AsyncMock()

        result = await service.record_user_swipe(db, target_id, project.id, "pass")

        swipe_repo.get_user_swipe.assert_called_once_with(db, owner_id, target_id)
        swipe_repo.record.assert_called_once_with(
            db, owner_id, "pass", target_project_id=None, target_user_id=target_id
        )
        assert result["message"] == "User passed"

    @pytest.mark.asyncio
    async def test_invalid_direction_touches_no_repository(self):
        service, swipe_repo, project_repo, _ = _make_service()

        with pytest.raises(ValidationError):
            await service.record_user_swipe(AsyncMock(), uuid.uuid4(), uuid.uuid4(), "maybe")
        project_repo.get.assert_not_called()
        swipe_repo.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_project_raises_not_found(self):
        service, _, _, _ = _make_service(project=None)

        with pytest.raises(NotFoundError):
            await service.record_user_swipe(AsyncMock(), uuid.uuid4(), uuid.uuid4(), "like")

    @pytest.mark.asyncio
    async def test_non_owner_caller_forbidden(self):
        project = _make_project()
        service, swipe_repo, _, _ = _make_service(project=project)

        with pytest.raises(ForbiddenError):
            await service.record_user_swipe(
                AsyncMock(), uuid.uuid4(), project.id, "like", caller_id=uuid.uuid4()
            )
        swipe_repo.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_inactive_project_rejected(self):
        project = _make_project(is_active=False)
        service, swipe_repo, _, _ = _make_service(project=project)

        with pytest.raises(InvalidStateError):
            await service.record_user_swipe(AsyncMock(), uuid.uuid4(), project.id, "pass")
        swipe_repo.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_owner_cannot_swipe_on_self(self):
        owner_id = uuid.uuid4()
        project = _make_project(owner_id=owner_id)
        service, swipe_repo, _, _ = _make_service(project=project)

        with pytest.raises(InvalidStateError) as exc_info:
            await service.record_user_swipe(AsyncMock(), owner_id, project.id, "like")
        assert "project owner" in exc_info.value.message
        swipe_repo.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_user_raises_not_found(self):
        project = _make_project()
        service, swipe_repo, _, _ = _make_service(project=project, user_exists=False)

        with pytest.raises(NotFoundError):
            await service.record_user_swipe(AsyncMock(), uuid.uuid4(), project.id, "like")
        swipe_repo.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_swipe_raises_conflict(self):
        owner_id = uuid.uuid4()
        target_id = uuid.uuid4()
        project = _make_project(owner_id=owner_id)
        existing = _make_swipe(owner_id, "like", target_user_id=target_id)
        service, swipe_repo, _, _ = _make_service(project=project, existing_swipe=existing)

        with pytest.raises(ConflictError):
            await service.record_user_swipe(AsyncMock(), target_id, project.id, "like")
        swipe_repo.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_like_back_reports_match_with_both_ids(self):
        owner_id = uuid.uuid4()
        target_id = uuid.uuid4()
        project = _make_project(owner_id=owner_id)
        swipe = _make_swipe(owner_id, "like", target_user_id=target_id)
        service, _, _, match_service = _make_service(
            project=project, recorded_swipe=swipe, is_match=True
        )
        db = AsyncMock()

        result = await service.record_user_swipe(db, target_id, project.id, "like", caller_id=owner_id)

        match_service.detect.assert_called_once_with(
            db, owner_id, target_id, "user", project_id=project.id
        )
        assert result["message"] == "User liked!"
        assert result["match"] is True
        assert result["user_id"] == target_id
        assert result["project_id"] == project.id


# ---------------------------------------------------------------------------
# clear_swipes / check_health
# ---------------------------------------------------------------------------
class TestLedgerMaintenance:
    @pytest.mark.asyncio
    async def test_clear_swipes_returns_deleted_count(self):
        service, swipe_repo, _, _ = _make_service()
        swipe_repo.delete_by_swiper = AsyncMock(return_value=3)
        user_id = uuid.uuid4()
        db = AsyncMock()

        assert await service.clear_swipes(db, user_id) == 3
        swipe_repo.delete_by_swiper.assert_called_once_with(db, user_id)

    @pytest.mark.asyncio
    async def test_health_failure_raises_store_error(self):
        service, swipe_repo, _, _ = _make_service()
        swipe_repo.ping = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("no such table: swipes"))
        )

        with pytest.raises(StoreError):
            await service.check_health(AsyncMock())
