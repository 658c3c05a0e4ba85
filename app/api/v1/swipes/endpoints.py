from datetime import datetime, timezone
from typing import Union
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.exceptions import StoreError
from app.api.deps import (
    get_candidate_service,
    get_debug_service,
    get_current_user_id,
    get_match_service,
    get_swipe_service,
    require_same_user,
)
from app.schemas.project import ProjectCandidate, ProjectSummary
from app.schemas.user import UserPublic
from app.schemas.swipe import (
    ClearSwipesResponse,
    DebugUser,
    DebugUsersResponse,
    MatchItem,
    MatchesResponse,
    NoCandidates,
    ProjectSwipeCreate,
    SeededApplication,
    SeededApplicationsResponse,
    Swipe as SwipeSchema,
    SwipeHealth,
    SwipeResult,
    UserSwipeCreate,
)
from app.services.candidate_service import CandidateService
from app.services.debug_service import DebugService
from app.services.match_service import MatchService
from app.services.swipe_service import SwipeService
import uuid

router = APIRouter()
debug_router = APIRouter()


def _to_swipe_result(result: dict) -> SwipeResult:
    return SwipeResult(**{**result, "swipe": SwipeSchema.model_validate(result["swipe"])})


# ===========================
# USER -> PROJECT SWIPING
# ===========================

@router.get("/next-project", response_model=Union[ProjectCandidate, NoCandidates])
async def get_next_project(
    user_id: uuid.UUID = Query(..., alias="userId"),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
    service: CandidateService = Depends(get_candidate_service),
    db: AsyncSession = Depends(get_db)
):
    """Pull a random active project the user has not swiped on yet"""
    require_same_user(current_user_id, user_id)

    project = await service.next_project(db, user_id)
    if project is None:
        return NoCandidates(message="No more projects available.")
    return ProjectCandidate.model_validate(project)


@router.post("/project", response_model=SwipeResult, response_model_exclude_none=True)
async def record_project_swipe(
    swipe_data: ProjectSwipeCreate,
    current_user_id: uuid.UUID = Depends(get_current_user_id),
    service: SwipeService = Depends(get_swipe_service),
    db: AsyncSession = Depends(get_db)
):
    """Record a user's like/pass on a project"""
    require_same_user(current_user_id, swipe_data.user_id)

    result = await service.record_project_swipe(
        db,
        user_id=swipe_data.user_id,
        project_id=swipe_data.project_id,
        direction=swipe_data.direction,
    )
    await db.commit()
    return _to_swipe_result(result)


# ===========================
# PROJECT -> USER SWIPING
# ===========================

@router.get("/next-user", response_model=Union[UserPublic, NoCandidates])
async def get_next_user(
    project_id: uuid.UUID = Query(..., alias="projectId"),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
    service: CandidateService = Depends(get_candidate_service),
    db: AsyncSession = Depends(get_db)
):
    """Pull a random interested user for the caller's project"""
    user = await service.next_user(db, project_id, caller_id=current_user_id)
    if user is None:
        return NoCandidates(message="No more users available.")
    return UserPublic.model_validate(user)


@router.post("/user", response_model=SwipeResult, response_model_exclude_none=True)
async def record_user_swipe(
    swipe_data: UserSwipeCreate,
    current_user_id: uuid.UUID = Depends(get_current_user_id),
    service: SwipeService = Depends(get_swipe_service),
    db: AsyncSession = Depends(get_db)
):
    """Record the project owner's like/pass on a user"""
    result = await service.record_user_swipe(
        db,
        user_id=swipe_data.user_id,
        project_id=swipe_data.project_id,
        direction=swipe_data.direction,
        caller_id=current_user_id,
    )
    await db.commit()
    return _to_swipe_result(result)


# ===========================
# UTILITY ENDPOINTS
# ===========================

@router.get("/matches", response_model=MatchesResponse)
async def get_matches(
    user_id: uuid.UUID = Query(..., alias="userId"),
    current_user_id: uuid.UUID = Depends(get_current_user_id),
    service: MatchService = Depends(get_match_service),
    db: AsyncSession = Depends(get_db)
):
    """List every mutual like the user takes part in, newest first"""
    require_same_user(current_user_id, user_id)

    matches = [
        MatchItem(
            match_id=m["match_id"],
            role=m["role"],
            project=ProjectSummary.model_validate(m["project"]),
            user=UserPublic.model_validate(m["user"]),
            matched_at=m["matched_at"],
        )
        for m in await service.get_matches(db, user_id)
    ]
    return MatchesResponse(matches=matches, count=len(matches))


@router.get("/health", response_model=SwipeHealth, response_model_exclude_none=True)
async def swipes_health(
    service: SwipeService = Depends(get_swipe_service),
    db: AsyncSession = Depends(get_db)
):
    """Simple status check for the swipes table"""
    try:
        await service.check_health(db)
    except StoreError as e:
        body = SwipeHealth(ok=False, error=e.message, timestamp=datetime.now(timezone.utc))
        return JSONResponse(status_code=503, content=body.model_dump(mode="json", exclude_none=True))

    return SwipeHealth(ok=True, status="healthy", timestamp=datetime.now(timezone.utc))


@debug_router.delete("/debug/clear-swipes/{user_id}", response_model=ClearSwipesResponse)
async def clear_swipes(
    user_id: uuid.UUID,
    service: SwipeService = Depends(get_swipe_service),
    db: AsyncSession = Depends(get_db)
):
    """Delete every swipe made by a user (testing aid, not mounted in production)"""
    deleted = await service.clear_swipes(db, user_id)
    await db.commit()
    return ClearSwipesResponse(
        message=f"Cleared all swipes for user {user_id}",
        deleted=deleted,
    )


@debug_router.get("/debug/users", response_model=DebugUsersResponse)
async def debug_users(
    service: DebugService = Depends(get_debug_service),
    db: AsyncSession = Depends(get_db)
):
    """First few users with their emails (testing aid)"""
    users = [DebugUser.model_validate(u) for u in await service.list_users(db)]
    return DebugUsersResponse(total_users=len(users), users=users)


@debug_router.post("/debug/create-applications/{project_id}", response_model=SeededApplicationsResponse)
async def create_test_applications(
    project_id: uuid.UUID,
    service: DebugService = Depends(get_debug_service),
    db: AsyncSession = Depends(get_db)
):
    """Seed pending applications so the project's user deck has candidates (testing aid)"""
    applications = await service.seed_applications(db, project_id)
    await db.commit()
    return SeededApplicationsResponse(
        message=f"Created {len(applications)} test applications for project {project_id}",
        applications=[SeededApplication.model_validate(a) for a in applications],
    )
