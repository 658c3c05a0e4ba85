from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime
import uuid
from app.schemas.project import ProjectSummary
from app.schemas.user import UserPublic

Direction = Literal["like", "pass"]


class ProjectSwipeCreate(BaseModel):
    """A user's decision on a project"""
    project_id: uuid.UUID
    direction: Direction
    user_id: uuid.UUID = Field(alias="userId")

    class Config:
        populate_by_name = True


class UserSwipeCreate(BaseModel):
    """A project owner's decision on a user; the swiper is resolved from the project"""
    user_id: uuid.UUID
    project_id: uuid.UUID
    direction: Direction


class Swipe(BaseModel):
    id: uuid.UUID
    swiper_id: uuid.UUID
    target_project_id: Optional[uuid.UUID] = None
    target_user_id: Optional[uuid.UUID] = None
    direction: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SwipeResult(BaseModel):
    """Outcome of a recorded swipe. match/user_id/project_id only appear on a match"""
    success: bool = True
    swipe: Swipe
    message: str
    match: Optional[bool] = None
    user_id: Optional[uuid.UUID] = None
    project_id: Optional[uuid.UUID] = None


class NoCandidates(BaseModel):
    """Returned with HTTP 200 when the candidate pool is empty"""
    done: bool = True
    message: str


class MatchItem(BaseModel):
    match_id: str
    role: Literal["member", "owner"]  # caller's side of the match
    project: ProjectSummary
    user: UserPublic
    matched_at: Optional[datetime] = None


class MatchesResponse(BaseModel):
    matches: List[MatchItem]
    count: int


class SwipeHealth(BaseModel):
    ok: bool
    table: str = "swipes"
    status: Optional[str] = None
    error: Optional[str] = None
    timestamp: datetime


class ClearSwipesResponse(BaseModel):
    success: bool = True
    message: str
    deleted: int


class DebugUser(BaseModel):
    id: uuid.UUID
    username: str
    role: Optional[str] = None
    experience: Optional[str] = None
    email: str

    class Config:
        from_attributes = True


class DebugUsersResponse(BaseModel):
    total_users: int
    users: List[DebugUser]


class SeededApplication(BaseModel):
    user_id: uuid.UUID
    project_id: uuid.UUID
    blurb: Optional[str] = None
    status: str

    class Config:
        from_attributes = True


class SeededApplicationsResponse(BaseModel):
    success: bool = True
    message: str
    applications: List[SeededApplication]
