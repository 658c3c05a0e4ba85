from .user import OwnerSummary, UserPublic
from .project import ProjectSummary, ProjectCandidate
from .swipe import (
    ProjectSwipeCreate,
    UserSwipeCreate,
    Swipe,
    SwipeResult,
    NoCandidates,
    MatchItem,
    MatchesResponse,
    SwipeHealth,
    ClearSwipesResponse,
    DebugUser,
    DebugUsersResponse,
    SeededApplication,
    SeededApplicationsResponse
)

__all__ = [
    "OwnerSummary", "UserPublic",
    "ProjectSummary", "ProjectCandidate",
    "ProjectSwipeCreate", "UserSwipeCreate", "Swipe", "SwipeResult",
    "NoCandidates", "MatchItem", "MatchesResponse", "SwipeHealth",
    "ClearSwipesResponse", "DebugUser", "DebugUsersResponse",
    "SeededApplication", "SeededApplicationsResponse"
]
