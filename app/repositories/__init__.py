# Repositories package
from .base import BaseRepository
from .swipe_repository import SwipeRepository, MutualLike
from .project_repository import ProjectRepository
from .user_repository import UserRepository
from .application_repository import ApplicationRepository

__all__ = [
    "BaseRepository",
    "SwipeRepository",
    "MutualLike",
    "ProjectRepository",
    "UserRepository",
    "ApplicationRepository",
]
