from .user import User
from .project import Project
from .application import Application
from .swipe import Swipe, SwipeDirection

__all__ = ["User", "Project", "Application", "Swipe", "SwipeDirection"]
