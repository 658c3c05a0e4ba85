from .candidate_service import CandidateService
from .debug_service import DebugService
from .match_service import MatchService
from .swipe_service import SwipeService

__all__ = [
    "CandidateService",
    "DebugService",
    "MatchService",
    "SwipeService"
]
