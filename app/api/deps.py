from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from app.core.exceptions import AuthenticationError, ForbiddenError
from app.core.security import decode_access_token
from app.services.candidate_service import CandidateService
from app.services.debug_service import DebugService
from app.services.match_service import MatchService
from app.services.swipe_service import SwipeService
import uuid

security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> uuid.UUID:
    """Resolve the caller's verified identity from the bearer token.

    Only decodes the token; the swipe core never needs the full user row
    to authorize a request.
    """
    if credentials is None:
        raise AuthenticationError("No token provided")

    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise AuthenticationError("Could not validate credentials")

    try:
        return uuid.UUID(user_id)
    except ValueError:
        raise AuthenticationError("Could not validate credentials")


def require_same_user(current_user_id: uuid.UUID, user_id: uuid.UUID) -> None:
    """Verify that the caller acts for themselves"""
    if current_user_id != user_id:
        raise ForbiddenError("Access denied. You can only act for your own account")


def get_swipe_service() -> SwipeService:
    return SwipeService()


def get_candidate_service() -> CandidateService:
    return CandidateService()


def get_match_service() -> MatchService:
    return MatchService()


def get_debug_service() -> DebugService:
    return DebugService()
