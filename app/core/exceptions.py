"""
Domain errors for the swipe/match API.

Every error carries a stable machine-readable ``kind`` and the HTTP status
it maps to. ``app.main`` registers one handler for the whole hierarchy that
renders ``{"error": {"kind": ..., "message": ...}}``.
"""

from fastapi import status


class SwipeMatchError(Exception):
    """Base exception for the swipe/match API."""

    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": {"kind": self.kind, "message": self.message}}


class ValidationError(SwipeMatchError):
    """Missing field, malformed identifier or unknown direction."""

    kind = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(SwipeMatchError):
    """Raised when no valid bearer token accompanies the request."""

    kind = "unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(SwipeMatchError):
    """Raised when the caller acts for an identity other than their own."""

    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(SwipeMatchError):
    """Raised when a referenced project or user does not exist."""

    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(SwipeMatchError):
    """Raised when the swiper already decided on the target."""

    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT


class InvalidStateError(SwipeMatchError):
    """Raised for inactive projects and self-swipes."""

    kind = "invalid_state"
    status_code = status.HTTP_400_BAD_REQUEST


class StoreError(SwipeMatchError):
    """Raised when a data-store call fails. Never retried here."""

    kind = "store_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
