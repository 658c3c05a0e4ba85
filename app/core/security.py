"""
Bearer token handling. Tokens are issued by the account service; this API
only needs to read the caller's id out of a valid access token. Issuing is
kept for local tooling and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Union
from uuid import UUID
from jose import JWTError, jwt
from app.core.config import settings

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"


def create_access_token(subject: Union[UUID, str], expires_delta: Optional[timedelta] = None) -> str:
    """Sign an access token whose subject is the user id"""
    lifetime = expires_delta or timedelta(seconds=settings.access_token_expires)
    claims = {
        "sub": str(subject),
        "type": ACCESS_TOKEN_TYPE,
        "exp": datetime.now(timezone.utc) + lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Return the subject of a valid, unexpired access token, else None"""
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
    except JWTError:
        return None

    if claims.get("type") != ACCESS_TOKEN_TYPE:
        return None
    return claims.get("sub")
