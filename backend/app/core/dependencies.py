"""
FastAPI dependency injection functions.

Provides the current user and the request Identity used by every
authorization decision.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.authz.identity import Identity
from app.core.database import get_db
from app.core.security import decode_access_token
from app.models.user import User

# ---------------------------------------------------------------------------
# HTTP Bearer scheme (auto_error=False so we can return custom 401)
# ---------------------------------------------------------------------------

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": code, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


# ---------------------------------------------------------------------------
# Current user
# ---------------------------------------------------------------------------

async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Validate Bearer JWT and return the authenticated User.

    Raises 401 if:
    - No token provided
    - Token is invalid, expired or not an access token
    - User does not exist or is inactive
    """
    if credentials is None:
        raise _unauthorized("MISSING_TOKEN", "Authorization header required")

    try:
        payload = decode_access_token(credentials.credentials)
        user_id = UUID(payload.get("sub", ""))
    except (JWTError, TypeError, ValueError):
        raise _unauthorized("INVALID_TOKEN", "Token is invalid or expired")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None or not user.is_active:
        raise _unauthorized("USER_NOT_FOUND", "User not found or inactive")

    return user


async def get_current_identity(
    current_user: User = Depends(get_current_user),
) -> Identity:
    """The acting principal. The role comes from the database, never the token."""
    return Identity.from_user(current_user)
