"""
Authentication dependencies for FastAPI routes.

Supports both:
- Bearer token in Authorization header (for API clients)
- access_token cookie (for browser-based frontends)
"""

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from core.db import get_db
from core.models import User
from core.repositories import TokenBlacklistRepository, UserRepository

from ..api.response import ApiError, ErrorCode
from .jwt import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)


def is_admin(user: User | None) -> bool:
    return user is not None and user.is_admin


def is_moderator(user: User | None) -> bool:
    return user is not None and user.is_moderator


def _resolve_user(db: Session, token: str) -> User | None:
    """User for a valid, unrevoked token; None otherwise."""
    try:
        payload = decode_access_token(token)
    except ValueError:
        return None

    jti = payload.get("jti")
    if jti and TokenBlacklistRepository(db).is_blacklisted(jti):
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None
    return UserRepository(db).get_by_id(str(user_id))


def get_token_from_request(
    token_header: str | None = Depends(oauth2_scheme),
    access_token_cookie: str | None = Cookie(None, alias="access_token"),
) -> str:
    """
    Extract JWT token from request.

    The Authorization header wins over the cookie.
    """
    token = token_header or access_token_cookie
    if token:
        return token

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    token: str = Depends(get_token_from_request),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the authenticated user from a bearer token or cookie.

    Revoked tokens and unknown users are both 401.
    """
    try:
        payload = decode_access_token(token)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        ) from None

    jti = payload.get("jti")
    if jti and TokenBlacklistRepository(db).is_blacklisted(jti):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has been revoked",
        )

    user_id = payload.get("sub")
    user = UserRepository(db).get_by_id(str(user_id)) if user_id else None
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_optional_user(
    token_header: str | None = Depends(oauth2_scheme),
    access_token_cookie: str | None = Cookie(None, alias="access_token"),
    db: Session = Depends(get_db),
) -> User | None:
    """
    Get the current user if authenticated, otherwise return None.

    Used by routes that serve anonymous sessions as well as signed-in users.
    """
    token = token_header or access_token_cookie
    if not token:
        return None
    return _resolve_user(db, token)


def require_moderator(user: User = Depends(get_current_user)) -> User:
    if not is_moderator(user):
        raise ApiError(ErrorCode.UNAUTHORIZED, "Moderator access required", status_code=403)
    return user
