"""
Session endpoints.

Sign-in itself happens at the identity provider; this router exposes the
current user, token revocation and the CSRF cookie.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from core.config import get_settings
from core.db import get_db
from core.logging import get_logger
from core.models import User
from core.repositories import SubscriptionRepository, TokenBlacklistRepository
from core.security import CSRF_COOKIE_MAX_AGE, CSRF_COOKIE_NAME, generate_csrf_token
from core.services import get_effective_plan

from ..api.response import envelope
from ..auth.dependencies import get_current_user
from ..auth.jwt import decode_access_token, get_token_expiry
from ..dependencies import rate_limit
from ..schemas import UserResponse, dump

logger = get_logger("auth")

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_from_request(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]
    return request.cookies.get("access_token")


@router.get("/me")
def current_user(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Current user with their effective plan."""
    subscription = SubscriptionRepository(db).get_by_user_id(user.id)
    plan, is_trial = get_effective_plan(user, subscription)
    return envelope({**dump(UserResponse, user), "plan": plan, "isTrial": is_trial})


@router.post("/logout", dependencies=[Depends(rate_limit("auth"))])
def logout(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Revoke the current JWT.

    The token's jti is blacklisted until the token would have expired anyway.
    """
    settings = get_settings()
    token = _token_from_request(request)

    if token:
        try:
            jti = decode_access_token(token).get("jti")
        except ValueError:
            jti = None
        if jti:
            expiry = get_token_expiry(token) or datetime.now(timezone.utc)
            TokenBlacklistRepository(db).blacklist_token(jti, expiry)
            logger.info("token_revoked", user_id=current_user.id, jti=jti[:8])

    response = envelope({"loggedOut": True})
    for cookie in ("access_token", CSRF_COOKIE_NAME):
        response.delete_cookie(key=cookie, path="/", secure=settings.is_production)
    return response


@router.get("/csrf")
def issue_csrf_token() -> JSONResponse:
    """Set the double-submit cookie and hand the same token to the client."""
    token = generate_csrf_token()
    response = envelope({"csrfToken": token})
    response.set_cookie(
        key=CSRF_COOKIE_NAME,
        value=token,
        httponly=False,
        secure=get_settings().is_production,
        samesite="strict",
        max_age=CSRF_COOKIE_MAX_AGE,
        path="/",
    )
    return response
