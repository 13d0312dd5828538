"""
JWT helper utilities.

Access tokens are minted after the identity provider has authenticated the
user; ``sub`` carries the Remedi user id.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from core.config import get_settings


def create_access_token(data: Dict[str, Any], expires_minutes: int | None = None) -> str:
    """
    Create a signed JWT access token with expiration and JTI.

    Args:
        data: Claims to include in the token (e.g., {"sub": user_id}).
        expires_minutes: Optional override for expiration window in minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    to_encode = data.copy()
    expire_delta = timedelta(minutes=expires_minutes or settings.access_token_expire_minutes)
    to_encode.update(
        {
            "exp": datetime.now(timezone.utc) + expire_delta,
            "jti": str(uuid.uuid4()),
        }
    )
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Raises:
        ValueError: If token is invalid or signature/expiry check fails.
    """
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise ValueError("Invalid token") from exc


def get_token_expiry(token: str) -> datetime | None:
    try:
        exp = decode_access_token(token).get("exp")
    except ValueError:
        return None
    return datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None
