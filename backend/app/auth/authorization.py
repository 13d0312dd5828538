"""
Ownership checks for session- and user-owned rows.

Anonymous visitors own rows through a browser session id (UUIDv4); signed-in
users own rows through their user id. Handlers call these before touching a
row and let the raised ApiError become the response.
"""

from core.models import User

from ..api.response import ApiError, ErrorCode
from ..schemas import is_uuid_v4


def verify_ownership(
    current_user: User | None, user_id: str | None = None, session_id: str | None = None
) -> None:
    """Check that the caller may read or write data for the requested owner."""
    if user_id:
        if current_user is None:
            raise ApiError(ErrorCode.UNAUTHORIZED, "Authentication required")
        if current_user.id != user_id:
            raise ApiError(ErrorCode.FORBIDDEN, "You can only access your own data")
        return

    if session_id and not is_uuid_v4(session_id):
        raise ApiError(ErrorCode.INVALID_INPUT, "Invalid session ID format")


def verify_resource_ownership(
    current_user: User | None,
    resource_user_id: str | None,
    resource_session_id: str | None,
    request_session_id: str | None = None,
) -> None:
    """Check that the caller may modify an existing row."""
    if resource_user_id:
        if current_user is None:
            raise ApiError(ErrorCode.UNAUTHORIZED, "Authentication required")
        if current_user.id != resource_user_id:
            raise ApiError(ErrorCode.FORBIDDEN, "You can only modify your own data")
        return

    if resource_session_id:
        if not request_session_id:
            raise ApiError(
                ErrorCode.UNAUTHORIZED, "Session ID is required to modify this resource"
            )
        if not is_uuid_v4(request_session_id):
            raise ApiError(ErrorCode.INVALID_INPUT, "Invalid session ID format")
        if request_session_id != resource_session_id:
            raise ApiError(ErrorCode.FORBIDDEN, "You can only modify your own data")
