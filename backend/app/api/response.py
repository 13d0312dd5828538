"""
Standardized API response envelope.

Every JSON endpoint answers with one of two shapes:

    {"success": true,  "data": ..., "metadata": {...}}
    {"success": false, "error": {"code", "message", "statusCode", "details"}}

Handlers return ``envelope(...)`` on success and raise ``ApiError`` on
failure; the exception handlers in ``error_handlers`` turn everything else
into the error shape.
"""

import traceback
from enum import Enum
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from core.config import get_settings


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    MISSING_PARAMETER = "MISSING_PARAMETER"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    EXTERNAL_API_ERROR = "EXTERNAL_API_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


ERROR_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.MISSING_PARAMETER: 400,
    ErrorCode.RESOURCE_NOT_FOUND: 404,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.RATE_LIMIT_EXCEEDED: 429,
    ErrorCode.CONFLICT: 409,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.DATABASE_ERROR: 500,
    ErrorCode.EXTERNAL_API_ERROR: 502,
    ErrorCode.SERVICE_UNAVAILABLE: 503,
}

# Route-specific codes outside the core table
LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
TRIAL_NOT_ELIGIBLE = "TRIAL_NOT_ELIGIBLE"
CSRF_VALIDATION_FAILED = "CSRF_VALIDATION_FAILED"
MAINTENANCE_MODE = "MAINTENANCE_MODE"
DUPLICATE_REVIEW = "DUPLICATE_REVIEW"

DEFAULT_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_INPUT: "Invalid input",
    ErrorCode.MISSING_PARAMETER: "Missing required parameter",
    ErrorCode.RESOURCE_NOT_FOUND: "Resource not found",
    ErrorCode.UNAUTHORIZED: "Authentication required",
    ErrorCode.FORBIDDEN: "Access denied",
    ErrorCode.RATE_LIMIT_EXCEEDED: "Too many requests. Please try again later.",
    ErrorCode.CONFLICT: "Resource already exists",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred",
    ErrorCode.DATABASE_ERROR: "A database error occurred",
    ErrorCode.EXTERNAL_API_ERROR: "An upstream service failed",
    ErrorCode.SERVICE_UNAVAILABLE: "Service temporarily unavailable",
}


class ResponseMetadata(BaseModel):
    """Optional metadata attached to successful responses."""

    model_config = ConfigDict(populate_by_name=True)

    page: int | None = None
    page_size: int | None = Field(default=None, alias="pageSize")
    total: int | None = None
    processing_time: float | None = Field(default=None, alias="processingTime")
    api_version: str | None = Field(default=None, alias="apiVersion")
    source: str | None = None

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ApiError(Exception):
    """
    Raised by handlers to produce an error envelope.

    ``code`` is normally an ErrorCode; route-specific string codes such as
    LIMIT_EXCEEDED need an explicit ``status_code``.
    """

    def __init__(
        self,
        code: ErrorCode | str,
        message: str | None = None,
        details: Any = None,
        status_code: int | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.code = code
        self.message = message or DEFAULT_MESSAGES.get(code, "An error occurred")
        self.details = details
        self.status_code = status_code or get_status_code(code)
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return error_response(self.code, self.message, self.details, self.status_code)


def _code_value(code: ErrorCode | str) -> str:
    return code.value if isinstance(code, ErrorCode) else str(code)


def get_status_code(code: ErrorCode | str) -> int:
    """HTTP status for an error code; unknown codes are 500."""
    try:
        return ERROR_STATUS_CODES[ErrorCode(_code_value(code))]
    except ValueError:
        return 500


def success_response(data: Any, metadata: ResponseMetadata | dict | None = None) -> dict:
    body: dict[str, Any] = {"success": True, "data": data}
    if metadata is not None:
        body["metadata"] = (
            metadata.to_dict() if isinstance(metadata, ResponseMetadata) else metadata
        )
    return body


def error_response(
    code: ErrorCode | str,
    message: str,
    details: Any = None,
    status_code: int | None = None,
) -> dict:
    error: dict[str, Any] = {
        "code": _code_value(code),
        "message": message,
        "statusCode": status_code or get_status_code(code),
    }
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}


def error_response_from_error(error: Any) -> dict:
    """
    Wrap an arbitrary caught value as INTERNAL_ERROR.

    Outside production the exception message and stack are passed through.
    """
    is_production = get_settings().is_production

    if isinstance(error, ApiError):
        return error.to_dict()

    if isinstance(error, BaseException):
        if is_production:
            return error_response(ErrorCode.INTERNAL_ERROR, "An unexpected error occurred")
        return error_response(
            ErrorCode.INTERNAL_ERROR,
            str(error) or "An unexpected error occurred",
            {
                "name": type(error).__name__,
                "stack": "".join(
                    traceback.format_exception(type(error), error, error.__traceback__)
                ),
            },
        )

    if isinstance(error, str):
        return error_response(ErrorCode.INTERNAL_ERROR, error)

    return error_response(
        ErrorCode.INTERNAL_ERROR,
        "An unknown error occurred",
        None if is_production else {"error": repr(error)},
    )


def is_success_response(body: Any) -> bool:
    return isinstance(body, dict) and body.get("success") is True and "data" in body


def is_error_response(body: Any) -> bool:
    return (
        isinstance(body, dict)
        and body.get("success") is False
        and isinstance(body.get("error"), dict)
    )


def envelope(
    data: Any,
    metadata: ResponseMetadata | dict | None = None,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Success envelope as a JSONResponse."""
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(success_response(data, metadata)),
        headers=headers,
    )


def error_envelope(error: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=jsonable_encoder(error.to_dict()),
        headers=error.headers,
    )


__all__ = [
    "ErrorCode",
    "ERROR_STATUS_CODES",
    "LIMIT_EXCEEDED",
    "TRIAL_NOT_ELIGIBLE",
    "CSRF_VALIDATION_FAILED",
    "MAINTENANCE_MODE",
    "DUPLICATE_REVIEW",
    "ResponseMetadata",
    "ApiError",
    "get_status_code",
    "success_response",
    "error_response",
    "error_response_from_error",
    "is_success_response",
    "is_error_response",
    "envelope",
    "error_envelope",
]
