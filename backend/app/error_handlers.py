"""
Exception handlers that render every failure as an error envelope.

Request IDs are logged server-side for tracing but not echoed in the body.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_context_value, get_logger

from .api.response import (
    ApiError,
    ErrorCode,
    error_envelope,
    error_response,
    error_response_from_error,
)
from .schemas import get_validation_error_message, validation_issues

logger = get_logger("backend.errors")

HTTP_STATUS_CODES = {
    400: ErrorCode.INVALID_INPUT,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.RESOURCE_NOT_FOUND,
    409: ErrorCode.CONFLICT,
    429: ErrorCode.RATE_LIMIT_EXCEEDED,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


def _get_request_id() -> str:
    return get_context_value("request_id", "-")


def code_for_status(status_code: int) -> ErrorCode:
    return HTTP_STATUS_CODES.get(status_code, ErrorCode.INTERNAL_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "api_error",
            code=exc.to_dict()["error"]["code"],
            status_code=exc.status_code,
            path=request.url.path,
            request_id=_get_request_id(),
        )
        return error_envelope(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(
            "http_exception",
            detail=exc.detail,
            status_code=exc.status_code,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(
                code_for_status(exc.status_code), str(exc.detail), status_code=exc.status_code
            ),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "validation_error",
            errors=len(exc.errors()),
            path=request.url.path,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=400,
            content=error_response(
                ErrorCode.INVALID_INPUT,
                get_validation_error_message(exc),
                {"issues": validation_issues(exc)},
            ),
        )

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: ValidationError):
        logger.warning(
            "validation_error",
            errors=exc.error_count(),
            path=request.url.path,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=400,
            content=error_response(
                ErrorCode.INVALID_INPUT,
                get_validation_error_message(exc),
                {"issues": validation_issues(exc)},
            ),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            "database_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            request_id=_get_request_id(),
        )
        return JSONResponse(
            status_code=500,
            content=error_response(ErrorCode.DATABASE_ERROR, "A database error occurred"),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=_get_request_id(),
        )
        return JSONResponse(status_code=500, content=error_response_from_error(exc))
