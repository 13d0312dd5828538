import pytest

from backend.app.api.response import (
    LIMIT_EXCEEDED,
    ApiError,
    ErrorCode,
    ResponseMetadata,
    error_response,
    error_response_from_error,
    get_status_code,
    is_error_response,
    is_success_response,
    success_response,
)
from core.config import get_settings


def test_success_response_with_metadata_model():
    body = success_response([1, 2], ResponseMetadata(page=1, page_size=10, total=2))
    assert body == {
        "success": True,
        "data": [1, 2],
        "metadata": {"page": 1, "pageSize": 10, "total": 2},
    }
    assert is_success_response(body)


def test_success_response_without_metadata():
    assert success_response({"a": 1}) == {"success": True, "data": {"a": 1}}


def test_error_response_shape():
    body = error_response(ErrorCode.RESOURCE_NOT_FOUND, "Favorite not found")
    assert body == {
        "success": False,
        "error": {
            "code": "RESOURCE_NOT_FOUND",
            "message": "Favorite not found",
            "statusCode": 404,
        },
    }
    assert is_error_response(body)
    assert not is_success_response(body)


def test_error_response_includes_details_only_when_given():
    body = error_response(ErrorCode.INVALID_INPUT, "bad", {"field": "query"})
    assert body["error"]["details"] == {"field": "query"}


def test_status_codes():
    assert get_status_code(ErrorCode.MISSING_PARAMETER) == 400
    assert get_status_code(ErrorCode.RATE_LIMIT_EXCEEDED) == 429
    assert get_status_code(ErrorCode.EXTERNAL_API_ERROR) == 502
    assert get_status_code("SOMETHING_ELSE") == 500


def test_api_error_defaults_message_and_status():
    error = ApiError(ErrorCode.CONFLICT)
    assert error.status_code == 409
    assert error.message == "Resource already exists"


def test_api_error_with_route_specific_code():
    error = ApiError(LIMIT_EXCEEDED, "You have reached your daily searches limit", status_code=429)
    body = error.to_dict()
    assert body["error"]["code"] == "LIMIT_EXCEEDED"
    assert body["error"]["statusCode"] == 429


def test_error_from_exception_outside_production():
    body = error_response_from_error(RuntimeError("boom"))
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert body["error"]["message"] == "boom"
    assert body["error"]["details"]["name"] == "RuntimeError"
    assert "RuntimeError" in body["error"]["details"]["stack"]


def test_error_from_string_and_unknown_values():
    assert error_response_from_error("went wrong")["error"]["message"] == "went wrong"
    assert (
        error_response_from_error(42)["error"]["message"] == "An unknown error occurred"
    )


def test_error_from_api_error_keeps_code():
    body = error_response_from_error(ApiError(ErrorCode.FORBIDDEN, "nope"))
    assert body["error"]["code"] == "FORBIDDEN"
    assert body["error"]["statusCode"] == 403


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setattr(get_settings(), "env", "production")


def test_error_from_exception_in_production_hides_details(production):
    body = error_response_from_error(RuntimeError("postgres://admin:secret@db/remedi"))
    assert body == {
        "success": False,
        "error": {
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "statusCode": 500,
        },
    }


def test_unknown_value_in_production_has_no_details(production):
    body = error_response_from_error(42)
    assert body["error"]["message"] == "An unknown error occurred"
    assert "details" not in body["error"]
