"""Tests for the error taxonomy and MCP error rendering."""

import pytest

from ratchet.errors import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    ErrorKind,
    MockModeNotice,
    NotFoundError,
    RateLimitError,
    RatchetError,
    ValidationError,
    format_error_for_mcp,
)


@pytest.mark.parametrize(
    "error,code,status",
    [
        (ConfigurationError("missing key"), "CONFIG_ERROR", 500),
        (AuthenticationError(), "AUTH_ERROR", 401),
        (NotFoundError("Patient"), "NOT_FOUND", 404),
        (ValidationError("bad", "query"), "VALIDATION_ERROR", 400),
        (ApiError("upstream", 503), "API_ERROR", 502),
        (RateLimitError(30), "RATE_LIMIT", 429),
        (MockModeNotice(), "MOCK_MODE", 200),
    ],
)
def test_codes_and_statuses(error: RatchetError, code: str, status: int) -> None:
    assert error.code == code
    assert error.status_code == status
    assert isinstance(error, RatchetError)


def test_not_found_names_resource_only() -> None:
    error = NotFoundError("Patient")

    assert error.message == "Patient not found"
    assert error.to_dict() == {
        "error": "NotFoundError",
        "code": "NOT_FOUND",
        "message": "Patient not found",
        "resource": "Patient",
    }


def test_authentication_default_message() -> None:
    assert AuthenticationError().message == "Authentication failed"


def test_api_error_keeps_upstream_status() -> None:
    error = ApiError("Service unavailable", 503)

    assert error.api_status_code == 503
    assert error.status_code == 502
    assert error.to_dict()["api_status_code"] == 503


def test_explicit_kind_overrides_class_default() -> None:
    error = RatchetError("slow down", ErrorKind.RATE_LIMIT)

    assert error.code == "RATE_LIMIT"


class TestFormatErrorForMcp:
    def test_validation_with_field(self) -> None:
        content = format_error_for_mcp(ValidationError("Search query is required", "query"))

        assert content.type == "text"
        assert content.text == "Error [VALIDATION_ERROR]: Search query is required (field: query)"

    def test_validation_without_field(self) -> None:
        content = format_error_for_mcp(ValidationError("Bad input"))

        assert content.text == "Error [VALIDATION_ERROR]: Bad input"

    def test_not_found(self) -> None:
        assert format_error_for_mcp(NotFoundError("Patient")).text == (
            "Error [NOT_FOUND]: Patient not found"
        )

    def test_rate_limit_with_retry(self) -> None:
        assert format_error_for_mcp(RateLimitError(30)).text == (
            "Error [RATE_LIMIT]: Rate limit exceeded (retry after 30s)"
        )

    def test_rate_limit_without_retry(self) -> None:
        assert format_error_for_mcp(RateLimitError()).text == (
            "Error [RATE_LIMIT]: Rate limit exceeded"
        )

    def test_plain_exception(self) -> None:
        assert format_error_for_mcp(RuntimeError("boom")).text == "Error: boom"

    def test_unknown(self) -> None:
        assert format_error_for_mcp(None).text == "An unknown error occurred"
        assert format_error_for_mcp(RuntimeError()).text == "An unknown error occurred"
