"""Error taxonomy for the Ratchet MCP server.

Every failure the service layer raises is a ``RatchetError`` tagged with an
``ErrorKind``. The kind carries the stable error code and an HTTP-style status
for reference. Messages are written so they never contain patient identifiers.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from mcp.types import TextContent


class ErrorKind(Enum):
    """Failure categories with their stable code and HTTP-style status."""

    CONFIGURATION = ("CONFIG_ERROR", 500)
    AUTHENTICATION = ("AUTH_ERROR", 401)
    NOT_FOUND = ("NOT_FOUND", 404)
    VALIDATION = ("VALIDATION_ERROR", 400)
    API = ("API_ERROR", 502)
    RATE_LIMIT = ("RATE_LIMIT", 429)
    MOCK_MODE = ("MOCK_MODE", 200)

    def __init__(self, code: str, status_code: int):
        self.code = code
        self.status_code = status_code


class RatchetError(Exception):
    """Base failure type exposing ``code`` and ``message``."""

    kind: ErrorKind = ErrorKind.API

    def __init__(
        self,
        message: str,
        kind: ErrorKind | None = None,
        *,
        field: str | None = None,
        **payload: Any,
    ):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind
        self.field = field
        self.payload = payload

    @property
    def code(self) -> str:
        return self.kind.code

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dict."""
        data: dict[str, Any] = {
            "error": type(self).__name__,
            "code": self.code,
            "message": self.message,
        }
        if self.field is not None:
            data["field"] = self.field
        data.update(self.payload)
        return data


class ConfigurationError(RatchetError):
    """Missing or invalid configuration."""

    kind = ErrorKind.CONFIGURATION


class AuthenticationError(RatchetError):
    """API authentication failed."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class NotFoundError(RatchetError):
    """A resource does not exist.

    Only the resource *type* is named; the identifier is left out so it
    cannot leak into logs or tool output.
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found", resource=resource)


class ValidationError(RatchetError):
    """Bad or missing input field."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, field=field)


class ApiError(RatchetError):
    """Error returned by the upstream PointCare API."""

    kind = ErrorKind.API

    def __init__(self, message: str, api_status_code: int | None = None):
        super().__init__(message, api_status_code=api_status_code)
        self.api_status_code = api_status_code


class RateLimitError(RatchetError):
    kind = ErrorKind.RATE_LIMIT

    def __init__(self, retry_after: int | None = None):
        super().__init__("Rate limit exceeded", retry_after=retry_after)
        self.retry_after = retry_after


class MockModeNotice(RatchetError):
    """Not a failure: marks a response that was served from mock data."""

    kind = ErrorKind.MOCK_MODE

    def __init__(self):
        super().__init__("Running in mock mode - no real API calls made")


def format_error_for_mcp(error: BaseException | None) -> TextContent:
    """Render any exception as a single MCP text block.

    Ratchet errors are matched by kind so the code shown to the agent is
    stable regardless of which subclass raised it.
    """
    if isinstance(error, RatchetError):
        text = f"Error [{error.code}]: {error.message}"
        if error.kind is ErrorKind.VALIDATION and error.field:
            text += f" (field: {error.field})"
        elif error.kind is ErrorKind.RATE_LIMIT and error.payload.get("retry_after"):
            text += f" (retry after {error.payload['retry_after']}s)"
    elif error is not None and str(error):
        text = f"Error: {error}"
    else:
        text = "An unknown error occurred"
    return TextContent(type="text", text=text)
