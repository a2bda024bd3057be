"""Exception hierarchy for the OpenKM MCP server.

Every failure raised by the repository client, the page extractor or the tool
dispatcher derives from ``OpenKMMCPError`` so the dispatcher boundary can turn
it into a tool-level error response with a readable message.
"""

from __future__ import annotations

from typing import Any


class OpenKMMCPError(Exception):
    """Base class for all OpenKM MCP errors."""

    default_error_code = "UNKNOWN_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.user_message = user_message or message

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to a serializable dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
        }


class ValidationError(OpenKMMCPError):
    """Tool arguments failed their schema constraints."""

    default_error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field_errors: list[dict[str, Any]] | None = None, **kwargs):
        self.field_errors = field_errors or []
        details = kwargs.pop("details", None) or {}
        if self.field_errors:
            details.setdefault("field_errors", self.field_errors)
        super().__init__(message, details=details, **kwargs)


class TransportError(OpenKMMCPError):
    """A repository call failed.

    ``status_code`` is the HTTP status of a non-2xx response, or ``None`` when
    no response was received at all (connection refused, timeout).
    """

    default_error_code = "TRANSPORT_ERROR"

    def __init__(self, status_code: int | None, reason: str, url: str | None = None, **kwargs):
        self.status_code = status_code
        self.reason = reason
        self.url = url
        message = f"{status_code} {reason}" if status_code is not None else reason
        details = {"status_code": status_code, "reason": reason, "url": url}
        super().__init__(message, details=details, **kwargs)

    @property
    def has_response(self) -> bool:
        """Check if the repository answered with an HTTP status."""
        return self.status_code is not None


class ExtractionError(OpenKMMCPError):
    """A document could not be parsed as a paginated format."""

    default_error_code = "EXTRACTION_ERROR"


class UnknownToolError(OpenKMMCPError):
    """Dispatch was requested for a tool name that is not registered."""

    default_error_code = "UNKNOWN_TOOL"

    def __init__(self, tool_name: str, available: list[str] | None = None):
        self.tool_name = tool_name
        self.available = available or []
        super().__init__(
            f"Unknown tool: {tool_name}",
            details={"tool_name": tool_name, "available_tools": self.available},
        )


class LookupFallbackExhausted(OpenKMMCPError):
    """Both the UUID-style and the path-style lookup of a node failed."""

    default_error_code = "LOOKUP_FALLBACK_EXHAUSTED"

    def __init__(self, reference: str, uuid_error: Exception, path_error: Exception):
        self.reference = reference
        self.uuid_error = uuid_error
        self.path_error = path_error
        super().__init__(
            f"Could not resolve '{reference}' by UUID ({uuid_error}) or by path ({path_error})",
            details={"reference": reference, "uuid_error": str(uuid_error), "path_error": str(path_error)},
        )
