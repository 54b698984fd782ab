"""
Custom exceptions for the Vapi call gateway.

This module defines a hierarchical exception system with:
- Machine-readable error codes for API responses
- The HTTP status each failure kind surfaces as at the REST boundary
- Structured error data for logging and debugging

Design pattern: Base exception → Specific exceptions
- VapiError: Base for every gateway failure
- ConfigurationError / ValidationError: local failures, raised before any I/O
- Upstream*Error: failures talking to the Vapi API
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standardized error codes for API responses.

    Naming convention: <DOMAIN>_<NUMBER>
    - REQ_xxx: Malformed caller input
    - API_xxx: Upstream API errors
    - VAPI_xxx: Gateway configuration and webhook errors
    - DB_xxx: Property datastore errors
    """

    # Request errors
    INVALID_REQUEST = "REQ_001"

    # Upstream API errors
    EXTERNAL_API_ERROR = "API_001"
    INVALID_RESPONSE = "API_004"
    CONNECTION_ERROR = "API_005"
    INCOMPLETE_RESPONSE = "API_006"

    # Vapi gateway errors
    ASSISTANT_NOT_CONFIGURED = "VAPI_003"
    INVALID_WEBHOOK = "VAPI_004"

    # Datastore errors
    DATABASE_UNAVAILABLE = "DB_001"
    DATABASE_QUERY_FAILED = "DB_002"


class VapiError(Exception):
    """
    Base exception for all gateway errors.

    Attributes:
        message: Human-readable error description
        status_code: HTTP status the REST boundary responds with
        error_code: Machine-readable error identifier
        details: Additional context (upstream status, response excerpt, ...)
    """

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.EXTERNAL_API_ERROR

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: ErrorCode | None = None,
        details: Any = None
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details
        super().__init__(self.message)

    @property
    def public_message(self) -> str:
        """Message safe to return to REST callers."""
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API responses.

        Returns:
            dict: `{success, error, code}` body used by every error response
        """
        body = {
            "success": False,
            "error": self.public_message,
            "code": self.error_code.value,
        }
        # Lists of field errors are meant for the caller
        if isinstance(self.details, list):
            body["details"] = self.details
        return body

    def __str__(self) -> str:
        return self.message


class ConfigurationError(VapiError):
    """
    Raised when credentials are missing or still placeholders.

    Fails fast, before any request is built.

    HTTP Status: 503 Service Unavailable
    """

    status_code = 503
    error_code = ErrorCode.ASSISTANT_NOT_CONFIGURED


class ValidationError(VapiError):
    """
    Raised for malformed caller input: bad phone number, missing call ID.

    HTTP Status: 400 Bad Request
    """

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class MalformedWebhookError(ValidationError):
    """Webhook payload without `type` or `data`."""

    error_code = ErrorCode.INVALID_WEBHOOK

    def __init__(self, message: str = "Invalid webhook payload", details: Any = None):
        super().__init__(message, details=details)


class UpstreamHTTPError(VapiError):
    """
    Raised when Vapi answers with a non-2xx status.

    The provider's message is forwarded to the caller.

    HTTP Status: 500 Internal Server Error
    """

    def __init__(self, upstream_status: int, upstream_message: str):
        self.upstream_status = upstream_status
        self.upstream_message = upstream_message
        super().__init__(
            f"API Error: {upstream_status} - {upstream_message}",
            details={"upstream_status": upstream_status},
        )


class UpstreamTransportError(VapiError):
    """
    Raised when Vapi could not be reached (connection refused, DNS, TLS, timeout).

    The detailed reason is logged; callers get a generic message.

    HTTP Status: 500 Internal Server Error
    """

    error_code = ErrorCode.CONNECTION_ERROR

    @property
    def public_message(self) -> str:
        return "Failed to communicate with the Vapi API"


class UpstreamParseError(UpstreamTransportError):
    """Raised when a 2xx response body is not valid JSON."""

    error_code = ErrorCode.INVALID_RESPONSE


class InvalidUpstreamResponseError(VapiError):
    """
    Raised when a 2xx response lacks fields the caller depends on.

    Only the web-call path validates response shape.
    """

    error_code = ErrorCode.INCOMPLETE_RESPONSE


class DatastoreUnavailableError(VapiError):
    """
    Raised when the property datastore is not configured.

    HTTP Status: 503 Service Unavailable
    """

    status_code = 503
    error_code = ErrorCode.DATABASE_UNAVAILABLE

    def __init__(self, message: str = "Database service unavailable"):
        super().__init__(message)


class DatastoreQueryError(VapiError):
    """Raised when a property query fails inside the datastore."""

    error_code = ErrorCode.DATABASE_QUERY_FAILED

    def __init__(self, message: str = "Search failed", details: Any = None):
        super().__init__(message, details=details)
