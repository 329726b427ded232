"""Custom error classes for Riot API client.

Callers branch on ``RiotAPIError.kind`` (or the subclass), never on the raw
status code.
"""

from enum import Enum
from typing import Optional, Dict, Any, Type


class APIErrorKind(str, Enum):
    """Classification of a failed Riot API call."""

    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    UNKNOWN = "unknown"
    INVALID_RESPONSE = "invalid_response"


class RiotAPIError(Exception):
    """Base exception for Riot API errors with status code tracking."""

    kind: APIErrorKind = APIErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        cause: Optional[BaseException] = None,
        response_data: Optional[Dict[str, Any]] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        """
        Initialize RiotAPIError.

        Args:
            message: Error message
            status_code: HTTP status code (400, 401, 403, 404, 429, 503, etc.)
            url: Request URL that failed
            cause: Underlying exception, if any
            response_data: Raw response data from API
            retry_after: Seconds to wait before retry (429 and 5xx errors)
        """
        super().__init__(message)
        self.message: str = message
        self.status_code: Optional[int] = status_code
        self.url: Optional[str] = url
        self.cause: Optional[BaseException] = cause
        self.response_data: Dict[str, Any] = response_data or {}
        self.retry_after: Optional[float] = retry_after

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.status_code == 429 and self.retry_after:
            return f"Rate Limit Error {self.status_code}: {self.message} (Retry after: {self.retry_after}s)"
        if self.status_code:
            return f"Riot API Error {self.status_code}: {self.message}"
        return f"Riot API Error: {self.message}"


class NotFoundError(RiotAPIError):
    """Not found error (404) - resource doesn't exist."""

    kind = APIErrorKind.NOT_FOUND


class AuthenticationError(RiotAPIError):
    """Authentication error (401) - invalid or expired API key."""

    kind = APIErrorKind.UNAUTHORIZED


class ForbiddenError(RiotAPIError):
    """Forbidden error (403) - insufficient permissions."""

    kind = APIErrorKind.FORBIDDEN


class RateLimitError(RiotAPIError):
    """Rate limit error (429) - can be retried after cooldown."""

    kind = APIErrorKind.RATE_LIMITED


class ServerError(RiotAPIError):
    """Server error (5xx) - Riot servers failing or down."""

    kind = APIErrorKind.SERVER_ERROR


class ClientError(RiotAPIError):
    """Any other 4xx - invalid parameters or unsupported request."""

    kind = APIErrorKind.CLIENT_ERROR


class UnknownAPIError(RiotAPIError):
    """Non-HTTP failure: timeout, connection reset, DNS."""

    kind = APIErrorKind.UNKNOWN


class InvalidResponseError(RiotAPIError):
    """Response body is not JSON or misses required fields. Never retried."""

    kind = APIErrorKind.INVALID_RESPONSE


_STATUS_ERRORS: Dict[int, Type[RiotAPIError]] = {
    401: AuthenticationError,
    403: ForbiddenError,
    404: NotFoundError,
    429: RateLimitError,
}


def error_class_for_status(status: int) -> Type[RiotAPIError]:
    """Map an HTTP status code to its error class."""
    if status in _STATUS_ERRORS:
        return _STATUS_ERRORS[status]
    if status >= 500:
        return ServerError
    if status >= 400:
        return ClientError
    return UnknownAPIError


def is_retryable_status(status: int) -> bool:
    """429 and 5xx are transient; every other status is terminal."""
    return status == 429 or status >= 500
