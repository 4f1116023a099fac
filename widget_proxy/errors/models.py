"""Error types for the proxy request pipeline."""

from enum import Enum
from http import HTTPStatus


class ErrorCategory(str, Enum):
    """Caller-facing classification of proxy errors.

    - INVALID_INPUT: Missing/malformed/oversized URL or wrong method (400/405)
    - SECURITY_BLOCKED: Disallowed target (403)
    - RATE_LIMITED: Too many requests from the client (429)
    - UPSTREAM_TIMEOUT: Target did not answer in time (408)
    - UPSTREAM_UNREACHABLE: Connection refused or no response (502/503)
    - UPSTREAM_STATUS: Target answered 404, 403 or 5xx
    - INTERNAL: Unexpected failure inside the proxy (500)
    """

    INVALID_INPUT = "InvalidInput"
    SECURITY_BLOCKED = "SecurityBlocked"
    RATE_LIMITED = "RateLimited"
    UPSTREAM_TIMEOUT = "UpstreamTimeout"
    UPSTREAM_UNREACHABLE = "UpstreamUnreachable"
    UPSTREAM_STATUS = "UpstreamClientOrServerStatus"
    INTERNAL = "Internal"


class ProxyError(Exception):
    """Base exception for proxy errors.

    Carries everything needed to render the structured JSON error body,
    so a handler can convert it to a response in one place.
    """

    def __init__(
        self,
        category: ErrorCategory,
        status_code: HTTPStatus,
        message: str,
        details: str | None = None,
        suggestion: str | None = None,
        retry_after: int | None = None,
        code: str | None = None,
    ) -> None:
        """Initialize the proxy error.

        Args:
            category: Classification of the error.
            status_code: HTTP status returned to the caller.
            message: Human-readable error message.
            details: Additional detail, omitted from the body when None.
            suggestion: Next step for the caller.
            retry_after: Seconds the caller should wait before retrying.
            code: Short transport error code.
        """
        super().__init__(message)
        self.category = category
        self.status_code = status_code
        self.message = message
        self.details = details
        self.suggestion = suggestion
        self.retry_after = retry_after
        self.code = code

    @property
    def headers(self) -> dict[str, str]:
        """Extra response headers for this error."""
        if self.retry_after is not None:
            return {"Retry-After": str(self.retry_after)}
        return {}

    def to_dict(self) -> dict[str, str | int]:
        """Convert error to the JSON response body.

        Returns:
            Dictionary with ``error`` and whichever optional fields are set.
        """
        body: dict[str, str | int] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        if self.suggestion is not None:
            body["suggestion"] = self.suggestion
        if self.retry_after is not None:
            body["retryAfter"] = self.retry_after
        if self.code is not None:
            body["code"] = self.code
        return body
