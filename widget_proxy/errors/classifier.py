"""Mapping of pipeline failures to caller-facing errors.

Works only on FetchFailure variants, validation results and rate-limit
decisions, never on HTTP client exceptions. Extend by adding cases to the
mapping functions, not by inspecting transport errors here.
"""

from enum import Enum
from http import HTTPStatus

from widget_proxy.errors.models import ErrorCategory, ProxyError
from widget_proxy.fetch.constants import (
    HTTP_STATUS_FORBIDDEN,
    HTTP_STATUS_NOT_FOUND,
    HTTP_STATUS_SERVER_ERROR_MIN,
)
from widget_proxy.fetch.models import FetchFailure, FetchFailureKind
from widget_proxy.ratelimit import RateLimitDecision
from widget_proxy.validation import ValidationCategory, ValidationResult


MSG_METHOD_NOT_ALLOWED = "Method not allowed"
MSG_URL_REQUIRED = "URL parameter is required"
MSG_RATE_LIMITED = "Too many requests. Please try again later."
MSG_PROBE_TIMEOUT = (
    "Website is taking too long to respond. It may be slow or have restrictions."
)
MSG_PROBE_REFUSED = "Website refused the connection."
MSG_PROBE_UNREACHABLE = "Unable to reach the specified website"
MSG_TIMEOUT = "Request timed out. The website may be slow or unavailable."
MSG_NOT_FOUND = "Website not found"
MSG_FORBIDDEN = "Access forbidden by the target website"
MSG_SERVER_ERROR = "Target website server error"
MSG_UNREACHABLE = "Unable to reach the website. Please check the URL."
MSG_TOO_LARGE = "Target website response is too large"
MSG_REDIRECT_BLOCKED = "Redirect target is not allowed"
MSG_INTERNAL = "An unexpected error occurred while processing your request"

SUGGEST_PROBE_TIMEOUT = "Try a different website or check if the URL is correct."
SUGGEST_PROBE_REFUSED = "The website may be down or blocking automated requests."
SUGGEST_PROBE_UNREACHABLE = "Please verify the URL is correct and accessible."


class FetchMode(str, Enum):
    """Which outbound operation failed."""

    PROBE = "probe"
    FULL = "full"


def method_not_allowed() -> ProxyError:
    """Error for any method other than GET."""
    return ProxyError(
        ErrorCategory.INVALID_INPUT,
        HTTPStatus.METHOD_NOT_ALLOWED,
        MSG_METHOD_NOT_ALLOWED,
    )


def missing_url() -> ProxyError:
    """Error for a request without a ``url`` parameter."""
    return ProxyError(
        ErrorCategory.INVALID_INPUT, HTTPStatus.BAD_REQUEST, MSG_URL_REQUIRED
    )


def validation_error(result: ValidationResult) -> ProxyError:
    """Map a rejected URL to a 400 or 403 error.

    Args:
        result: Failed validation result.

    Returns:
        ProxyError carrying the validator's message.
    """
    message = result.error or MSG_URL_REQUIRED
    if result.category == ValidationCategory.SECURITY_BLOCKED:
        return ProxyError(ErrorCategory.SECURITY_BLOCKED, HTTPStatus.FORBIDDEN, message)
    return ProxyError(ErrorCategory.INVALID_INPUT, HTTPStatus.BAD_REQUEST, message)


def rate_limited(decision: RateLimitDecision) -> ProxyError:
    """Map a rejected admission to a 429 error with a retry hint."""
    return ProxyError(
        ErrorCategory.RATE_LIMITED,
        HTTPStatus.TOO_MANY_REQUESTS,
        MSG_RATE_LIMITED,
        retry_after=decision.retry_after_seconds,
    )


def internal_error(exc: BaseException, expose_details: bool) -> ProxyError:
    """Map an unexpected exception to a 500 error.

    Args:
        exc: The exception that escaped the pipeline.
        expose_details: Whether to include the exception message.

    Returns:
        ProxyError for the caller.
    """
    return ProxyError(
        ErrorCategory.INTERNAL,
        HTTPStatus.INTERNAL_SERVER_ERROR,
        MSG_INTERNAL,
        details=str(exc) if expose_details else None,
    )


def classify_fetch_failure(
    failure: FetchFailure,
    mode: FetchMode,
    expose_details: bool = False,
) -> ProxyError:
    """Map a fetch failure to a caller-facing error.

    Args:
        failure: Failure reported by the fetch layer.
        mode: Whether the failure came from a probe or a full fetch.
        expose_details: Whether internal messages may reach the caller.

    Returns:
        ProxyError with status and body fields set.
    """
    if failure.kind == FetchFailureKind.REDIRECT_BLOCKED:
        return ProxyError(
            ErrorCategory.SECURITY_BLOCKED, HTTPStatus.FORBIDDEN, MSG_REDIRECT_BLOCKED
        )
    if mode == FetchMode.PROBE:
        return _classify_probe_failure(failure)
    return _classify_full_failure(failure, expose_details)


def _classify_probe_failure(failure: FetchFailure) -> ProxyError:
    """Probe failures carry details and a suggestion for the caller."""
    if failure.kind == FetchFailureKind.TIMEOUT:
        return ProxyError(
            ErrorCategory.UPSTREAM_TIMEOUT,
            HTTPStatus.REQUEST_TIMEOUT,
            MSG_PROBE_TIMEOUT,
            details="Connection timeout",
            suggestion=SUGGEST_PROBE_TIMEOUT,
        )

    if failure.kind == FetchFailureKind.CONNECTION_REFUSED:
        return ProxyError(
            ErrorCategory.UPSTREAM_UNREACHABLE,
            HTTPStatus.SERVICE_UNAVAILABLE,
            MSG_PROBE_REFUSED,
            details="Connection refused",
            suggestion=SUGGEST_PROBE_REFUSED,
        )

    return ProxyError(
        ErrorCategory.UPSTREAM_UNREACHABLE,
        HTTPStatus.BAD_REQUEST,
        MSG_PROBE_UNREACHABLE,
        details=failure.message,
        suggestion=SUGGEST_PROBE_UNREACHABLE,
        code=failure.code or failure.kind.value,
    )


def _classify_full_failure(failure: FetchFailure, expose_details: bool) -> ProxyError:
    """Full-fetch failures map to the upstream status taxonomy."""
    if failure.kind == FetchFailureKind.TIMEOUT:
        return ProxyError(
            ErrorCategory.UPSTREAM_TIMEOUT, HTTPStatus.REQUEST_TIMEOUT, MSG_TIMEOUT
        )

    if failure.kind == FetchFailureKind.HTTP_STATUS:
        return _classify_upstream_status(failure.status_code)

    if failure.kind in {
        FetchFailureKind.CONNECTION_REFUSED,
        FetchFailureKind.NO_RESPONSE,
        FetchFailureKind.TOO_MANY_REDIRECTS,
    }:
        return ProxyError(
            ErrorCategory.UPSTREAM_UNREACHABLE, HTTPStatus.BAD_GATEWAY, MSG_UNREACHABLE
        )

    if failure.kind == FetchFailureKind.RESPONSE_TOO_LARGE:
        return ProxyError(
            ErrorCategory.UPSTREAM_UNREACHABLE, HTTPStatus.BAD_GATEWAY, MSG_TOO_LARGE
        )

    return ProxyError(
        ErrorCategory.INTERNAL,
        HTTPStatus.INTERNAL_SERVER_ERROR,
        MSG_INTERNAL,
        details=failure.message if expose_details else None,
    )


def _classify_upstream_status(status_code: int | None) -> ProxyError:
    """Map an upstream status band to a proxy error."""
    if status_code == HTTP_STATUS_NOT_FOUND:
        return ProxyError(
            ErrorCategory.UPSTREAM_STATUS, HTTPStatus.NOT_FOUND, MSG_NOT_FOUND
        )
    if status_code == HTTP_STATUS_FORBIDDEN:
        return ProxyError(
            ErrorCategory.UPSTREAM_STATUS, HTTPStatus.FORBIDDEN, MSG_FORBIDDEN
        )
    if status_code is not None and status_code >= HTTP_STATUS_SERVER_ERROR_MIN:
        return ProxyError(
            ErrorCategory.UPSTREAM_STATUS, HTTPStatus.BAD_GATEWAY, MSG_SERVER_ERROR
        )
    return ProxyError(
        ErrorCategory.UPSTREAM_UNREACHABLE, HTTPStatus.BAD_GATEWAY, MSG_UNREACHABLE
    )
