"""Error taxonomy and failure classification for the proxy."""

from widget_proxy.errors.classifier import (
    FetchMode,
    classify_fetch_failure,
    internal_error,
    method_not_allowed,
    missing_url,
    rate_limited,
    validation_error,
)
from widget_proxy.errors.models import ErrorCategory, ProxyError


__all__ = [
    "ErrorCategory",
    "ProxyError",
    "FetchMode",
    "classify_fetch_failure",
    "internal_error",
    "method_not_allowed",
    "missing_url",
    "rate_limited",
    "validation_error",
]
