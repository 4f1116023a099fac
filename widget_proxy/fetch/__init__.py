"""Outbound fetch layer for proxied pages.

This module provides the network side of the proxy:
- A full GET with hard deadline, capped and re-validated redirects
- A HEAD reachability probe
- Body size enforcement
- Transport errors mapped to a library-independent failure variant
- Metrics collection for observability
"""

from widget_proxy.fetch.client import PageFetcher
from widget_proxy.fetch.config import FetchConfig
from widget_proxy.fetch.constants import (
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
)
from widget_proxy.fetch.metrics import FetchMetrics
from widget_proxy.fetch.models import (
    FetchFailure,
    FetchFailureKind,
    FetchResult,
    RedirectBlockedError,
    ResponseSizeExceededError,
)
from widget_proxy.fetch.redact import redact_headers, redact_url_credentials


__all__ = [
    # Client
    "PageFetcher",
    # Config
    "FetchConfig",
    # Models
    "FetchResult",
    "FetchFailure",
    "FetchFailureKind",
    "RedirectBlockedError",
    "ResponseSizeExceededError",
    # Constants
    "DEFAULT_FETCH_TIMEOUT_SECONDS",
    "DEFAULT_PROBE_TIMEOUT_SECONDS",
    "DEFAULT_MAX_REDIRECTS",
    "DEFAULT_MAX_RESPONSE_SIZE_BYTES",
    # Metrics
    "FetchMetrics",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
]
