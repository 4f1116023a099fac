"""Proxy request pipeline.

Ties validation, rate limiting, fetching and HTML rewriting together
behind a single ``ProxyService.handle`` call.
"""

from widget_proxy.proxy.constants import CORS_HEADERS, PROXIED_URL_HEADER, PROXY_PATH
from widget_proxy.proxy.metrics import ProxyMetrics
from widget_proxy.proxy.models import ProxyRequest, ProxyResponse
from widget_proxy.proxy.service import FetcherProtocol, ProxyService


__all__ = [
    # Service
    "ProxyService",
    "FetcherProtocol",
    # Models
    "ProxyRequest",
    "ProxyResponse",
    # Metrics
    "ProxyMetrics",
    # Constants
    "CORS_HEADERS",
    "PROXIED_URL_HEADER",
    "PROXY_PATH",
]
