"""Per-client request rate limiting."""

from widget_proxy.ratelimit.constants import DEFAULT_LIMIT, DEFAULT_WINDOW_SECONDS
from widget_proxy.ratelimit.limiter import (
    FixedWindowRateLimiter,
    RateLimitDecision,
    RateLimitEntry,
    RateLimiterProtocol,
)


__all__ = [
    "FixedWindowRateLimiter",
    "RateLimitDecision",
    "RateLimitEntry",
    "RateLimiterProtocol",
    "DEFAULT_LIMIT",
    "DEFAULT_WINDOW_SECONDS",
]
