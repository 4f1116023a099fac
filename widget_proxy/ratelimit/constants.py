"""Defaults for the request rate limiter."""

# Requests admitted per client per window
DEFAULT_LIMIT = 100

# Window duration in seconds
DEFAULT_WINDOW_SECONDS = 60.0
