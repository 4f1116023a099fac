"""HTTP constants for the fetch layer.

Centralizes all HTTP-related constants to avoid duplication across modules.
"""

# Upstream statuses below this count as "reached"; at or above it the fetch fails
HTTP_STATUS_SERVER_ERROR_MIN = 500
HTTP_STATUS_FORBIDDEN = 403
HTTP_STATUS_NOT_FOUND = 404

# Timeouts (seconds)
DEFAULT_PROBE_TIMEOUT_SECONDS = 8.0
DEFAULT_FETCH_TIMEOUT_SECONDS = 30.0

DEFAULT_MAX_REDIRECTS = 5

# Response Size Limits
DEFAULT_MAX_RESPONSE_SIZE_BYTES = 50 * 1024 * 1024  # 50 MB

# Chunk size for streaming reads
DEFAULT_CHUNK_SIZE = 8192

DEFAULT_CONTENT_TYPE = "text/html"

# Browser-like headers reduce upstream bot-blocking
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

FETCH_HEADERS: dict[str, str] = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Upgrade-Insecure-Requests": "1",
}

PROBE_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}
