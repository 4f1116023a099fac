"""Constants for the proxy pipeline."""

PROXY_PATH = "/api/proxy"

DEFAULT_CLIENT_ID = "unknown"
DEFAULT_PUBLIC_ORIGIN = "http://localhost:3000"

JSON_CONTENT_TYPE = "application/json"
HTML_CONTENT_TYPE_MARKER = "text/html"

PROXIED_URL_HEADER = "X-Proxied-URL"

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

# Characters kept verbatim when a URL is placed in a response header
HEADER_URL_SAFE_CHARS = ":/?#[]@!$&'()*+,;=%~"
