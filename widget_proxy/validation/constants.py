"""Constants for URL validation."""

import re
from typing import Final


MAX_URL_LENGTH: Final[int] = 2048

ALLOWED_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})
DEFAULT_SCHEME_PREFIX: Final[str] = "https://"

# Exact hostname matches, compared after lower-casing
LOCAL_HOSTNAMES: Final[frozenset[str]] = frozenset(
    {
        "localhost",
        "127.0.0.1",
        "0.0.0.0",  # noqa: S104
        "::1",
        "[::1]",
    }
)

PRIVATE_IPV4_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"^10\."),  # 10.0.0.0/8
    re.compile(r"^172\.(1[6-9]|2[0-9]|3[0-1])\."),  # 172.16.0.0/12
    re.compile(r"^192\.168\."),  # 192.168.0.0/16
    re.compile(r"^169\.254\."),  # link-local
)

# Matched against the hostname with any IPv6 brackets removed
PRIVATE_IPV6_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"^fc00:", re.IGNORECASE),  # unique local
    re.compile(r"^fd[0-9a-f]{2}:", re.IGNORECASE),
    re.compile(r"^fe80:", re.IGNORECASE),  # link-local
    re.compile(r"^::1$", re.IGNORECASE),  # loopback
    re.compile(r"^::", re.IGNORECASE),  # unspecified / compressed prefix
)

# Common internal service ports: ssh, telnet, smtp, pop3, rpc, netbios, smb, rdp
BLOCKED_PORTS: Final[frozenset[int]] = frozenset(
    {22, 23, 25, 110, 135, 139, 445, 3389}
)
MIN_PORT: Final[int] = 1
MAX_PORT: Final[int] = 65535

DEFAULT_PORTS: Final[dict[str, int]] = {"http": 80, "https": 443}

# Scanned against the whole normalized URL, not only the hostname
SUSPICIOUS_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"data:text/html", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
    re.compile(r"onmouseover=", re.IGNORECASE),
    re.compile(r"onclick=", re.IGNORECASE),
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"base64,", re.IGNORECASE),
)

# Characters a WHATWG URL parser refuses in a hostname
INVALID_HOSTNAME_CHARS: Final[re.Pattern[str]] = re.compile(r"[\s<>\"'`{}|\\^]")

# User-facing messages
ERROR_MISSING_URL: Final[str] = "Please enter a URL"
ERROR_TOO_LONG: Final[str] = "URL is too long (maximum 2048 characters)"
ERROR_BAD_SCHEME: Final[str] = "Only HTTP and HTTPS protocols are supported"
ERROR_BAD_FORMAT: Final[str] = "Please enter a valid URL format"
ERROR_LOCAL_ADDRESS: Final[str] = "Local addresses are not allowed for security reasons"
ERROR_PRIVATE_ADDRESS: Final[str] = (
    "Private IP addresses are not allowed for security reasons"
)
ERROR_INVALID_PORT: Final[str] = "Invalid port number"
ERROR_BLOCKED_PORT: Final[str] = "This port is not allowed for security reasons"
ERROR_SUSPICIOUS: Final[str] = "URL contains suspicious patterns"
