"""Helpers for echoing URLs back to callers.

These never take part in the security decision; use ``validate_url`` for that.
"""

import re
from urllib.parse import urlsplit


_ANGLE_BRACKETS = re.compile(r"[<>]")
_JAVASCRIPT_SCHEME = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+=", re.IGNORECASE)


def sanitize_for_display(url: str | None) -> str:
    """Strip markup and script fragments from a URL before displaying it.

    Args:
        url: URL to sanitize.

    Returns:
        Sanitized URL, or an empty string when nothing was given.
    """
    if not url:
        return ""
    cleaned = _ANGLE_BRACKETS.sub("", url)
    cleaned = _JAVASCRIPT_SCHEME.sub("", cleaned)
    return _EVENT_HANDLER.sub("", cleaned)


def extract_domain(url: str | None) -> str:
    """Return the hostname of a URL, or an empty string if it has none."""
    if not url:
        return ""
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""
