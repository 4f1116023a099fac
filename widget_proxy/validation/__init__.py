"""URL validation for proxied targets.

Rejects local, private and reserved addresses, blocked service ports and
URLs carrying script-injection markers before any network access happens.
"""

from widget_proxy.validation.constants import BLOCKED_PORTS, MAX_URL_LENGTH
from widget_proxy.validation.display import extract_domain, sanitize_for_display
from widget_proxy.validation.models import (
    ParsedUrl,
    ValidationCategory,
    ValidationResult,
)
from widget_proxy.validation.validator import (
    canonical_host,
    contains_suspicious_patterns,
    is_private_host,
    normalize_url,
    validate_url,
)


__all__ = [
    # Validation
    "validate_url",
    "normalize_url",
    "canonical_host",
    "is_private_host",
    "contains_suspicious_patterns",
    # Display helpers
    "sanitize_for_display",
    "extract_domain",
    # Models
    "ValidationResult",
    "ValidationCategory",
    "ParsedUrl",
    # Constants
    "BLOCKED_PORTS",
    "MAX_URL_LENGTH",
]
