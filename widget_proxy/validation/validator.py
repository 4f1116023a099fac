"""URL validation guarding the proxy against SSRF and script injection.

The validator is a pure function of its input: it performs no DNS lookups
and no I/O, so it is safe to call concurrently without coordination.
Checks run in a fixed order and stop at the first failure.
"""

import ipaddress
import string
from urllib.parse import SplitResult, urlsplit

from widget_proxy.validation.constants import (
    ALLOWED_SCHEMES,
    BLOCKED_PORTS,
    DEFAULT_SCHEME_PREFIX,
    ERROR_BAD_FORMAT,
    ERROR_BAD_SCHEME,
    ERROR_BLOCKED_PORT,
    ERROR_INVALID_PORT,
    ERROR_LOCAL_ADDRESS,
    ERROR_MISSING_URL,
    ERROR_PRIVATE_ADDRESS,
    ERROR_SUSPICIOUS,
    ERROR_TOO_LONG,
    INVALID_HOSTNAME_CHARS,
    LOCAL_HOSTNAMES,
    MAX_PORT,
    MAX_URL_LENGTH,
    MIN_PORT,
    PRIVATE_IPV4_PATTERNS,
    PRIVATE_IPV6_PATTERNS,
    SUSPICIOUS_PATTERNS,
)
from widget_proxy.validation.models import (
    ParsedUrl,
    ValidationCategory,
    ValidationResult,
)


_BLOCKED = ValidationCategory.SECURITY_BLOCKED


def normalize_url(value: str) -> str:
    """Trim a URL and default it to https when no http(s) scheme is given.

    Args:
        value: Raw URL text.

    Returns:
        URL starting with http:// or https://.
    """
    url = value.strip()
    if url.startswith(("http://", "https://")):
        return url
    return f"{DEFAULT_SCHEME_PREFIX}{url}"


def validate_url(value: object) -> ValidationResult:
    """Validate a candidate URL before the proxy fetches it.

    Args:
        value: Candidate URL. Anything other than a non-blank string is rejected.

    Returns:
        ValidationResult carrying either the normalized URL and its parsed
        components, or a user-facing error message and its category.
    """
    if not isinstance(value, str) or not value.strip():
        return ValidationResult.rejected(ERROR_MISSING_URL)

    normalized = normalize_url(value)
    if len(normalized) > MAX_URL_LENGTH:
        return ValidationResult.rejected(ERROR_TOO_LONG)

    try:
        split = urlsplit(normalized)
        raw_port = _raw_port(split)
    except ValueError:
        return ValidationResult.rejected(ERROR_BAD_FORMAT)

    if split.scheme.lower() not in ALLOWED_SCHEMES:
        return ValidationResult.rejected(ERROR_BAD_SCHEME)

    raw_host = (split.hostname or "").lower()
    if not raw_host or INVALID_HOSTNAME_CHARS.search(raw_host):
        return ValidationResult.rejected(ERROR_BAD_FORMAT)

    hostname = canonical_host(raw_host)
    if not hostname:
        return ValidationResult.rejected(ERROR_BAD_FORMAT)

    if hostname in LOCAL_HOSTNAMES:
        return ValidationResult.rejected(ERROR_LOCAL_ADDRESS, _BLOCKED)

    if is_private_host(hostname):
        return ValidationResult.rejected(ERROR_PRIVATE_ADDRESS, _BLOCKED)

    literal_error = _check_ip_literal(hostname)
    if literal_error:
        return ValidationResult.rejected(literal_error, _BLOCKED)

    port: int | None = None
    if raw_port:
        port = int(raw_port)
        if port < MIN_PORT or port > MAX_PORT:
            return ValidationResult.rejected(ERROR_INVALID_PORT)
        if port in BLOCKED_PORTS:
            return ValidationResult.rejected(ERROR_BLOCKED_PORT, _BLOCKED)

    if contains_suspicious_patterns(normalized):
        return ValidationResult.rejected(ERROR_SUSPICIOUS, _BLOCKED)

    parsed = ParsedUrl(
        scheme=split.scheme.lower(),
        hostname=hostname,
        port=port,
        path=split.path,
        query=split.query,
    )
    return ValidationResult.ok(normalized, parsed)


def canonical_host(hostname: str) -> str | None:
    """Reduce a hostname to the form a browser would connect to.

    One trailing dot is dropped. A host whose last label is numeric is
    parsed as IPv4 the way browsers do: one to four labels, each decimal,
    ``0x`` hex or leading-zero octal, with the last label filling the
    remaining bytes. ``127.1`` and ``0x7f.0.0.1`` both become ``127.0.0.1``.

    Args:
        hostname: Lower-cased hostname without IPv6 brackets.

    Returns:
        Canonical hostname, or None if it ends in a number but is not a
        valid IPv4 address.
    """
    host = hostname.removesuffix(".")
    if not host or ":" in host:
        return host

    labels = host.split(".")
    last = labels[-1]
    if not (last.isascii() and last.isdigit()) and _ipv4_number(last) is None:
        return host

    if len(labels) > 4:
        return None
    numbers: list[int] = []
    for label in labels:
        number = _ipv4_number(label)
        if number is None:
            return None
        numbers.append(number)

    *head, tail = numbers
    if any(n > 255 for n in head) or tail >= 256 ** (5 - len(numbers)):
        return None

    value = tail
    for index, number in enumerate(head):
        value += number * 256 ** (3 - index)
    return str(ipaddress.IPv4Address(value))


def is_private_host(hostname: str) -> bool:
    """Check a hostname against the private and reserved address patterns.

    Args:
        hostname: Lower-cased hostname, with or without IPv6 brackets.

    Returns:
        True if the hostname looks like a private or reserved address.
    """
    if any(pattern.search(hostname) for pattern in PRIVATE_IPV4_PATTERNS):
        return True

    bare = hostname.removeprefix("[").removesuffix("]")
    return any(pattern.search(bare) for pattern in PRIVATE_IPV6_PATTERNS)


def contains_suspicious_patterns(url: str) -> bool:
    """Check whether a URL carries script-injection markers.

    Args:
        url: Full URL string.

    Returns:
        True if any suspicious pattern is present.
    """
    return any(pattern.search(url) for pattern in SUSPICIOUS_PATTERNS)


def _raw_port(split: SplitResult) -> str:
    """Extract the port text from the authority.

    Raises:
        ValueError: If the port is present but not numeric.
    """
    hostport = split.netloc.rpartition("@")[2]
    if hostport.startswith("["):
        _, _, tail = hostport.partition("]")
        port = tail[1:] if tail.startswith(":") else ""
    else:
        _, _, port = hostport.partition(":")
    if port and not port.isdigit():
        msg = f"non-numeric port: {port!r}"
        raise ValueError(msg)
    return port


def _ipv4_number(label: str) -> int | None:
    """Parse one IPv4 label as decimal, 0x hex or leading-zero octal."""
    if label[:2] in ("0x", "0X"):
        digits, base, alphabet = label[2:], 16, string.hexdigits
        if not digits:
            return 0
    elif len(label) > 1 and label.startswith("0"):
        digits, base, alphabet = label[1:], 8, string.octdigits
    else:
        digits, base, alphabet = label, 10, string.digits
    if not digits or any(char not in alphabet for char in digits):
        return None
    return int(digits, base)


def _check_ip_literal(hostname: str) -> str | None:
    """Reject IP literals outside public address space.

    Covers addresses the textual patterns miss, such as 127.0.0.2.
    Expects a host already passed through ``canonical_host``.
    """
    try:
        address = ipaddress.ip_address(hostname.removeprefix("[").removesuffix("]"))
    except ValueError:
        return None

    if address.is_loopback or address.is_unspecified:
        return ERROR_LOCAL_ADDRESS
    if (
        address.is_private
        or address.is_link_local
        or address.is_reserved
        or address.is_multicast
    ):
        return ERROR_PRIVATE_ADDRESS
    return None
