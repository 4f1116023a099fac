"""Data models for URL validation."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from widget_proxy.validation.constants import DEFAULT_PORTS


class ValidationCategory(str, Enum):
    """Why a URL was rejected.

    - INVALID_INPUT: Missing, malformed or oversized URL
    - SECURITY_BLOCKED: Local/private target, blocked port or suspicious content
    """

    INVALID_INPUT = "InvalidInput"
    SECURITY_BLOCKED = "SecurityBlocked"


class ParsedUrl(BaseModel):
    """Decomposed form of a validated URL.

    Produced once during validation and reused by the rewriter, so the
    target is never parsed twice for the same request.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    scheme: str
    hostname: str = Field(min_length=1, description="Lower-cased, no IPv6 brackets")
    port: int | None = None
    path: str = ""
    query: str = ""

    @property
    def host(self) -> str:
        """Hostname in URL form (IPv6 literals bracketed)."""
        if ":" in self.hostname:
            return f"[{self.hostname}]"
        return self.hostname

    @property
    def origin(self) -> str:
        """Scheme and authority, with the scheme's default port omitted."""
        if self.port is None or DEFAULT_PORTS.get(self.scheme) == self.port:
            return f"{self.scheme}://{self.host}"
        return f"{self.scheme}://{self.host}:{self.port}"


class ValidationResult(BaseModel):
    """Outcome of validating a candidate URL."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    is_valid: bool
    normalized_url: str | None = None
    error: str | None = None
    category: ValidationCategory | None = None
    parsed: ParsedUrl | None = None

    @model_validator(mode="after")
    def check_consistency(self) -> "ValidationResult":
        """Valid results carry a URL, invalid ones carry an error."""
        if self.is_valid:
            if not self.normalized_url or not self.normalized_url.startswith(
                ("http://", "https://")
            ):
                msg = "valid result requires an http(s) normalized_url"
                raise ValueError(msg)
            if self.error is not None:
                msg = "valid result must not carry an error"
                raise ValueError(msg)
        else:
            if self.normalized_url is not None:
                msg = "invalid result must not carry a normalized_url"
                raise ValueError(msg)
            if not self.error:
                msg = "invalid result requires an error message"
                raise ValueError(msg)
        return self

    @classmethod
    def ok(cls, normalized_url: str, parsed: ParsedUrl) -> "ValidationResult":
        """Build a successful result."""
        return cls(is_valid=True, normalized_url=normalized_url, parsed=parsed)

    @classmethod
    def rejected(
        cls,
        error: str,
        category: ValidationCategory = ValidationCategory.INVALID_INPUT,
    ) -> "ValidationResult":
        """Build a failed result."""
        return cls(is_valid=False, error=error, category=category)
