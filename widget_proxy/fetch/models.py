"""Data models for the page fetch layer."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from widget_proxy.fetch.constants import DEFAULT_CONTENT_TYPE


class FetchFailureKind(str, Enum):
    """Transport-independent classification of fetch failures.

    - TIMEOUT: No complete response within the deadline
    - CONNECTION_REFUSED: The target actively refused the connection
    - NO_RESPONSE: Request sent or attempted but nothing usable came back
    - HTTP_STATUS: Upstream answered with a status the proxy does not accept
    - TOO_MANY_REDIRECTS: Redirect chain exceeded the configured cap
    - REDIRECT_BLOCKED: A redirect pointed at a disallowed target
    - RESPONSE_TOO_LARGE: Body exceeded the configured size ceiling
    - OTHER: Unclassified error
    """

    TIMEOUT = "TIMEOUT"
    CONNECTION_REFUSED = "CONNECTION_REFUSED"
    NO_RESPONSE = "NO_RESPONSE"
    HTTP_STATUS = "HTTP_STATUS"
    TOO_MANY_REDIRECTS = "TOO_MANY_REDIRECTS"
    REDIRECT_BLOCKED = "REDIRECT_BLOCKED"
    RESPONSE_TOO_LARGE = "RESPONSE_TOO_LARGE"
    OTHER = "OTHER"


class FetchFailure(BaseModel):
    """Typed failure from a fetch operation.

    Carries only what the error classifier needs, so classification does
    not depend on the HTTP client library in use.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: FetchFailureKind = Field(description="Classification of the failure")
    message: Annotated[str, Field(min_length=1, description="Human-readable message")]
    status_code: int | None = Field(
        default=None, description="Upstream HTTP status for HTTP_STATUS failures"
    )
    code: str | None = Field(
        default=None, description="Short transport error code, if known"
    )


class FetchResult(BaseModel):
    """Result of a fetch or probe.

    Either ``failure`` is None and the upstream was reached, or it describes
    why it was not.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status_code: int | None = Field(
        default=None, ge=100, le=599, description="Upstream HTTP status code"
    )
    final_url: Annotated[
        str, Field(min_length=1, description="Final URL after redirects")
    ]
    headers: dict[str, str] = Field(
        default_factory=dict, description="Upstream response headers, lower-cased"
    )
    body_bytes: bytes = Field(default=b"", description="Decoded-transfer body")
    encoding: str = Field(default="utf-8", description="Text encoding of the body")
    failure: FetchFailure | None = Field(
        default=None, description="Failure details if the target was not reached"
    )

    @property
    def is_success(self) -> bool:
        """Check if the upstream was reached with an accepted status."""
        return self.failure is None

    @property
    def body_size(self) -> int:
        """Get the size of the response body in bytes."""
        return len(self.body_bytes)

    @property
    def content_type(self) -> str:
        """Upstream content type, defaulting to HTML when absent."""
        return self.headers.get("content-type") or DEFAULT_CONTENT_TYPE

    @property
    def text(self) -> str:
        """Body decoded with the upstream encoding.

        Undecodable bytes are kept as lone surrogates, so encoding the text
        with ``surrogateescape`` restores them exactly. Codecs that cannot
        escape a bad byte fall back to replacement characters.
        """
        try:
            return self.body_bytes.decode(self.encoding, errors="surrogateescape")
        except UnicodeDecodeError:
            return self.body_bytes.decode(self.encoding, errors="replace")

    @classmethod
    def failed(cls, url: str, failure: FetchFailure) -> "FetchResult":
        """Build a result for a fetch that did not reach the target."""
        return cls(
            status_code=failure.status_code,
            final_url=url,
            failure=failure,
        )


class ResponseSizeExceededError(Exception):
    """Raised when response size exceeds the configured limit."""


class RedirectBlockedError(Exception):
    """Raised when a redirect hop targets a URL that fails validation."""

    def __init__(self, url: str, reason: str) -> None:
        """Initialize the error.

        Args:
            url: Redirect target that was refused.
            reason: Validation error message.
        """
        self.url = url
        self.reason = reason
        super().__init__(f"Redirect to blocked target refused: {reason}")
