"""Configuration models for the page fetch layer."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from widget_proxy.fetch.constants import (
    BROWSER_USER_AGENT,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    FETCH_HEADERS,
    PROBE_HEADERS,
)


class FetchConfig(BaseModel):
    """Configuration for outbound fetches.

    Central configuration for both the full page fetch and the lightweight
    reachability probe.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        BROWSER_USER_AGENT
    )
    fetch_timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = (
        DEFAULT_FETCH_TIMEOUT_SECONDS
    )
    probe_timeout_seconds: Annotated[float, Field(gt=0.0, le=60.0)] = (
        DEFAULT_PROBE_TIMEOUT_SECONDS
    )
    max_redirects: Annotated[int, Field(ge=0, le=20)] = DEFAULT_MAX_REDIRECTS
    max_response_size_bytes: Annotated[
        int, Field(ge=1024, le=1024 * 1024 * 1024)
    ] = DEFAULT_MAX_RESPONSE_SIZE_BYTES
    fetch_headers: dict[str, str] = Field(default_factory=lambda: dict(FETCH_HEADERS))
    probe_headers: dict[str, str] = Field(default_factory=lambda: dict(PROBE_HEADERS))
    validate_redirects: bool = Field(
        default=True,
        description="Re-validate every redirect hop against the SSRF rules",
    )

    @field_validator("fetch_headers", "probe_headers")
    @classmethod
    def validate_no_auth_headers(cls, v: dict[str, str]) -> dict[str, str]:
        """Ensure no credentials are forwarded to third-party sites."""
        forbidden = {"authorization", "cookie", "x-api-key", "proxy-authorization"}
        for key in v:
            if key.lower() in forbidden:
                msg = f"Header '{key}' must not be sent to proxied sites"
                raise ValueError(msg)
        return v

    def build_fetch_headers(self) -> dict[str, str]:
        """Headers for the full page fetch."""
        return {"User-Agent": self.user_agent, **self.fetch_headers}

    def build_probe_headers(self) -> dict[str, str]:
        """Headers for the reachability probe."""
        return {"User-Agent": self.user_agent, **self.probe_headers}
