"""Unit tests for fetch configuration."""

import pytest
from pydantic import ValidationError

from widget_proxy.fetch import (
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
    FetchConfig,
)
from widget_proxy.fetch.constants import BROWSER_USER_AGENT


class TestFetchConfig:
    """Tests for FetchConfig."""

    def test_defaults(self) -> None:
        """Test default deadlines, redirect cap and redirect validation."""
        config = FetchConfig()

        assert config.fetch_timeout_seconds == DEFAULT_FETCH_TIMEOUT_SECONDS == 30.0
        assert config.probe_timeout_seconds == DEFAULT_PROBE_TIMEOUT_SECONDS == 8.0
        assert config.max_redirects == DEFAULT_MAX_REDIRECTS == 5
        assert config.validate_redirects is True

    def test_fetch_headers_include_user_agent(self) -> None:
        """Test that built headers carry the browser user agent."""
        headers = FetchConfig().build_fetch_headers()

        assert headers["User-Agent"] == BROWSER_USER_AGENT
        assert headers["Accept-Language"] == "en-US,en;q=0.9"
        assert headers["Sec-Fetch-Dest"] == "document"

    def test_probe_headers(self) -> None:
        """Test the reduced probe header set."""
        headers = FetchConfig().build_probe_headers()

        assert set(headers) == {"User-Agent", "Accept"}

    @pytest.mark.parametrize("header", ["Authorization", "cookie", "X-API-Key"])
    def test_rejects_credential_headers(self, header: str) -> None:
        """Test that credentials can never be configured for upstream calls."""
        with pytest.raises(ValidationError):
            FetchConfig(fetch_headers={header: "secret"})

    def test_rejects_tiny_size_limit(self) -> None:
        """Test the lower bound on the response size ceiling."""
        with pytest.raises(ValidationError):
            FetchConfig(max_response_size_bytes=10)

    def test_is_frozen(self) -> None:
        """Test that config cannot be changed after creation."""
        config = FetchConfig()

        with pytest.raises(ValidationError):
            config.max_redirects = 10  # type: ignore[misc]
