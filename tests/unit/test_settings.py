"""Unit tests for environment settings."""

import logging

import pytest

from widget_proxy.settings import ProxySettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove proxy settings from the environment."""
    for name in (
        "RATE_LIMIT_REQUESTS",
        "RATE_LIMIT_WINDOW_SECONDS",
        "BODY_SIZE_LIMIT_BYTES",
        "APP_ENV",
        "NODE_ENV",
        "LOG_LEVEL",
        "LOG_JSON",
        "DEFAULT_PUBLIC_HOST",
    ):
        monkeypatch.delenv(name, raising=False)


class TestProxySettings:
    """Tests for ProxySettings."""

    def test_defaults(self) -> None:
        """Test default values."""
        settings = ProxySettings(_env_file=None)

        assert settings.rate_limit_requests == 100
        assert settings.rate_limit_window_seconds == 60.0
        assert settings.body_size_limit_bytes == 50 * 1024 * 1024
        assert settings.expose_error_details is False
        assert settings.default_public_host == "localhost:3000"

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that environment variables override defaults."""
        monkeypatch.setenv("RATE_LIMIT_REQUESTS", "5")
        monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "10")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = ProxySettings(_env_file=None)

        assert settings.rate_limit_requests == 5
        assert settings.rate_limit_window_seconds == 10.0
        assert settings.log_level_value == logging.DEBUG

    @pytest.mark.parametrize("variable", ["APP_ENV", "NODE_ENV"])
    def test_development_exposes_details(
        self, monkeypatch: pytest.MonkeyPatch, variable: str
    ) -> None:
        """Test that either environment variable enables error details."""
        monkeypatch.setenv(variable, "development")

        assert ProxySettings(_env_file=None).expose_error_details is True

    def test_unknown_log_level_falls_back(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that an unknown level name means INFO."""
        monkeypatch.setenv("LOG_LEVEL", "chatty")

        assert ProxySettings(_env_file=None).log_level_value == logging.INFO

    def test_body_limit_reaches_fetch_config(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that the body size limit becomes the response ceiling."""
        monkeypatch.setenv("BODY_SIZE_LIMIT_BYTES", "4096")

        config = ProxySettings(_env_file=None).fetch_config()

        assert config.max_response_size_bytes == 4096
