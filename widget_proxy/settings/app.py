"""Application settings powered by Pydantic BaseSettings."""

import logging

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from widget_proxy.fetch.config import FetchConfig
from widget_proxy.fetch.constants import DEFAULT_MAX_RESPONSE_SIZE_BYTES
from widget_proxy.ratelimit.constants import DEFAULT_LIMIT, DEFAULT_WINDOW_SECONDS


DEVELOPMENT_ENV = "development"


class ProxySettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    rate_limit_requests: int = Field(
        default=DEFAULT_LIMIT, ge=1, validation_alias="RATE_LIMIT_REQUESTS"
    )
    rate_limit_window_seconds: float = Field(
        default=DEFAULT_WINDOW_SECONDS,
        gt=0,
        validation_alias="RATE_LIMIT_WINDOW_SECONDS",
    )
    body_size_limit_bytes: int = Field(
        default=DEFAULT_MAX_RESPONSE_SIZE_BYTES,
        ge=1024,
        validation_alias="BODY_SIZE_LIMIT_BYTES",
    )
    environment: str = Field(
        default="production", validation_alias=AliasChoices("APP_ENV", "NODE_ENV")
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_json: bool = Field(default=True, validation_alias="LOG_JSON")
    default_public_host: str = Field(
        default="localhost:3000", validation_alias="DEFAULT_PUBLIC_HOST"
    )

    @property
    def expose_error_details(self) -> bool:
        """Whether internal error messages may be returned to callers."""
        return self.environment.strip().lower() == DEVELOPMENT_ENV

    @property
    def log_level_value(self) -> int:
        """Numeric logging level, INFO when the name is unknown."""
        level = logging.getLevelName(self.log_level.strip().upper())
        return level if isinstance(level, int) else logging.INFO

    def fetch_config(self) -> FetchConfig:
        """Build the fetch configuration from environment settings."""
        return FetchConfig(max_response_size_bytes=self.body_size_limit_bytes)


def get_settings() -> ProxySettings:
    """Get a settings instance."""
    return ProxySettings()
