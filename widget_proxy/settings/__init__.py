"""Application settings loading."""

from .app import ProxySettings, get_settings


__all__ = ["ProxySettings", "get_settings"]
