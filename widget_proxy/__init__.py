"""Validating proxy that embeds a widget into third-party pages."""

__version__ = "0.1.0"
