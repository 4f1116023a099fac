"""HTTP surface of the widget proxy."""

from widget_proxy.api.app import create_app


__all__ = ["create_app"]
