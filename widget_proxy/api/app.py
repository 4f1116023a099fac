"""FastAPI application factory for the widget proxy."""

from fastapi import FastAPI

from widget_proxy import __version__
from widget_proxy.api import routes
from widget_proxy.fetch import PageFetcher
from widget_proxy.observability import configure_logging
from widget_proxy.proxy import FetcherProtocol, ProxyService
from widget_proxy.ratelimit import FixedWindowRateLimiter
from widget_proxy.settings import ProxySettings, get_settings


def create_app(
    settings: ProxySettings | None = None,
    fetcher: FetcherProtocol | None = None,
    rate_limiter: FixedWindowRateLimiter | None = None,
    setup_logging: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    The proxy service, its fetcher and its rate limiter are built once per
    application and shared by all requests through ``app.state``. Tests
    pass their own fetcher and limiter to avoid network access and to
    control time.

    Args:
        settings: Application settings (loaded from the environment if None).
        fetcher: Outbound fetch layer (a ``PageFetcher`` if None).
        rate_limiter: Admission control (built from settings if None).
        setup_logging: Whether to configure structlog from settings.

    Returns:
        FastAPI: Configured application instance.
    """
    settings = settings or get_settings()
    if setup_logging:
        configure_logging(
            level=settings.log_level_value, json_format=settings.log_json
        )

    rate_limiter = rate_limiter or FixedWindowRateLimiter(
        limit=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    fetcher = fetcher or PageFetcher(config=settings.fetch_config())

    app = FastAPI(title="Widget Proxy", version=__version__)
    app.state.settings = settings
    app.state.rate_limiter = rate_limiter
    app.state.proxy_service = ProxyService(
        fetcher=fetcher,
        rate_limiter=rate_limiter,
        expose_error_details=settings.expose_error_details,
    )

    app.include_router(routes.router)
    return app
