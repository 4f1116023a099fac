"""CLI commands for the widget proxy."""

import json
import sys

import click
import structlog

from widget_proxy import __version__
from widget_proxy.observability.logging import configure_logging
from widget_proxy.settings import get_settings
from widget_proxy.validation import extract_domain, validate_url


logger = structlog.get_logger()

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Widget proxy CLI."""


@cli.command()
@click.option(
    "--host",
    default=DEFAULT_HOST,
    show_default=True,
    help="Interface to bind.",
)
@click.option(
    "--port",
    default=DEFAULT_PORT,
    show_default=True,
    type=click.IntRange(1, 65535),
    help="Port to listen on.",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Restart the server when source files change (development only).",
)
def serve(host: str, port: int, reload: bool) -> None:
    """Run the proxy HTTP server."""
    import uvicorn

    settings = get_settings()
    configure_logging(level=settings.log_level_value, json_format=settings.log_json)
    logger.bind(component="cli").info(
        "server_starting",
        host=host,
        port=port,
        environment=settings.environment,
        rate_limit=settings.rate_limit_requests,
        rate_limit_window_seconds=settings.rate_limit_window_seconds,
    )

    uvicorn.run(
        "widget_proxy.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


@cli.command()
@click.argument("url")
def check(url: str) -> None:
    """Validate a target URL without fetching it.

    Prints the validation result as JSON. Exits with status 1 when the URL
    would be rejected by the proxy.
    """
    result = validate_url(url)
    output = {
        "is_valid": result.is_valid,
        "normalized_url": result.normalized_url,
        "domain": extract_domain(result.normalized_url) or None,
        "error": result.error,
        "category": result.category.value if result.category else None,
    }
    click.echo(json.dumps(output, indent=2))
    if not result.is_valid:
        sys.exit(1)
