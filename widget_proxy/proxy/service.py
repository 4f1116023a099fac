"""Proxy request pipeline: validate, rate-limit, fetch, rewrite."""

from collections.abc import Callable
from typing import Protocol
from urllib.parse import quote

import structlog

from widget_proxy.errors import (
    FetchMode,
    ProxyError,
    classify_fetch_failure,
    internal_error,
    method_not_allowed,
    missing_url,
    rate_limited,
    validation_error,
)
from widget_proxy.fetch import FetchResult, redact_url_credentials
from widget_proxy.proxy.constants import (
    CORS_HEADERS,
    HEADER_URL_SAFE_CHARS,
    HTML_CONTENT_TYPE_MARKER,
    PROXIED_URL_HEADER,
)
from widget_proxy.proxy.metrics import ProxyMetrics
from widget_proxy.proxy.models import ProxyRequest, ProxyResponse
from widget_proxy.ratelimit import RateLimiterProtocol
from widget_proxy.transform import (
    DocumentRewriter,
    FirstMatchRewriter,
    build_widget_markup,
    encode_document,
)
from widget_proxy.validation import ParsedUrl, ValidationResult, validate_url


logger = structlog.get_logger()


class FetcherProtocol(Protocol):
    """Protocol for the outbound fetch layer."""

    async def fetch(self, url: str) -> FetchResult:
        """GET a page and read its body."""
        ...

    async def probe(self, url: str) -> FetchResult:
        """Check that a page is reachable."""
        ...


class ProxyService:
    """Handles proxy calls from inbound request to outbound response.

    Every call runs the same pipeline:
    1. Method and ``url`` parameter checks
    2. Target validation (no network access on rejection)
    3. Per-client rate limiting
    4. Reachability probe, or full fetch followed by HTML rewriting

    Errors raised anywhere in the pipeline are converted to a JSON
    response exactly once, in ``handle``.
    """

    def __init__(
        self,
        fetcher: FetcherProtocol,
        rate_limiter: RateLimiterProtocol,
        rewriter: DocumentRewriter | None = None,
        validator: Callable[[object], ValidationResult] = validate_url,
        expose_error_details: bool = False,
    ) -> None:
        """Initialize the proxy service.

        Args:
            fetcher: Outbound fetch layer.
            rate_limiter: Per-client admission control.
            rewriter: HTML rewriter for proxied pages.
            validator: Target URL validator.
            expose_error_details: Whether internal error messages reach callers.
        """
        self._fetcher = fetcher
        self._rate_limiter = rate_limiter
        self._rewriter = rewriter or FirstMatchRewriter()
        self._validate = validator
        self._expose_error_details = expose_error_details
        self._metrics = ProxyMetrics.get_instance()
        self._log = logger.bind(component="proxy")

    async def handle(self, request: ProxyRequest) -> ProxyResponse:
        """Handle one proxy call.

        Args:
            request: Inbound proxy request.

        Returns:
            ProxyResponse for the caller; never raises.
        """
        try:
            response = await self._process(request)
        except ProxyError as e:
            response = self._error_response(e)
        except Exception as e:  # noqa: BLE001
            self._log.exception("proxy_unexpected_error", error=str(e))
            response = self._error_response(
                internal_error(e, self._expose_error_details)
            )

        self._metrics.record_response(response.status_code)
        return response

    async def _process(self, request: ProxyRequest) -> ProxyResponse:
        """Run the pipeline, raising ProxyError on any rejection."""
        if request.method != "GET":
            raise method_not_allowed()

        if not request.target_url:
            raise missing_url()

        validation = self._validate(request.target_url)
        if not validation.is_valid:
            self._log.info(
                "validation_rejected",
                url=redact_url_credentials(request.target_url),
                category=validation.category.value if validation.category else None,
                reason=validation.error,
            )
            raise validation_error(validation)

        target_url = validation.normalized_url
        parsed = validation.parsed
        if target_url is None or parsed is None:
            msg = "validator accepted a URL without its parsed components"
            raise RuntimeError(msg)

        decision = self._rate_limiter.admit(request.client_id)
        if not decision.allowed:
            self._log.info(
                "rate_limited",
                count=decision.count,
                limit=decision.limit,
                retry_after=decision.retry_after_seconds,
            )
            raise rate_limited(decision)

        self._metrics.record_request(probe=request.is_test_probe)

        if request.is_test_probe:
            return await self._probe(target_url)
        return await self._fetch_page(request, parsed, target_url)

    async def _probe(self, target_url: str) -> ProxyResponse:
        """Check reachability of the target without downloading it."""
        result = await self._fetcher.probe(target_url)
        if result.failure is not None:
            self._log.info(
                "proxy_fetch_failed",
                mode=FetchMode.PROBE.value,
                failure=result.failure.kind.value,
            )
            raise classify_fetch_failure(
                result.failure, FetchMode.PROBE, self._expose_error_details
            )
        return ProxyResponse.json(200, {"success": True})

    async def _fetch_page(
        self,
        request: ProxyRequest,
        parsed: ParsedUrl,
        target_url: str,
    ) -> ProxyResponse:
        """Fetch the target and rewrite HTML for embedding."""
        result = await self._fetcher.fetch(target_url)
        if result.failure is not None:
            self._log.info(
                "proxy_fetch_failed",
                mode=FetchMode.FULL.value,
                failure=result.failure.kind.value,
                status_code=result.failure.status_code,
            )
            raise classify_fetch_failure(
                result.failure, FetchMode.FULL, self._expose_error_details
            )

        content_type = result.content_type
        body = result.body_bytes

        if HTML_CONTENT_TYPE_MARKER in content_type.lower():
            markup = build_widget_markup(
                public_origin=request.public_origin,
                version=request.widget_version,
                passthrough_params=list(request.passthrough_params),
                page_path=request.request_path,
            )
            document = self._rewriter.rewrite(
                result.text, parsed, target_url, markup
            )
            body = encode_document(document, result.encoding)
            self._metrics.record_rewrite()

        headers = {
            PROXIED_URL_HEADER: quote(target_url, safe=HEADER_URL_SAFE_CHARS),
            **CORS_HEADERS,
        }
        return ProxyResponse(
            status_code=200, content_type=content_type, body=body, headers=headers
        )

    def _error_response(self, error: ProxyError) -> ProxyResponse:
        """Convert a ProxyError to a JSON response."""
        self._metrics.record_error(error.category.value)
        return ProxyResponse.json(
            int(error.status_code), error.to_dict(), headers=error.headers
        )
