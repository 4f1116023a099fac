"""Async HTTP client for fetching and probing proxied pages."""

import asyncio
import errno
import time
from collections.abc import Awaitable, Callable
from io import BytesIO

import httpx
import structlog

from widget_proxy.fetch.config import FetchConfig
from widget_proxy.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    HTTP_STATUS_SERVER_ERROR_MIN,
)
from widget_proxy.fetch.metrics import FetchMetrics
from widget_proxy.fetch.models import (
    FetchFailure,
    FetchFailureKind,
    FetchResult,
    RedirectBlockedError,
    ResponseSizeExceededError,
)
from widget_proxy.fetch.redact import redact_headers, redact_url_credentials
from widget_proxy.validation import ValidationResult, validate_url


logger = structlog.get_logger()


class PageFetcher:
    """Async HTTP client for proxied pages.

    Provides the two outbound operations the proxy needs:
    - A full GET with a hard deadline, capped redirects and a body size ceiling
    - A HEAD reachability probe with a short deadline

    Statuses below 500 count as reached. Every transport error is mapped to
    a FetchFailure, so callers never see httpx exceptions. There are no
    retries; a single attempt is made per call.
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        url_validator: Callable[[str], ValidationResult] = validate_url,
    ) -> None:
        """Initialize the page fetcher.

        Args:
            config: Fetch configuration.
            transport: Optional httpx transport (tests inject a MockTransport).
            url_validator: Validator applied to every redirect hop.
        """
        self._config = config or FetchConfig()
        self._transport = transport
        self._validate = url_validator
        self._metrics = FetchMetrics.get_instance()
        self._log = logger.bind(component="fetch")

    @property
    def config(self) -> FetchConfig:
        """Get the fetch configuration."""
        return self._config

    async def fetch(self, url: str) -> FetchResult:
        """GET a page and read its body.

        Args:
            url: Validated target URL.

        Returns:
            FetchResult with the body, or a failure.
        """
        return await self._execute(
            method="GET",
            url=url,
            headers=self._config.build_fetch_headers(),
            timeout=self._config.fetch_timeout_seconds,
            read_body=True,
        )

    async def probe(self, url: str) -> FetchResult:
        """Check that a page exists without downloading it.

        Args:
            url: Validated target URL.

        Returns:
            FetchResult without a body, or a failure.
        """
        return await self._execute(
            method="HEAD",
            url=url,
            headers=self._config.build_probe_headers(),
            timeout=self._config.probe_timeout_seconds,
            read_body=False,
        )

    async def _execute(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        timeout: float,
        read_body: bool,
    ) -> FetchResult:
        """Run one request under a hard deadline and record the outcome.

        Args:
            method: HTTP method.
            url: Target URL.
            headers: Request headers.
            timeout: Deadline for the whole exchange, in seconds.
            read_body: Whether to download the body.

        Returns:
            FetchResult from the request.
        """
        log = self._log.bind(method=method, url=redact_url_credentials(url))
        self._metrics.record_attempt(probe=not read_body)
        start_time_ns = time.perf_counter_ns()

        try:
            result = await asyncio.wait_for(
                self._send(method, url, headers, timeout, read_body),
                timeout=timeout,
            )
        except TimeoutError:
            result = FetchResult.failed(
                url,
                FetchFailure(
                    kind=FetchFailureKind.TIMEOUT,
                    message=f"No response within {timeout:g}s",
                    code="ETIMEDOUT",
                ),
            )

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_duration(duration_ms)

        if result.failure is not None:
            self._metrics.record_failure(result.failure.kind)
            log.warning(
                "fetch_failed",
                failure=result.failure.kind.value,
                status_code=result.failure.status_code,
                message=result.failure.message,
                duration_ms=round(duration_ms, 2),
            )
        else:
            self._metrics.record_response(result.status_code or 0, result.body_size)
            log.info(
                "fetch_complete",
                status_code=result.status_code,
                final_url=redact_url_credentials(result.final_url),
                bytes=result.body_size,
                duration_ms=round(duration_ms, 2),
            )
            log.debug("upstream_headers", headers=redact_headers(result.headers))
        return result

    async def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        timeout: float,
        read_body: bool,
    ) -> FetchResult:
        """Execute a single HTTP exchange.

        Args:
            method: HTTP method.
            url: Target URL.
            headers: Request headers.
            timeout: Per-operation httpx timeout, in seconds.
            read_body: Whether to download the body.

        Returns:
            FetchResult from the request.
        """
        try:
            async with self._build_client(timeout) as client:
                async with client.stream(method, url, headers=headers) as response:
                    if response.status_code >= HTTP_STATUS_SERVER_ERROR_MIN:
                        return FetchResult.failed(
                            url,
                            FetchFailure(
                                kind=FetchFailureKind.HTTP_STATUS,
                                message=f"Server error ({response.status_code})",
                                status_code=response.status_code,
                            ),
                        )

                    body = b""
                    if read_body:
                        body = await self._read_body_with_limit(response)
                    return FetchResult(
                        status_code=response.status_code,
                        final_url=str(response.url),
                        headers={k.lower(): v for k, v in response.headers.items()},
                        body_bytes=body,
                        encoding=response.encoding or "utf-8",
                    )

        except httpx.TimeoutException as e:
            return self._failure(
                url, FetchFailureKind.TIMEOUT, f"Request timed out: {e}", "ETIMEDOUT"
            )

        except httpx.TooManyRedirects as e:
            return self._failure(
                url, FetchFailureKind.TOO_MANY_REDIRECTS, f"Too many redirects: {e}"
            )

        except RedirectBlockedError as e:
            return self._failure(url, FetchFailureKind.REDIRECT_BLOCKED, str(e))

        except ResponseSizeExceededError as e:
            return self._failure(url, FetchFailureKind.RESPONSE_TOO_LARGE, str(e))

        except httpx.ConnectError as e:
            if _is_connection_refused(e):
                return self._failure(
                    url,
                    FetchFailureKind.CONNECTION_REFUSED,
                    f"Connection refused: {e}",
                    "ECONNREFUSED",
                )
            return self._failure(
                url,
                FetchFailureKind.NO_RESPONSE,
                f"Connection failed: {e}",
                "ECONNFAILED",
            )

        except httpx.TransportError as e:
            return self._failure(
                url, FetchFailureKind.NO_RESPONSE, f"No response: {e}", type(e).__name__
            )

        except Exception as e:  # noqa: BLE001
            return self._failure(
                url, FetchFailureKind.OTHER, f"Unexpected error: {e}", type(e).__name__
            )

    def _build_client(self, timeout: float) -> httpx.AsyncClient:
        """Create a client for one exchange."""
        event_hooks: dict[str, list[Callable[[httpx.Request], Awaitable[None]]]] = {}
        if self._config.validate_redirects:
            event_hooks["request"] = [self._check_redirect_hop]
        return httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            max_redirects=self._config.max_redirects,
            transport=self._transport,
            event_hooks=event_hooks,
        )

    async def _check_redirect_hop(self, request: httpx.Request) -> None:
        """Refuse any request (including redirect hops) to a disallowed target.

        Raises:
            RedirectBlockedError: If the hop fails validation.
        """
        target = str(request.url)
        result = self._validate(target)
        if not result.is_valid:
            raise RedirectBlockedError(target, result.error or "blocked")

    async def _read_body_with_limit(self, response: httpx.Response) -> bytes:
        """Read response body with size limit.

        Args:
            response: Streaming HTTP response.

        Returns:
            Response body bytes.

        Raises:
            ResponseSizeExceededError: If the size limit is exceeded.
        """
        max_size = self._config.max_response_size_bytes

        content_length = response.headers.get("content-length", "")
        declared = int(content_length) if content_length.isdigit() else 0
        if declared > max_size:
            msg = f"Response size {declared} exceeds limit {max_size}"
            raise ResponseSizeExceededError(msg)

        buffer = BytesIO()
        total_read = 0
        async for chunk in response.aiter_bytes(chunk_size=DEFAULT_CHUNK_SIZE):
            total_read += len(chunk)
            if total_read > max_size:
                msg = (
                    f"Response size exceeded limit of {max_size} bytes "
                    f"(read {total_read} bytes)"
                )
                raise ResponseSizeExceededError(msg)
            buffer.write(chunk)

        return buffer.getvalue()

    def _failure(
        self,
        url: str,
        kind: FetchFailureKind,
        message: str,
        code: str | None = None,
    ) -> FetchResult:
        """Build a failed result."""
        failure = FetchFailure(kind=kind, message=message, code=code)
        return FetchResult.failed(url, failure)


def _is_connection_refused(exc: BaseException) -> bool:
    """Walk an exception chain looking for a refused connection."""
    seen: set[int] = set()
    pending: list[BaseException] = [exc]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))

        if isinstance(current, ConnectionRefusedError):
            return True
        if isinstance(current, OSError) and current.errno == errno.ECONNREFUSED:
            return True

        if isinstance(current, BaseExceptionGroup):
            pending.extend(current.exceptions)
        if current.__cause__ is not None:
            pending.append(current.__cause__)
        if current.__context__ is not None:
            pending.append(current.__context__)
    return False
