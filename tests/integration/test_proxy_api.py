"""Integration tests for the HTTP surface of the proxy."""

from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from tests.helpers.clock import FakeClock
from widget_proxy.api import create_app
from widget_proxy.fetch import FetchMetrics, PageFetcher
from widget_proxy.proxy import ProxyMetrics
from widget_proxy.ratelimit import FixedWindowRateLimiter
from widget_proxy.settings import ProxySettings


UPSTREAM_PAGE = (
    "<html><head><title>Upstream</title></head>"
    '<body><a href="/about">About</a></body></html>'
)


def upstream(request: httpx.Request) -> httpx.Response:
    """Answer proxied requests like a small public website."""
    if request.url.path == "/broken":
        return httpx.Response(500)
    if request.url.path == "/missing":
        return httpx.Response(404, text="not here")
    return httpx.Response(
        200,
        headers={
            "Content-Type": "text/html; charset=utf-8",
            "X-Frame-Options": "DENY",
            "Content-Security-Policy": "frame-ancestors 'none'",
        },
        text=UPSTREAM_PAGE,
    )


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    """Build test clients around a mocked upstream."""
    ProxyMetrics.reset()
    FetchMetrics.reset()

    def factory(limit: int = 100, environment: str = "production") -> TestClient:
        settings = ProxySettings(
            _env_file=None,
            rate_limit_requests=limit,
            environment=environment,
            log_json=False,
        )
        app = create_app(
            settings=settings,
            fetcher=PageFetcher(transport=httpx.MockTransport(upstream)),
            rate_limiter=FixedWindowRateLimiter(
                limit=limit, window_seconds=60.0, clock=FakeClock()
            ),
            setup_logging=False,
        )
        return TestClient(app)

    return factory


class TestProxyEndpoint:
    """Tests for GET /api/proxy."""

    def test_proxies_and_rewrites_page(
        self, make_client: Callable[..., TestClient]
    ) -> None:
        """Test a full proxied page with widget and rewritten links."""
        client = make_client()

        response = client.get(
            "/api/proxy",
            params={"url": "example.com", "theme": "dark"},
            headers={"Host": "widgets.test", "X-Forwarded-Proto": "https"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/html; charset=utf-8"
        assert response.headers["x-proxied-url"] == "https://example.com"
        assert response.headers["access-control-allow-origin"] == "*"
        assert "x-frame-options" not in response.headers
        assert "content-security-policy" not in response.headers
        assert '<base href="https://example.com">' in response.text
        assert '<a href="https://example.com/about">' in response.text
        assert '<script src="https://widgets.test/widget.js"></script>' in response.text
        assert "'/api/proxy?theme=dark'" in response.text

    @pytest.mark.parametrize("method", ["post", "put", "delete", "patch"])
    def test_other_methods_405(
        self, make_client: Callable[..., TestClient], method: str
    ) -> None:
        """Test that only GET is served."""
        response = make_client().request(
            method.upper(), "/api/proxy", params={"url": "example.com"}
        )

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}

    def test_missing_url(self, make_client: Callable[..., TestClient]) -> None:
        """Test the error for a missing url parameter."""
        response = make_client().get("/api/proxy")

        assert response.status_code == 400
        assert response.json() == {"error": "URL parameter is required"}

    def test_local_target_forbidden(
        self, make_client: Callable[..., TestClient]
    ) -> None:
        """Test that local targets are refused."""
        response = make_client().get("/api/proxy", params={"url": "localhost:8080"})

        assert response.status_code == 403
        assert response.json() == {
            "error": "Local addresses are not allowed for security reasons"
        }

    def test_probe(self, make_client: Callable[..., TestClient]) -> None:
        """Test the reachability probe."""
        response = make_client().get(
            "/api/proxy", params={"url": "example.com", "test": "true"}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_upstream_server_error(
        self, make_client: Callable[..., TestClient]
    ) -> None:
        """Test that upstream 5xx becomes 502."""
        response = make_client().get(
            "/api/proxy", params={"url": "https://example.com/broken"}
        )

        assert response.status_code == 502
        assert response.json() == {"error": "Target website server error"}

    def test_upstream_not_found_is_proxied(
        self, make_client: Callable[..., TestClient]
    ) -> None:
        """Test that an upstream 404 page is still served."""
        response = make_client().get(
            "/api/proxy", params={"url": "https://example.com/missing"}
        )

        assert response.status_code == 200
        assert "not here" in response.text

    def test_rate_limit_by_forwarded_client(
        self, make_client: Callable[..., TestClient]
    ) -> None:
        """Test that clients are keyed by the first forwarded address."""
        client = make_client(limit=2)
        first = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}
        second = {"X-Forwarded-For": "198.51.100.9"}

        statuses = [
            client.get(
                "/api/proxy", params={"url": "example.com"}, headers=first
            ).status_code
            for _ in range(3)
        ]
        other = client.get(
            "/api/proxy", params={"url": "example.com"}, headers=second
        )

        assert statuses == [200, 200, 429]
        assert other.status_code == 200

    def test_rate_limit_response(self, make_client: Callable[..., TestClient]) -> None:
        """Test the 429 body and header."""
        client = make_client(limit=1)
        client.get("/api/proxy", params={"url": "example.com"})

        response = client.get("/api/proxy", params={"url": "example.com"})

        assert response.status_code == 429
        assert response.headers["retry-after"] == "60"
        assert response.json()["retryAfter"] == 60


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health_reports_counters(
        self, make_client: Callable[..., TestClient]
    ) -> None:
        """Test that health reports limiter and proxy counters."""
        client = make_client()
        client.get("/api/proxy", params={"url": "example.com"})

        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["rate_limiter"]["clients"] == 1
        assert body["proxy"]["responses_total"] == {"200": 1}
