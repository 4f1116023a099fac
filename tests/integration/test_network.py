"""Tests against the public internet, skipped unless explicitly enabled."""

import asyncio
import os

import pytest

from widget_proxy.fetch import PageFetcher


pytestmark = [
    pytest.mark.network,
    pytest.mark.skipif(
        os.environ.get("RUN_NETWORK_TESTS") != "1",
        reason="set RUN_NETWORK_TESTS=1 to run tests that need the internet",
    ),
]


class TestPublicFetch:
    """Tests that reach a public website."""

    def test_fetch_example_domain(self) -> None:
        """Test fetching a stable public page."""
        result = asyncio.run(PageFetcher().fetch("https://example.com/"))

        assert result.status_code == 200
        assert b"Example Domain" in result.body_bytes

    def test_probe_example_domain(self) -> None:
        """Test probing a stable public page."""
        result = asyncio.run(PageFetcher().probe("https://example.com/"))

        assert result.is_success is True
