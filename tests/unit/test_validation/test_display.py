"""Unit tests for URL display helpers."""

from widget_proxy.validation import extract_domain, sanitize_for_display


class TestSanitizeForDisplay:
    """Tests for display sanitization."""

    def test_strips_markup(self) -> None:
        """Test that angle brackets and script markers are removed."""
        result = sanitize_for_display(
            "https://a.com/<script>javascript:x onerror=y"
        )

        assert "<" not in result
        assert ">" not in result
        assert "javascript:" not in result.lower()
        assert "onerror=" not in result

    def test_empty_input(self) -> None:
        """Test that missing input gives an empty string."""
        assert sanitize_for_display(None) == ""
        assert sanitize_for_display("") == ""

    def test_plain_url_unchanged(self) -> None:
        """Test that ordinary URLs pass through."""
        assert sanitize_for_display("https://a.com/p?x=1") == "https://a.com/p?x=1"


class TestExtractDomain:
    """Tests for hostname extraction."""

    def test_returns_hostname(self) -> None:
        """Test extraction from a full URL."""
        assert extract_domain("https://docs.example.com/a/b") == "docs.example.com"

    def test_unparseable_gives_empty(self) -> None:
        """Test that inputs without a host give an empty string."""
        assert extract_domain("not a url") == ""
        assert extract_domain(None) == ""
