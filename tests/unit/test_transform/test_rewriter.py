"""Unit tests for the first-match HTML rewriter."""

from widget_proxy.transform import (
    FirstMatchRewriter,
    absolutize_root_relative,
    encode_document,
    inject_widget,
    insert_base_tag,
)
from widget_proxy.validation import validate_url


WIDGET = '<script src="http://localhost:3000/widget.js"></script>'


class TestAbsolutizeRootRelative:
    """Tests for root-relative link rewriting."""

    def test_rewrites_only_first_href_and_src(self) -> None:
        """Test that exactly one href and one src are rewritten."""
        document = (
            '<a href="/a">A</a><a href="/b">B</a>'
            '<img src="/x.png"><img src="/y.png">'
        )

        result = absolutize_root_relative(document, "https://example.com")

        assert result == (
            '<a href="https://example.com/a">A</a><a href="/b">B</a>'
            '<img src="https://example.com/x.png"><img src="/y.png">'
        )

    def test_leaves_absolute_and_relative_links(self) -> None:
        """Test that non-root-relative references are untouched."""
        document = '<a href="https://other.com/">x</a><img src="pic.png">'

        assert absolutize_root_relative(document, "https://example.com") == document

    def test_origin_with_port(self) -> None:
        """Test that a non-default port is kept in rewritten links."""
        result = absolutize_root_relative('<a href="/p">', "http://example.com:8080")

        assert result == '<a href="http://example.com:8080/p">'


class TestInsertBaseTag:
    """Tests for base tag insertion."""

    def test_inserted_after_head(self) -> None:
        """Test that the base tag follows the first head tag."""
        result = insert_base_tag(
            "<html><head><title>t</title></head></html>", "https://example.com/docs"
        )

        assert result == (
            '<html><head><base href="https://example.com/docs">'
            "<title>t</title></head></html>"
        )

    def test_no_head_no_base(self) -> None:
        """Test that documents without a head tag are unchanged."""
        assert insert_base_tag("<p>hi</p>", "https://example.com") == "<p>hi</p>"

    def test_head_with_attributes_not_matched(self) -> None:
        """Test that only a bare head tag is matched."""
        document = '<head lang="en"></head>'

        assert insert_base_tag(document, "https://example.com") == document

    def test_url_is_attribute_escaped(self) -> None:
        """Test that quotes in the base URL cannot break out of the attribute."""
        result = insert_base_tag("<head>", 'https://example.com/a"b')

        assert '<base href="https://example.com/a&quot;b">' in result


class TestInjectWidget:
    """Tests for widget placement."""

    def test_before_head_close(self) -> None:
        """Test that the widget goes before the closing head tag."""
        result = inject_widget("<head></head><body></body>", WIDGET)

        assert result == f"<head>{WIDGET}</head><body></body>"

    def test_before_body_close_without_head(self) -> None:
        """Test that the widget goes before the closing body tag when no head."""
        result = inject_widget("<body><p>x</p></body>", WIDGET)

        assert result == f"<body><p>x</p>{WIDGET}</body>"

    def test_appended_otherwise(self) -> None:
        """Test that fragments get the widget appended."""
        assert inject_widget("<p>x</p>", WIDGET) == f"<p>x</p>{WIDGET}"

    def test_only_first_head_close(self) -> None:
        """Test that the widget is injected once."""
        result = inject_widget("</head></head>", WIDGET)

        assert result.count(WIDGET) == 1
        assert result.startswith(WIDGET)


class TestFirstMatchRewriter:
    """Tests for the combined rewrite."""

    def test_full_rewrite(self) -> None:
        """Test link rewriting, base tag and widget injection together."""
        validation = validate_url("https://example.com/docs/page")
        assert validation.parsed is not None
        document = (
            '<html><head><link href="/style.css"></head>'
            '<body><script src="/app.js"></script></body></html>'
        )

        result = FirstMatchRewriter().rewrite(
            document, validation.parsed, "https://example.com/docs/page", WIDGET
        )

        assert result == (
            '<html><head><base href="https://example.com/docs/page">'
            '<link href="https://example.com/style.css">'
            f"{WIDGET}</head>"
            '<body><script src="https://example.com/app.js"></script></body></html>'
        )


class TestEncodeDocument:
    """Tests for encoding rewritten pages."""

    def test_restores_escaped_bytes(self) -> None:
        """Test that surrogate-escaped bytes come back unchanged."""
        raw = b"<p>\xff\xfe ok \x80</p>"
        text = raw.decode("utf-8", errors="surrogateescape")

        assert encode_document(text, "utf-8") == raw

    def test_unencodable_characters_become_references(self) -> None:
        """Test that characters outside the charset become references."""
        assert encode_document("price: €5", "iso-8859-1") == b"price: &#8364;5"

    def test_mixed_escaped_bytes_and_references(self) -> None:
        """Test escaped bytes next to characters the charset cannot hold."""
        raw = b"caf\xe9 \x81"
        text = raw.decode("cp1252", errors="surrogateescape") + "中"

        assert encode_document(text, "cp1252") == b"caf\xe9 \x81&#20013;"
