"""Best-effort rewriting of proxied HTML documents.

Rewriting uses targeted substring operations, not a DOM. Only the first
root-relative ``href`` and the first root-relative ``src`` are made
absolute; the injected ``<base>`` tag takes care of most other relative
references. Callers depend on the ``DocumentRewriter`` protocol so a
tag-aware implementation can replace this one without touching the fetch
pipeline.
"""

import codecs
import html
import re
from typing import Protocol

from widget_proxy.validation import ParsedUrl


_ROOT_RELATIVE_HREF = re.compile(r'href="/([^"]*)"')
_ROOT_RELATIVE_SRC = re.compile(r'src="/([^"]*)"')

HEAD_OPEN = "<head>"
HEAD_CLOSE = "</head>"
BODY_CLOSE = "</body>"

# Lone surrogates produced by surrogateescape decoding stand for bytes 0x80-0xFF
_RESTORE_OR_REFERENCE = "widget_proxy.restore_or_reference"
_ESCAPED_BYTE_OFFSET = 0xDC00
_ESCAPED_BYTE_LOW = 0xDC80
_ESCAPED_BYTE_HIGH = 0xDCFF


class DocumentRewriter(Protocol):
    """Protocol for HTML rewriters used by the proxy."""

    def rewrite(
        self,
        document: str,
        target: ParsedUrl,
        target_url: str,
        widget_markup: str,
    ) -> str:
        """Rewrite a proxied HTML document.

        Args:
            document: Upstream HTML.
            target: Parsed target URL.
            target_url: Normalized target URL, used as the document base.
            widget_markup: Snippet to inject.

        Returns:
            Rewritten HTML.
        """
        ...


class FirstMatchRewriter:
    """Substring rewriter with first-occurrence-only semantics."""

    def rewrite(
        self,
        document: str,
        target: ParsedUrl,
        target_url: str,
        widget_markup: str,
    ) -> str:
        """Absolutize links, add a base tag and inject the widget."""
        document = absolutize_root_relative(document, target.origin)
        document = insert_base_tag(document, target_url)
        return inject_widget(document, widget_markup)


def absolutize_root_relative(document: str, origin: str) -> str:
    """Prefix the first root-relative href and the first root-relative src.

    Args:
        document: HTML text.
        origin: Scheme and authority of the target, without trailing slash.

    Returns:
        HTML with at most one href and one src rewritten.
    """
    document = _ROOT_RELATIVE_HREF.sub(
        lambda m: f'href="{origin}/{m.group(1)}"', document, count=1
    )
    return _ROOT_RELATIVE_SRC.sub(
        lambda m: f'src="{origin}/{m.group(1)}"', document, count=1
    )


def insert_base_tag(document: str, base_url: str) -> str:
    """Insert a ``<base>`` tag right after the first ``<head>`` tag, if any."""
    if HEAD_OPEN not in document:
        return document
    base_tag = f'<base href="{html.escape(base_url, quote=True)}">'
    return document.replace(HEAD_OPEN, f"{HEAD_OPEN}{base_tag}", 1)


def inject_widget(document: str, markup: str) -> str:
    """Place markup before ``</head>``, else before ``</body>``, else at the end."""
    if HEAD_CLOSE in document:
        return document.replace(HEAD_CLOSE, f"{markup}{HEAD_CLOSE}", 1)
    if BODY_CLOSE in document:
        return document.replace(BODY_CLOSE, f"{markup}{BODY_CLOSE}", 1)
    return document + markup


def encode_document(document: str, encoding: str) -> bytes:
    """Encode a rewritten page with the charset it was decoded from.

    Lone surrogates left by ``surrogateescape`` decoding turn back into the
    original bytes. Other characters the charset cannot hold become numeric
    character references.
    """
    return document.encode(encoding, errors=_RESTORE_OR_REFERENCE)


def _restore_or_reference(exc: UnicodeError) -> tuple[bytes, int]:
    """Codec error handler used by ``encode_document``."""
    if not isinstance(exc, UnicodeEncodeError):
        raise exc
    out = bytearray()
    for char in exc.object[exc.start : exc.end]:
        point = ord(char)
        if _ESCAPED_BYTE_LOW <= point <= _ESCAPED_BYTE_HIGH:
            out.append(point - _ESCAPED_BYTE_OFFSET)
        else:
            out += f"&#{point};".encode("ascii")
    return bytes(out), exc.end


codecs.register_error(_RESTORE_OR_REFERENCE, _restore_or_reference)
