"""Widget script markup injected into proxied pages."""

import html
from collections.abc import Iterable
from enum import Enum
from urllib.parse import urlencode


# Query parameters consumed by the proxy itself; all others go to the widget
PROXY_CONTROL_PARAMS = frozenset({"url", "test"})


class WidgetVersion(str, Enum):
    """Widget script generations served next to the proxy."""

    V1 = "v1"
    V2 = "v2"

    @classmethod
    def parse(cls, value: str | None) -> "WidgetVersion":
        """Read a ``widget_version`` parameter; anything but v2 means v1."""
        return cls.V2 if value == cls.V2.value else cls.V1

    @property
    def script_file(self) -> str:
        """File name of the widget script for this version."""
        return "widget-v2.js" if self is WidgetVersion.V2 else "widget.js"


def collect_passthrough_params(
    params: Iterable[tuple[str, str]],
) -> list[tuple[str, str]]:
    """Select the caller's query parameters meant for the widget.

    A repeated key keeps the position of its first occurrence and the value
    of its last, the way ``URLSearchParams.set`` behaves in the browser.

    Args:
        params: Caller query parameters in request order.

    Returns:
        Ordered (key, value) pairs, proxy control parameters excluded.
    """
    selected: dict[str, str] = {}
    for key, value in params:
        if key in PROXY_CONTROL_PARAMS:
            continue
        selected[key] = value
    return list(selected.items())


def build_widget_markup(
    public_origin: str,
    version: WidgetVersion,
    passthrough_params: list[tuple[str, str]],
    page_path: str,
) -> str:
    """Build the markup injected into a proxied HTML page.

    When passthrough parameters exist, a small script first rewrites the
    page address (without reloading) so the widget can read them from its
    own location.

    Args:
        public_origin: Scheme and host the caller used to reach the proxy.
        version: Widget version to load.
        passthrough_params: Parameters to expose to the widget.
        page_path: Path of the proxy endpoint as seen by the caller.

    Returns:
        HTML snippet with the optional address script and the widget tag.
    """
    widget_src = html.escape(f"{public_origin}/{version.script_file}", quote=True)
    widget_tag = f'<script src="{widget_src}"></script>'

    if not passthrough_params:
        return widget_tag

    page_url = f"{page_path}?{urlencode(passthrough_params)}"
    # urlencode leaves no quote or angle bracket in the query; escape the path
    page_url = page_url.replace("\\", "%5C").replace("'", "%27").replace("<", "%3C")
    update_script = f"<script>history.replaceState({{}}, '', '{page_url}');</script>"
    return f"{update_script}{widget_tag}"
