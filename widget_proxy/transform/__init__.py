"""HTML rewriting and widget injection for proxied pages."""

from widget_proxy.transform.rewriter import (
    DocumentRewriter,
    FirstMatchRewriter,
    absolutize_root_relative,
    encode_document,
    inject_widget,
    insert_base_tag,
)
from widget_proxy.transform.widget import (
    PROXY_CONTROL_PARAMS,
    WidgetVersion,
    build_widget_markup,
    collect_passthrough_params,
)


__all__ = [
    # Rewriting
    "DocumentRewriter",
    "FirstMatchRewriter",
    "absolutize_root_relative",
    "insert_base_tag",
    "inject_widget",
    "encode_document",
    # Widget
    "WidgetVersion",
    "PROXY_CONTROL_PARAMS",
    "build_widget_markup",
    "collect_passthrough_params",
]
