"""Request and response models for the proxy pipeline."""

import json
from collections.abc import Iterable
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from widget_proxy.proxy.constants import (
    DEFAULT_CLIENT_ID,
    DEFAULT_PUBLIC_ORIGIN,
    JSON_CONTENT_TYPE,
    PROXY_PATH,
)
from widget_proxy.transform import WidgetVersion, collect_passthrough_params


class ProxyRequest(BaseModel):
    """Inbound proxy call, built once from the request and read-only after.

    Attributes:
        target_url: Raw ``url`` parameter, None when absent.
        is_test_probe: True when ``test=true`` asks for a reachability probe.
        widget_version: Widget script generation to inject.
        passthrough_params: Caller parameters forwarded to the widget.
        method: Inbound HTTP method.
        client_id: Rate-limit key of the caller.
        public_origin: Scheme and host the caller used to reach the proxy.
        request_path: Path of the proxy endpoint as seen by the caller.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    target_url: str | None = None
    is_test_probe: bool = False
    widget_version: WidgetVersion = WidgetVersion.V1
    passthrough_params: tuple[tuple[str, str], ...] = ()
    method: str = "GET"
    client_id: str = Field(default=DEFAULT_CLIENT_ID, min_length=1)
    public_origin: str = DEFAULT_PUBLIC_ORIGIN
    request_path: str = PROXY_PATH

    @classmethod
    def from_query(
        cls,
        params: Iterable[tuple[str, str]],
        method: str = "GET",
        client_id: str = DEFAULT_CLIENT_ID,
        public_origin: str = DEFAULT_PUBLIC_ORIGIN,
        request_path: str = PROXY_PATH,
    ) -> "ProxyRequest":
        """Build a request from ordered query parameters.

        Control parameters take their first occurrence.

        Args:
            params: Query parameters in request order.
            method: Inbound HTTP method.
            client_id: Rate-limit key of the caller.
            public_origin: Scheme and host the caller used.
            request_path: Path of the proxy endpoint.

        Returns:
            ProxyRequest instance.
        """
        items = list(params)
        first: dict[str, str] = {}
        for key, value in items:
            first.setdefault(key, value)

        return cls(
            target_url=first.get("url"),
            is_test_probe=first.get("test") == "true",
            widget_version=WidgetVersion.parse(first.get("widget_version")),
            passthrough_params=tuple(collect_passthrough_params(items)),
            method=method.upper(),
            client_id=client_id or DEFAULT_CLIENT_ID,
            public_origin=public_origin,
            request_path=request_path,
        )


@dataclass
class ProxyResponse:
    """Outbound proxy result, emitted once as the handler output.

    Attributes:
        status_code: HTTP status for the caller.
        content_type: Content type of the body.
        body: Encoded response body.
        headers: Extra response headers (content type excluded).
    """

    status_code: int
    content_type: str
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def json(
        cls,
        status_code: int,
        payload: dict[str, object],
        headers: dict[str, str] | None = None,
    ) -> "ProxyResponse":
        """Build a JSON response."""
        return cls(
            status_code=status_code,
            content_type=JSON_CONTENT_TYPE,
            body=json.dumps(payload).encode("utf-8"),
            headers=dict(headers or {}),
        )

    def json_body(self) -> object:
        """Decode a JSON body (for tests and diagnostics)."""
        return json.loads(self.body)
