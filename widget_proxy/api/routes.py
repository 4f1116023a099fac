"""HTTP routes for the proxy and its health check."""

import uuid

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from widget_proxy.observability import bind_request_context, clear_request_context
from widget_proxy.proxy import PROXY_PATH, ProxyMetrics, ProxyRequest, ProxyService
from widget_proxy.proxy.constants import DEFAULT_CLIENT_ID


PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

router = APIRouter()


def client_id_from(request: Request) -> str:
    """Rate-limit key: first X-Forwarded-For entry, else the peer address."""
    forwarded_for = request.headers.get("x-forwarded-for", "")
    first = forwarded_for.split(",")[0].strip()
    if first:
        return first
    if request.client is not None and request.client.host:
        return request.client.host
    return DEFAULT_CLIENT_ID


def public_origin_from(request: Request, default_host: str) -> str:
    """Scheme and host the caller used to reach the proxy."""
    proto = request.headers.get("x-forwarded-proto", "").split(",")[0].strip()
    host = request.headers.get("host", "").strip()
    return f"{proto or 'http'}://{host or default_host}"


@router.api_route(PROXY_PATH, methods=PROXY_METHODS)
async def proxy(request: Request) -> Response:
    """Fetch a third-party page and return it ready for embedding."""
    service: ProxyService = request.app.state.proxy_service
    settings = request.app.state.settings

    client_id = client_id_from(request)
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    bind_request_context(request_id=request_id, client_id=client_id)
    try:
        proxy_request = ProxyRequest.from_query(
            request.query_params.multi_items(),
            method=request.method,
            client_id=client_id,
            public_origin=public_origin_from(request, settings.default_public_host),
            request_path=request.url.path,
        )
        result = await service.handle(proxy_request)
    finally:
        clear_request_context()

    headers = {**result.headers, "Content-Type": result.content_type}
    return Response(
        content=result.body, status_code=result.status_code, headers=headers
    )


@router.get("/health")
async def health(request: Request) -> JSONResponse:
    """Report liveness with rate-limiter and request counters."""
    rate_limiter = request.app.state.rate_limiter
    payload: dict[str, object] = {
        "status": "ok",
        "rate_limiter": {
            "clients": rate_limiter.size,
            "rejected": rate_limiter.rejected_count,
        },
        "proxy": ProxyMetrics.get_instance().to_dict(),
    }
    return JSONResponse(content=payload)
