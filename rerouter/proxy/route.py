"""
Next hop for requests decorated by the ReRouter middleware.

The middleware has already rewritten scheme, host and path in the scope; this
handler forwards the request to that URL and streams the response back.
"""

import logging
from typing import AsyncIterator, Dict

import httpx
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response, StreamingResponse
from opentelemetry import trace

from rerouter import vars as settings
from rerouter.engine.domains import SemanticDomain
from rerouter.middleware import REWRITTEN_STATE_KEY
from rerouter.models import RequestURL

router = APIRouter()
tracer = trace.get_tracer(__name__)
logger = logging.getLogger("uvicorn.error")

# Hop-by-hop headers that should NOT be forwarded (RFC 2616)
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}


def get_target_url(request: Request) -> str:
    """
    Resolve where a request goes next.

    Only requests the middleware rewrote are sent to the URL left in the
    scope, and only when that URL points at the canonical GitHub host. The
    Host header of anything else is client controlled, so it goes to the
    configured upstream, or is refused when there is none.
    """
    url = RequestURL.from_scope(request.scope)
    rewritten = getattr(request.state, REWRITTEN_STATE_KEY, False)
    if rewritten and url.host == SemanticDomain.GITHUB.canonical_host():
        return str(url)

    if not settings.REROUTER_UPSTREAM_URL:
        raise HTTPException(
            status_code=421,
            detail=f"No upstream configured for host {url.host!r}",
        )

    target_url = f"{settings.REROUTER_UPSTREAM_URL}{url.raw_path or '/'}"
    if url.query:
        target_url = f"{target_url}?{url.query}"
    return target_url


def prepare_headers(request: Request) -> Dict[str, str]:
    """
    Prepare headers for forwarding to the next hop.
    Removes hop-by-hop headers and adds X-Forwarded-* headers.
    """
    headers = {}
    for name, value in request.headers.items():
        if name.lower() not in HOP_BY_HOP_HEADERS:
            headers[name] = value

    client_ip = request.client.host if request.client else "unknown"
    existing_xff = headers.get("x-forwarded-for", "")
    headers["x-forwarded-for"] = f"{existing_xff}, {client_ip}".strip(", ")
    headers["x-forwarded-host"] = request.headers.get("host", "")
    headers["x-forwarded-proto"] = request.url.scheme
    return headers


async def stream_response(response: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in response.aiter_raw():
            yield chunk
    finally:
        await response.aclose()


async def forward_request(request: Request) -> Response:
    if not settings.FORWARD_ENABLED:
        raise HTTPException(
            status_code=503, detail="Forwarding is disabled (FORWARD_ENABLED=false)."
        )

    with tracer.start_as_current_span("forward_request") as span:
        target_url = get_target_url(request)
        span.set_attribute("proxy.target_url", target_url)
        span.set_attribute("proxy.method", request.method)

        logger.debug(f"[Proxy] Forwarding {request.method} -> {target_url}")

        headers = prepare_headers(request)
        body = await request.body()

        client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.PROXY_TIMEOUT),
            follow_redirects=False,
        )
        try:
            upstream_request = client.build_request(
                method=request.method,
                url=target_url,
                headers=headers,
                content=body,
            )
            response = await client.send(upstream_request, stream=True)
        except httpx.TimeoutException as e:
            await client.aclose()
            logger.error(f"[Proxy] Timeout for {target_url}: {e}")
            span.set_attribute("proxy.error", "timeout")
            raise HTTPException(status_code=504, detail="Gateway timeout")
        except httpx.ConnectError as e:
            await client.aclose()
            logger.error(f"[Proxy] Failed to connect to {target_url}: {e}")
            span.set_attribute("proxy.error", "connection_failed")
            raise HTTPException(
                status_code=502, detail="Bad gateway - cannot connect to target"
            )
        except Exception as e:
            await client.aclose()
            logger.error(f"[Proxy] Error for {target_url}: {e}", exc_info=True)
            span.set_attribute("proxy.error", str(e))
            raise HTTPException(status_code=502, detail=f"Bad gateway: {str(e)}")

        span.set_attribute("proxy.status_code", response.status_code)

        response_headers = {
            name: value
            for name, value in response.headers.items()
            if name.lower() not in HOP_BY_HOP_HEADERS
        }
        content_type = response.headers.get("content-type", "")

        async def body_iterator() -> AsyncIterator[bytes]:
            try:
                async for chunk in stream_response(response):
                    yield chunk
            finally:
                await client.aclose()

        return StreamingResponse(
            body_iterator(),
            status_code=response.status_code,
            headers=response_headers,
            media_type=content_type or None,
        )


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"],
)
async def forward_all(request: Request, path: str):
    """Catch-all route that forwards every request to its rewritten URL."""
    return await forward_request(request)
