"""Reverse proxy in front of the supervised presentation server."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from easyslide.supervisor import ProcessState


logger = logging.getLogger(__name__)

router = APIRouter()

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Headers that describe a single connection, or a body encoding httpx has already undone
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
    "host",
    "content-length",
    "content-encoding",
}

STARTING_MESSAGE = "Presentation server is starting, please retry in a few seconds."


def _forwardable(headers) -> list[tuple[str, str]]:
    return [(k, v) for k, v in headers.items() if k.lower() not in HOP_BY_HOP_HEADERS]


def upstream_error_response(exc: httpx.HTTPError) -> PlainTextResponse:
    """Map a failed upstream call onto the status the browser should see."""
    if isinstance(exc, httpx.ConnectError):
        return PlainTextResponse(STARTING_MESSAGE, status_code=503, headers={"Retry-After": "2"})
    if isinstance(exc, httpx.TimeoutException):
        return PlainTextResponse("Presentation server timed out.", status_code=504)
    return PlainTextResponse(f"Presentation server error: {exc}", status_code=502)


@router.api_route("/{path:path}", methods=PROXY_METHODS)
async def proxy_to_renderer(request: Request, path: str) -> Response:
    supervisor = request.app.state.supervisor
    if supervisor.state is not ProcessState.RUNNING:
        return PlainTextResponse(STARTING_MESSAGE, status_code=503, headers={"Retry-After": "2"})

    target = f"/{path}"
    if request.url.query:
        target = f"{target}?{request.url.query}"

    pid = supervisor.pid
    client: httpx.AsyncClient = request.app.state.http_client
    try:
        upstream = await client.request(
            request.method,
            target,
            headers=_forwardable(request.headers),
            content=await request.body(),
        )
    except httpx.HTTPError as e:
        logger.warning(f"Proxy {request.method} {target} failed: {e!r}")
        if supervisor.state is not ProcessState.RUNNING or supervisor.pid != pid:
            # the renderer was restarted under this request
            return PlainTextResponse(STARTING_MESSAGE, status_code=503, headers={"Retry-After": "2"})
        return upstream_error_response(e)

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        headers=dict(_forwardable(upstream.headers)),
    )
