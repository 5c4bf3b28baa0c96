"""HTTP service answering boot firmware.

Each request is mapped to an asset, fetched upstream through the policy-bound
client and streamed back unmodified. The Content-Type is always the asset's
boot MIME: firmware rejects the generic type GitHub's storage reports.
"""

from __future__ import annotations

import http.client
from collections.abc import Iterator

from fastapi import FastAPI, Request
from fastapi.responses import Response, StreamingResponse

from dispatch import __version__
from dispatch.core.result import Err
from dispatch.gateway.context import GatewayContext
from dispatch.gateway.upstream import UpstreamResponse
from dispatch.github.models import Asset

__all__ = ["create_app"]


def _client_address(request: Request) -> str:
    if request.client is None:
        return "unknown"
    return request.client.host


def _relay(
    context: GatewayContext,
    client: str,
    asset: Asset,
    upstream: UpstreamResponse,
    length: int,
) -> Iterator[bytes]:
    sent = 0
    try:
        for chunk in upstream.iter_chunks():
            sent += len(chunk)
            yield chunk
    except (OSError, http.client.HTTPException) as e:
        context.status.connection_failed(
            client, f"{asset.name}: stream aborted after {sent} bytes: {e}"
        )
        raise

    # An upstream that closes early ends the read loop without an error.
    if sent < length:
        context.status.connection_failed(
            client, f"{asset.name}: upstream ended after {sent} of {length} bytes"
        )
        return
    context.status.connection_finished(client, asset.name, sent)


def create_app(context: GatewayContext) -> FastAPI:
    """Build the ASGI app serving the assets of ``context``."""
    app = FastAPI(
        title="dispatch",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # Firmware probes with HEAD before GET; the catalog size answers it
    # without touching upstream.
    @app.head("/{path:path}")
    def describe_asset(path: str) -> Response:  # pyright: ignore[reportUnusedFunction]
        asset = context.lookup(path)
        if asset is None:
            return Response(status_code=404)
        return Response(
            media_type=asset.content_type.boot_mime,
            headers={"Content-Length": str(asset.size)},
        )

    # A plain def route runs in the thread pool, so the blocking upstream open
    # never stalls other connections.
    @app.get("/{path:path}")
    def serve_asset(  # pyright: ignore[reportUnusedFunction]
        path: str, request: Request
    ) -> Response:
        client = _client_address(request)

        asset = context.lookup(path)
        if asset is None:
            context.status.connection_failed(client, f"no asset for /{path}")
            return Response(status_code=404)

        context.status.connection_started(client, asset.name)
        opened = context.upstream.open(asset.url)
        if isinstance(opened, Err):
            context.status.connection_failed(client, str(opened.error))
            return Response(status_code=502)

        upstream = opened.value
        length = upstream.length if upstream.length is not None else asset.size
        return StreamingResponse(
            _relay(context, client, asset, upstream, length),
            media_type=asset.content_type.boot_mime,
            headers={"Content-Length": str(length)},
        )

    return app
