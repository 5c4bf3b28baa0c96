"""Run the gateway under uvicorn.

uvicorn accepts connections on one loop and serves each independently; a
failing connection is closed without affecting the listener.
"""

from __future__ import annotations

import uvicorn

from dispatch.gateway.context import GatewayContext
from dispatch.gateway.service import create_app

__all__ = ["build_server", "serve"]


def build_server(context: GatewayContext, host: str, port: int) -> uvicorn.Server:
    config = uvicorn.Config(
        create_app(context),
        host=host,
        port=port,
        log_level="warning",
        access_log=False,
        # Firmware clients speak plain HTTP/1.1.
        http="h11",
        lifespan="off",
    )
    return uvicorn.Server(config)


def serve(context: GatewayContext, host: str, port: int) -> None:
    """Serve until the process is interrupted."""
    context.status.note(f"serving {context.catalog.repo} on http://{host}:{port}/")
    build_server(context, host, port).run()
