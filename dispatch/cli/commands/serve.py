from __future__ import annotations

from pathlib import Path

import typer

from dispatch.cli.commands._helpers import connect_catalog, login, resolve_repo
from dispatch.cli.commands.assets import print_assets, resolve_assets
from dispatch.cli.context import build_context
from dispatch.gateway.context import build_context as build_gateway_context
from dispatch.gateway.server import serve as run_server
from dispatch.output.status import ConsoleStatusSink


def serve(
    tag: str = typer.Option(..., "--tag", "-t", help="Release tag to serve assets from."),
    filters: list[str] | None = typer.Argument(
        None, help="Keep assets whose name contains any of these."
    ),
    owner: str | None = typer.Option(None, "--owner", "-o", help="Repository owner."),
    repo: str | None = typer.Option(None, "--repo", "-r", help="Repository name."),
    token: str | None = typer.Option(None, "--token", envvar="GITHUB_TOKEN", help="GitHub token."),
    host: str | None = typer.Option(None, "--host", help="Listen address (default 0.0.0.0)."),
    port: int | None = typer.Option(None, "--port", "-p", help="Listen port (default 8080)."),
    api_url: str | None = typer.Option(None, "--api-url", help="GitHub API base URL."),
    config: Path | None = typer.Option(None, "--config", help="Path to dispatch.toml."),
) -> None:
    """Serve release assets to network-booting firmware."""
    ctx = build_context(config)
    ref = resolve_repo(ctx, owner, repo, api_url)
    credential = login(ctx, token)
    catalog = connect_catalog(ctx, ref, credential)

    assets = resolve_assets(ctx, catalog, tag, filters or [])
    ctx.console.header(f"{ref}@{tag}")
    print_assets(ctx, assets)
    if len(assets) == 1:
        ctx.console.info(f"every path serves {assets[0].name}")

    context = build_gateway_context(catalog, credential, assets, ConsoleStatusSink(ctx.console))
    run_server(context, host or ctx.config.server.host, port or ctx.config.server.port)
