from __future__ import annotations

from pathlib import Path

import typer

from dispatch.cli.commands._helpers import (
    connect_catalog,
    exit_on_error,
    exit_with_code,
    login,
    resolve_repo,
)
from dispatch.cli.context import CLIContext, build_context
from dispatch.core.errors import ErrorCode
from dispatch.core.result import Err
from dispatch.github.catalog import Catalog
from dispatch.github.models import Asset
from dispatch.output.console import Style


def resolve_assets(
    ctx: CLIContext,
    catalog: Catalog,
    tag: str,
    filters: list[str],
) -> tuple[Asset, ...]:
    result = catalog.list_assets(tag, filters)
    if isinstance(result, Err):
        code = (
            ErrorCode.NETWORK_ERROR if result.error.kind == "network" else ErrorCode.UPSTREAM_ERROR
        )
        exit_on_error(result, ctx, code)
        exit_with_code(code)

    assets = result.value
    if not assets:
        ctx.console.error(f"release {tag} has no servable assets")
        if filters:
            ctx.console.print(f"filters: {', '.join(filters)}", Style.DIM)
        exit_with_code(ErrorCode.USER_ERROR)
    return assets


def print_assets(ctx: CLIContext, assets: tuple[Asset, ...]) -> None:
    for asset in assets:
        ctx.console.print(
            f"{asset.name:<32} {asset.content_type!s:<4} {asset.size:>12}  "
            f"{asset.content_type.boot_mime}"
        )


def assets(
    tag: str = typer.Option(..., "--tag", "-t", help="Release tag to list assets from."),
    filters: list[str] | None = typer.Argument(
        None, help="Keep assets whose name contains any of these."
    ),
    owner: str | None = typer.Option(None, "--owner", "-o", help="Repository owner."),
    repo: str | None = typer.Option(None, "--repo", "-r", help="Repository name."),
    token: str | None = typer.Option(None, "--token", envvar="GITHUB_TOKEN", help="GitHub token."),
    api_url: str | None = typer.Option(None, "--api-url", help="GitHub API base URL."),
    config: Path | None = typer.Option(None, "--config", help="Path to dispatch.toml."),
) -> None:
    """List the servable assets of a release."""
    ctx = build_context(config)
    ref = resolve_repo(ctx, owner, repo, api_url)
    credential = login(ctx, token)
    catalog = connect_catalog(ctx, ref, credential)

    ctx.console.header(f"{ref}@{tag}")
    print_assets(ctx, resolve_assets(ctx, catalog, tag, filters or []))
