"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from dispatch.core.errors import ErrorCode
from dispatch.core.result import Err, Result
from dispatch.github.auth import Credential, authenticate
from dispatch.github.catalog import Catalog
from dispatch.github.http import RealHttpClient, api_headers
from dispatch.github.models import RepoRef
from dispatch.output.console import Style

if TYPE_CHECKING:
    from dispatch.cli.context import CLIContext


def exit_on_error[T, E](
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.UPSTREAM_ERROR,
) -> None:
    """Print the error and exit if result is Err.

    Expects error objects to have 'message' and optional 'hint' attributes.
    """
    if isinstance(result, Err):
        error = result.error
        message: str = getattr(error, "message", str(error))
        hint: str | None = getattr(error, "hint", None)
        ctx.console.error(message)
        if hint:
            ctx.console.print(f"hint: {hint}", Style.DIM)
        raise typer.Exit(code=int(error_code))


def exit_with_code(code: ErrorCode) -> NoReturn:
    raise typer.Exit(code=int(code))


def resolve_repo(
    ctx: CLIContext,
    owner: str | None,
    repo: str | None,
    api_url: str | None,
) -> RepoRef:
    """Combine command line options with [github] from the config file."""
    owner = owner or ctx.config.github.owner
    repo = repo or ctx.config.github.repo
    if not owner or not repo:
        ctx.console.error(
            "repository not set: pass --owner/--repo or set [github] in dispatch.toml"
        )
        exit_with_code(ErrorCode.USER_ERROR)
    return RepoRef(
        owner=owner,
        repo=repo,
        api_url=(api_url or ctx.config.github.api_url).rstrip("/"),
    )


def login(ctx: CLIContext, token: str | None) -> Credential:
    result = authenticate(token)
    if isinstance(result, Err):
        error = result.error
        ctx.console.print("No GitHub token found. Please authenticate with GitHub.", Style.BOLD)
        ctx.console.newline()
        if error.hint:
            ctx.console.print(error.hint)
            ctx.console.newline()
        ctx.console.error(error.message)
        exit_with_code(ErrorCode.AUTH_ERROR)
    return result.value


def connect_catalog(ctx: CLIContext, repo: RepoRef, credential: Credential) -> Catalog:
    """Build the catalog or exit: nothing works without milestones and visibility."""
    http = RealHttpClient(api_headers(credential.token))
    result = Catalog.connect(http, repo)
    if isinstance(result, Err):
        code = (
            ErrorCode.NETWORK_ERROR if result.error.kind == "network" else ErrorCode.UPSTREAM_ERROR
        )
        exit_on_error(result, ctx, code)
        exit_with_code(code)

    catalog = result.value
    for title in sorted(catalog.milestones.duplicates):
        ctx.console.warning(f"milestone title '{title}' is not unique; using the last one listed")
    return catalog
