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
from dispatch.github.models import Report
from dispatch.github.reports import load_report
from dispatch.output.console import Style


def _build_report(
    ctx: CLIContext,
    *,
    file: Path | None,
    title: str | None,
    body: str | None,
    body_file: Path | None,
    labels: list[str],
    assignees: list[str],
    milestone: str | None,
) -> Report:
    if file is not None:
        loaded = load_report(file, body_file=body_file)
        if isinstance(loaded, Err):
            ctx.console.error(loaded.error.message)
            exit_with_code(ErrorCode.USER_ERROR)
        report = loaded.value
    else:
        if not title:
            ctx.console.error("a report needs --title or --file")
            exit_with_code(ErrorCode.USER_ERROR)
        if body_file is not None:
            try:
                body = body_file.read_text(encoding="utf-8")
            except OSError as e:
                ctx.console.error(f"cannot read {body_file}: {e}")
                exit_with_code(ErrorCode.IO_ERROR)
        report = Report(title=title, body=body)

    # Command line values win over the file, the file over dispatch.toml.
    defaults = ctx.config.report
    return Report(
        title=title or report.title,
        body=report.body if body is None else body,
        labels=tuple(labels) if labels else (report.labels or defaults.labels or None),
        assignees=(
            tuple(assignees) if assignees else (report.assignees or defaults.assignees or None)
        ),
        milestone=milestone or report.milestone,
    )


def report(
    title: str | None = typer.Option(None, "--title", help="Issue title."),
    body: str | None = typer.Option(None, "--body", help="Issue body."),
    body_file: Path | None = typer.Option(
        None, "--body-file", help="Read the issue body from a file."
    ),
    label: list[str] = typer.Option([], "--label", "-l", help="Label (repeatable)."),
    assignee: list[str] = typer.Option([], "--assignee", "-a", help="Assignee (repeatable)."),
    milestone: str | None = typer.Option(None, "--milestone", "-m", help="Milestone title."),
    file: Path | None = typer.Option(
        None, "--file", "-f", help="Read the report from a TOML file."
    ),
    owner: str | None = typer.Option(None, "--owner", "-o", help="Repository owner."),
    repo: str | None = typer.Option(None, "--repo", "-r", help="Repository name."),
    token: str | None = typer.Option(None, "--token", envvar="GITHUB_TOKEN", help="GitHub token."),
    api_url: str | None = typer.Option(None, "--api-url", help="GitHub API base URL."),
    config: Path | None = typer.Option(None, "--config", help="Path to dispatch.toml."),
) -> None:
    """File a test report as an issue."""
    ctx = build_context(config)
    issue_report = _build_report(
        ctx,
        file=file,
        title=title,
        body=body,
        body_file=body_file,
        labels=label,
        assignees=assignee,
        milestone=milestone,
    )
    ref = resolve_repo(ctx, owner, repo, api_url)
    credential = login(ctx, token)
    catalog = connect_catalog(ctx, ref, credential)

    if issue_report.milestone and catalog.resolve_milestone(issue_report.milestone) is None:
        ctx.console.warning(f"milestone '{issue_report.milestone}' not found; filing without it")

    result = catalog.submit_report(issue_report)
    if isinstance(result, Err):
        code = (
            ErrorCode.NETWORK_ERROR if result.error.kind == "network" else ErrorCode.UPSTREAM_ERROR
        )
        exit_on_error(result, ctx, code)
        exit_with_code(code)

    issue = result.value
    ctx.console.success(f"filed: {issue_report.title}")
    if issue.url:
        ctx.console.print(issue.url, Style.DIM)
