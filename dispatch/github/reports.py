"""Report submitter: file a test report as a GitHub issue.

Milestones are linked best-effort. A report naming a milestone that does not
exist is still filed, just without the milestone.
"""

from __future__ import annotations

from pathlib import Path

from dispatch.core.config import ConfigError, parse_toml
from dispatch.core.result import Err, Ok, Result
from dispatch.core.structured import as_str_dict, get_str, get_str_list
from dispatch.github.errors import CatalogError, from_http_error
from dispatch.github.http import HttpClient
from dispatch.github.models import Issue, MilestoneIndex, RepoRef, Report

__all__ = ["build_issue_payload", "load_report", "submit_report"]


def build_issue_payload(report: Report, milestones: MilestoneIndex) -> dict[str, object]:
    """Build the JSON body for ``POST /issues``; unset fields are omitted."""
    payload: dict[str, object] = {"title": report.title}
    if report.body is not None:
        payload["body"] = report.body
    if report.labels is not None:
        payload["labels"] = list(report.labels)
    if report.assignees is not None:
        payload["assignees"] = list(report.assignees)
    if report.milestone is not None:
        number = milestones.get(report.milestone)
        if number is not None:
            payload["milestone"] = number
    return payload


def submit_report(
    http: HttpClient,
    repo: RepoRef,
    milestones: MilestoneIndex,
    report: Report,
) -> Result[Issue, CatalogError]:
    """Create one issue. Submitting twice creates two issues."""
    payload = build_issue_payload(report, milestones)
    result = http.post_json(repo.issues_url(), payload)
    if isinstance(result, Err):
        return result.map_err(from_http_error)
    return Ok(Issue.from_payload(as_str_dict(result.value)))


def load_report(path: Path, *, body_file: Path | None = None) -> Result[Report, ConfigError]:
    """Read a report from TOML.

    Expected keys: ``title`` (required), ``body``, ``labels``, ``assignees``,
    ``milestone``. When ``body_file`` is given its text replaces ``body``.
    """
    parsed = parse_toml(path)
    if isinstance(parsed, Err):
        return parsed
    data = parsed.value

    title = get_str(data, "title")
    if title is None:
        return Err(ConfigError("report is missing a title", path=path))

    body = data.get("body")
    if body is not None and not isinstance(body, str):
        return Err(ConfigError("report body must be a string", path=path))
    if body_file is not None:
        try:
            body = body_file.read_text(encoding="utf-8")
        except OSError as e:
            return Err(ConfigError(f"cannot read report body: {e}", path=body_file))

    labels = get_str_list(data, "labels")
    assignees = get_str_list(data, "assignees")
    if ("labels" in data and labels is None) or ("assignees" in data and assignees is None):
        return Err(ConfigError("labels and assignees must be lists of strings", path=path))

    return Ok(
        Report(
            title=title,
            body=body,
            labels=tuple(labels) if labels is not None else None,
            assignees=tuple(assignees) if assignees is not None else None,
            milestone=get_str(data, "milestone"),
        )
    )
