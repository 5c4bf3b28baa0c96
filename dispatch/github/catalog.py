"""Catalog resolver: milestones, repository visibility and release assets.

A Catalog is built once per process by ``Catalog.connect`` and is read-only
afterwards. The gateway and the report submitter share the same instance.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from dispatch.core.result import Err, Ok, Result
from dispatch.core.structured import as_obj_list, as_str_dict, get_int, get_str
from dispatch.github.errors import CatalogError, from_http_error
from dispatch.github.http import HttpClient
from dispatch.github.models import (
    Asset,
    Issue,
    MilestoneIndex,
    RepoRef,
    Report,
    Unrecognized,
    parse_asset,
)
from dispatch.github.reports import submit_report

__all__ = [
    "MILESTONES_PER_PAGE",
    "Catalog",
    "fetch_visibility",
    "filter_assets",
    "load_milestones",
]

MILESTONES_PER_PAGE = 100


def fetch_visibility(http: HttpClient, repo: RepoRef) -> Result[bool, CatalogError]:
    """Return True when the repository is private."""
    result = http.get_json(repo.base)
    if isinstance(result, Err):
        return result.map_err(from_http_error)

    data = as_str_dict(result.value)
    if data is None:
        return Err(CatalogError(kind="decode", message=f"unexpected repository payload: {repo}"))

    private = data.get("private")
    if not isinstance(private, bool):
        return Err(CatalogError(kind="decode", message=f"missing repository visibility: {repo}"))
    return Ok(private)


def load_milestones(http: HttpClient, repo: RepoRef) -> Result[MilestoneIndex, CatalogError]:
    """Load every milestone, open and closed, page by page.

    Pages are requested from 1 upwards until GitHub returns an empty page.
    """
    pairs: list[tuple[str, int]] = []
    page = 1
    while True:
        url = repo.milestones_url(page=page, per_page=MILESTONES_PER_PAGE)
        result = http.get_json(url)
        if isinstance(result, Err):
            return result.map_err(from_http_error)

        items = as_obj_list(result.value)
        if items is None:
            return Err(
                CatalogError(kind="decode", message="unexpected milestones payload", hint=url)
            )
        if not items:
            break

        for item in items:
            entry = as_str_dict(item)
            title = get_str(entry, "title") if entry is not None else None
            number = get_int(entry, "number") if entry is not None else None
            if title is None or number is None:
                return Err(
                    CatalogError(kind="decode", message="malformed milestone entry", hint=url)
                )
            pairs.append((title, number))

        page += 1

    return Ok(MilestoneIndex.from_pairs(pairs))


def filter_assets(assets: Sequence[Asset], filters: Sequence[str]) -> tuple[Asset, ...]:
    """Keep assets whose name contains any filter, then sort and de-duplicate.

    An empty filter list keeps everything. Matching is case-sensitive.
    """
    kept = {
        asset for asset in assets if not filters or any(f in asset.name for f in filters)
    }
    return tuple(sorted(kept, key=Asset.sort_key))


@dataclass(frozen=True, slots=True)
class Catalog:
    """Read-only view of one repository.

    Attributes:
        http: Client carrying the API headers (and token).
        repo: The repository.
        milestones: Title to number, loaded at construction.
        private: Whether downloads need the token.
    """

    http: HttpClient
    repo: RepoRef
    milestones: MilestoneIndex
    private: bool

    @classmethod
    def connect(cls, http: HttpClient, repo: RepoRef) -> Result[Catalog, CatalogError]:
        visibility = fetch_visibility(http, repo)
        if isinstance(visibility, Err):
            return visibility

        milestones = load_milestones(http, repo)
        if isinstance(milestones, Err):
            return milestones

        return Ok(cls(http=http, repo=repo, milestones=milestones.value, private=visibility.value))

    def list_assets(
        self, tag: str, filters: Sequence[str] = ()
    ) -> Result[tuple[Asset, ...], CatalogError]:
        """Fetch the release for ``tag`` and return its servable assets."""
        url = self.repo.release_url(tag)
        result = self.http.get_json(url)
        if isinstance(result, Err):
            return result.map_err(from_http_error)

        release = as_str_dict(result.value)
        entries = as_obj_list(release.get("assets")) if release is not None else None
        if entries is None:
            return Err(
                CatalogError(kind="decode", message=f"unexpected release payload: {tag}", hint=url)
            )

        assets: list[Asset] = []
        for item in entries:
            entry = as_str_dict(item)
            parsed = parse_asset(entry) if entry is not None else None
            match parsed:
                case Asset():
                    assets.append(parsed)
                case Unrecognized():
                    continue
                case None:
                    return Err(
                        CatalogError(
                            kind="decode", message=f"malformed asset entry in {tag}", hint=url
                        )
                    )

        return Ok(filter_assets(assets, filters))

    def resolve_milestone(self, title: str) -> int | None:
        return self.milestones.get(title)

    def submit_report(self, report: Report) -> Result[Issue, CatalogError]:
        return submit_report(self.http, self.repo, self.milestones, report)
