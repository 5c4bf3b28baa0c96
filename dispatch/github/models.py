"""Domain types for releases, milestones and reports.

Release assets are tagged on GitHub with a *dispatch MIME* such as
``application/vnd.dispatch+efi``. Only those three tags are recognised; each
maps to the exact content type UEFI firmware expects when it downloads the
file. Anything else attached to a release is never served.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from dispatch.core.structured import StrDict, get_int, get_str

__all__ = [
    "Asset",
    "Classified",
    "ContentType",
    "Issue",
    "MilestoneIndex",
    "RepoRef",
    "Report",
    "Unrecognized",
    "classify",
    "parse_asset",
]


class ContentType(Enum):
    """Closed set of servable asset types.

    The value is the dispatch MIME a release asset carries upstream.
    """

    EFI = "application/vnd.dispatch+efi"
    ISO = "application/vnd.dispatch+iso"
    IMG = "application/vnd.dispatch+img"

    @property
    def boot_mime(self) -> str:
        """The content type required by UEFI."""
        return _BOOT_MIME[self]

    @property
    def rank(self) -> int:
        return _RANK[self]

    def __str__(self) -> str:
        return self.name.lower()


_BOOT_MIME: Mapping[ContentType, str] = MappingProxyType(
    {
        ContentType.EFI: "application/efi",
        ContentType.ISO: "application/vnd.efi-iso",
        ContentType.IMG: "application/vnd.efi-img",
    }
)
_RANK: Mapping[ContentType, int] = MappingProxyType(
    {member: i for i, member in enumerate(ContentType)}
)


@dataclass(frozen=True, slots=True)
class Unrecognized:
    """A declared MIME outside the dispatch vocabulary."""

    mime: str


type Classified = ContentType | Unrecognized


def classify(mime: str) -> Classified:
    """Map a freeform upstream MIME onto the closed set.

    Matching is exact; GitHub stores the content type given at upload time.
    """
    try:
        return ContentType(mime)
    except ValueError:
        return Unrecognized(mime)


@dataclass(frozen=True, slots=True)
class Asset:
    """One servable file of a release."""

    name: str
    size: int
    url: str
    content_type: ContentType

    def sort_key(self) -> tuple[str, int, str, int]:
        return (self.name, self.size, self.url, self.content_type.rank)


def parse_asset(entry: Mapping[str, object]) -> Asset | Unrecognized | None:
    """Build an Asset from one element of a release's ``assets`` array.

    Returns:
        Asset when recognised, Unrecognized for foreign MIME types, and None
        when the entry is missing required fields.
    """
    name = get_str(entry, "name")
    url = get_str(entry, "browser_download_url")
    size = get_int(entry, "size")
    mime = entry.get("content_type")
    if name is None or url is None or size is None or not isinstance(mime, str):
        return None

    match classify(mime):
        case ContentType() as content_type:
            return Asset(name=name, size=size, url=url, content_type=content_type)
        case Unrecognized() as other:
            return other


@dataclass(frozen=True, slots=True)
class RepoRef:
    """A GitHub repository and the API endpoints dispatch uses on it."""

    owner: str
    repo: str
    api_url: str = "https://api.github.com"

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def base(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}"

    def milestones_url(self, page: int, per_page: int) -> str:
        return f"{self.base}/milestones?state=all&per_page={per_page}&page={page}"

    def release_url(self, tag: str) -> str:
        return f"{self.base}/releases/tags/{tag}"

    def issues_url(self) -> str:
        return f"{self.base}/issues"


@dataclass(frozen=True, slots=True)
class MilestoneIndex:
    """Milestone title to number, frozen once loaded.

    Attributes:
        by_title: Read-only mapping of title to milestone number.
        duplicates: Titles that appeared more than once while paginating.
            The last entry seen wins; GitHub does not define which one should.
    """

    by_title: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    duplicates: frozenset[str] = frozenset()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, int]]) -> MilestoneIndex:
        index: dict[str, int] = {}
        seen_twice: set[str] = set()
        for title, number in pairs:
            if title in index:
                seen_twice.add(title)
            index[title] = number
        return cls(by_title=MappingProxyType(index), duplicates=frozenset(seen_twice))

    def get(self, title: str) -> int | None:
        return self.by_title.get(title)

    def __len__(self) -> int:
        return len(self.by_title)

    def __contains__(self, title: object) -> bool:
        return title in self.by_title


@dataclass(frozen=True, slots=True)
class Report:
    """A pass/fail test report to file as an issue.

    ``milestone`` is a title; it is resolved to a number at submission time.
    """

    title: str
    body: str | None = None
    labels: tuple[str, ...] | None = None
    assignees: tuple[str, ...] | None = None
    milestone: str | None = None


@dataclass(frozen=True, slots=True)
class Issue:
    number: int | None
    url: str | None

    @classmethod
    def from_payload(cls, data: StrDict | None) -> Issue:
        if data is None:
            return cls(number=None, url=None)
        return cls(number=get_int(data, "number"), url=get_str(data, "html_url"))
