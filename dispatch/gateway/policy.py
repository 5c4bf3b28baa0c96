"""Redirect policy for upstream asset downloads.

GitHub answers a download with a redirect to its blob storage. The gateway
follows at most two such hops, and only to the storage domain or one of its
subdomains.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["DEFAULT_POLICY", "MAX_REDIRECTS", "STORAGE_DOMAINS", "RedirectPolicy"]

MAX_REDIRECTS = 2
STORAGE_DOMAINS: tuple[str, ...] = ("githubusercontent.com",)


@dataclass(frozen=True, slots=True)
class RedirectPolicy:
    """Which redirects an upstream fetch may follow.

    Attributes:
        max_hops: Highest 1-indexed hop number allowed.
        allowed_domains: Domains whose exact name or subdomains may be targeted.
    """

    max_hops: int = MAX_REDIRECTS
    allowed_domains: tuple[str, ...] = STORAGE_DOMAINS

    def host_allowed(self, host: str) -> bool:
        # Suffix match on a label boundary: "evilgithubusercontent.com" is not
        # a subdomain of "githubusercontent.com".
        host = host.lower().rstrip(".")
        for domain in self.allowed_domains:
            if host == domain or host.endswith("." + domain):
                return True
        return False

    def allow(self, host: str, hop: int) -> bool:
        return 0 < hop <= self.max_hops and self.host_allowed(host)


DEFAULT_POLICY = RedirectPolicy()
