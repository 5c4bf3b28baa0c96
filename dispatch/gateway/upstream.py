"""Policy-bound HTTP client for fetching asset bytes.

This module provides:
- UpstreamClient: Protocol for opening an asset download (injectable for tests)
- RealUpstreamClient: urllib opener that follows redirects only as the
  RedirectPolicy allows
- MockUpstreamClient: canned bodies keyed by URL
"""

from __future__ import annotations

import io
import ssl
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Iterator
from dataclasses import dataclass
from email.message import Message
from typing import IO, Literal, Protocol, runtime_checkable

from dispatch.core.result import Err, Ok, Result
from dispatch.gateway.policy import DEFAULT_POLICY, RedirectPolicy
from dispatch.github.http import USER_AGENT

__all__ = [
    "CHUNK_SIZE",
    "MockUpstreamClient",
    "PolicyRedirectHandler",
    "RealUpstreamClient",
    "RedirectRejected",
    "UpstreamClient",
    "UpstreamError",
    "UpstreamResponse",
]

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class UpstreamError:
    kind: Literal["redirect_rejected", "status", "network"]
    url: str
    message: str
    status: int = 0

    def __str__(self) -> str:
        if self.status:
            return f"{self.kind}: HTTP {self.status} {self.message} ({self.url})"
        return f"{self.kind}: {self.message} ({self.url})"


class RedirectRejected(Exception):
    """Raised inside the opener when the policy refuses a redirect."""

    def __init__(self, target: str, hop: int, code: int) -> None:
        super().__init__(f"redirect {hop} to {target} refused (HTTP {code})")
        self.target = target
        self.hop = hop
        self.code = code


class PolicyRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Follow redirects only while the RedirectPolicy allows it.

    A refused redirect stops the chain at the 3xx response already received.
    Authorization is dropped whenever the next hop targets a different host.
    """

    def __init__(self, policy: RedirectPolicy) -> None:
        super().__init__()
        self.policy = policy

    def redirect_request(
        self,
        req: urllib.request.Request,
        fp: IO[bytes],
        code: int,
        msg: str,
        headers: Message,
        newurl: str,
    ) -> urllib.request.Request | None:
        # redirect_dict counts distinct URLs, so a loop back to a visited URL
        # would not advance it. Hops are counted on the request chain instead.
        hop = getattr(req, "redirect_hops", 0) + 1
        host = urllib.parse.urlsplit(newurl).hostname or ""
        if not self.policy.allow(host, hop):
            fp.close()
            raise RedirectRejected(newurl, hop, code)

        new = super().redirect_request(req, fp, code, msg, headers, newurl)
        if new is None:
            return None
        new.redirect_hops = hop  # type: ignore[attr-defined]
        if host != urllib.parse.urlsplit(req.full_url).hostname:
            new.remove_header("Authorization")
        return new


class UpstreamResponse:
    """An open download.

    Attributes:
        status: Final HTTP status after redirects.
        length: Content-Length announced upstream, if any.
        reported_type: Content-Type announced upstream (never served).
    """

    def __init__(
        self,
        stream: IO[bytes],
        *,
        status: int = 200,
        length: int | None = None,
        reported_type: str | None = None,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        self.status = status
        self.length = length
        self.reported_type = reported_type
        self._stream = stream
        self._chunk_size = chunk_size

    def iter_chunks(self) -> Iterator[bytes]:
        try:
            while chunk := self._stream.read(self._chunk_size):
                yield chunk
        finally:
            self.close()

    def close(self) -> None:
        self._stream.close()


@runtime_checkable
class UpstreamClient(Protocol):
    def open(self, url: str) -> Result[UpstreamResponse, UpstreamError]:
        """Start downloading url."""
        ...


def _parse_length(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        length = int(value)
    except ValueError:
        return None
    return length if length >= 0 else None


class RealUpstreamClient:
    """urllib client bound to a RedirectPolicy.

    Args:
        policy: Redirect policy, fixed for the client's lifetime
        token: Sent as ``Authorization: token ...`` when set (private repos only)
        timeout: Socket timeout in seconds
    """

    def __init__(
        self,
        policy: RedirectPolicy = DEFAULT_POLICY,
        token: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.policy = policy
        self.timeout = timeout
        self.headers: dict[str, str] = {}
        if token:
            self.headers = {
                "Authorization": f"token {token}",
                "User-Agent": USER_AGENT,
                "Accept": "application/octet-stream",
            }
        self._opener = urllib.request.build_opener(
            urllib.request.HTTPSHandler(context=ssl.create_default_context()),
            PolicyRedirectHandler(policy),
        )

    def open(self, url: str) -> Result[UpstreamResponse, UpstreamError]:
        req = urllib.request.Request(url, headers=self.headers, method="GET")
        try:
            response = self._opener.open(req, timeout=self.timeout)
        except RedirectRejected as e:
            return Err(UpstreamError(kind="redirect_rejected", url=url, message=str(e)))
        except urllib.error.HTTPError as e:
            e.close()
            return Err(UpstreamError(kind="status", url=url, message=str(e.reason), status=e.code))
        except urllib.error.URLError as e:
            return Err(UpstreamError(kind="network", url=url, message=str(e.reason)))
        except TimeoutError:
            return Err(UpstreamError(kind="network", url=url, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(UpstreamError(kind="network", url=url, message=str(e)))

        return Ok(
            UpstreamResponse(
                response,
                status=response.status,
                length=_parse_length(response.headers.get("Content-Length")),
                reported_type=response.headers.get("Content-Type"),
            )
        )


class MockUpstreamClient:
    """Mock upstream for testing.

    Usage:
        upstream = MockUpstreamClient()
        upstream.set_body("https://example.com/boot.efi", b"MZ...", "application/octet-stream")
    """

    def __init__(self) -> None:
        self._bodies: dict[str, tuple[bytes, str | None] | UpstreamError] = {}
        self.calls: list[str] = []

    def set_body(self, url: str, body: bytes, reported_type: str | None = None) -> None:
        self._bodies[url] = (body, reported_type)

    def set_error(self, url: str, error: UpstreamError) -> None:
        self._bodies[url] = error

    def open(self, url: str) -> Result[UpstreamResponse, UpstreamError]:
        self.calls.append(url)
        entry = self._bodies.get(url)
        if entry is None:
            return Err(
                UpstreamError(kind="status", url=url, message="Not Found (mock)", status=404)
            )
        if isinstance(entry, UpstreamError):
            return Err(entry)
        body, reported_type = entry
        return Ok(
            UpstreamResponse(
                io.BytesIO(body),
                length=len(body),
                reported_type=reported_type,
                chunk_size=4,
            )
        )
