"""HTTP client abstraction for the GitHub REST API.

This module provides:
- HttpClient: Protocol for JSON requests (injectable for tests)
- RealHttpClient: urllib implementation carrying the API headers
- MockHttpClient: canned responses keyed by URL
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from dispatch import __version__
from dispatch.core.result import Err, Ok, Result

__all__ = [
    "ACCEPT_GITHUB_JSON",
    "USER_AGENT",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "api_headers",
]

USER_AGENT = f"dispatch/{__version__}"
ACCEPT_GITHUB_JSON = "application/vnd.github+json"


def api_headers(token: str | None) -> dict[str, str]:
    """Default headers for every API request."""
    headers = {"Accept": ACCEPT_GITHUB_JSON, "User-Agent": USER_AGENT}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network and decode errors)
        message: Human-readable error message
        decode: True when the response arrived but was not the JSON we expected
    """

    url: str
    status: int
    message: str
    decode: bool = False

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    def get_json(self, url: str) -> Result[object, HttpError]:
        """GET url and decode the JSON body."""
        ...

    def post_json(self, url: str, payload: Mapping[str, object]) -> Result[object, HttpError]:
        """POST payload as JSON and decode the JSON reply."""
        ...


class RealHttpClient:
    """HTTP client using urllib.

    Args:
        headers: Sent with every request (see api_headers)
        timeout: Request timeout in seconds
    """

    def __init__(self, headers: Mapping[str, str], timeout: float = 30.0) -> None:
        self.headers = dict(headers)
        self.timeout = timeout
        self._ssl_context = ssl.create_default_context()

    def _request(self, req: urllib.request.Request) -> Result[bytes, HttpError]:
        url = req.full_url
        try:
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                return Ok(response.read())
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def _decode(self, url: str, body: bytes) -> Result[object, HttpError]:
        if not body.strip():
            return Ok(None)
        try:
            data: object = json.loads(body.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}", decode=True))
        return Ok(data)

    def get_json(self, url: str) -> Result[object, HttpError]:
        req = urllib.request.Request(url, headers=self.headers, method="GET")
        result = self._request(req)
        if isinstance(result, Err):
            return result
        return self._decode(url, result.value)

    def post_json(self, url: str, payload: Mapping[str, object]) -> Result[object, HttpError]:
        headers = {**self.headers, "Content-Type": "application/json"}
        req = urllib.request.Request(
            url,
            data=json.dumps(payload).encode("utf-8"),
            headers=headers,
            method="POST",
        )
        result = self._request(req)
        if isinstance(result, Err):
            return result
        return self._decode(url, result.value)


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_json("https://api.github.com/repos/a/b", {"private": False})
        result = client.get_json("https://api.github.com/repos/a/b")
        assert result == Ok({"private": False})
    """

    def __init__(self) -> None:
        self._get_responses: dict[str, object | HttpError] = {}
        self._post_responses: dict[str, object | HttpError] = {}
        self.calls: list[tuple[str, str]] = []
        self.posted: list[tuple[str, dict[str, object]]] = []

    def set_json(self, url: str, response: object | HttpError) -> None:
        self._get_responses[url] = response

    def set_post(self, url: str, response: object | HttpError) -> None:
        self._post_responses[url] = response

    def get_json(self, url: str) -> Result[object, HttpError]:
        self.calls.append(("GET", url))
        if url not in self._get_responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        response = self._get_responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def post_json(self, url: str, payload: Mapping[str, object]) -> Result[object, HttpError]:
        self.calls.append(("POST", url))
        self.posted.append((url, dict(payload)))
        if url not in self._post_responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        response = self._post_responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def count(self, method: str, prefix: str = "") -> int:
        return sum(1 for m, u in self.calls if m == method and u.startswith(prefix))
