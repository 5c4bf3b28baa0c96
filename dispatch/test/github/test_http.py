"""Tests for dispatch.github.http module."""

from __future__ import annotations

# pyright: reportPrivateUsage=false
import pytest

from dispatch.core.result import Err, Ok
from dispatch.github.http import (
    ACCEPT_GITHUB_JSON,
    USER_AGENT,
    HttpClient,
    HttpError,
    MockHttpClient,
    RealHttpClient,
    api_headers,
)


class TestApiHeaders:
    def test_without_token(self) -> None:
        headers = api_headers(None)
        assert headers == {"Accept": ACCEPT_GITHUB_JSON, "User-Agent": USER_AGENT}

    def test_with_token(self) -> None:
        assert api_headers("ghp_x")["Authorization"] == "Bearer ghp_x"

    def test_user_agent_is_product_slash_version(self) -> None:
        product, version = USER_AGENT.split("/")
        assert product == "dispatch"
        assert version


class TestHttpError:
    def test_str_with_status(self) -> None:
        error = HttpError(url="https://api.github.com/x", status=403, message="Forbidden")
        assert str(error) == "HTTP 403: Forbidden (https://api.github.com/x)"

    def test_str_without_status(self) -> None:
        error = HttpError(url="https://api.github.com/x", status=0, message="Timeout")
        assert str(error) == "Timeout (https://api.github.com/x)"

    def test_frozen(self) -> None:
        error = HttpError(url="u", status=1, message="m")
        with pytest.raises(AttributeError):
            error.status = 2  # type: ignore[misc]


class TestMockHttpClient:
    def test_isinstance_check(self) -> None:
        assert isinstance(MockHttpClient(), HttpClient)
        assert isinstance(RealHttpClient(api_headers(None)), HttpClient)

    def test_get_json_list(self) -> None:
        client = MockHttpClient()
        client.set_json("https://api.github.com/m", [{"title": "v1.0", "number": 1}])

        result = client.get_json("https://api.github.com/m")

        assert result == Ok([{"title": "v1.0", "number": 1}])

    def test_get_json_not_found(self) -> None:
        result = MockHttpClient().get_json("https://api.github.com/unknown")
        assert isinstance(result, Err)
        assert result.error.status == 404

    def test_post_records_payload(self) -> None:
        client = MockHttpClient()
        client.set_post("https://api.github.com/i", {"number": 9})

        result = client.post_json("https://api.github.com/i", {"title": "t"})

        assert result == Ok({"number": 9})
        assert client.posted == [("https://api.github.com/i", {"title": "t"})]
        assert client.count("POST") == 1
        assert client.count("GET") == 0

    def test_error_response(self) -> None:
        client = MockHttpClient()
        error = HttpError(url="https://api.github.com/i", status=422, message="Validation Failed")
        client.set_post("https://api.github.com/i", error)

        assert client.post_json("https://api.github.com/i", {}) == Err(error)


class TestRealHttpClientDecode:
    def test_empty_body_is_none(self) -> None:
        client = RealHttpClient(api_headers(None))
        assert client._decode("u", b"  ") == Ok(None)

    def test_invalid_json_is_decode_error(self) -> None:
        client = RealHttpClient(api_headers(None))
        result = client._decode("u", b"<html>")
        assert isinstance(result, Err)
        assert result.error.decode
        assert "JSON parse error" in result.error.message
