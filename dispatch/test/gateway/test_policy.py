"""Tests for dispatch.gateway.policy module."""

from __future__ import annotations

import pytest

from dispatch.gateway.policy import DEFAULT_POLICY, MAX_REDIRECTS, RedirectPolicy


class TestHostAllowed:
    @pytest.mark.parametrize(
        "host",
        [
            "githubusercontent.com",
            "objects.githubusercontent.com",
            "release-assets.githubusercontent.com",
            "a.b.githubusercontent.com",
            "Objects.GitHubUserContent.com",
            "objects.githubusercontent.com.",
        ],
    )
    def test_storage_hosts(self, host: str) -> None:
        assert DEFAULT_POLICY.host_allowed(host)

    @pytest.mark.parametrize(
        "host",
        [
            "evilgithubusercontent.com",
            "githubusercontent.com.evil.com",
            "githubusercontent.co",
            "github.com",
            "objects-githubusercontent.com",
            "",
        ],
    )
    def test_spoofed_and_foreign_hosts(self, host: str) -> None:
        assert not DEFAULT_POLICY.host_allowed(host)


class TestAllow:
    def test_default_bound_is_two_hops(self) -> None:
        assert MAX_REDIRECTS == 2
        assert DEFAULT_POLICY.allow("objects.githubusercontent.com", 1)
        assert DEFAULT_POLICY.allow("objects.githubusercontent.com", 2)
        assert not DEFAULT_POLICY.allow("objects.githubusercontent.com", 3)

    def test_hop_must_be_positive(self) -> None:
        assert not DEFAULT_POLICY.allow("githubusercontent.com", 0)

    def test_host_checked_on_every_hop(self) -> None:
        assert not DEFAULT_POLICY.allow("evilgithubusercontent.com", 1)

    def test_custom_policy(self) -> None:
        policy = RedirectPolicy(max_hops=1, allowed_domains=("example.org",))
        assert policy.allow("cdn.example.org", 1)
        assert not policy.allow("cdn.example.org", 2)
        assert not policy.allow("objects.githubusercontent.com", 1)

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_POLICY.max_hops = 10  # type: ignore[misc]
