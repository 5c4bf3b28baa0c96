"""Tests for dispatch.github.auth module."""

from __future__ import annotations

import pytest

from dispatch.core.result import Err, Ok
from dispatch.github import auth as auth_mod
from dispatch.github.auth import AUTH_REMEDIATION, Credential, authenticate, gh_auth_token
from dispatch.platform.process import ProcessError


def _no_helper() -> str | None:
    return None


def _helper_called() -> str | None:
    raise AssertionError("helper must not be called when a token is given")


class TestAuthenticate:
    def test_argument_token_wins(self) -> None:
        result = authenticate("ghp_arg", helper=_helper_called)
        assert result == Ok(Credential(token="ghp_arg", source="argument"))

    def test_argument_is_stripped(self) -> None:
        result = authenticate("  ghp_arg\n", helper=_helper_called)
        assert isinstance(result, Ok)
        assert result.value.token == "ghp_arg"

    def test_blank_argument_falls_back_to_helper(self) -> None:
        result = authenticate("   ", helper=lambda: "gho_session")
        assert result == Ok(Credential(token="gho_session", source="gh"))

    def test_missing_everywhere_is_auth_required(self) -> None:
        result = authenticate(None, helper=_no_helper)

        assert isinstance(result, Err)
        assert result.error.kind == "auth_required"
        assert result.error.hint == AUTH_REMEDIATION

    def test_remediation_mentions_both_options(self) -> None:
        assert "gh auth login" in AUTH_REMEDIATION
        assert "GITHUB_TOKEN" in AUTH_REMEDIATION
        assert "Issues: Write" in AUTH_REMEDIATION

    def test_repr_hides_token(self) -> None:
        assert "ghp_secret" not in repr(Credential(token="ghp_secret", source="argument"))


class TestGhAuthToken:
    def test_gh_not_installed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(auth_mod.shutil, "which", lambda name: None)
        assert gh_auth_token() is None

    def test_returns_trimmed_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[list[str]] = []

        def fake_run(cmd: list[str], *, timeout: float | None = None):
            del timeout
            calls.append(cmd)
            return Ok("gho_session\n")

        monkeypatch.setattr(auth_mod.shutil, "which", lambda name: "/usr/bin/gh")
        monkeypatch.setattr(auth_mod, "run_process", fake_run)

        assert gh_auth_token() == "gho_session"
        assert calls == [["gh", "auth", "token"]]

    def test_not_logged_in(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_run(cmd: list[str], *, timeout: float | None = None):
            del timeout
            return Err(ProcessError(tuple(cmd), 1, "", "no oauth token found"))

        monkeypatch.setattr(auth_mod.shutil, "which", lambda name: "/usr/bin/gh")
        monkeypatch.setattr(auth_mod, "run_process", fake_run)

        assert gh_auth_token() is None

    def test_empty_output(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(auth_mod.shutil, "which", lambda name: "/usr/bin/gh")
        monkeypatch.setattr(auth_mod, "run_process", lambda cmd, *, timeout=None: Ok("\n"))

        assert gh_auth_token() is None
