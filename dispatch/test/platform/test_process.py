"""Tests for dispatch.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from dispatch.core.result import Err, Ok
from dispatch.platform.process import ProcessError, run


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(command=("gh", "auth"), returncode=1, stdout="", stderr="")
        assert str(error) == "gh auth failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("gh", "auth", "token", "--hostname", "github.com"),
            returncode=4,
            stdout="",
            stderr="not logged in",
        )
        assert str(error) == "gh auth token ... failed (exit 4)"


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('gho_abc')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert result.value.strip() == "gho_abc"

    def test_failure_returns_error(self) -> None:
        result = run([sys.executable, "-c", "import sys; sys.exit(4)"])

        assert isinstance(result, Err)
        assert result.error.returncode == 4

    def test_command_not_found(self) -> None:
        result = run(["nonexistent_command_12345"])

        assert isinstance(result, Err)
        assert result.error.returncode == -1

    def test_timeout(self) -> None:
        result = run([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)

        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr

    def test_error_is_frozen(self) -> None:
        error = ProcessError(("gh",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]
