"""Tests for dispatch.core.result module."""

from __future__ import annotations

import pytest

from dispatch.core.result import Err, Ok, Result, is_err, is_ok


def _parse_port(value: str) -> Result[int, str]:
    if not value.isdigit():
        return Err(f"not a port: {value}")
    return Ok(int(value))


class TestOk:
    def test_value_and_flags(self) -> None:
        result = Ok(8080)
        assert result.value == 8080
        assert result.is_ok()
        assert not result.is_err()

    def test_frozen(self) -> None:
        result = Ok(1)
        with pytest.raises(AttributeError):
            result.value = 2  # type: ignore[misc]


class TestErr:
    def test_error_and_flags(self) -> None:
        result = Err("boom")
        assert result.error == "boom"
        assert result.is_err()
        assert not result.is_ok()

    def test_map_err_converts_error(self) -> None:
        assert Err("boom").map_err(str.upper) == Err("BOOM")


class TestTypeGuards:
    def test_is_ok(self) -> None:
        assert is_ok(_parse_port("8080"))
        assert not is_ok(_parse_port("http"))

    def test_is_err(self) -> None:
        assert is_err(_parse_port("http"))

    def test_pattern_matching(self) -> None:
        match _parse_port("69"):
            case Ok(value):
                assert value == 69
            case Err(_):
                pytest.fail("expected Ok")
