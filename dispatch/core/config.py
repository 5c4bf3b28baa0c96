"""Typed configuration loading.

dispatch reads an optional ``dispatch.toml``; command line options override
whatever it provides. Every table is optional.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_str_list, get_table

__all__ = [
    "Config",
    "ConfigError",
    "GitHubConfig",
    "ReportDefaults",
    "ServerConfig",
    "DEFAULT_API_URL",
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "load_config",
    "load_config_or_default",
    "parse_toml",
]

DEFAULT_CONFIG_NAME = "dispatch.toml"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when a TOML file cannot be loaded or does not have the expected shape."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    owner: str | None = None
    repo: str | None = None
    api_url: str = DEFAULT_API_URL


@dataclass(frozen=True, slots=True)
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@dataclass(frozen=True, slots=True)
class ReportDefaults:
    """Labels and assignees applied to every filed report unless overridden."""

    labels: tuple[str, ...] = ()
    assignees: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Config:
    github: GitHubConfig = field(default_factory=GitHubConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    report: ReportDefaults = field(default_factory=ReportDefaults)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        github: StrDict = get_table(data, "github") or {}
        server: StrDict = get_table(data, "server") or {}
        report: StrDict = get_table(data, "report") or {}

        port = get_int(server, "port")
        if port is not None and not 0 < port < 65536:
            raise ValueError(f"server.port out of range: {port}")

        return cls(
            github=GitHubConfig(
                owner=get_str(github, "owner"),
                repo=get_str(github, "repo"),
                api_url=(get_str(github, "api_url") or DEFAULT_API_URL).rstrip("/"),
            ),
            server=ServerConfig(
                host=get_str(server, "host") or DEFAULT_HOST,
                port=port or DEFAULT_PORT,
            ),
            report=ReportDefaults(
                labels=tuple(get_str_list(report, "labels") or ()),
                assignees=tuple(get_str_list(report, "assignees") or ()),
            ),
        )


def parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file into a string-keyed table."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"File not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading file: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("TOML root must be a table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load configuration from a TOML file.

    Args:
        path: Path to dispatch.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Like load_config, but a missing file yields the default Config.

    A file that exists but is broken is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
