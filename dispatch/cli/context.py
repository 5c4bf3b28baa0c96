from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from dispatch.core.config import DEFAULT_CONFIG_NAME, Config, load_config_or_default
from dispatch.core.errors import ErrorCode
from dispatch.core.result import Err
from dispatch.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol


def build_context(config_path: Path | None = None) -> CLIContext:
    console = RichConsole()
    path = config_path if config_path is not None else Path.cwd() / DEFAULT_CONFIG_NAME

    result = load_config_or_default(path)
    if isinstance(result, Err):
        console.error(result.error.message)
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))

    return CLIContext(config=result.value, console=console)
