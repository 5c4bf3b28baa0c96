from __future__ import annotations

import typer

from dispatch import __version__
from dispatch.cli.commands.assets import assets
from dispatch.cli.commands.report import report
from dispatch.cli.commands.serve import serve


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command()(assets)
app.command()(serve)
app.command()(report)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    del version


def main() -> None:
    app()
