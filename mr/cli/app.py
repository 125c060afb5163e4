from __future__ import annotations

import os
from pathlib import Path

import typer

from mr import __version__
from mr.cli.commands.build_cmd import build
from mr.cli.commands.check import check
from mr.cli.commands.init_cmd import init
from mr.cli.commands.release_cmd import release
from mr.cli.commands.snapshot_cmd import snapshot_cmd
from mr.cli.context import CONFIG_ENV, DEBUG_ENV

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="macOS app release automation: build, sign, notarize, package and publish.",
)


app.command()(check)
app.command()(init)
app.command()(build)
app.command()(release)
app.command("snapshot")(snapshot_cmd)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", callback=_print_version, is_eager=True
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file path (default: ./.macreleaser.toml)",
    ),
    debug: bool = typer.Option(False, "--debug", help="Show tool output and debug messages."),
) -> None:
    if config is not None:
        os.environ[CONFIG_ENV] = str(config)
    if debug:
        os.environ[DEBUG_ENV] = "1"


def main() -> None:
    app()
