from __future__ import annotations

from pathlib import Path

import typer

from mr.cli.context import build_console, config_path
from mr.core.config import EXAMPLE_CONFIG
from mr.core.errors import ErrorCode


def init() -> None:
    """Write an example configuration file (never overwrites an existing one)."""
    console = build_console()
    path = config_path(Path.cwd())

    if path.exists():
        console.info(f"Configuration file {path} already exists")
        return

    try:
        path.write_text(EXAMPLE_CONFIG, encoding="utf-8")
    except OSError as e:
        console.error(f"Failed to save configuration: {e}")
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    console.success(f"Example configuration created: {path}")
    console.info("Edit this file to match your project requirements")
