from __future__ import annotations

import typer

from mr.cli.context import build_context
from mr.core.errors import ErrorCode
from mr.core.result import Err
from mr.output.console import Style
from mr.pipeline.context import Context
from mr.steps import default_pipeline


def check() -> None:
    """Validate the configuration file without building anything."""
    cli = build_context()
    console = cli.console
    console.print(f"config: {cli.config_path}", Style.DIM)

    ctx = Context(config=cli.config, console=console, workdir=cli.workdir)
    result = default_pipeline().run_validation(ctx)
    if isinstance(result, Err):
        console.error(f"Configuration validation failed: {result.error}")
        if result.error.hint:
            console.print(f"hint: {result.error.hint}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    console.success("Configuration is valid")
