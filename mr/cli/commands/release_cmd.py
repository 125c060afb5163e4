from __future__ import annotations

import typer

from mr.cli.commands._pipeline import run_pipeline_command, tagged_version
from mr.cli.context import build_context


def release(
    clean: bool = typer.Option(False, "--clean", help="Remove dist/ before building"),
) -> None:
    """Run the complete release: build through GitHub release and Homebrew cask."""
    run_pipeline_command(build_context(), "Release", tagged_version, clean=clean)
