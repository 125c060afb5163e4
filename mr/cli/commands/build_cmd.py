from __future__ import annotations

import typer

from mr.cli.commands._pipeline import run_pipeline_command, tagged_version
from mr.cli.context import build_context


def build(
    clean: bool = typer.Option(False, "--clean", help="Remove dist/ before building"),
    skip_notarize: bool = typer.Option(
        False, "--skip-notarize", help="Skip notarization (quick local pipeline validation)"
    ),
) -> None:
    """Build, sign, notarize and package the app for the current tag (no publishing)."""
    run_pipeline_command(
        build_context(),
        "Build",
        tagged_version,
        skip_publish=True,
        skip_notarize=skip_notarize,
        clean=clean,
    )
