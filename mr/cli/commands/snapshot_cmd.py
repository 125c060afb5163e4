from __future__ import annotations

import typer

from mr.cli.commands._pipeline import run_pipeline_command, snapshot
from mr.cli.context import build_context


def snapshot_cmd(
    clean: bool = typer.Option(False, "--clean", help="Remove dist/ before building"),
    skip_notarize: bool = typer.Option(
        False, "--skip-notarize", help="Skip notarization (quick local pipeline validation)"
    ),
) -> None:
    """Test the release process with a snapshot version (no publishing)."""
    run_pipeline_command(
        build_context(),
        "Snapshot",
        snapshot,
        skip_publish=True,
        skip_notarize=skip_notarize,
        clean=clean,
    )
