"""Shared driver for the build, release and snapshot commands."""

from __future__ import annotations

import shutil
import time
from collections.abc import Callable
from pathlib import Path
from typing import NoReturn

import typer

from mr.cli.commands._helpers import exit_with_error, format_duration
from mr.cli.context import CLIContext
from mr.core.errors import ErrorCode
from mr.core.result import Err, Ok, Result
from mr.git.version import GitError, resolve_git_info, resolve_version, snapshot_version
from mr.output.console import Style
from mr.pipeline.context import Context
from mr.pipeline.orchestrator import Pipeline
from mr.steps import default_pipeline

type VersionResolver = Callable[[Path], Result[str, GitError]]


def tagged_version(cwd: Path) -> Result[str, GitError]:
    return resolve_version(cwd)


def snapshot(cwd: Path) -> Result[str, GitError]:
    return Ok(snapshot_version(cwd))


def run_pipeline_command(
    cli: CLIContext,
    command: str,
    resolve: VersionResolver,
    *,
    skip_publish: bool = False,
    skip_notarize: bool = False,
    clean: bool = False,
    pipeline: Pipeline | None = None,
) -> Context:
    """Resolve git state, apply toggles, run the full pipeline and report.

    A validation failure exits with ``USER_ERROR`` before any execution step
    runs; an execution failure exits with ``BUILD_ERROR``.

    Raises:
        typer.Exit: on any failure, with the matching ``ErrorCode``.
    """
    console = cli.console

    console.action("getting and validating git state")
    git = resolve_git_info(cli.workdir)
    if isinstance(git, Err):
        exit_with_error(console, git.error, ErrorCode.ENV_ERROR, "Failed to resolve git state")
    info = git.value
    console.info(
        f"commit={info.short_commit} branch={info.branch or '(detached)'} "
        f"tag={info.tag or '(none)'} dirty={str(info.dirty).lower()}"
    )

    version = resolve(cli.workdir)
    if isinstance(version, Err):
        exit_with_error(console, version.error, ErrorCode.ENV_ERROR, "Failed to resolve version")
    console.info(f"Version: {version.value}")

    ctx = Context(
        config=cli.config,
        console=console,
        version=version.value,
        git=info,
        skip_publish=skip_publish,
        skip_notarize=skip_notarize,
        clean=clean,
        workdir=cli.workdir,
    )

    if ctx.clean and ctx.dist_dir.exists():
        console.info("Cleaning distribution directory")
        try:
            shutil.rmtree(ctx.dist_dir)
        except OSError as e:
            console.error(f"Failed to clean {ctx.dist_dir}: {e}")
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    pipeline = pipeline or default_pipeline()
    start = time.monotonic()

    validated = pipeline.run_validation(ctx)
    if isinstance(validated, Err):
        _fail(ctx, f"{command} failed: {validated.error}", validated.error.hint, ErrorCode.USER_ERROR)

    result = pipeline.run_execution(ctx)
    elapsed = time.monotonic() - start
    if isinstance(result, Err):
        _fail(ctx, f"{command} failed: {result.error}", result.error.hint, ErrorCode.BUILD_ERROR)

    print_artifact_summary(ctx)
    console.success(f"{command} succeeded after {format_duration(elapsed)}")
    return ctx


def _fail(ctx: Context, message: str, hint: str | None, code: ErrorCode) -> NoReturn:
    ctx.console.error(message)
    if hint:
        ctx.console.print(f"hint: {hint}", Style.DIM)
    raise typer.Exit(code=int(code))


def print_artifact_summary(ctx: Context) -> None:
    console = ctx.console
    artifacts = ctx.artifacts
    console.header(f"Build complete for {ctx.config.project.name} {ctx.version}")
    if artifacts.app_path:
        console.print(f"  App: {artifacts.app_path}")
    for package in artifacts.packages:
        console.print(f"  Package: {package}")
    if artifacts.changelog_path:
        console.print(f"  Changelog: {artifacts.changelog_path}")
    if artifacts.release_url:
        console.print(f"  Release: {artifacts.release_url}")
    if artifacts.cask_path:
        console.print(f"  Cask: {artifacts.cask_path}")
    if artifacts.output_dir:
        console.newline()
        console.print(f"Artifacts in: {artifacts.output_dir}", Style.DIM)
