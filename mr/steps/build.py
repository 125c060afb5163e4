"""Archive the Xcode project and extract the ``.app`` bundle."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from mr.adapters.xcodebuild import (
    ArchiveArgs,
    DetectedProject,
    detect_project,
    project_kind_for,
    run_archive,
)
from mr.core.result import Err, Ok, Result
from mr.pipeline.context import Context
from mr.pipeline.step import StepError, StepResult
from mr.steps._common import log_output, tool_failure
from mr.steps.validate import check_resolved, first_error, is_local_path, required_string


@dataclass(frozen=True, slots=True)
class BuildCheck:
    name: str = "validating build configuration"
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()

    def execute(self, ctx: Context) -> StepResult:
        configuration = ctx.config.build.configuration
        checked = first_error(
            check_resolved(configuration, "build.configuration"),
            required_string(configuration, "build.configuration"),
        )
        if isinstance(checked, Err):
            return checked
        ctx.console.debug("Build configuration validated")
        return Ok(None)


@dataclass(frozen=True, slots=True)
class BuildStep:
    name: str = "building project"
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ("output_dir", "archive_path", "app_path")

    def execute(self, ctx: Context) -> StepResult:
        cfg = ctx.config
        if not is_local_path(cfg.project.name):
            return Err(
                StepError(
                    f"project.name contains a path traversal or absolute path: {cfg.project.name!r}"
                )
            )
        if not is_local_path(ctx.version):
            return Err(
                StepError(f"version contains a path traversal or absolute path: {ctx.version!r}")
            )

        output_dir = ctx.dist_dir / cfg.project.name / ctx.version
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(StepError(f"failed to create output directory {output_dir}: {e}"))
        ctx.artifacts.output_dir = str(output_dir)

        project = _resolve_project(ctx)
        if isinstance(project, Err):
            return project

        archive_path = output_dir / f"{cfg.project.scheme}.xcarchive"
        ctx.console.info(
            f"Building scheme {cfg.project.scheme!r} with configuration {cfg.build.configuration!r}"
        )
        ctx.console.info(f"Archive path: {archive_path}")

        args = ArchiveArgs(
            scheme=cfg.project.scheme,
            configuration=cfg.build.configuration,
            archive_path=str(archive_path),
            project=project.value,
            marketing_version=ctx.version.removeprefix("v"),
            build_number=str(ctx.git.commit_count) if ctx.git.commit_count else "",
        )
        built = run_archive(args, cwd=ctx.workdir)
        if isinstance(built, Err):
            return tool_failure(ctx, built.error, "build failed")
        log_output(ctx, built.value)
        ctx.artifacts.archive_path = str(archive_path)

        app = _extract_app(archive_path, output_dir)
        if isinstance(app, Err):
            return app
        ctx.artifacts.app_path = str(app.value)

        ctx.console.success(f"Build completed: {app.value}")
        return Ok(None)


def _resolve_project(ctx: Context) -> Result[DetectedProject, StepError]:
    configured = ctx.config.project.workspace
    if configured:
        if not is_local_path(configured):
            return Err(
                StepError(
                    f"project.workspace contains a path traversal or absolute path: {configured!r}"
                )
            )
        kind = project_kind_for(configured)
        if kind is None:
            return Err(
                StepError(
                    f"project.workspace must end with .xcworkspace or .xcodeproj, got {configured!r}"
                )
            )
        return Ok(DetectedProject(path=configured, kind=kind))

    ctx.console.info("Auto-detecting workspace/project...")
    detected = detect_project(ctx.workdir)
    if isinstance(detected, Err):
        return Err(StepError(detected.error.message, hint=detected.error.hint))
    ctx.console.info(f"Detected {detected.value.path}")
    return Ok(detected.value)


def _extract_app(archive_path: Path, output_dir: Path) -> Result[Path, StepError]:
    """Copy the first ``.app`` out of ``<archive>/Products/Applications``."""
    apps_dir = archive_path / "Products" / "Applications"
    try:
        names = sorted(p.name for p in apps_dir.iterdir())
    except OSError as e:
        return Err(StepError(f"failed to read .xcarchive Products/Applications: {e}"))

    app_name = next((n for n in names if n.endswith(".app")), None)
    if app_name is None:
        return Err(
            StepError(
                f"no .app found in {apps_dir}: the archive may have failed to produce an application"
            )
        )

    src = apps_dir / app_name
    if not src.is_dir():
        return Err(StepError(f".app at {src} is not a directory: the archive may be corrupted"))

    dst = output_dir / app_name
    try:
        if dst.exists():
            shutil.rmtree(dst)
        shutil.copytree(src, dst, symlinks=True)
    except OSError as e:
        return Err(StepError(f"failed to copy .app to output directory: {e}"))
    return Ok(dst)
