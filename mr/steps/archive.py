"""Distributable packages: ``.zip``, ``.dmg`` and the bare ``.app``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mr.adapters.packaging import create_dmg, create_zip
from mr.core.result import Err, Ok
from mr.pipeline.context import Context
from mr.pipeline.step import StepResult
from mr.steps._common import tool_failure
from mr.steps.validate import all_one_of, first_error, required_list

ARCHIVE_FORMATS = ("dmg", "zip", "app")


@dataclass(frozen=True, slots=True)
class ArchiveCheck:
    name: str = "validating archive configuration"
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()

    def execute(self, ctx: Context) -> StepResult:
        formats = ctx.config.archive.formats
        checked = first_error(
            required_list(formats, "archive.formats"),
            all_one_of(formats, ARCHIVE_FORMATS, "archive.formats"),
        )
        if isinstance(checked, Err):
            return checked
        ctx.console.debug("Archive configuration validated")
        return Ok(None)


@dataclass(frozen=True, slots=True)
class ArchiveStep:
    """Package the bundle in each configured format, in config order."""

    name: str = "packaging archives"
    requires: tuple[str, ...] = ("app_path", "output_dir")
    provides: tuple[str, ...] = ("packages",)

    def execute(self, ctx: Context) -> StepResult:
        app_path = ctx.artifacts.app_path
        output_dir = Path(ctx.artifacts.output_dir)
        app_name = Path(app_path).stem

        for fmt in ctx.config.archive.formats:
            match fmt:
                case "zip":
                    out = output_dir / f"{app_name}-{ctx.version}.zip"
                    ctx.console.info(f"Creating ZIP: {out}")
                    zipped = create_zip(app_path, str(out), ctx.workdir)
                    if isinstance(zipped, Err):
                        return tool_failure(ctx, zipped.error, "ZIP packaging failed")
                    ctx.artifacts.packages.append(str(out))
                case "dmg":
                    out = output_dir / f"{app_name}-{ctx.version}.dmg"
                    ctx.console.info(f"Creating DMG: {out}")
                    dmg = create_dmg(app_path, str(out), f"{app_name} {ctx.version}", ctx.workdir)
                    if isinstance(dmg, Err):
                        return tool_failure(ctx, dmg.error, "DMG packaging failed")
                    ctx.artifacts.packages.append(str(out))
                case "app":
                    ctx.artifacts.packages.append(app_path)
                    ctx.console.info(f"App bundle: {app_path}")
        ctx.console.success(f"{len(ctx.artifacts.packages)} package(s) ready")
        return Ok(None)
