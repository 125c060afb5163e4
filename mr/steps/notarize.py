"""Apple notarization: submit, staple, assess."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mr.adapters.notarytool import run_assess, run_staple, run_submit
from mr.adapters.packaging import create_zip
from mr.core.result import Err, Ok, Skip
from mr.pipeline.context import Context
from mr.pipeline.step import StepResult
from mr.steps._common import log_output, tool_failure
from mr.steps.validate import check_resolved, first_error, required_string

SKIP_REASON = "notarization skipped via --skip-notarize"


@dataclass(frozen=True, slots=True)
class NotarizeCheck:
    name: str = "validating notarization configuration"
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()

    def execute(self, ctx: Context) -> StepResult:
        if ctx.skip_notarize:
            return Skip(SKIP_REASON)

        cfg = ctx.config.notarize
        checked = first_error(
            check_resolved(cfg.apple_id, "notarize.apple_id"),
            check_resolved(cfg.team_id, "notarize.team_id"),
            check_resolved(cfg.password, "notarize.password"),
            required_string(cfg.apple_id, "notarize.apple_id"),
            required_string(cfg.team_id, "notarize.team_id"),
            required_string(cfg.password, "notarize.password"),
        )
        if isinstance(checked, Err):
            return checked
        ctx.console.debug("Notarization configuration validated")
        return Ok(None)


@dataclass(frozen=True, slots=True)
class NotarizeStep:
    name: str = "notarizing application"
    requires: tuple[str, ...] = ("app_path", "output_dir")
    provides: tuple[str, ...] = ()

    def execute(self, ctx: Context) -> StepResult:
        if ctx.skip_notarize:
            return Skip(SKIP_REASON)

        cfg = ctx.config.notarize
        app_path = ctx.artifacts.app_path
        app_name = Path(app_path).stem
        zip_path = Path(ctx.artifacts.output_dir) / f"{app_name}-notarize.zip"

        ctx.console.info("Creating temporary ZIP for notarization submission")
        zipped = create_zip(app_path, str(zip_path), ctx.workdir)
        if isinstance(zipped, Err):
            return tool_failure(ctx, zipped.error, "failed to create temp ZIP for notarization")

        ctx.console.info("Submitting to Apple notary service (this may take several minutes)...")
        submitted = run_submit(str(zip_path), cfg.apple_id, cfg.team_id, cfg.password, ctx.workdir)
        if isinstance(submitted, Err):
            return tool_failure(ctx, submitted.error, "notarization failed")
        log_output(ctx, submitted.value)

        ctx.console.info("Stapling notarization ticket")
        stapled = run_staple(app_path, ctx.workdir)
        if isinstance(stapled, Err):
            return tool_failure(ctx, stapled.error)
        log_output(ctx, stapled.value)

        ctx.console.info("Verifying Gatekeeper assessment")
        assessed = run_assess(app_path, ctx.workdir)
        if isinstance(assessed, Err):
            return tool_failure(ctx, assessed.error)
        log_output(ctx, assessed.value)

        try:
            zip_path.unlink()
        except OSError as e:
            ctx.console.warning(f"Failed to remove temp ZIP {zip_path}: {e}")

        ctx.console.success(f"Notarization complete: {app_path}")
        return Ok(None)
