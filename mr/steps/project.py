"""Project section checks."""

from __future__ import annotations

from dataclasses import dataclass

from mr.core.result import Err, Ok
from mr.pipeline.context import Context
from mr.pipeline.step import StepError, StepResult
from mr.steps.validate import check_resolved, first_error, is_local_path, required_string


@dataclass(frozen=True, slots=True)
class ProjectCheck:
    name: str = "validating project configuration"
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()

    def execute(self, ctx: Context) -> StepResult:
        cfg = ctx.config.project

        checked = first_error(
            check_resolved(cfg.name, "project.name"),
            check_resolved(cfg.scheme, "project.scheme"),
            required_string(cfg.name, "project.name"),
        )
        if isinstance(checked, Err):
            return checked
        if not is_local_path(cfg.name):
            return Err(
                StepError(f"project.name contains a path traversal or absolute path: {cfg.name!r}")
            )
        checked = required_string(cfg.scheme, "project.scheme")
        if isinstance(checked, Err):
            return checked

        ctx.console.debug("Project configuration validated")
        return Ok(None)
