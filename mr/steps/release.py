"""GitHub release publishing."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mr.adapters.github import GhClient
from mr.core.result import Err, Ok, Skip
from mr.pipeline.context import Context
from mr.pipeline.step import StepResult
from mr.steps._common import tool_failure
from mr.steps.validate import check_resolved, first_error, required_string

SKIP_REASON = "publishing skipped"


@dataclass(frozen=True, slots=True)
class ReleaseCheck:
    name: str = "validating release configuration"
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()

    def execute(self, ctx: Context) -> StepResult:
        if ctx.skip_publish:
            return Skip(SKIP_REASON)

        gh = ctx.config.release.github
        checked = first_error(
            check_resolved(gh.owner, "release.github.owner"),
            check_resolved(gh.repo, "release.github.repo"),
            required_string(gh.owner, "release.github.owner"),
            required_string(gh.repo, "release.github.repo"),
        )
        if isinstance(checked, Err):
            return checked
        ctx.console.debug("Release configuration validated")
        return Ok(None)


@dataclass(frozen=True, slots=True)
class ReleaseStep:
    """Create the release for ``ctx.version`` and upload every file package.

    Directory packages (the bare ``.app``) cannot be uploaded and are skipped
    with a warning.
    """

    name: str = "publishing GitHub release"
    requires: tuple[str, ...] = ("packages",)
    provides: tuple[str, ...] = ("release_url",)

    def execute(self, ctx: Context) -> StepResult:
        if ctx.skip_publish:
            return Skip(SKIP_REASON)

        if ctx.github is None:
            ctx.github = GhClient.from_env(ctx.workdir)
        client = ctx.github

        gh = ctx.config.release.github
        title = f"{ctx.config.project.name} {ctx.version}"
        created = client.create_release(
            gh.slug, tag=ctx.version, title=title, notes=ctx.release_notes, draft=gh.draft
        )
        if isinstance(created, Err):
            return tool_failure(ctx, created.error)
        ctx.artifacts.release_url = created.value.url
        ctx.console.info(f"Created GitHub release: {title}")

        for package in ctx.artifacts.packages:
            path = Path(package)
            if not path.is_file():
                ctx.console.warning(
                    f"Skipping {package}: not a regular file (only files can be uploaded as release assets)"
                )
                continue
            uploaded = client.upload_asset(gh.slug, tag=ctx.version, path=path)
            if isinstance(uploaded, Err):
                return tool_failure(ctx, uploaded.error)
            ctx.console.info(f"Uploaded: {path.name}")

        ctx.console.success(f"Release published: {ctx.artifacts.release_url}")
        return Ok(None)
