"""Release notes from the commits since the previous tag."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mr.changelog.generator import compile_rules, generate, has_catch_all
from mr.core.result import Err, Ok, Skip
from mr.git.version import log_between, previous_tag
from mr.pipeline.context import Context
from mr.pipeline.step import StepError, StepResult
from mr.steps.validate import one_of

CHANGELOG_FILENAME = "CHANGELOG.md"
SORT_ORDERS = ("", "asc", "desc")


@dataclass(frozen=True, slots=True)
class ChangelogCheck:
    name: str = "validating changelog configuration"
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()

    def execute(self, ctx: Context) -> StepResult:
        cfg = ctx.config.changelog
        if cfg.disable:
            return Skip("changelog disabled")

        checked = one_of(cfg.sort, SORT_ORDERS, "changelog.sort")
        if isinstance(checked, Err):
            return Err(
                StepError(
                    f'changelog.sort must be "asc" or "desc", got {cfg.sort!r}',
                    hint='Use sort = "asc", sort = "desc" or remove the key',
                )
            )

        for i, group in enumerate(cfg.groups):
            if not group.title:
                return Err(StepError(f"changelog.groups[{i}]: title is required"))

        compiled = compile_rules(cfg)
        if isinstance(compiled, Err):
            e = compiled.error
            return Err(StepError(f"changelog.{e.source}: invalid regexp {e.pattern!r}: {e.reason}"))

        if cfg.groups and not has_catch_all(cfg.groups):
            ctx.console.warning(
                "changelog.groups has no catch-all group (empty regexp): "
                "commits matching no group are left out of the changelog"
            )

        ctx.console.debug("Changelog configuration validated")
        return Ok(None)


@dataclass(frozen=True, slots=True)
class ChangelogStep:
    """Generate notes for ``git.tag`` (or HEAD) and write ``CHANGELOG.md``.

    The file goes into the build output directory, or ``dist/`` when the
    build step did not run.
    """

    name: str = "generating changelog"
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ("changelog_path",)

    def execute(self, ctx: Context) -> StepResult:
        cfg = ctx.config.changelog
        if cfg.disable:
            return Skip("changelog disabled")

        ref = ctx.git.tag or "HEAD"
        prev = previous_tag(ctx.workdir, ref)
        if isinstance(prev, Err):
            return Err(StepError(prev.error.message, hint=prev.error.hint))

        commits = log_between(ctx.workdir, prev.value, ref)
        if isinstance(commits, Err):
            return Err(
                StepError(f"failed to get git log: {commits.error.message}", hint=commits.error.hint)
            )
        if prev.value:
            ctx.console.info(f"{len(commits.value)} commit(s) since {prev.value}")
        else:
            ctx.console.info(f"{len(commits.value)} commit(s), no previous tag")

        content = generate(ctx.version, commits.value, cfg)
        if isinstance(content, Err):
            return Err(StepError(f"failed to generate changelog: {content.error.message}"))
        ctx.release_notes = content.value

        target_dir = Path(ctx.artifacts.output_dir) if ctx.artifacts.output_dir else ctx.dist_dir
        path = target_dir / CHANGELOG_FILENAME
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(content.value, encoding="utf-8")
        except OSError as e:
            return Err(StepError(f"failed to write changelog: {e}"))

        ctx.artifacts.changelog_path = str(path)
        ctx.console.success(f"Changelog written to {path}")
        return Ok(None)
