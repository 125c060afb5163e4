"""Homebrew cask generation and tap publishing."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mr.adapters.cask import CaskData, asset_url, render_cask, select_package, sha256_file
from mr.adapters.github import GhClient
from mr.core.result import Err, Ok, Result, Skip
from mr.pipeline.context import Context
from mr.pipeline.step import StepError, StepResult
from mr.steps._common import tool_failure
from mr.steps.validate import Check, check_resolved, first_error, required_string

SKIP_REASON = "homebrew publishing skipped"


@dataclass(frozen=True, slots=True)
class HomebrewCheck:
    name: str = "validating homebrew configuration"
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()

    def execute(self, ctx: Context) -> StepResult:
        if ctx.skip_publish:
            return Skip(SKIP_REASON)

        cfg = ctx.config.homebrew
        checks: list[Check] = [
            check_resolved(cfg.cask.name, "homebrew.cask.name"),
            check_resolved(cfg.cask.desc, "homebrew.cask.desc"),
            check_resolved(cfg.cask.homepage, "homebrew.cask.homepage"),
            required_string(cfg.cask.name, "homebrew.cask.name"),
            required_string(cfg.cask.desc, "homebrew.cask.desc"),
            required_string(cfg.cask.homepage, "homebrew.cask.homepage"),
        ]
        if cfg.tap.configured:
            checks += [
                check_resolved(cfg.tap.owner, "homebrew.tap.owner"),
                check_resolved(cfg.tap.name, "homebrew.tap.name"),
                check_resolved(cfg.tap.token, "homebrew.tap.token"),
                required_string(cfg.tap.owner, "homebrew.tap.owner"),
                required_string(cfg.tap.name, "homebrew.tap.name"),
                required_string(cfg.tap.token, "homebrew.tap.token"),
            ]
        checked = first_error(*checks)
        if isinstance(checked, Err):
            return checked
        ctx.console.debug("Homebrew configuration validated")
        return Ok(None)


@dataclass(frozen=True, slots=True)
class HomebrewStep:
    """Render ``<token>.rb`` next to the packages and push it to the tap if one is set."""

    name: str = "generating Homebrew cask"
    requires: tuple[str, ...] = ("packages", "app_path", "output_dir")
    provides: tuple[str, ...] = ("cask_path",)

    def execute(self, ctx: Context) -> StepResult:
        if ctx.skip_publish:
            return Skip(SKIP_REASON)

        selected = select_package(ctx.artifacts.packages)
        if isinstance(selected, Err):
            return tool_failure(ctx, selected.error)
        package = Path(selected.value)

        ctx.console.info(f"Computing SHA256 hash of {package.name}")
        digest = sha256_file(package)
        if isinstance(digest, Err):
            return tool_failure(ctx, digest.error)

        cfg = ctx.config
        gh = cfg.release.github
        data = CaskData(
            token=cfg.homebrew.cask.name,
            version=ctx.version.removeprefix("v"),
            sha256=digest.value,
            url=asset_url(gh.owner, gh.repo, ctx.version, package.name),
            name=cfg.project.name,
            desc=cfg.homebrew.cask.desc,
            homepage=cfg.homebrew.cask.homepage,
            app_name=Path(ctx.artifacts.app_path).name,
            license=cfg.homebrew.cask.license,
        )
        rendered = render_cask(data)
        if isinstance(rendered, Err):
            return tool_failure(ctx, rendered.error)

        local_path = Path(ctx.artifacts.output_dir) / f"{data.token}.rb"
        try:
            local_path.write_text(rendered.value, encoding="utf-8")
        except OSError as e:
            return Err(StepError(f"failed to write cask file: {e}"))
        ctx.artifacts.cask_path = str(local_path)
        ctx.console.info(f"Generated cask file: {local_path}")

        if cfg.homebrew.tap.configured:
            committed = _commit_to_tap(ctx, data, rendered.value)
            if isinstance(committed, Err):
                return committed

        ctx.console.success(f"Homebrew cask generated: {data.token}")
        return Ok(None)


def _commit_to_tap(ctx: Context, data: CaskData, content: str) -> Result[None, StepError]:
    tap = ctx.config.homebrew.tap
    if ctx.tap_github is None:
        ctx.tap_github = GhClient(cwd=ctx.workdir, token=tap.token)
    client = ctx.tap_github

    repo = f"{tap.owner}/{tap.name}"
    cask_path = f"Casks/{data.token}.rb"

    existing = client.get_file_sha(repo, cask_path)
    if isinstance(existing, Err):
        return tool_failure(ctx, existing.error)

    sha = existing.value
    if sha is None:
        message = f"Add {data.token} {data.version}"
    else:
        message = f"Update {data.token} to {data.version}"
    put = client.put_file(repo, cask_path, message=message, content=content, sha=sha)
    if isinstance(put, Err):
        return tool_failure(ctx, put.error)

    verb = "Created" if sha is None else "Updated"
    ctx.console.info(f"{verb} cask in {repo}: {cask_path}")
    return Ok(None)
