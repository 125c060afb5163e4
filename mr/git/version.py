"""Resolve version and repository metadata from git.

All functions shell out to ``git`` in ``cwd`` and return Result values. The
pipeline treats the resolved values as opaque strings.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from mr.core.result import Err, Ok, Result
from mr.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "GitError",
    "GitInfo",
    "log_between",
    "previous_tag",
    "resolve_git_info",
    "resolve_version",
    "snapshot_version",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message
        hint: Optional fix
    """

    command: str
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class GitInfo:
    """Resolved git state for the current repository.

    Attributes:
        commit: full SHA
        short_commit: abbreviated SHA
        branch: current branch ("" when HEAD is detached)
        tag: latest reachable tag ("" when there is none)
        dirty: working tree has uncommitted changes
        commit_count: commits reachable from HEAD
    """

    commit: str = ""
    short_commit: str = ""
    branch: str = ""
    tag: str = ""
    dirty: bool = False
    commit_count: int = 0


def _git(cwd: Path, *args: str) -> Result[str, GitError]:
    result = run_process(["git", *args], cwd=cwd, timeout=_GIT_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        e = result.error
        return Err(
            GitError(
                command=" ".join(args),
                message=f"git {' '.join(args)}: {e.stderr.strip() or e}",
            )
        )
    return Ok(result.value.strip())


def resolve_version(cwd: Path) -> Result[str, GitError]:
    """Return the latest tag reachable from HEAD (``git describe --tags``)."""
    result = run_process(
        ["git", "describe", "--tags", "--abbrev=0"], cwd=cwd, timeout=_GIT_TIMEOUT_SECONDS
    )
    if isinstance(result, Err):
        if shutil.which("git") is None:
            return Err(GitError(command="describe", message="git is not installed or not in PATH"))
        stderr = result.error.stderr
        if "No names found" in stderr or "No tags" in stderr or "fatal" in stderr:
            return Err(
                GitError(
                    command="describe",
                    message="no git tags found",
                    hint="Tag your release with: git tag v1.0.0",
                )
            )
        return Err(
            GitError(
                command="describe",
                message=f"failed to resolve version from git tags: {result.error}",
            )
        )

    version = result.value.strip()
    if not version:
        return Err(
            GitError(
                command="describe",
                message="no git tags found",
                hint="Tag your release with: git tag v1.0.0",
            )
        )
    return Ok(version)


def snapshot_version(cwd: Path, now: datetime | None = None) -> str:
    """``<tag>-snapshot``, or ``snapshot-<timestamp>`` when there are no tags."""
    match resolve_version(cwd):
        case Ok(tag):
            return f"{tag}-snapshot"
        case Err(_):
            stamp = (now or datetime.now()).strftime("%Y%m%d%H%M%S")
            return f"snapshot-{stamp}"


def resolve_git_info(cwd: Path) -> Result[GitInfo, GitError]:
    """Gather commit, branch, dirty state, tag and commit count."""
    commit = _git(cwd, "rev-parse", "HEAD")
    if isinstance(commit, Err):
        return commit
    short = _git(cwd, "rev-parse", "--short", "HEAD")
    if isinstance(short, Err):
        return short
    branch = _git(cwd, "rev-parse", "--abbrev-ref", "HEAD")
    if isinstance(branch, Err):
        return branch
    status = _git(cwd, "status", "--porcelain")
    if isinstance(status, Err):
        return status
    count = _git(cwd, "rev-list", "--count", "HEAD")
    if isinstance(count, Err):
        return count
    try:
        commit_count = int(count.value)
    except ValueError:
        return Err(
            GitError(command="rev-list", message=f"failed to parse commit count {count.value!r}")
        )

    # No tag is fine here; release commands require one separately.
    tag = resolve_version(cwd)

    return Ok(
        GitInfo(
            commit=commit.value,
            short_commit=short.value,
            branch="" if branch.value == "HEAD" else branch.value,
            tag=tag.value if isinstance(tag, Ok) else "",
            dirty=status.value != "",
            commit_count=commit_count,
        )
    )


def previous_tag(cwd: Path, ref: str) -> Result[str, GitError]:
    """Return the tag before ``ref`` ("" when ``ref`` has no tagged ancestor)."""
    parent = _git(cwd, "rev-parse", "--verify", "--quiet", f"{ref}^")
    if isinstance(parent, Err):
        # ref is the root commit
        return Ok("")
    result = run_process(
        ["git", "describe", "--tags", "--abbrev=0", f"{ref}^"],
        cwd=cwd,
        timeout=_GIT_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        stderr = result.error.stderr
        if "No names found" in stderr or "No tags" in stderr or "cannot describe" in stderr:
            return Ok("")
        return Err(GitError(command="describe", message=f"failed to find previous tag: {stderr.strip()}"))
    return Ok(result.value.strip())


def log_between(cwd: Path, prev: str, ref: str) -> Result[list[str], GitError]:
    """Commit subjects in ``prev..ref``, newest first (all of ``ref`` when ``prev`` is "")."""
    rev_range = f"{prev}..{ref}" if prev else ref
    result = _git(cwd, "log", "--pretty=format:%s", rev_range)
    if isinstance(result, Err):
        return result
    return Ok([line for line in result.value.splitlines() if line.strip()])
