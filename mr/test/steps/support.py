"""Shared builders and fakes for step tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mr.adapters.errors import ToolError
from mr.adapters.github import PublishedRelease
from mr.core.config import Config
from mr.core.result import Err, Ok, Result
from mr.git.version import GitInfo
from mr.output.console import MockConsole
from mr.pipeline.context import Context

VALID_CONFIG: dict[str, object] = {
    "project": {"name": "MyApp", "scheme": "MyApp"},
    "build": {"configuration": "Release"},
    "sign": {"identity": "Developer ID Application: Jane Doe (TEAM123456)"},
    "notarize": {"apple_id": "jane@example.com", "team_id": "TEAM123456", "password": "pw"},
    "archive": {"formats": ["zip", "dmg"]},
    "changelog": {
        "groups": [
            {"title": "Features", "regexp": "^feat", "order": 0},
            {"title": "Other", "order": 1},
        ]
    },
    "release": {"github": {"owner": "jane", "repo": "myapp"}},
    "homebrew": {
        "cask": {
            "name": "myapp",
            "desc": "My awesome macOS application",
            "homepage": "https://github.com/jane/myapp",
        }
    },
}


def with_section(base: dict[str, object], section: str, values: dict[str, object]) -> dict[str, object]:
    """Copy of ``base`` with one top-level table replaced."""
    data = dict(base)
    data[section] = values
    return data


def make_context(
    tmp_path: Path,
    data: dict[str, object] | None = None,
    **overrides: object,
) -> Context:
    ctx = Context(
        config=Config.from_dict(VALID_CONFIG if data is None else data),
        console=MockConsole(),
        version="v1.2.0",
        git=GitInfo(commit="a" * 40, short_commit="aaaaaaa", branch="main", tag="v1.2.0", commit_count=42),
        workdir=tmp_path,
    )
    for name, value in overrides.items():
        setattr(ctx, name, value)
    return ctx


def console_of(ctx: Context) -> MockConsole:
    assert isinstance(ctx.console, MockConsole)
    return ctx.console


@dataclass
class FakeGitHub:
    """In-memory ``GitHubClient``."""

    release_error: ToolError | None = None
    files: dict[str, str] = field(default_factory=dict)
    releases: list[tuple[str, str, str, str, bool]] = field(default_factory=list)
    uploads: list[str] = field(default_factory=list)
    writes: list[tuple[str, str, str, str | None]] = field(default_factory=list)

    def create_release(
        self, repo: str, *, tag: str, title: str, notes: str, draft: bool
    ) -> Result[PublishedRelease, ToolError]:
        if self.release_error is not None:
            return Err(self.release_error)
        self.releases.append((repo, tag, title, notes, draft))
        return Ok(PublishedRelease(tag=tag, url=f"https://github.com/{repo}/releases/tag/{tag}"))

    def upload_asset(self, repo: str, *, tag: str, path: Path) -> Result[None, ToolError]:
        self.uploads.append(path.name)
        return Ok(None)

    def get_file_sha(self, repo: str, path: str) -> Result[str | None, ToolError]:
        return Ok(self.files.get(f"{repo}/{path}"))

    def put_file(
        self, repo: str, path: str, *, message: str, content: str, sha: str | None
    ) -> Result[None, ToolError]:
        self.writes.append((f"{repo}/{path}", message, content, sha))
        return Ok(None)
