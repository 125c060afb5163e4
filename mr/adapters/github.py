"""GitHub access through the ``gh`` CLI.

``GitHubClient`` is the narrow interface the publish and cask steps use; tests
inject a fake. ``GhClient`` is the real implementation. Authentication comes
from ``gh auth`` or from a token exported to the child as ``GH_TOKEN``.
"""

from __future__ import annotations

import base64
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

from mr.adapters.errors import ToolError
from mr.core.result import Err, Ok, Result
from mr.core.structured import as_str_dict
from mr.platform.process import require_tool
from mr.platform.process import run as run_process

__all__ = ["GhClient", "GitHubClient", "PublishedRelease"]

_GH_TIMEOUT_SECONDS = 60.0
_GH_UPLOAD_TIMEOUT_SECONDS = 15 * 60.0
_GH_HINT = "Install GitHub CLI: https://cli.github.com/"


@dataclass(frozen=True, slots=True)
class PublishedRelease:
    tag: str
    url: str


class GitHubClient(Protocol):
    def create_release(
        self, repo: str, *, tag: str, title: str, notes: str, draft: bool
    ) -> Result[PublishedRelease, ToolError]: ...

    def upload_asset(self, repo: str, *, tag: str, path: Path) -> Result[None, ToolError]: ...

    def get_file_sha(self, repo: str, path: str) -> Result[str | None, ToolError]:
        """Blob SHA of ``path``, or None when the file does not exist."""
        ...

    def put_file(
        self, repo: str, path: str, *, message: str, content: str, sha: str | None
    ) -> Result[None, ToolError]:
        """Create (``sha`` is None) or update a file through the contents API."""
        ...


class GhClient:
    """``GitHubClient`` backed by the ``gh`` executable."""

    def __init__(self, *, cwd: Path, token: str | None = None) -> None:
        self._cwd = cwd
        self._env: dict[str, str] | None = None
        if token:
            self._env = {**os.environ, "GH_TOKEN": token}

    @classmethod
    def from_env(cls, cwd: Path) -> GhClient:
        """Use ``GITHUB_TOKEN`` when exported, otherwise ``gh auth`` credentials."""
        return cls(cwd=cwd, token=os.environ.get("GITHUB_TOKEN") or None)

    def _gh(
        self, args: list[str], *, timeout: float = _GH_TIMEOUT_SECONDS, stdin: str | None = None
    ) -> Result[str, ToolError]:
        tool = require_tool("gh", _GH_HINT)
        if isinstance(tool, Err):
            return Err(ToolError(message=tool.error.message, hint=tool.error.hint))
        result = run_process(
            ["gh", *args], cwd=self._cwd, env=self._env, timeout=timeout, input_text=stdin
        )
        if isinstance(result, Err):
            e = result.error
            return Err(ToolError(message=e.stderr.strip() or str(e), output=e.output))
        return Ok(result.value)

    def create_release(
        self, repo: str, *, tag: str, title: str, notes: str, draft: bool
    ) -> Result[PublishedRelease, ToolError]:
        args = ["release", "create", tag, "--repo", repo, "--title", title, "--notes-file", "-"]
        if draft:
            args.append("--draft")
        result = self._gh(args, stdin=notes)
        if isinstance(result, Err):
            text = result.error.output.lower()
            if "already exists" in text or "already_exists" in text:
                return Err(
                    ToolError(
                        f"release for tag {tag} already exists",
                        hint="Delete the existing release or use a different version tag",
                        output=result.error.output,
                    )
                )
            return Err(
                ToolError(
                    f"failed to create GitHub release: {result.error.message}",
                    hint="Run: gh auth login (or export GITHUB_TOKEN with 'repo' scope)",
                    output=result.error.output,
                )
            )
        url = result.value.strip().splitlines()[-1] if result.value.strip() else ""
        return Ok(PublishedRelease(tag=tag, url=url))

    def upload_asset(self, repo: str, *, tag: str, path: Path) -> Result[None, ToolError]:
        label = f"{path}#{path.name}"
        result = self._gh(
            ["release", "upload", tag, label, "--repo", repo, "--clobber"],
            timeout=_GH_UPLOAD_TIMEOUT_SECONDS,
        )
        if isinstance(result, Err):
            return Err(
                ToolError(
                    f"failed to upload asset {path.name}: {result.error.message}",
                    output=result.error.output,
                )
            )
        return Ok(None)

    def get_file_sha(self, repo: str, path: str) -> Result[str | None, ToolError]:
        result = self._gh(["api", f"repos/{repo}/contents/{quote(path)}"])
        if isinstance(result, Err):
            if "404" in result.error.output or "Not Found" in result.error.output:
                return Ok(None)
            return Err(
                ToolError(
                    f"failed to check existing {path} in {repo}: {result.error.message}",
                    output=result.error.output,
                )
            )
        try:
            payload: object = json.loads(result.value)
        except json.JSONDecodeError as e:
            return Err(ToolError(f"invalid JSON from gh api: {e}"))
        data = as_str_dict(payload)
        sha = data.get("sha") if data is not None else None
        if not isinstance(sha, str):
            return Err(ToolError(f"unexpected contents payload for {path} in {repo}"))
        return Ok(sha)

    def put_file(
        self, repo: str, path: str, *, message: str, content: str, sha: str | None
    ) -> Result[None, ToolError]:
        body: dict[str, str] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }
        if sha is not None:
            body["sha"] = sha
        result = self._gh(
            ["api", "-X", "PUT", f"repos/{repo}/contents/{quote(path)}", "--input", "-"],
            stdin=json.dumps(body),
        )
        if isinstance(result, Err):
            return Err(
                ToolError(
                    f"failed to commit {path} to {repo}: {result.error.message}",
                    output=result.error.output,
                )
            )
        return Ok(None)
