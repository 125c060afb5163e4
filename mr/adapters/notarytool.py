"""Apple notarization: ``notarytool submit``, ``stapler`` and ``spctl``.

Submissions use ``--wait`` and can block for several minutes; there is no
client-side timeout.
"""

from __future__ import annotations

import re
from pathlib import Path

from mr.adapters.errors import ToolError
from mr.core.result import Err, Ok, Result
from mr.platform.process import require_tool
from mr.platform.process import run as run_process

__all__ = [
    "parse_submission_id",
    "run_assess",
    "run_staple",
    "run_submit",
    "submit_args",
]

_XCODE_HINT = "Install Xcode Command Line Tools with: xcode-select --install"
_SUBMISSION_ID = re.compile(r"id:\s*([0-9a-fA-F-]{36})")


def submit_args(zip_path: str, apple_id: str, team_id: str, password: str) -> list[str]:
    """Arguments for ``xcrun`` (without the executable)."""
    return [
        "notarytool",
        "submit",
        zip_path,
        "--apple-id",
        apple_id,
        "--team-id",
        team_id,
        "--password",
        password,
        "--wait",
    ]


def parse_submission_id(output: str) -> str:
    m = _SUBMISSION_ID.search(output)
    return m.group(1) if m else ""


def run_submit(
    zip_path: str,
    apple_id: str,
    team_id: str,
    password: str,
    cwd: Path,
) -> Result[str, ToolError]:
    tool = require_tool("xcrun", _XCODE_HINT)
    if isinstance(tool, Err):
        return Err(ToolError(message=tool.error.message, hint=tool.error.hint))

    result = run_process(
        ["xcrun", *submit_args(zip_path, apple_id, team_id, password)], cwd=cwd
    )
    if isinstance(result, Ok):
        output = result.value
        if "status: Invalid" in output:
            return Err(_rejected(output))
        return Ok(output)

    output = result.error.output
    if "Unable to authenticate" in output:
        return Err(
            ToolError(
                "notarytool authentication failed",
                hint="Verify apple_id, team_id and password (use an app-specific password from appleid.apple.com)",
                output=output,
            )
        )
    if "Invalid" in output:
        return Err(_rejected(output))
    return Err(ToolError(f"notarytool submit failed: {result.error}", output=output))


def _rejected(output: str) -> ToolError:
    submission_id = parse_submission_id(output)
    hint = f"Run: xcrun notarytool log {submission_id}" if submission_id else None
    return ToolError("Apple rejected the submission", hint=hint, output=output)


def run_staple(app_path: str, cwd: Path) -> Result[str, ToolError]:
    result = run_process(["xcrun", "stapler", "staple", app_path], cwd=cwd)
    if isinstance(result, Err):
        return Err(ToolError(f"stapling failed for {app_path}", output=result.error.output))
    return Ok(result.value)


def run_assess(app_path: str, cwd: Path) -> Result[str, ToolError]:
    result = run_process(
        ["spctl", "--assess", "--type", "execute", "--verbose", app_path], cwd=cwd
    )
    if isinstance(result, Err):
        return Err(
            ToolError(f"Gatekeeper assessment failed for {app_path}", output=result.error.output)
        )
    # spctl reports on stderr even when it succeeds
    return Ok(result.value)
