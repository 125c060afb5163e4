"""Code signing via ``codesign`` and keychain identity lookup via ``security``."""

from __future__ import annotations

import re
from pathlib import Path

from mr.adapters.errors import ToolError
from mr.core.result import Err, Ok, Result
from mr.platform.process import require_tool
from mr.platform.process import run as run_process

__all__ = [
    "check_identity_in_keychain",
    "codesign_args",
    "parse_identities",
    "run_codesign",
    "run_verify",
    "validate_identity",
]

_XCODE_HINT = "Install Xcode Command Line Tools with: xcode-select --install"
_LIST_IDENTITIES_HINT = "Run: security find-identity -v -p codesigning"

# `  1) 0123ABCD... "Developer ID Application: Name (TEAM)"`
_IDENTITY_LINE = re.compile(r'^\s*\d+\)\s+[0-9A-Fa-f]+\s+"(.+)"')


def parse_identities(output: str) -> list[str]:
    """Extract identity names from ``security find-identity`` output."""
    identities: list[str] = []
    for line in output.splitlines():
        m = _IDENTITY_LINE.match(line)
        if m:
            identities.append(m.group(1))
    return identities


def validate_identity(configured: str, available: list[str]) -> Result[None, ToolError]:
    if configured in available:
        return Ok(None)
    if not available:
        return Err(
            ToolError(
                f"signing identity {configured!r} not found in keychain: "
                "no valid signing identities are installed",
                hint=_LIST_IDENTITIES_HINT,
            )
        )
    listing = "\n".join(f"  - {i}" for i in available)
    return Err(
        ToolError(
            f"signing identity {configured!r} not found in keychain\navailable identities:\n{listing}",
            hint=_LIST_IDENTITIES_HINT,
        )
    )


def check_identity_in_keychain(configured: str, cwd: Path) -> Result[None, ToolError]:
    tool = require_tool("security", "This tool requires macOS")
    if isinstance(tool, Err):
        return Err(ToolError(message=tool.error.message, hint=tool.error.hint))

    result = run_process(["security", "find-identity", "-v", "-p", "codesigning"], cwd=cwd)
    if isinstance(result, Err):
        return Err(
            ToolError("failed to list signing identities", output=result.error.output)
        )
    return validate_identity(configured, parse_identities(result.value))


def codesign_args(identity: str, app_path: str, *, hardened_runtime: bool) -> list[str]:
    args = ["--deep", "--force"]
    if hardened_runtime:
        args += ["--options", "runtime"]
    return [*args, "--sign", identity, app_path]


def run_codesign(
    identity: str, app_path: str, cwd: Path, *, hardened_runtime: bool
) -> Result[str, ToolError]:
    tool = require_tool("codesign", _XCODE_HINT)
    if isinstance(tool, Err):
        return Err(ToolError(message=tool.error.message, hint=tool.error.hint))

    result = run_process(
        ["codesign", *codesign_args(identity, app_path, hardened_runtime=hardened_runtime)],
        cwd=cwd,
    )
    if isinstance(result, Ok):
        return Ok(result.value)

    output = result.error.output
    if "resource fork, Finder information, or similar detritus" in output:
        return Err(
            ToolError(
                "codesign failed due to extended attributes",
                hint=f"Remove them with: xattr -cr {app_path}",
                output=output,
            )
        )
    return Err(ToolError(f"codesign failed: {result.error}", output=output))


def run_verify(app_path: str, cwd: Path) -> Result[str, ToolError]:
    result = run_process(["codesign", "--verify", "--deep", "--strict", app_path], cwd=cwd)
    if isinstance(result, Err):
        return Err(
            ToolError(
                f"signature verification failed for {app_path}",
                output=result.error.output,
            )
        )
    return Ok(result.value)
