"""Archive creation with the macOS-native tools ``ditto`` and ``hdiutil``.

``ditto`` preserves resource forks, symlinks and extended attributes inside the
bundle, which a plain zip would lose and break the code signature.
"""

from __future__ import annotations

from pathlib import Path

from mr.adapters.errors import ToolError
from mr.core.result import Err, Ok, Result
from mr.platform.process import require_tool
from mr.platform.process import run as run_process

__all__ = ["create_dmg", "create_zip", "dmg_args", "zip_args"]


def zip_args(app_path: str, output_path: str) -> list[str]:
    return ["-c", "-k", "--keepParent", "--sequesterRsrc", app_path, output_path]


def dmg_args(app_path: str, output_path: str, volume_name: str) -> list[str]:
    return [
        "create",
        "-volname",
        volume_name,
        "-srcfolder",
        app_path,
        "-ov",
        "-format",
        "UDZO",
        output_path,
    ]


def create_zip(app_path: str, output_path: str, cwd: Path) -> Result[None, ToolError]:
    tool = require_tool("ditto", "ditto ships with macOS")
    if isinstance(tool, Err):
        return Err(ToolError(message=tool.error.message, hint=tool.error.hint))

    result = run_process(["ditto", *zip_args(app_path, output_path)], cwd=cwd)
    if isinstance(result, Err):
        return Err(ToolError(f"failed to create {output_path}", output=result.error.output))
    return Ok(None)


def create_dmg(
    app_path: str, output_path: str, volume_name: str, cwd: Path
) -> Result[None, ToolError]:
    tool = require_tool("hdiutil", "hdiutil ships with macOS")
    if isinstance(tool, Err):
        return Err(ToolError(message=tool.error.message, hint=tool.error.hint))

    result = run_process(["hdiutil", *dmg_args(app_path, output_path, volume_name)], cwd=cwd)
    if isinstance(result, Err):
        return Err(ToolError(f"failed to create {output_path}", output=result.error.output))
    return Ok(None)
