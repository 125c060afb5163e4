"""Subprocess execution with Result-based error handling.

Every external tool (xcodebuild, codesign, xcrun, hdiutil, ditto, git, gh)
goes through ``run`` so adapters never deal with ``subprocess`` exceptions and
tests can replace a single function.

Usage:
    match run(["git", "rev-parse", "HEAD"], cwd=repo):
        case Ok(stdout):
            print(stdout.strip())
        case Err(error):
            print(error.output)
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from mr.core.result import Err, Ok, Result

__all__ = ["ProcessError", "ToolMissing", "require_tool", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code (-1 when the process could not start or timed out).
        stdout: Standard output (may be empty).
        stderr: Standard error.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        """Combined stdout and stderr, for matching tool diagnostics."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


@dataclass(frozen=True, slots=True)
class ToolMissing:
    """A required executable is not on PATH."""

    tool: str
    hint: str

    @property
    def message(self) -> str:
        return f"{self.tool} not found"


def require_tool(tool: str, hint: str) -> Result[str, ToolMissing]:
    """Return the absolute path of ``tool`` or an error carrying an install hint."""
    path = shutil.which(tool)
    if path is None:
        return Err(ToolMissing(tool=tool, hint=hint))
    return Ok(path)


def run(
    cmd: list[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
    input_text: str | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout.

    Args:
        cmd: Command and arguments.
        cwd: Working directory.
        env: Full environment for the child (inherits the current one if None).
        timeout: Maximum seconds to wait (None for no limit).
        input_text: Text written to the child's stdin.

    Returns:
        Ok(stdout) on exit status 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            input=input_text,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        stdout = e.stdout if isinstance(e.stdout, str) else ""
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=stdout,
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )
    return Ok(proc.stdout)
