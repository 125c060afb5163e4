"""Tests for mr.platform.process module."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

import pytest

from mr.core.result import Err, Ok
from mr.platform.process import ProcessError, require_tool, run

needs_sh = pytest.mark.skipif(shutil.which("sh") is None, reason="sh not available")


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(command=("git", "status"), returncode=1, stdout="", stderr="fatal")
        assert str(error) == "git status failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("xcrun", "notarytool", "submit", "app.zip", "--wait"),
            returncode=1,
            stdout="",
            stderr="error",
        )
        assert str(error) == "xcrun notarytool submit ... failed (exit 1)"

    def test_output_joins_streams(self) -> None:
        error = ProcessError(("x",), 1, "out", "err")
        assert error.output == "out\nerr"
        assert ProcessError(("x",), 1, "", "err").output == "err"


@needs_sh
class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        assert run(["sh", "-c", "echo hello"], cwd=tmp_path) == Ok("hello\n")

    def test_failure_captures_streams(self, tmp_path: Path) -> None:
        result = run(["sh", "-c", "echo partial; echo boom >&2; exit 42"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 42
        assert result.error.stdout == "partial\n"
        assert "boom" in result.error.stderr

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert result.error.stderr

    def test_uses_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "marker.txt").write_text("x", encoding="utf-8")
        result = run(["sh", "-c", "ls"], cwd=tmp_path)
        assert isinstance(result, Ok)
        assert "marker.txt" in result.value

    def test_uses_env(self, tmp_path: Path) -> None:
        env = dict(os.environ, MR_TEST_VAR="value")
        assert run(["sh", "-c", "printf %s \"$MR_TEST_VAR\""], cwd=tmp_path, env=env) == Ok("value")

    def test_input_text(self, tmp_path: Path) -> None:
        assert run(["sh", "-c", "cat"], cwd=tmp_path, input_text="piped") == Ok("piped")

    def test_timeout(self, tmp_path: Path) -> None:
        result = run(["sh", "-c", "sleep 5"], cwd=tmp_path, timeout=0.1)
        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr


class TestRequireTool:
    def test_missing(self) -> None:
        result = require_tool("nonexistent_command_12345", "Install it")
        assert isinstance(result, Err)
        assert result.error.message == "nonexistent_command_12345 not found"
        assert result.error.hint == "Install it"

    @needs_sh
    def test_found(self) -> None:
        result = require_tool("sh", "unused")
        assert isinstance(result, Ok)
        assert Path(result.value).name == "sh"
