from __future__ import annotations

from pathlib import Path

from mr.core.config import Config
from mr.output.console import MockConsole
from mr.pipeline.context import Artifacts, Context


def test_missing_returns_first_empty_field() -> None:
    artifacts = Artifacts(app_path="/x/MyApp.app")
    assert artifacts.missing(("app_path", "output_dir", "packages")) == "output_dir"
    assert artifacts.missing(("app_path",)) is None
    assert artifacts.missing(()) is None


def test_changed_since_detects_appends() -> None:
    artifacts = Artifacts()
    before = artifacts.snapshot()
    artifacts.packages.append("a.zip")
    artifacts.cask_path = "myapp.rb"
    assert artifacts.changed_since(before) == ["packages", "cask_path"]


def test_snapshot_copies_lists() -> None:
    artifacts = Artifacts(packages=["a.zip"])
    snap = artifacts.snapshot()
    artifacts.packages.append("b.dmg")
    assert snap["packages"] == ["a.zip"]


def test_dist_dir_is_under_workdir(tmp_path: Path) -> None:
    ctx = Context(config=Config(), console=MockConsole(), workdir=tmp_path)
    assert ctx.dist_dir == tmp_path / "dist"
    assert ctx.skip_publish is False
    assert ctx.release_notes == ""
