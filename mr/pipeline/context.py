"""Shared run state threaded through every pipeline step.

One ``Context`` is built per command invocation. ``config``, ``version``,
``git`` and the toggles are set before the pipeline starts and treated as
read-only afterwards; ``artifacts`` grows as execution steps run.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING

from mr.core.config import Config
from mr.git.version import GitInfo
from mr.output.console import ConsoleProtocol

if TYPE_CHECKING:
    from mr.adapters.github import GitHubClient

__all__ = ["Artifacts", "Context", "DIST_DIR"]

DIST_DIR = "dist"


@dataclass(slots=True)
class Artifacts:
    """Outputs produced by execution steps, consumed by later ones.

    Attributes:
        output_dir: ``dist/<project>/<version>`` (build)
        archive_path: the ``.xcarchive`` (build)
        app_path: the extracted ``.app`` bundle (build)
        packages: ``.zip``/``.dmg``/``.app`` outputs, append-only (archive)
        changelog_path: written ``CHANGELOG.md`` (changelog)
        release_url: HTML URL of the published release (release)
        cask_path: generated cask ``.rb`` file (homebrew)
    """

    output_dir: str = ""
    archive_path: str = ""
    app_path: str = ""
    packages: list[str] = field(default_factory=list)
    changelog_path: str = ""
    release_url: str = ""
    cask_path: str = ""

    def missing(self, names: tuple[str, ...]) -> str | None:
        """Return the first field in ``names`` that is still empty."""
        for name in names:
            if not getattr(self, name):
                return name
        return None

    def snapshot(self) -> dict[str, object]:
        return {f.name: _copy(getattr(self, f.name)) for f in fields(self)}

    def changed_since(self, before: dict[str, object]) -> list[str]:
        return [name for name, value in self.snapshot().items() if before.get(name) != value]


def _copy(value: object) -> object:
    if isinstance(value, list):
        return list(value)
    return value


@dataclass(slots=True)
class Context:
    """Mutable record for a single pipeline run (never shared across runs)."""

    config: Config
    console: ConsoleProtocol
    version: str = ""
    git: GitInfo = field(default_factory=GitInfo)
    skip_publish: bool = False
    skip_notarize: bool = False
    clean: bool = False
    workdir: Path = field(default_factory=Path.cwd)
    artifacts: Artifacts = field(default_factory=Artifacts)
    release_notes: str = ""
    github: GitHubClient | None = None
    tap_github: GitHubClient | None = None

    @property
    def dist_dir(self) -> Path:
        return self.workdir / DIST_DIR
