"""Concrete pipeline steps and the default step ordering."""

from mr.pipeline.orchestrator import Pipeline

from .archive import ArchiveCheck, ArchiveStep
from .build import BuildCheck, BuildStep
from .changelog import ChangelogCheck, ChangelogStep
from .homebrew import HomebrewCheck, HomebrewStep
from .notarize import NotarizeCheck, NotarizeStep
from .project import ProjectCheck
from .release import ReleaseCheck, ReleaseStep
from .sign import SignCheck, SignStep

__all__ = [
    "ArchiveCheck",
    "ArchiveStep",
    "BuildCheck",
    "BuildStep",
    "ChangelogCheck",
    "ChangelogStep",
    "HomebrewCheck",
    "HomebrewStep",
    "NotarizeCheck",
    "NotarizeStep",
    "ProjectCheck",
    "ReleaseCheck",
    "ReleaseStep",
    "SignCheck",
    "SignStep",
    "default_pipeline",
]


def default_pipeline() -> Pipeline:
    """Validation checks for every config section, then build through publish."""
    return Pipeline.of(
        validation=[
            ProjectCheck(),
            BuildCheck(),
            SignCheck(),
            NotarizeCheck(),
            ArchiveCheck(),
            ChangelogCheck(),
            ReleaseCheck(),
            HomebrewCheck(),
        ],
        execution=[
            BuildStep(),
            SignStep(),
            NotarizeStep(),
            ArchiveStep(),
            ChangelogStep(),
            ReleaseStep(),
            HomebrewStep(),
        ],
    )
