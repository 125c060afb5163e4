"""Git state resolution (version tags, commit metadata, commit log)."""

from .version import (
    GitError,
    GitInfo,
    log_between,
    previous_tag,
    resolve_git_info,
    resolve_version,
    snapshot_version,
)

__all__ = [
    "GitError",
    "GitInfo",
    "log_between",
    "previous_tag",
    "resolve_git_info",
    "resolve_version",
    "snapshot_version",
]
