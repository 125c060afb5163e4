"""Process exit codes.

Values are part of the CLI contract: scripts and CI jobs branch on them.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (bad flags, invalid configuration)
    - 2: Environment error (config file unreadable, no git tags, tool missing)
    - 3: Pipeline error (an execution step failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
