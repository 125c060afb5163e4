"""OS process boundary."""

from .process import ProcessError, ToolMissing, require_tool, run

__all__ = ["ProcessError", "ToolMissing", "require_tool", "run"]
