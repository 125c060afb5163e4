"""Adapters for external tools: Xcode, signing, notarization, packaging, GitHub, Homebrew."""

from .errors import ToolError

__all__ = ["ToolError"]
