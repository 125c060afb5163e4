"""Changelog generation from commit messages."""

from .generator import ChangelogError, compile_rules, generate, has_catch_all

__all__ = ["ChangelogError", "compile_rules", "generate", "has_catch_all"]
