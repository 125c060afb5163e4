"""``env(NAME)`` substitution for configuration values.

Substitution runs over parsed TOML values only; table keys are never touched.
Unset variables are left verbatim so the validation stage can name them.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

from .result import Err, Ok, Result

__all__ = ["ENV_PATTERN", "substitute", "substitute_tree", "unresolved_vars"]

ENV_PATTERN = re.compile(r"env\(([^)]+)\)")

# Newlines and tabs are allowed (multiline secrets).
_DISALLOWED_CONTROL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def substitute(value: str, environ: Mapping[str, str] | None = None) -> Result[str, str]:
    """Replace every ``env(NAME)`` whose variable is set."""
    env = os.environ if environ is None else environ
    bad: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in env:
            return match.group(0)
        resolved = env[key]
        if _DISALLOWED_CONTROL.search(resolved):
            bad.append(key)
            return ""
        return resolved

    out = ENV_PATTERN.sub(_replace, value)
    if bad:
        return Err(f"environment variable {bad[0]} contains disallowed control characters")
    return Ok(out)


def substitute_tree(node: object, environ: Mapping[str, str] | None = None) -> Result[object, str]:
    """Return a copy of a parsed TOML tree with string values substituted."""
    if isinstance(node, str):
        return substitute(node, environ)
    if isinstance(node, dict):
        table: dict[str, object] = {}
        for key, value in node.items():
            sub = substitute_tree(value, environ)
            if isinstance(sub, Err):
                return sub
            table[str(key)] = sub.value
        return Ok(table)
    if isinstance(node, list):
        items: list[object] = []
        for value in node:
            sub = substitute_tree(value, environ)
            if isinstance(sub, Err):
                return sub
            items.append(sub.value)
        return Ok(items)
    return Ok(node)


def unresolved_vars(value: str) -> list[str]:
    """Names of ``env(...)`` references still present in ``value``."""
    return ENV_PATTERN.findall(value)
