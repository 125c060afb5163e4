"""Field validators used by the validation stage.

Each returns ``Ok(None)`` or ``Err(StepError)`` with the dotted field name in
the message so the operator can find the offending line in the config file.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import PurePosixPath

from mr.core.env import unresolved_vars
from mr.core.result import Err, Ok, Result
from mr.pipeline.step import StepError

__all__ = [
    "Check",
    "all_one_of",
    "check_resolved",
    "first_error",
    "is_local_path",
    "one_of",
    "required_list",
    "required_string",
]

type Check = Result[None, StepError]


def required_string(value: str, field: str) -> Check:
    if not value:
        return Err(StepError(f"{field} is required"))
    return Ok(None)


def required_list(values: Sequence[str], field: str) -> Check:
    if not values:
        return Err(StepError(f"{field} requires at least one item"))
    return Ok(None)


def one_of(value: str, allowed: Iterable[str], field: str) -> Check:
    if value not in set(allowed):
        return Err(StepError(f"invalid value for {field}: {value}"))
    return Ok(None)


def all_one_of(values: Sequence[str], allowed: Iterable[str], field: str) -> Check:
    allowed_set = set(allowed)
    for v in values:
        if v not in allowed_set:
            return Err(StepError(f"invalid {field}: {v}"))
    return Ok(None)


def check_resolved(value: str, field: str) -> Check:
    """Fail when ``value`` still holds an ``env(NAME)`` reference."""
    names = unresolved_vars(value)
    if names:
        return Err(
            StepError(
                f"{field}: environment variable {names[0]} is not set",
                hint=f"export {names[0]}=...",
            )
        )
    return Ok(None)


def is_local_path(value: str) -> bool:
    """True for a non-empty relative path that stays inside its base directory."""
    if not value or value.startswith(("/", "\\")):
        return False
    depth = 0
    for part in PurePosixPath(value.replace("\\", "/")).parts:
        if part == "..":
            depth -= 1
            if depth < 0:
                return False
        elif part != ".":
            depth += 1
    return True


def first_error(*checks: Check) -> Check:
    """Return the first ``Err`` among ``checks`` (all already evaluated)."""
    for c in checks:
        if isinstance(c, Err):
            return c
    return Ok(None)
