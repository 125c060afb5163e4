"""Render release notes from commit subjects.

``generate`` is a pure function: filter, sort, then either group commits into
titled sections or render a flat bullet list.

Patterns use ``re.search`` semantics: a pattern matches if it is found
anywhere in the commit line unless it anchors itself with ``^``/``$``.

Grouping assigns each commit to the first group (after a stable sort on
``order``) whose pattern matches, falling back to the first catch-all group
(empty pattern). With no catch-all, unmatched commits are dropped.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from mr.core.config import ChangelogConfig, ChangelogGroup
from mr.core.result import Err, Ok, Result

__all__ = ["ChangelogError", "CompiledRules", "compile_rules", "generate", "has_catch_all"]


@dataclass(frozen=True, slots=True)
class ChangelogError:
    """An invalid pattern in the changelog rules.

    Attributes:
        source: Where the pattern came from (``filters.include``,
            ``filters.exclude`` or ``groups[<index>]``).
        pattern: The offending pattern.
        reason: The regex compiler's message.
    """

    source: str
    pattern: str
    reason: str

    @property
    def message(self) -> str:
        return f"invalid {self.source} pattern {self.pattern!r}: {self.reason}"

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class _Bucket:
    title: str
    regex: re.Pattern[str] | None
    commits: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class CompiledRules:
    include: tuple[re.Pattern[str], ...]
    exclude: tuple[re.Pattern[str], ...]
    groups: tuple[tuple[ChangelogGroup, re.Pattern[str] | None], ...]


def _compile(pattern: str, source: str) -> Result[re.Pattern[str], ChangelogError]:
    try:
        return Ok(re.compile(pattern))
    except re.error as e:
        return Err(ChangelogError(source=source, pattern=pattern, reason=str(e)))


def compile_rules(rules: ChangelogConfig) -> Result[CompiledRules, ChangelogError]:
    """Compile every pattern up front; the first bad one aborts."""
    include: list[re.Pattern[str]] = []
    for pattern in rules.filters.include:
        compiled = _compile(pattern, "filters.include")
        if isinstance(compiled, Err):
            return compiled
        include.append(compiled.value)

    exclude: list[re.Pattern[str]] = []
    for pattern in rules.filters.exclude:
        compiled = _compile(pattern, "filters.exclude")
        if isinstance(compiled, Err):
            return compiled
        exclude.append(compiled.value)

    groups: list[tuple[ChangelogGroup, re.Pattern[str] | None]] = []
    for i, group in enumerate(rules.groups):
        if group.is_catch_all:
            groups.append((group, None))
            continue
        compiled = _compile(group.regexp, f"groups[{i}]")
        if isinstance(compiled, Err):
            return compiled
        groups.append((group, compiled.value))

    return Ok(CompiledRules(include=tuple(include), exclude=tuple(exclude), groups=tuple(groups)))


def has_catch_all(groups: Sequence[ChangelogGroup]) -> bool:
    return any(g.is_catch_all for g in groups)


def generate(
    version: str, commits: Sequence[str], rules: ChangelogConfig
) -> Result[str, ChangelogError]:
    """Render markdown release notes.

    Args:
        version: Used as the ``##`` heading.
        commits: Commit subject lines, newest first.
        rules: Sort order, include/exclude filters and groups.

    Returns:
        Ok(markdown) or Err(ChangelogError) naming the first invalid pattern.
    """
    compiled = compile_rules(rules)
    if isinstance(compiled, Err):
        return compiled
    c = compiled.value

    entries = _filter(commits, c.include, c.exclude)
    entries = _sort(entries, rules.sort)

    if c.groups:
        return Ok(_format_grouped(version, entries, c.groups))
    return Ok(_format_flat(version, entries))


def _filter(
    commits: Sequence[str],
    include: Sequence[re.Pattern[str]],
    exclude: Sequence[re.Pattern[str]],
) -> list[str]:
    kept = list(commits)
    if include:
        kept = [line for line in kept if any(r.search(line) for r in include)]
    if exclude:
        kept = [line for line in kept if not any(r.search(line) for r in exclude)]
    return kept


def _sort(commits: list[str], order: str) -> list[str]:
    # git log is newest-first, which is already "desc"
    if order.lower() == "asc":
        return commits[::-1]
    return commits


def _format_grouped(
    version: str,
    commits: Sequence[str],
    groups: Sequence[tuple[ChangelogGroup, re.Pattern[str] | None]],
) -> str:
    ordered = sorted(groups, key=lambda item: item[0].order)
    buckets = [_Bucket(title=g.title, regex=regex) for g, regex in ordered]
    catch_all = next((b for b in buckets if b.regex is None), None)

    for line in commits:
        target = next((b for b in buckets if b.regex is not None and b.regex.search(line)), None)
        if target is None:
            target = catch_all
        if target is not None:
            target.commits.append(line)

    lines = [f"## {version}"]
    for bucket in buckets:
        if not bucket.commits:
            continue
        lines.extend(["", f"### {bucket.title}", ""])
        lines.extend(f"- {line}" for line in bucket.commits)
    return "\n".join(lines) + "\n"


def _format_flat(version: str, commits: Sequence[str]) -> str:
    lines = [f"## {version}", ""]
    lines.extend(f"- {line}" for line in commits)
    return "\n".join(lines) + "\n"
