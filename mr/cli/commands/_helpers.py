"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from mr.core.errors import ErrorCode
from mr.output.console import ConsoleProtocol, Style


def exit_with_error(
    console: ConsoleProtocol,
    error: object,
    error_code: ErrorCode,
    prefix: str = "",
) -> NoReturn:
    """Print ``error`` (and its hint, if any) and exit with ``error_code``.

    Uses the error's 'message' attribute when present, else ``str(error)``.
    """
    message: str = getattr(error, "message", str(error))
    hint: str | None = getattr(error, "hint", None)
    console.error(f"{prefix}: {message}" if prefix else message)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)
    raise typer.Exit(code=int(error_code))


def format_duration(seconds: float) -> str:
    """Compact elapsed time: ``523ms``, ``5s``, ``1m32s``, ``2m``."""
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    total = int(seconds + 0.5)
    if total < 60:
        return f"{total}s"
    minutes, secs = divmod(total, 60)
    if secs == 0:
        return f"{minutes}m"
    return f"{minutes}m{secs}s"
