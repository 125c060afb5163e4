"""Helpers shared by step implementations."""

from __future__ import annotations

from mr.adapters.errors import ToolError
from mr.core.result import Err
from mr.pipeline.context import Context
from mr.pipeline.step import StepError


def log_output(ctx: Context, output: str) -> None:
    """Forward captured tool output to the debug channel."""
    text = output.strip()
    if text:
        ctx.console.debug(text)


def tool_failure(ctx: Context, error: ToolError, prefix: str = "") -> Err[StepError]:
    """Convert an adapter failure into a step failure, keeping tool output in debug."""
    log_output(ctx, error.output)
    message = f"{prefix}: {error.message}" if prefix else error.message
    return Err(StepError(message, hint=error.hint))
