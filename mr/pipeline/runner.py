"""Sequential stage execution.

Steps run strictly in declared order. A ``Skip`` is logged and the stage moves
on; the first ``Err`` stops the stage and is returned prefixed with the step
name. Partial writes made by a failing step are not rolled back.

``requires`` is checked before ``execute``, so a step whose inputs are missing
fails even if it would have skipped. A skipping step must leave the artifacts
untouched.
"""

from __future__ import annotations

from collections.abc import Sequence

from mr.core.result import Err, Ok, Result, is_skip
from mr.pipeline.context import Context
from mr.pipeline.step import PipelineError, Step

__all__ = ["run_stage"]


def run_stage(ctx: Context, steps: Sequence[Step]) -> Result[None, PipelineError]:
    """Run ``steps`` in order against ``ctx``.

    Returns:
        Ok(None) when every step succeeded or skipped, otherwise
        Err(PipelineError) for the first failing step.
    """
    console = ctx.console
    for step in steps:
        console.action(step.name)

        missing = ctx.artifacts.missing(step.requires)
        if missing is not None:
            return Err(
                PipelineError(
                    step=step.name,
                    message=f"missing artifact {missing!r}: the step that produces it did not run",
                )
            )

        before = ctx.artifacts.snapshot()
        result = step.execute(ctx)

        if isinstance(result, Err):
            return Err(
                PipelineError(step=step.name, message=result.error.message, hint=result.error.hint)
            )

        changed = ctx.artifacts.changed_since(before)
        if is_skip(result):
            if changed:
                return Err(
                    PipelineError(
                        step=step.name,
                        message=f"skipped but wrote artifact field(s): {', '.join(changed)}",
                    )
                )
            console.info(f"skipped: {result.reason}")
            continue

        foreign = [f for f in changed if f not in step.provides]
        if foreign:
            return Err(
                PipelineError(
                    step=step.name,
                    message=f"wrote artifact field(s) it does not own: {', '.join(foreign)}",
                )
            )

    return Ok(None)
