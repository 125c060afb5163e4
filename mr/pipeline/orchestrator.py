"""Two-stage pipeline: validate everything, then execute.

Validation is a total pre-flight gate. If any validation step fails, no
execution step runs, so nothing is built, signed or published with a broken
configuration.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from mr.core.result import Err, Result
from mr.pipeline.context import Context
from mr.pipeline.runner import run_stage
from mr.pipeline.step import PipelineError, Step

__all__ = ["Pipeline"]


@dataclass(frozen=True, slots=True)
class Pipeline:
    """An explicit pair of ordered step lists.

    Attributes:
        validation: Side-effect-free checks over config and toggles.
        execution: Steps that do the work and populate artifacts.
    """

    validation: tuple[Step, ...]
    execution: tuple[Step, ...]

    @classmethod
    def of(cls, validation: Sequence[Step], execution: Sequence[Step]) -> Pipeline:
        return cls(validation=tuple(validation), execution=tuple(execution))

    def run_validation(self, ctx: Context) -> Result[None, PipelineError]:
        return run_stage(ctx, self.validation)

    def run_execution(self, ctx: Context) -> Result[None, PipelineError]:
        return run_stage(ctx, self.execution)

    def run_all(self, ctx: Context) -> Result[None, PipelineError]:
        """Validate, then execute. Execution never starts after a validation error."""
        validated = self.run_validation(ctx)
        if isinstance(validated, Err):
            return validated
        return self.run_execution(ctx)
