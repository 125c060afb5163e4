"""The step contract shared by every pipeline stage.

A step is a small value object with a display ``name`` and a single
side-effecting ``execute`` operation over the run context. ``execute`` returns
one of three outcomes:

- ``Ok(None)``: the step did its work
- ``Skip(reason)``: the step deliberately did nothing; the stage continues
- ``Err(StepError)``: the step failed; the stage stops

Steps also declare which artifact fields they read (``requires``) and which
they write (``provides``). The stage runner enforces both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from mr.core.result import Err, Ok, Skip

if TYPE_CHECKING:
    from mr.pipeline.context import Context

__all__ = ["PipelineError", "Step", "StepError", "StepResult"]


@dataclass(frozen=True, slots=True)
class StepError:
    """Failure reported by a step.

    Attributes:
        message: Operator-facing description of what went wrong.
        hint: Optional remediation (command to run, field to fix).
    """

    message: str
    hint: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class PipelineError:
    """A step failure attributed to the step that produced it."""

    step: str
    message: str
    hint: str | None = None

    def __str__(self) -> str:
        return f"{self.step}: {self.message}"


type StepResult = Ok[None] | Skip | Err[StepError]


class Step(Protocol):
    """Protocol implemented by every validation and execution step."""

    @property
    def name(self) -> str:
        """Stable, human-readable identifier used for logging and error prefixes."""
        ...

    @property
    def requires(self) -> tuple[str, ...]:
        """Artifact fields that must be non-empty before ``execute`` runs.

        Checked before the step is invoked, so it applies even when the step
        would return ``Skip``.
        """
        ...

    @property
    def provides(self) -> tuple[str, ...]:
        """Artifact fields this step is allowed to write."""
        ...

    def execute(self, ctx: Context) -> StepResult:
        """Run the step once against the shared run context."""
        ...
