"""Pipeline orchestration: step contract, stage runner, two-stage pipeline."""

from .context import Artifacts, Context
from .orchestrator import Pipeline
from .runner import run_stage
from .step import PipelineError, Step, StepError, StepResult

__all__ = [
    "Artifacts",
    "Context",
    "Pipeline",
    "PipelineError",
    "Step",
    "StepError",
    "StepResult",
    "run_stage",
]
