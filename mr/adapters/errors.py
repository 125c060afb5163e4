from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ToolError:
    """Failure from an external tool adapter.

    Attributes:
        message: What failed, phrased for the operator.
        hint: Optional remediation.
        output: Captured tool output (logged at debug level).
    """

    message: str
    hint: str | None = None
    output: str = ""
