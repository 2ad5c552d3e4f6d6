"""Run outcome reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RunStatus(Enum):
    """Overall result of a run."""

    SUCCESS = "success"
    FAILURE = "failure"


class TerminationReason(Enum):
    """Why a run loop ended."""

    STEPS_EXHAUSTED = "steps_exhausted"
    CONVERGED = "converged"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class RunOutcome:
    """
    Result of a single ``IntegrationEngine.run`` call.

    Attributes:
        status: Success or failure.
        message: Human-readable summary.
        metrics: Scalar run metrics (steps, energy, gradient, timing, path).
        reason: Termination reason (None on failure).
        execution_path: Name of the strategy that actually ran.
    """

    status: RunStatus
    message: str
    metrics: dict[str, float] = field(default_factory=dict)
    reason: TerminationReason | None = None
    execution_path: str = "reference"

    @property
    def ok(self) -> bool:
        """Whether the run succeeded."""
        return self.status is RunStatus.SUCCESS

    @property
    def converged(self) -> bool:
        """Whether the run ended below the gradient threshold."""
        return bool(self.metrics.get("converged", 0.0))

    @property
    def accelerated(self) -> bool:
        """Whether the accelerated path ran."""
        return bool(self.metrics.get("accelerated", 0.0))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "status": self.status.value,
            "message": self.message,
            "metrics": dict(self.metrics),
            "reason": self.reason.value if self.reason is not None else None,
            "execution_path": self.execution_path,
        }
