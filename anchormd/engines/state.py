"""Live engine state."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from enum import Enum


class EngineStatus(Enum):
    """Engine lifecycle states."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class EngineState:
    """
    Scalar diagnostics mutated only by the integration engine.

    Attributes:
        current_step: Steps taken over the engine lifetime.
        current_energy: Energy diagnostic.
        current_temperature: Temperature diagnostic.
        acceptance_rate: Acceptance diagnostic.
        gradient_norm: Convergence proxy; ``inf`` until the first step.
        run_start_timestamp: ``time.perf_counter()`` at the last run start.
        status: Lifecycle state.
    """

    current_step: int = 0
    current_energy: float = 0.0
    current_temperature: float = 0.0
    acceptance_rate: float = 0.0
    gradient_norm: float = math.inf
    run_start_timestamp: float = field(default_factory=time.perf_counter)
    status: EngineStatus = EngineStatus.UNINITIALIZED

    @property
    def elapsed(self) -> float:
        """Seconds since the last run start."""
        return time.perf_counter() - self.run_start_timestamp
