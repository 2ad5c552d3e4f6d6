"""Read-only statistics snapshots."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..config import SimulationConfig
    from .state import EngineState


@dataclass(frozen=True)
class StatisticsSnapshot:
    """Immutable copy of the engine diagnostics at one instant."""

    current_step: int
    total_steps: int
    current_energy: float
    current_temperature: float
    acceptance_rate: float
    gradient_norm: float
    runtime_seconds: float
    converged: bool
    execution_path: str
    status: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string (an unconverged gradient norm becomes null)."""
        data = self.to_dict()
        if data["gradient_norm"] == float("inf"):
            data["gradient_norm"] = None
        return json.dumps(data, indent=indent)


class StatisticsReporter:
    """
    Assembles statistics snapshots.

    Stateless: every call reads the live state and recomputes
    ``converged``, so it is safe at any point of the engine lifecycle.
    """

    @staticmethod
    def snapshot(
        state: EngineState,
        config: SimulationConfig,
        execution_path: str,
    ) -> StatisticsSnapshot:
        """
        Build a snapshot.

        Args:
            state: Live engine state.
            config: Simulation configuration.
            execution_path: Name of the selected strategy.
        """
        return StatisticsSnapshot(
            current_step=state.current_step,
            total_steps=config.max_steps,
            current_energy=state.current_energy,
            current_temperature=state.current_temperature,
            acceptance_rate=state.acceptance_rate,
            gradient_norm=state.gradient_norm,
            runtime_seconds=state.elapsed,
            converged=state.gradient_norm < config.gradient_threshold,
            execution_path=execution_path,
            status=state.status.value,
        )
