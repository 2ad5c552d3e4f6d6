"""Base interface for execution strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .anchored import advance_diagnostics, anchored_update

if TYPE_CHECKING:
    from ..config import SimulationConfig
    from ..engines.state import EngineState
    from ..system import AtomStore


class ExecutionStrategy(ABC):
    """
    Abstract base class for per-step execution strategies.

    A strategy advances the atom store and the engine diagnostics by exactly
    one step. The engine picks one strategy at construction and calls it for
    every step, so a step is never a mix of two strategies.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return strategy name as reported in run outcomes."""
        ...

    @property
    @abstractmethod
    def noise_amplitude(self) -> float:
        """Return the thermal perturbation amplitude."""
        ...

    @property
    def accelerated(self) -> bool:
        """Whether this strategy is the accelerated path."""
        return False

    def step(
        self,
        store: AtomStore,
        state: EngineState,
        config: SimulationConfig,
    ) -> None:
        """
        Advance coordinates and diagnostics for ``state.current_step``.

        Args:
            store: Atom store; its current positions are updated in place.
            state: Engine state; diagnostics are updated in place.
            config: Simulation configuration.
        """
        anchored_update(
            store.current_positions,
            store.anchor_positions,
            config.region_policy.stiffness(store.residue_ids),
            state.current_step,
            self.noise_amplitude,
        )
        advance_diagnostics(state, config.temperature)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(noise_amplitude={self.noise_amplitude})"
