"""Reference and accelerated execution strategies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .anchored import ACCELERATED_NOISE_SCALE, NOISE_AMPLITUDE
from .base import ExecutionStrategy

if TYPE_CHECKING:
    from ..config import SimulationConfig
    from ..devices.context import DeviceContext
    from ..engines.state import EngineState
    from ..system import AtomStore

logger = logging.getLogger(__name__)


class ReferenceStrategy(ExecutionStrategy):
    """
    Reference execution path, always available.

    Attributes:
        noise_amplitude: Thermal perturbation amplitude (default 0.20).
    """

    def __init__(self, noise_amplitude: float = NOISE_AMPLITUDE) -> None:
        self._noise_amplitude = noise_amplitude

    @property
    def name(self) -> str:
        return "reference"

    @property
    def noise_amplitude(self) -> float:
        return self._noise_amplitude


class AcceleratedStrategy(ExecutionStrategy):
    """
    Accelerated execution path.

    Runs the same update as the reference path with the noise amplitude
    scaled by ``ACCELERATED_NOISE_SCALE``, dispatched through a device
    context. Only constructed after the device and the admission guard have
    both accepted the request.
    """

    def __init__(
        self,
        device: DeviceContext,
        base_amplitude: float = NOISE_AMPLITUDE,
        scale: float = ACCELERATED_NOISE_SCALE,
    ) -> None:
        """
        Initialize accelerated strategy.

        Args:
            device: Backend context that executes the step.
            base_amplitude: Reference noise amplitude.
            scale: Amplitude multiplier.
        """
        self._device = device
        self._noise_amplitude = base_amplitude * scale

    @property
    def name(self) -> str:
        return "accelerated"

    @property
    def noise_amplitude(self) -> float:
        return self._noise_amplitude

    @property
    def accelerated(self) -> bool:
        return True

    @property
    def device(self) -> DeviceContext:
        """Return the backend context."""
        return self._device

    def step(
        self,
        store: AtomStore,
        state: EngineState,
        config: SimulationConfig,
    ) -> None:
        super().step(store, state, config)
        self._device.synchronize()
        logger.debug(
            "Accelerated step %d complete on %s (%d atoms)",
            state.current_step,
            self._device.name,
            store.n_atoms,
        )
