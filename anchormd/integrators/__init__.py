"""Execution strategies for the anchored update."""

from .anchored import (
    ACCELERATED_NOISE_SCALE,
    NOISE_AMPLITUDE,
    advance_diagnostics,
    anchored_update,
    restoring_force,
    synthetic_noise,
)
from .base import ExecutionStrategy
from .strategies import AcceleratedStrategy, ReferenceStrategy

__all__ = [
    # Base class
    "ExecutionStrategy",
    # Strategies
    "ReferenceStrategy",
    "AcceleratedStrategy",
    # Update kernel
    "anchored_update",
    "restoring_force",
    "synthetic_noise",
    "advance_diagnostics",
    "NOISE_AMPLITUDE",
    "ACCELERATED_NOISE_SCALE",
]
