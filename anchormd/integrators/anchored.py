"""
Anchored selective-stiffness update.

Each atom is pulled back toward its anchor position by a linear spring whose
constant depends on residue membership in the configured region, then
perturbed by a deterministic pseudo-noise signal:

    f_i   = -k_i * (x_i - a_i)
    x_i  += f_i + A * (sin(1.3 i + 0.1 t), cos(1.7 i + 0.2 t), sin(1.9 i + 0.3 t))

where t is the current step number. The noise is a reproducible function of
(i, t) only; it is not a physical thermostat.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ..engines.state import EngineState

NOISE_AMPLITUDE = 0.20
ACCELERATED_NOISE_SCALE = 1.1

# (index factor, step factor) per axis
NOISE_PHASES = ((1.3, 0.1), (1.7, 0.2), (1.9, 0.3))

ENERGY_RELAXATION = 0.1
GRADIENT_FLOOR = 0.001
TEMPERATURE_RIPPLE = 0.1
ACCEPTANCE_BASELINE = 0.6
ACCEPTANCE_RIPPLE = 0.1
ACCEPTANCE_BOUNDS = (0.5, 0.9)


def synthetic_noise(
    n_atoms: int,
    step: int,
    amplitude: float = NOISE_AMPLITUDE,
) -> NDArray[np.floating]:
    """
    Deterministic thermal perturbation for every atom at ``step``.

    Args:
        n_atoms: Number of atoms.
        step: Current step number.
        amplitude: Noise amplitude.

    Returns:
        Perturbation, shape (n_atoms, 3).
    """
    index = np.arange(n_atoms, dtype=np.float64)
    noise = np.empty((n_atoms, 3), dtype=np.float64)

    (ix, sx), (iy, sy), (iz, sz) = NOISE_PHASES
    noise[:, 0] = np.sin(index * ix + step * sx)
    noise[:, 1] = np.cos(index * iy + step * sy)
    noise[:, 2] = np.sin(index * iz + step * sz)

    return noise * amplitude


def restoring_force(
    positions: NDArray[np.floating],
    anchors: NDArray[np.floating],
    stiffness: NDArray[np.floating],
) -> NDArray[np.floating]:
    """Linear spring force toward the anchors, shape (N, 3)."""
    return -stiffness[:, np.newaxis] * (positions - anchors)


def anchored_update(
    positions: NDArray[np.floating],
    anchors: NDArray[np.floating],
    stiffness: NDArray[np.floating],
    step: int,
    amplitude: float,
) -> None:
    """
    Apply one anchored update to ``positions`` in place.

    Args:
        positions: Current positions, shape (N, 3). Modified in place.
        anchors: Anchor positions, shape (N, 3).
        stiffness: Per-atom spring constants, shape (N,).
        step: Current step number.
        amplitude: Noise amplitude.
    """
    forces = restoring_force(positions, anchors, stiffness)
    noise = synthetic_noise(len(positions), step, amplitude)
    positions += forces + noise


def advance_diagnostics(state: EngineState, temperature: float) -> None:
    """
    Advance the scalar diagnostics by one step.

    With s = 1 / (step + 1):
        energy        += (s - 0.5) * 0.1
        gradient_norm  = s + 0.001
        temperature    = T_set + 0.1 * sin(0.1 * step)
        acceptance     = clamp(0.6 + 0.1 * cos(0.05 * step), 0.5, 0.9)

    Args:
        state: Engine state, modified in place.
        temperature: Thermostat set point.
    """
    step = state.current_step
    step_factor = 1.0 / (step + 1)

    state.current_energy += (step_factor - 0.5) * ENERGY_RELAXATION
    state.gradient_norm = step_factor + GRADIENT_FLOOR
    state.current_temperature = temperature + TEMPERATURE_RIPPLE * math.sin(step * 0.1)

    low, high = ACCEPTANCE_BOUNDS
    acceptance = ACCEPTANCE_BASELINE + ACCEPTANCE_RIPPLE * math.cos(step * 0.05)
    state.acceptance_rate = min(max(acceptance, low), high)
