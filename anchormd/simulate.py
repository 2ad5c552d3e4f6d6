"""
Simple high-level simulation API.

This module provides a one-call interface for relaxing a structure with the
anchored integration engine.

Example:
    >>> from anchormd import simulate
    >>> result = simulate.relax_structure(pdb_bytes, steps=2000)
    >>> print(result.statistics.gradient_norm)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np
from numpy.typing import NDArray

from .config import RegionPolicy, SimulationConfig
from .engines import (
    DiagnosticsRecorder,
    IntegrationEngine,
    RunOutcome,
    StatisticsSnapshot,
)
from .io import PDBWriter
from .system import Atom

if TYPE_CHECKING:
    from .devices import DeviceContext, ResourceAdmissionGuard
    from .io import StructureParser


@dataclass
class SimulationResult:
    """Results from a relaxation run."""

    outcome: RunOutcome
    statistics: StatisticsSnapshot
    atoms: list[Atom] = field(default_factory=list)

    # Diagnostic time series
    steps: NDArray[np.integer] = field(
        default_factory=lambda: np.array([], dtype=np.int64)
    )
    energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    temperature: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    acceptance_rate: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    gradient_norm: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    # Per-atom results
    residue_ids: NDArray[np.integer] = field(
        default_factory=lambda: np.array([], dtype=np.int64)
    )
    displacement: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    # Final structure
    pdb: str = ""

    # Summary statistics
    mean_displacement_inside: float = 0.0
    mean_displacement_outside: float = 0.0

    @property
    def n_atoms(self) -> int:
        return len(self.atoms)


def backbone_chain(
    n_residues: int = 420,
    first_residue: int = 1,
    spacing: float = 3.8,
    rise: float = 1.5,
    radius: float = 2.3,
) -> list[Atom]:
    """
    Build a helical C-alpha chain, one atom per residue.

    Args:
        n_residues: Number of residues.
        first_residue: Residue id of the first atom.
        spacing: Arc length between consecutive atoms (Å).
        rise: Rise per residue along the helix axis (Å).
        radius: Helix radius (Å).

    Returns:
        Ordered list of atoms.
    """
    atoms = []
    turn = spacing / radius
    for i in range(n_residues):
        angle = i * turn
        atoms.append(
            Atom(
                residue_id=first_residue + i,
                coordinates=(radius * np.cos(angle), radius * np.sin(angle), i * rise),
                name="CA",
                residue_name="ALA",
                element="C",
            )
        )
    return atoms


def relax_structure(
    data: bytes | list[Atom],
    steps: int | None = None,
    config: SimulationConfig | None = None,
    record_every: int = 1,
    parser: StructureParser | None = None,
    guard: ResourceAdmissionGuard | None = None,
    device: DeviceContext | None = None,
    verbose: bool = False,
    **overrides: Any,
) -> SimulationResult:
    """
    Relax a structure with the anchored integration engine.

    Args:
        data: PDB buffer, or atoms.
        steps: Number of steps (default: ``config.max_steps``).
        config: Base configuration (default: ``SimulationConfig()``).
        record_every: Diagnostic recording frequency (default: 1).
        parser: Structure parser for ``data`` buffers (default: PDB).
        guard: Admission guard for the accelerated path.
        device: Backend context for the accelerated path.
        verbose: Print a summary (default: False).
        **overrides: Configuration fields to override, e.g.
            ``region=(10, 20)`` or ``stop_on_convergence=True``.

    Returns:
        SimulationResult with diagnostics and the final structure.

    Example:
        >>> result = relax_structure(backbone_chain(), steps=500)
        >>> result.mean_displacement_inside > result.mean_displacement_outside
        True
    """
    config = config if config is not None else SimulationConfig()
    region = overrides.pop("region", None)
    if region is not None:
        low, high = region
        overrides["region_policy"] = RegionPolicy(
            low=low,
            high=high,
            soft_k=config.region_policy.soft_k,
            rest_k=config.region_policy.rest_k,
        )
    if overrides:
        config = config.replace(**overrides)

    recorder = DiagnosticsRecorder(frequency=record_every)

    if isinstance(data, (bytes, bytearray, memoryview)):
        engine = IntegrationEngine.from_buffer(
            bytes(data),
            config,
            parser=parser,
            guard=guard,
            device=device,
            telemetry=[recorder],
        )
    else:
        engine = IntegrationEngine(
            data, config, guard=guard, device=device, telemetry=[recorder]
        )

    with engine:
        outcome = engine.run(steps)
        statistics = engine.get_statistics()
        atoms = engine.get_current_atoms()

    store = engine.store
    magnitudes = store.displacement_magnitudes()
    inside = config.region_policy.contains(store.residue_ids)
    mean_inside = float(magnitudes[inside].mean()) if inside.any() else 0.0
    mean_outside = float(magnitudes[~inside].mean()) if (~inside).any() else 0.0

    result = SimulationResult(
        outcome=outcome,
        statistics=statistics,
        atoms=atoms,
        steps=recorder.steps,
        energy=recorder.energy,
        temperature=recorder.temperature,
        acceptance_rate=recorder.acceptance_rate,
        gradient_norm=recorder.gradient_norm,
        residue_ids=store.residue_ids.copy(),
        displacement=magnitudes,
        pdb=PDBWriter().write(atoms, title=f"anchormd step {statistics.current_step}"),
        mean_displacement_inside=mean_inside,
        mean_displacement_outside=mean_outside,
    )

    if verbose:
        print(
            f"Relaxed {result.n_atoms} atoms: {statistics.current_step} steps, "
            f"path={outcome.execution_path}, E={statistics.current_energy:.3f}, "
            f"grad={statistics.gradient_norm:.6f}, converged={statistics.converged}"
        )

    return result
