"""
Determinism Gates.

These tests verify that relaxations are reproducible.

Gates:
1. Serial determinism: identical input gives bit-identical results
2. Path determinism: accelerated == reference up to the noise scale
3. Thread determinism: threaded engines == serial engine
"""

import threading

import numpy as np

from anchormd.config import MIB, SimulationConfig
from anchormd.devices import HostDeviceContext, MemoryBudgetGuard
from anchormd.engines import DiagnosticsRecorder, IntegrationEngine
from anchormd.integrators import ACCELERATED_NOISE_SCALE
from anchormd.io import PDBWriter
from anchormd.simulate import backbone_chain


def run_relaxation(
    n_steps: int = 300,
    accelerated: bool = False,
) -> tuple[np.ndarray, np.ndarray]:
    """Run a relaxation and return final positions and the energy series."""
    chain = backbone_chain(n_residues=60, first_residue=360)
    config = SimulationConfig(use_accelerated_path=accelerated)
    recorder = DiagnosticsRecorder()
    engine = IntegrationEngine(
        chain,
        config,
        guard=MemoryBudgetGuard(1024 * MIB) if accelerated else None,
        device=HostDeviceContext() if accelerated else None,
        telemetry=[recorder],
    )
    engine.run(n_steps)
    return engine.store.current_positions.copy(), recorder.energy


class TestSerialDeterminism:
    """
    Gate: Serial execution must be deterministic.

    Same input → identical results.
    """

    def test_trajectory_determinism(self):
        """Gate: Same input produces identical trajectories."""
        final_pos1, energies1 = run_relaxation()
        final_pos2, energies2 = run_relaxation()

        # Gate: must be bitwise identical
        np.testing.assert_array_equal(
            final_pos1,
            final_pos2,
            err_msg="GATE FAILED: Trajectory not deterministic",
        )

        np.testing.assert_array_equal(
            energies1,
            energies2,
            err_msg="GATE FAILED: Energies not deterministic",
        )

    def test_buffer_and_atoms_agree(self):
        """Gate: Ingesting via PDB bytes matches ingesting parsed atoms."""
        chain = backbone_chain(n_residues=40, first_residue=370)
        data = PDBWriter().write_bytes(chain)
        parsed = IntegrationEngine.from_buffer(data)
        direct = IntegrationEngine(parsed.store.anchor_atoms())

        parsed.run(100)
        direct.run(100)

        np.testing.assert_array_equal(
            parsed.store.current_positions,
            direct.store.current_positions,
            err_msg="GATE FAILED: Buffer ingestion not deterministic",
        )


class TestPathDeterminism:
    """
    Gate: The accelerated path is the reference update with scaled noise.
    """

    def test_diagnostics_path_independent(self):
        """Gate: Scalar diagnostics do not depend on the execution path."""
        _, reference_energy = run_relaxation(accelerated=False)
        _, accelerated_energy = run_relaxation(accelerated=True)

        np.testing.assert_array_equal(
            reference_energy,
            accelerated_energy,
            err_msg="GATE FAILED: Diagnostics depend on execution path",
        )

    def test_displacement_scaled(self):
        """Gate: Displacement scales with the noise amplitude."""
        chain = backbone_chain(n_residues=60, first_residue=360)
        reference, _ = run_relaxation(accelerated=False)
        accelerated, _ = run_relaxation(accelerated=True)
        anchors = np.array([atom.coordinates for atom in chain])

        np.testing.assert_allclose(
            accelerated - anchors,
            ACCELERATED_NOISE_SCALE * (reference - anchors),
            rtol=1e-9,
            atol=1e-9,
            err_msg="GATE FAILED: Accelerated path is not a scaled reference",
        )


class TestThreadDeterminism:
    """
    Gate: Independent engines on separate threads match serial execution.
    """

    def test_threaded_engines(self):
        """Gate: Threaded results are bitwise identical to serial."""
        serial_pos, serial_energy = run_relaxation()
        results: dict[int, tuple[np.ndarray, np.ndarray]] = {}

        def worker(index):
            results[index] = run_relaxation()

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 4
        for positions, energy in results.values():
            np.testing.assert_array_equal(
                positions,
                serial_pos,
                err_msg="GATE FAILED: Threaded trajectory differs",
            )
            np.testing.assert_array_equal(energy, serial_energy)
