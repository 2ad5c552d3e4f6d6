"""Anchored integration engine implementation."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import numpy as np

from ..config import SimulationConfig
from ..devices import AdmissionRequest, select_strategy
from ..errors import InternalError, ValidationError
from ..system import Atom, AtomStore, initial_energy_estimate
from .outcome import RunOutcome, RunStatus, TerminationReason
from .state import EngineState, EngineStatus
from .statistics import StatisticsReporter, StatisticsSnapshot
from .telemetry import TelemetryFrame, TelemetryGroup, TelemetryHook

if TYPE_CHECKING:
    from ..devices import DeviceContext, ResourceAdmissionGuard
    from ..integrators import ExecutionStrategy
    from ..io import StructureParser

logger = logging.getLogger(__name__)


class IntegrationEngine:
    """
    Anchored structure integration engine.

    Owns the configuration, the dual atom store and the live diagnostics,
    and drives the step loop:
    - Execution strategy chosen once at construction (reference or
      admission-gated accelerated path)
    - Per-step anchored update and diagnostic recurrence
    - Optional telemetry frames
    - Termination on step budget, convergence, timeout or cancellation

    Not thread-safe: callers must serialize ``run`` calls on one engine.
    Independent engines may run on separate threads.

    Example usage:
        engine = IntegrationEngine.from_buffer(pdb_bytes, SimulationConfig(max_steps=500))
        outcome = engine.run()
        stats = engine.get_statistics()
        atoms = engine.get_current_atoms()

    Attributes:
        config: Simulation configuration.
        state: Live diagnostics.
        store: Current and anchor atom positions.
        strategy: Selected execution strategy.
    """

    def __init__(
        self,
        atoms: Sequence[Atom] | AtomStore,
        config: SimulationConfig | None = None,
        *,
        guard: ResourceAdmissionGuard | None = None,
        device: DeviceContext | None = None,
        telemetry: Sequence[TelemetryHook] | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            atoms: Parsed atoms, or a prepared atom store (copied).
            config: Simulation configuration (defaults if None).
            guard: Admission guard for the accelerated path.
            device: Backend context for the accelerated path.
            telemetry: Optional telemetry hooks.

        Raises:
            ValidationError: If the atom sequence is empty or invalid.
        """
        self._config = config if config is not None else SimulationConfig()
        self._state = EngineState(current_temperature=self._config.temperature)

        # Each engine owns its store; a caller-supplied store is copied.
        self._store = atoms.copy() if isinstance(atoms, AtomStore) else AtomStore(atoms)
        self._state.current_energy = initial_energy_estimate(self._store.n_atoms)

        self._guard = guard
        self._strategy = select_strategy(self._config, guard, device)
        self._telemetry = TelemetryGroup(list(telemetry) if telemetry else None)
        self._stop_requested = False

        self._state.status = EngineStatus.READY
        logger.info(
            "Engine ready: %d atoms, %s path, %d step budget",
            self._store.n_atoms,
            self._strategy.name,
            self._config.max_steps,
        )

    @classmethod
    def from_buffer(
        cls,
        data: bytes,
        config: SimulationConfig | None = None,
        *,
        parser: StructureParser | None = None,
        guard: ResourceAdmissionGuard | None = None,
        device: DeviceContext | None = None,
        telemetry: Sequence[TelemetryHook] | None = None,
    ) -> IntegrationEngine:
        """
        Build an engine from an in-memory structure buffer.

        Raises:
            ValidationError: If the buffer is empty or yields no atoms.
            ParseError: If the structure cannot be parsed.
        """
        logger.info("Initializing engine from structure buffer (%d bytes)", len(data))
        store = AtomStore.from_bytes(data, parser=parser)
        logger.info("Parsed structure: %d atoms", store.n_atoms)
        return cls(store, config, guard=guard, device=device, telemetry=telemetry)

    @property
    def config(self) -> SimulationConfig:
        """Return configuration."""
        return self._config

    @property
    def state(self) -> EngineState:
        """Return live engine state."""
        return self._state

    @property
    def store(self) -> AtomStore:
        """Return atom store."""
        return self._store

    @property
    def strategy(self) -> ExecutionStrategy:
        """Return selected execution strategy."""
        return self._strategy

    @property
    def status(self) -> EngineStatus:
        """Return lifecycle status."""
        return self._state.status

    @property
    def execution_path(self) -> str:
        """Return name of the execution path in use."""
        return self._strategy.name

    @property
    def accelerated(self) -> bool:
        """Whether the accelerated path is in use."""
        return self._strategy.accelerated

    @property
    def converged(self) -> bool:
        """Whether the gradient norm is below the threshold."""
        return self._state.gradient_norm < self._config.gradient_threshold

    def add_hook(self, hook: TelemetryHook) -> None:
        """Add a telemetry hook."""
        self._telemetry.add(hook)

    def remove_hook(self, hook: TelemetryHook) -> None:
        """Remove a telemetry hook."""
        self._telemetry.remove(hook)

    def stop(self) -> None:
        """Signal the running loop to stop at the next step boundary."""
        self._stop_requested = True

    def get_statistics(self) -> StatisticsSnapshot:
        """Return a statistics snapshot of the live state."""
        return StatisticsReporter.snapshot(self._state, self._config, self._strategy.name)

    def get_current_atoms(self) -> list[Atom]:
        """
        Return the current atoms with their simulated coordinates.

        Raises:
            InternalError: If the store holds no atoms.
        """
        if self._store.n_atoms == 0:
            raise InternalError("Atom store is empty")
        atoms = self._store.current_atoms()
        logger.debug("Retrieved %d atoms at step %d", len(atoms), self._state.current_step)
        return atoms

    def _step(self) -> None:
        """
        Perform a single step.

        1. Advance the step counter
        2. Anchored update and diagnostics (selected strategy)
        3. Invariant check
        4. Telemetry frame
        5. Progress log
        """
        state = self._state
        state.current_step += 1

        self._strategy.step(self._store, state, self._config)
        self._store.check_invariants()

        if self._telemetry.active:
            self._telemetry.record(
                TelemetryFrame(
                    step=state.current_step,
                    elapsed=state.elapsed,
                    energy=state.current_energy,
                    temperature=state.current_temperature,
                    acceptance_rate=state.acceptance_rate,
                    gradient_norm=state.gradient_norm,
                )
            )

        if state.current_step % self._config.progress_interval == 0:
            logger.info(
                "Progress: step %d, energy %.2f, gradient %.6f",
                state.current_step,
                state.current_energy,
                state.gradient_norm,
            )

    def run(
        self,
        steps: int | None = None,
        callback: Callable[[IntegrationEngine], bool] | None = None,
        cancel_event: threading.Event | None = None,
        timeout: float | None = None,
    ) -> RunOutcome:
        """
        Run the step loop.

        The step counter continues from previous runs. Cancellation, timeout
        and convergence are checked only at step boundaries.

        Args:
            steps: Number of steps (defaults to ``config.max_steps``).
            callback: Called after each step; return True to stop.
            cancel_event: Stop when this event is set.
            timeout: Wall-clock limit in seconds (defaults to ``config.timeout``).

        Returns:
            Outcome of this run. An invariant violation yields a FAILURE
            outcome and leaves the engine FAILED.

        Raises:
            ValidationError: If ``steps`` or ``timeout`` is invalid.
            InternalError: If the engine has failed or is already running.
        """
        state = self._state
        if state.status is EngineStatus.FAILED:
            raise InternalError("Engine has failed; construct a new engine to continue")
        if state.status is EngineStatus.RUNNING:
            raise InternalError("Engine is already running")

        nsteps = self._config.max_steps if steps is None else steps
        if (
            isinstance(nsteps, bool)
            or not isinstance(nsteps, (int, np.integer))
            or nsteps <= 0
        ):
            raise ValidationError(f"steps must be a positive integer, got {nsteps!r}")
        if timeout is None:
            timeout = self._config.timeout
        if timeout is not None and not timeout > 0:
            raise ValidationError(f"timeout must be > 0, got {timeout}")

        state.status = EngineStatus.RUNNING
        state.run_start_timestamp = time.perf_counter()
        deadline = None if timeout is None else state.run_start_timestamp + timeout

        logger.info(
            "Starting run: %d steps from step %d on %s path",
            nsteps,
            state.current_step,
            self._strategy.name,
        )
        steps_completed = 0
        reason = TerminationReason.STEPS_EXHAUSTED
        error: InternalError | None = None

        try:
            self._telemetry.initialize(self.get_statistics())
            for _ in range(nsteps):
                if self._stop_requested or (
                    cancel_event is not None and cancel_event.is_set()
                ):
                    reason = TerminationReason.CANCELLED
                    break
                if deadline is not None and time.perf_counter() >= deadline:
                    reason = TerminationReason.TIMEOUT
                    break

                self._step()
                steps_completed += 1

                if self._config.stop_on_convergence and self.converged:
                    reason = TerminationReason.CONVERGED
                    break
                if callback is not None and callback(self):
                    reason = TerminationReason.CANCELLED
                    break
        except InternalError as exc:
            state.status = EngineStatus.FAILED
            error = exc
            logger.error("Run aborted at step %d: %s", state.current_step, exc)
        except Exception:
            state.status = EngineStatus.FAILED
            raise
        finally:
            self._stop_requested = False
            elapsed = state.elapsed
            if state.status is EngineStatus.RUNNING:
                state.status = EngineStatus.COMPLETED
            self._telemetry.finalize(self.get_statistics())

        metrics = self._metrics(steps_completed, elapsed)

        if error is not None:
            return RunOutcome(
                status=RunStatus.FAILURE,
                message=f"Run aborted after {steps_completed} steps: {error}",
                metrics=metrics,
                reason=None,
                execution_path=self._strategy.name,
            )

        logger.info(
            "Run complete (%s): %d steps in %.2fs on %s path",
            reason.value,
            steps_completed,
            elapsed,
            self._strategy.name,
        )
        return RunOutcome(
            status=RunStatus.SUCCESS,
            message=f"Run completed ({reason.value}) after {steps_completed} steps",
            metrics=metrics,
            reason=reason,
            execution_path=self._strategy.name,
        )

    def _metrics(self, steps_completed: int, elapsed: float) -> dict[str, float]:
        """Collect run metrics."""
        state = self._state
        return {
            "steps_completed": float(steps_completed),
            "current_step": float(state.current_step),
            "final_energy": float(state.current_energy),
            "final_gradient_norm": float(state.gradient_norm),
            "final_temperature": float(state.current_temperature),
            "acceptance_rate": float(state.acceptance_rate),
            "converged": 1.0 if self.converged else 0.0,
            "elapsed_seconds": float(elapsed),
            "accelerated": 1.0 if self._strategy.accelerated else 0.0,
            "rmsd": self._store.rmsd(),
        }

    def close(self) -> None:
        """Return any admitted accelerated-path memory to the guard."""
        if self._strategy.accelerated and self._guard is not None:
            self._guard.release(
                AdmissionRequest(
                    trajectory_bytes=self._config.trajectory_memory_budget,
                    workspace_bytes=self._config.workspace_memory_budget,
                )
            )
            self._guard = None

    def __enter__(self) -> IntegrationEngine:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
