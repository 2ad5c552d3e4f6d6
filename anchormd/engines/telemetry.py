"""Telemetry hooks for per-step observation."""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

import numpy as np

if TYPE_CHECKING:
    from .statistics import StatisticsSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TelemetryFrame:
    """
    Diagnostics emitted after one step.

    Attributes:
        step: Step number just completed.
        elapsed: Seconds since the run started.
        energy: Energy diagnostic.
        temperature: Temperature diagnostic.
        acceptance_rate: Acceptance diagnostic.
        gradient_norm: Convergence proxy.
    """

    step: int
    elapsed: float
    energy: float
    temperature: float
    acceptance_rate: float
    gradient_norm: float


class TelemetryHook(ABC):
    """
    Abstract base class for telemetry hooks.

    Hooks receive at most one frame per step, filtered by their frequency.
    """

    @abstractmethod
    def record(self, frame: TelemetryFrame) -> None:
        """
        Consume a frame.

        Args:
            frame: Diagnostics after the step.
        """
        ...

    @property
    def frequency(self) -> int:
        """Return recording frequency (every N steps)."""
        return 1

    def should_record(self, step: int) -> bool:
        """Check if the hook should run at this step."""
        return step % self.frequency == 0

    def initialize(self, snapshot: StatisticsSnapshot) -> None:
        """Called when a run starts."""
        pass

    def finalize(self, snapshot: StatisticsSnapshot) -> None:
        """Called when a run ends, including failed runs."""
        pass


class TelemetryGroup:
    """
    Collection of hooks with frequency handling.

    ``active`` is False while the group is empty; the engine checks it before
    building a frame, so disabled telemetry costs one truth test per step.
    """

    def __init__(self, hooks: list[TelemetryHook] | None = None) -> None:
        self._hooks: list[TelemetryHook] = list(hooks) if hooks else []

    @property
    def active(self) -> bool:
        """Whether any hook is attached."""
        return bool(self._hooks)

    def __len__(self) -> int:
        return len(self._hooks)

    def add(self, hook: TelemetryHook) -> None:
        """Add a hook to the group."""
        self._hooks.append(hook)

    def remove(self, hook: TelemetryHook) -> None:
        """Remove a hook from the group."""
        self._hooks.remove(hook)

    def initialize(self, snapshot: StatisticsSnapshot) -> None:
        """Initialize all hooks."""
        for hook in self._hooks:
            hook.initialize(snapshot)

    def record(self, frame: TelemetryFrame) -> None:
        """Run all hooks that should fire at this step."""
        for hook in self._hooks:
            if hook.should_record(frame.step):
                hook.record(frame)

    def finalize(self, snapshot: StatisticsSnapshot) -> None:
        """Finalize all hooks."""
        for hook in self._hooks:
            hook.finalize(snapshot)


class TextTelemetry(TelemetryHook):
    """
    Hook that writes diagnostics as separated columns to a text stream.
    """

    def __init__(
        self,
        frequency: int = 1000,
        file: TextIO | None = None,
        separator: str = "\t",
    ) -> None:
        """
        Initialize text telemetry.

        Args:
            frequency: Recording frequency (every N steps).
            file: Output stream (defaults to stdout).
            separator: Field separator.
        """
        self._frequency = frequency
        self._file = file if file is not None else sys.stdout
        self._separator = separator
        self._header_written = False

    @property
    def frequency(self) -> int:
        return self._frequency

    def initialize(self, snapshot: StatisticsSnapshot) -> None:
        """Write header."""
        if not self._header_written:
            headers = ["Step", "Elapsed", "Energy", "Temperature", "Acceptance", "Gradient"]
            self._file.write(self._separator.join(headers) + "\n")
            self._header_written = True

    def record(self, frame: TelemetryFrame) -> None:
        values = [
            f"{frame.step}",
            f"{frame.elapsed:.4f}",
            f"{frame.energy:.4f}",
            f"{frame.temperature:.2f}",
            f"{frame.acceptance_rate:.4f}",
            f"{frame.gradient_norm:.6f}",
        ]
        self._file.write(self._separator.join(values) + "\n")
        self._file.flush()


class LoggingTelemetry(TelemetryHook):
    """Hook that logs frames at INFO level."""

    def __init__(self, frequency: int = 100, log: logging.Logger | None = None) -> None:
        self._frequency = frequency
        self._logger = log if log is not None else logger

    @property
    def frequency(self) -> int:
        return self._frequency

    def record(self, frame: TelemetryFrame) -> None:
        self._logger.info(
            "step=%d elapsed=%.3fs energy=%.4f temperature=%.2f acceptance=%.3f gradient=%.6f",
            frame.step,
            frame.elapsed,
            frame.energy,
            frame.temperature,
            frame.acceptance_rate,
            frame.gradient_norm,
        )


class CallbackTelemetry(TelemetryHook):
    """
    Hook that calls a user-defined function with each frame.
    """

    def __init__(
        self,
        callback: Callable[[TelemetryFrame], None],
        frequency: int = 1,
    ) -> None:
        """
        Initialize callback telemetry.

        Args:
            callback: Function to call with each frame.
            frequency: Recording frequency.
        """
        self._callback = callback
        self._frequency = frequency

    @property
    def frequency(self) -> int:
        return self._frequency

    def record(self, frame: TelemetryFrame) -> None:
        self._callback(frame)


class DiagnosticsRecorder(TelemetryHook):
    """
    Hook that keeps diagnostic time series in memory.
    """

    def __init__(self, frequency: int = 1) -> None:
        """
        Initialize recorder.

        Args:
            frequency: Recording frequency.
        """
        self._frequency = frequency
        self._steps: list[int] = []
        self._elapsed: list[float] = []
        self._energy: list[float] = []
        self._temperature: list[float] = []
        self._acceptance: list[float] = []
        self._gradient: list[float] = []

    @property
    def frequency(self) -> int:
        return self._frequency

    def record(self, frame: TelemetryFrame) -> None:
        self._steps.append(frame.step)
        self._elapsed.append(frame.elapsed)
        self._energy.append(frame.energy)
        self._temperature.append(frame.temperature)
        self._acceptance.append(frame.acceptance_rate)
        self._gradient.append(frame.gradient_norm)

    @property
    def n_frames(self) -> int:
        """Return number of recorded frames."""
        return len(self._steps)

    @property
    def steps(self) -> np.ndarray:
        return np.array(self._steps, dtype=np.int64)

    @property
    def elapsed(self) -> np.ndarray:
        return np.array(self._elapsed)

    @property
    def energy(self) -> np.ndarray:
        return np.array(self._energy)

    @property
    def temperature(self) -> np.ndarray:
        return np.array(self._temperature)

    @property
    def acceptance_rate(self) -> np.ndarray:
        return np.array(self._acceptance)

    @property
    def gradient_norm(self) -> np.ndarray:
        return np.array(self._gradient)

    def clear(self) -> None:
        """Clear stored data."""
        self._steps.clear()
        self._elapsed.clear()
        self._energy.clear()
        self._temperature.clear()
        self._acceptance.clear()
        self._gradient.clear()
