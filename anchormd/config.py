"""Simulation configuration and logging setup."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, field, fields
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .errors import ValidationError

MIB = 1024 * 1024

DEFAULT_MAX_STEPS = 10_000
DEFAULT_TEMPERATURE = 300.15
DEFAULT_DT = 2.0
DEFAULT_GRADIENT_THRESHOLD = 0.001
DEFAULT_TRAJECTORY_MEMORY = 512 * MIB
DEFAULT_WORKSPACE_MEMORY = 256 * MIB
DEFAULT_PROGRESS_INTERVAL = 1000


@dataclass(frozen=True)
class RegionPolicy:
    """
    Selective stiffness rule.

    Atoms whose residue id lies in ``[low, high]`` (inclusive) are held by the
    soft spring ``soft_k``; every other atom is held by ``rest_k``. The
    defaults release residues 380-400 and pin the rest of the structure.

    Attributes:
        low: First residue id of the released region.
        high: Last residue id of the released region.
        soft_k: Spring constant inside the region.
        rest_k: Spring constant outside the region.
    """

    low: int = 380
    high: int = 400
    soft_k: float = 1e-4
    rest_k: float = 1.0

    def __post_init__(self) -> None:
        for name in ("low", "high"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValidationError(f"{name} must be an integer, got {value!r}")
        if self.low > self.high:
            raise ValidationError(
                f"region low ({self.low}) must not exceed high ({self.high})"
            )
        for name in ("soft_k", "rest_k"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValidationError(f"{name} must be finite and >= 0, got {value}")

    def contains(self, residue_ids: ArrayLike) -> NDArray[np.bool_]:
        """Return a mask of residue ids inside the region."""
        residue_ids = np.asarray(residue_ids)
        return (residue_ids >= self.low) & (residue_ids <= self.high)

    def stiffness(self, residue_ids: ArrayLike) -> NDArray[np.floating]:
        """Return per-atom spring constants, shape (N,)."""
        return np.where(self.contains(residue_ids), self.soft_k, self.rest_k)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable simulation parameters.

    ``dt``, ``temperature`` and the acceptance diagnostic do not feed back
    into the position update; they are reported only.

    Attributes:
        max_steps: Default step budget for ``run``.
        temperature: Thermostat set point (K).
        dt: Nominal time step.
        region_policy: Selective stiffness rule.
        gradient_threshold: Convergence threshold on the gradient norm.
        use_accelerated_path: Request the accelerated execution strategy.
        trajectory_memory_budget: Trajectory bytes requested from admission.
        workspace_memory_budget: Workspace bytes requested from admission.
        stop_on_convergence: Stop a run as soon as the gradient norm drops
            below ``gradient_threshold``.
        timeout: Wall-clock limit per run in seconds, or None.
        progress_interval: Log a progress line every N steps.
    """

    max_steps: int = DEFAULT_MAX_STEPS
    temperature: float = DEFAULT_TEMPERATURE
    dt: float = DEFAULT_DT
    region_policy: RegionPolicy = field(default_factory=RegionPolicy)
    gradient_threshold: float = DEFAULT_GRADIENT_THRESHOLD
    use_accelerated_path: bool = False
    trajectory_memory_budget: int = DEFAULT_TRAJECTORY_MEMORY
    workspace_memory_budget: int = DEFAULT_WORKSPACE_MEMORY
    stop_on_convergence: bool = False
    timeout: float | None = None
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL

    def __post_init__(self) -> None:
        """Validate parameter ranges."""
        _require_positive_int("max_steps", self.max_steps)
        _require_positive_int("trajectory_memory_budget", self.trajectory_memory_budget)
        _require_positive_int("workspace_memory_budget", self.workspace_memory_budget)
        _require_positive_int("progress_interval", self.progress_interval)
        for name in ("use_accelerated_path", "stop_on_convergence"):
            if not isinstance(getattr(self, name), bool):
                raise ValidationError(
                    f"{name} must be a bool, got {getattr(self, name)!r}"
                )

        if not math.isfinite(self.temperature):
            raise ValidationError(f"temperature must be finite, got {self.temperature}")
        if not (self.dt > 0 and math.isfinite(self.dt)):
            raise ValidationError(f"dt must be > 0, got {self.dt}")
        if not (self.gradient_threshold > 0):
            raise ValidationError(
                f"gradient_threshold must be > 0, got {self.gradient_threshold}"
            )
        if self.timeout is not None and not (self.timeout > 0):
            raise ValidationError(f"timeout must be > 0 or None, got {self.timeout}")
        if not isinstance(self.region_policy, RegionPolicy):
            raise ValidationError(
                f"region_policy must be a RegionPolicy, got {type(self.region_policy)!r}"
            )

    def replace(self, **changes: Any) -> SimulationConfig:
        """Return a copy with some fields changed (re-validated)."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update(changes)
        return SimulationConfig(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulationConfig:
        """
        Build a configuration from a dictionary.

        Raises:
            ValidationError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValidationError(f"Unknown configuration keys: {sorted(unknown)}")

        values = dict(data)
        region = values.get("region_policy")
        if isinstance(region, dict):
            try:
                values["region_policy"] = RegionPolicy(**region)
            except TypeError as exc:
                raise ValidationError(f"Invalid region_policy: {exc}") from exc
        return cls(**values)

    @classmethod
    def from_json(cls, text: str) -> SimulationConfig:
        """Build a configuration from a JSON string."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid configuration JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)


def _require_positive_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ValidationError(f"{name} must be > 0, got {value}")


def configure_logging(level: int = logging.INFO, fmt: str | None = None) -> None:
    """Configure root logging for scripts and examples."""
    logging.basicConfig(
        level=level,
        format=fmt or "%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)
    logging.captureWarnings(True)
