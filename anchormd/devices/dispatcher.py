"""Execution strategy selection with admission-gated fallback."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import DeviceUnavailableError, ResourceAdmissionError
from ..integrators import AcceleratedStrategy, ExecutionStrategy, ReferenceStrategy
from .admission import AdmissionRequest

if TYPE_CHECKING:
    from ..config import SimulationConfig
    from .admission import ResourceAdmissionGuard
    from .context import DeviceContext

logger = logging.getLogger(__name__)


def admit_accelerated(
    config: SimulationConfig,
    guard: ResourceAdmissionGuard | None,
    device: DeviceContext | None,
) -> DeviceContext:
    """
    Check that the accelerated path may run.

    Args:
        config: Simulation configuration (memory budgets).
        guard: Admission authority.
        device: Backend context.

    Returns:
        The admitted device context.

    Raises:
        DeviceUnavailableError: If no usable device context exists.
        ResourceAdmissionError: If admission is missing, rejects, or fails.
    """
    if device is None or not device.is_available:
        raise DeviceUnavailableError("No accelerated backend context available")

    if guard is None:
        raise ResourceAdmissionError("No admission guard configured")

    request = AdmissionRequest(
        trajectory_bytes=config.trajectory_memory_budget,
        workspace_bytes=config.workspace_memory_budget,
    )
    try:
        decision = guard.request(request)
    except ResourceAdmissionError:
        raise
    except Exception as exc:
        raise ResourceAdmissionError(f"Admission guard failed: {exc}") from exc

    if not decision.approved:
        raise ResourceAdmissionError(f"Memory allocation rejected: {decision.reason}")

    logger.info(
        "Admission approved on %s: %.1f MiB available",
        device.name,
        decision.available_mb,
    )
    return device


def select_strategy(
    config: SimulationConfig,
    guard: ResourceAdmissionGuard | None = None,
    device: DeviceContext | None = None,
) -> ExecutionStrategy:
    """
    Choose the execution strategy for an engine.

    Called once per engine construction. Admission and device failures are
    downgraded to the reference strategy and never propagate.

    Args:
        config: Simulation configuration.
        guard: Admission authority, consulted only for the accelerated path.
        device: Backend context for the accelerated path.

    Returns:
        ExecutionStrategy instance.
    """
    if not config.use_accelerated_path:
        return ReferenceStrategy()

    try:
        admitted = admit_accelerated(config, guard, device)
    except (DeviceUnavailableError, ResourceAdmissionError) as exc:
        logger.warning("Accelerated path unavailable, falling back to reference: %s", exc)
        return ReferenceStrategy()

    return AcceleratedStrategy(admitted)
