"""Resource admission for the accelerated execution path."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MIB = 1024 * 1024


@dataclass(frozen=True)
class AdmissionRequest:
    """
    Memory budget requested before any accelerated allocation.

    Attributes:
        trajectory_bytes: Trajectory storage budget.
        workspace_bytes: Scratch workspace budget.
    """

    trajectory_bytes: int
    workspace_bytes: int

    @property
    def total_bytes(self) -> int:
        """Return total requested bytes."""
        return self.trajectory_bytes + self.workspace_bytes


@dataclass(frozen=True)
class AdmissionDecision:
    """
    Response from an admission guard.

    Attributes:
        approved: Whether the request was admitted.
        available_bytes: Memory available when the decision was made.
        reason: Rejection reason (empty when approved).
    """

    approved: bool
    available_bytes: int
    reason: str = ""

    @property
    def available_mb(self) -> float:
        """Return available memory in MiB."""
        return self.available_bytes / MIB


class ResourceAdmissionGuard(ABC):
    """
    Abstract base class for memory admission authorities.

    A guard is consulted once per engine construction when the accelerated
    path is requested. Guards shared between engines must make the check and
    the reservation atomic.
    """

    @abstractmethod
    def request(self, request: AdmissionRequest) -> AdmissionDecision:
        """
        Approve or reject a memory request.

        Args:
            request: Requested budgets.

        Returns:
            Admission decision.
        """
        ...

    def release(self, request: AdmissionRequest) -> None:
        """Return a previously admitted budget (optional)."""
        pass


class MemoryBudgetGuard(ResourceAdmissionGuard):
    """
    In-process guard over a fixed device-memory budget.

    Check and reserve happen under one lock, so engines constructed
    concurrently on different threads can never be admitted past the
    budget.

    Example:
        guard = MemoryBudgetGuard(total_bytes=2 * 1024**3)
        engine_a = IntegrationEngine(atoms_a, config, guard=guard, device=device)
        engine_b = IntegrationEngine(atoms_b, config, guard=guard, device=device)
    """

    def __init__(self, total_bytes: int) -> None:
        """
        Initialize guard.

        Args:
            total_bytes: Total memory that may be reserved.
        """
        if total_bytes < 0:
            raise ValueError(f"total_bytes must be >= 0, got {total_bytes}")
        self._total_bytes = total_bytes
        self._reserved_bytes = 0
        self._lock = threading.Lock()

    @property
    def total_bytes(self) -> int:
        """Return total budget."""
        return self._total_bytes

    @property
    def reserved_bytes(self) -> int:
        """Return currently reserved bytes."""
        with self._lock:
            return self._reserved_bytes

    @property
    def available_bytes(self) -> int:
        """Return unreserved bytes."""
        with self._lock:
            return self._total_bytes - self._reserved_bytes

    def request(self, request: AdmissionRequest) -> AdmissionDecision:
        with self._lock:
            available = self._total_bytes - self._reserved_bytes
            if request.total_bytes > available:
                return AdmissionDecision(
                    approved=False,
                    available_bytes=available,
                    reason=(
                        f"requested {request.total_bytes / MIB:.1f} MiB, "
                        f"only {available / MIB:.1f} MiB available"
                    ),
                )
            self._reserved_bytes += request.total_bytes
            return AdmissionDecision(
                approved=True,
                available_bytes=available - request.total_bytes,
            )

    def release(self, request: AdmissionRequest) -> None:
        with self._lock:
            self._reserved_bytes = max(0, self._reserved_bytes - request.total_bytes)
