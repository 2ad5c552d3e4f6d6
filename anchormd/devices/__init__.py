"""Accelerated backend contexts and resource admission."""

from .admission import (
    AdmissionDecision,
    AdmissionRequest,
    MemoryBudgetGuard,
    ResourceAdmissionGuard,
)
from .context import DeviceContext, HostDeviceContext
from .dispatcher import admit_accelerated, select_strategy

__all__ = [
    "AdmissionRequest",
    "AdmissionDecision",
    "ResourceAdmissionGuard",
    "MemoryBudgetGuard",
    "DeviceContext",
    "HostDeviceContext",
    "admit_accelerated",
    "select_strategy",
]
