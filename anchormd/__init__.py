"""
anchormd - An anchored structure relaxation engine.

Design Principles:
- Region-targeted flexibility with harmonic anchoring elsewhere
- Deterministic + reproducible (no random state)
- Admission-gated accelerated path with reference fallback
- Step-boundary cancellation, timeout and convergence stop
- Telemetry as an opt-in side channel

Quick Start:
    >>> from anchormd import simulate
    >>> result = simulate.relax_structure(simulate.backbone_chain(), steps=1000)
    >>> print(f"Gradient norm: {result.statistics.gradient_norm:.6f}")
"""

__version__ = "0.1.0"

# High-level APIs
from . import plotting, simulate
from .config import RegionPolicy, SimulationConfig, configure_logging
from .engines import IntegrationEngine, RunOutcome, StatisticsSnapshot
from .errors import (
    AnchorMDError,
    DeviceUnavailableError,
    InternalError,
    ParseError,
    ResourceAdmissionError,
    ValidationError,
)

# Core components for advanced users
from .system import Atom, AtomStore

__all__ = [
    "simulate",
    "plotting",
    "SimulationConfig",
    "RegionPolicy",
    "configure_logging",
    "Atom",
    "AtomStore",
    "IntegrationEngine",
    "RunOutcome",
    "StatisticsSnapshot",
    "AnchorMDError",
    "ValidationError",
    "ParseError",
    "ResourceAdmissionError",
    "DeviceUnavailableError",
    "InternalError",
]
