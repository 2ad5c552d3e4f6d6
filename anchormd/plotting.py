"""
Built-in plotting utilities for relaxation results.

Provides simple one-line plotting functions for common visualizations.

Example:
    >>> from anchormd import simulate, plotting
    >>> result = simulate.relax_structure(simulate.backbone_chain(), steps=500)
    >>> plotting.diagnostics(result)
    >>> plotting.save("relaxation.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .config import RegionPolicy
    from .simulate import SimulationResult

# Try to import matplotlib, but don't fail if not available
try:
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    plt = None


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install matplotlib"
        )


def diagnostics(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (12, 8),
) -> None:
    """
    Plot diagnostic time series.

    Shows energy, temperature, acceptance rate and gradient norm vs step.

    Args:
        result: SimulationResult from a relaxation.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.

    Example:
        >>> result = simulate.relax_structure(pdb_bytes)
        >>> plotting.diagnostics(result)
    """
    _check_matplotlib()

    if len(result.steps) == 0:
        print("No diagnostics recorded")
        return

    fig, axes = plt.subplots(2, 2, figsize=figsize)
    steps = result.steps

    ax = axes[0, 0]
    ax.plot(steps, result.energy, "k-", lw=1)
    ax.set_xlabel("Step")
    ax.set_ylabel("Energy")
    ax.set_title(f"Energy (final: {result.statistics.current_energy:.3f})")
    ax.grid(True, alpha=0.3)

    ax = axes[0, 1]
    ax.plot(steps, result.temperature, "b-", alpha=0.7, lw=0.5)
    ax.axhline(
        y=float(np.mean(result.temperature)),
        color="r",
        linestyle="--",
        lw=1.5,
        label=f"Mean T = {np.mean(result.temperature):.2f} K",
    )
    ax.set_xlabel("Step")
    ax.set_ylabel("Temperature (K)")
    ax.set_title("Temperature")
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1, 0]
    ax.plot(steps, result.acceptance_rate, "g-", lw=0.8)
    ax.set_xlabel("Step")
    ax.set_ylabel("Acceptance rate")
    ax.set_title("Acceptance Rate")
    ax.set_ylim(0.0, 1.0)
    ax.grid(True, alpha=0.3)

    ax = axes[1, 1]
    ax.semilogy(steps, result.gradient_norm, "k-", lw=1)
    ax.set_xlabel("Step")
    ax.set_ylabel("Gradient norm")
    ax.set_title(f"Gradient Norm (converged: {result.statistics.converged})")
    ax.grid(True, alpha=0.3, which="both")

    plt.tight_layout()
    if show:
        plt.show()


def displacement(
    result: SimulationResult,
    region: RegionPolicy | None = None,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
) -> None:
    """
    Plot per-atom displacement from the anchor positions.

    Args:
        result: SimulationResult from a relaxation.
        region: Region to shade (e.g., ``config.region_policy``).
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.

    Example:
        >>> plotting.displacement(result, region=SimulationConfig().region_policy)
    """
    _check_matplotlib()

    if len(result.displacement) == 0:
        print("No displacement data available")
        return

    fig, ax = plt.subplots(figsize=figsize)

    ax.plot(result.residue_ids, result.displacement, "b.", ms=3)
    if region is not None:
        ax.axvspan(
            region.low,
            region.high,
            color="r",
            alpha=0.15,
            label=f"Flexible region {region.low}-{region.high}",
        )
        ax.legend()

    ax.set_xlabel("Residue")
    ax.set_ylabel("Displacement (Å)")
    ax.set_title(
        f"Displacement (inside: {result.mean_displacement_inside:.3f} Å, "
        f"outside: {result.mean_displacement_outside:.3f} Å)"
    )
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def save(filename: str | Path, dpi: int = 150) -> None:
    """
    Save the current figure to a file.

    Args:
        filename: Output filename (e.g., "plot.png", "plot.pdf").
        dpi: Resolution in dots per inch.
    """
    _check_matplotlib()
    plt.savefig(filename, dpi=dpi, bbox_inches="tight")
    print(f"Saved plot to {filename}")


def show() -> None:
    """
    Display all pending plots.

    Use this after creating plots with show=False.
    """
    _check_matplotlib()
    plt.show()
