#!/usr/bin/env python
"""
Quick start example - the simplest way to relax a structure.

This demonstrates the high-level API for users who just want results
without dealing with the internal details.

Usage:
    python examples/quickstart.py
"""

from anchormd import configure_logging, simulate
from anchormd.config import MIB
from anchormd.devices import HostDeviceContext, MemoryBudgetGuard
from anchormd.io import PDBWriter


def main():
    configure_logging()

    print("=" * 60)
    print("Anchored Relaxation Quick Start")
    print("=" * 60)

    chain = simulate.backbone_chain()
    pdb_bytes = PDBWriter().write_bytes(chain, title="helical chain")

    # 1. Simplest possible relaxation - just 1 line!
    print("\n1. Default region 380-400:")
    print("-" * 40)
    result = simulate.relax_structure(pdb_bytes, steps=2000, verbose=True)
    print(
        f"   Mean displacement inside/outside: "
        f"{result.mean_displacement_inside:.3f} / "
        f"{result.mean_displacement_outside:.3f} Å"
    )

    # 2. Custom region, stop as soon as the gradient drops below threshold
    print("\n2. Custom region with early stop:")
    print("-" * 40)
    result = simulate.relax_structure(
        chain,
        region=(100, 140),
        gradient_threshold=0.01,
        stop_on_convergence=True,
        verbose=True,
    )
    print(f"   Stopped because: {result.outcome.reason.value}")

    # 3. Accelerated path behind a memory budget
    print("\n3. Accelerated path:")
    print("-" * 40)
    guard = MemoryBudgetGuard(total_bytes=1024 * MIB)
    result = simulate.relax_structure(
        chain,
        steps=1000,
        use_accelerated_path=True,
        guard=guard,
        device=HostDeviceContext(),
        verbose=True,
    )

    # 4. Budget too small: falls back to the reference path
    print("\n4. Accelerated path rejected by admission:")
    print("-" * 40)
    result = simulate.relax_structure(
        chain,
        steps=1000,
        use_accelerated_path=True,
        guard=MemoryBudgetGuard(total_bytes=64 * MIB),
        device=HostDeviceContext(),
        verbose=True,
    )

    print("\n" + "=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
