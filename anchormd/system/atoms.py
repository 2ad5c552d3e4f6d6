"""Atom record."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

import numpy as np

from ..errors import ValidationError


@dataclass(frozen=True)
class Atom:
    """
    A single atom as produced by a structure parser.

    Only ``residue_id`` and ``coordinates`` take part in the dynamics; the
    remaining fields are descriptive and are carried through to output.

    Attributes:
        residue_id: Residue sequence number.
        coordinates: Position (x, y, z).
        name: Atom name (e.g., "CA").
        residue_name: Residue name (e.g., "GLY").
        element: Element symbol.
    """

    residue_id: int
    coordinates: tuple[float, float, float]
    name: str = "X"
    residue_name: str = "UNK"
    element: str = "X"

    def __post_init__(self) -> None:
        """Normalize coordinates to a 3-tuple of floats."""
        coords = tuple(float(c) for c in self.coordinates)
        if len(coords) != 3:
            raise ValidationError(f"Atom needs 3 coordinates, got {len(coords)}")
        object.__setattr__(self, "coordinates", coords)
        object.__setattr__(self, "residue_id", int(self.residue_id))

    def moved_to(self, coordinates: Sequence[float] | np.ndarray) -> Atom:
        """Return a copy of this atom at new coordinates."""
        return replace(self, coordinates=tuple(float(c) for c in coordinates))
