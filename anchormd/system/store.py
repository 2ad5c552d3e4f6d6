"""Dual atom store: mutable current state plus frozen anchor state."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..errors import InternalError, ValidationError
from .atoms import Atom

if TYPE_CHECKING:
    from ..io.base import StructureParser

logger = logging.getLogger(__name__)

# Placeholder energy model: a linear estimate in the atom count.
ENERGY_PER_ATOM = -2.5


def initial_energy_estimate(n_atoms: int) -> float:
    """Seed energy for a freshly ingested structure."""
    return ENERGY_PER_ATOM * n_atoms


class AtomStore:
    """
    Two index-aligned atom sequences.

    ``current`` is mutated in place by the integration strategies every step.
    ``anchor`` is an independently owned deep copy taken at construction and
    is read-only afterwards; it is the target of the restoring force.

    Both sides keep their own coordinate array, shape (N, 3), and residue id
    array, shape (N,). The anchor arrays are flagged non-writeable.

    Example:
        store = AtomStore(atoms)
        positions = store.current_positions
        positions += shift   # anchor is unaffected
    """

    def __init__(self, atoms: Sequence[Atom]) -> None:
        """
        Initialize the store from parsed atoms.

        Args:
            atoms: Ordered atoms from a structure parser.

        Raises:
            ValidationError: If ``atoms`` is empty or has non-finite coordinates.
        """
        atoms = list(atoms)
        if not atoms:
            raise ValidationError("Cannot build an atom store from an empty structure")

        positions = np.array([atom.coordinates for atom in atoms], dtype=np.float64)
        if not np.all(np.isfinite(positions)):
            raise ValidationError("Structure contains non-finite coordinates")
        residue_ids = np.array([atom.residue_id for atom in atoms], dtype=np.int64)

        # Anchor owns its own copies; nothing is shared with current.
        self._anchor_atoms: tuple[Atom, ...] = tuple(atoms)
        self._anchor_positions = positions.copy()
        self._anchor_residue_ids = residue_ids.copy()
        self._anchor_positions.flags.writeable = False
        self._anchor_residue_ids.flags.writeable = False

        self._current_positions = positions
        self._current_residue_ids = residue_ids

        logger.debug("Atom store initialized with %d atoms", len(atoms))

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        parser: StructureParser | None = None,
    ) -> AtomStore:
        """
        Parse an in-memory structure buffer and build a store.

        Args:
            data: Raw structure file contents.
            parser: Structure parser (defaults to PDB).

        Raises:
            ValidationError: If the buffer is empty.
            ParseError: If the parser fails.
        """
        if not data:
            raise ValidationError("Empty structure data")
        if parser is None:
            from ..io.formats.pdb import PDBParser

            parser = PDBParser()
        return cls(parser.parse(data))

    def copy(self) -> AtomStore:
        """Return an independent store with copies of both states."""
        new = AtomStore.__new__(AtomStore)
        new._anchor_atoms = self._anchor_atoms
        new._anchor_positions = self._anchor_positions.copy()
        new._anchor_residue_ids = self._anchor_residue_ids.copy()
        new._anchor_positions.flags.writeable = False
        new._anchor_residue_ids.flags.writeable = False
        new._current_positions = self._current_positions.copy()
        new._current_residue_ids = self._current_residue_ids.copy()
        return new

    @property
    def n_atoms(self) -> int:
        """Return number of atoms."""
        return len(self._current_positions)

    def __len__(self) -> int:
        return self.n_atoms

    @property
    def current_positions(self) -> NDArray[np.floating]:
        """Current coordinates, shape (N, 3). Mutable in place."""
        return self._current_positions

    @property
    def anchor_positions(self) -> NDArray[np.floating]:
        """Anchor coordinates, shape (N, 3). Read-only."""
        return self._anchor_positions

    @property
    def residue_ids(self) -> NDArray[np.integer]:
        """Residue ids of the current state, shape (N,)."""
        return self._current_residue_ids

    @property
    def anchor_residue_ids(self) -> NDArray[np.integer]:
        """Residue ids of the anchor state, shape (N,). Read-only."""
        return self._anchor_residue_ids

    def displacement(self) -> NDArray[np.floating]:
        """Per-atom displacement from the anchor, shape (N, 3)."""
        return self._current_positions - self._anchor_positions

    def displacement_magnitudes(self) -> NDArray[np.floating]:
        """Per-atom distance from the anchor, shape (N,)."""
        return np.linalg.norm(self.displacement(), axis=1)

    def rmsd(self) -> float:
        """Root-mean-square deviation of the current state from the anchor."""
        return float(np.sqrt(np.mean(np.sum(self.displacement() ** 2, axis=1))))

    def current_atoms(self) -> list[Atom]:
        """Return the current state as atom records."""
        return [
            atom.moved_to(position)
            for atom, position in zip(self._anchor_atoms, self._current_positions)
        ]

    def anchor_atoms(self) -> list[Atom]:
        """Return the anchor state as atom records."""
        return list(self._anchor_atoms)

    def check_invariants(self) -> None:
        """
        Verify the current/anchor alignment.

        Raises:
            InternalError: On length or residue-id mismatch, or non-finite
                current coordinates.
        """
        n_current = len(self._current_positions)
        n_anchor = len(self._anchor_positions)
        if n_current != n_anchor or len(self._current_residue_ids) != n_current:
            raise InternalError(
                f"Atom store length mismatch: current={n_current}, anchor={n_anchor}"
            )
        if not np.array_equal(self._current_residue_ids, self._anchor_residue_ids):
            raise InternalError("Atom store residue ids are no longer index-aligned")
        if not np.all(np.isfinite(self._current_positions)):
            raise InternalError("Non-finite coordinates in current state")
