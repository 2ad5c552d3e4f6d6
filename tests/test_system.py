"""Tests for atom records and the atom store."""

import numpy as np
import pytest

from anchormd.errors import InternalError, ParseError, ValidationError
from anchormd.system import ENERGY_PER_ATOM, Atom, AtomStore, initial_energy_estimate


@pytest.fixture
def atoms():
    """Create four atoms straddling a region boundary."""
    return [
        Atom(residue_id=378, coordinates=(0.0, 0.0, 0.0), name="CA"),
        Atom(residue_id=380, coordinates=(1.5, 0.0, 0.0), name="CA"),
        Atom(residue_id=400, coordinates=(0.0, 1.5, 0.0), name="CA"),
        Atom(residue_id=402, coordinates=(1.5, 1.5, 0.0), name="CA"),
    ]


class TestAtom:
    """Tests for Atom."""

    def test_coordinates_normalized(self):
        """Test coordinates become a tuple of floats."""
        atom = Atom(residue_id=1, coordinates=[1, 2, 3])

        assert atom.coordinates == (1.0, 2.0, 3.0)
        assert all(isinstance(c, float) for c in atom.coordinates)

    def test_wrong_coordinate_count(self):
        """Test non-3D coordinates are rejected."""
        with pytest.raises(ValidationError):
            Atom(residue_id=1, coordinates=(1.0, 2.0))

    def test_moved_to(self):
        """Test moved_to keeps descriptive fields."""
        atom = Atom(residue_id=7, coordinates=(0, 0, 0), name="N", residue_name="GLY")

        moved = atom.moved_to(np.array([1.0, 2.0, 3.0]))

        assert moved.coordinates == (1.0, 2.0, 3.0)
        assert moved.name == "N"
        assert moved.residue_name == "GLY"
        assert moved.residue_id == 7
        assert atom.coordinates == (0.0, 0.0, 0.0)


class TestAtomStore:
    """Tests for the dual current/anchor store."""

    def test_initialization(self, atoms):
        """Test store shapes and contents."""
        store = AtomStore(atoms)

        assert store.n_atoms == 4
        assert len(store) == 4
        assert store.current_positions.shape == (4, 3)
        np.testing.assert_array_equal(store.current_positions, store.anchor_positions)
        np.testing.assert_array_equal(store.residue_ids, [378, 380, 400, 402])

    def test_empty_rejected(self):
        """Test empty atom list is rejected."""
        with pytest.raises(ValidationError):
            AtomStore([])

    def test_non_finite_rejected(self):
        """Test NaN coordinates are rejected at ingestion."""
        with pytest.raises(ValidationError):
            AtomStore([Atom(residue_id=1, coordinates=(np.nan, 0.0, 0.0))])

    def test_anchor_is_independent(self, atoms):
        """Test mutating current leaves the anchor untouched."""
        store = AtomStore(atoms)
        anchor_before = store.anchor_positions.copy()

        positions = store.current_positions
        positions += 5.0

        np.testing.assert_array_equal(store.anchor_positions, anchor_before)
        assert not np.shares_memory(store.current_positions, store.anchor_positions)

    def test_copy_is_independent(self, atoms):
        """Test a copied store shares no mutable arrays with the original."""
        store = AtomStore(atoms)
        clone = store.copy()

        positions = clone.current_positions
        positions += 1.0
        clone.residue_ids[0] = -1

        np.testing.assert_array_equal(store.current_positions, store.anchor_positions)
        assert store.residue_ids[0] != -1
        np.testing.assert_array_equal(clone.anchor_positions, store.anchor_positions)
        assert not clone.anchor_positions.flags.writeable

    def test_anchor_is_read_only(self, atoms):
        """Test the anchor arrays cannot be written."""
        store = AtomStore(atoms)

        with pytest.raises(ValueError):
            store.anchor_positions[0, 0] = 1.0
        with pytest.raises(ValueError):
            store.anchor_residue_ids[0] = 1

    def test_displacement(self, atoms):
        """Test displacement and RMSD relative to the anchor."""
        store = AtomStore(atoms)
        store.current_positions[:, 0] += 3.0
        store.current_positions[:, 1] += 4.0

        np.testing.assert_allclose(store.displacement_magnitudes(), np.full(4, 5.0))
        assert store.rmsd() == pytest.approx(5.0)

    def test_rmsd_zero_initially(self, atoms):
        """Test fresh store has zero deviation."""
        assert AtomStore(atoms).rmsd() == 0.0

    def test_current_atoms(self, atoms):
        """Test current atoms carry updated coordinates."""
        store = AtomStore(atoms)
        store.current_positions[1] = [9.0, 8.0, 7.0]

        current = store.current_atoms()

        assert current[1].coordinates == (9.0, 8.0, 7.0)
        assert current[1].residue_id == 380
        assert store.anchor_atoms()[1].coordinates == (1.5, 0.0, 0.0)

    def test_check_invariants_passes(self, atoms):
        """Test a fresh store satisfies its invariants."""
        AtomStore(atoms).check_invariants()

    def test_check_invariants_non_finite(self, atoms):
        """Test non-finite current coordinates are an internal error."""
        store = AtomStore(atoms)
        store.current_positions[2, 1] = np.inf

        with pytest.raises(InternalError, match="Non-finite"):
            store.check_invariants()

    def test_check_invariants_residue_misalignment(self, atoms):
        """Test residue-id divergence is an internal error."""
        store = AtomStore(atoms)
        store.residue_ids[0] = 999

        with pytest.raises(InternalError, match="index-aligned"):
            store.check_invariants()


class TestFromBytes:
    """Tests for buffer ingestion."""

    def test_parses_pdb(self):
        """Test the default parser reads PDB records."""
        data = (
            b"ATOM      1  CA  ALA A 381       1.000   2.000   3.000"
            b"  1.00  0.00           C\nEND\n"
        )

        store = AtomStore.from_bytes(data)

        assert store.n_atoms == 1
        np.testing.assert_allclose(store.current_positions[0], [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(store.residue_ids, [381])

    def test_empty_buffer(self):
        """Test empty buffer is a validation error."""
        with pytest.raises(ValidationError):
            AtomStore.from_bytes(b"")

    def test_garbage_buffer(self):
        """Test a buffer with no atoms is a parse error."""
        with pytest.raises(ParseError):
            AtomStore.from_bytes(b"this is not a structure\n")


class TestEnergyEstimate:
    """Tests for the seed energy."""

    def test_linear_in_atom_count(self):
        """Test seed energy is -2.5 per atom."""
        assert ENERGY_PER_ATOM == -2.5
        assert initial_energy_estimate(420) == pytest.approx(-1050.0)
