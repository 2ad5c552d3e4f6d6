"""Atom records and the dual current/anchor store."""

from .atoms import Atom
from .store import ENERGY_PER_ATOM, AtomStore, initial_energy_estimate

__all__ = ["Atom", "AtomStore", "ENERGY_PER_ATOM", "initial_energy_estimate"]
