"""Structure format implementations."""

from .pdb import PDBParser, PDBWriter

__all__ = [
    "PDBParser",
    "PDBWriter",
]
