"""I/O layer for structure ingestion and export."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import ValidationError
from .base import StructureParser, StructureWriter
from .formats.pdb import PDBParser, PDBWriter

if TYPE_CHECKING:
    from ..system import Atom

_PARSERS: dict[str, type[StructureParser]] = {
    "pdb": PDBParser,
}


def get_parser(fmt: str = "pdb") -> StructureParser:
    """
    Get a structure parser by format name.

    Raises:
        ValidationError: If the format is unknown.
    """
    try:
        return _PARSERS[fmt.lower()]()
    except KeyError:
        raise ValidationError(
            f"Unknown structure format: {fmt}. Available: {', '.join(_PARSERS)}"
        ) from None


def parse_structure(data: bytes, fmt: str = "pdb") -> list[Atom]:
    """Parse an in-memory structure buffer into atoms."""
    return get_parser(fmt).parse(data)


__all__ = [
    # Base classes
    "StructureParser",
    "StructureWriter",
    # Formats
    "PDBParser",
    "PDBWriter",
    # Helpers
    "get_parser",
    "parse_structure",
]
