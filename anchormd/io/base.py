"""Base classes for structure I/O."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ..errors import ParseError

if TYPE_CHECKING:
    from ..system import Atom


class StructureParser(ABC):
    """
    Abstract base class for structure parsers.

    Parsers turn an in-memory structure buffer into an ordered atom list.
    They never stage the buffer through the filesystem, so any number of
    engines may parse concurrently.

    Example:
        atoms = PDBParser().parse(Path("protein.pdb").read_bytes())
    """

    #: Short format name used by ``parse_structure``.
    format_name: str = ""

    @abstractmethod
    def parse_text(self, text: str) -> list[Atom]:
        """
        Parse decoded structure text.

        Args:
            text: Structure file contents.

        Returns:
            Ordered list of atoms.

        Raises:
            ParseError: On malformed input.
        """
        ...

    def parse(self, data: bytes) -> list[Atom]:
        """
        Parse a raw byte buffer.

        Raises:
            ParseError: If the buffer cannot be decoded or parsed.
        """
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Structure buffer is not valid UTF-8: {exc}") from exc
        return self.parse_text(text)


class StructureWriter(ABC):
    """Abstract base class for structure writers producing text."""

    @abstractmethod
    def write(self, atoms: Sequence[Atom], **kwargs) -> str:
        """
        Render atoms as structure text.

        Args:
            atoms: Atoms to write.
            **kwargs: Format-specific options.
        """
        ...

    def write_bytes(self, atoms: Sequence[Atom], **kwargs) -> bytes:
        """Render atoms as an encoded buffer."""
        return self.write(atoms, **kwargs).encode("utf-8")
