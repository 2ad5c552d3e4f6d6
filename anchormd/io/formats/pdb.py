"""PDB (Protein Data Bank) format implementation."""

from __future__ import annotations

from collections.abc import Sequence

from ...errors import ParseError
from ...system import Atom
from ..base import StructureParser, StructureWriter


class PDBParser(StructureParser):
    """
    PDB format structure parser.

    Reads ATOM/HETATM records of the first model. Subsequent MODEL blocks
    are ignored.
    """

    format_name = "pdb"

    def parse_text(self, text: str) -> list[Atom]:
        atoms: list[Atom] = []
        seen_model = False

        for line_number, line in enumerate(text.splitlines(), start=1):
            if line.startswith("MODEL"):
                # Stop at the second model
                if seen_model:
                    break
                seen_model = True
                continue

            if line.startswith("ENDMDL") or line.startswith("END"):
                if atoms:
                    break
                continue

            if line.startswith(("ATOM", "HETATM")):
                atoms.append(self._parse_atom_record(line, line_number))

        if not atoms:
            raise ParseError("No ATOM/HETATM records found in PDB data")

        return atoms

    @staticmethod
    def _parse_atom_record(line: str, line_number: int) -> Atom:
        """Parse a fixed-column ATOM/HETATM record."""
        if len(line) < 54:
            raise ParseError(f"Line {line_number}: ATOM record too short")

        try:
            atom_name = line[12:16].strip()
            res_name = line[17:20].strip()
            res_id = int(line[22:26])
            x = float(line[30:38])
            y = float(line[38:46])
            z = float(line[46:54])
        except ValueError as exc:
            raise ParseError(f"Line {line_number}: malformed ATOM record: {exc}") from exc

        element = line[76:78].strip() if len(line) > 76 else ""
        if not element:
            element = atom_name[:1] or "X"

        return Atom(
            residue_id=res_id,
            coordinates=(x, y, z),
            name=atom_name or "X",
            residue_name=res_name or "UNK",
            element=element,
        )


class PDBWriter(StructureWriter):
    """
    PDB format structure writer.

    Writes minimal PDB text suitable for visualization. With
    ``model`` set, the atoms are wrapped in a MODEL/ENDMDL block.
    """

    def write(
        self,
        atoms: Sequence[Atom],
        title: str = "",
        model: int | None = None,
        **kwargs,
    ) -> str:
        """
        Render atoms in PDB format.

        Args:
            atoms: Atoms to write.
            title: Optional TITLE record.
            model: Optional model number.
        """
        lines: list[str] = []

        if title:
            lines.append(f"TITLE     {title}")
        if model is not None:
            lines.append(f"MODEL     {model:4d}")

        for i, atom in enumerate(atoms):
            x, y, z = atom.coordinates
            lines.append(
                f"ATOM  {(i + 1) % 100000:5d} {atom.name:<4s} {atom.residue_name:3s}  "
                f"{atom.residue_id:4d}    {x:8.3f}{y:8.3f}{z:8.3f}"
                f"  1.00  0.00          {atom.element:>2s}"
            )

        if model is not None:
            lines.append("ENDMDL")
        lines.append("END")

        return "\n".join(lines) + "\n"
