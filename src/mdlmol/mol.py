# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "mdlmol"
__author__ = "The mdlmol contributors"
__all__ = ["MOLFile"]

from mdlmol.ctab import header_of, read_molecule_from_ctab, write_molecule_to_ctab
from mdlmol.file import TextFile
from mdlmol.header import N_HEADER, Header
from mdlmol.molecule import Molecule


class MOLFile(TextFile):
    """
    This class represents a file in MOL format, that is used to store
    structure information for small molecules.

    Only the ``V2000`` format is supported.
    The coordinates, element symbols, bonds, charges, radicals,
    isotopes and atom lists are read from the file.

    This class can also be used to parse the first structure from an SDF
    file, as the SDF format extends the MOL format.

    Attributes
    ----------
    header : Header
        The header of the MOL file.

    Examples
    --------

    >>> mol_file = MOLFile()
    >>> molecule = Molecule("HF")
    >>> h = molecule.add_atom("H", [0, 0, 0])
    >>> f = molecule.add_atom("F", [0.92, 0, 0])
    >>> bond = molecule.add_bond(h, f)
    >>> mol_file.set_molecule(molecule)
    >>> print(mol_file)
    HF
        mdlmol          2D
    <BLANKLINE>
      2  1  0  0  0  0  0  0  0  0999 V2000
        0.0000    0.0000    0.0000 H   0  0  0  0  0  0  0  0  0  0  0  0
        0.9200    0.0000    0.0000 F   0  0  0  0  0  0  0  0  0  0  0  0
      1  2  1  0  0  0  0
    M  END
    """

    def __init__(self):
        super().__init__()
        # empty header lines
        self.lines = [""] * N_HEADER
        self._header = None

    @classmethod
    def read(cls, file):
        mol_file = super().read(file)
        mol_file._header = None
        return mol_file

    @property
    def header(self):
        if self._header is None:
            self._header = Header.deserialize(self.lines[0:N_HEADER])
        return self._header

    @header.setter
    def header(self, header):
        self._header = header
        self.lines[0:N_HEADER] = self._header.serialize()

    def get_molecule(self, mol_class=Molecule, isotope_abundance=None, logger=None):
        """
        Get a :class:`Molecule` from the MOL file.

        Parameters
        ----------
        mol_class : type, optional
            The molecule class to instantiate.
            Use :class:`Pattern` to obtain a query molecule.
        isotope_abundance : callable, optional
            A function mapping an element symbol to a dictionary of
            mass numbers and their relative abundance.
            Required to resolve mass differences in the atom block.
        logger : logging.Logger, optional
            Receives diagnostics for recoverable problems.

        Returns
        -------
        molecule : Molecule
            The molecule.
        """
        ctab_lines = self.lines[N_HEADER:]
        return read_molecule_from_ctab(
            ctab_lines, self.header, mol_class, isotope_abundance, logger, N_HEADER
        )

    def set_molecule(self, molecule):
        """
        Set the :class:`Molecule` for the file.

        The header is derived from the molecule.

        Parameters
        ----------
        molecule : Molecule
            The molecule to be saved into this file.
        """
        self._header = header_of(molecule)
        self.lines = self._header.serialize() + write_molecule_to_ctab(molecule)
