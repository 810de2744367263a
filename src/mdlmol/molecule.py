# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
A minimal molecular graph, that connection tables are read into and
written from.

Only the operations needed by the codec are provided:
Adding and looking up atoms and bonds, key-value attributes and the
distinction between ordinary molecules and query patterns.
Graph algorithms like ring perception are left to other packages.
"""

__name__ = "mdlmol"
__author__ = "The mdlmol contributors"
__all__ = ["Atom", "Bond", "Molecule", "Pattern"]

import numpy as np
from mdlmol.query import evaluate


class Atom:
    """
    A single atom of a :class:`Molecule`.

    Atoms are created via :meth:`Molecule.add_atom()`.

    Parameters
    ----------
    index : int
        The 1-based position of the atom in its molecule.
    symbol : str
        The element symbol.
    coord : array-like, shape=(3,)
        The x, y and z coordinates.
    mass_number : int, optional
        The isotope mass number.
        ``None`` means natural abundance.

    Attributes
    ----------
    index, symbol, coord, mass_number
        The same as the parameters.
    formal_charge : int
        The formal charge.
    formal_radical : int
        The MDL radical code (0: none, 1: singlet, 2: doublet,
        3: triplet).
    attributes : dict
        Arbitrary additional properties.
    test : Predicate or None
        The query predicate, if the atom belongs to a :class:`Pattern`.

    Examples
    --------

    >>> atom = Atom(1, "C", [1, 2, 3])
    >>> print(atom.coord)
    [1. 2. 3.]
    """

    def __init__(self, index, symbol, coord, mass_number=None):
        self._index = index
        self.symbol = symbol
        coord = np.array(coord, dtype=np.float64)
        if coord.shape != (3,):
            raise ValueError("Position must be ndarray with shape (3,)")
        self.coord = coord
        self.mass_number = mass_number
        self.formal_charge = 0
        self.formal_radical = 0
        self.attributes = {}
        self.test = None

    @property
    def index(self):
        return self._index

    def matches(self, candidate):
        """
        Check whether a candidate atom fulfills the query predicate of
        this atom.

        Without a predicate the element symbols are compared.
        """
        if self.test is None:
            return self.symbol == candidate.symbol
        return evaluate(self.test, self, candidate)

    def __repr__(self):
        return (
            f"Atom({self._index}, {self.symbol!r}, {self.coord.tolist()}, "
            f"mass_number={self.mass_number!r})"
        )


class Bond:
    """
    A bond between two atoms of a :class:`Molecule`.

    Bonds are created via :meth:`Molecule.add_bond()`.

    Attributes
    ----------
    index : int
        The 1-based position of the bond in its molecule.
    atoms : tuple(Atom, Atom)
        The bonded atoms.
    order : int
        The normalized bond order (1, 2 or 3).
    type : int
        The MDL bond type (1-8).
    aromatic : bool
        Whether the bond is aromatic.
        Set by aromaticity perception, which is not part of this
        package.
    attributes : dict
        Arbitrary additional properties.
    test : Predicate or None
        The query predicate, if the bond belongs to a :class:`Pattern`.
    """

    def __init__(self, index, atoms, order=1, type=None):
        self._index = index
        self.atoms = tuple(atoms)
        self.order = order
        self.type = order if type is None else type
        self.aromatic = False
        self.attributes = {}
        self.test = None

    @property
    def index(self):
        return self._index

    def matches(self, candidate):
        """
        Check whether a candidate bond fulfills the query predicate of
        this bond.

        Without a predicate the bond orders are compared.
        """
        if self.test is None:
            return self.order == candidate.order
        return evaluate(self.test, self, candidate)

    def __repr__(self):
        i, j = (atom.index for atom in self.atoms)
        return f"Bond({self._index}, ({i}, {j}), order={self.order}, type={self.type})"


class Molecule:
    """
    A molecule as a list of atoms and bonds.

    Parameters
    ----------
    name : str, optional
        The name of the molecule.

    Attributes
    ----------
    name : str
        The same as the parameter.
    atoms : list of Atom
        The atoms in the order of creation.
        PROTECTED: Do not modify from outside.
    bonds : list of Bond
        The bonds in the order of creation.
        PROTECTED: Do not modify from outside.
    attributes : dict
        Arbitrary additional properties.

    Examples
    --------

    >>> molecule = Molecule("HF")
    >>> h = molecule.add_atom("H", [0, 0, 0])
    >>> f = molecule.add_atom("F", [0.92, 0, 0])
    >>> bond = molecule.add_bond(h, f)
    >>> print(molecule.atom(2).symbol)
    F
    """

    atom_class = Atom
    bond_class = Bond
    # Query patterns additionally carry predicates
    is_pattern = False

    def __init__(self, name=""):
        self.name = name
        self.atoms = []
        self.bonds = []
        self.attributes = {}

    def add_atom(self, symbol, coord, mass_number=None):
        atom = self.atom_class(len(self.atoms) + 1, symbol, coord, mass_number)
        self.atoms.append(atom)
        return atom

    def add_bond(self, atom1, atom2, order=1, type=None, attributes=None):
        bond = self.bond_class(len(self.bonds) + 1, (atom1, atom2), order, type)
        if attributes is not None:
            bond.attributes.update(attributes)
        self.bonds.append(bond)
        return bond

    def atom(self, index):
        """
        Get an atom by its 1-based index.
        """
        if index < 1 or index > len(self.atoms):
            raise IndexError(f"Molecule has no atom with index {index}")
        return self.atoms[index - 1]

    def bond(self, index):
        """
        Get a bond by its 1-based index.
        """
        if index < 1 or index > len(self.bonds):
            raise IndexError(f"Molecule has no bond with index {index}")
        return self.bonds[index - 1]

    @property
    def coord(self):
        if len(self.atoms) == 0:
            return np.zeros((0, 3), dtype=np.float64)
        return np.stack([atom.coord for atom in self.atoms])

    def __len__(self):
        return len(self.atoms)

    def __repr__(self):
        return (
            f"{type(self).__name__}({self.name!r}, "
            f"atoms={len(self.atoms)}, bonds={len(self.bonds)})"
        )


class Pattern(Molecule):
    """
    A :class:`Molecule` that is used as query for substructure
    matching.

    When a connection table is read into a :class:`Pattern`, query
    predicates are installed on its atoms and bonds.
    """

    is_pattern = True
