# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import numpy as np
import pytest
import mdlmol


@pytest.fixture
def hydrogen_fluoride():
    molecule = mdlmol.Molecule("HF")
    h = molecule.add_atom("H", [0, 0, 0])
    f = molecule.add_atom("F", [0.92, 0, 0], mass_number=19)
    molecule.add_bond(h, f)
    return molecule


def test_indices(hydrogen_fluoride):
    """
    Atoms and bonds are numbered from 1 in the order of creation.
    """
    assert [atom.index for atom in hydrogen_fluoride.atoms] == [1, 2]
    assert hydrogen_fluoride.atom(2).symbol == "F"
    assert hydrogen_fluoride.atom(2).mass_number == 19
    assert hydrogen_fluoride.bond(1).atoms == tuple(hydrogen_fluoride.atoms)
    assert len(hydrogen_fluoride) == 2


@pytest.mark.parametrize("index", [0, 3, -1])
def test_invalid_index(hydrogen_fluoride, index):
    with pytest.raises(IndexError):
        hydrogen_fluoride.atom(index)
    with pytest.raises(IndexError):
        hydrogen_fluoride.bond(index)


def test_coord(hydrogen_fluoride):
    assert hydrogen_fluoride.coord.shape == (2, 3)
    assert hydrogen_fluoride.coord.dtype == np.float64
    assert hydrogen_fluoride.coord[1].tolist() == [0.92, 0, 0]
    assert mdlmol.Molecule().coord.shape == (0, 3)


def test_invalid_coord():
    with pytest.raises(ValueError):
        mdlmol.Molecule().add_atom("C", [0, 0])


def test_defaults(hydrogen_fluoride):
    atom = hydrogen_fluoride.atom(1)
    assert atom.formal_charge == 0
    assert atom.formal_radical == 0
    assert atom.mass_number is None
    assert atom.test is None
    bond = hydrogen_fluoride.bond(1)
    # The MDL bond type defaults to the order
    assert bond.order == 1
    assert bond.type == 1
    assert bond.aromatic is False
    assert not hydrogen_fluoride.is_pattern
    assert mdlmol.Pattern.is_pattern


def test_match_without_predicate(hydrogen_fluoride):
    """
    Without a predicate atoms are matched by element and bonds by
    order.
    """
    other = mdlmol.Molecule()
    h = other.add_atom("H", [1, 1, 1])
    cl = other.add_atom("Cl", [2, 1, 1])
    single = other.add_bond(h, cl, 1)
    double = other.add_bond(h, cl, 2)

    assert hydrogen_fluoride.atom(1).matches(h)
    assert not hydrogen_fluoride.atom(2).matches(cl)
    assert hydrogen_fluoride.bond(1).matches(single)
    assert not hydrogen_fluoride.bond(1).matches(double)
