# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import pytest
import mdlmol


def _candidate_bond(order, aromatic=False, in_ring=False):
    molecule = mdlmol.Molecule()
    atom1 = molecule.add_atom("C", [0, 0, 0])
    atom2 = molecule.add_atom("C", [1.4, 0, 0])
    bond = molecule.add_bond(atom1, atom2, order)
    bond.aromatic = aromatic
    if in_ring:
        bond.attributes[mdlmol.RING_ATTRIBUTE] = [(1, 2, 3, 4, 5, 6)]
    return bond


def _query_bond(bond_type, topology=0):
    molecule = mdlmol.Pattern()
    atom1 = molecule.add_atom("C", [0, 0, 0])
    atom2 = molecule.add_atom("C", [1.4, 0, 0])
    order = bond_type if bond_type in (1, 2, 3) else 1
    bond = molecule.add_bond(atom1, atom2, order, bond_type)
    bond.test = mdlmol.compile_bond_predicate(bond_type, topology)
    return bond


@pytest.mark.parametrize(
    "bond_type, topology, ref_expression",
    [
        (4, 0, "bond.aromatic"),
        (5, 0, "bond.order in (1, 2)"),
        (6, 0, "(bond.order in (1,) or bond.aromatic)"),
        (7, 0, "(bond.order in (2,) or bond.aromatic)"),
        (8, 0, "True"),
        (1, 1, "bond.in_ring"),
        (2, 2, "not bond.in_ring"),
        (4, 1, "bond.in_ring and bond.aromatic"),
        (8, 2, "not bond.in_ring and True"),
    ],
)
def test_bond_predicate_expression(bond_type, topology, ref_expression):
    predicate = mdlmol.compile_bond_predicate(bond_type, topology)
    assert str(predicate) == ref_expression


@pytest.mark.parametrize("bond_type", [1, 2, 3])
def test_default_bond_predicate(bond_type):
    """
    Ordinary bond types without topology constraint get the default
    predicate.
    """
    predicate = mdlmol.compile_bond_predicate(bond_type)
    assert predicate == mdlmol.DefaultBond()


def test_predicates_are_values():
    assert mdlmol.compile_bond_predicate(6, 1) == mdlmol.compile_bond_predicate(6, 1)
    assert mdlmol.compile_bond_predicate(6, 1) != mdlmol.compile_bond_predicate(6, 2)
    assert len({mdlmol.compile_bond_predicate(4), mdlmol.Aromatic()}) == 1


@pytest.mark.parametrize(
    "bond_type, topology, order, aromatic, in_ring, ref_match",
    [
        # Aromatic
        (4, 0, 1, True, False, True),
        (4, 0, 1, False, False, False),
        # Single or double
        (5, 0, 2, False, False, True),
        (5, 0, 3, False, False, False),
        # Single or aromatic
        (6, 0, 1, False, False, True),
        (6, 0, 2, True, False, True),
        (6, 0, 2, False, False, False),
        # Double or aromatic
        (7, 0, 2, False, False, True),
        (7, 0, 1, False, False, False),
        # Any
        (8, 0, 3, False, False, True),
        # Ring
        (1, 1, 1, False, True, True),
        (1, 1, 1, False, False, False),
        # Chain
        (8, 2, 1, False, False, True),
        (8, 2, 1, False, True, False),
        (4, 1, 1, True, True, True),
        (4, 1, 1, True, False, False),
    ],
)
def test_bond_predicate_evaluation(
    bond_type, topology, order, aromatic, in_ring, ref_match
):
    query = _query_bond(bond_type, topology)
    candidate = _candidate_bond(order, aromatic, in_ring)
    assert query.matches(candidate) == ref_match


@pytest.mark.parametrize(
    "query_order, query_aromatic, order, aromatic, ref_match",
    [
        (2, False, 2, False, True),
        (2, False, 1, False, False),
        (2, False, 2, True, False),
        (1, True, 2, True, True),
        (1, True, 1, False, False),
    ],
)
def test_default_bond_evaluation(
    query_order, query_aromatic, order, aromatic, ref_match
):
    query = _query_bond(query_order)
    query.aromatic = query_aromatic
    candidate = _candidate_bond(order, aromatic)
    assert query.matches(candidate) == ref_match


@pytest.mark.parametrize(
    "negated, symbol, ref_match",
    [
        (False, "C", True),
        (False, "N", True),
        (False, "O", False),
        (True, "C", False),
        (True, "O", True),
    ],
)
def test_atom_list_evaluation(negated, symbol, ref_match):
    pattern = mdlmol.Pattern()
    query = pattern.add_atom("L", [0, 0, 0])
    query.test = mdlmol.compile_atom_list_predicate(["C", "N"], negated)

    molecule = mdlmol.Molecule()
    candidate = molecule.add_atom(symbol, [0, 0, 0])
    assert query.matches(candidate) == ref_match


def test_atom_list_expression():
    assert (
        str(mdlmol.compile_atom_list_predicate(["C", "N"]))
        == "atom.symbol in ('C', 'N')"
    )
    assert (
        str(mdlmol.compile_atom_list_predicate(["O"], negated=True))
        == "atom.symbol not in ('O',)"
    )


def test_unknown_predicate():
    with pytest.raises(TypeError):
        mdlmol.evaluate(object(), None, None)
