# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
Query predicates for substructure matching.

MDL query features, i.e. special bond types, ring/chain topology and
atom lists, are translated into a small closed set of predicate
types.
A predicate is plain data: it is evaluated by :func:`evaluate()` against
the query-side object and a candidate object from the searched
molecule.
The string representation of a predicate is a human readable
expression intended for debugging.

Examples
--------

>>> predicate = compile_bond_predicate(bond_type=6, topology=1)
>>> print(predicate)
bond.in_ring and (bond.order in (1,) or bond.aromatic)
"""

__name__ = "mdlmol"
__author__ = "The mdlmol contributors"
__all__ = [
    "Predicate",
    "Always",
    "Aromatic",
    "OrderIn",
    "RingMembership",
    "Disjunction",
    "Conjunction",
    "AtomSymbolSet",
    "DefaultBond",
    "evaluate",
    "compile_bond_predicate",
    "compile_atom_list_predicate",
    "RING_ATTRIBUTE",
]

from dataclasses import dataclass

# The bond attribute filled by ring perception:
# A list of the rings the bond is part of
RING_ATTRIBUTE = "ring/rings"


class Predicate:
    """
    Base class for all query predicates.
    """

    __slots__ = ()


@dataclass(frozen=True)
class Always(Predicate):
    """
    Matches every candidate.
    """

    def __str__(self):
        return "True"


@dataclass(frozen=True)
class Aromatic(Predicate):
    """
    Matches aromatic candidate bonds.
    """

    def __str__(self):
        return "bond.aromatic"


@dataclass(frozen=True)
class OrderIn(Predicate):
    """
    Matches candidate bonds with one of the given bond orders.
    """

    orders: ...

    def __str__(self):
        return f"bond.order in {tuple(self.orders)}"


@dataclass(frozen=True)
class RingMembership(Predicate):
    """
    Matches candidate bonds that are (not) part of a ring.
    """

    in_ring: ...

    def __str__(self):
        return "bond.in_ring" if self.in_ring else "not bond.in_ring"


@dataclass(frozen=True)
class Disjunction(Predicate):
    """
    Matches if any of the terms matches.
    """

    terms: ...

    def __str__(self):
        return "(" + " or ".join(str(term) for term in self.terms) + ")"


@dataclass(frozen=True)
class Conjunction(Predicate):
    """
    Matches if all of the terms match.
    """

    terms: ...

    def __str__(self):
        return " and ".join(str(term) for term in self.terms)


@dataclass(frozen=True)
class AtomSymbolSet(Predicate):
    """
    Matches candidate atoms whose element symbol is (not) in the given
    symbols.
    """

    symbols: ...
    negated: ... = False

    def __str__(self):
        operator = "not in" if self.negated else "in"
        return f"atom.symbol {operator} {tuple(self.symbols)}"


@dataclass(frozen=True)
class DefaultBond(Predicate):
    """
    Aromatic query bonds match aromatic candidate bonds,
    all other query bonds match non-aromatic candidate bonds with the
    same order.
    """

    def __str__(self):
        return (
            "bond.aromatic if query.aromatic "
            "else (not bond.aromatic and bond.order == query.order)"
        )


def evaluate(predicate, query, candidate):
    """
    Evaluate a predicate.

    Parameters
    ----------
    predicate : Predicate
        The predicate to be evaluated.
    query : Atom or Bond
        The query object the predicate is attached to.
    candidate : Atom or Bond
        The object from the searched molecule.

    Returns
    -------
    match : bool
        True, if the candidate fulfills the predicate.
    """
    match predicate:
        case Always():
            return True
        case Aromatic():
            return bool(candidate.aromatic)
        case OrderIn(orders=orders):
            return candidate.order in orders
        case RingMembership(in_ring=in_ring):
            return _is_in_ring(candidate) == in_ring
        case Disjunction(terms=terms):
            return any(evaluate(term, query, candidate) for term in terms)
        case Conjunction(terms=terms):
            return all(evaluate(term, query, candidate) for term in terms)
        case AtomSymbolSet(symbols=symbols, negated=negated):
            return (candidate.symbol in symbols) != negated
        case DefaultBond():
            if query.aromatic:
                return bool(candidate.aromatic)
            return not candidate.aromatic and query.order == candidate.order
        case _:
            raise TypeError(f"Unknown predicate type '{type(predicate).__name__}'")


def _is_in_ring(bond):
    return bool(bond.attributes.get(RING_ATTRIBUTE))


BOND_TYPE_PREDICATES = {
    4: Aromatic(),
    5: OrderIn((1, 2)),
    6: Disjunction((OrderIn((1,)), Aromatic())),
    7: Disjunction((OrderIn((2,)), Aromatic())),
    8: Always(),
}

BOND_TOPOLOGY_PREDICATES = {
    1: RingMembership(True),
    2: RingMembership(False),
}


def compile_bond_predicate(bond_type, topology=0):
    """
    Create the predicate for a query bond.

    Parameters
    ----------
    bond_type : int
        The MDL bond type.
    topology : int, optional
        The MDL bond topology (0: either, 1: ring, 2: chain).

    Returns
    -------
    predicate : Predicate
        The conjunction of the topology and the bond type condition.
        If neither applies, :class:`DefaultBond` is returned.
    """
    terms = [
        predicate
        for predicate in (
            BOND_TOPOLOGY_PREDICATES.get(topology),
            BOND_TYPE_PREDICATES.get(bond_type),
        )
        if predicate is not None
    ]
    if len(terms) == 0:
        return DefaultBond()
    if len(terms) == 1:
        return terms[0]
    return Conjunction(tuple(terms))


def compile_atom_list_predicate(symbols, negated=False):
    """
    Create the predicate for an atom list.

    Parameters
    ----------
    symbols : iterable of str
        The element symbols in the atom list.
    negated : bool, optional
        If true, the atom must not be any of the listed elements.

    Returns
    -------
    predicate : AtomSymbolSet
        The predicate.
    """
    return AtomSymbolSet(tuple(symbols), negated)
