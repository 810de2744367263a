# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
Functions for parsing and writing a :class:`Molecule` from/to
*MDL* connection tables (Ctab) in the ``V2000`` format.
"""

__name__ = "mdlmol"
__author__ = "The mdlmol contributors"
__all__ = [
    "read_molecule",
    "write_molecule",
    "header_of",
    "read_molecule_from_ctab",
    "write_molecule_to_ctab",
    "PROPERTY_HANDLERS",
]

import itertools
import logging
import numpy as np
from mdlmol.columns import (
    ALS_LAYOUT,
    ALS_SYMBOL_START,
    ALS_SYMBOL_WIDTH,
    ATOM_LAYOUT,
    BOND_LAYOUT,
    COUNTS_LAYOUT,
    parse_float,
    parse_int,
    split_columns,
)
from mdlmol.error import (
    BadMoleculeError,
    DanglingBondReferenceError,
    MalformedFieldError,
    SelfBondError,
    TruncatedBlockError,
    TruncatedHeaderError,
    TruncatedPropertyBlockError,
)
from mdlmol.header import N_HEADER, Header
from mdlmol.molecule import Molecule
from mdlmol.query import compile_atom_list_predicate, compile_bond_predicate

_LOGGER = logging.getLogger("mdlmol")

# Charge codes of the atom block, superseded by 'M  CHG' lines
LEGACY_CHARGE_MAPPING = {1: 3, 2: 2, 3: 1, 4: 0, 5: -1, 6: -2, 7: -3}
# Code 4 is a 'doublet radical' rather than a charge
LEGACY_RADICAL_CODE = 4
DOUBLET_RADICAL = 2

NORMALIZED_BOND_TYPES = (1, 2, 3)
QUERY_BOND_TYPES = (4, 5, 6, 7, 8)

END_LINE = "M  END"
RECORD_DELIMITER = "$$$$"
# The maximum number of entries per 'M  CHG', 'M  RAD' and 'M  ISO' line
N_ENTRIES_PER_LINE = 8
# The format uses a maximum of 3 digits for the atom and bond count
MAX_COUNT = 999

TEST_ATTRIBUTE = "mdlmol/test_sub"


def read_molecule(
    lines, mol_class=Molecule, isotope_abundance=None, logger=None, line_offset=0
):
    """
    Parse a complete molfile, i.e. the header and the connection table.

    Parameters
    ----------
    lines : list of str
        The lines of the molfile, starting with the molecule name.
    mol_class : type, optional
        The molecule class to instantiate.
        If the class is a pattern (``mol_class.is_pattern``), query
        predicates are installed on atoms and bonds.
    isotope_abundance : callable, optional
        A function mapping an element symbol to a dictionary of mass
        numbers and their relative abundance.
        Required to resolve mass differences in the atom block.
        If omitted, mass differences are ignored with a warning.
    logger : logging.Logger, optional
        Receives diagnostics for recoverable problems.
        By default the ``mdlmol`` logger is used, which does not emit
        anything unless logging is configured by the application.
    line_offset : int, optional
        The number of lines preceding `lines` in the file.
        Only used for error messages.

    Returns
    -------
    molecule : Molecule
        The parsed molecule, as instance of `mol_class`.
    """
    header = Header.deserialize(lines[:N_HEADER], line_offset)
    return read_molecule_from_ctab(
        lines[N_HEADER:],
        header,
        mol_class,
        isotope_abundance,
        logger,
        line_offset + N_HEADER,
    )


def write_molecule(molecule):
    """
    Convert a :class:`Molecule` into a complete molfile.

    Parameters
    ----------
    molecule : Molecule
        The molecule to be written.

    Returns
    -------
    lines : list of str
        The header lines followed by the connection table, ending with
        the ``M  END`` line.
    """
    return header_of(molecule).serialize() + write_molecule_to_ctab(molecule)


def header_of(molecule):
    """
    Get the :class:`Header` for a molecule.

    The program line and comment stored during reading are reused.
    Otherwise a program line with the dimensionality of the coordinates
    is created.
    """
    line2 = molecule.attributes.get("mdlmol/line2")
    if line2 is None:
        coord = molecule.coord
        dimensions = "3D" if np.any(coord[:, 2] != 0) else "2D"
        line2 = Header.create(dimensions=dimensions).line2
    return Header(
        molecule.name, line2, molecule.attributes.get("mdlmol/comment", "")
    )


def read_molecule_from_ctab(
    ctab_lines,
    header=None,
    mol_class=Molecule,
    isotope_abundance=None,
    logger=None,
    line_offset=N_HEADER,
):
    """
    Parse a *MDL* connection table (Ctab) to obtain a
    :class:`Molecule`.

    Parameters
    ----------
    ctab_lines : lines of str
        The lines containing the *ctab*.
        Must begin with the *counts* line and contain the ``M  END``
        line.
        Lines after ``M  END`` are ignored.
    header : Header, optional
        If given, the name, program line and comment are stored in the
        molecule.
    mol_class, isotope_abundance, logger
        See :func:`read_molecule()`.
    line_offset : int, optional
        The number of lines preceding the counts line in the file.
        Only used for error messages.

    Returns
    -------
    molecule : Molecule
        The parsed molecule.
    """
    if logger is None:
        logger = _LOGGER
    if len(ctab_lines) == 0:
        raise TruncatedHeaderError("Counts line is missing", line_offset + 1)
    n_atoms, n_bonds, chiral = _read_counts(ctab_lines[0], line_offset + 1)

    molecule = mol_class()
    if header is not None:
        molecule.name = header.mol_name
        molecule.attributes["mdlmol/line2"] = header.line2
        molecule.attributes["mdlmol/comment"] = header.comments
    molecule.attributes["mdlmol/chiral"] = chiral

    legacy = _LegacyProperties()
    start = 1
    atom_lines = _get_block(ctab_lines, start, n_atoms, "atom", line_offset)
    for i, line in enumerate(atom_lines):
        _read_atom(
            molecule, line, line_offset + start + i + 1, legacy,
            isotope_abundance, logger
        )

    start += n_atoms
    bond_lines = _get_block(ctab_lines, start, n_bonds, "bond", line_offset)
    for i, line in enumerate(bond_lines):
        _read_bond(molecule, line, line_offset + start + i + 1, n_atoms, logger)

    start += n_bonds
    _read_property_block(
        molecule, ctab_lines[start:], line_offset + start, legacy, logger
    )
    legacy.commit(molecule)
    return molecule


def write_molecule_to_ctab(molecule):
    """
    Convert a :class:`Molecule` into a
    *MDL* connection table (Ctab).

    Formal charges, radicals and isotopes are written into the
    property block.
    Bond stereo and topology flags, query bond types and the legacy
    atom block flags are not written:
    Query bonds are written with their normalized bond order.

    Parameters
    ----------
    molecule : Molecule
        The molecule.
        All atoms referred to by a bond must be part of the molecule.

    Returns
    -------
    ctab_lines : lines of str
        The lines containing the *ctab*.
        The lines begin with the *counts* line and end with the
        ``M  END`` line.
    """
    atoms = molecule.atoms
    bonds = molecule.bonds
    if len(atoms) > MAX_COUNT or len(bonds) > MAX_COUNT:
        raise BadMoleculeError(
            "The given number of atoms or bonds is too large for V2000 format"
        )
    coord = molecule.coord
    if np.isnan(coord).any():
        raise BadMoleculeError("Input molecule has NaN coordinates")
    for i, coord_name in enumerate(["x", "y", "z"]):
        n_coord_digits = _number_of_integer_digits(coord[:, i])
        if n_coord_digits > 5:
            raise BadMoleculeError(
                f"5 pre-decimal columns for {coord_name}-coordinates are "
                f"available, but molecule would require {n_coord_digits}"
            )

    chiral = int(molecule.attributes.get("mdlmol/chiral", 0))
    counts_line = (
        f"{len(atoms):>3d}{len(bonds):>3d}"
        f"{0:>3d}{0:>3d}{chiral:>3d}"
        + f"{0:>3d}" * 5
        + f"{MAX_COUNT:>3d}{'V2000':>6}"
    )

    atom_lines = []
    # The index map is only valid during this call
    atom_indices = {}
    for i, atom in enumerate(atoms):
        if len(atom.symbol) > 3:
            raise BadMoleculeError(
                f"Element symbol '{atom.symbol}' exceeds 3 characters"
            )
        atom_indices[id(atom)] = i + 1
        x, y, z = coord[i]
        atom_lines.append(
            f"{x:>10.4f}{y:>10.4f}{z:>10.4f}"
            f" {atom.symbol:<3}"
            f"{0:>2d}"  # Mass difference -> isotopes use 'M  ISO'
            + f"{0:>3d}" * 11  # Charge -> 'M  CHG' and more unused fields
        )

    bond_lines = []
    for bond in bonds:
        indices = []
        for atom in bond.atoms:
            index = atom_indices.get(id(atom))
            if index is None:
                raise BadMoleculeError(
                    f"Bond {bond.index} refers to an atom "
                    "that is not part of the molecule"
                )
            indices.append(index)
        bond_lines.append(
            f"{indices[0]:>3d}{indices[1]:>3d}{bond.order:>3d}" + f"{0:>3d}" * 4
        )

    property_lines = (
        _write_property_lines(
            "CHG", [(i + 1, atom.formal_charge) for i, atom in enumerate(atoms)
                    if atom.formal_charge]
        )
        + _write_property_lines(
            "ISO", [(i + 1, atom.mass_number) for i, atom in enumerate(atoms)
                    if atom.mass_number]
        )
        + _write_property_lines(
            "RAD", [(i + 1, atom.formal_radical) for i, atom in enumerate(atoms)
                    if atom.formal_radical]
        )
    )

    return [counts_line] + atom_lines + bond_lines + property_lines + [END_LINE]


class _LegacyProperties:
    """
    Charges and radicals from the atom block of a single record.

    They only apply, if the record has no 'M  CHG' or 'M  RAD' line.
    """

    def __init__(self):
        self.charges = {}
        self.radicals = {}
        self.superseded = False

    def record(self, atom_index, code, line_number, logger):
        if code == 0:
            return
        if code == LEGACY_RADICAL_CODE:
            self.radicals[atom_index] = DOUBLET_RADICAL
        elif code in LEGACY_CHARGE_MAPPING:
            self.charges[atom_index] = LEGACY_CHARGE_MAPPING[code]
        else:
            logger.warning(
                f"Cannot handle MDL charge type {code} in line {line_number}, "
                f"it is ignored"
            )

    def supersede(self):
        self.charges.clear()
        self.radicals.clear()
        self.superseded = True

    def commit(self, molecule):
        if self.superseded:
            return
        for atom_index, charge in self.charges.items():
            molecule.atom(atom_index).formal_charge = charge
        for atom_index, radical in self.radicals.items():
            molecule.atom(atom_index).formal_radical = radical


def _read_counts(counts_line, line_number):
    fields = split_columns(counts_line, COUNTS_LAYOUT)
    n_atoms = parse_int(fields[0], "atom count", line_number)
    n_bonds = parse_int(fields[1], "bond count", line_number)
    chiral = parse_int(fields[4], "chiral flag", line_number)
    if n_atoms < 0 or n_bonds < 0:
        raise MalformedFieldError(
            "Atom and bond count must not be negative", line_number
        )
    return n_atoms, n_bonds, chiral


def _get_block(ctab_lines, start, count, block_name, line_offset):
    block = ctab_lines[start : start + count]
    if len(block) < count:
        raise TruncatedBlockError(
            f"Expected {count} lines in {block_name} block, "
            f"but got {len(block)}",
            line_offset + start + len(block) + 1,
        )
    return block


def _read_atom(molecule, line, line_number, legacy, isotope_abundance, logger):
    x, y, z, symbol, mass_difference, charge_code = split_columns(line, ATOM_LAYOUT)
    coord = [
        parse_float(value, name, line_number)
        for value, name in zip((x, y, z), ("x", "y", "z"))
    ]
    mass_difference = parse_int(mass_difference, "mass difference", line_number)
    charge_code = parse_int(charge_code, "charge", line_number)

    mass_number = _resolve_mass_number(
        symbol, mass_difference, isotope_abundance, line_number, logger
    )
    atom = molecule.add_atom(symbol, coord, mass_number)
    legacy.record(atom.index, charge_code, line_number, logger)


def _resolve_mass_number(
    symbol, mass_difference, isotope_abundance, line_number, logger
):
    """
    Add the mass difference to the mass number of the most abundant
    isotope of the element.
    """
    if mass_difference == 0:
        return None
    if isotope_abundance is None:
        logger.warning(
            f"No isotope abundance table given, "
            f"cannot read mass number from atom block (line {line_number})"
        )
        return None
    abundance = isotope_abundance(symbol)
    if not abundance:
        logger.warning(
            f"No isotope abundance known for element '{symbol}', "
            f"cannot read mass number from atom block (line {line_number})"
        )
        return None
    # On ties the lighter isotope is chosen
    most_abundant = min(abundance, key=lambda mass: (-abundance[mass], mass))
    return int(most_abundant) + mass_difference


def _read_bond(molecule, line, line_number, n_atoms, logger):
    fields = split_columns(line, BOND_LAYOUT)
    index_1 = parse_int(fields[0], "first atom", line_number)
    index_2 = parse_int(fields[1], "second atom", line_number)
    bond_type = parse_int(fields[2], "bond type", line_number)
    stereo = parse_int(fields[3], "bond stereo", line_number)
    topology = parse_int(fields[4], "bond topology", line_number)
    # The reacting center status is ignored

    for index in (index_1, index_2):
        if index < 1 or index > n_atoms:
            raise DanglingBondReferenceError(
                f"Bond refers to atom {index}, "
                f"but the molecule has {n_atoms} atoms",
                line_number,
            )
    if index_1 == index_2:
        raise SelfBondError(
            f"Bond connects atom {index_1} with itself", line_number
        )
    if bond_type not in NORMALIZED_BOND_TYPES + QUERY_BOND_TYPES:
        logger.warning(
            f"Cannot handle MDL bond type {bond_type} in line {line_number}, "
            f"single bond order is used instead"
        )
    order = bond_type if bond_type in NORMALIZED_BOND_TYPES else 1

    bond = molecule.add_bond(
        molecule.atom(index_1),
        molecule.atom(index_2),
        order,
        bond_type,
        {"mdlmol/stereo": stereo, "mdlmol/topology": topology},
    )
    if molecule.is_pattern:
        predicate = compile_bond_predicate(bond_type, topology)
        bond.test = predicate
        bond.attributes[TEST_ATTRIBUTE] = str(predicate)
        logger.debug(f"Bond {bond.index} predicate: {predicate}")


def _read_property_block(molecule, lines, line_offset, legacy, logger):
    for i, line in enumerate(lines):
        line_number = line_offset + i + 1
        if line.startswith(END_LINE) or line.startswith(RECORD_DELIMITER):
            return
        if not line.startswith("M  "):
            continue
        tag = line[3:6]
        if tag in ("CHG", "RAD"):
            # Atom block charges and radicals are void for the entire
            # record, if any of these lines is present
            legacy.supersede()
        handler = PROPERTY_HANDLERS.get(tag)
        if handler is not None:
            handler(molecule, line, line_number, logger)
    raise TruncatedPropertyBlockError(
        f"Property block lacks the '{END_LINE}' line",
        line_offset + len(lines) + 1,
    )


def _read_atom_value_pairs(molecule, line, line_number, logger):
    """
    Parse a 'M  XXXnn8 aaa vvv ...' line into pairs of atoms and
    values.

    Returns ``None`` for malformed lines.
    """
    # Remove 'M  XXX' prefix
    columns = line[6:].split()
    try:
        values = [int(column) for column in columns]
    except ValueError:
        logger.warning(f"Skipping malformed property line {line_number}: '{line}'")
        return None
    # The first value is the number of entries
    # The remaining contain atom index and value alternatingly
    if len(values) == 0 or len(values) % 2 != 1:
        logger.warning(f"Skipping malformed property line {line_number}: '{line}'")
        return None
    pairs = []
    for atom_index, value in _batched(values[1:], 2):
        if atom_index < 1 or atom_index > len(molecule.atoms):
            logger.warning(
                f"Skipping property line {line_number}, "
                f"as it refers to nonexistent atom {atom_index}"
            )
            return None
        pairs.append((molecule.atom(atom_index), value))
    return pairs


def _read_charges(molecule, line, line_number, logger):
    pairs = _read_atom_value_pairs(molecule, line, line_number, logger)
    for atom, charge in pairs or []:
        atom.formal_charge = charge


def _read_radicals(molecule, line, line_number, logger):
    pairs = _read_atom_value_pairs(molecule, line, line_number, logger)
    for atom, radical in pairs or []:
        atom.formal_radical = radical


def _read_isotopes(molecule, line, line_number, logger):
    pairs = _read_atom_value_pairs(molecule, line, line_number, logger)
    for atom, mass_number in pairs or []:
        atom.mass_number = mass_number


def _read_atom_list(molecule, line, line_number, logger):
    atom_index, count, exclusion = split_columns(line, ALS_LAYOUT)
    try:
        atom_index = parse_int(atom_index, "atom index", line_number)
        count = parse_int(count, "entry count", line_number)
    except MalformedFieldError as e:
        logger.warning(f"Skipping malformed atom list: {e}")
        return
    if atom_index < 1 or atom_index > len(molecule.atoms):
        logger.warning(
            f"Skipping atom list in line {line_number}, "
            f"as it refers to nonexistent atom {atom_index}"
        )
        return

    symbols = []
    for i in range(count):
        start = ALS_SYMBOL_START + i * ALS_SYMBOL_WIDTH
        symbol = line[start : start + ALS_SYMBOL_WIDTH].strip()
        if symbol:
            symbols.append(symbol)
    negated = exclusion in ("T", "t")

    atom = molecule.atom(atom_index)
    atom.attributes["mdlmol/atom_list"] = line
    if molecule.is_pattern:
        predicate = compile_atom_list_predicate(symbols, negated)
        atom.test = predicate
        atom.attributes[TEST_ATTRIBUTE] = str(predicate)
        logger.debug(f"Atom {atom.index} predicate: {predicate}")


PROPERTY_HANDLERS = {
    "CHG": _read_charges,
    "RAD": _read_radicals,
    "ISO": _read_isotopes,
    "ALS": _read_atom_list,
}


def _write_property_lines(tag, entries):
    # Each line can contain up to 8 entries
    return [
        f"M  {tag}{len(batch):>3d}"
        + "".join(f" {atom_index:>3d} {value:>3d}" for atom_index, value in batch)
        for batch in _batched(entries, N_ENTRIES_PER_LINE)
    ]


def _number_of_integer_digits(values):
    if len(values) == 0:
        return 0
    values = values.astype(int, copy=False)
    return max(len(str(np.min(values))), len(str(np.max(values))))


def _batched(iterable, n):
    """
    Equivalent to :func:`itertools.batched()`.

    However, :func:`itertools.batched()` is available since Python 3.12.
    This function can be removed when the minimum supported Python
    version is 3.12.
    """
    iterator = iter(iterable)
    while batch := tuple(itertools.islice(iterator, n)):
        yield batch
