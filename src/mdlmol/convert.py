# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "mdlmol"
__author__ = "The mdlmol contributors"
__all__ = ["get_molecule", "set_molecule", "get_molecules", "set_molecules"]

from mdlmol.error import CtabError
from mdlmol.mol import MOLFile
from mdlmol.molecule import Molecule
from mdlmol.sdf import SDFile, SDRecord


def get_molecule(
    mol_file, record_index=None, mol_class=Molecule, isotope_abundance=None,
    logger=None
):
    """
    Get a :class:`Molecule` from the MOL file.

    This function is a thin wrapper around
    :meth:`MOLFile.get_molecule()`.

    Parameters
    ----------
    mol_file : MOLFile or SDFile or SDRecord
        The file.
    record_index : int, optional
        Has only an effect when `mol_file` is a :class:`SDFile`.
        The index of the record in the SD file.
        By default, the file must contain exactly one record.
    mol_class : type, optional
        The molecule class to instantiate.
        Use :class:`Pattern` to obtain a query molecule.
    isotope_abundance : callable, optional
        A function mapping an element symbol to a dictionary of mass
        numbers and their relative abundance.
    logger : logging.Logger, optional
        Receives diagnostics for recoverable problems.

    Returns
    -------
    molecule : Molecule
        The molecule.
    """
    record = _get_record(mol_file, record_index)
    try:
        return record.get_molecule(mol_class, isotope_abundance, logger)
    except CtabError as e:
        if isinstance(mol_file, SDFile):
            e.record_index = 0 if record_index is None else record_index
        raise


def set_molecule(mol_file, molecule, record_index=None):
    """
    Set the :class:`Molecule` for the MOL file.

    This function is a thin wrapper around
    :meth:`MOLFile.set_molecule()`.

    Parameters
    ----------
    mol_file : MOLFile or SDFile or SDRecord
        The file.
    molecule : Molecule
        The molecule to be saved into the file.
    record_index : int, optional
        Has only an effect when `mol_file` is a :class:`SDFile`.
        The index of the record to be replaced.
        By default, the first record is used.
        If the file is empty, a new record will be created.
    """
    record = _get_or_create_record(mol_file, record_index)
    record.set_molecule(molecule)


def get_molecules(
    mol_file, mol_class=Molecule, isotope_abundance=None, logger=None,
    best_effort=False
):
    """
    Get all molecules from a file.

    Parameters
    ----------
    mol_file : MOLFile or SDFile or SDRecord
        The file.
    mol_class, isotope_abundance, logger
        See :func:`get_molecule()`.
    best_effort : bool, optional
        Has only an effect when `mol_file` is a :class:`SDFile`.
        If true, unreadable records are skipped.

    Returns
    -------
    molecules : list of Molecule
        The molecules.
    """
    if isinstance(mol_file, SDFile):
        return mol_file.get_molecules(
            mol_class, isotope_abundance, logger, best_effort
        )
    return [get_molecule(mol_file, None, mol_class, isotope_abundance, logger)]


def set_molecules(mol_file, molecules):
    """
    Set all molecules of a file.

    Parameters
    ----------
    mol_file : MOLFile or SDFile
        The file.
        A :class:`MOLFile` can only take a single molecule.
    molecules : iterable of Molecule
        The molecules.
    """
    if isinstance(mol_file, SDFile):
        mol_file.set_molecules(molecules)
        return
    molecules = list(molecules)
    if len(molecules) != 1:
        raise ValueError(
            f"A MOL file contains exactly one molecule, but {len(molecules)} "
            f"were given"
        )
    set_molecule(mol_file, molecules[0])


def _get_record(file, record_index):
    if isinstance(file, (MOLFile, SDRecord)):
        return file
    elif isinstance(file, SDFile):
        # Determine record
        if record_index is None:
            return file.record
        else:
            return file[record_index]
    else:
        raise TypeError(f"Unsupported file type '{type(file).__name__}'")


def _get_or_create_record(file, record_index):
    if isinstance(file, (MOLFile, SDRecord)):
        return file
    elif isinstance(file, SDFile):
        if len(file) == 0:
            # File is empty -> create a new record
            file.append(SDRecord())
        if record_index is None:
            # Choose first record by default
            record_index = 0
        return file[record_index]
    else:
        raise TypeError(f"Unsupported file type '{type(file).__name__}'")
