# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This module contains convenience functions for loading molecules from
MOL and SD files, based on the file extension or content.
"""

__name__ = "mdlmol"
__author__ = "The mdlmol contributors"
__all__ = ["guess_format", "is_sdf_content", "load_molecules", "save_molecules"]

import os.path
from mdlmol.convert import get_molecules, set_molecules
from mdlmol.ctab import RECORD_DELIMITER
from mdlmol.file import read_text
from mdlmol.mol import MOLFile
from mdlmol.sdf import SDFile


def is_sdf_content(text):
    """
    Check whether the text is in SDF format, i.e. whether it contains a
    ``$$$$`` record delimiter line.

    Parameters
    ----------
    text : str
        The file content.

    Returns
    -------
    is_sdf : bool
        True, if the text contains a record delimiter.
    """
    return any(line.rstrip() == RECORD_DELIMITER for line in text.splitlines())


def guess_format(file_path, text=None):
    """
    Determine the format of a file.

    Parameters
    ----------
    file_path : str
        The path of the file.
        The extension is checked case-insensitively.
    text : str, optional
        The file content.
        Checked if the extension is unknown.

    Returns
    -------
    format : {"mol", "sdf"} or None
        The format, or ``None`` if it cannot be determined.
    """
    _, suffix = os.path.splitext(file_path)
    match suffix.lower():
        case ".mol":
            return "mol"
        case ".sdf" | ".sd":
            return "sdf"
        case _:
            if text is not None and is_sdf_content(text):
                return "sdf"
            return None


def load_molecules(file_path, **kwargs):
    """
    Load the molecules from a MOL or SD file without the need to
    manually instantiate a :class:`File` object.

    Parameters
    ----------
    file_path : str
        The path to the file.
        For an unknown file extension, the file is read as SD file, if
        it contains a record delimiter.
    **kwargs
        Additional parameters will be passed to :func:`get_molecules()`.

    Returns
    -------
    molecules : list of Molecule
        The molecules in the file.

    Raises
    ------
    ValueError
        If the file format cannot be determined.
    """
    file_format = guess_format(file_path)
    if file_format is None:
        text = read_text(file_path)
        file_format = guess_format(file_path, text)
        if file_format == "sdf":
            return get_molecules(SDFile.deserialize(text), **kwargs)
    match file_format:
        case "mol":
            file = MOLFile.read(file_path)
        case "sdf":
            file = SDFile.read(file_path)
        case _:
            _, suffix = os.path.splitext(file_path)
            raise ValueError(f"Unknown file format '{suffix}'")
    return get_molecules(file, **kwargs)


def save_molecules(file_path, molecules):
    """
    Save molecules into a MOL or SD file without the need to manually
    instantiate a :class:`File` object.

    Parameters
    ----------
    file_path : str
        The path to the file.
        The format is determined by the file extension.
    molecules : iterable of Molecule
        The molecules to be saved.
        A MOL file can only take a single molecule.

    Raises
    ------
    ValueError
        If the file format is unknown.
    """
    match guess_format(file_path):
        case "mol":
            file = MOLFile()
        case "sdf":
            file = SDFile()
        case _:
            _, suffix = os.path.splitext(file_path)
            raise ValueError(f"Unknown file format '{suffix}'")
    set_molecules(file, molecules)
    file.write(file_path)
