# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This module contains all possible errors raised when reading or writing
connection tables.
"""

__name__ = "mdlmol"
__author__ = "The mdlmol contributors"
__all__ = [
    "CtabError",
    "TruncatedHeaderError",
    "TruncatedBlockError",
    "TruncatedPropertyBlockError",
    "MalformedFieldError",
    "DanglingBondReferenceError",
    "SelfBondError",
    "BadMoleculeError",
]

from mdlmol.file import InvalidFileError


class CtabError(InvalidFileError):
    """
    Indicates that a connection table could not be parsed.

    Parameters
    ----------
    message : str
        Description of the problem.
    line_number : int, optional
        The 1-based number of the offending line.
    record_index : int, optional
        The 0-based index of the record in a SD file.

    Attributes
    ----------
    message, line_number, record_index
        The same as the parameters.
        `record_index` is filled in when the error surfaces through
        :class:`SDFile`.
    """

    def __init__(self, message, line_number=None, record_index=None):
        super().__init__(message)
        self.message = message
        self.line_number = line_number
        self.record_index = record_index

    def __str__(self):
        location = []
        if self.record_index is not None:
            location.append(f"record {self.record_index}")
        if self.line_number is not None:
            location.append(f"line {self.line_number}")
        if location:
            return f"{self.message} ({', '.join(location)})"
        return self.message


class TruncatedHeaderError(CtabError):
    """
    Indicates that the header or the counts line is missing.
    """

    pass


class TruncatedBlockError(CtabError):
    """
    Indicates that the input ended before all atom or bond lines
    announced in the counts line were read.
    """

    pass


class TruncatedPropertyBlockError(CtabError):
    """
    Indicates that the input ended before the ``M  END`` line.
    """

    pass


class MalformedFieldError(CtabError):
    """
    Indicates that a numeric field contains non-numeric content.
    """

    pass


class DanglingBondReferenceError(CtabError):
    """
    Indicates that a bond refers to an atom index outside the atom
    block.
    """

    pass


class SelfBondError(CtabError):
    """
    Indicates that a bond connects an atom with itself.
    """

    pass


class BadMoleculeError(Exception):
    """
    Indicates that a molecule cannot be written into a connection table.
    """

    pass
