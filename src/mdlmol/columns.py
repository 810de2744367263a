# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
Splitting of fixed-column lines into their fields.
"""

__name__ = "mdlmol"
__author__ = "The mdlmol contributors"
__all__ = [
    "Column",
    "split_columns",
    "parse_int",
    "parse_float",
    "COUNTS_LAYOUT",
    "ATOM_LAYOUT",
    "BOND_LAYOUT",
    "ALS_LAYOUT",
]

from dataclasses import dataclass
from mdlmol.error import MalformedFieldError


@dataclass(frozen=True)
class Column:
    """
    A field of fixed width in a line.

    Parameters
    ----------
    width : int
        The number of characters of the field.
    name : str, optional
        Name of the field, used in error messages.
    strip : bool, optional
        If true, leading and trailing whitespace is removed from the
        field.
    gap : bool, optional
        If true, the characters are consumed, but the field is not
        part of the output of :func:`split_columns()`.
    """

    width: ...
    name: ... = ""
    strip: ... = True
    gap: ... = False


def split_columns(line, columns):
    """
    Split a line into fixed-width fields.

    Parameters
    ----------
    line : str
        The line to be split.
        A terminal line break is ignored.
    columns : iterable of Column
        The layout of the line.

    Returns
    -------
    fields : list of str
        One string for each column that is not a gap.
        Columns beyond the end of the line are returned as empty
        strings, as real-world files often omit trailing columns.

    Examples
    --------

    >>> split_columns("  2  1  0", COUNTS_LAYOUT)
    ['2', '1', '0', '', '']
    """
    line = line.rstrip("\r\n")
    fields = []
    start = 0
    for column in columns:
        stop = start + column.width
        if not column.gap:
            field = line[start:stop]
            fields.append(field.strip() if column.strip else field)
        start = stop
    return fields


def parse_int(field, name="", line_number=None):
    """
    Interpret a field as integer.

    Parameters
    ----------
    field : str
        The field content.
    name : str, optional
        The name of the field, used in the error message.
    line_number : int, optional
        The line the field originates from, used in the error message.

    Returns
    -------
    value : int
        The parsed value.
        A blank field is interpreted as 0.

    Raises
    ------
    MalformedFieldError
        If the field contains non-numeric content.
    """
    field = field.strip()
    if field == "":
        return 0
    try:
        return int(field)
    except ValueError:
        raise MalformedFieldError(
            f"Expected integer for {_describe(name)}, but got '{field}'",
            line_number,
        )


def parse_float(field, name="", line_number=None):
    """
    Interpret a field as floating point number.

    Same as :func:`parse_int()`, but a blank field is interpreted as
    0.0.
    """
    field = field.strip()
    if field == "":
        return 0.0
    try:
        return float(field)
    except ValueError:
        raise MalformedFieldError(
            f"Expected number for {_describe(name)}, but got '{field}'",
            line_number,
        )


def _describe(name):
    return f"'{name}'" if name else "field"


COUNTS_LAYOUT = (
    Column(3, "atom count"),
    Column(3, "bond count"),
    Column(3, "atom list count"),
    Column(3, "obsolete"),
    Column(3, "chiral flag"),
)

ATOM_LAYOUT = (
    Column(10, "x"),
    Column(10, "y"),
    Column(10, "z"),
    Column(1, gap=True),
    Column(3, "atom symbol"),
    Column(2, "mass difference"),
    Column(3, "charge"),
)

BOND_LAYOUT = (
    Column(3, "first atom"),
    Column(3, "second atom"),
    Column(3, "bond type"),
    Column(3, "bond stereo"),
    Column(3, gap=True),
    Column(3, "bond topology"),
    Column(3, "reacting center status"),
)

# 'M  ALS aaannn e 11112222...'
ALS_LAYOUT = (
    Column(7, gap=True),
    Column(3, "atom index"),
    Column(3, "entry count"),
    Column(1, gap=True),
    Column(1, "exclusion flag"),
    Column(1, gap=True),
)
ALS_SYMBOL_START = 16
ALS_SYMBOL_WIDTH = 4
