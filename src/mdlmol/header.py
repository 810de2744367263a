# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "mdlmol"
__author__ = "The mdlmol contributors"
__all__ = ["Header"]

import datetime
from dataclasses import dataclass
from mdlmol.error import TruncatedHeaderError

_DATE_FORMAT = "%m%d%y%H%M"
# Number of header lines
N_HEADER = 3
DEFAULT_PROGRAM = "mdlmol"


@dataclass
class Header:
    """
    The three header lines of a connection table.

    Parameters
    ----------
    mol_name : str, optional
        The name of the molecule.
    line2 : str, optional
        The free-form program line.
        By convention it contains the user's initials, the program
        name, a time stamp and the dimensionality at fixed columns.
    comments : str, optional
        Additional comments.

    Attributes
    ----------
    mol_name, line2, comments
        Same as the parameters.
    program, dimensions, time
        Fields of :attr:`line2`.

    Examples
    --------

    >>> header = Header.create("benzene", dimensions="2D")
    >>> print(header.line2)
        mdlmol          2D
    >>> print(header.dimensions)
    2D
    """

    mol_name: ... = ""
    line2: ... = ""
    comments: ... = ""

    @staticmethod
    def create(
        mol_name="",
        initials="",
        program=DEFAULT_PROGRAM,
        time=None,
        dimensions="",
        comments="",
    ):
        """
        Create a header with a conventionally formatted program line.

        Values are padded or truncated to the width of their column.
        """
        time_str = "" if time is None else time.strftime(_DATE_FORMAT)
        # Fixed columns -> minimum and maximum length is the same
        line2 = (
            f"{initials:>2.2}"
            f"{program:>8.8}"
            f"{time_str:>10.10}"
            f"{dimensions:>2.2}"
        )
        return Header(mol_name, line2, comments)

    @property
    def program(self):
        return self.line2[2:10].strip()

    @property
    def dimensions(self):
        return self.line2[20:22].strip()

    @property
    def time(self):
        time_string = self.line2[10:20]
        if time_string.strip() == "":
            return None
        try:
            return datetime.datetime.strptime(time_string, _DATE_FORMAT)
        except ValueError:
            return None

    @staticmethod
    def deserialize(lines, line_offset=0):
        """
        Parse the header from the first three lines of a connection
        table.

        Parameters
        ----------
        lines : list of str
            The lines, beginning with the molecule name.
        line_offset : int, optional
            The number of lines preceding `lines` in the file, used for
            error messages.

        Returns
        -------
        header : Header
            The parsed header.
        """
        if len(lines) < N_HEADER:
            raise TruncatedHeaderError(
                f"Expected {N_HEADER} header lines, but got {len(lines)}",
                line_offset + len(lines) + 1,
            )
        return Header(lines[0].rstrip("\r\n"), lines[1], lines[2])

    def serialize(self):
        """
        Convert the header into its three lines.

        Returns
        -------
        lines : list of str
            The header lines.
        """
        if len(self.mol_name) > 80:
            raise ValueError("Molecule name must not exceed 80 characters")
        return [str(self.mol_name), str(self.line2), str(self.comments)]

    def __str__(self):
        return "\n".join(self.serialize())
