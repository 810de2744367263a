# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "mdlmol"
__author__ = "The mdlmol contributors"
__all__ = ["SDFile", "SDRecord", "DataBlock"]

import logging
import re
from collections.abc import Mapping, MutableMapping, MutableSequence
from mdlmol.ctab import (
    END_LINE,
    RECORD_DELIMITER,
    header_of,
    read_molecule_from_ctab,
    write_molecule_to_ctab,
)
from mdlmol.error import CtabError
from mdlmol.file import (
    File,
    SerializationError,
    TextFile,
    normalize_line_breaks,
    read_text,
    write_text,
)
from mdlmol.header import N_HEADER, Header
from mdlmol.molecule import Molecule

_LOGGER = logging.getLogger("mdlmol")

# The molecule attribute that holds the data block of the record
DATA_ATTRIBUTE = "sdf/data"


class DataBlock(MutableMapping):
    r"""
    The data fields following the connection table in an SD record.

    Each field maps a name to either a single line of text or a list of
    lines.

    Parameters
    ----------
    data : Mapping, optional
        The fields as name-value pairs.

    Examples
    --------

    >>> data = DataBlock({"PKA": "4.65", "SYNONYMS": ["Acetic acid", "Ethanoic acid"]})
    >>> for line in data.serialize():
    ...     print(line)
    >  <PKA>
    4.65
    <BLANKLINE>
    >  <SYNONYMS>
    Acetic acid
    Ethanoic acid
    <BLANKLINE>
    """

    # The field name is the first text enclosed in angle brackets
    _NAME_REGEX = re.compile(r"<([^<>]+)>")

    def __init__(self, data=None):
        self._data = {}
        if data is not None:
            for name, value in data.items():
                self[name] = value

    @staticmethod
    def deserialize(lines, logger=None, line_offset=0):
        """
        Create a :class:`DataBlock` from the lines after ``M  END``.

        Parameters
        ----------
        lines : list of str
            The lines to be parsed.
        logger : logging.Logger, optional
            Receives warnings about unparsable field headers.
        line_offset : int, optional
            The number of lines preceding `lines` in the file.
            Only used for diagnostics.

        Returns
        -------
        data : DataBlock
            The parsed fields.
            A field header without name is skipped together with its
            value.
        """
        if logger is None:
            logger = _LOGGER
        data = DataBlock()
        name = None
        value_lines = None
        for i, line in enumerate(lines):
            if line.startswith(">"):
                _add_field(data, name, value_lines)
                name = None
                value_lines = None
                name_match = DataBlock._NAME_REGEX.search(line)
                if name_match is None:
                    logger.warning(
                        f"Skipping data field without name "
                        f"in line {line_offset + i + 1}: '{line}'"
                    )
                    continue
                name = name_match.group(1)
                value_lines = []
            elif value_lines is not None:
                value_lines.append(line)
        # Add final field
        _add_field(data, name, value_lines)
        return data

    def serialize(self):
        """
        Convert the fields into lines, sorted by field name.

        Returns
        -------
        lines : list of str
            The lines.
            Each field is terminated by an empty line.
        """
        lines = []
        for name in sorted(self._data):
            value = self._data[name]
            lines.append(f">  <{name}>")
            if isinstance(value, str):
                lines += value.split("\n")
            else:
                lines += value
            lines.append("")
        return lines

    def __getitem__(self, name):
        return self._data[name]

    def __setitem__(self, name, value):
        if not isinstance(name, str):
            raise TypeError(f"Expected str, but got '{type(name).__name__}'")
        if not DataBlock._NAME_REGEX.fullmatch(f"<{name}>"):
            raise ValueError(f"Invalid data field name '{name}'")
        if isinstance(value, str):
            self._data[name] = value
        else:
            self._data[name] = [str(line) for line in value]

    def __delitem__(self, name):
        del self._data[name]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __str__(self):
        return "\n".join(self.serialize())


class SDRecord:
    """
    A record in a SD file.

    Parameters
    ----------
    header : Header, optional
        The header of the record.
        By default, an empty header is created.
    ctab : list of str, optional
        The lines of the connection table, from the *counts* line to
        the ``M  END`` line.
        By default, an empty structure is created.
    data : DataBlock or Mapping, optional
        The data fields of the record.
        By default, the record has no data fields.
    line_offset : int, optional
        The line number in the file preceding this record.
        Only used for error messages.

    Attributes
    ----------
    header, ctab, data, line_offset
        The same as the parameters.

    Examples
    --------

    >>> molecule = Molecule("H2")
    >>> h1 = molecule.add_atom("H", [0, 0, 0])
    >>> h2 = molecule.add_atom("H", [0.74, 0, 0])
    >>> bond = molecule.add_bond(h1, h2)
    >>> record = SDRecord(data={"SOURCE": "test"})
    >>> record.set_molecule(molecule)
    >>> print(record)
    H2
        mdlmol          2D
    <BLANKLINE>
      2  1  0  0  0  0  0  0  0  0999 V2000
        0.0000    0.0000    0.0000 H   0  0  0  0  0  0  0  0  0  0  0  0
        0.7400    0.0000    0.0000 H   0  0  0  0  0  0  0  0  0  0  0  0
      1  2  1  0  0  0  0
    M  END
    >  <SOURCE>
    test
    <BLANKLINE>
    """

    def __init__(self, header=None, ctab=None, data=None, line_offset=0):
        if header is None:
            self._header = Header()
        else:
            self._header = header
        self._ctab = ctab
        self.data = DataBlock() if data is None else data
        self.line_offset = line_offset

    @property
    def header(self):
        if not isinstance(self._header, Header):
            # Lines are only deserialized on demand
            self._header = Header.deserialize(self._header, self.line_offset)
        return self._header

    @header.setter
    def header(self, header):
        self._header = header

    @property
    def ctab(self):
        # CTAB lines cannot be changed directly -> no setter
        return self._ctab

    @property
    def data(self):
        return self._data

    @data.setter
    def data(self, data):
        if isinstance(data, DataBlock):
            self._data = data
        elif isinstance(data, Mapping):
            self._data = DataBlock(data)
        else:
            raise TypeError(
                f"Expected 'DataBlock' or Mapping, but got '{type(data).__name__}'"
            )

    @staticmethod
    def deserialize(lines, line_offset=0, logger=None):
        """
        Create an :class:`SDRecord` from its lines.

        Parameters
        ----------
        lines : list of str
            The lines of the record, without the record delimiter.
        line_offset : int, optional
            The number of lines preceding the record in the file.
        logger : logging.Logger, optional
            Receives warnings about the data block.

        Returns
        -------
        record : SDRecord
            The record.
            The header and connection table are parsed lazily.
        """
        ctab_end = _get_ctab_stop(lines)
        header = lines[:N_HEADER]
        ctab = lines[N_HEADER:ctab_end]
        data = DataBlock.deserialize(lines[ctab_end:], logger, line_offset + ctab_end)
        return SDRecord(header, ctab, data, line_offset)

    def serialize(self):
        """
        Convert this record into lines, without the record delimiter.

        Returns
        -------
        lines : list of str
            The lines.
        """
        if isinstance(self._header, Header):
            header_lines = self._header.serialize()
        else:
            header_lines = list(self._header)

        if self._ctab is None:
            ctab_lines = write_molecule_to_ctab(Molecule())
        else:
            ctab_lines = list(self._ctab)

        return header_lines + ctab_lines + self._data.serialize()

    def get_molecule(self, mol_class=Molecule, isotope_abundance=None, logger=None):
        """
        Parse the structural data in the SD record.

        Parameters
        ----------
        mol_class : type, optional
            The molecule class to instantiate.
            Use :class:`Pattern` to obtain a query molecule.
        isotope_abundance : callable, optional
            A function mapping an element symbol to a dictionary of
            mass numbers and their relative abundance.
        logger : logging.Logger, optional
            Receives diagnostics for recoverable problems.

        Returns
        -------
        molecule : Molecule
            The molecule.
            The data fields of the record are available as dictionary
            in the ``sdf/data`` attribute.
        """
        ctab_lines = [] if self._ctab is None else self._ctab
        molecule = read_molecule_from_ctab(
            ctab_lines,
            self.header,
            mol_class,
            isotope_abundance,
            logger,
            self.line_offset + N_HEADER,
        )
        molecule.attributes[DATA_ATTRIBUTE] = {
            name: value if isinstance(value, str) else list(value)
            for name, value in self._data.items()
        }
        return molecule

    def set_molecule(self, molecule):
        """
        Set the structural data in the SD record.

        If the molecule has a ``sdf/data`` attribute, it replaces the
        data fields of this record.

        Parameters
        ----------
        molecule : Molecule
            The molecule to be saved into this record.
        """
        self._header = header_of(molecule)
        self._ctab = write_molecule_to_ctab(molecule)
        if DATA_ATTRIBUTE in molecule.attributes:
            self.data = molecule.attributes[DATA_ATTRIBUTE]

    def __eq__(self, other):
        if not isinstance(other, type(self)):
            return False
        if not self.header == other.header:
            return False
        if not self.serialize() == other.serialize():
            return False
        return True

    def __str__(self):
        return "\n".join(self.serialize())


class SDFile(File, MutableSequence):
    """
    This class represents an SD file for storing small molecule
    structures.

    The file is a sequence of :class:`SDRecord` objects, each one
    terminated by a ``$$$$`` line.
    The records can be accessed and modified like a list.

    Parameters
    ----------
    records : iterable of SDRecord, optional
        The initial records of the file.

    Attributes
    ----------
    record : SDRecord
        The sole record of the file.
        If the file contains multiple records, an exception is raised.

    Examples
    --------

    >>> text = (
    ...     "water\\n\\n\\n"
    ...     "  1  0  0  0  0  0  0  0  0  0999 V2000\\n"
    ...     "    0.0000    0.0000    0.0000 O   0  0  0  0  0  0  0  0  0  0  0  0\\n"
    ...     "M  END\\n"
    ...     ">  <BOILING_POINT>\\n"
    ...     "100\\n"
    ...     "\\n"
    ...     "$$$$\\n"
    ... )
    >>> file = SDFile.deserialize(text)
    >>> molecule = file.record.get_molecule()
    >>> print(molecule.name, molecule.atom(1).symbol)
    water O
    >>> print(file.record.data["BOILING_POINT"])
    100
    """

    def __init__(self, records=None):
        self._records = []
        if records is not None:
            for record in records:
                self.append(record)

    @property
    def lines(self):
        return self.serialize().splitlines()

    @property
    def record(self):
        if len(self) == 0:
            raise ValueError("There are no records in the file")
        if len(self) > 1:
            raise ValueError("There are multiple records in the file")
        return self[0]

    @staticmethod
    def deserialize(text, logger=None):
        """
        Create an :class:`SDFile` by deserializing the given text content.

        Parameters
        ----------
        text : str
            The content to be deserialized.
        logger : logging.Logger, optional
            Receives warnings about missing delimiters and data fields.

        Returns
        -------
        file_object : SDFile
            The parsed file.
        """
        if logger is None:
            logger = _LOGGER
        lines = normalize_line_breaks(text).splitlines()
        record_ends = [i for i, line in enumerate(lines) if _is_delimiter(line)]
        # The first record starts at the first line,
        # records in the middle start directly after the delimiter
        record_starts = [0] + [end + 1 for end in record_ends]
        record_ends.append(len(lines))

        records = []
        for start, end in zip(record_starts, record_ends):
            record_lines = lines[start:end]
            if end == len(lines):
                if all(line.strip() == "" for line in record_lines):
                    # Nothing after the final delimiter
                    continue
                logger.warning(
                    "Final record delimiter missing, "
                    "maybe this is a MOL file instead of a SD file"
                )
            records.append(SDRecord.deserialize(record_lines, start, logger))
        return SDFile(records)

    def serialize(self):
        """
        Convert this object into text content.

        Returns
        -------
        content : str
            The serialized content.
        """
        lines = []
        for i, record in enumerate(self._records):
            try:
                lines += record.serialize()
            except Exception:
                raise SerializationError(f"Failed to serialize record {i}")
            lines.append(RECORD_DELIMITER)
        if len(lines) == 0:
            return ""
        return "\n".join(lines) + "\n"

    @classmethod
    def read(cls, file, logger=None):
        """
        Read a SD file.

        Parameters
        ----------
        file : file-like object or str
            The file to be read.
            Alternatively a file path can be supplied.
        logger : logging.Logger, optional
            Receives warnings about missing delimiters and data fields.

        Returns
        -------
        file_object : SDFile
            The parsed file.
        """
        return SDFile.deserialize(read_text(file), logger)

    @staticmethod
    def read_iter(file, logger=None):
        """
        Create an iterator over each record of the given SD file.

        In contrast to :meth:`read()`, the file is not loaded into
        memory at once.

        Parameters
        ----------
        file : file-like object or str
            The file to be read.
            Alternatively a file path can be supplied.
        logger : logging.Logger, optional
            Receives warnings about missing delimiters and data fields.

        Yields
        ------
        record : SDRecord
            The current record in the file.
        """
        if logger is None:
            logger = _LOGGER
        record_lines = []
        start = 0
        for i, line in enumerate(TextFile.read_iter(file)):
            if _is_delimiter(line):
                yield SDRecord.deserialize(record_lines, start, logger)
                record_lines = []
                start = i + 1
            else:
                record_lines.append(line)
        if any(line.strip() != "" for line in record_lines):
            logger.warning(
                "Final record delimiter missing, "
                "maybe this is a MOL file instead of a SD file"
            )
            yield SDRecord.deserialize(record_lines, start, logger)

    def write(self, file):
        """
        Write the contents of this object into a SD file.

        Parameters
        ----------
        file : file-like object or str
            The file to be written to.
            Alternatively a file path can be supplied.
        """
        write_text(file, self.serialize())

    def get_molecules(
        self,
        mol_class=Molecule,
        isotope_abundance=None,
        logger=None,
        best_effort=False,
    ):
        """
        Parse the molecules of all records.

        Parameters
        ----------
        mol_class, isotope_abundance, logger
            See :meth:`SDRecord.get_molecule()`.
        best_effort : bool, optional
            If true, records that cannot be parsed are skipped and
            reported to the `logger`.
            By default, the first such record raises an exception.

        Returns
        -------
        molecules : list of Molecule
            The molecules in the order of the records.

        Raises
        ------
        CtabError
            If a record cannot be parsed and `best_effort` is false.
            The :attr:`CtabError.record_index` points to the record.
        """
        if logger is None:
            logger = _LOGGER
        molecules = []
        for i, record in enumerate(self._records):
            try:
                molecules.append(
                    record.get_molecule(mol_class, isotope_abundance, logger)
                )
            except CtabError as e:
                e.record_index = i
                if not best_effort:
                    raise
                logger.error(f"Skipping unreadable record: {e}")
        return molecules

    def set_molecules(self, molecules):
        """
        Replace all records with the given molecules.

        Parameters
        ----------
        molecules : iterable of Molecule
            The molecules, one record is created for each of them.
        """
        records = []
        for molecule in molecules:
            record = SDRecord()
            record.set_molecule(molecule)
            records.append(record)
        self._records = records

    def __getitem__(self, index):
        return self._records[index]

    def __setitem__(self, index, record):
        if not isinstance(record, SDRecord):
            raise TypeError(f"Expected 'SDRecord', but got '{type(record).__name__}'")
        self._records[index] = record

    def __delitem__(self, index):
        del self._records[index]

    def __len__(self):
        return len(self._records)

    def insert(self, index, record):
        if not isinstance(record, SDRecord):
            raise TypeError(f"Expected 'SDRecord', but got '{type(record).__name__}'")
        self._records.insert(index, record)

    def __eq__(self, other):
        if not isinstance(other, type(self)):
            return False
        if len(self) != len(other):
            return False
        for record, other_record in zip(self, other):
            if record != other_record:
                return False
        return True

    def __str__(self):
        return self.serialize()


def _is_delimiter(line):
    return line.rstrip() == RECORD_DELIMITER


def _add_field(data, name, value_lines):
    if name is None:
        return
    # Remove the empty line terminating the value
    if value_lines and value_lines[-1].strip() == "":
        value_lines.pop()
    if value_lines and all(line.strip() == "" for line in value_lines):
        # A single empty value line
        data[name] = ""
        return
    while value_lines and value_lines[-1].strip() == "":
        value_lines.pop()
    if len(value_lines) == 1:
        data[name] = value_lines[0]
    else:
        data[name] = value_lines


def _get_ctab_stop(lines):
    for i in range(N_HEADER, len(lines)):
        if lines[i].startswith(END_LINE):
            return i + 1
    return len(lines)
