# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

__name__ = "mdlmol"
__author__ = "The mdlmol contributors"
__all__ = [
    "File",
    "TextFile",
    "InvalidFileError",
    "SerializationError",
]

import abc
import io
import re
from os import PathLike

# Old Mac and Windows line breaks
_LINE_BREAK_REGEX = re.compile(r"\r\n?")


class File(metaclass=abc.ABCMeta):
    """
    Base class for all file classes.
    The constructor creates an empty file, that can be filled with data
    using the class specific setter methods.
    Conversely, the class method :func:`read()` reads a file from disk
    (or a file-like object from other sources).
    In order to write the instance content into a file the
    :func:`write()` method is used.
    """

    @classmethod
    @abc.abstractmethod
    def read(cls, file):
        """
        Parse a file (or file-like object).

        Parameters
        ----------
        file : file-like object or str
            The file to be read.
            Alternatively a file path can be supplied.

        Returns
        -------
        file : File
            An instance from the respective :class:`File` subclass
            representing the parsed file.
        """
        pass

    @abc.abstractmethod
    def write(self, file):
        """
        Write the contents of this :class:`File` object into a file.

        Parameters
        ----------
        file : file-like object or str
            The file to be written to.
            Alternatively a file path can be supplied.
        """
        pass


class TextFile(File, metaclass=abc.ABCMeta):
    """
    Base class for all line based text files.
    When reading a file, the text content is saved as list of strings,
    one for each line.
    When writing a file, this list is written into the file.

    Attributes
    ----------
    lines : list
        List of string representing the lines in the text file.
        PROTECTED: Do not modify from outside.
    """

    def __init__(self):
        super().__init__()
        self.lines = []

    @classmethod
    def read(cls, file, *args, **kwargs):
        text = read_text(file)
        file_object = cls(*args, **kwargs)
        file_object.lines = text.splitlines()
        return file_object

    @staticmethod
    def read_iter(file):
        """
        Create an iterator over each line of the given text file.

        Parameters
        ----------
        file : file-like object or str
            The file to be read.
            Alternatively a file path can be supplied.

        Yields
        ------
        line : str
            The current line in the file, without the line break.
        """
        # File name
        if is_open_compatible(file):
            with open(file, "r") as f:
                for line in f:
                    yield line.rstrip("\r\n")
        # File object
        else:
            if not is_text(file):
                raise TypeError("A file opened in 'text' mode is required")
            for line in file:
                yield line.rstrip("\r\n")

    def write(self, file):
        """
        Write the contents of this object into a file
        (or file-like object).

        Parameters
        ----------
        file : file-like object or str
            The file to be written to.
            Alternatively a file path can be supplied.
        """
        write_text(file, "\n".join(self.lines) + "\n")

    def __str__(self):
        return "\n".join(self.lines)


class InvalidFileError(Exception):
    """
    Indicates that the file is not suitable for the requested action,
    either because the file does not contain the required data or
    because the file is malformed.
    """

    pass


class SerializationError(Exception):
    pass


def normalize_line_breaks(text):
    """
    Replace ``\\r\\n`` and ``\\r`` line breaks with ``\\n``.
    """
    return _LINE_BREAK_REGEX.sub("\n", text)


def read_text(file):
    # File name
    if is_open_compatible(file):
        with open(file, "r", newline="") as f:
            text = f.read()
    # File object
    else:
        if not is_text(file):
            raise TypeError("A file opened in 'text' mode is required")
        text = file.read()
    return normalize_line_breaks(text)


def write_text(file, text):
    if is_open_compatible(file):
        with open(file, "w") as f:
            f.write(text)
    else:
        if not is_text(file):
            raise TypeError("A file opened in 'text' mode is required")
        file.write(text)


def is_text(file):
    if isinstance(file, io.TextIOBase):
        return True
    # for file wrappers, e.g. 'TemporaryFile'
    return hasattr(file, "file") and isinstance(file.file, io.TextIOBase)


def is_open_compatible(file):
    return isinstance(file, (str, bytes, PathLike))
