# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
The MOL format is used to depict atom positions and bonds for small
molecules.
This package is used for reading and writing a :class:`Molecule` in the
``V2000`` variant of this format.
Additionally, the SDF format, which is a sequence of MOL records
accompanied by data fields, is supported.

Molecules read as :class:`Pattern` carry query predicates derived from
the query features of the format (atom lists, query bond types and
ring/chain bond topology).
"""

__version__ = "0.1.0"
__name__ = "mdlmol"
__author__ = "The mdlmol contributors"

import logging

from .file import *
from .error import *
from .columns import *
from .query import *
from .molecule import *
from .header import *
from .ctab import *
from .mol import *
from .sdf import *
from .convert import *
from .general import *

# Diagnostics are silent unless the application configures logging
logging.getLogger("mdlmol").addHandler(logging.NullHandler())
