'''Reading and writing of chemical systems in the fixed-column Protein Data Bank (PDB) format'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from .records import (
    PdbFormatError,
    PdbAtom,
    PdbConect,
    PdbTer,
)
from .decoder import parse_pdb, read_pdb
from .encoder import format_pdb, write_pdb
