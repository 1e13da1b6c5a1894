'''Reading and writing of chemical systems in the Tripos Mol2 format'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from .records import (
    FOUR_STARS,
    Mol2FormatError,
    MolType,
    ChargeType,
    BondStatusBit,
    SubstType,
    SubstStatusBit,
    TriposBondType,
    TriposMolecule,
    TriposAtom,
    TriposBond,
    TriposSubstructure,
)
from .decoder import TriposBlock, iter_tripos_records, parse_mol2, parse_mol2_blocks, read_mol2
from .encoder import TriposRecordMapper, format_mol2, write_mol2
from .renumbering import renumbered_substructures
