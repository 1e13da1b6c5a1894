'''Reading of fragmented Supermolecules from PDB files'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import logging
LOGGER = logging.getLogger(__name__)

from typing import Optional
from pathlib import Path

from .records import (
    ATOM_RECORD_NAMES,
    RECORD_NAME_COLS,
    PdbFormatError,
    PdbAtom,
    PdbConect,
)
from .. import FilePathLike
from ...species.base import Fragment
from ...species.bond import Bond
from ...species.supermolecule import Supermolecule
from ...species.fragmented import FragmentedSupermolecule

CONECT_BOND_TYPE : str = '1' # CONECT records carry no bond order


def parse_pdb(pdb_text : str, name : Optional[str]=None) -> FragmentedSupermolecule:
    '''
    Parse PDB text into a FragmentedSupermolecule

    Atoms (from ATOM and HETATM records) are grouped into one fragment per
    TER-delimited block; bonds listed in CONECT records are aggregated into molecules.
    Only the atoms of the first MODEL of multi-model files are read; CONECT records
    are collected until END, since they follow the last ENDMDL in multi-model files
    '''
    atoms_by_serial : dict[int, PdbAtom] = {}
    fragment_groups : list[list[PdbAtom]] = [[]]
    conect_records : list[PdbConect] = []
    skipped_record_names : set[str] = set()
    reading_atoms : bool = True # cleared once the first model ends

    for line_num, line in enumerate(pdb_text.splitlines(), start=1):
        record_name = line[RECORD_NAME_COLS].strip()
        try:
            if record_name in ATOM_RECORD_NAMES:
                if not reading_atoms:
                    continue
                atom = PdbAtom.from_line(line)
                if atom.serial in atoms_by_serial:
                    raise PdbFormatError(f'Atom serial number is not unique: {atom.serial}')
                atoms_by_serial[atom.serial] = atom
                fragment_groups[-1].append(atom)
            elif record_name == 'TER':
                if reading_atoms:
                    fragment_groups.append([])
            elif record_name == 'CONECT':
                conect_records.append(PdbConect.from_line(line))
            elif record_name == 'ENDMDL':
                reading_atoms = False
            elif record_name == 'END':
                break
            elif record_name and (record_name not in skipped_record_names):
                skipped_record_names.add(record_name)
                LOGGER.debug(f'Skipping unsupported PDB record type "{record_name}" (first seen on line {line_num})')
        except PdbFormatError as err:
            raise PdbFormatError(f'Line {line_num}: {err}') from err

    fragment_groups = [group for group in fragment_groups if group] # consecutive or trailing TERs leave empty groups
    if not fragment_groups:
        raise PdbFormatError('PDB text contains no ATOM or HETATM records')

    bonds : list[Bond] = []
    bonded_pairs : set[frozenset[int]] = set()
    for conect in conect_records:
        for bonded_serial in conect.bonded_serials:
            serial_pair = frozenset((conect.serial, bonded_serial))
            if serial_pair in bonded_pairs: # each bond is usually listed from both ends
                continue
            bonded_pairs.add(serial_pair)

            try:
                bonds.append(Bond(atoms_by_serial[conect.serial], atoms_by_serial[bonded_serial], CONECT_BOND_TYPE))
            except KeyError as err:
                raise PdbFormatError(f'CONECT record for atom {conect.serial} references nonexistent atom serial {err.args[0]}')

    supermol = Supermolecule.from_atoms_and_bonds(atoms_by_serial.values(), bonds, name=name)
    return FragmentedSupermolecule(
        supermol,
        (Fragment(group) for group in fragment_groups),
        name=name,
    )

def read_pdb(filepath : FilePathLike, name : Optional[str]=None) -> FragmentedSupermolecule:
    '''Read a FragmentedSupermolecule from a PDB file'''
    filepath = Path(filepath)
    with open(filepath, 'r') as pdb_file:
        fragmented = parse_pdb(pdb_file.read(), name=name)
    LOGGER.info(f'Read {fragmented.num_atoms} atoms in {fragmented.num_fragments} fragment(s) from "{filepath}"')

    return fragmented
