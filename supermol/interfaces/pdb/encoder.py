'''Writing of Supermolecules to PDB files'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import logging
LOGGER = logging.getLogger(__name__)

from typing import Union
from pathlib import Path

from .records import (
    PdbFormatError,
    PdbAtom,
    PdbConect,
    PdbTer,
)
from .. import FilePathLike
from ...species.atom import Atom
from ...species.supermolecule import Supermolecule
from ...species.fragmented import FragmentedSupermolecule
from ...utils.containers import Referential


def pdb_atoms_for(supermol : Union[Supermolecule, FragmentedSupermolecule]) -> dict[Referential[Atom], PdbAtom]:
    '''
    Obtain a PdbAtom for each atom of a Supermolecule

    PdbAtoms are passed through unchanged; any other atoms are converted, and
    numbered sequentially after the largest serial number already present
    '''
    atoms = supermol.atoms
    next_serial = 1 + max((atom.serial for atom in atoms if isinstance(atom, PdbAtom)), default=0)

    pdb_atoms : dict[Referential[Atom], PdbAtom] = {}
    for atom in atoms:
        if isinstance(atom, PdbAtom):
            pdb_atoms[Referential(atom)] = atom
        else:
            pdb_atoms[Referential(atom)] = PdbAtom.from_atom(atom, serial=next_serial)
            next_serial += 1

    return pdb_atoms

def format_pdb(supermol : Union[Supermolecule, FragmentedSupermolecule]) -> str:
    '''
    Render a Supermolecule as PDB text

    Atom records are ordered by serial number; for a FragmentedSupermolecule, each
    fragment is written in turn and terminated by a TER record. Bonds are written as
    CONECT records, listed from both ends of each bond (bond types are not preserved)
    '''
    pdb_atoms = pdb_atoms_for(supermol)
    serials = [atom.serial for atom in pdb_atoms.values()]
    if len(set(serials)) != len(serials):
        raise PdbFormatError('Atom serial numbers are not unique')

    lines : list[str] = []
    if isinstance(supermol, FragmentedSupermolecule):
        for fragment in supermol.fragments:
            fragment_atoms = sorted((pdb_atoms[Referential(atom)] for atom in fragment.atoms), key=lambda atom : atom.serial)
            lines.extend(atom.to_line() for atom in fragment_atoms)

            last_atom = fragment_atoms[-1]
            lines.append(PdbTer(res_name=last_atom.res_name, chain_id=last_atom.chain_id, res_seq=last_atom.res_seq, i_code=last_atom.i_code).to_line())
    else:
        lines.extend(atom.to_line() for atom in sorted(pdb_atoms.values(), key=lambda atom : atom.serial))

    bonded_serials : dict[int, list[int]] = {}
    for bond in supermol.bonds():
        atom1, atom2 = (pdb_atoms[Referential(atom)] for atom in bond.to_atom_pair())
        bonded_serials.setdefault(atom1.serial, []).append(atom2.serial)
        bonded_serials.setdefault(atom2.serial, []).append(atom1.serial)

    for serial in sorted(bonded_serials):
        partners = sorted(bonded_serials[serial])
        for i in range(0, len(partners), PdbConect.MAX_BONDED_SERIALS): # continuation records for atoms with many bonds
            lines.append(PdbConect(serial, tuple(partners[i:i + PdbConect.MAX_BONDED_SERIALS])).to_line())
    lines.append(f'{"END":<6}')

    return '\n'.join(lines) + '\n'

def write_pdb(supermol : Union[Supermolecule, FragmentedSupermolecule], filepath : FilePathLike) -> Path:
    '''Write a Supermolecule to a PDB file, returning the path written to'''
    pdb_text = format_pdb(supermol)

    filepath = Path(filepath)
    with open(filepath, 'w') as pdb_file:
        pdb_file.write(pdb_text)
    LOGGER.info(f'Wrote {supermol.num_atoms} atoms to "{filepath}"')

    return filepath
