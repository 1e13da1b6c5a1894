'''Writing of Supermolecules to Tripos Mol2 files'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import logging
LOGGER = logging.getLogger(__name__)

import uuid
from typing import Iterable, Optional, Union
from pathlib import Path

from .records import (
    Mol2FormatError,
    TriposRecordType,
    MolType,
    ChargeType,
    TriposBondType,
    TriposMolecule,
    TriposAtom,
    TriposBond,
    TriposSubstructure,
)
from .. import FilePathLike
from ...species.atom import Atom
from ...species.bond import Bond
from ...species.supermolecule import Supermolecule
from ...species.fragmented import FragmentedSupermolecule
from ...utils.containers import Referential

DEFAULT_MOL_TYPE : MolType = MolType.SMALL


class TriposRecordMapper:
    '''
    Hooks for adjusting the records written for each Supermolecule

    Each hook receives the Supermolecule being written and the record generated
    by default, and returns the record to write in its place. The base class
    writes all records unchanged; subclass and override to customize
    '''
    def tripos_bond_type_of(self, supermol : Supermolecule, bond : Bond) -> TriposBondType:
        return TriposBondType.from_label(bond.bond_type)

    def on_molecule(self, supermol : Supermolecule, record : TriposMolecule) -> TriposMolecule:
        return record

    def on_bond(self, supermol : Supermolecule, bond : Bond, record : TriposBond) -> TriposBond:
        return record

    def on_substructures(self, supermol : Supermolecule, records : list[TriposSubstructure]) -> list[TriposSubstructure]:
        return records


def unique_mol_name(taken_names : set[str]) -> str:
    '''Generate a Tripos molecule name which clashes with none of the names given'''
    while (mol_name := f'mol_{uuid.uuid4().hex}') in taken_names:
        continue
    return mol_name

def tripos_atoms_for(supermol : Union[Supermolecule, FragmentedSupermolecule]) -> dict[Referential[Atom], TriposAtom]:
    '''
    Obtain a TriposAtom for each atom of a Supermolecule

    TriposAtoms are passed through unchanged; any other atoms are converted, and
    numbered sequentially after the largest atom ID already present
    '''
    atoms = supermol.atoms
    next_atom_id = 1 + max((atom.atom_id for atom in atoms if isinstance(atom, TriposAtom)), default=0)

    tripos_atoms : dict[Referential[Atom], TriposAtom] = {}
    for atom in atoms:
        if isinstance(atom, TriposAtom):
            tripos_atoms[Referential(atom)] = atom
        else:
            tripos_atoms[Referential(atom)] = TriposAtom.from_atom(atom, atom_id=next_atom_id)
            next_atom_id += 1

    return tripos_atoms

def substructures_from_atoms(tripos_atoms : Iterable[TriposAtom]) -> list[TriposSubstructure]:
    '''
    Generate one SUBSTRUCTURE record per distinct substructure ID among the given atoms, ordered by ID

    The root atom of each substructure is its atom with the smallest atom ID, which
    also supplies the substructure name; atoms without a substructure ID are ignored
    '''
    roots : dict[int, TriposAtom] = {}
    for atom in tripos_atoms:
        if atom.subst_id is None:
            continue
        if (atom.subst_id not in roots) or (atom.atom_id < roots[atom.subst_id].atom_id):
            roots[atom.subst_id] = atom

    return [
        TriposSubstructure(subst_id=subst_id, subst_name=roots[subst_id].subst_name, root_atom=roots[subst_id].atom_id)
            for subst_id in sorted(roots)
    ]

def format_mol2_molecule(
        supermol : Union[Supermolecule, FragmentedSupermolecule],
        mol_name : str,
        mapper : Optional[TriposRecordMapper]=None,
    ) -> str:
    '''Render a single Supermolecule as the MOLECULE, ATOM, BOND, and (if any) SUBSTRUCTURE sections of a Mol2 file'''
    if mapper is None:
        mapper = TriposRecordMapper()

    tripos_atoms = tripos_atoms_for(supermol)
    atom_ids = [atom.atom_id for atom in tripos_atoms.values()]
    if len(set(atom_ids)) != len(atom_ids):
        raise Mol2FormatError(f'Tripos atom IDs are not unique for Tripos molecule "{mol_name}"')

    bond_records : list[TriposBond] = []
    for island in supermol.islands: # DEVNOTE: walked per-island, so that bonds of the same molecule are contiguous
        for bond in island.bonds():
            origin_atom, target_atom = bond.to_atom_pair()
            bond_record = TriposBond(
                bond_id=len(bond_records) + 1,
                origin_atom_id=tripos_atoms[Referential(origin_atom)].atom_id,
                target_atom_id=tripos_atoms[Referential(target_atom)].atom_id,
                bond_type=mapper.tripos_bond_type_of(supermol, bond),
            )
            bond_records.append(mapper.on_bond(supermol, bond, bond_record))

    subst_records = mapper.on_substructures(supermol, substructures_from_atoms(tripos_atoms.values()))
    has_charges = any(atom.charge is not None for atom in tripos_atoms.values()) # atoms with unknown charges are written with the omission placeholder
    molecule_record = mapper.on_molecule(
        supermol,
        TriposMolecule(
            mol_name=mol_name,
            num_atoms=len(tripos_atoms),
            num_bonds=len(bond_records),
            num_subst=len(subst_records) if subst_records else None,
            mol_type=DEFAULT_MOL_TYPE,
            charge_type=ChargeType.USER_CHARGES if has_charges else ChargeType.NO_CHARGES,
        ),
    )

    lines : list[str] = [TriposRecordType.MOLECULE.rti, *molecule_record.to_data_lines()]
    lines.append(TriposRecordType.ATOM.rti)
    lines.extend(atom.to_data_line() for atom in sorted(tripos_atoms.values(), key=lambda atom : atom.atom_id))
    lines.append(TriposRecordType.BOND.rti)
    lines.extend(bond_record.to_data_line() for bond_record in bond_records)
    if subst_records:
        lines.append(TriposRecordType.SUBSTRUCTURE.rti)
        lines.extend(subst_record.to_data_line() for subst_record in subst_records)

    return '\n'.join(lines) + '\n'

def format_mol2(
        supermols : Iterable[Union[Supermolecule, FragmentedSupermolecule]],
        mapper : Optional[TriposRecordMapper]=None,
    ) -> str:
    '''
    Render a collection of Supermolecules as Mol2 text, one MOLECULE record per Supermolecule

    Unnamed Supermolecules are given a unique generated name; raises
    Mol2FormatError if any two Supermolecules share the same name
    '''
    supermols = list(supermols)
    explicit_names : set[str] = set(supermol.name for supermol in supermols if supermol.name is not None)

    taken_names : set[str] = set()
    sections : list[str] = []
    for supermol in supermols:
        mol_name = supermol.name
        if mol_name is None:
            mol_name = unique_mol_name(taken_names | explicit_names)
        elif mol_name in taken_names:
            raise Mol2FormatError(f'Tripos molecule name is not unique: "{mol_name}"')
        taken_names.add(mol_name)

        sections.append(format_mol2_molecule(supermol, mol_name, mapper=mapper))

    return ''.join(sections)

def write_mol2(
        supermols : Iterable[Union[Supermolecule, FragmentedSupermolecule]],
        filepath : FilePathLike,
        mapper : Optional[TriposRecordMapper]=None,
    ) -> Path:
    '''Write a collection of Supermolecules to a Mol2 file, returning the path written to'''
    supermols = list(supermols)
    mol2_text = format_mol2(supermols, mapper=mapper) # DEV: formatted in full before opening, so that a formatting error leaves no partial file behind

    filepath = Path(filepath)
    with open(filepath, 'w') as mol2_file:
        mol2_file.write(mol2_text)
    LOGGER.info(f'Wrote {len(supermols)} Tripos molecule(s) to "{filepath}"')

    return filepath
