'''Reading of Supermolecules from Tripos Mol2 files'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import logging
LOGGER = logging.getLogger(__name__)

from typing import Generator, Optional, Union
from dataclasses import dataclass
from pathlib import Path

from .records import (
    RTI_PREFIX,
    Mol2FormatError,
    TriposRecordType,
    TriposMolecule,
    TriposAtom,
    TriposBond,
    TriposSubstructure,
)
from .. import FilePathLike
from ...species.bond import Bond
from ...species.supermolecule import Supermolecule

TriposRecord = Union[TriposMolecule, TriposAtom, TriposBond, TriposSubstructure]


def iter_tripos_records(mol2_text : str) -> Generator[TriposRecord, None, None]:
    '''
    Generate the MOLECULE, ATOM, BOND, and SUBSTRUCTURE records found in Mol2 text, in order of appearance

    Sections of any other record type (e.g. SET, FF_PBC) are skipped;
    comment lines (beginning with "#") are ignored everywhere
    '''
    section : Optional[TriposRecordType] = None
    in_any_section : bool = False
    molecule_lines : list[str] = []
    molecule_start : int = 0

    def flush_molecule() -> Optional[TriposMolecule]:
        while molecule_lines and not molecule_lines[-1]:
            molecule_lines.pop()
        try:
            return TriposMolecule.from_data_lines(molecule_lines)
        except Mol2FormatError as err:
            raise Mol2FormatError(f'MOLECULE record starting at line {molecule_start}: {err}') from err

    for line_num, raw_line in enumerate(mol2_text.splitlines(), start=1):
        line = raw_line.strip()
        if line.startswith('#'):
            continue

        # section headers
        if line.startswith(RTI_PREFIX):
            if section == TriposRecordType.MOLECULE:
                yield flush_molecule()

            in_any_section = True
            record_type_name = line.removeprefix(RTI_PREFIX).strip()
            try:
                section = TriposRecordType.from_field(record_type_name)
            except Mol2FormatError:
                section = None
                LOGGER.debug(f'Skipping unsupported Mol2 record type "{record_type_name}" (line {line_num})')

            if section == TriposRecordType.MOLECULE:
                molecule_lines.clear()
                molecule_start = line_num + 1
            continue

        # data lines
        if section == TriposRecordType.MOLECULE:
            molecule_lines.append(line) # DEV: blank lines are kept here, since they stand in for omitted fields
            continue

        if not line:
            continue

        if not in_any_section:
            raise Mol2FormatError(f'Line {line_num}: data found before any record type indicator')

        try:
            if section == TriposRecordType.ATOM:
                yield TriposAtom.from_data_line(line)
            elif section == TriposRecordType.BOND:
                yield TriposBond.from_data_line(line)
            elif section == TriposRecordType.SUBSTRUCTURE:
                yield TriposSubstructure.from_data_line(line)
        except Mol2FormatError as err:
            raise Mol2FormatError(f'Line {line_num}: {err}') from err

    if section == TriposRecordType.MOLECULE:
        yield flush_molecule()


@dataclass(frozen=True)
class TriposBlock:
    '''The records of one MOLECULE record of a Mol2 file, along with the Supermolecule assembled from them'''
    molecule_record : TriposMolecule
    supermolecule : Supermolecule
    substructures : tuple[TriposSubstructure, ...] = ()

def _assemble_block(
        molecule_record : TriposMolecule,
        atom_records : list[TriposAtom],
        bond_records : list[TriposBond],
        subst_records : list[TriposSubstructure],
    ) -> TriposBlock:
    '''Assemble the records of one MOLECULE record into a Supermolecule'''
    mol_name = molecule_record.mol_name

    atoms_by_id : dict[int, TriposAtom] = {}
    for atom in atom_records:
        if atom.atom_id in atoms_by_id:
            raise Mol2FormatError(f'Atom ID {atom.atom_id} is not unique in Tripos molecule "{mol_name}"')
        atoms_by_id[atom.atom_id] = atom

    if molecule_record.num_atoms != len(atom_records):
        LOGGER.warning(f'Tripos molecule "{mol_name}" declares {molecule_record.num_atoms} atoms, but {len(atom_records)} were found')
    if (molecule_record.num_bonds is not None) and (molecule_record.num_bonds != len(bond_records)):
        LOGGER.warning(f'Tripos molecule "{mol_name}" declares {molecule_record.num_bonds} bonds, but {len(bond_records)} were found')
    if (molecule_record.num_subst is not None) and (molecule_record.num_subst != len(subst_records)):
        LOGGER.warning(f'Tripos molecule "{mol_name}" declares {molecule_record.num_subst} substructures, but {len(subst_records)} were found')

    bonds : list[Bond] = []
    for bond_record in bond_records:
        try:
            origin_atom = atoms_by_id[bond_record.origin_atom_id]
            target_atom = atoms_by_id[bond_record.target_atom_id]
        except KeyError as err:
            raise Mol2FormatError(f'Bond {bond_record.bond_id} of Tripos molecule "{mol_name}" references nonexistent atom ID {err.args[0]}')
        bonds.append(Bond(origin_atom, target_atom, bond_record.bond_type.value))

    subst_ids : set[int] = set()
    for subst_record in subst_records:
        if subst_record.subst_id in subst_ids:
            raise Mol2FormatError(f'Substructure ID {subst_record.subst_id} is not unique in Tripos molecule "{mol_name}"')
        subst_ids.add(subst_record.subst_id)

        if subst_record.root_atom not in atoms_by_id:
            raise Mol2FormatError(f'Substructure {subst_record.subst_id} of Tripos molecule "{mol_name}" has nonexistent root atom ID {subst_record.root_atom}')

    return TriposBlock(
        molecule_record=molecule_record,
        supermolecule=Supermolecule.from_atoms_and_bonds(atom_records, bonds, name=mol_name),
        substructures=tuple(subst_records),
    )

def parse_mol2_blocks(mol2_text : str) -> list[TriposBlock]:
    '''
    Parse Mol2 text into one TriposBlock per MOLECULE record, in order of appearance

    Each block retains the MOLECULE and SUBSTRUCTURE records which
    have no counterpart in the assembled Supermolecule
    '''
    blocks : list[tuple[TriposMolecule, list[TriposAtom], list[TriposBond], list[TriposSubstructure]]] = []
    mol_names : set[str] = set()
    for record in iter_tripos_records(mol2_text):
        if isinstance(record, TriposMolecule):
            if record.mol_name is not None:
                if record.mol_name in mol_names:
                    raise Mol2FormatError(f'Tripos molecule name is not unique: "{record.mol_name}"')
                mol_names.add(record.mol_name)
            blocks.append((record, [], [], []))
            continue

        if not blocks:
            raise Mol2FormatError(f'{record.__class__.__name__} record found before any MOLECULE record')

        _, atom_records, bond_records, subst_records = blocks[-1]
        if isinstance(record, TriposAtom):
            atom_records.append(record)
        elif isinstance(record, TriposBond):
            bond_records.append(record)
        else:
            subst_records.append(record)

    return [_assemble_block(*block) for block in blocks]

def parse_mol2(mol2_text : str) -> list[Supermolecule]:
    '''
    Parse Mol2 text into one Supermolecule per MOLECULE record, in order of appearance

    Bonds are aggregated into Molecules and each unbonded atom becomes an AtomIsland;
    all atoms are TriposAtoms whose bond types are Tripos codes (e.g. "1", "ar")
    '''
    return [block.supermolecule for block in parse_mol2_blocks(mol2_text)]

def read_mol2(filepath : FilePathLike) -> list[Supermolecule]:
    '''Read all Supermolecules from a Mol2 file'''
    filepath = Path(filepath)
    with open(filepath, 'r') as mol2_file:
        supermols = parse_mol2(mol2_file.read())
    LOGGER.info(f'Read {len(supermols)} Tripos molecule(s) from "{filepath}"')

    return supermols
