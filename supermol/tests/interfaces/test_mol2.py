'''Unit tests for reading and writing Tripos Mol2 files'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import logging

import pytest
import numpy as np

from supermol.species.atom import Atom
from supermol.species.bond import Bond
from supermol.species.base import Fragment
from supermol.species.supermolecule import Supermolecule
from supermol.species.fragmented import FragmentedSupermolecule
from supermol.interfaces.mol2 import (
    BondStatusBit,
    ChargeType,
    Mol2FormatError,
    MolType,
    SubstStatusBit,
    SubstType,
    TriposAtom,
    TriposBond,
    TriposBondType,
    TriposMolecule,
    TriposRecordMapper,
    TriposSubstructure,
    format_mol2,
    iter_tripos_records,
    parse_mol2,
    parse_mol2_blocks,
    read_mol2,
    renumbered_substructures,
    write_mol2,
)


WATER_AND_SODIUM_MOL2 = '''\
# Generated by hand
@<TRIPOS>MOLECULE
water
 3 2 1 0 0
SMALL
USER_CHARGES

@<TRIPOS>ATOM
      1 O1          0.0000    0.0000    0.0000 O.3       1 HOH1     -0.8000
      2 H1          0.9600    0.0000    0.0000 H         1 HOH1      0.4000
      3 H2         -0.2400    0.9300    0.0000 H         1 HOH1      0.4000
@<TRIPOS>BOND
     1     1     2    1
     2     1     3    1
@<TRIPOS>SUBSTRUCTURE
     1 HOH1        1 RESIDUE
@<TRIPOS>MOLECULE
sodium
 1 0
SMALL
USER_CHARGES
@<TRIPOS>ATOM
      1 NA          5.0000    0.0000    0.0000 Na        2 NA        1.0000
'''


# Records
@pytest.mark.parametrize(
    'label, expected',
    [
        ('1', TriposBondType.SINGLE),
        ('ar', TriposBondType.AROMATIC),
        ('AR', TriposBondType.AROMATIC),
        ('aromatic', TriposBondType.AROMATIC),
        ('Double', TriposBondType.DOUBLE),
        ('un', TriposBondType.UNKNOWN),
    ]
)
def test_bond_type_from_label(label : str, expected : TriposBondType) -> None:
    '''Test interpretation of bond type labels as Tripos bond types'''
    assert TriposBondType.from_label(label) == expected

def test_bond_type_from_invalid_label() -> None:
    '''Test that labels with no Tripos equivalent are rejected'''
    with pytest.raises(Mol2FormatError):
        TriposBondType.from_label('quadruple')

def test_enum_omitted_field() -> None:
    '''Test that the omission placeholder is read as a missing value'''
    assert MolType.from_field('****') is None
    with pytest.raises(Mol2FormatError):
        MolType.from_field('LARGE')

def test_molecule_record_lines() -> None:
    '''Test reading and writing of the data lines of MOLECULE records'''
    molecule = TriposMolecule.from_data_lines(['benzene', '6 6', 'SMALL', 'NO_CHARGES'])
    assert (molecule.mol_name == 'benzene') and (molecule.num_atoms == 6) and (molecule.num_bonds == 6)
    assert (molecule.num_subst is None) and (molecule.mol_type == MolType.SMALL) and (molecule.charge_type == ChargeType.NO_CHARGES)
    assert molecule.to_data_lines() == ['benzene', '6 6', 'SMALL', 'NO_CHARGES']

def test_molecule_record_counts_omitted_from_right() -> None:
    '''Test that counts may not be skipped in the middle of the count line'''
    with pytest.raises(Mol2FormatError):
        TriposMolecule(mol_name='broken', num_atoms=3, num_bonds=None, num_subst=1)

def test_atom_record_line() -> None:
    '''Test reading of ATOM records, with the element inferred from the atom type'''
    atom = TriposAtom.from_data_line('5 CA1 1.0 2.0 3.0 C.ar 1 BEN1 -0.125')
    assert (atom.atom_id == 5) and (atom.atom_name == 'CA1') and (atom.atom_type == 'C.ar')
    assert (atom.symbol == 'C') and (atom.subst_id == 1) and (atom.subst_name == 'BEN1')
    assert atom.charge == pytest.approx(-0.125)
    assert np.allclose(atom.position, [1.0, 2.0, 3.0])

def test_atom_record_line_minimal() -> None:
    '''Test that trailing optional ATOM fields may be omitted'''
    atom = TriposAtom.from_data_line('1 Cl1 0.0 0.0 0.0 Cl')
    assert (atom.symbol == 'Cl') and (atom.charge is None) and (atom.subst_id is None)

def test_atom_record_too_short() -> None:
    '''Test that ATOM records missing required fields are rejected'''
    with pytest.raises(Mol2FormatError):
        TriposAtom.from_data_line('1 C1 0.0 0.0 0.0')

def test_atom_copy_keeps_record_fields() -> None:
    '''Test that copies of Tripos atoms keep their record fields'''
    atom = TriposAtom(atom_id=3, atom_name='N3', position=[0, 0, 0], atom_type='N.am', charge=-0.3)
    moved = atom.with_position([1.0, 1.0, 1.0])
    assert isinstance(moved, TriposAtom) and (moved is not atom)
    assert (moved.atom_id == 3) and (moved.atom_type == 'N.am') and (moved.symbol == 'N')

def test_bond_record_line() -> None:
    '''Test reading and writing of BOND records'''
    bond = TriposBond.from_data_line('1 1 2 ar')
    assert (bond.origin_atom_id == 1) and (bond.target_atom_id == 2) and (bond.bond_type == TriposBondType.AROMATIC)
    assert TriposBond.from_data_line(bond.to_data_line()) == bond


def test_substructure_record_line() -> None:
    '''Test reading and writing a SUBSTRUCTURE record with every field given, including a comment containing spaces'''
    subst = TriposSubstructure.from_data_line('1 ALA1 1 RESIDUE 1 A ALA 1 ROOT|LEAF first residue of chain A')
    assert (subst.subst_id == 1) and (subst.subst_name == 'ALA1') and (subst.root_atom == 1)
    assert (subst.subst_type == SubstType.RESIDUE) and (subst.dict_type == 1) and (subst.chain == 'A')
    assert (subst.sub_type == 'ALA') and (subst.inter_bonds == 1)
    assert subst.status_bits == {SubstStatusBit.ROOT, SubstStatusBit.LEAF}
    assert subst.comment == 'first residue of chain A'
    assert TriposSubstructure.from_data_line(subst.to_data_line()) == subst

def test_substructure_record_line_minimal() -> None:
    '''Test that trailing SUBSTRUCTURE fields may be omitted'''
    subst = TriposSubstructure.from_data_line('     2 ****        7')
    assert (subst.subst_name is None) and (subst.subst_type is None) and (subst.comment is None)
    assert subst.to_data_line().split() == ['2', '****', '7']

@pytest.mark.parametrize(
    'data_line',
    [
        '1 ALA1',
        'one ALA1 1',
        '1 ALA1 1 RESIDUE two',
        '1 ALA1 1 PLANET',
    ]
)
def test_substructure_record_invalid(data_line : str) -> None:
    '''Test that malformed SUBSTRUCTURE records are rejected'''
    with pytest.raises(Mol2FormatError):
        TriposSubstructure.from_data_line(data_line)


# Reading
def test_iter_records() -> None:
    '''Test that records of supported types are generated in order, skipping comments'''
    record_types = [type(record) for record in iter_tripos_records(WATER_AND_SODIUM_MOL2)]
    assert record_types == [TriposMolecule, TriposAtom, TriposAtom, TriposAtom, TriposBond, TriposBond, TriposSubstructure, TriposMolecule, TriposAtom]

def test_parse_mol2() -> None:
    '''Test that each MOLECULE record becomes a Supermolecule with the islands implied by its bonds'''
    water, sodium = parse_mol2(WATER_AND_SODIUM_MOL2)
    assert (water.name == 'water') and (sodium.name == 'sodium')
    assert (len(water.molecules) == 1) and (water.num_atoms == 3) and (water.charge() == 0)
    assert [bond.bond_type for bond in water.bonds()] == ['1', '1']
    assert (sodium.atom_islands[0].atom.symbol == 'Na') and (sodium.charge() == 1)
    assert all(isinstance(atom, TriposAtom) for atom in water.atoms)

def test_parse_mol2_count_mismatch(caplog) -> None:
    '''Test that declared atom counts which disagree with the atoms found are warned about'''
    mol2_text = WATER_AND_SODIUM_MOL2.replace(' 3 2 1 0 0', ' 4 2 1 0 0')
    with caplog.at_level(logging.WARNING):
        parse_mol2(mol2_text)
    assert 'declares 4 atoms' in caplog.text

def test_parse_mol2_duplicate_names() -> None:
    '''Test that MOLECULE names must be unique within a file'''
    with pytest.raises(Mol2FormatError):
        parse_mol2(WATER_AND_SODIUM_MOL2.replace('sodium', 'water'))

def test_parse_mol2_dangling_bond() -> None:
    '''Test that bonds to nonexistent atom IDs are rejected'''
    with pytest.raises(Mol2FormatError):
        parse_mol2(WATER_AND_SODIUM_MOL2.replace('     2     1     3    1', '     2     1     7    1'))

def test_parse_mol2_data_before_records() -> None:
    '''Test that data lines before any record type indicator are rejected'''
    with pytest.raises(Mol2FormatError):
        parse_mol2('1 C1 0.0 0.0 0.0 C\n')

def test_parse_mol2_atoms_before_molecule() -> None:
    '''Test that ATOM records must follow a MOLECULE record'''
    with pytest.raises(Mol2FormatError):
        parse_mol2('@<TRIPOS>ATOM\n1 C1 0.0 0.0 0.0 C\n')


def test_parse_mol2_blocks() -> None:
    '''Test that the MOLECULE and SUBSTRUCTURE records of each Tripos molecule are retained alongside its Supermolecule'''
    water_block, sodium_block = parse_mol2_blocks(WATER_AND_SODIUM_MOL2)
    assert water_block.molecule_record.num_subst == 1
    assert water_block.substructures == (TriposSubstructure(subst_id=1, subst_name='HOH1', root_atom=1, subst_type=SubstType.RESIDUE),)
    assert water_block.supermolecule.num_atoms == 3
    assert (sodium_block.substructures == ()) and (sodium_block.supermolecule.name == 'sodium')

def test_parse_mol2_substructure_count_mismatch(caplog) -> None:
    '''Test that declared substructure counts which disagree with the substructures found are warned about'''
    mol2_text = WATER_AND_SODIUM_MOL2.replace(' 3 2 1 0 0', ' 3 2 2 0 0')
    with caplog.at_level(logging.WARNING):
        parse_mol2(mol2_text)
    assert 'declares 2 substructures' in caplog.text

@pytest.mark.parametrize(
    'subst_line',
    [
        '     1 HOH1        9 RESIDUE', # root atom does not exist
        '     1 HOH1        1 RESIDUE\n     1 HOH2        2 RESIDUE', # substructure ID repeated
    ]
)
def test_parse_mol2_invalid_substructures(subst_line : str) -> None:
    '''Test that substructures with nonexistent root atoms or repeated IDs are rejected'''
    with pytest.raises(Mol2FormatError):
        parse_mol2(WATER_AND_SODIUM_MOL2.replace('     1 HOH1        1 RESIDUE', subst_line))


# Writing
def test_format_mol2_reread() -> None:
    '''Test that written Mol2 text reads back into equivalent Supermolecules'''
    supermols = parse_mol2(WATER_AND_SODIUM_MOL2)
    reread = parse_mol2(format_mol2(supermols))
    assert [supermol.name for supermol in reread] == ['water', 'sodium']
    for supermol, reread_supermol in zip(supermols, reread):
        assert reread_supermol.num_islands == supermol.num_islands
        assert [bond.bond_type for bond in reread_supermol.bonds()] == [bond.bond_type for bond in supermol.bonds()]
        assert np.allclose(reread_supermol.positions, supermol.positions)
        assert [atom.charge for atom in reread_supermol.atoms] == pytest.approx([atom.charge for atom in supermol.atoms])

def test_format_mol2_plain_atoms() -> None:
    '''Test that atoms which did not come from a Mol2 file are given sequential IDs and element-derived names and types'''
    c, n = Atom('C', [0.0, 0.0, 0.0]), Atom('N', [1.15, 0.0, 0.0])
    supermol = Supermolecule.from_atoms_and_bonds([c, n], [Bond(c, n, 'triple')], name='cyanide')

    mol2_text = format_mol2([supermol])
    assert '@<TRIPOS>MOLECULE\ncyanide\n2 1\nSMALL\nNO_CHARGES\n' in mol2_text

    (reread,) = parse_mol2(mol2_text)
    assert [(atom.atom_id, atom.atom_name, atom.atom_type) for atom in reread.atoms] == [(1, 'C1', 'C'), (2, 'N2', 'N')]
    assert reread.bonds()[0].bond_type == '3'

def test_format_mol2_unnamed() -> None:
    '''Test that unnamed Supermolecules are given distinct generated names'''
    supermols = [Supermolecule.from_atoms_and_bonds([Atom('He')], []) for _ in range(2)]
    names = [supermol.name for supermol in parse_mol2(format_mol2(supermols))]
    assert all(name.startswith('mol_') for name in names) and (len(set(names)) == 2)

def test_format_mol2_duplicate_names() -> None:
    '''Test that Supermolecules sharing a name cannot be written to the same file'''
    supermols = [Supermolecule.from_atoms_and_bonds([Atom('He')], [], name='helium') for _ in range(2)]
    with pytest.raises(Mol2FormatError):
        format_mol2(supermols)

def test_write_and_read_mol2(tmp_path) -> None:
    '''Test writing to and reading from Mol2 files on disk'''
    path = write_mol2(parse_mol2(WATER_AND_SODIUM_MOL2), tmp_path / 'brine.mol2')
    assert path.exists()
    assert [supermol.num_atoms for supermol in read_mol2(path)] == [3, 1]

def test_format_mol2_mixed_charges() -> None:
    '''Test that a molecule is written as charged whenever any atom charge is known, with unknown charges left blank'''
    c, n = Atom('C', [0.0, 0.0, 0.0], charge=-0.5), Atom('N', [1.15, 0.0, 0.0])
    supermol = Supermolecule.from_atoms_and_bonds([c, n], [Bond(c, n, 'triple')], name='cyanide')

    mol2_text = format_mol2([supermol])
    assert '\nUSER_CHARGES\n' in mol2_text

    (reread,) = parse_mol2(mol2_text)
    assert [atom.charge for atom in reread.atoms] == [-0.5, None]

def test_format_mol2_substructures_from_atoms() -> None:
    '''Test that SUBSTRUCTURE records are derived from the substructure fields of the atoms written'''
    reread = parse_mol2_blocks(format_mol2(parse_mol2(WATER_AND_SODIUM_MOL2)))
    assert [
        [(subst.subst_id, subst.subst_name, subst.root_atom) for subst in block.substructures]
            for block in reread
    ] == [[(1, 'HOH1', 1)], [(2, 'NA', 1)]]
    assert [block.molecule_record.num_subst for block in reread] == [1, 1]

def test_format_mol2_no_substructures() -> None:
    '''Test that no SUBSTRUCTURE section is written for atoms without substructure IDs'''
    supermol = Supermolecule.from_atoms_and_bonds([Atom('He')], [], name='helium')
    mol2_text = format_mol2([supermol])
    assert '@<TRIPOS>SUBSTRUCTURE' not in mol2_text
    assert '\nhelium\n1 0\n' in mol2_text


class KeepSubstructures(TriposRecordMapper):
    '''Writes back the SUBSTRUCTURE records read alongside each Supermolecule'''
    def __init__(self, blocks) -> None:
        self.substructures = {block.supermolecule.name : list(block.substructures) for block in blocks}

    def on_substructures(self, supermol, records):
        return self.substructures.get(supermol.name, records)

class AnnotatingMapper(TriposRecordMapper):
    '''Adds a comment to each MOLECULE record and flags every bond as a backbone bond'''
    def on_molecule(self, supermol, record):
        return TriposMolecule(**{**record.__dict__, 'mol_comment' : f'written from {supermol.name}'})

    def on_bond(self, supermol, bond, record):
        return TriposBond(record.bond_id, record.origin_atom_id, record.target_atom_id, record.bond_type, frozenset({BondStatusBit.BACKBONE}))

def test_format_mol2_keep_substructures() -> None:
    '''Test that SUBSTRUCTURE records read from a file survive being written back in full'''
    blocks = parse_mol2_blocks(WATER_AND_SODIUM_MOL2)
    mol2_text = format_mol2([block.supermolecule for block in blocks], mapper=KeepSubstructures(blocks))

    reread = parse_mol2_blocks(mol2_text)
    assert [block.substructures for block in reread] == [block.substructures for block in blocks]
    assert reread[0].substructures[0].subst_type == SubstType.RESIDUE

def test_format_mol2_record_mapper() -> None:
    '''Test that the MOLECULE and BOND records written can be adjusted by a record mapper'''
    mol2_text = format_mol2(parse_mol2(WATER_AND_SODIUM_MOL2), mapper=AnnotatingMapper())
    assert [block.molecule_record.mol_comment for block in parse_mol2_blocks(mol2_text)] == ['written from water', 'written from sodium']

    bond_records = [record for record in iter_tripos_records(mol2_text) if isinstance(record, TriposBond)]
    assert len(bond_records) == 2
    assert all(bond_record.status_bits == {BondStatusBit.BACKBONE} for bond_record in bond_records)


# Renumbering
def substructured_supermolecule() -> Supermolecule:
    '''A carbonyl group in substructure 7, sharing its system with an unbonded nitrogen in substructure 3'''
    carbon = TriposAtom(5, 'C1', [0.0, 0.0, 0.0], atom_type='C', subst_id=7, subst_name='RES7')
    oxygen = TriposAtom(9, 'O1', [1.2, 0.0, 0.0], atom_type='O')
    hydrogen = TriposAtom(4, 'H1', [0.0, 1.1, 0.0], atom_type='H', subst_id=7, subst_name='RES7')
    nitrogen = TriposAtom(2, 'N1', [3.0, 0.0, 0.0], atom_type='N', subst_id=3, subst_name='RES3')

    return Supermolecule.from_atoms_and_bonds(
        [carbon, oxygen, hydrogen, nitrogen],
        [Bond(carbon, oxygen, '2'), Bond(carbon, hydrogen, '1')],
        name='formyl',
    )

def test_renumbered_substructures() -> None:
    '''Test that substructures are renumbered by first appearance, and atoms grouped by substructure before unsubstructured atoms'''
    supermol = substructured_supermolecule()
    renumbered = renumbered_substructures(supermol)

    ids_by_old_id = {
        atom.atom_id : (new_atom.atom_id, new_atom.subst_id, new_atom.subst_name)
            for atom, new_atom in zip(supermol.atoms, renumbered.atoms)
    }
    assert ids_by_old_id == {
        5 : (1, 1, 'RES7'),
        4 : (2, 1, 'RES7'),
        2 : (3, 2, 'RES3'),
        9 : (4, None, None),
    }
    assert (renumbered.name == 'formyl') and (renumbered.num_islands == supermol.num_islands)
    assert [bond.bond_type for bond in renumbered.bonds()] == ['2', '1']
    assert np.allclose(renumbered.positions, supermol.positions)
    assert [atom.atom_id for atom in supermol.atoms] == [5, 9, 4, 2] # original is left untouched

def test_renumbered_substructures_offsets() -> None:
    '''Test renumbering from starting IDs other than 1, under a new name'''
    renumbered = renumbered_substructures(substructured_supermolecule(), subst_id_start=10, atom_id_start=100, name='shifted')
    assert renumbered.name == 'shifted'
    assert sorted(atom.atom_id for atom in renumbered.atoms) == [100, 101, 102, 103]
    assert set(atom.subst_id for atom in renumbered.atoms) == {10, 11, None}

def test_renumbered_substructures_fragmented() -> None:
    '''Test that renumbering a FragmentedSupermolecule keeps its fragments'''
    supermol = substructured_supermolecule()
    fragmented = FragmentedSupermolecule(supermol, [Fragment(supermol.atoms[:2]), Fragment(supermol.atoms[2:])])

    renumbered = renumbered_substructures(fragmented)
    assert isinstance(renumbered, FragmentedSupermolecule)
    assert [fragment.num_atoms for fragment in renumbered.fragments] == [2, 2]

def test_renumbered_substructures_plain_atoms() -> None:
    '''Test that only Supermolecules made entirely of TriposAtoms can be renumbered'''
    with pytest.raises(TypeError):
        renumbered_substructures(Supermolecule.from_atoms_and_bonds([Atom('He')], []))
