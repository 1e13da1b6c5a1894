'''Unit tests for atoms and bonds'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import pytest
import numpy as np

from supermol.species.atom import Atom
from supermol.species.bond import Bond
from supermol.species.exceptions import AtomNotFoundError, SelfBondError, StructuralInputError


# Atoms
def test_atom_identity_equality() -> None:
    '''Test that atoms with identical attributes are nonetheless distinct'''
    atom1 = Atom('C', [0.0, 0.0, 0.0], charge=0.0)
    atom2 = Atom('C', [0.0, 0.0, 0.0], charge=0.0)
    assert (atom1 != atom2) and (atom1 == atom1)

def test_atom_default_position() -> None:
    '''Test that atoms are placed at the origin when no position is given'''
    assert np.allclose(Atom('O').position, [0.0, 0.0, 0.0])

def test_atom_position_read_only() -> None:
    '''Test that the position of an atom cannot be modified in-place'''
    atom = Atom('N', [1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        atom.position[0] = 5.0

def test_atom_unknown_charge() -> None:
    '''Test that charges are optional'''
    assert Atom('H').charge is None

def test_atom_copy_distinct() -> None:
    '''Test that copies are referentially distinct and can override fields'''
    atom = Atom('Cl', [1.0, 0.0, 0.0], charge=-1, tag='chloride')
    copied = atom.copy(charge=-0.5)
    assert copied is not atom
    assert (copied.symbol == 'Cl') and (copied.charge == -0.5) and (copied.tag == 'chloride')
    assert np.allclose(copied.position, atom.position)

def test_atom_copy_unknown_field() -> None:
    '''Test that overriding a nonexistent field while copying is rejected'''
    with pytest.raises(TypeError):
        Atom('C').copy(mass=12.0)

def test_atom_with_position() -> None:
    '''Test relocation of atoms and measurement of interatomic distances'''
    atom = Atom('C')
    moved = atom.with_position([3.0, 4.0, 0.0])
    assert np.allclose(atom.position, [0.0, 0.0, 0.0]) # original is unchanged
    assert atom.distance_to(moved) == pytest.approx(5.0)

def test_atom_as_species() -> None:
    '''Test that an atom behaves as a species made up of only itself'''
    atom = Atom('Fe')
    assert (atom.atoms == [atom]) and (atom.num_atoms == 1)
    assert atom.contains_atom(atom) and not atom.contains_atom(Atom('Fe'))

def test_atom_island_memoized() -> None:
    '''Test that every access to the island of an atom yields the same island'''
    atom = Atom('Ar')
    assert atom.island is atom.island
    assert atom.island.atom is atom


# Bonds
def test_self_bond() -> None:
    '''Test that an atom cannot be bonded to itself'''
    atom = Atom('C')
    with pytest.raises(SelfBondError):
        Bond(atom, atom, '1')

def test_self_bond_is_structural_error() -> None:
    '''Test that self-bonds are reported as invalid structural input'''
    atom = Atom('C')
    with pytest.raises(StructuralInputError):
        Bond(atom, atom, '1')

def test_bond_atom_pair_order() -> None:
    '''Test that bonds remember the order in which their atoms were given'''
    a, b = Atom('C'), Atom('O')
    assert Bond(b, a, '2').to_atom_pair() == (b, a)

def test_bond_value_equality() -> None:
    '''Test that bonds compare equal iff they join the same atoms (in either order) with the same type'''
    a, b = Atom('C'), Atom('C')
    assert Bond(a, b, '1') == Bond(b, a, '1')
    assert hash(Bond(a, b, '1')) == hash(Bond(b, a, '1'))
    assert Bond(a, b, '1') != Bond(a, b, '2')
    assert Bond(a, b, '1') != Bond(a, Atom('C'), '1')

def test_bond_partner_of() -> None:
    '''Test lookup of the atom on the opposite end of a bond'''
    a, b = Atom('C'), Atom('H')
    bond = Bond(a, b, '1')
    assert (bond.partner_of(a) is b) and (bond.partner_of(b) is a)
    with pytest.raises(AtomNotFoundError):
        bond.partner_of(Atom('H'))

def test_bond_map() -> None:
    '''Test that mapping a bond yields a bond of the same type between the mapped atoms'''
    a, b = Atom('C'), Atom('N')
    copies = {id(a) : a.copy(), id(b) : b.copy()}
    mapped = Bond(a, b, 'am').map(lambda atom : copies[id(atom)])
    assert mapped.to_atom_pair() == (copies[id(a)], copies[id(b)])
    assert mapped.bond_type == 'am'
