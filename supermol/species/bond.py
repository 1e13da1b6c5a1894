'''Representation of chemical bonds between pairs of atoms'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import Any

from .atom import Atom
from .base import AtomMapper, Fragment
from .exceptions import AtomNotFoundError, SelfBondError


class Bond(Fragment):
    '''
    A bond between two referentially distinct atoms

    Unlike most species, Bonds compare by value: two Bonds are equal iff they join the
    same pair of atom INSTANCES (irrespective of order) and carry the same bond type.
    The order in which the atoms were given is nonetheless remembered, see to_atom_pair()

    Parameters
    ----------
    atom1 : Atom
        The first ("origin") atom of the bond
    atom2 : Atom
        The second ("target") atom of the bond
    bond_type : str
        Arbitrary label for the type of bond (e.g. "1", "2", "ar")
    '''
    def __init__(self, atom1 : Atom, atom2 : Atom, bond_type : str) -> None:
        if atom1 is atom2:
            raise SelfBondError(f'Cannot bond atom {atom1!r} to itself')
        super().__init__((atom1, atom2))
        self._bond_type = str(bond_type)

    @property
    def bond_type(self) -> str:
        return self._bond_type

    def to_atom_pair(self) -> tuple[Atom, Atom]:
        '''The atoms of the bond as a pair, in the order they were given upon construction'''
        atom1, atom2 = self._subspecies
        return atom1, atom2

    def partner_of(self, atom : Atom) -> Atom:
        '''The atom on the other end of this bond from the atom given'''
        atom1, atom2 = self._subspecies
        if atom is atom1:
            return atom2
        elif atom is atom2:
            return atom1
        else:
            raise AtomNotFoundError(f'Atom {atom!r} does not participate in {self!r}')

    def map(self, transform : AtomMapper) -> 'Bond':
        '''Return a Bond of the same type between the images of this Bond's atoms under "transform"'''
        atom1, atom2 = self._subspecies
        return Bond(transform(atom1), transform(atom2), self._bond_type) # DEVNOTE: SelfBondError doubles as a mapping collision check here

    # Comparison
    def _atom_ids(self) -> frozenset[int]:
        return frozenset(id(atom) for atom in self._subspecies)

    def __eq__(self, other : Any) -> bool:
        if not isinstance(other, Bond):
            return NotImplemented
        return (self._bond_type == other._bond_type) and (self._atom_ids() == other._atom_ids())

    def __hash__(self) -> int:
        return hash((self._atom_ids(), self._bond_type))

    def __repr__(self) -> str:
        atom1, atom2 = self._subspecies
        return f'{self.__class__.__name__}({atom1.symbol}-{atom2.symbol}, bond_type="{self._bond_type}")'
