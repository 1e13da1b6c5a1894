'''Islands: maximal connected components of a bond graph, either a lone atom or a fully-bonded molecule'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import Iterable, Optional
from abc import abstractmethod

from .atom import Atom
from .bond import Bond
from .base import AtomMapper, Fragment, atom_correspondence
from .aggregation import BondAggregator
from .exceptions import (
    AtomNotFoundError,
    DisconnectedMoleculeError,
    DuplicateAtomIslandError,
    EmptyMoleculeError,
)
from .travel import Neighborhood
from ..utils.containers import Referential
from ..utils.iteration import distinct_by_reference


class Island(Fragment):
    '''
    A connected component of a bond graph, treated as a chemical species in its own right

    Islands come in exactly two flavors: an AtomIsland (a single, unbonded atom)
    or a Molecule (two or more atoms joined into one component by bonds)
    '''
    @abstractmethod
    def bonds(self) -> list[Bond]:
        '''All bonds within the island'''
        ...

    @abstractmethod
    def get_bonds_by_atom(self, atom : Atom) -> list[Bond]:
        '''All bonds of the island which involve the given atom; raises AtomNotFoundError if the atom is not in this island'''
        ...

    @abstractmethod
    def get_bond(self, atom1 : Atom, atom2 : Atom) -> Optional[Bond]:
        '''The bond joining two atoms, or None if the atoms are not directly bonded (or either does not belong to the island)'''
        ...

    @abstractmethod
    def map(self, transform : AtomMapper) -> 'Island':
        ...

    @property
    def num_bonds(self) -> int:
        return len(self.bonds())

    @property
    def is_single_atom(self) -> bool:
        return self.num_atoms == 1

    def charge(self) -> Optional[int]:
        '''
        Net charge of the island, rounded to the nearest integer
        Returns None if the charge of any atom is not known, since the total charge is then indeterminate
        '''
        charges = [atom.charge for atom in self.atoms]
        if any(charge is None for charge in charges):
            return None

        return round(sum(charges))

    def get_atoms_bonded_to(self, atom : Atom) -> list[Atom]:
        '''All atoms which share a bond with the given atom'''
        return [bond.partner_of(atom) for bond in self.get_bonds_by_atom(atom)]

    def neighborhood(self, atom : Atom) -> Neighborhood:
        '''The local bonding environment (bonded atoms and bond types) of an atom in the island'''
        return Neighborhood(
            atom,
            [(bond.partner_of(atom), bond.bond_type) for bond in self.get_bonds_by_atom(atom)],
        )


class AtomIsland(Island):
    '''
    An island consisting of exactly one unbonded atom

    Each Atom has at most one AtomIsland; prefer accessing it through "Atom.island",
    which creates it upon first access and returns the same instance thereafter
    '''
    def __init__(self, atom : Atom) -> None:
        if not isinstance(atom, Atom):
            raise TypeError(f'AtomIsland can only wrap an Atom, not object of type {type(atom)}')
        if atom._island is not None:
            raise DuplicateAtomIslandError(f'{atom!r} already has an AtomIsland; access it via "Atom.island" instead')

        super().__init__((atom,))
        atom._island = self # register one-to-one correspondence

    @property
    def atom(self) -> Atom:
        return self._subspecies[0]

    def bonds(self) -> list[Bond]:
        return []

    def get_bonds_by_atom(self, atom : Atom) -> list[Bond]:
        if atom is not self.atom:
            raise AtomNotFoundError(f'{atom!r} is not the atom of {self!r}')
        return []

    def get_bond(self, atom1 : Atom, atom2 : Atom) -> Optional[Bond]:
        return None

    def map(self, transform : AtomMapper) -> 'AtomIsland':
        '''The AtomIsland of the image of this island's atom'''
        correspondence = atom_correspondence([self.atom], transform)
        return correspondence[Referential(self.atom)].island

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.atom!r})'


class Molecule(Island):
    '''
    An island of two or more atoms joined by bonds into exactly one connected component

    Parameters
    ----------
    bonds : Iterable[Bond]
        Non-empty collection of referentially distinct bonds, no two of which join
        the same pair of atoms, and which together form a single connected graph

    Raises
    ------
    EmptyMoleculeError
        If no bonds are given
    DisconnectedMoleculeError
        If the bonds given form more than one connected component
    '''
    def __init__(self, bonds : Iterable[Bond]) -> None:
        bonds = tuple(bonds)
        if not bonds:
            raise EmptyMoleculeError('Cannot construct a Molecule from an empty collection of bonds')

        num_components = len(BondAggregator.aggregate(bonds)) # also checks for duplicate or conflicting bonds
        if num_components > 1:
            raise DisconnectedMoleculeError(f'Collection of bonds represents {num_components} molecules, rather than just one')

        super().__init__(distinct_by_reference(atom for bond in bonds for atom in bond.to_atom_pair()))
        self._bonds = bonds
        self._bonds_by_atom : dict[Referential[Atom], list[Bond]] = {}
        for bond in bonds:
            for atom in bond.to_atom_pair():
                self._bonds_by_atom.setdefault(Referential(atom), []).append(bond)

    def bonds(self) -> list[Bond]:
        return list(self._bonds)

    def get_bonds_by_atom(self, atom : Atom) -> list[Bond]:
        try:
            return list(self._bonds_by_atom[Referential(atom)])
        except KeyError:
            raise AtomNotFoundError(f'{atom!r} is not part of {self!r}')

    def get_bond(self, atom1 : Atom, atom2 : Atom) -> Optional[Bond]:
        if atom1 is atom2:
            return None

        bonds1 = self._bonds_by_atom.get(Referential(atom1))
        bonds2 = self._bonds_by_atom.get(Referential(atom2))
        if (bonds1 is None) or (bonds2 is None):
            return None

        bond_refs2 = set(Referential(bond) for bond in bonds2)
        shared_bonds = [bond for bond in bonds1 if Referential(bond) in bond_refs2]
        if len(shared_bonds) != 1: # no two bonds may share an atom pair, so at most one is ever shared
            return None

        bond = shared_bonds[0]
        bond_atom1, bond_atom2 = bond.to_atom_pair()
        if ((bond_atom1 is atom1) and (bond_atom2 is atom2)) or ((bond_atom1 is atom2) and (bond_atom2 is atom1)):
            return bond
        return None

    def map(self, transform : AtomMapper) -> 'Molecule':
        '''
        A new Molecule with the same bond topology and bond types, whose atoms
        are the images of this Molecule's atoms under "transform"

        Raises MappingCollisionError if two distinct atoms are mapped to the same atom
        '''
        correspondence = atom_correspondence(self.atoms, transform)
        return Molecule(
            bond.map(lambda atom : correspondence[Referential(atom)])
                for bond in self._bonds
        )

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(num_atoms={self.num_atoms}, num_bonds={self.num_bonds})'
