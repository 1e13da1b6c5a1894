'''Supermolecules: complete chemical systems made up of atom-disjoint islands'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import logging
LOGGER = logging.getLogger(__name__)

from typing import Generator, Iterable, Optional
from functools import cached_property

from scipy.spatial.transform import RigidTransform

from .atom import Atom
from .bond import Bond
from .base import Aggregate, AtomMapper, atom_correspondence
from .island import Island, AtomIsland, Molecule
from .aggregation import BondAggregator
from .exceptions import (
    AtomNotFoundError,
    BondNotFoundError,
    IslandNotFoundError,
    SharedAtomError,
)
from ..utils.containers import Referential
from ..utils.iteration import cross_pairs, first_duplicate_reference


class Supermolecule(Aggregate[Island]):
    '''
    A complete chemical system (e.g. a solute together with its solvent molecules and counterions),
    represented as a collection of referentially distinct, atom-disjoint islands

    Supermolecules are immutable; every editing operation returns a new Supermolecule,
    whose islands are re-derived from scratch from the atoms and bonds which remain

    Parameters
    ----------
    islands : Iterable[Island], default ()
        The islands of the system; may be empty, in which case the Supermolecule is an empty system
    name : Optional[str], default None
        An optional label for the system (e.g. the name of a molecule record in a chemical file)

    Raises
    ------
    DuplicateSubspeciesError
        If the same Island instance is given more than once
    SharedAtomError
        If any atom belongs to more than one of the islands
    '''
    def __init__(self, islands : Iterable[Island]=(), name : Optional[str]=None) -> None:
        islands = tuple(islands)
        for island in islands:
            if not isinstance(island, Island):
                raise TypeError(f'Supermolecules can only be composed of Islands, not object of type {type(island)}')
        super().__init__(islands)
        self._name = name

        # atom-disjointness: the total atom count of the islands must match the number of distinct atoms
        if sum(island.num_atoms for island in islands) != len(self._atom_refs):
            shared_atom = first_duplicate_reference(atom for island in islands for atom in island.atoms)
            raise SharedAtomError(f'{shared_atom!r} belongs to more than one island')

    @classmethod
    def from_atoms_and_bonds(
        cls,
        atoms : Iterable[Atom],
        bonds : Iterable[Bond],
        name : Optional[str]=None,
    ) -> 'Supermolecule':
        '''
        Assemble a Supermolecule from flat collections of atoms and bonds

        Bonds are aggregated into Molecules (in order of first appearance among "bonds"),
        followed by an AtomIsland for each atom not referenced by any bond (in the order of "atoms")
        Raises AtomNotFoundError if any bond references an atom not among "atoms"
        '''
        atoms, bonds = list(atoms), list(bonds)
        atom_refs = set(Referential(atom) for atom in atoms)
        for bond in bonds:
            for atom in bond.to_atom_pair():
                if Referential(atom) not in atom_refs:
                    raise AtomNotFoundError(f'{bond!r} references {atom!r}, which is not among the atoms given')
        molecules = [Molecule(bond_aggregate) for bond_aggregate in BondAggregator.aggregate(bonds)]

        bonded_atom_refs = set(Referential(atom) for bond in bonds for atom in bond.to_atom_pair())
        atom_islands = [atom.island for atom in atoms if Referential(atom) not in bonded_atom_refs]
        LOGGER.debug(f'Assembled {len(molecules)} molecule(s) and {len(atom_islands)} lone atom(s) from {len(atoms)} atoms and {len(bonds)} bonds')

        return cls(molecules + atom_islands, name=name)

    @property
    def name(self) -> Optional[str]:
        return self._name

    # Islands
    @property
    def islands(self) -> list[Island]:
        return self.subspecies

    @property
    def num_islands(self) -> int:
        return self.num_subspecies

    @property
    def molecules(self) -> list[Molecule]:
        '''All islands with at least one bond'''
        return [island for island in self._subspecies if isinstance(island, Molecule)]

    @property
    def atom_islands(self) -> list[AtomIsland]:
        '''All islands consisting of a single, unbonded atom'''
        return [island for island in self._subspecies if isinstance(island, AtomIsland)]

    @cached_property
    def _island_by_atom(self) -> dict[Referential[Atom], Island]:
        return {
            Referential(atom) : island
                for island in self._subspecies
                    for atom in island.atoms
        }

    def get_island_with_atom(self, atom : Atom) -> Island:
        '''The island to which an atom belongs'''
        try:
            return self._island_by_atom[Referential(atom)]
        except KeyError:
            raise AtomNotFoundError(f'{atom!r} is not part of {self!r}')

    # Bonds
    def bonds(self) -> list[Bond]:
        '''All bonds in the system, grouped by island in island order'''
        return [bond for island in self._subspecies for bond in island.bonds()]

    @property
    def num_bonds(self) -> int:
        return sum(island.num_bonds for island in self._subspecies)

    @cached_property
    def _bond_refs(self) -> frozenset[Referential[Bond]]:
        return frozenset(Referential(bond) for bond in self.bonds())

    def contains_bond(self, bond : Bond) -> bool:
        '''Whether the very bond instance given is part of the system'''
        return Referential(bond) in self._bond_refs

    # Chemical properties
    def charge(self) -> Optional[int]:
        '''
        Net charge of the system, rounded to the nearest integer
        Returns None if the charge of any atom is not known
        '''
        charges = [atom.charge for atom in self.atoms]
        if any(charge is None for charge in charges):
            return None

        return round(sum(charges))

    def cross_atom_pairs(self) -> Generator[tuple[Atom, Atom], None, None]:
        '''Generate all pairs of atoms which lie in two different islands (in island order)'''
        yield from cross_pairs([island.atoms for island in self._subspecies])

    # Editing
    def minus_atoms(self, atoms : Iterable[Atom]) -> 'Supermolecule':
        '''
        A new Supermolecule without the given atoms, or any of the bonds involving them

        Islands are re-derived from the remaining bonds; any atom left without bonds
        (including those whose only bonds were to removed atoms) becomes a lone-atom island
        '''
        removed_refs : set[Referential[Atom]] = set()
        for atom in atoms:
            if not self.contains_atom(atom):
                raise AtomNotFoundError(f'Cannot remove {atom!r}, which is not part of {self!r}')
            removed_refs.add(Referential(atom))

        surviving_bonds = [
            bond for bond in self.bonds()
                if not any(Referential(atom) in removed_refs for atom in bond.to_atom_pair())
        ]
        surviving_atoms = [atom for atom in self.atoms if Referential(atom) not in removed_refs]
        LOGGER.debug(f'Removing {len(removed_refs)} atom(s) and {self.num_bonds - len(surviving_bonds)} incident bond(s) from {self!r}')

        return Supermolecule.from_atoms_and_bonds(surviving_atoms, surviving_bonds, name=self._name)

    def minus_atom(self, atom : Atom) -> 'Supermolecule':
        return self.minus_atoms([atom])

    def minus_bonds(self, bonds : Iterable[Bond]) -> 'Supermolecule':
        '''
        A new Supermolecule without the given bonds (matched by reference); all atoms are kept

        Islands are re-derived from the remaining bonds; any atom left
        without bonds becomes a lone-atom island
        '''
        removed_refs : set[Referential[Bond]] = set()
        for bond in bonds:
            if not self.contains_bond(bond):
                raise BondNotFoundError(f'Cannot remove {bond!r}, which is not part of {self!r}')
            removed_refs.add(Referential(bond))

        surviving_bonds = [bond for bond in self.bonds() if Referential(bond) not in removed_refs]
        LOGGER.debug(f'Removing {len(removed_refs)} bond(s) from {self!r}')

        return Supermolecule.from_atoms_and_bonds(self.atoms, surviving_bonds, name=self._name)

    def minus_bond(self, bond : Bond) -> 'Supermolecule':
        return self.minus_bonds([bond])

    def minus_islands(self, islands : Iterable[Island]) -> 'Supermolecule':
        '''A new Supermolecule without the given islands (matched by reference); all other islands are kept as-is and in order'''
        removed_refs : set[Referential[Island]] = set()
        for island in islands:
            if not self.contains(island):
                raise IslandNotFoundError(f'Cannot remove {island!r}, which is not part of {self!r}')
            removed_refs.add(Referential(island))
        LOGGER.debug(f'Removing {len(removed_refs)} island(s) from {self!r}')

        return Supermolecule(
            (island for island in self._subspecies if Referential(island) not in removed_refs),
            name=self._name,
        )

    def minus_island(self, island : Island) -> 'Supermolecule':
        return self.minus_islands([island])

    # Transformation
    def map(self, transform : AtomMapper, name : Optional[str]=None) -> 'Supermolecule':
        '''
        A new Supermolecule whose atoms are the images of this Supermolecule's atoms under "transform"

        The partitioning into islands, the order of islands, and the topology and
        types of all bonds are preserved; no re-aggregation is performed

        Parameters
        ----------
        transform : Callable[[Atom], Atom]
            Called exactly once per atom; must return referentially distinct atoms for distinct inputs
        name : Optional[str], default None
            Name of the new Supermolecule; if None, the name of this Supermolecule is kept

        Raises
        ------
        MappingCollisionError
            If "transform" yields the same atom for two distinct atoms
        '''
        correspondence = atom_correspondence(self.atoms, transform)
        mapper = lambda atom : correspondence[Referential(atom)]

        return Supermolecule(
            (island.map(mapper) for island in self._subspecies),
            name=self._name if (name is None) else name,
        )

    def rigidly_transformed(self, transformation : RigidTransform, name : Optional[str]=None) -> 'Supermolecule':
        '''A copy of this Supermolecule with all atom positions moved by a rigid transformation'''
        return self.map(
            lambda atom : atom.with_position(transformation.apply(atom.position)),
            name=name,
        )

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(name={self._name!r}, num_islands={self.num_islands}, num_atoms={self.num_atoms}, num_bonds={self.num_bonds})'
