'''Interfaces shared by all chemical species: single atoms, fragments, molecules, and aggregates thereof'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import (
    TYPE_CHECKING,
    Callable,
    Generic,
    Iterable,
    TypeVar,
)
from abc import ABC, abstractmethod
from functools import cached_property

import numpy as np

from .exceptions import (
    DuplicateSubspeciesError,
    MappingCollisionError,
    StructuralInputError,
)
from ..geometry.arraytypes import ArrayNx3, Vector3
from ..geometry.measure import centroid, bounding_box_center
from ..utils.containers import Referential
from ..utils.iteration import distinct_by_reference, first_duplicate_reference, has_duplicate_references

if TYPE_CHECKING:
    from .atom import Atom

S = TypeVar('S', bound='Species')
AtomMapper = Callable[['Atom'], 'Atom']


class Species(ABC):
    '''
    Any chemical entity made up of atoms, from a single atom up to a complete chemical system

    Species are compared by IDENTITY unless a subclass explicitly states otherwise; two
    species with identical attributes are still distinct entities if they are distinct objects
    '''
    @property
    @abstractmethod
    def atoms(self) -> list['Atom']:
        '''
        All atoms in the species, or a singleton list of itself if the species is an atom
        Atoms are referentially distinct; their order is stable, but implementation-specific
        '''
        ...

    @property
    def num_atoms(self) -> int:
        '''Number of (referentially distinct) atoms in the species'''
        return len(self.atoms)

    def contains_atom(self, atom : 'Atom') -> bool:
        '''Whether the very atom instance given exists in the species'''
        return any(own_atom is atom for own_atom in self.atoms)

    # Geometric properties
    @property
    def positions(self) -> ArrayNx3:
        '''Positions of all atoms in the species, stacked as an Nx3 array (in the order of "atoms")'''
        atoms = self.atoms
        if not atoms:
            return np.empty((0, 3), dtype=float)
        return np.vstack([atom.position for atom in atoms])

    def centroid(self) -> Vector3:
        '''Arithmetic mean of the positions of the atoms in the species'''
        return centroid(self.positions)

    def volumetric_center(self) -> Vector3:
        '''Center of the extremes of atom positions along each dimension'''
        return bounding_box_center(self.positions)


class Aggregate(Species, Generic[S]):
    '''
    A species composed of other, referentially distinct species ("subspecies")

    Parameters
    ----------
    subspecies : Iterable[S]
        The species making up this aggregate; order is preserved
    '''
    def __init__(self, subspecies : Iterable[S]) -> None:
        subspecies = tuple(subspecies)
        if has_duplicate_references(subspecies):
            raise DuplicateSubspeciesError(
                f'Subspecies given to construct {self.__class__.__name__} are not referentially distinct (repeated: {first_duplicate_reference(subspecies)!r})'
            )
        self._subspecies = subspecies

    @property
    def subspecies(self) -> list[S]:
        '''The species contained in this aggregate, in a stable order'''
        return list(self._subspecies)

    @property
    def num_subspecies(self) -> int:
        return len(self._subspecies)

    def contains(self, species : S) -> bool:
        '''Whether the very species instance given is a subspecies of this aggregate'''
        return any(own_species is species for own_species in self._subspecies)

    def contains_all(self, species_collection : Iterable[S]) -> bool:
        '''Whether all species in a collection are subspecies of this aggregate'''
        return all(self.contains(species) for species in species_collection)

    # Atoms
    ## DEV: safe to cache, since the subspecies of an Aggregate can't be changed after creation
    @cached_property
    def _atoms(self) -> tuple['Atom', ...]:
        return tuple(
            distinct_by_reference(
                atom
                    for species in self._subspecies
                        for atom in species.atoms
            )
        )

    @cached_property
    def _atom_refs(self) -> frozenset[Referential['Atom']]:
        return frozenset(Referential(atom) for atom in self._atoms)

    @property
    def atoms(self) -> list['Atom']:
        return list(self._atoms)

    def contains_atom(self, atom : 'Atom') -> bool:
        return Referential(atom) in self._atom_refs


def atom_correspondence(atoms : Iterable['Atom'], transform : AtomMapper) -> dict[Referential['Atom'], 'Atom']:
    '''
    Apply an atom mapper to each of a collection of atoms, returning a map from (wrapped) input atoms to output atoms

    Raises MappingCollisionError if the mapper yields referentially equal outputs for two distinct inputs
    '''
    from .atom import Atom # DEV: deferred to avoid circular import, since Atom is itself a Species

    correspondence : dict[Referential[Atom], Atom] = {}
    for atom in atoms:
        ref = Referential(atom)
        if ref in correspondence:
            continue
        mapped_atom = transform(atom)
        if not isinstance(mapped_atom, Atom):
            raise TypeError(f'Atom mapper must return Atom instances, not object of type {type(mapped_atom)}')
        correspondence[ref] = mapped_atom

    if has_duplicate_references(correspondence.values()):
        raise MappingCollisionError(
            f'Atom mapper yielded referentially equal atoms (repeated: {first_duplicate_reference(correspondence.values())!r})'
        )

    return correspondence


class Fragment(Aggregate['Atom']):
    '''
    A non-empty, ordered collection of referentially distinct atoms

    Used as the structural basis of bonds and islands, and to define
    arbitrary partitions of the atoms of a supermolecule
    '''
    def __init__(self, atoms : Iterable['Atom']) -> None:
        atoms = tuple(atoms)
        if not atoms:
            raise StructuralInputError(f'Collection of atoms given to construct {self.__class__.__name__} is empty')
        super().__init__(atoms)

    def map(self, transform : AtomMapper) -> 'Fragment':
        '''Return a new Fragment made up of the atoms obtained from applying "transform" to each atom in this Fragment, in order'''
        correspondence = atom_correspondence(self.atoms, transform)
        return Fragment(correspondence[Referential(atom)] for atom in self.atoms)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(num_atoms={self.num_atoms})'
