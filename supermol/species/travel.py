'''Local bonding environments of atoms, and non-revisiting walks through the atoms of an island'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import re
from typing import (
    TYPE_CHECKING,
    Callable,
    Generator,
    Iterable,
    Sequence,
)
from dataclasses import dataclass

from .atom import Atom
from .exceptions import AtomNotFoundError
from ..chemistry.core import element_from
from ..utils.containers import Referential

if TYPE_CHECKING:
    from .island import Island


NEIGHBOR_PATTERN_REGEX = re.compile(r'^(?P<bond_type>[a-z0-9]+)(?P<symbol>[A-Z][a-z]*)$') # e.g. "1C", "arN", "2O"

@dataclass(frozen=True)
class Neighbor:
    '''An atom bonded to some source atom, together with the type of the bond joining them'''
    atom : Atom
    bond_type : str

    def matches_element(self, symbol : str) -> bool:
        return self.atom.element is element_from(symbol)

    def matches(self, pattern : str) -> bool:
        '''
        Whether this neighbor matches a pattern made up of a bond type followed by an element symbol,
        e.g. "1C" for a carbon joined by a bond of type "1", or "arN" for an aromatically-bonded nitrogen
        '''
        match = NEIGHBOR_PATTERN_REGEX.match(pattern)
        if match is None:
            raise ValueError(f'Invalid neighbor pattern: "{pattern}"')

        return (self.bond_type == match.group('bond_type')) and self.matches_element(match.group('symbol'))


def _multiset_match(
        neighbors : Sequence[Neighbor],
        queries : Sequence[str],
        predicate : Callable[[Neighbor, str], bool],
        exhaustive : bool,
    ) -> bool:
    '''
    Whether each query can be matched to a distinct neighbor; if "exhaustive" is
    True, every neighbor must also be consumed by exactly one of the queries
    '''
    if (exhaustive and len(neighbors) != len(queries)) or (len(neighbors) < len(queries)):
        return False

    remaining = list(neighbors)
    for query in queries:
        for i, neighbor in enumerate(remaining):
            if predicate(neighbor, query):
                remaining.pop(i)
                break
        else:
            return False

    return (not remaining) if exhaustive else True # DEVNOTE: greedy assignment suffices, since each query matches neighbors by equality


@dataclass(frozen=True, init=False)
class Neighborhood:
    '''
    The atoms directly bonded to a source atom, as seen from that atom

    Parameters
    ----------
    source_atom : Atom
        The atom at the center of the neighborhood
    neighbors : Iterable[tuple[Atom, str]]
        The (bonded atom, bond type) pairs of all bonds involving the source atom
    '''
    source_atom : Atom
    neighbors : tuple[Neighbor, ...]

    def __init__(self, source_atom : Atom, neighbors : Iterable[tuple[Atom, str]]) -> None:
        object.__setattr__(self, 'source_atom', source_atom)
        object.__setattr__(self, 'neighbors', tuple(Neighbor(atom, bond_type) for atom, bond_type in neighbors))

    @property
    def num_neighbors(self) -> int:
        return len(self.neighbors)

    @property
    def atoms(self) -> list[Atom]:
        return [neighbor.atom for neighbor in self.neighbors]

    # Element matching
    def matches_elements(self, *symbols : str) -> bool:
        '''Whether the elements of the neighboring atoms are exactly those given (as a multiset, i.e. irrespective of order)'''
        return _multiset_match(self.neighbors, symbols, Neighbor.matches_element, exhaustive=True)

    def contains_elements(self, *symbols : str) -> bool:
        '''Whether the elements given are found among the neighboring atoms (as a sub-multiset)'''
        return _multiset_match(self.neighbors, symbols, Neighbor.matches_element, exhaustive=False)

    # Bond type + element matching
    def matches(self, *patterns : str) -> bool:
        '''Whether the neighbors match the given bond type + element patterns exactly, e.g. matches("2O", "1O", "1C") for a carboxyl carbon'''
        return _multiset_match(self.neighbors, patterns, Neighbor.matches, exhaustive=True)

    def contains(self, *patterns : str) -> bool:
        '''Whether the given bond type + element patterns are found among the neighbors'''
        return _multiset_match(self.neighbors, patterns, Neighbor.matches, exhaustive=False)


class IslandTraveler:
    '''
    A walker which travels along the bonds of an island without revisiting atoms

    Each traveler is immutable; stepping forwards or backwards produces new travelers,
    each of which remembers the journey taken to reach its current atom

    Parameters
    ----------
    atom : Atom
        The atom at which the traveler is currently located
    island : Island
        The island being traveled
    '''
    def __init__(self, atom : Atom, island : 'Island') -> None:
        self._init(atom, island, journey=(), visited=frozenset())

    def _init(
            self,
            atom : Atom,
            island : 'Island',
            journey : tuple[Atom, ...],
            visited : frozenset[Referential[Atom]],
        ) -> None:
        if not island.contains_atom(atom):
            raise AtomNotFoundError(f'{island!r} does not contain {atom!r}')
        if not all(Referential(journey_atom) in visited for journey_atom in journey):
            raise ValueError('Not all atoms of the journey are among the visited atoms')

        self._atom = atom
        self._island = island
        self._journey = journey
        self._visited = visited

    @classmethod
    def _resumed(
            cls,
            atom : Atom,
            island : 'Island',
            journey : tuple[Atom, ...],
            visited : frozenset[Referential[Atom]],
        ) -> 'IslandTraveler':
        traveler = cls.__new__(cls)
        traveler._init(atom, island, journey, visited)
        return traveler

    @property
    def atom(self) -> Atom:
        return self._atom

    @property
    def island(self) -> 'Island':
        return self._island

    @property
    def journey(self) -> list[Atom]:
        '''The atoms traveled through to reach the current atom, in order of travel'''
        return list(self._journey)

    @property
    def visited_atoms(self) -> list[Atom]:
        return [ref.value for ref in self._visited]

    def neighborhood(self) -> Neighborhood:
        return self._island.neighborhood(self._atom)

    def next(self) -> Generator['IslandTraveler', None, None]:
        '''Generate travelers located at each of the not-yet-visited atoms bonded to the current atom'''
        visited = self._visited | {Referential(self._atom)}
        for bonded_atom in self._island.get_atoms_bonded_to(self._atom):
            if Referential(bonded_atom) not in self._visited:
                yield self._resumed(bonded_atom, self._island, self._journey + (self._atom,), visited)

    def previous(self) -> 'IslandTraveler':
        '''A traveler located at the previous atom of the journey; the current atom is remembered as visited'''
        if not self._journey:
            raise RuntimeError('No previous atom in the journey')

        return self._resumed(self._journey[-1], self._island, self._journey[:-1], self._visited | {Referential(self._atom)})

    def new_past(self) -> 'IslandTraveler':
        '''A traveler at the current atom which has forgotten its journey and all visited atoms'''
        return IslandTraveler(self._atom, self._island)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(atom={self._atom!r}, journey_length={len(self._journey)})'
