'''Representation of single, identity-bearing atoms'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Hashable,
    Optional,
    Self,
    Sequence,
    Union,
)

import numpy as np

from .base import Species
from ..chemistry.core import Element, ElementLike, element_from
from ..geometry.arraytypes import Vector3
from ..geometry.measure import as_vector3

if TYPE_CHECKING:
    from .island import AtomIsland


class Atom(Species):
    '''
    A single atom, located at some position in space

    Atoms are identity-bearing: equality is by reference, NOT by value, so two Atoms
    with the same element, position, and charge are nonetheless distinct entities.
    Atoms are effectively immutable; use copy() to obtain a modified, distinct Atom

    Parameters
    ----------
    element : Union[ElementLike, str, int]
        The chemical element of the atom, as an element object, symbol, or atomic number
    position : Vector3
        The Cartesian position of the atom
    charge : Optional[float], default None
        The (partial) charge of the atom; None indicates the charge is unknown
    tag : Optional[Hashable], default None
        Opaque label which is carried along through transformations of the atom
    '''
    DEFAULT_POSITION : ClassVar[tuple[float, float, float]] = (0.0, 0.0, 0.0)

    def __init__(
        self,
        element : Union[ElementLike, str, int],
        position : Optional[Union[Vector3, Sequence[float]]]=None,
        charge : Optional[float]=None,
        tag : Optional[Hashable]=None,
    ) -> None:
        self._element : Element = element_from(element)

        if position is None:
            position = type(self).DEFAULT_POSITION
        self._position : Vector3 = as_vector3(position)
        self._position.setflags(write=False) # freeze in place, so position can be exposed without copying

        self._charge : Optional[float] = None if (charge is None) else float(charge)
        self._tag = tag
        self._island : Optional['AtomIsland'] = None

    # Chemical properties
    @property
    def element(self) -> Element:
        '''The chemical element of this atom'''
        return self._element

    @property
    def symbol(self) -> str:
        '''The symbol of the chemical element of this atom'''
        return self._element.symbol

    @property
    def charge(self) -> Optional[float]:
        '''The charge of this atom, or None if unknown'''
        return self._charge

    @property
    def tag(self) -> Optional[Hashable]:
        return self._tag

    @property
    def position(self) -> Vector3:
        '''The Cartesian position of this atom (as a read-only array)'''
        return self._position

    # Species interface
    @property
    def atoms(self) -> list['Atom']:
        return [self]

    @property
    def num_atoms(self) -> int:
        return 1

    def contains_atom(self, atom : 'Atom') -> bool:
        return atom is self

    @property
    def island(self) -> 'AtomIsland':
        '''
        The island consisting of only this atom
        Guaranteed to be the same AtomIsland instance on every access
        '''
        if self._island is None:
            from .island import AtomIsland # DEV: deferred to avoid circular import

            AtomIsland(self) # registers itself with this atom upon construction
        return self._island

    # Copying
    def _copy_kwargs(self) -> dict[str, Any]:
        '''The keyword arguments which would reconstruct a copy of this atom; extend when subclassing'''
        return {
            'element'  : self._element,
            'position' : self._position,
            'charge'   : self._charge,
            'tag'      : self._tag,
        }

    def copy(self, **changes : Any) -> Self:
        '''
        Create a new, referentially distinct atom of the same type,
        with any of the given fields replaced by new values
        '''
        kwargs = self._copy_kwargs()
        if (unknown_fields := set(changes) - set(kwargs)):
            raise TypeError(f'{self.__class__.__name__} has no field(s) {sorted(unknown_fields)}')
        kwargs.update(changes)

        return type(self)(**kwargs)

    def with_position(self, position : Union[Vector3, Sequence[float]]) -> Self:
        '''Create a copy of this atom located at a different position'''
        return self.copy(position=position)

    def distance_to(self, other : 'Atom') -> float:
        '''Euclidean distance between this atom and another'''
        return float(np.linalg.norm(other.position - self.position))

    def __repr__(self) -> str:
        x, y, z = self._position
        return f'{self.__class__.__name__}({self.symbol}, position=({x:g}, {y:g}, {z:g}), charge={self._charge})'
