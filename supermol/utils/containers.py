'''Custom data containers with useful properties'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import Any, Generic, TypeVar
T = TypeVar('T')

from dataclasses import dataclass


@dataclass(frozen=True, eq=False) # DEV: eq and hash are supplied by hand below, since they must ignore the value's own __eq__
class Referential(Generic[T]):
    '''
    Hashable wrapper which compares and hashes the wrapped object by IDENTITY, rather than by value

    Two Referentials are equal iff they wrap the very same object instance; this allows objects
    with value-based equality (or no hashability at all) to serve as keys of dicts and members of sets

    Parameters
    ----------
    value : T
        The object being referred to
    '''
    value : T

    def __eq__(self, other : Any) -> bool:
        return isinstance(other, Referential) and (self.value is other.value)

    def __hash__(self) -> int:
        return id(self.value) # stable for as long as the Referential (and therefore the value) is alive

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.value!r})'
