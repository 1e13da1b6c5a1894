'''Tools for simplifying iteration over collections of items'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import (
    Generator,
    Iterable,
    Sequence,
    TypeVar,
)
T = TypeVar('T')

from itertools import combinations, product

from .containers import Referential


def distinct_by_reference(items : Iterable[T]) -> list[T]:
    '''
    Return the items which are referentially distinct (i.e. distinct by object identity),
    keeping the first occurrence of each object and preserving the order of first occurrence
    '''
    seen : set[Referential[T]] = set()
    distinct_items : list[T] = []
    for item in items:
        ref = Referential(item)
        if ref not in seen:
            seen.add(ref)
            distinct_items.append(item)

    return distinct_items

def has_duplicate_references(items : Iterable[T]) -> bool:
    '''Whether any object instance appears more than once among the given items'''
    seen : set[Referential[T]] = set()
    for item in items:
        ref = Referential(item)
        if ref in seen:
            return True
        seen.add(ref)

    return False

def first_duplicate_reference(items : Iterable[T]) -> T:
    '''
    Return the first object which appears more than once among the given items
    Raises ValueError if all items are referentially distinct
    '''
    seen : set[Referential[T]] = set()
    for item in items:
        ref = Referential(item)
        if ref in seen:
            return item
        seen.add(ref)

    raise ValueError('Items are referentially distinct; no duplicate to report')

def cross_pairs(groups : Sequence[Iterable[T]]) -> Generator[tuple[T, T], None, None]:
    '''
    Generate all pairs of items which belong to two DIFFERENT groups,
    for every unordered pair of groups (taken in the order the groups are given)

    Parameters
    ----------
    groups : Sequence[Iterable[T]]
        An ordered collection of groups of items

    Returns
    -------
    pairs : Generator[tuple[T, T], None, None]
        Pairs (a, b) where "a" comes from an earlier group than "b"
    '''
    groups = [list(group) for group in groups] # cache, so that generator-like groups can be traversed repeatedly
    for outer_group, inner_group in combinations(groups, 2):
        yield from product(outer_group, inner_group)
