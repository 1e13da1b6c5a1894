'''For determining and adjusting the sizes (measures) of geometric objects'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import Any, Optional, Sequence, Union
import numpy as np

from .arraytypes import Shape, N, Numeric, Vector3, ArrayNx3


def as_vector3(vectorlike : Union[np.ndarray[Shape[Any], Numeric], Sequence[float]]) -> Vector3:
    '''
    Interpret an array or sequence as a 1D, 3-element vector of floats
    The returned vector is always a fresh copy, i.e. shares no memory with the input
    '''
    if isinstance(vectorlike, (str, bytes, set, frozenset, dict)): # DEVNOTE: all technically iterable, but never meaningful as vectors
        raise TypeError(f'Cannot interpret object of type {type(vectorlike)} as a vector')

    vector = np.array(vectorlike, dtype=float) # DEV: np.array (rather than np.asarray) to guarantee a copy is made
    if vector.size != 3:
        raise ValueError(f'Expected 3-element vectorlike, received {vector.size}-element array instead')

    return vector.reshape(3)

def normalize(
        vector : np.ndarray[Shape[Any], Numeric],
        order  : Optional[Union[int, float, str]]=None,
    ) -> None:
    '''Normalize a vector or array of vectors in-place'''
    norms = np.atleast_1d( # ensure shape is broadcastable, even for scalars
        np.linalg.norm(vector, ord=order, axis=-1, keepdims=True)
    )
    ## DEVNOTE: thought about setting 0 entries in norm vector to 1's to avoid division by zero,
    ## but opted instead for clear Exception being raised by numpy when attempting division by zero
    vector /= norms

def normalized(
        vector : np.ndarray[Shape[N, ...], Numeric],
        order  : Optional[Union[int, float, str]]=None,
    ) -> np.ndarray[Shape[N, ...], Numeric]:
    '''Return a normalized copy of a vector or array of vectors;
    The array supplied to "vector" is unchanged'''
    new_vector = np.array(vector, dtype=float)  # preserve original vector
    normalize(new_vector, order=order)

    return new_vector

def centroid(positions : ArrayNx3) -> Vector3:
    '''The arithmetic mean of a collection of points'''
    positions = np.atleast_2d(positions)
    if positions.shape[0] == 0:
        raise ValueError('Centroid of an empty collection of points is undefined')

    return positions.mean(axis=0)

def bounding_box_center(positions : ArrayNx3) -> Vector3:
    '''
    The center of the axis-aligned bounding box of a collection of points,
    i.e. the midpoint between the extremes of the points along each axis
    '''
    positions = np.atleast_2d(positions)
    if positions.shape[0] == 0:
        raise ValueError('Bounding box of an empty collection of points is undefined')
    lower, upper = positions.min(axis=0), positions.max(axis=0)

    return lower + (upper - lower) / 2.0
