'''Typehints for numpy arrays of coordinates'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import Annotated, TypeVar

import numpy as np
import numpy.typing as npt
from numbers import Number


Numeric = TypeVar('Numeric', bound=Number) # typehint a number-like generic type

# Numpy array type annotations
Shape = tuple # the shape field of a numpy array
DType = TypeVar('DType', bound=np.generic) # the data type of a numpy array
N = TypeVar('N', bound=int) # typehint the size of a given dimension, e.g. the number of atoms

## DEV: no way to check array shapes statically yet, so shapes are only recorded as metadata
Vector3  = Annotated[npt.NDArray[DType], Shape[3]]
ArrayNx3 = Annotated[npt.NDArray[DType], Shape[N, 3]] # e.g. the stacked positions of N atoms
