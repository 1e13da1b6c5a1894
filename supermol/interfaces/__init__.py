'''Readers, writers, and converters for moving chemical systems into and out of the supermol representation'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from pathlib import Path
from typing import Union

FilePathLike = Union[str, Path]
