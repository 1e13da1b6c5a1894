'''Subpackage for determining how units and quantities are implemented internally'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

# DEV: settled on pint; a single shared registry is mandatory, since Quantities from different registries cannot be combined
from typing import Union

import pint

UNITS = pint.UnitRegistry()
Quantity = UNITS.Quantity
UnitLike = Union[str, pint.Unit]

ANGSTROM : pint.Unit = UNITS.angstrom
DEFAULT_LENGTH_UNIT : pint.Unit = ANGSTROM # the length unit assumed for atomic positions unless told otherwise


def as_unit(unit : UnitLike) -> pint.Unit:
    '''Interpret a unit-like value (either a pint Unit or a unit string, e.g. "nm") as a Unit of the shared registry'''
    if isinstance(unit, str):
        return UNITS.Unit(unit)
    elif isinstance(unit, pint.Unit):
        return UNITS.Unit(str(unit)) # DEV: rebinds Units from foreign registries to the shared one
    else:
        raise TypeError(f'Cannot interpret object of type {type(unit)} as a unit')

def as_quantity(magnitude : float, unit : UnitLike) -> pint.Quantity:
    '''Bind a unit to a bare magnitude'''
    return Quantity(magnitude, as_unit(unit))

def length_in(magnitude : float, from_unit : UnitLike, to_unit : UnitLike=DEFAULT_LENGTH_UNIT) -> float:
    '''
    Convert a length magnitude expressed in one unit to a bare magnitude in another
    Raises pint.DimensionalityError if either unit is not a unit of length
    '''
    quantity = as_quantity(magnitude, from_unit)
    if not quantity.check('[length]'):
        raise pint.DimensionalityError(quantity.units, ANGSTROM, extra_msg=' (expected a unit of length)')

    return quantity.to(as_unit(to_unit)).magnitude
