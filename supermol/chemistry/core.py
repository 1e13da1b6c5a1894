'''Reference for fundamental chemical units, namely elements and their tabulated properties'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import Union

from periodictable import elements
from periodictable.core import Element, Ion, Isotope
ELEMENTS = elements
ElementLike = Union[Element, Ion, Isotope]


def element_from(value : Union[ElementLike, str, int]) -> Element:
    '''
    Look up a chemical element from an element-like object, an element symbol, or an atomic number

    Symbols are case-normalized (e.g. "CL" and "cl" both resolve to chlorine), to
    accommodate the all-caps convention of several fixed-column chemical file formats
    '''
    if isinstance(value, (Ion, Isotope)):
        return value.element # DEVNOTE: charge and isotope are tracked separately on atoms, not via the element
    elif isinstance(value, Element):
        return value
    elif isinstance(value, bool): # DEV: caught explicitly, since bool is a subclass of int
        raise TypeError(f'Cannot interpret {value!r} as a chemical element')
    elif isinstance(value, int):
        try:
            element = ELEMENTS[value]
        except (KeyError, IndexError):
            raise ValueError(f'No element with atomic number {value}')
        if element.number == 0: # exclude the neutron, which periodictable registers as element 0
            raise ValueError(f'No element with atomic number {value}')
        return element
    elif isinstance(value, str):
        symbol = value.strip()
        symbol = symbol[:1].upper() + symbol[1:].lower()
        if not symbol:
            raise ValueError(f'Not a valid element symbol: "{value}"')
        try:
            element = ELEMENTS.symbol(symbol)
        except ValueError:
            raise ValueError(f'Not a valid element symbol: "{value}"')
        if element.number == 0: # periodictable registers the neutron as "n"
            raise ValueError(f'Not a valid element symbol: "{value}"')
        return element_from(element) # collapse isotopes (e.g. "D", "T") onto their parent element
    else:
        raise TypeError(f'Cannot interpret object of type {type(value)} as a chemical element')

def is_element_symbol(symbol : str) -> bool:
    '''Check whether a string, taken as-is (i.e. without case normalization), is the symbol of a chemical element'''
    try:
        element = ELEMENTS.symbol(symbol)
    except ValueError:
        return False
    return isinstance(element, Element) and (element.number > 0)

def covalent_radius(element : Union[ElementLike, str, int]) -> float:
    '''The (single-bond) covalent radius of an element, in angstroms'''
    element = element_from(element)
    radius = getattr(element, 'covalent_radius', None) # DEV: periodictable loads the covalent radius table lazily on first access
    if radius is None:
        raise ValueError(f'No covalent radius tabulated for element {element.symbol}')

    return float(radius)
