'''Utilities for depicting the species hierarchy as trees with the anytree library (https://anytree.readthedocs.io/en/latest/)'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import Type, Union

from anytree import Node
from anytree.render import (
    RenderTree,
    AbstractStyle,
    AsciiStyle,
    ContStyle,
    ContRoundStyle,
    DoubleStyle,
)

from .base import Species
from .island import Island
from .supermolecule import Supermolecule
from .fragmented import FragmentedSupermolecule


# Rendering and printing trees
RENDER_STYLES : dict[str, Type[AbstractStyle]] = { # keyed by all-lowercase name
    'ascii'  : AsciiStyle,
    'cont'   : ContStyle,
    'round'  : ContRoundStyle,
    'double' : DoubleStyle,
}

def as_render_style(style : Union[str, AbstractStyle, Type[AbstractStyle]]) -> AbstractStyle:
    '''Obtain an anytree render style from a style name (case-insensitive), style class, or style instance'''
    if isinstance(style, AbstractStyle):
        return style

    if isinstance(style, str):
        if (style_type := RENDER_STYLES.get(style.lower())) is None:
            raise ValueError(f'Unrecognized tree render style "{style}"; expected one of {sorted(RENDER_STYLES)}')
        return style_type()

    if isinstance(style, type) and issubclass(style, AbstractStyle):
        return style()
    raise TypeError(f'Unsupported type for tree render style: {type(style)}')


# Species hierarchy
def _species_label(species : Species) -> str:
    if isinstance(species, (Supermolecule, FragmentedSupermolecule)):
        return f'{species.__class__.__name__}({species.name or "<unnamed>"})'
    elif isinstance(species, Island):
        return f'{species.__class__.__name__}(atoms={species.num_atoms}, bonds={species.num_bonds}, charge={species.charge()})'
    else:
        return repr(species)

def species_tree(supermol : Union[Supermolecule, FragmentedSupermolecule]) -> Node:
    '''
    Build a tree of anytree Nodes mirroring the containment hierarchy of a system:
    Supermolecule -> Island -> Atom (or, for fragmented systems, FragmentedSupermolecule -> Fragment -> Atom)

    Each Node carries the species it depicts under the "species" attribute
    '''
    root = Node(_species_label(supermol), species=supermol)
    children = supermol.fragments if isinstance(supermol, FragmentedSupermolecule) else supermol.islands
    for child in children:
        child_node = Node(_species_label(child), parent=root, species=child)
        for atom in child.atoms:
            Node(_species_label(atom), parent=child_node, species=atom)

    return root

def render_species_tree(
        supermol : Union[Supermolecule, FragmentedSupermolecule],
        style : Union[str, AbstractStyle, Type[AbstractStyle]]=ContStyle,
    ) -> str:
    '''Render the species hierarchy of a system as text'''
    return RenderTree(species_tree(supermol), style=as_render_style(style)).by_attr('name')
