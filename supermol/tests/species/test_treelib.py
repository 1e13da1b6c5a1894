'''Unit tests for tree depictions of the species hierarchy'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import pytest

from anytree.render import AsciiStyle, ContStyle, ContRoundStyle, DoubleStyle

from supermol.species.atom import Atom
from supermol.species.bond import Bond
from supermol.species.base import Fragment
from supermol.species.island import Molecule
from supermol.species.supermolecule import Supermolecule
from supermol.species.fragmented import FragmentedSupermolecule
from supermol.species.treelib import (
    as_render_style,
    render_species_tree,
    species_tree,
)


def hydrogen_chloride_and_argon() -> Supermolecule:
    h, cl = Atom('H', charge=0.2), Atom('Cl', charge=-0.2)
    return Supermolecule([Molecule([Bond(h, cl, '1')]), Atom('Ar', charge=0.0).island], name='gas')


@pytest.mark.parametrize(
    'style, expected_type',
    [
        ('ascii', AsciiStyle),
        ('DOUBLE', DoubleStyle),
        ('Round', ContRoundStyle),
        (ContStyle, ContStyle),
        (AsciiStyle(), AsciiStyle),
    ]
)
def test_render_style(style, expected_type : type) -> None:
    '''Test that render styles can be specified by alias, class, or instance'''
    assert isinstance(as_render_style(style), expected_type)

def test_render_style_unknown_alias() -> None:
    '''Test that unrecognized style aliases are rejected'''
    with pytest.raises(ValueError):
        as_render_style('fancy')

def test_render_style_wrong_type() -> None:
    '''Test that objects which are not styles are rejected'''
    with pytest.raises(TypeError):
        as_render_style(42)

def test_species_tree_structure() -> None:
    '''Test that the tree mirrors the system -> island -> atom hierarchy'''
    supermol = hydrogen_chloride_and_argon()
    root = species_tree(supermol)
    assert root.species is supermol
    assert [child.species for child in root.children] == supermol.islands
    assert [len(child.children) for child in root.children] == [2, 1]
    assert root.height == 2

def test_fragmented_tree_structure() -> None:
    '''Test that fragmented systems are depicted by fragment rather than by island'''
    supermol = hydrogen_chloride_and_argon()
    fragmented = FragmentedSupermolecule(supermol, [Fragment(supermol.atoms)])
    root = species_tree(fragmented)
    assert (len(root.children) == 1) and (len(root.children[0].children) == 3)

def test_render_species_tree() -> None:
    '''Test that rendered trees name the system and have one line per node'''
    text = render_species_tree(hydrogen_chloride_and_argon(), style='ascii')
    lines = text.splitlines()
    assert lines[0] == 'Supermolecule(gas)'
    assert len(lines) == 1 + 2 + 3
    assert 'Molecule(atoms=2, bonds=1, charge=0)' in text
