'''Unit tests for bond graphs of species'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import pytest

from supermol.species.atom import Atom
from supermol.species.bond import Bond
from supermol.species.island import Molecule
from supermol.species.supermolecule import Supermolecule
from supermol.species.topology import SpeciesGraph, species_graph
from supermol.utils.containers import Referential


def ring(symbols : str, bond_type : str='ar') -> Molecule:
    '''A cyclic molecule with one atom per element symbol given (single-letter symbols only)'''
    atoms = [Atom(symbol) for symbol in symbols]
    return Molecule(
        Bond(atoms[i], atoms[(i + 1) % len(atoms)], bond_type)
            for i in range(len(atoms))
    )


def test_graph_of_island() -> None:
    '''Test that the bond graph of a molecule has one node per atom and one edge per bond'''
    benzene = ring('CCCCCC')
    graph = SpeciesGraph.from_island(benzene)
    assert (graph.number_of_nodes() == 6) and (graph.number_of_edges() == 6)
    assert graph.is_connected and not graph.is_discrete
    assert all(graph.degree_of(atom) == 2 for atom in benzene.atoms)

def test_graph_node_attributes() -> None:
    '''Test that nodes and edges carry the atoms and bonds they represent'''
    a, b = Atom('C'), Atom('O')
    bond = Bond(a, b, '2')
    graph = species_graph(Molecule([bond]))
    assert graph.nodes[Referential(a)]['atom'] is a
    assert graph.edges[Referential(a), Referential(b)]['bond'] is bond
    assert graph.edges[Referential(b), Referential(a)]['bond_type'] == '2'

def test_graph_of_supermolecule() -> None:
    '''Test that lone atoms appear as isolated nodes in the graph of a system'''
    supermol = Supermolecule([ring('CCCCCN'), Atom('Cl').island, Atom('Na').island])
    graph = SpeciesGraph.from_supermolecule(supermol)
    assert graph.num_components == 3
    assert sorted(len(atom_set) for atom_set in graph.component_atom_sets()) == [1, 1, 6]
    assert sorted(component.number_of_nodes() for component in graph.components) == [1, 1, 6]
    assert len(graph.atoms) == 7

def test_graph_of_bonds() -> None:
    '''Test that a bare collection of bonds can be turned into a graph'''
    a, b, c = Atom('H'), Atom('O'), Atom('H')
    graph = species_graph([Bond(a, b, '1'), Bond(b, c, '1')])
    assert (graph.number_of_nodes() == 3) and graph.is_connected

def test_empty_graph() -> None:
    '''Test that an empty graph is discrete, but not connected'''
    graph = SpeciesGraph.from_supermolecule(Supermolecule())
    assert graph.is_discrete and not graph.is_connected

@pytest.mark.parametrize(
    'symbols1, symbols2, bond_type1, bond_type2, expected',
    [
        ('CCCCCC', 'CCCCCC', 'ar', 'ar', True),
        ('CCCCCN', 'NCCCCC', 'ar', 'ar', True),  # same ring, different starting atom
        ('CCCCCC', 'CCCCCN', 'ar', 'ar', False),
        ('CCCCCC', 'CCCCCC', 'ar', '1', False),
    ]
)
def test_canonical_form(symbols1 : str, symbols2 : str, bond_type1 : str, bond_type2 : str, expected : bool) -> None:
    '''Test that canonical forms agree for isomorphic species and differ for distinct ones'''
    graph1 = SpeciesGraph.from_island(ring(symbols1, bond_type1))
    graph2 = SpeciesGraph.from_island(ring(symbols2, bond_type2))
    assert (graph1.canonical_form() == graph2.canonical_form()) == expected
