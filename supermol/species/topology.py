'''Graph representations of the bond connectivity of chemical species'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import Generator, Iterable, Union
import networkx as nx

from .atom import Atom
from .bond import Bond
from .base import Species
from ..utils.containers import Referential


# DEVNOTE: nodes are identity-wrapped atoms, so that distinct-but-equal-looking atoms are never merged into one node
class SpeciesGraph(nx.Graph):
    '''
    The bond graph of a chemical species, with one node per (referentially distinct) atom
    and one edge per bond. Each node carries its atom under the "atom" attribute, and each
    edge carries its bond and bond type under the "bond" and "bond_type" attributes
    '''
    @classmethod
    def from_atoms_and_bonds(cls, atoms : Iterable[Atom], bonds : Iterable[Bond]) -> 'SpeciesGraph':
        graph = cls()
        for atom in atoms:
            graph.add_node(Referential(atom), atom=atom)

        for bond in bonds:
            atom1, atom2 = bond.to_atom_pair()
            graph.add_edge(
                Referential(atom1),
                Referential(atom2),
                bond=bond,
                bond_type=bond.bond_type,
            )
            graph.nodes[Referential(atom1)]['atom'] = atom1 # in case bonded atoms were not among the atoms given
            graph.nodes[Referential(atom2)]['atom'] = atom2

        return graph

    @classmethod
    def from_island(cls, island : Species) -> 'SpeciesGraph':
        '''Bond graph of a single Island'''
        return cls.from_atoms_and_bonds(island.atoms, island.bonds())

    @classmethod
    def from_supermolecule(cls, supermol : Species) -> 'SpeciesGraph':
        '''Bond graph of a whole Supermolecule (or FragmentedSupermolecule)'''
        return cls.from_atoms_and_bonds(supermol.atoms, supermol.bonds())

    # network properties
    @property
    def atoms(self) -> list[Atom]:
        return [atom for _, atom in self.nodes(data='atom')]

    @property
    def is_discrete(self) -> bool:
        '''Whether the graph has no edges, i.e. all atoms are unbonded'''
        return self.number_of_edges() == 0

    @property
    def is_connected(self) -> bool:
        '''Whether every atom can be reached from every other atom along bonds; the empty graph is NOT connected'''
        return (self.number_of_nodes() > 0) and nx.is_connected(self)

    @property
    def num_components(self) -> int:
        '''The number of disconnected components (i.e. islands) in the graph'''
        return nx.number_connected_components(self)

    @property
    def components(self) -> Generator['SpeciesGraph', None, None]:
        '''Generates the subgraph of each connected component sequentially'''
        for cc_nodes in nx.connected_components(self):
            yield SpeciesGraph(self.subgraph(cc_nodes))

    def component_atom_sets(self) -> list[frozenset[Referential[Atom]]]:
        '''The identity-wrapped atoms of each connected component'''
        return [frozenset(cc_nodes) for cc_nodes in nx.connected_components(self)]

    def degree_of(self, atom : Atom) -> int:
        return self.degree[Referential(atom)]

    # depiction
    def canonical_form(self) -> str:
        '''
        Return a hash of the graph structure, colored by element symbol and bond type
        Isomorphic graphs give identical hashes (though the converse is not guaranteed)
        '''
        labelled = nx.Graph()
        for node, atom in self.nodes(data='atom'):
            labelled.add_node(node, symbol=atom.symbol)
        for u, v, bond_type in self.edges(data='bond_type'):
            labelled.add_edge(u, v, bond_type=bond_type)

        return nx.weisfeiler_lehman_graph_hash(labelled, node_attr='symbol', edge_attr='bond_type')

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(num_atoms={self.number_of_nodes()}, num_bonds={self.number_of_edges()}, num_components={self.num_components})'


def species_graph(species : Union[Species, Iterable[Bond]]) -> SpeciesGraph:
    '''Bond graph of any species which exposes bonds, or of a bare collection of bonds'''
    if isinstance(species, Species) and hasattr(species, 'bonds'):
        return SpeciesGraph.from_atoms_and_bonds(species.atoms, species.bonds())

    bonds = list(species)
    return SpeciesGraph.from_atoms_and_bonds([], bonds)
