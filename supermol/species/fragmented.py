'''Supermolecules paired with an externally-defined partitioning of their atoms into fragments'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import Generator, Iterable, Optional

from scipy.spatial.transform import RigidTransform

from .atom import Atom
from .bond import Bond
from .base import AtomMapper, Fragment, Species, atom_correspondence
from .island import Island, AtomIsland, Molecule
from .supermolecule import Supermolecule
from .exceptions import FragmentationError
from ..utils.containers import Referential
from ..utils.iteration import cross_pairs, first_duplicate_reference, has_duplicate_references


class FragmentedSupermolecule(Species):
    '''
    A Supermolecule together with a partitioning of all of its atoms into fragments

    Fragments are independent of islands: a fragment may span several islands
    (e.g. a residue together with its bound water), or an island may be split
    across several fragments (e.g. the chains of a protein joined by disulfide bridges)

    Parameters
    ----------
    supermolecule : Supermolecule
        The underlying chemical system
    fragments : Iterable[Fragment]
        Non-empty collection of fragments which partition the atoms of "supermolecule" exactly, by reference
    name : Optional[str], default None
        Name of the fragmented system; defaults to the name of "supermolecule"

    Raises
    ------
    FragmentationError
        If no fragments are given, if any atom appears in more than one fragment, or if the
        atoms of the fragments are not exactly the atoms of the supermolecule
    '''
    def __init__(
        self,
        supermolecule : Supermolecule,
        fragments : Iterable[Fragment],
        name : Optional[str]=None,
    ) -> None:
        fragments = tuple(fragments)
        if not fragments:
            raise FragmentationError('At least one fragment is required to fragment a supermolecule')

        fragment_atoms = [atom for fragment in fragments for atom in fragment.atoms]
        if has_duplicate_references(fragment_atoms):
            raise FragmentationError(f'{first_duplicate_reference(fragment_atoms)!r} belongs to more than one fragment')

        fragment_atom_refs = set(Referential(atom) for atom in fragment_atoms)
        supermol_atom_refs = set(Referential(atom) for atom in supermolecule.atoms)
        if fragment_atom_refs != supermol_atom_refs:
            num_foreign = len(fragment_atom_refs - supermol_atom_refs)
            num_missing = len(supermol_atom_refs - fragment_atom_refs)
            raise FragmentationError(
                f'Fragments do not partition the atoms of {supermolecule!r} ({num_foreign} foreign atom(s), {num_missing} atom(s) not in any fragment)'
            )

        self._supermolecule = supermolecule
        self._fragments = fragments
        self._name = supermolecule.name if (name is None) else name

    @property
    def supermolecule(self) -> Supermolecule:
        return self._supermolecule

    @property
    def fragments(self) -> list[Fragment]:
        return list(self._fragments)

    @property
    def num_fragments(self) -> int:
        return len(self._fragments)

    @property
    def name(self) -> Optional[str]:
        return self._name

    # Delegated to underlying Supermolecule
    @property
    def atoms(self) -> list[Atom]:
        return self._supermolecule.atoms

    def contains_atom(self, atom : Atom) -> bool:
        return self._supermolecule.contains_atom(atom)

    @property
    def islands(self) -> list[Island]:
        return self._supermolecule.islands

    @property
    def molecules(self) -> list[Molecule]:
        return self._supermolecule.molecules

    @property
    def atom_islands(self) -> list[AtomIsland]:
        return self._supermolecule.atom_islands

    def bonds(self) -> list[Bond]:
        return self._supermolecule.bonds()

    def charge(self) -> Optional[int]:
        return self._supermolecule.charge()

    def get_island_with_atom(self, atom : Atom) -> Island:
        return self._supermolecule.get_island_with_atom(atom)

    def get_fragment_with_atom(self, atom : Atom) -> Fragment:
        '''The fragment to which an atom belongs'''
        for fragment in self._fragments:
            if fragment.contains_atom(atom):
                return fragment
        raise FragmentationError(f'{atom!r} does not belong to any fragment of {self!r}')

    def cross_atom_pairs(self) -> Generator[tuple[Atom, Atom], None, None]:
        '''Generate all pairs of atoms which lie in two different FRAGMENTS (in fragment order)'''
        yield from cross_pairs([fragment.atoms for fragment in self._fragments])

    # Editing
    def _refragmented(self, supermolecule : Supermolecule) -> 'FragmentedSupermolecule':
        '''Restrict the current fragments to the atoms which remain in an edited supermolecule, dropping any fragments left empty'''
        fragments : list[Fragment] = []
        for fragment in self._fragments:
            remaining_atoms = [atom for atom in fragment.atoms if supermolecule.contains_atom(atom)]
            if remaining_atoms:
                fragments.append(Fragment(remaining_atoms))

        return FragmentedSupermolecule(supermolecule, fragments, name=self._name)

    def minus_atoms(self, atoms : Iterable[Atom]) -> 'FragmentedSupermolecule':
        return self._refragmented(self._supermolecule.minus_atoms(atoms))

    def minus_atom(self, atom : Atom) -> 'FragmentedSupermolecule':
        return self.minus_atoms([atom])

    def minus_bonds(self, bonds : Iterable[Bond]) -> 'FragmentedSupermolecule':
        return self._refragmented(self._supermolecule.minus_bonds(bonds))

    def minus_bond(self, bond : Bond) -> 'FragmentedSupermolecule':
        return self.minus_bonds([bond])

    def minus_islands(self, islands : Iterable[Island]) -> 'FragmentedSupermolecule':
        return self._refragmented(self._supermolecule.minus_islands(islands))

    def minus_island(self, island : Island) -> 'FragmentedSupermolecule':
        return self.minus_islands([island])

    # Transformation
    def map(self, transform : AtomMapper, name : Optional[str]=None) -> 'FragmentedSupermolecule':
        '''
        A new FragmentedSupermolecule whose atoms are the images of this one's atoms under "transform"
        Islands, fragments, and the order of both are preserved
        '''
        correspondence = atom_correspondence(self.atoms, transform)
        mapper = lambda atom : correspondence[Referential(atom)]
        name = self._name if (name is None) else name

        return FragmentedSupermolecule(
            self._supermolecule.map(mapper, name=name),
            (fragment.map(mapper) for fragment in self._fragments),
            name=name,
        )

    def rigidly_transformed(self, transformation : RigidTransform, name : Optional[str]=None) -> 'FragmentedSupermolecule':
        return self.map(
            lambda atom : atom.with_position(transformation.apply(atom.position)),
            name=name,
        )

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(name={self._name!r}, num_fragments={self.num_fragments}, num_atoms={self.num_atoms})'
