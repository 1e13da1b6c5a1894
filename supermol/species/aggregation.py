'''Partitioning of bonds (and bond-inferred atoms) into connected components, i.e. islands'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import logging
LOGGER = logging.getLogger(__name__)

from typing import (
    Collection,
    Iterable,
    Mapping,
)
from itertools import combinations

import numpy as np

from .atom import Atom
from .bond import Bond
from .exceptions import (
    ConflictingBondError,
    DuplicateAtomError,
    DuplicateBondError,
)
from ..chemistry.core import covalent_radius
from ..units import ANGSTROM, UnitLike, length_in
from ..utils.containers import Referential
from ..utils.iteration import first_duplicate_reference, has_duplicate_references

AtomRef = Referential[Atom]
BondRef = Referential[Bond]

DEFAULT_BOND_SCALING_FACTOR : float = 1.15 # tolerance on the sum of covalent radii when inferring bonds
DEFAULT_POSITION_UNIT : UnitLike = ANGSTROM
INFERRED_BOND_TYPE : str = 'un' # the order of a bond inferred from distances alone is unknown


def _connected_components(partners : Mapping[AtomRef, Iterable[AtomRef]]) -> list[list[AtomRef]]:
    '''
    Breadth-first labelling of the connected components of a graph given as an adjacency map

    Components are returned in order of their earliest member in the adjacency map,
    with atoms within each component in order of breadth-first discovery
    '''
    visited : set[AtomRef] = set()
    components : list[list[AtomRef]] = []
    for seed in partners: # DEV: dicts iterate in insertion order, which makes the result deterministic for a given input
        if seed in visited:
            continue

        visited.add(seed)
        component : list[AtomRef] = [seed]
        frontier  : list[AtomRef] = [seed]
        while frontier:
            next_frontier : list[AtomRef] = []
            for atom_ref in frontier:
                for partner_ref in partners[atom_ref]:
                    if partner_ref not in visited:
                        visited.add(partner_ref)
                        component.append(partner_ref)
                        next_frontier.append(partner_ref)
            frontier = next_frontier
        components.append(component)

    return components


class BondAggregator:
    '''
    Partitions collections of bonds into disjoint connected components ("islands")

    All atoms and bonds are tracked by IDENTITY; atoms which compare equal
    by value but are distinct instances are treated as distinct vertices
    '''
    @staticmethod
    def aggregate(bonds : Iterable[Bond]) -> list[list[Bond]]:
        '''
        Partition a collection of bonds into lists of bonds, one per connected component

        Parameters
        ----------
        bonds : Iterable[Bond]
            Referentially distinct bonds, no two of which join the same pair of atoms

        Returns
        -------
        bond_aggregates : list[list[Bond]]
            One list of bonds for each connected component of the bond graph;
            components appear in order of their earliest bond in the input,
            and the bonds of each component are kept in input order.
            Empty if no bonds are given

        Raises
        ------
        DuplicateBondError
            If the same Bond instance is given more than once
        ConflictingBondError
            If two distinct bonds join the same (unordered) pair of atoms
        '''
        bonds = list(bonds)
        if not bonds:
            return []

        if has_duplicate_references(bonds):
            raise DuplicateBondError(f'Bonds are not referentially distinct (repeated: {first_duplicate_reference(bonds)!r})')

        # index partner atoms and incident bonds by atom identity
        partners       : dict[AtomRef, list[AtomRef]] = {}
        bonds_by_atom  : dict[AtomRef, list[BondRef]] = {}
        bond_order     : dict[BondRef, int] = {}
        atom_pair_refs : set[frozenset[AtomRef]] = set()
        for idx, bond in enumerate(bonds):
            atom1, atom2 = bond.to_atom_pair()
            ref1, ref2 = Referential(atom1), Referential(atom2)

            atom_pair = frozenset((ref1, ref2))
            if atom_pair in atom_pair_refs:
                raise ConflictingBondError(f'At least two bonds are defined between the same pair of atoms ({atom1!r}, {atom2!r})')
            atom_pair_refs.add(atom_pair)

            partners.setdefault(ref1, []).append(ref2)
            partners.setdefault(ref2, []).append(ref1)

            bond_ref = Referential(bond)
            bond_order[bond_ref] = idx
            bonds_by_atom.setdefault(ref1, []).append(bond_ref)
            bonds_by_atom.setdefault(ref2, []).append(bond_ref)

        # convert each connected set of atoms into the set of bonds incident to those atoms
        bond_aggregates : list[list[Bond]] = []
        for atom_component in _connected_components(partners):
            component_bond_refs : set[BondRef] = set(
                bond_ref
                    for atom_ref in atom_component
                        for bond_ref in bonds_by_atom[atom_ref]
            )
            bond_aggregates.append([
                bond_ref.value
                    for bond_ref in sorted(component_bond_refs, key=bond_order.__getitem__)
            ])
        LOGGER.debug(f'Aggregated {len(bonds)} bonds among {len(partners)} atoms into {len(bond_aggregates)} connected component(s)')

        return bond_aggregates

    @staticmethod
    def infer_bonds(
        atoms : Collection[Atom],
        scaling_factor : float=DEFAULT_BOND_SCALING_FACTOR,
        position_unit : UnitLike=DEFAULT_POSITION_UNIT,
        bond_type : str=INFERRED_BOND_TYPE,
    ) -> list[Bond]:
        '''
        Infer bonds between all pairs of atoms which lie closer together
        than the sum of their covalent radii, scaled by "scaling_factor"

        Parameters
        ----------
        atoms : Collection[Atom]
            Referentially distinct atoms
        scaling_factor : float, default 1.15
            Positive multiplier on the sum of covalent radii defining the cutoff distance for a bond
        position_unit : UnitLike, default angstrom
            The unit of length in which atom positions are expressed
        bond_type : str, default "un"
            The bond type label assigned to all inferred bonds

        Returns
        -------
        bonds : list[Bond]
            New bonds, ordered by the positions of their atoms in "atoms"
        '''
        if scaling_factor <= 0.0:
            raise ValueError(f'Scaling factor not positive: {scaling_factor}')

        atoms = list(atoms)
        if has_duplicate_references(atoms):
            raise DuplicateAtomError(f'Atoms are not referentially distinct (repeated: {first_duplicate_reference(atoms)!r})')
        if len(atoms) < 2:
            return []

        radii = np.array([
            length_in(covalent_radius(atom.element), ANGSTROM, position_unit)
                for atom in atoms
        ])
        positions = np.vstack([atom.position for atom in atoms])

        inferred_bonds : list[Bond] = []
        for i, j in combinations(range(len(atoms)), 2):
            distance = np.linalg.norm(positions[j] - positions[i])
            if distance < scaling_factor * (radii[i] + radii[j]):
                inferred_bonds.append(Bond(atoms[i], atoms[j], bond_type))
        LOGGER.debug(f'Inferred {len(inferred_bonds)} bonds among {len(atoms)} atoms (scaling factor {scaling_factor})')

        return inferred_bonds

    @staticmethod
    def aggregate_atoms(
        atoms : Collection[Atom],
        scaling_factor : float=DEFAULT_BOND_SCALING_FACTOR,
        position_unit : UnitLike=DEFAULT_POSITION_UNIT,
    ) -> list[list[Atom]]:
        '''
        Partition a collection of atoms into groups of atoms which are connected by
        bonds inferred from interatomic distances (see BondAggregator.infer_bonds())

        Returns singleton lists for all atoms which are not bonded to any other atom,
        followed by the atoms of each bonded component (in order of the input atoms)
        '''
        atoms = list(atoms)
        inferred_bonds = BondAggregator.infer_bonds(atoms, scaling_factor=scaling_factor, position_unit=position_unit)

        bonded_components : list[list[Atom]] = []
        bonded_atom_refs : set[AtomRef] = set()
        for bond_aggregate in BondAggregator.aggregate(inferred_bonds):
            component_refs = set(Referential(atom) for bond in bond_aggregate for atom in bond.atoms)
            bonded_atom_refs |= component_refs
            bonded_components.append([atom for atom in atoms if Referential(atom) in component_refs])

        lone_atoms = [[atom] for atom in atoms if Referential(atom) not in bonded_atom_refs]

        return lone_atoms + bonded_components
