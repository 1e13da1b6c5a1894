'''Renumbering of the substructure and atom IDs of Supermolecules made of TriposAtoms'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import Optional, TypeVar, Union

from .records import TriposAtom
from ...species.supermolecule import Supermolecule
from ...species.fragmented import FragmentedSupermolecule
from ...utils.containers import Referential

S = TypeVar('S', bound=Union[Supermolecule, FragmentedSupermolecule])


def renumbered_substructures(
        supermol : S,
        subst_id_start : int=1,
        atom_id_start : int=1,
        name : Optional[str]=None,
    ) -> S:
    '''
    Renumber the substructure and atom IDs of a Supermolecule whose atoms are all TriposAtoms

    Substructure IDs are reassigned consecutively from "subst_id_start", in order of
    first appearance among the atoms. Atom IDs are then reassigned consecutively from
    "atom_id_start", first for the atoms of each substructure (in order of new substructure
    ID), then for atoms without a substructure; the relative order of atoms is otherwise kept.
    Substructure names, positions, and all other atom fields are unchanged

    Parameters
    ----------
    supermol : Supermolecule or FragmentedSupermolecule
        The Supermolecule to renumber; is not modified
    subst_id_start : int, default 1
        The first substructure ID assigned
    atom_id_start : int, default 1
        The first atom ID assigned
    name : Optional[str], default None
        Name of the renumbered Supermolecule; if None, the current name is kept

    Returns
    -------
    renumbered : Supermolecule or FragmentedSupermolecule
        A Supermolecule of the same type, with the same islands (and fragments) and bonds

    Raises
    ------
    TypeError
        If any atom of "supermol" is not a TriposAtom
    '''
    atoms = supermol.atoms
    for atom in atoms:
        if not isinstance(atom, TriposAtom):
            raise TypeError(f'Can only renumber Supermolecules of TriposAtoms, found {atom!r}')

    new_subst_ids : dict[int, int] = {}
    for atom in atoms:
        if (atom.subst_id is not None) and (atom.subst_id not in new_subst_ids):
            new_subst_ids[atom.subst_id] = subst_id_start + len(new_subst_ids)

    ## DEV: sort is stable, so atoms keep their relative order within each substructure
    unsubstructured_rank = subst_id_start + len(new_subst_ids)
    ordered_atoms = sorted(
        atoms,
        key=lambda atom : unsubstructured_rank if (atom.subst_id is None) else new_subst_ids[atom.subst_id],
    )
    new_atom_ids : dict[Referential[TriposAtom], int] = {
        Referential(atom) : atom_id
            for atom_id, atom in enumerate(ordered_atoms, start=atom_id_start)
    }

    return supermol.map(
        lambda atom : atom.copy(
            atom_id=new_atom_ids[Referential(atom)],
            subst_id=None if (atom.subst_id is None) else new_subst_ids[atom.subst_id],
        ),
        name=name,
    )
