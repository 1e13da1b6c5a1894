'''Interfaces between supermol Supermolecules and RDKit Mols'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import logging
LOGGER = logging.getLogger(__name__)

from typing import Optional, Union

import numpy as np

from rdkit.Chem.rdchem import (
    Atom as RDAtom,
    BondType,
    Mol,
    RWMol,
    Conformer,
)
from rdkit.Geometry import Point3D

from ..species.atom import Atom
from ..species.bond import Bond
from ..species.supermolecule import Supermolecule
from ..species.fragmented import FragmentedSupermolecule
from ..utils.containers import Referential

# Module-wide defaults for bond type conversion
## Export; keys are lower-cased bond type labels
RDKIT_BOND_TYPES : dict[str, BondType] = {
    '1'        : BondType.SINGLE,
    'single'   : BondType.SINGLE,
    'am'       : BondType.SINGLE, # amide C-N bonds are formally single
    'amide'    : BondType.SINGLE,
    '2'        : BondType.DOUBLE,
    'double'   : BondType.DOUBLE,
    '3'        : BondType.TRIPLE,
    'triple'   : BondType.TRIPLE,
    'ar'       : BondType.AROMATIC,
    'aromatic' : BondType.AROMATIC,
    'un'       : BondType.UNSPECIFIED,
    'unknown'  : BondType.UNSPECIFIED,
}
## Import
BOND_TYPE_LABELS : dict[BondType, str] = {
    BondType.SINGLE   : '1',
    BondType.DOUBLE   : '2',
    BondType.TRIPLE   : '3',
    BondType.AROMATIC : 'ar',
}
DEFAULT_BOND_TYPE_LABEL : str = 'un'

RDMOL_NAME_PROP : str = '_Name'
PARTIAL_CHARGE_PROP : str = 'partial_charge' # preserves non-integer charges, which RDKit formal charges cannot hold


def rdkit_bond_type(bond_type_label : str) -> BondType:
    '''The RDKit BondType corresponding to a bond type label; unrecognized labels give an UNSPECIFIED bond'''
    rdbond_type = RDKIT_BOND_TYPES.get(str(bond_type_label).lower(), None)
    if rdbond_type is None:
        LOGGER.warning(f'Bond type "{bond_type_label}" has no RDKit equivalent; exporting as {BondType.UNSPECIFIED}')
        return BondType.UNSPECIFIED
    return rdbond_type

def supermolecule_to_rdkit(supermol : Union[Supermolecule, FragmentedSupermolecule]) -> Mol:
    '''
    Convert a Supermolecule to an RDKit Mol, with one atom per atom (in the order of "supermol.atoms")

    Atom positions are set on a Conformer bound to the returned Mol. Charges are rounded to
    formal charges, with the exact (partial) charge kept as an atom property.
    Will return a single Mol, even if the Supermolecule contains several islands
    '''
    mol = RWMol()
    conf = Conformer(supermol.num_atoms) # preallocate space for all atoms
    atom_idx_map : dict[Referential[Atom], int] = {}

    # 1) insert atoms
    for atom in supermol.atoms:
        rdatom = RDAtom(atom.element.number)
        rdatom.SetNoImplicit(True) # all atoms present are taken to be explicit
        if atom.charge is not None:
            rdatom.SetFormalCharge(round(atom.charge))
            rdatom.SetDoubleProp(PARTIAL_CHARGE_PROP, float(atom.charge))

        idx : int = mol.AddAtom(rdatom)
        atom_idx_map[Referential(atom)] = idx
        conf.SetAtomPosition(idx, Point3D(*(float(coord) for coord in atom.position)))

    # 2) insert bonds
    for bond in supermol.bonds():
        atom1, atom2 = bond.to_atom_pair()
        idx1, idx2 = atom_idx_map[Referential(atom1)], atom_idx_map[Referential(atom2)]
        rdbond_type = rdkit_bond_type(bond.bond_type)
        mol.AddBond(idx1, idx2, order=rdbond_type)

        if rdbond_type == BondType.AROMATIC: # DEV: RDKit does not infer aromaticity flags from bond order alone
            mol.GetBondBetweenAtoms(idx1, idx2).SetIsAromatic(True)
            mol.GetAtomWithIdx(idx1).SetIsAromatic(True)
            mol.GetAtomWithIdx(idx2).SetIsAromatic(True)

    # 3) cleanup
    mol.AddConformer(conf, assignId=True)
    mol = Mol(mol) # freeze writable Mol before returning
    if supermol.name is not None:
        mol.SetProp(RDMOL_NAME_PROP, supermol.name)
    LOGGER.debug(f'Exported {supermol!r} to RDKit Mol with {mol.GetNumAtoms()} atoms and {mol.GetNumBonds()} bonds')

    return mol

def supermolecule_from_rdkit(
    rdmol : Mol,
    conformer_idx : Optional[int]=None,
    name : Optional[str]=None,
) -> Supermolecule:
    '''
    Convert an RDKit Mol to a Supermolecule, recovering islands from the Mol's bonds

    Parameters
    ----------
    rdmol : Mol
        The RDKit Mol to convert; must not contain dummy (atomic number 0) atoms
    conformer_idx : Optional[int], default None
        ID of the Conformer to take positions from; if None, the default Conformer is used
        All atoms are placed at the origin if the Mol has no Conformers
    name : Optional[str], default None
        Name of the Supermolecule; if None, the Mol's name (if any) is used

    Returns
    -------
    supermol : Supermolecule
        A Supermolecule whose atoms correspond one-to-one (and in order) to the atoms of "rdmol"
    '''
    if rdmol.GetNumConformers() > 0:
        positions = rdmol.GetConformer(-1 if (conformer_idx is None) else conformer_idx).GetPositions()
    else:
        if conformer_idx is not None:
            raise ValueError(f'Mol has no Conformers, cannot take positions from Conformer {conformer_idx}')
        positions = np.zeros((rdmol.GetNumAtoms(), 3), dtype=float)

    atoms : list[Atom] = []
    for rdatom in rdmol.GetAtoms():
        if rdatom.HasProp(PARTIAL_CHARGE_PROP):
            charge = rdatom.GetDoubleProp(PARTIAL_CHARGE_PROP)
        else:
            charge = float(rdatom.GetFormalCharge())
        atoms.append(Atom(rdatom.GetAtomicNum(), positions[rdatom.GetIdx()], charge=charge))

    bonds : list[Bond] = [
        Bond(
            atoms[rdbond.GetBeginAtomIdx()],
            atoms[rdbond.GetEndAtomIdx()],
            BOND_TYPE_LABELS.get(rdbond.GetBondType(), DEFAULT_BOND_TYPE_LABEL),
        )
            for rdbond in rdmol.GetBonds()
    ]

    if (name is None) and rdmol.HasProp(RDMOL_NAME_PROP):
        name = rdmol.GetProp(RDMOL_NAME_PROP) or None

    return Supermolecule.from_atoms_and_bonds(atoms, bonds, name=name)
