'''Record types of the Tripos Mol2 format (https://docs.chemaxon.com/display/docs/formats_tripos-mol2-format.md)'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import re
from typing import (
    Any,
    ClassVar,
    Hashable,
    Iterable,
    Optional,
    Sequence,
    Type,
    TypeVar,
    Union,
)
E = TypeVar('E', bound='TriposEnum')

from enum import Enum
from dataclasses import dataclass, field

from ...chemistry.core import ElementLike, is_element_symbol
from ...geometry.arraytypes import Vector3
from ...species.atom import Atom


# Custom Exceptions
class Mol2FormatError(ValueError):
    '''Raised when Mol2 text is malformed, or a species cannot be expressed in Mol2 format'''
    pass


# Format constants
FOUR_STARS : str = '****' # placeholder for an omitted string field
FIELD_SEPARATOR : str = ' '
STATUS_BIT_SEPARATOR : str = '|'
RTI_PREFIX : str = '@<TRIPOS>' # Record Type Indicator

def optional_string_field(field_str : str) -> Optional[str]:
    '''Interpret a string field, treating the omission placeholder as None'''
    return None if (field_str == FOUR_STARS) else field_str

def string_field(value : Optional[Any]) -> str:
    '''Render an optional value as a string field, using the omission placeholder for None'''
    return FOUR_STARS if (value is None) else str(value)


# Enumerated field values
class TriposEnum(Enum):
    '''Enum whose member values are the literal strings which appear in Mol2 files'''
    @classmethod
    def from_field(cls : Type[E], field_str : str) -> Optional[E]:
        '''Look up a member from its Mol2 string value (case-insensitively); the omission placeholder gives None'''
        if (field_str := field_str.strip()) in (FOUR_STARS, ''):
            return None

        for member in cls:
            if member.value.lower() == field_str.lower():
                return member
        raise Mol2FormatError(f'"{field_str}" is not a valid {cls.__name__} value')

    @classmethod
    def set_from_field(cls : Type[E], field_str : str) -> frozenset[E]:
        '''Parse a "|"-delimited collection of status bits'''
        if (field_str := field_str.strip()) in (FOUR_STARS, ''):
            return frozenset()
        return frozenset(cls.from_field(bit) for bit in field_str.split(STATUS_BIT_SEPARATOR))

    @staticmethod
    def set_to_field(members : Iterable['TriposEnum']) -> Optional[str]:
        '''Render a collection of status bits, or None if the collection is empty'''
        members = sorted(members, key=lambda member : member.value) # sorted for reproducible output
        if not members:
            return None
        return STATUS_BIT_SEPARATOR.join(member.value for member in members)

class TriposRecordType(TriposEnum):
    '''Record types which are understood when reading and writing Mol2; all others are skipped'''
    MOLECULE = 'MOLECULE'
    ATOM = 'ATOM'
    BOND = 'BOND'
    SUBSTRUCTURE = 'SUBSTRUCTURE'

    @property
    def rti(self) -> str:
        '''The record type indicator line which opens a section of this record type'''
        return f'{RTI_PREFIX}{self.value}'

class MolType(TriposEnum):
    SMALL = 'SMALL'
    BIOPOLYMER = 'BIOPOLYMER'
    PROTEIN = 'PROTEIN'
    NUCLEIC_ACID = 'NUCLEIC_ACID'
    SACCHARIDE = 'SACCHARIDE'

class ChargeType(TriposEnum):
    NO_CHARGES = 'NO_CHARGES'
    DEL_RE = 'DEL_RE'
    GASTEIGER = 'GASTEIGER'
    GAST_HUCK = 'GAST_HUCK'
    HUCKEL = 'HUCKEL'
    PULLMAN = 'PULLMAN'
    GAUSS80_CHARGES = 'GAUSS80_CHARGES'
    AMPAC_CHARGES = 'AMPAC_CHARGES'
    MULLIKEN_CHARGES = 'MULLIKEN_CHARGES'
    DICT_CHARGES = 'DICT_CHARGES'
    MMFF94_CHARGES = 'MMFF94_CHARGES'
    USER_CHARGES = 'USER_CHARGES'

class MolStatusBit(TriposEnum):
    SYSTEM = 'SYSTEM'
    INVALID_CHARGES = 'INVALID_CHARGES'
    ANALYZED = 'ANALYZED'
    SUBSTITUTED = 'SUBSTITUTED'
    ALTERED = 'ALTERED'
    REF_ANGLE = 'REF_ANGLE'

class AtomStatusBit(TriposEnum):
    DSPMOD = 'DSPMOD'
    TYPECOL = 'TYPECOL'
    CAP = 'CAP'
    BACKBONE = 'BACKBONE'
    DICT = 'DICT'
    ESSENTIAL = 'ESSENTIAL'
    WATER = 'WATER'
    DIRECT = 'DIRECT'

class BondStatusBit(TriposEnum):
    TYPECOL = 'TYPECOL'
    GROUP = 'GROUP'
    CAP = 'CAP'
    BACKBONE = 'BACKBONE'
    DICT = 'DICT'
    INTERRES = 'INTERRES'

class SubstType(TriposEnum):
    TEMP = 'temp'
    PERM = 'perm'
    RESIDUE = 'residue'
    GROUP = 'group'
    DOMAIN = 'domain'

class SubstStatusBit(TriposEnum):
    LEAF = 'LEAF'
    ROOT = 'ROOT'
    TYPECOL = 'TYPECOL'
    DICT = 'DICT'
    BACKWARD = 'BACKWARD'
    BLOCK = 'BLOCK'

class TriposBondType(TriposEnum):
    SINGLE = '1'
    DOUBLE = '2'
    TRIPLE = '3'
    AMIDE = 'am'
    AROMATIC = 'ar'
    DUMMY = 'du'
    UNKNOWN = 'un'
    NOT_CONNECTED = 'nc'

    @classmethod
    def from_label(cls, label : str) -> 'TriposBondType':
        '''
        Interpret an arbitrary bond type label as a Tripos bond type
        Accepts Tripos codes (e.g. "1", "ar") and member names (e.g. "SINGLE", "aromatic"), case-insensitively
        '''
        label = str(label).strip()
        for member in cls:
            if label.lower() in (member.value.lower(), member.name.lower()):
                return member
        raise Mol2FormatError(f'Bond type label "{label}" has no Tripos bond type equivalent')


# Records
@dataclass(frozen=True)
class TriposMolecule:
    '''The data lines of a MOLECULE record'''
    mol_name : Optional[str]
    num_atoms : int
    num_bonds : Optional[int] = None
    num_subst : Optional[int] = None
    num_feat : Optional[int] = None
    num_sets : Optional[int] = None
    mol_type : Optional[MolType] = None
    charge_type : Optional[ChargeType] = None
    status_bits : frozenset[MolStatusBit] = field(default_factory=frozenset)
    mol_comment : Optional[str] = None

    NUM_DATA_LINES : ClassVar[int] = 6

    def __post_init__(self) -> None:
        counts = [self.num_atoms, self.num_bonds, self.num_subst, self.num_feat, self.num_sets]
        for lower, higher in zip(counts[:-1], counts[1:]): # DEVNOTE: counts may only be omitted from the right
            if (higher is not None) and (lower is None):
                raise Mol2FormatError('Molecule record counts may only be omitted from the end of the count line')

    @classmethod
    def from_data_lines(cls, data_lines : Sequence[str]) -> 'TriposMolecule':
        '''Parse the (up to six) data lines of a MOLECULE record'''
        data_lines = [line.strip() for line in data_lines]
        if not (2 <= len(data_lines) <= cls.NUM_DATA_LINES):
            raise Mol2FormatError(f'MOLECULE record must have between 2 and {cls.NUM_DATA_LINES} data lines, found {len(data_lines)}')
        data_lines += [''] * (cls.NUM_DATA_LINES - len(data_lines)) # pad omitted trailing lines

        try:
            counts = [int(count) for count in data_lines[1].split()]
        except ValueError:
            raise Mol2FormatError(f'Invalid MOLECULE count line: "{data_lines[1]}"')
        if not (1 <= len(counts) <= 5):
            raise Mol2FormatError(f'MOLECULE count line must have between 1 and 5 counts, found {len(counts)}')
        counts += [None] * (5 - len(counts))
        num_atoms, num_bonds, num_subst, num_feat, num_sets = counts

        return cls(
            mol_name=optional_string_field(data_lines[0]) or None,
            num_atoms=num_atoms,
            num_bonds=num_bonds,
            num_subst=num_subst,
            num_feat=num_feat,
            num_sets=num_sets,
            mol_type=MolType.from_field(data_lines[2]),
            charge_type=ChargeType.from_field(data_lines[3]),
            status_bits=MolStatusBit.set_from_field(data_lines[4]),
            mol_comment=optional_string_field(data_lines[5]) or None,
        )

    def to_data_lines(self) -> list[str]:
        counts = [self.num_atoms, self.num_bonds, self.num_subst, self.num_feat, self.num_sets]
        while counts[-1] is None:
            counts.pop()

        data_lines = [
            string_field(self.mol_name),
            FIELD_SEPARATOR.join(str(count) for count in counts),
            string_field(self.mol_type.value if self.mol_type else None),
            string_field(self.charge_type.value if self.charge_type else None),
        ]
        status_bits = TriposEnum.set_to_field(self.status_bits)
        if (status_bits is not None) or (self.mol_comment is not None):
            data_lines.append(string_field(status_bits))
        if self.mol_comment is not None:
            data_lines.append(self.mol_comment)

        return data_lines


ELEMENT_SYMBOL_REGEX = re.compile(r'^([A-Z][a-z]?)') # leading letters of an atom type or atom name

def infer_element_symbol(*candidates : Optional[str]) -> str:
    '''
    Infer an element symbol from the leading letters of the first of the
    candidate strings (e.g. atom type, then atom name) which starts with one
    '''
    for candidate in candidates:
        if candidate is None:
            continue

        match = ELEMENT_SYMBOL_REGEX.match(candidate)
        if match is None:
            continue

        symbol = match.group(1)
        if is_element_symbol(symbol):
            return symbol
        elif is_element_symbol(symbol[0]): # e.g. "CA" for an alpha carbon, or "Hg" vs "HG" hydrogen naming
            return symbol[0]
    raise Mol2FormatError(f'Could not infer an element symbol from any of {candidates}')


class TriposAtom(Atom):
    '''
    An Atom read from (or destined for) an ATOM record of a Mol2 file

    Unless given explicitly, the element is inferred from the leading letters
    of the atom type, falling back to those of the atom name
    '''
    def __init__(
        self,
        atom_id : int,
        atom_name : Optional[str],
        position : Union[Vector3, Sequence[float]],
        atom_type : Optional[str]=None,
        subst_id : Optional[int]=None,
        subst_name : Optional[str]=None,
        charge : Optional[float]=None,
        status_bits : Iterable[AtomStatusBit]=frozenset(),
        element : Optional[Union[ElementLike, str, int]]=None,
        tag : Optional[Hashable]=None,
    ) -> None:
        if element is None:
            element = infer_element_symbol(atom_type, atom_name)
        super().__init__(element, position, charge=charge, tag=tag)

        self._atom_id = int(atom_id)
        self._atom_name = atom_name
        self._atom_type = atom_type
        self._subst_id = subst_id
        self._subst_name = subst_name
        self._status_bits = frozenset(status_bits)

    @classmethod
    def from_atom(cls, atom : Atom, atom_id : int) -> 'TriposAtom':
        '''Create a TriposAtom with the same chemical and spatial properties as an arbitrary Atom'''
        return cls(
            atom_id=atom_id,
            atom_name=f'{atom.symbol}{atom_id}',
            position=atom.position,
            atom_type=atom.symbol,
            charge=atom.charge,
            element=atom.element,
            tag=atom.tag,
        )

    # Record fields
    @property
    def atom_id(self) -> int:
        return self._atom_id

    @property
    def atom_name(self) -> Optional[str]:
        return self._atom_name

    @property
    def atom_type(self) -> Optional[str]:
        return self._atom_type

    @property
    def subst_id(self) -> Optional[int]:
        return self._subst_id

    @property
    def subst_name(self) -> Optional[str]:
        return self._subst_name

    @property
    def status_bits(self) -> frozenset[AtomStatusBit]:
        return self._status_bits

    def _copy_kwargs(self) -> dict[str, Any]:
        return {
            **super()._copy_kwargs(),
            'atom_id'     : self._atom_id,
            'atom_name'   : self._atom_name,
            'atom_type'   : self._atom_type,
            'subst_id'    : self._subst_id,
            'subst_name'  : self._subst_name,
            'status_bits' : self._status_bits,
        }

    # Mol2 I/O
    @classmethod
    def from_data_line(cls, data_line : str) -> 'TriposAtom':
        fields = data_line.split()
        if len(fields) < 6:
            raise Mol2FormatError(f'ATOM record must have at least 6 fields, found {len(fields)}: "{data_line}"')
        fields += [FOUR_STARS] * (10 - len(fields))

        try:
            atom_id = int(fields[0])
            position = [float(coord) for coord in fields[2:5]]
            subst_id = None if (fields[6] == FOUR_STARS) else int(fields[6])
            charge = None if (fields[8] == FOUR_STARS) else float(fields[8])
        except ValueError:
            raise Mol2FormatError(f'Invalid numeric field in ATOM record: "{data_line}"')

        return cls(
            atom_id=atom_id,
            atom_name=optional_string_field(fields[1]),
            position=position,
            atom_type=optional_string_field(fields[5]),
            subst_id=subst_id,
            subst_name=optional_string_field(fields[7]),
            charge=charge,
            status_bits=AtomStatusBit.set_from_field(fields[9]),
        )

    def to_data_line(self) -> str:
        x, y, z = self.position
        fields = [
            f'{self._atom_id:>7d}',
            f'{string_field(self._atom_name):<8}',
            f'{x:>10.4f}',
            f'{y:>10.4f}',
            f'{z:>10.4f}',
            f'{string_field(self._atom_type):<8}',
        ]
        optional_fields = [
            self._subst_id,
            self._subst_name,
            None if (self.charge is None) else f'{self.charge:.4f}',
            TriposEnum.set_to_field(self._status_bits),
        ]
        while optional_fields and (optional_fields[-1] is None): # only trailing omitted fields may be dropped entirely
            optional_fields.pop()
        fields.extend(string_field(value) for value in optional_fields)

        return FIELD_SEPARATOR.join(fields)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(atom_id={self._atom_id}, atom_name={self._atom_name!r}, element={self.symbol}, charge={self.charge})'


@dataclass(frozen=True)
class TriposBond:
    '''The data line of a BOND record'''
    bond_id : int
    origin_atom_id : int
    target_atom_id : int
    bond_type : TriposBondType
    status_bits : frozenset[BondStatusBit] = field(default_factory=frozenset)

    @classmethod
    def from_data_line(cls, data_line : str) -> 'TriposBond':
        fields = data_line.split()
        if not (4 <= len(fields) <= 5):
            raise Mol2FormatError(f'BOND record must have 4 or 5 fields, found {len(fields)}: "{data_line}"')

        try:
            bond_id, origin_atom_id, target_atom_id = (int(field_str) for field_str in fields[:3])
        except ValueError:
            raise Mol2FormatError(f'Invalid numeric field in BOND record: "{data_line}"')

        bond_type = TriposBondType.from_field(fields[3])
        if bond_type is None:
            raise Mol2FormatError(f'BOND record is missing a bond type: "{data_line}"')

        return cls(
            bond_id=bond_id,
            origin_atom_id=origin_atom_id,
            target_atom_id=target_atom_id,
            bond_type=bond_type,
            status_bits=BondStatusBit.set_from_field(fields[4]) if (len(fields) == 5) else frozenset(),
        )

    def to_data_line(self) -> str:
        fields = [
            f'{self.bond_id:>6d}',
            f'{self.origin_atom_id:>5d}',
            f'{self.target_atom_id:>5d}',
            f'{self.bond_type.value:<4}',
        ]
        status_bits = TriposEnum.set_to_field(self.status_bits)
        if status_bits is not None:
            fields.append(status_bits)

        return FIELD_SEPARATOR.join(fields).rstrip()


@dataclass(frozen=True)
class TriposSubstructure:
    '''
    The data line of a SUBSTRUCTURE record

    Fields after the root atom may only be omitted from the end of the line;
    the comment runs to the end of the line and may contain spaces
    '''
    subst_id : int
    subst_name : Optional[str]
    root_atom : int
    subst_type : Optional[SubstType] = None
    dict_type : Optional[int] = None
    chain : Optional[str] = None
    sub_type : Optional[str] = None
    inter_bonds : Optional[int] = None
    status_bits : frozenset[SubstStatusBit] = field(default_factory=frozenset)
    comment : Optional[str] = None

    NUM_FIELDS : ClassVar[int] = 10

    @classmethod
    def from_data_line(cls, data_line : str) -> 'TriposSubstructure':
        fields = data_line.split(maxsplit=cls.NUM_FIELDS - 1)
        if len(fields) < 3:
            raise Mol2FormatError(f'SUBSTRUCTURE record must have at least 3 fields, found {len(fields)}: "{data_line}"')
        fields += [FOUR_STARS] * (cls.NUM_FIELDS - len(fields))

        try:
            subst_id = int(fields[0])
            root_atom = int(fields[2])
            dict_type = None if (fields[4] == FOUR_STARS) else int(fields[4])
            inter_bonds = None if (fields[7] == FOUR_STARS) else int(fields[7])
        except ValueError:
            raise Mol2FormatError(f'Invalid numeric field in SUBSTRUCTURE record: "{data_line}"')

        return cls(
            subst_id=subst_id,
            subst_name=optional_string_field(fields[1]),
            root_atom=root_atom,
            subst_type=SubstType.from_field(fields[3]),
            dict_type=dict_type,
            chain=optional_string_field(fields[5]),
            sub_type=optional_string_field(fields[6]),
            inter_bonds=inter_bonds,
            status_bits=SubstStatusBit.set_from_field(fields[8]),
            comment=optional_string_field(fields[9].strip()),
        )

    def to_data_line(self) -> str:
        fields = [
            f'{self.subst_id:>6d}',
            f'{string_field(self.subst_name):<8}',
            f'{self.root_atom:>6d}',
        ]
        optional_fields = [
            self.subst_type.value if self.subst_type else None,
            self.dict_type,
            self.chain,
            self.sub_type,
            self.inter_bonds,
            TriposEnum.set_to_field(self.status_bits),
            self.comment,
        ]
        while optional_fields and (optional_fields[-1] is None):
            optional_fields.pop()
        fields.extend(string_field(value) for value in optional_fields)

        return FIELD_SEPARATOR.join(fields).rstrip()
