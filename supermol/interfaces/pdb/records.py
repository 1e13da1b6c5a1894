'''Fixed-column record types of the Protein Data Bank (PDB) format (https://www.wwpdb.org/documentation/file-format)'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import re
from typing import (
    Any,
    ClassVar,
    Hashable,
    Optional,
    Sequence,
    Union,
)
from dataclasses import dataclass

from ...chemistry.core import ElementLike, element_from
from ...geometry.arraytypes import Vector3
from ...species.atom import Atom


# Custom Exceptions
class PdbFormatError(ValueError):
    '''Raised when PDB text is malformed, or a species cannot be expressed in PDB format'''
    pass


# Column layout (0-indexed, end-exclusive slices, as in the wwPDB format guide)
NUM_COLUMNS : int = 80
RECORD_NAME_COLS : slice = slice(0, 6)
SERIAL_COLS : slice = slice(6, 11)
ATOM_NAME_COLS : slice = slice(12, 16)
ALT_LOC_COL : int = 16
RES_NAME_COLS : slice = slice(17, 20)
CHAIN_ID_COL : int = 21
RES_SEQ_COLS : slice = slice(22, 26)
I_CODE_COL : int = 26
X_COLS : slice = slice(30, 38)
Y_COLS : slice = slice(38, 46)
Z_COLS : slice = slice(46, 54)
OCCUPANCY_COLS : slice = slice(54, 60)
TEMP_FACTOR_COLS : slice = slice(60, 66)
ELEMENT_COLS : slice = slice(76, 78)
CHARGE_COLS : slice = slice(78, 80)
CONECT_SERIAL_COLS : tuple[slice, ...] = (slice(11, 16), slice(16, 21), slice(21, 26), slice(26, 31))

MAX_SERIAL : int = 99999
ATOM_RECORD_NAMES : tuple[str, ...] = ('ATOM', 'HETATM')


# Field helpers
def padded(line : str) -> str:
    '''Right-pad a record line to the full record width, rejecting lines which are too long'''
    line = line.rstrip('\r\n')
    if len(line.rstrip()) > NUM_COLUMNS:
        raise PdbFormatError(f'Record exceeds {NUM_COLUMNS} columns: "{line}"')
    return f'{line:<{NUM_COLUMNS}}'

def string_field(line : str, cols : Union[slice, int]) -> Optional[str]:
    '''The stripped contents of a field, or None if the field is blank'''
    field = line[cols].strip()
    return field if field else None

def int_field(line : str, cols : Union[slice, int]) -> Optional[int]:
    field = string_field(line, cols)
    if field is None:
        return None
    try:
        return int(field)
    except ValueError:
        raise PdbFormatError(f'Expected integer in columns {cols}, found "{field}"')

def float_field(line : str, cols : Union[slice, int]) -> Optional[float]:
    field = string_field(line, cols)
    if field is None:
        return None
    try:
        return float(field)
    except ValueError:
        raise PdbFormatError(f'Expected number in columns {cols}, found "{field}"')

def char_or_blank(value : Optional[str]) -> str:
    return ' ' if (value is None) else value[:1]

def optional_number(value : Optional[Union[int, float]], fmt : str, width : int) -> str:
    return ' ' * width if (value is None) else format(value, fmt)

PDB_CHARGE_REGEX = re.compile(r'^(?P<magnitude>\d)(?P<sign>[+-])$') # e.g. "1+", "2-"

def parse_charge(field : Optional[str]) -> Optional[float]:
    '''Interpret a PDB charge field, either in the standard "<digit><sign>" form or as a plain integer'''
    if field is None:
        return None

    if (match := PDB_CHARGE_REGEX.match(field)):
        magnitude = int(match.group('magnitude'))
        return float(magnitude if match.group('sign') == '+' else -magnitude)
    try:
        return float(int(field))
    except ValueError:
        raise PdbFormatError(f'Invalid atom charge field: "{field}"')

def format_charge(charge : Optional[float]) -> str:
    '''Render a charge as a 2-column PDB charge field; charges are rounded to integers'''
    if charge is None:
        return '  '

    formal_charge = round(charge)
    if abs(formal_charge) > 9:
        raise PdbFormatError(f'Charge {charge} cannot be represented in a 2-column PDB charge field')
    if formal_charge == 0:
        return ' 0' # DEVNOTE: distinguishes a known neutral charge from an unknown (blank) one
    return f'{abs(formal_charge)}{"+" if formal_charge > 0 else "-"}'


# Records
class PdbAtom(Atom):
    '''
    An Atom read from (or destined for) an ATOM or HETATM record of a PDB file

    Unless given explicitly, the element is inferred from the leading
    (non-numeric) characters of the atom name, following PDB name justification
    '''
    def __init__(
        self,
        serial : int,
        name : Optional[str],
        position : Union[Vector3, Sequence[float]],
        element : Optional[Union[ElementLike, str, int]]=None,
        charge : Optional[float]=None,
        alt_loc : Optional[str]=None,
        res_name : Optional[str]=None,
        chain_id : Optional[str]=None,
        res_seq : Optional[int]=None,
        i_code : Optional[str]=None,
        occupancy : Optional[float]=None,
        temp_factor : Optional[float]=None,
        record_name : str='ATOM',
        tag : Optional[Hashable]=None,
    ) -> None:
        if record_name not in ATOM_RECORD_NAMES:
            raise PdbFormatError(f'Atom record name must be one of {ATOM_RECORD_NAMES}, not "{record_name}"')
        if element is None:
            element = infer_element_from_name(name)
        super().__init__(element, position, charge=charge, tag=tag)

        self._serial = int(serial)
        self._name = name
        self._alt_loc = alt_loc
        self._res_name = res_name
        self._chain_id = chain_id
        self._res_seq = res_seq
        self._i_code = i_code
        self._occupancy = occupancy
        self._temp_factor = temp_factor
        self._record_name = record_name

    @classmethod
    def from_atom(cls, atom : Atom, serial : int) -> 'PdbAtom':
        '''Create a PdbAtom with the same chemical and spatial properties as an arbitrary Atom'''
        return cls(
            serial=serial,
            name=atom.symbol.upper(),
            position=atom.position,
            element=atom.element,
            charge=atom.charge,
            record_name='HETATM',
            tag=atom.tag,
        )

    # Record fields
    @property
    def serial(self) -> int:
        return self._serial

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def alt_loc(self) -> Optional[str]:
        return self._alt_loc

    @property
    def res_name(self) -> Optional[str]:
        return self._res_name

    @property
    def chain_id(self) -> Optional[str]:
        return self._chain_id

    @property
    def res_seq(self) -> Optional[int]:
        return self._res_seq

    @property
    def i_code(self) -> Optional[str]:
        return self._i_code

    @property
    def occupancy(self) -> Optional[float]:
        return self._occupancy

    @property
    def temp_factor(self) -> Optional[float]:
        return self._temp_factor

    @property
    def record_name(self) -> str:
        return self._record_name

    def _copy_kwargs(self) -> dict[str, Any]:
        return {
            **super()._copy_kwargs(),
            'serial'      : self._serial,
            'name'        : self._name,
            'alt_loc'     : self._alt_loc,
            'res_name'    : self._res_name,
            'chain_id'    : self._chain_id,
            'res_seq'     : self._res_seq,
            'i_code'      : self._i_code,
            'occupancy'   : self._occupancy,
            'temp_factor' : self._temp_factor,
            'record_name' : self._record_name,
        }

    # PDB I/O
    @classmethod
    def from_line(cls, line : str) -> 'PdbAtom':
        line = padded(line)
        record_name = line[RECORD_NAME_COLS].strip()
        if record_name not in ATOM_RECORD_NAMES:
            raise PdbFormatError(f'Not an ATOM or HETATM record: "{line.rstrip()}"')

        serial = int_field(line, SERIAL_COLS)
        if serial is None:
            raise PdbFormatError(f'Atom record is missing a serial number: "{line.rstrip()}"')
        coords = [float_field(line, cols) for cols in (X_COLS, Y_COLS, Z_COLS)]
        if any(coord is None for coord in coords):
            raise PdbFormatError(f'Atom record is missing coordinates: "{line.rstrip()}"')

        name = string_field(line, ATOM_NAME_COLS)
        element_symbol = string_field(line, ELEMENT_COLS)
        try:
            element = element_from(element_symbol) if (element_symbol is not None) else infer_element_from_name(line[ATOM_NAME_COLS])
        except ValueError as err:
            raise PdbFormatError(f'Could not determine element of atom {serial}: {err}') from err

        return cls(
            serial=serial,
            name=name,
            position=coords,
            element=element,
            charge=parse_charge(string_field(line, CHARGE_COLS)),
            alt_loc=string_field(line, ALT_LOC_COL),
            res_name=string_field(line, RES_NAME_COLS),
            chain_id=string_field(line, CHAIN_ID_COL),
            res_seq=int_field(line, RES_SEQ_COLS),
            i_code=string_field(line, I_CODE_COL),
            occupancy=float_field(line, OCCUPANCY_COLS),
            temp_factor=float_field(line, TEMP_FACTOR_COLS),
            record_name=record_name,
        )

    def _name_field(self) -> str:
        '''Atom name, justified as per PDB convention: names of 1-letter elements start in the second column of the field'''
        name = self._name or ''
        if len(name) > 4:
            raise PdbFormatError(f'Atom name "{name}" exceeds 4 characters')
        if (len(name) < 4) and (len(self.symbol) == 1):
            return f' {name:<3}'
        return f'{name:<4}'

    def to_line(self) -> str:
        if not (0 <= self._serial <= MAX_SERIAL):
            raise PdbFormatError(f'Atom serial {self._serial} does not fit in a PDB serial field')
        x, y, z = self.position

        line = (
            f'{self._record_name:<6}'
            f'{self._serial:>5d}'
            ' '
            f'{self._name_field()}'
            f'{char_or_blank(self._alt_loc)}'
            f'{self._res_name or "":>3}'
            ' '
            f'{char_or_blank(self._chain_id)}'
            f'{optional_number(self._res_seq, ">4d", 4)}'
            f'{char_or_blank(self._i_code)}'
            '   '
            f'{x:>8.3f}{y:>8.3f}{z:>8.3f}'
            f'{optional_number(self._occupancy, ">6.2f", 6)}'
            f'{optional_number(self._temp_factor, ">6.2f", 6)}'
            f'{"":10}'
            f'{self.symbol.upper():>2}'
            f'{format_charge(self.charge)}'
        )
        if len(line) != NUM_COLUMNS: # coordinates too large for their columns
            raise PdbFormatError(f'Atom {self._serial} cannot be written in fixed-column PDB format: "{line}"')

        return line

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(serial={self._serial}, name={self._name!r}, element={self.symbol}, charge={self.charge})'

def infer_element_from_name(name_field : Optional[str]) -> ElementLike:
    '''
    Infer an element from a (possibly unstripped) PDB atom name field

    When the name is justified as in PDB files, the element symbol occupies
    the first two columns of the field (e.g. " CA " is carbon, "CA  " is calcium)
    '''
    if not name_field:
        raise PdbFormatError('Cannot infer element from a blank atom name')

    if len(name_field) == 4: # unstripped field, as read from a file
        candidate = ''.join(char for char in name_field[:2] if char.isalpha())
    else:
        candidate = ''.join(char for char in name_field if char.isalpha())[:2]

    for symbol in (candidate, candidate[:1]):
        if not symbol:
            continue
        try:
            return element_from(symbol)
        except ValueError:
            continue
    raise PdbFormatError(f'Could not infer an element from atom name "{name_field}"')


@dataclass(frozen=True)
class PdbConect:
    '''A CONECT record, listing the (up to 4) atoms bonded to the atom with a given serial number'''
    serial : int
    bonded_serials : tuple[int, ...]

    MAX_BONDED_SERIALS : ClassVar[int] = 4

    def __post_init__(self) -> None:
        object.__setattr__(self, 'bonded_serials', tuple(self.bonded_serials))
        if not (1 <= len(self.bonded_serials) <= self.MAX_BONDED_SERIALS):
            raise PdbFormatError(f'CONECT record must list between 1 and {self.MAX_BONDED_SERIALS} bonded atoms, not {len(self.bonded_serials)}')
        if self.serial in self.bonded_serials:
            raise PdbFormatError(f'CONECT record bonds atom {self.serial} to itself')

    @classmethod
    def from_line(cls, line : str) -> 'PdbConect':
        line = padded(line)
        if line[RECORD_NAME_COLS].strip() != 'CONECT':
            raise PdbFormatError(f'Not a CONECT record: "{line.rstrip()}"')

        serial = int_field(line, SERIAL_COLS)
        if serial is None:
            raise PdbFormatError(f'CONECT record is missing a serial number: "{line.rstrip()}"')
        bonded_serials = [
            bonded_serial
                for cols in CONECT_SERIAL_COLS
                    if (bonded_serial := int_field(line, cols)) is not None
        ]

        return cls(serial=serial, bonded_serials=tuple(bonded_serials))

    def to_line(self) -> str:
        line = f'{"CONECT":<6}{self.serial:>5d}' + ''.join(f'{bonded_serial:>5d}' for bonded_serial in self.bonded_serials)
        return f'{line:<{NUM_COLUMNS}}'


@dataclass(frozen=True)
class PdbTer:
    '''A TER record, marking the end of a chain (or other fragment) of atoms'''
    serial : Optional[int] = None
    res_name : Optional[str] = None
    chain_id : Optional[str] = None
    res_seq : Optional[int] = None
    i_code : Optional[str] = None

    @classmethod
    def from_line(cls, line : str) -> 'PdbTer':
        line = padded(line)
        if line[RECORD_NAME_COLS].strip() != 'TER':
            raise PdbFormatError(f'Not a TER record: "{line.rstrip()}"')

        return cls(
            serial=int_field(line, SERIAL_COLS),
            res_name=string_field(line, RES_NAME_COLS),
            chain_id=string_field(line, CHAIN_ID_COL),
            res_seq=int_field(line, RES_SEQ_COLS),
            i_code=string_field(line, I_CODE_COL),
        )

    def to_line(self) -> str:
        line = (
            f'{"TER":<6}'
            f'{optional_number(self.serial, ">5d", 5)}'
            f'{"":6}'
            f'{self.res_name or "":>3}'
            ' '
            f'{char_or_blank(self.chain_id)}'
            f'{optional_number(self.res_seq, ">4d", 4)}'
            f'{char_or_blank(self.i_code)}'
        )
        return f'{line:<{NUM_COLUMNS}}'
