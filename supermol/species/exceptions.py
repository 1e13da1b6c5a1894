'''Custom Exceptions raised when the structural invariants of chemical species are violated'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'


class SpeciesError(Exception):
    '''Base class for all errors raised when constructing or editing chemical species'''
    pass

# Malformed structural input
class StructuralInputError(SpeciesError, ValueError):
    '''Raised when a collection of atoms or bonds is malformed, i.e. contains duplicated or conflicting entries'''
    pass

class SelfBondError(StructuralInputError):
    '''Raised when attempting to bond an atom to itself'''
    pass

class DuplicateAtomError(StructuralInputError):
    '''Raised when atoms which must be referentially distinct are not'''
    pass

class DuplicateBondError(StructuralInputError):
    '''Raised when bonds which must be referentially distinct are not'''
    pass

class ConflictingBondError(StructuralInputError):
    '''Raised when two distinct bonds are defined between the same pair of atoms'''
    pass

class DuplicateSubspeciesError(StructuralInputError):
    '''Raised when the subspecies of an aggregate are not referentially distinct'''
    pass

class DuplicateAtomIslandError(StructuralInputError):
    '''Raised when attempting to create a second AtomIsland for an atom which already has one'''
    pass

# Bond lists which don't make up exactly one molecule
class PartitionMismatchError(SpeciesError, ValueError):
    '''Raised when a collection of bonds does not partition into the expected number of connected components'''
    pass

class EmptyMoleculeError(PartitionMismatchError):
    '''Raised when attempting to construct a molecule without any bonds'''
    pass

class DisconnectedMoleculeError(PartitionMismatchError):
    '''Raised when the bonds given to construct a single molecule represent more than one molecule'''
    pass

# Aggregate consistency
class AggregateInvariantError(SpeciesError, ValueError):
    '''Raised when the subspecies of an aggregate are mutually inconsistent'''
    pass

class SharedAtomError(AggregateInvariantError):
    '''Raised when the same atom is found in more than one island of a supermolecule'''
    pass

class FragmentationError(AggregateInvariantError):
    '''Raised when a set of fragments does not exactly partition the atoms of a supermolecule'''
    pass

# Lookups by reference
class ReferenceNotFoundError(SpeciesError, LookupError):
    '''Raised when a referenced atom, bond, or island does not exist (by object identity) in a species'''
    pass

class AtomNotFoundError(ReferenceNotFoundError):
    '''Raised when a referenced atom does not exist in a species'''
    pass

class BondNotFoundError(ReferenceNotFoundError):
    '''Raised when a referenced bond does not exist in a species'''
    pass

class IslandNotFoundError(ReferenceNotFoundError):
    '''Raised when a referenced island does not exist in a supermolecule'''
    pass

# Atom mapping
class MappingCollisionError(SpeciesError, ValueError):
    '''Raised when an atom mapper yields the same output atom for two distinct input atoms'''
    pass
