'''Utilities for handling proper rotations (i.e. elements of the special orthogonal group SO(3))'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

from typing import Optional

import numpy as np
from scipy.spatial.transform import Rotation, RigidTransform

from ...arraytypes import Shape, Numeric
from ...measure import as_vector3, normalized


def rotator(rotation_axis : np.ndarray[Shape[3], Numeric], angle_rad : float=0.0) -> Rotation:
    '''
    Computes a Rotation which, when applied to an arbitrary vector, rotates that vector
    by "angle_rad" radians around the axis defined by "rotation_axis" (right-handed)
    '''
    rotation_axis = as_vector3(rotation_axis)
    if np.isclose(np.linalg.norm(rotation_axis), 0.0):
        raise ValueError('Rotation axis must be a nonzero vector')

    return Rotation.from_rotvec(normalized(rotation_axis) * angle_rad)

def translation(vector : np.ndarray[Shape[3], Numeric]) -> RigidTransform:
    '''A rigid transformation which shifts all points by the given displacement vector'''
    return RigidTransform.from_translation(as_vector3(vector))

def rotation_about_axis(
        rotation_axis : np.ndarray[Shape[3], Numeric],
        angle_rad : float,
        center : Optional[np.ndarray[Shape[3], Numeric]]=None,
    ) -> RigidTransform:
    '''
    A rigid transformation which rotates points by "angle_rad" radians around
    a line parallel to "rotation_axis" passing through the point "center"

    If no center is given, the line passes through the origin
    '''
    rotation = RigidTransform.from_rotation(rotator(rotation_axis, angle_rad))
    if center is None:
        return rotation

    ## conjugate by translation: shift center to origin, rotate, then shift back
    ## DEVNOTE: composition (A * B) applies B first, then A
    return translation(center) * rotation * translation(-as_vector3(center))
