'''Unit tests for rigid rotations and translations'''

__author__ = 'Timotej Bernat'
__email__ = 'timotej.bernat@colorado.edu'

import pytest
import numpy as np

from supermol.geometry.transforms.rigid import rotation_about_axis, rotator, translation


def test_rotator_quarter_turn() -> None:
    '''Test that a quarter turn about the z-axis sends the x-axis to the y-axis'''
    rotation = rotator([0, 0, 1], np.pi / 2)
    assert np.allclose(rotation.apply([1.0, 0.0, 0.0]), [0.0, 1.0, 0.0])

def test_rotator_axis_normalized() -> None:
    '''Test that the length of the rotation axis has no bearing on the rotation'''
    assert np.allclose(
        rotator([0, 0, 5], np.pi / 3).as_matrix(),
        rotator([0, 0, 1], np.pi / 3).as_matrix(),
    )

def test_rotator_zero_axis() -> None:
    '''Test that a rotation about the zero vector is rejected'''
    with pytest.raises(ValueError):
        rotator([0, 0, 0], 1.0)

def test_translation() -> None:
    '''Test that translations shift points by the displacement given'''
    shift = translation([1.0, -2.0, 0.5])
    assert np.allclose(shift.apply([0.0, 0.0, 0.0]), [1.0, -2.0, 0.5])

def test_rotation_about_offset_axis() -> None:
    '''Test that rotation about an axis through a center point leaves that point fixed'''
    center = np.array([1.0, 1.0, 0.0])
    half_turn = rotation_about_axis([0, 0, 1], np.pi, center=center)
    assert np.allclose(half_turn.apply(center), center)
    assert np.allclose(half_turn.apply([2.0, 1.0, 0.0]), [0.0, 1.0, 0.0])

def test_rotation_preserves_distances() -> None:
    '''Test that rigid rotations preserve the distance between points'''
    points = np.array([[0.0, 0.0, 0.0], [1.0, 2.0, 3.0]])
    transform = rotation_about_axis([1, 1, 0], 0.7, center=[0.5, -1.0, 2.0])
    moved = transform.apply(points)
    assert np.linalg.norm(moved[1] - moved[0]) == pytest.approx(np.linalg.norm(points[1] - points[0]))
