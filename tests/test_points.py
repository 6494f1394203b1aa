"""Tests for ColorPoint and the record adapter."""

import copy
import math

import numpy as np
import pytest

from flag_clusters.exceptions import InvalidInputError
from flag_clusters.points import ColorPoint, extract_vectors, points_from_records


RECORDS = [
    {'state': 'Ohio', 'avg_rgb': [120, 40, 60], 'thumbnail': 'oh.png', 'year': 1902},
    {'state': 'Utah', 'avg_rgb': [20, 50, 110], 'thumbnail': 'ut.png'},
]


def test_points_from_records_keeps_order_and_metadata():
    points = points_from_records(RECORDS)

    assert [p.label for p in points] == ['Ohio', 'Utah']
    assert points[0].vector == (120.0, 40.0, 60.0)
    assert points[0].metadata == {'thumbnail': 'oh.png', 'year': 1902}
    assert points[1].metadata == {'thumbnail': 'ut.png'}


def test_points_from_records_does_not_touch_records():
    records = copy.deepcopy(RECORDS)
    points_from_records(records)
    assert records == RECORDS


def test_custom_keys():
    points = points_from_records([{'name': 'x', 'rgb': (1, 2, 3)}], label_key='name', vector_key='rgb')
    assert points[0].label == 'x'
    assert points[0].vector == (1.0, 2.0, 3.0)


def test_missing_field_raises():
    with pytest.raises(InvalidInputError, match="position 0"):
        points_from_records([{'state': 'Ohio'}])


@pytest.mark.parametrize("vector", ["123", b"123", [1, 2], [1, 2, 3, 4], [1, 'red', 3], [1, math.nan, 3], [math.inf, 0, 0]])
def test_bad_vectors_raise(vector):
    with pytest.raises(InvalidInputError):
        ColorPoint(label='bad', vector=vector)


def test_color_point_is_immutable():
    point = ColorPoint(label='Ohio', vector=[1, 2, 3])
    with pytest.raises(AttributeError):
        point.label = 'Iowa'


def test_extract_vectors_from_points_and_arrays():
    points = points_from_records(RECORDS)
    vectors = extract_vectors(points)
    assert vectors.shape == (2, 3)
    assert vectors.dtype == np.float64

    array = np.array([[1, 2, 3], [4, 5, 6]])
    copied = extract_vectors(array)
    copied[0, 0] = 100
    assert array[0, 0] == 1


@pytest.mark.parametrize("points", [[], np.empty((0, 3)), [[1, 2]], np.zeros((4, 2)), [[1, 2, np.nan]]])
def test_extract_vectors_rejects_bad_input(points):
    with pytest.raises(InvalidInputError):
        extract_vectors(points)
