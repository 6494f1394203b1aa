"""Shared fixtures for flag_clusters tests."""

import numpy as np
import pytest

from flag_clusters.points import points_from_records


class ScriptedRng:
    """Randomness source that returns a fixed sequence of indices."""

    def __init__(self, draws):
        self._draws = list(draws)
        self.calls = 0

    def integers(self, low, high=None):
        if not self._draws:
            raise AssertionError("ScriptedRng ran out of draws")
        value = self._draws.pop(0)
        assert low <= value < high, f"draw {value} outside [{low}, {high})"
        self.calls += 1
        return value


@pytest.fixture
def scripted_rng():
    """Factory: scripted_rng([0, 2]) draws index 0 then index 2."""
    return ScriptedRng


@pytest.fixture
def four_points():
    return points_from_records([
        {'state': 'A', 'avg_rgb': [0, 0, 0], 'thumbnail': 'a.png'},
        {'state': 'B', 'avg_rgb': [0, 0, 1], 'thumbnail': 'b.png'},
        {'state': 'C', 'avg_rgb': [10, 10, 10], 'thumbnail': 'c.png'},
        {'state': 'D', 'avg_rgb': [10, 10, 11], 'thumbnail': 'd.png'},
    ])


@pytest.fixture
def blobs():
    """Three well separated color blobs, 15 points each."""
    rng = np.random.default_rng(1234)
    centers = np.array([[30.0, 30.0, 200.0], [200.0, 40.0, 40.0], [240.0, 240.0, 240.0]])
    return np.vstack([c + rng.normal(scale=5.0, size=(15, 3)) for c in centers])


@pytest.fixture
def uniform_colors():
    rng = np.random.default_rng(99)
    return rng.uniform(0, 255, size=(50, 3))
