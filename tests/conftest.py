"""Shared fixtures and literal-valued noise samplers for the test suite."""

import logging

import numpy as np
import pytest

from biome_generator.generator import BiomeMapGenerator


class ConstantSampler:
    """Returns the same value everywhere, for both 2D and 3D samples."""

    def __init__(self, value_2d=0.5, value_3d=0.0):
        self.value_2d = value_2d
        self.value_3d = value_3d

    def sample_2d(self, x, y):
        return np.full(np.broadcast(np.asarray(x), np.asarray(y)).shape, self.value_2d)

    def sample_3d(self, x, y, slice_):
        return np.full(np.broadcast(np.asarray(x), np.asarray(y)).shape, self.value_3d)


class SequenceSampler:
    """Returns the next literal on every call and records the coordinates it was given."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def _next(self, x, y):
        value = self.values[len(self.calls) % len(self.values)]
        self.calls.append((np.array(x, dtype=float), np.array(y, dtype=float)))
        return np.full(np.broadcast(np.asarray(x), np.asarray(y)).shape, value)

    def sample_2d(self, x, y):
        return self._next(x, y)

    def sample_3d(self, x, y, slice_):
        return self._next(x, y)


@pytest.fixture
def logger():
    return logging.getLogger("biome_generator.tests")


@pytest.fixture
def make_generator(logger):
    """Builds a generator from config overrides and an optional sampler."""
    def _make(config=None, sampler=None):
        return BiomeMapGenerator(config=config or {}, logger=logger, sampler=sampler)
    return _make


@pytest.fixture
def default_settings(make_generator):
    return make_generator(sampler=ConstantSampler()).settings
