"""Tests for the Perlin noise sampler."""

import numpy as np
import pytest

from biome_generator.noise import PerlinSampler, create_permutation_table


@pytest.fixture(scope="module")
def sampler():
    return PerlinSampler()


@pytest.fixture(scope="module")
def coordinates():
    rng = np.random.default_rng(99)
    return rng.uniform(-1200, 1200, (40, 50)), rng.uniform(-1200, 1200, (40, 50))


class TestPerlinSampler:
    """Test the sampler contract."""

    def test_2d_range(self, sampler, coordinates):
        x, y = coordinates
        values = sampler.sample_2d(x, y)
        assert values.shape == (40, 50)
        assert np.all((values >= 0.0) & (values <= 1.0))

    def test_3d_range(self, sampler, coordinates):
        x, y = coordinates
        values = sampler.sample_3d(x, y, 1.7)
        assert values.shape == (40, 50)
        assert np.all((values >= -1.0) & (values <= 1.0))

    def test_2d_lattice_point_is_midpoint(self, sampler):
        assert float(sampler.sample_2d(3.0, 7.0)) == 0.5

    def test_3d_lattice_point_is_zero(self, sampler):
        assert float(sampler.sample_3d(1.0, 2.0, 3.0)) == 0.0

    def test_scalar_input_gives_scalar_shape(self, sampler):
        assert sampler.sample_2d(0.3, 0.4).shape == ()
        assert sampler.sample_3d(0.3, 0.4, 0.5).shape == ()

    def test_deterministic(self, sampler, coordinates):
        x, y = coordinates
        assert np.array_equal(sampler.sample_2d(x, y), sampler.sample_2d(x, y))

    def test_independent_of_instance(self, coordinates):
        x, y = coordinates
        assert np.array_equal(PerlinSampler().sample_2d(x, y), PerlinSampler().sample_2d(x, y))

    def test_coherent(self, sampler, coordinates):
        x, y = coordinates
        near = sampler.sample_2d(x + 1e-4, y)
        assert np.max(np.abs(near - sampler.sample_2d(x, y))) < 1e-2

    def test_varies(self, sampler, coordinates):
        x, y = coordinates
        assert np.std(sampler.sample_2d(x, y)) > 0.01
        assert np.std(sampler.sample_3d(x, y, 0.25)) > 0.01

    def test_slice_changes_values(self, sampler, coordinates):
        x, y = coordinates
        assert not np.array_equal(sampler.sample_3d(x, y, 0.25), sampler.sample_3d(x, y, 0.35))


class TestPermutationTable:
    """Test the permutation table builder."""

    def test_table_is_doubled_permutation(self):
        table = create_permutation_table(5)
        assert table.shape == (512,)
        assert np.array_equal(table[:256], table[256:])
        assert np.array_equal(np.sort(table[:256]), np.arange(256))

    def test_table_seeded(self):
        assert np.array_equal(create_permutation_table(5), create_permutation_table(5))
