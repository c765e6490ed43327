"""Tests for seeded octave offset derivation."""

import numpy as np
import pytest

from biome_generator.errors import ConfigurationError
from biome_generator.offsets import derive_offsets


class TestDeriveOffsets:
    """Test the seeded offset generator."""

    def test_same_seed_same_offsets(self):
        first = derive_offsets(130, 5, 3, 1)
        second = derive_offsets(130, 5, 3, 1)

        assert np.array_equal(first.height, second.height)
        assert np.array_equal(first.humidity, second.humidity)
        assert np.array_equal(first.temperature, second.temperature)

    def test_different_seed_different_offsets(self):
        first = derive_offsets(130, 5, 3, 1)
        second = derive_offsets(131, 5, 3, 1)
        assert not np.array_equal(first.height, second.height)

    def test_shapes_follow_counts(self):
        offsets = derive_offsets(7, 4, 2, 1)
        assert offsets.height.shape == (4, 2)
        assert offsets.humidity.shape == (2, 2)
        assert offsets.temperature.shape == (1, 2)

    def test_values_within_documented_bounds(self):
        offsets = derive_offsets(42, 200, 200, 200)
        for pairs in (offsets.height, offsets.humidity, offsets.temperature):
            assert pairs.min() >= -1000
            assert pairs.max() < 1000

    def test_zero_count_is_empty(self):
        offsets = derive_offsets(130, 0, 0, 0)
        assert offsets.height.shape == (0, 2)
        assert offsets.humidity.shape == (0, 2)
        assert offsets.temperature.shape == (0, 2)

    def test_height_offsets_ignore_later_counts(self):
        """Height offsets are drawn first, so humidity/temperature counts cannot move them."""
        base = derive_offsets(130, 5, 3, 1)
        more_humidity = derive_offsets(130, 5, 8, 1)
        more_temperature = derive_offsets(130, 5, 3, 4)

        assert np.array_equal(base.height, more_humidity.height)
        assert np.array_equal(base.height, more_temperature.height)

    def test_humidity_offsets_ignore_temperature_count(self):
        base = derive_offsets(130, 5, 3, 1)
        other = derive_offsets(130, 5, 3, 6)
        assert np.array_equal(base.humidity, other.humidity)

    def test_offsets_are_read_only(self):
        offsets = derive_offsets(130, 2, 2, 1)
        with pytest.raises(ValueError):
            offsets.height[0, 0] = 0

    def test_negative_count_rejected(self):
        with pytest.raises(ConfigurationError):
            derive_offsets(130, -1, 3, 1)

    def test_negative_seed_is_valid_and_reproducible(self):
        first = derive_offsets(-5, 5, 3, 1)
        second = derive_offsets(-5, 5, 3, 1)

        assert np.array_equal(first.height, second.height)
        assert first.height.min() >= -1000
        assert first.height.max() < 1000

    def test_negative_seed_differs_from_its_magnitude(self):
        negative = derive_offsets(-5, 5, 3, 1)
        positive = derive_offsets(5, 5, 3, 1)
        assert not np.array_equal(negative.height, positive.height)

    def test_non_negative_seed_unchanged_by_wrapping(self):
        wrapped = derive_offsets(130, 5, 3, 1)
        rng = np.random.default_rng(130)
        expected = [rng.integers(-1000, 1000) for _ in range(10)]
        assert wrapped.height.ravel().tolist() == expected
