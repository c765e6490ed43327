# biome_generator/offsets.py

"""
================================================================================
SEEDED OCTAVE OFFSETS
================================================================================
Derives the per-octave sampling offsets of every field from a single seed.

Data Contract:
---------------
- Inputs:
    - seed (int): The master seed for one generation run. Any sign.
    - height_count, humidity_count, temperature_count (int): Octaves per field.
- Outputs:
    - An immutable OctaveOffsets record holding one (n, 2) integer array per
      field. Column 0 is the x offset, column 1 the y offset.
- Side Effects: None.
- Invariants: The generator is drained in a fixed order (height, humidity,
  temperature; x before y within a pair), so the height offsets depend only on
  the seed and the height octave count.
================================================================================
"""
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from .errors import ConfigurationError

SEED_MASK = 0xFFFFFFFFFFFFFFFF


@dataclass(frozen=True)
class OctaveOffsets:
    height: np.ndarray
    humidity: np.ndarray
    temperature: np.ndarray


def _draw_pairs(rng: np.random.Generator, n: int) -> np.ndarray:
    pairs = np.empty((n, 2), dtype=np.int64)
    for i in range(n):
        pairs[i, 0] = rng.integers(DEFAULTS.OFFSET_MIN, DEFAULTS.OFFSET_MAX)
        pairs[i, 1] = rng.integers(DEFAULTS.OFFSET_MIN, DEFAULTS.OFFSET_MAX)
    pairs.setflags(write=False)
    return pairs


def derive_offsets(seed: int, height_count: int, humidity_count: int, temperature_count: int = 1) -> OctaveOffsets:
    """Draws all octave offsets for one run. A count of 0 gives an empty (0, 2) array."""
    counts = {'height': height_count, 'humidity': humidity_count, 'temperature': temperature_count}
    for name, count in counts.items():
        if count < 0:
            raise ConfigurationError(f"{name} octave count must be >= 0, got {count}")

    # Wrapped to 64 bits so negative seeds are accepted. Seeds in [0, 2**64)
    # map to themselves.
    rng = np.random.default_rng(seed & SEED_MASK)
    height = _draw_pairs(rng, height_count)
    humidity = _draw_pairs(rng, humidity_count)
    temperature = _draw_pairs(rng, temperature_count)
    return OctaveOffsets(height=height, humidity=humidity, temperature=temperature)
