# biome_generator/interpolation.py

"""Vectorized interpolation helpers shared by the field and color stages."""
import numpy as np


def clamp01(values):
    return np.clip(values, 0.0, 1.0)

def lerp(a, b, t):
    "Linear interpolation."
    return a + (b - a) * t

def inverse_lerp(a, b, values):
    """
    Where `values` sits between a and b, clamped to [0, 1].
    Works for a > b as well (the result then falls as values rise).
    """
    return clamp01((np.asarray(values, dtype=np.float64) - a) / (b - a))

def to_index(normalized, length: int) -> np.ndarray:
    """Scales [0, 1] values to integer indices in [0, length)."""
    indices = (np.asarray(normalized, dtype=np.float64) * length).astype(np.int64)
    return np.clip(indices, 0, length - 1)
