# biome_generator/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides the coherent noise primitive used by every field of the
biome map: a 2D gradient noise remapped to [0, 1] and a 3D "improved" gradient
noise in [-1, 1] whose third axis is used as a time-like slice.

Data Contract:
---------------
- Inputs:
    - p: A pre-shuffled NumPy permutation table (int array of length 512).
    - x, y (, z): NumPy arrays (or scalars) of continuous coordinates.
- Outputs:
    - A NumPy array of noise values with the broadcast shape of the inputs.
- Side Effects: None.
- Invariants: The sampler is seed-independent. The same coordinates always
  produce the same value, regardless of the world seed.
================================================================================
"""
from typing import Protocol

import numpy as np
from numba import njit

from . import config as DEFAULTS

# Pre-defined gradient vectors for the 2D noise (axes and diagonals).
_GRADIENT_VECTORS_2D = np.array([
    [0, 1], [0, -1], [1, 0], [-1, 0],
    [1, 1], [-1, 1], [1, -1], [-1, -1],
])


class NoiseSampler(Protocol):
    """
    The interface the generator expects from a noise source. Any object with
    these two methods can be injected, which is how the tests pin exact values.
    """
    def sample_2d(self, x, y) -> np.ndarray: ...
    def sample_3d(self, x, y, slice_) -> np.ndarray: ...


def create_permutation_table(seed: int) -> np.ndarray:
    """Builds the doubled 512-entry permutation table from a shuffle seed."""
    p = np.arange(256, dtype=np.int64)
    rng = np.random.default_rng(seed)
    rng.shuffle(p)
    return np.stack([p, p]).flatten()


@njit
def _lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)

@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)

@njit
def _gradient_2d(h, x, y):
    """Calculates the dot product between a gradient vector and coordinates."""
    g = _GRADIENT_VECTORS_2D[h % 8]
    return g[0] * x + g[1] * y

@njit
def _gradient_3d(h, x, y, z):
    """Dot product with one of the 12 cube-edge gradients, selected by hash."""
    h = h & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h == 12 or h == 14:
        v = x
    else:
        v = z
    return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)

@njit
def perlin_noise_2d(p, xs, ys):
    """
    Raw single-octave 2D gradient noise over flat coordinate arrays.
    Output is roughly in [-1, 1]. Octaves are layered by the caller.
    """
    n = xs.shape[0]
    out = np.empty(n)
    for i in range(n):
        x0 = np.floor(xs[i])
        y0 = np.floor(ys[i])
        xf = xs[i] - x0
        yf = ys[i] - y0

        px0 = int(x0) & 255
        px1 = (px0 + 1) & 255
        py0 = int(y0) & 255
        py1 = (py0 + 1) & 255

        g00 = _gradient_2d(p[p[px0] + py0], xf, yf)
        g01 = _gradient_2d(p[p[px0] + py1], xf, yf - 1)
        g10 = _gradient_2d(p[p[px1] + py0], xf - 1, yf)
        g11 = _gradient_2d(p[p[px1] + py1], xf - 1, yf - 1)

        u = _fade(xf)
        v = _fade(yf)
        out[i] = _lerp(_lerp(g00, g10, u), _lerp(g01, g11, u), v)
    return out

@njit
def perlin_noise_3d(p, xs, ys, zs):
    """Raw single-octave 3D improved gradient noise over flat coordinate arrays."""
    n = xs.shape[0]
    out = np.empty(n)
    for i in range(n):
        x0 = np.floor(xs[i])
        y0 = np.floor(ys[i])
        z0 = np.floor(zs[i])
        X = int(x0) & 255
        Y = int(y0) & 255
        Z = int(z0) & 255
        x = xs[i] - x0
        y = ys[i] - y0
        z = zs[i] - z0

        u = _fade(x)
        v = _fade(y)
        w = _fade(z)

        A = p[X] + Y
        AA = p[A] + Z
        AB = p[A + 1] + Z
        B = p[X + 1] + Y
        BA = p[B] + Z
        BB = p[B + 1] + Z

        near = _lerp(
            _lerp(_gradient_3d(p[AA], x, y, z), _gradient_3d(p[BA], x - 1, y, z), u),
            _lerp(_gradient_3d(p[AB], x, y - 1, z), _gradient_3d(p[BB], x - 1, y - 1, z), u),
            v,
        )
        far = _lerp(
            _lerp(_gradient_3d(p[AA + 1], x, y, z - 1), _gradient_3d(p[BA + 1], x - 1, y, z - 1), u),
            _lerp(_gradient_3d(p[AB + 1], x, y - 1, z - 1), _gradient_3d(p[BB + 1], x - 1, y - 1, z - 1), u),
            v,
        )
        out[i] = _lerp(near, far, w)
    return out


class PerlinSampler:
    """
    Default NoiseSampler. Wraps the JIT-compiled kernels so they accept
    scalars or arrays of any shape.
    """
    def __init__(self, permutation_table: np.ndarray = None):
        if permutation_table is None:
            permutation_table = create_permutation_table(DEFAULTS.NOISE_PERMUTATION_SEED)
        self.permutation_table = permutation_table

    def sample_2d(self, x, y) -> np.ndarray:
        """Samples 2D noise, remapped from [-1, 1] to [0, 1]."""
        x, y = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))
        values = perlin_noise_2d(self.permutation_table, x.ravel(), y.ravel())
        return np.clip((values + 1.0) / 2.0, 0.0, 1.0).reshape(x.shape)

    def sample_3d(self, x, y, slice_) -> np.ndarray:
        """Samples 3D noise in [-1, 1]; `slice_` is the time-like third axis."""
        x, y, z = np.broadcast_arrays(
            np.asarray(x, dtype=np.float64),
            np.asarray(y, dtype=np.float64),
            np.asarray(slice_, dtype=np.float64),
        )
        values = perlin_noise_3d(self.permutation_table, x.ravel(), y.ravel(), z.ravel())
        return np.clip(values, -1.0, 1.0).reshape(x.shape)
