# biome_generator/__init__.py

# This file makes the 'biome_generator' directory a Python package.
# We can also use it to define the public API of the package.

from .errors import ConfigurationError
from .generator import BiomeMapGenerator, FieldParameters
from .noise import NoiseSampler, PerlinSampler
from .offsets import OctaveOffsets, derive_offsets
from .pipeline import PRODUCTS, bake_map, render_product

__all__ = [
    "BiomeMapGenerator",
    "ConfigurationError",
    "FieldParameters",
    "NoiseSampler",
    "OctaveOffsets",
    "PRODUCTS",
    "PerlinSampler",
    "bake_map",
    "derive_offsets",
    "render_product",
]
