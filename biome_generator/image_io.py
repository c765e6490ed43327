# biome_generator/image_io.py

"""
================================================================================
IMAGE READING AND WRITING
================================================================================
Pillow-backed adapters between image files and the float RGBA arrays used by
the rest of the package.

Images follow texture conventions: array row 0 is the BOTTOM row of the
image file, so y grows upwards in every saved map and loaded table.

Errors from the filesystem (missing files, permissions) are not caught here;
they propagate to the caller.
================================================================================
"""
import os

import numpy as np
from PIL import Image

from .color_maps import to_rgba8, validate_gradient, validate_lookup_table


def _load_rgba(path: str) -> np.ndarray:
    with Image.open(path) as img:
        pixels = np.asarray(img.convert('RGBA'), dtype=np.float64) / 255.0
    return np.flipud(pixels)

def load_color_table(path: str) -> np.ndarray:
    """Loads a square biome lookup table image as a float (n, n, 4) array."""
    table = np.ascontiguousarray(_load_rgba(path))
    validate_lookup_table(table)
    return table

def load_gradient(path: str, name: str) -> np.ndarray:
    """Loads a 1D gradient strip. Only the first column of the image is used."""
    gradient = np.ascontiguousarray(_load_rgba(path)[:, 0, :])
    validate_gradient(gradient, name)
    return gradient

def save_pixel_buffer(colors: np.ndarray, path: str) -> str:
    """
    Encodes a float RGBA buffer indexed [y, x] as a PNG, creating the target
    directory if needed. Returns the path written.
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    # A (h, w, 4) uint8 array is encoded as RGBA.
    img = Image.fromarray(np.ascontiguousarray(np.flipud(to_rgba8(colors))))
    img.save(path, 'PNG')
    return path
