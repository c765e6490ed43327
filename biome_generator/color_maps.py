# biome_generator/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module converts raw field data (height, temperature, humidity, cloud
density) into RGBA color arrays, and builds the default color tables used
when no table images are supplied.

It is designed to be a pure, stateless utility with no file I/O, so it can be
used by the in-process driver and by worker processes alike.

Data Contract:
---------------
- Colors are float RGBA arrays in [0, 1] with a trailing channel axis of 4.
- The biome lookup table is square, indexed [row, column]: columns run from
  cold to hot, rows from wettest (row 0) to driest.
- Gradients are (n, 4) arrays. The water gradient runs from deepest (index 0)
  to shallowest; the humidity gradient from dry to wet.
================================================================================
"""
from dataclasses import dataclass

import numpy as np

from .errors import ConfigurationError
from .interpolation import clamp01, inverse_lerp, to_index

# --- Biome Table (driest row first, columns cold -> hot) ---
BIOME_TYPE_TABLE = [
    ["ice", "ice", "tundra", "grassland", "grassland",       "savanna",    "desert",  "desert"],   # Driest
    ["ice", "ice", "tundra", "grassland", "grassland",       "savanna",    "desert",  "desert"],
    ["ice", "ice", "tundra", "grassland", "grassland",       "savanna",    "desert",  "desert"],
    ["ice", "ice", "tundra", "grassland", "grassland",       "savanna",    "savanna", "desert"],
    ["ice", "ice", "taiga",  "taiga",     "seasonal_forest", "grassland",  "savanna", "desert"],
    ["ice", "ice", "taiga",  "taiga",     "seasonal_forest", "rainforest", "savanna", "desert"],
    ["ice", "ice", "taiga",  "taiga",     "seasonal_forest", "rainforest", "savanna", "desert"],
    ["ice", "ice", "taiga",  "taiga",     "seasonal_forest", "rainforest", "savanna", "desert"],   # Wettest
]

COLOR_MAP_BIOME = {
    "desert": (238, 218, 130),
    "savanna": (177, 209, 110),
    "rainforest": (66, 123, 25),
    "grassland": (164, 225, 99),
    "seasonal_forest": (73, 100, 35),
    "taiga": (95, 115, 62),
    "tundra": (96, 131, 112),
    "ice": (255, 255, 255),
}

# Deepest first.
COLOR_MAP_WATER = [(0, 0, 50), (10, 20, 80), (20, 40, 120), (26, 102, 255)]

COLOR_MAP_TEMPERATURE = [(0, 0, 100), (0, 0, 255), (255, 255, 0), (255, 0, 0), (150, 0, 0)]

COLOR_MAP_HUMIDITY = [(210, 180, 140), (70, 130, 180)]

# Red channel carries the cloud alpha, from thin at the edge to dense.
COLOR_MAP_CLOUD = [(90, 90, 90), (230, 230, 230)]


@dataclass(frozen=True)
class ColorTables:
    """The externally supplied color tables for one generation run."""
    biome: np.ndarray
    water: np.ndarray
    temperature: np.ndarray
    humidity: np.ndarray
    cloud: np.ndarray

    def validate(self):
        """Raises ConfigurationError for malformed or undersized tables."""
        validate_lookup_table(self.biome)
        for name in ('water', 'temperature', 'humidity', 'cloud'):
            validate_gradient(getattr(self, name), name)


def validate_lookup_table(table: np.ndarray):
    if table.ndim != 3 or table.shape[2] != 4:
        raise ConfigurationError(f"Biome lookup table must have shape (n, n, 4), got {table.shape}")
    if table.shape[0] != table.shape[1] or table.shape[0] == 0:
        raise ConfigurationError(f"Biome lookup table must be square and non-empty, got {table.shape[:2]}")

def validate_gradient(gradient: np.ndarray, name: str):
    if gradient.ndim != 2 or gradient.shape[1] != 4 or gradient.shape[0] == 0:
        raise ConfigurationError(f"The {name} gradient must have shape (n, 4) with n > 0, got {gradient.shape}")


# --- Default Table Generation ---
def _rgba(color) -> np.ndarray:
    """8-bit RGB(A) tuple to a float RGBA array."""
    rgba = np.ones(4)
    rgba[:len(color)] = np.asarray(color, dtype=np.float64) / 255.0
    return rgba

def _gradient_from_stops(stops: list, length: int) -> np.ndarray:
    """Evenly spaced color stops, linearly interpolated to `length` entries."""
    stop_positions = np.linspace(0.0, 1.0, len(stops))
    stop_colors = np.array([_rgba(c) for c in stops])
    t = np.linspace(0.0, 1.0, length)
    return np.stack([np.interp(t, stop_positions, stop_colors[:, channel]) for channel in range(4)], axis=-1)

def create_biome_lookup_table(size: int) -> np.ndarray:
    """Expands BIOME_TYPE_TABLE into a size x size table, wettest row first."""
    palette = np.array([[_rgba(COLOR_MAP_BIOME[name]) for name in row] for row in BIOME_TYPE_TABLE[::-1]])
    cells = len(BIOME_TYPE_TABLE)
    index = np.arange(size) * cells // size
    return palette[index][:, index]

def create_water_gradient(length: int) -> np.ndarray:
    return _gradient_from_stops(COLOR_MAP_WATER, length)

def create_temperature_gradient(length: int) -> np.ndarray:
    return _gradient_from_stops(COLOR_MAP_TEMPERATURE, length)

def create_humidity_gradient(length: int) -> np.ndarray:
    return _gradient_from_stops(COLOR_MAP_HUMIDITY, length)

def create_cloud_gradient(length: int) -> np.ndarray:
    return _gradient_from_stops(COLOR_MAP_CLOUD, length)

def create_default_tables(lookup_size: int, gradient_length: int) -> ColorTables:
    return ColorTables(
        biome=create_biome_lookup_table(lookup_size),
        water=create_water_gradient(gradient_length),
        temperature=create_temperature_gradient(gradient_length),
        humidity=create_humidity_gradient(gradient_length),
        cloud=create_cloud_gradient(gradient_length),
    )


# --- Classification ---
def lookup_biome_colors(temperature, humidity, table: np.ndarray, temperature_range) -> np.ndarray:
    """
    Reads the base biome color for each cell. Temperature picks the column,
    inverted humidity picks the row, so wetter cells read earlier rows.
    """
    width = table.shape[1]
    columns = to_index(inverse_lerp(temperature_range[0], temperature_range[1], temperature), width)
    rows = to_index(1.0 - np.asarray(humidity, dtype=np.float64), width)
    return table[rows, columns]

def classify_biomes(height, humidity, temperature, tables: ColorTables, settings: dict) -> np.ndarray:
    """
    Performs the composite classification and returns an RGBA array.

    Order matters: the lookup color is replaced by beach below the beach
    height, and anything below the water height is then replaced by the
    depth-graded water color. Both comparisons are strict.
    """
    height = np.asarray(height, dtype=np.float64)
    colors = lookup_biome_colors(temperature, humidity, tables.biome, settings['temperature_range_c'])

    beach_mask = height < settings['beach_height']
    colors[beach_mask] = _rgba(settings['beach_color'])

    water_mask = height < settings['water_height']
    if np.any(water_mask):
        depth = inverse_lerp(settings['height_range'][0], settings['water_height'], height[water_mask])
        colors[water_mask] = tables.water[to_index(depth, len(tables.water))]

    if settings['encode_height_alpha']:
        # Lower alpha is deeper.
        low, high = settings['height_range']
        colors[..., 3] = inverse_lerp(low, high, height)

    return colors

def get_temperature_colors(temperature, gradient: np.ndarray, temperature_range) -> np.ndarray:
    normalized = inverse_lerp(temperature_range[0], temperature_range[1], temperature)
    return gradient[to_index(normalized, len(gradient))]

def get_humidity_colors(humidity, height, gradient: np.ndarray, water_height: float) -> np.ndarray:
    """Humidity display map. Water cells show the wettest gradient entry."""
    indices = to_index(humidity, len(gradient))
    indices = np.where(np.asarray(height) < water_height, len(gradient) - 1, indices)
    return gradient[indices]

def get_height_colors(normalized_height) -> np.ndarray:
    """Grayscale RGBA from normalized height [0, 1]."""
    gray = clamp01(np.asarray(normalized_height, dtype=np.float64))
    return np.stack([gray, gray, gray, np.ones_like(gray)], axis=-1)


# --- Cloud Overlay ---
def blend_colors(background: np.ndarray, foreground: np.ndarray) -> np.ndarray:
    """
    Standard "over" compositing of foreground onto background. Where both
    alphas are zero the background is returned unchanged.
    """
    fg_a = foreground[..., 3:4]
    bg_a = background[..., 3:4]
    out_a = 1.0 - (1.0 - fg_a) * (1.0 - bg_a)

    numerator = foreground[..., :3] * fg_a + background[..., :3] * bg_a * (1.0 - fg_a)
    rgb = np.divide(numerator, out_a, out=background[..., :3].copy(), where=out_a > 0)
    return np.concatenate([rgb, out_a], axis=-1)

def get_cloud_alpha(cloud_noise, gradient: np.ndarray, settings: dict) -> np.ndarray:
    """
    Cloud alpha per cell: read from the gradient's red channel above the
    cloud threshold, a fixed soft edge just below it, zero elsewhere.
    """
    cloud_noise = np.asarray(cloud_noise, dtype=np.float64)
    threshold = settings['cloud_threshold']

    density = clamp01(inverse_lerp(threshold, 1.0, cloud_noise))
    dense_alpha = gradient[to_index(density, len(gradient)), 0]

    alpha = np.zeros(cloud_noise.shape)
    edge_mask = (cloud_noise > settings['cloud_edge_threshold']) & (cloud_noise <= threshold)
    alpha[edge_mask] = settings['cloud_edge_alpha']
    cloud_mask = cloud_noise > threshold
    alpha[cloud_mask] = dense_alpha[cloud_mask]
    return alpha

def apply_clouds(colors: np.ndarray, cloud_noise, gradient: np.ndarray, settings: dict) -> np.ndarray:
    """Composites the cloud layer over classified colors. Cloudless cells are untouched."""
    cloud_noise = np.asarray(cloud_noise, dtype=np.float64)
    covered = cloud_noise > settings['cloud_edge_threshold']
    if not np.any(covered):
        return colors

    foreground = np.empty((np.count_nonzero(covered), 4))
    foreground[:, :3] = settings['cloud_color']
    foreground[:, 3] = get_cloud_alpha(cloud_noise, gradient, settings)[covered]

    result = colors.copy()
    result[covered] = blend_colors(colors[covered], foreground)
    return result


def to_rgba8(colors: np.ndarray) -> np.ndarray:
    """Float RGBA [0, 1] to an 8-bit RGBA array for the image writer."""
    return np.clip(np.round(colors * 255.0), 0, 255).astype(np.uint8)
