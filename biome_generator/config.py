# biome_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the biome
map generator. These values are used if they are not explicitly provided by
the user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC MAP.
Instead, pass a configuration dictionary to the BiomeMapGenerator instance.
================================================================================
"""

# --- World ---
DEFAULT_SEED = 130
# Length of one side of the (square) map in cells.
DEFAULT_MAP_DIMENSION = 500

# --- Seeded Offsets ---
# Every octave offset axis is drawn from [OFFSET_MIN, OFFSET_MAX).
OFFSET_MIN = -1000
OFFSET_MAX = 1000
# Added to every sample coordinate so no sample lands on an integer lattice point.
SAMPLE_JITTER = 0.1

# --- Noise Sampler ---
# The permutation table is fixed for every world. World variety comes
# entirely from the seeded octave offsets.
NOISE_PERMUTATION_SEED = 0

# --- Height Field ---
# The higher the scale, the more 'zoomed in' the map. Kept non-integer so
# samples never line up with the noise lattice.
HEIGHT_LAYERS = 5
HEIGHT_SCALE = 101.7
HEIGHT_PERSISTENCE = 0.5
HEIGHT_LACUNARITY = 2.1

# --- Humidity Field ---
HUMIDITY_LAYERS = 3
# Humidity varies faster than height: its scale is the height scale divided by this.
HUMIDITY_SCALE_DIVISOR = 3.0
HUMIDITY_PERSISTENCE = 0.5
HUMIDITY_LACUNARITY = 2.1
# How strongly normalized height dries the air, and the bias that compensates.
HUMIDITY_HEIGHT_WEIGHT = 1.0
HUMIDITY_BIAS = 0.4

# --- Temperature Field ---
TEMPERATURE_LAYERS = 1
# Temperature noise uses the height scale unless overridden.
TEMPERATURE_PERSISTENCE = 0.5
TEMPERATURE_LACUNARITY = 2.1
# 'latitude_linear' or 'latitude_subtractive'.
TEMPERATURE_MODEL = 'latitude_linear'
TEMPERATURE_MODELS = ('latitude_linear', 'latitude_subtractive')
# Latitude-linear model: temperature at the poles and at the equator (°C).
POLE_TEMP_C = -50.0
EQUATOR_TEMP_C = 50.0
# Noise perturbation range (°C), applied as +/- this value.
TEMPERATURE_NOISE_C = 20.0
# Latitude-subtractive model constants.
SUBTRACTIVE_BASE_TEMP_C = 60.0
SUBTRACTIVE_LATITUDE_DIVISOR = 20.0
SUBTRACTIVE_LOWLAND_COOLING_C = 20.0

# --- Cloud Field ---
# Clouds reuse the height octave schedule with a smaller scale.
CLOUD_SCALE_DIVISOR = 1.5
CLOUD_THRESHOLD = 0.57
CLOUD_EDGE_THRESHOLD = 0.56
CLOUD_EDGE_ALPHA = 0.2
# A very light grey.
CLOUD_COLOR = (0.96, 0.95, 0.95)
# Cells the cloud layer moves along x per frame.
CLOUD_DRIFT = 5

# --- Animation ---
# Frames written for the animated products (clouds, terrain slices).
ANIMATION_FRAMES = 30
# Third-axis noise coordinate advanced per frame.
SLICE_STEP = 0.1

# --- Classification ---
BEACH_HEIGHT = -0.17
WATER_HEIGHT = -0.2
BEACH_COLOR = (229, 209, 168, 255)

# --- Normalization Reference Ranges ---
HEIGHT_RANGE = (-1.0, 1.0)
TEMPERATURE_RANGE_C = (-60.0, 60.0)

# Write normalized height into the alpha channel of the composite map.
ENCODE_HEIGHT_ALPHA = False

# --- Rendering & Performance ---
# Rows computed per task by the map driver.
ROWS_PER_BAND = 25
DEFAULT_LOOKUP_TABLE_SIZE = 256
DEFAULT_GRADIENT_LENGTH = 256
