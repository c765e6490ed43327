# biome_generator/generator.py

"""
================================================================================
CORE BIOME MAP GENERATOR
================================================================================
This module contains the main BiomeMapGenerator class, responsible for
synthesizing the raw scalar fields of a biome map: height, humidity,
temperature and cloud cover.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A dictionary of parameters which can override the
      internal defaults. Expected keys include 'seed', 'height_scale', etc.
    - logger: A configured Python logging object for runtime messages.
    - sampler (optional): A NoiseSampler. Defaults to PerlinSampler.
- Outputs (from methods):
    - NumPy arrays with the broadcast shape of the given x/y coordinates.
      Height is a signed fractal sum, humidity is in [0, 1], temperature is
      in degrees Celsius and cloud noise is in [0, 1].
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed and configuration, the output is
  deterministic. All octave offsets are derived in __init__, before any
  field is sampled, and are never modified afterwards.
================================================================================
"""
import logging
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from .errors import ConfigurationError
from .interpolation import inverse_lerp, lerp
from .noise import NoiseSampler, PerlinSampler
from .offsets import OctaveOffsets, derive_offsets


def _is_integer(value) -> bool:
    # JSON configs give plain ints; bool is an int subclass but never a count.
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


@dataclass(frozen=True)
class FieldParameters:
    """Octave schedule of one fractal field."""
    layer_count: int
    scale: float
    persistence: float
    lacunarity: float

    def validate(self, name: str):
        if not _is_integer(self.layer_count):
            raise ConfigurationError(f"{name}: layer_count must be an integer, got {self.layer_count!r}")
        if self.layer_count < 0:
            raise ConfigurationError(f"{name}: layer_count must be >= 0, got {self.layer_count}")
        if not self.scale > 0:
            raise ConfigurationError(f"{name}: scale must be > 0, got {self.scale}")
        if not 0 < self.persistence <= 1:
            raise ConfigurationError(f"{name}: persistence must be in (0, 1], got {self.persistence}")
        if not self.lacunarity > 1:
            raise ConfigurationError(f"{name}: lacunarity must be > 1, got {self.lacunarity}")


class BiomeMapGenerator:
    """
    Generates the scalar fields of a procedurally generated biome map.
    This class is backend-only and does not handle any coloring or I/O.
    """
    def __init__(self, config: dict, logger: logging.Logger, sampler: NoiseSampler = None):
        """
        Initializes the generator and derives every octave offset from the seed.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
            sampler (NoiseSampler, optional): The coherent noise source. If
                None, the default Perlin sampler is used.

        Raises:
            ConfigurationError: If any parameter is outside its valid range.
        """
        self.logger = logger
        self.user_config = config
        self.logger.info("BiomeMapGenerator initializing...")

        height_scale = self.user_config.get('height_scale', DEFAULTS.HEIGHT_SCALE)

        # --- Consolidate Configuration ---
        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'map_dimension': self.user_config.get('map_dimension', DEFAULTS.DEFAULT_MAP_DIMENSION),
            'sample_jitter': self.user_config.get('sample_jitter', DEFAULTS.SAMPLE_JITTER),

            'height_layers': self.user_config.get('height_layers', DEFAULTS.HEIGHT_LAYERS),
            'height_scale': height_scale,
            'height_persistence': self.user_config.get('height_persistence', DEFAULTS.HEIGHT_PERSISTENCE),
            'height_lacunarity': self.user_config.get('height_lacunarity', DEFAULTS.HEIGHT_LACUNARITY),

            'humidity_layers': self.user_config.get('humidity_layers', DEFAULTS.HUMIDITY_LAYERS),
            'humidity_scale': self.user_config.get('humidity_scale', height_scale / DEFAULTS.HUMIDITY_SCALE_DIVISOR),
            'humidity_persistence': self.user_config.get('humidity_persistence', DEFAULTS.HUMIDITY_PERSISTENCE),
            'humidity_lacunarity': self.user_config.get('humidity_lacunarity', DEFAULTS.HUMIDITY_LACUNARITY),
            'humidity_height_weight': self.user_config.get('humidity_height_weight', DEFAULTS.HUMIDITY_HEIGHT_WEIGHT),
            'humidity_bias': self.user_config.get('humidity_bias', DEFAULTS.HUMIDITY_BIAS),

            'temperature_layers': self.user_config.get('temperature_layers', DEFAULTS.TEMPERATURE_LAYERS),
            'temperature_scale': self.user_config.get('temperature_scale', height_scale),
            'temperature_persistence': self.user_config.get('temperature_persistence', DEFAULTS.TEMPERATURE_PERSISTENCE),
            'temperature_lacunarity': self.user_config.get('temperature_lacunarity', DEFAULTS.TEMPERATURE_LACUNARITY),
            'temperature_model': self.user_config.get('temperature_model', DEFAULTS.TEMPERATURE_MODEL),
            'pole_temp_c': self.user_config.get('pole_temp_c', DEFAULTS.POLE_TEMP_C),
            'equator_temp_c': self.user_config.get('equator_temp_c', DEFAULTS.EQUATOR_TEMP_C),
            'temperature_noise_c': self.user_config.get('temperature_noise_c', DEFAULTS.TEMPERATURE_NOISE_C),
            'subtractive_base_temp_c': self.user_config.get('subtractive_base_temp_c', DEFAULTS.SUBTRACTIVE_BASE_TEMP_C),
            'subtractive_latitude_divisor': self.user_config.get('subtractive_latitude_divisor', DEFAULTS.SUBTRACTIVE_LATITUDE_DIVISOR),
            'subtractive_lowland_cooling_c': self.user_config.get('subtractive_lowland_cooling_c', DEFAULTS.SUBTRACTIVE_LOWLAND_COOLING_C),

            'cloud_scale': self.user_config.get('cloud_scale', height_scale / DEFAULTS.CLOUD_SCALE_DIVISOR),
            'cloud_threshold': self.user_config.get('cloud_threshold', DEFAULTS.CLOUD_THRESHOLD),
            'cloud_edge_threshold': self.user_config.get('cloud_edge_threshold', DEFAULTS.CLOUD_EDGE_THRESHOLD),
            'cloud_edge_alpha': self.user_config.get('cloud_edge_alpha', DEFAULTS.CLOUD_EDGE_ALPHA),
            'cloud_color': self.user_config.get('cloud_color', DEFAULTS.CLOUD_COLOR),
            'cloud_drift': self.user_config.get('cloud_drift', DEFAULTS.CLOUD_DRIFT),

            'animation_frames': self.user_config.get('animation_frames', DEFAULTS.ANIMATION_FRAMES),
            'slice_step': self.user_config.get('slice_step', DEFAULTS.SLICE_STEP),

            'beach_height': self.user_config.get('beach_height', DEFAULTS.BEACH_HEIGHT),
            'water_height': self.user_config.get('water_height', DEFAULTS.WATER_HEIGHT),
            'beach_color': self.user_config.get('beach_color', DEFAULTS.BEACH_COLOR),
            'height_range': self.user_config.get('height_range', DEFAULTS.HEIGHT_RANGE),
            'temperature_range_c': self.user_config.get('temperature_range_c', DEFAULTS.TEMPERATURE_RANGE_C),
            'encode_height_alpha': self.user_config.get('encode_height_alpha', DEFAULTS.ENCODE_HEIGHT_ALPHA),

            'rows_per_band': self.user_config.get('rows_per_band', DEFAULTS.ROWS_PER_BAND),
            'lookup_table_size': self.user_config.get('lookup_table_size', DEFAULTS.DEFAULT_LOOKUP_TABLE_SIZE),
            'gradient_length': self.user_config.get('gradient_length', DEFAULTS.DEFAULT_GRADIENT_LENGTH),

            # Optional image files replacing the built-in color tables.
            'biome_table_path': self.user_config.get('biome_table_path'),
            'water_gradient_path': self.user_config.get('water_gradient_path'),
            'temperature_gradient_path': self.user_config.get('temperature_gradient_path'),
            'humidity_gradient_path': self.user_config.get('humidity_gradient_path'),
            'cloud_gradient_path': self.user_config.get('cloud_gradient_path'),
        }

        # --- Field Parameter Records ---
        self.height_params = self._field_parameters('height')
        self.humidity_params = self._field_parameters('humidity')
        self.temperature_params = self._field_parameters('temperature')
        self.cloud_params = FieldParameters(
            layer_count=self.settings['height_layers'],
            scale=self.settings['cloud_scale'],
            persistence=self.settings['height_persistence'],
            lacunarity=self.settings['height_lacunarity'],
        )
        self._validate_settings()

        # --- Public Properties for easy access ---
        self.seed = self.settings['seed']
        self.map_dimension = self.settings['map_dimension']

        # --- Initialize Noise ---
        if sampler is not None:
            self.sampler = sampler
            self.logger.debug("Initialized with injected noise sampler.")
        else:
            self.sampler = PerlinSampler()

        # --- Derive Offsets (must happen before any sampling) ---
        self.offsets: OctaveOffsets = derive_offsets(
            self.seed,
            self.height_params.layer_count,
            self.humidity_params.layer_count,
            self.temperature_params.layer_count,
        )
        self.logger.debug(f"Height offsets: {self.offsets.height.tolist()}")

        self.logger.info(f"BiomeMapGenerator initialized with seed: {self.seed}")
        self.logger.info(
            f"Map dimensions: {self.map_dimension}x{self.map_dimension} cells, "
            f"temperature model: {self.settings['temperature_model']}"
        )

    def _field_parameters(self, name: str) -> FieldParameters:
        return FieldParameters(
            layer_count=self.settings[f'{name}_layers'],
            scale=self.settings[f'{name}_scale'],
            persistence=self.settings[f'{name}_persistence'],
            lacunarity=self.settings[f'{name}_lacunarity'],
        )

    def _validate_settings(self):
        """Rejects unusable parameters before any generation starts."""
        self.height_params.validate('height')
        self.humidity_params.validate('humidity')
        self.temperature_params.validate('temperature')
        self.cloud_params.validate('cloud')

        if not _is_integer(self.settings['seed']):
            raise ConfigurationError(f"seed must be an integer, got {self.settings['seed']!r}")
        if self.settings['map_dimension'] <= 0:
            raise ConfigurationError(f"map_dimension must be > 0, got {self.settings['map_dimension']}")
        if self.settings['water_height'] > self.settings['beach_height']:
            raise ConfigurationError(
                f"water_height ({self.settings['water_height']}) must not exceed "
                f"beach_height ({self.settings['beach_height']})"
            )
        if self.settings['temperature_model'] not in DEFAULTS.TEMPERATURE_MODELS:
            raise ConfigurationError(
                f"Unknown temperature_model '{self.settings['temperature_model']}', "
                f"expected one of {DEFAULTS.TEMPERATURE_MODELS}"
            )
        for key in ('height_range', 'temperature_range_c'):
            low, high = self.settings[key]
            if not low < high:
                raise ConfigurationError(f"{key} must be an increasing (low, high) pair, got {self.settings[key]}")
        if self.settings['rows_per_band'] <= 0:
            raise ConfigurationError(f"rows_per_band must be > 0, got {self.settings['rows_per_band']}")
        if self.settings['cloud_edge_threshold'] > self.settings['cloud_threshold']:
            raise ConfigurationError(
                f"cloud_edge_threshold ({self.settings['cloud_edge_threshold']}) must not exceed "
                f"cloud_threshold ({self.settings['cloud_threshold']})"
            )
        frames = self.settings['animation_frames']
        if not _is_integer(frames) or frames < 0:
            raise ConfigurationError(f"animation_frames must be an integer >= 0, got {frames!r}")

    def _fractal_sum(self, x, y, offsets: np.ndarray, params: FieldParameters, signed: bool, slice_=None) -> np.ndarray:
        """
        Sums `params.layer_count` octaves of noise at rising frequency and
        falling amplitude. With `slice_` the 3D sampler is used instead of the
        2D one. `signed` selects a [-1, 1] sample; otherwise [0, 1].
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        jitter = self.settings['sample_jitter']

        value = np.zeros(np.broadcast(x, y).shape)
        amplitude = 1.0
        frequency = 1.0
        for octave in range(params.layer_count):
            sample_x = x / (params.scale / frequency) + offsets[octave, 0] + jitter
            sample_y = y / (params.scale / frequency) + offsets[octave, 1] + jitter

            if slice_ is None:
                sample = self.sampler.sample_2d(sample_x, sample_y)
                if signed:
                    sample = sample * 2 - 1
            else:
                sample = self.sampler.sample_3d(sample_x, sample_y, slice_)
                if not signed:
                    sample = inverse_lerp(-1.0, 1.0, sample)

            value = value + sample * amplitude
            # amplitude decreases each octave if persistence < 1
            amplitude *= params.persistence
            # frequency increases each octave if lacunarity > 1
            frequency *= params.lacunarity
        return value

    def normalize_height(self, height) -> np.ndarray:
        """Maps height onto [0, 1] against the fixed reference range."""
        low, high = self.settings['height_range']
        return inverse_lerp(low, high, height)

    def get_height(self, x, y, slice_=None) -> np.ndarray:
        """Signed fractal elevation. Not renormalized; roughly [-1, 1]."""
        return self._fractal_sum(x, y, self.offsets.height, self.height_params, signed=True, slice_=slice_)

    def get_humidity(self, x, y, height, slice_=None) -> np.ndarray:
        """
        Fractal humidity dried by elevation: high ground loses moisture in
        proportion to its normalized height, then a constant bias is added back.
        """
        humidity = self._fractal_sum(x, y, self.offsets.humidity, self.humidity_params, signed=False, slice_=slice_)
        humidity = humidity - self.settings['humidity_height_weight'] * self.normalize_height(height)
        humidity = humidity + self.settings['humidity_bias']
        return np.clip(humidity, 0.0, 1.0)

    def get_temperature(self, x, y, height, slice_=None) -> np.ndarray:
        """Temperature in Celsius from latitude, noise and (for one model) height."""
        noise = self._fractal_sum(x, y, self.offsets.temperature, self.temperature_params, signed=True, slice_=slice_)
        perturbation = noise * self.settings['temperature_noise_c']

        half = self.map_dimension / 2.0
        dist_from_equator = np.abs(np.asarray(y, dtype=np.float64) - half)

        if self.settings['temperature_model'] == 'latitude_linear':
            # 1 on the equator row, 0 at the top and bottom edges.
            latitude = inverse_lerp(half, 0.0, dist_from_equator)
            latitude_temp_c = lerp(self.settings['pole_temp_c'], self.settings['equator_temp_c'], latitude)
            return latitude_temp_c - perturbation

        # latitude_subtractive: low-lying land and sea are cooled.
        temp_c = self.settings['subtractive_base_temp_c'] - perturbation
        temp_c = temp_c - dist_from_equator / self.settings['subtractive_latitude_divisor']
        lowland = 1.0 - self.normalize_height(height)
        return temp_c - self.settings['subtractive_lowland_cooling_c'] * lowland

    def get_cloud_noise(self, x, y, slice_, drift: float = 0.0) -> np.ndarray:
        """
        Cloud density in [0, 1] at a time-like slice. Shares the height
        offsets and octave schedule but uses its own scale. `drift` shifts
        the sampled x coordinate so successive frames move sideways.
        """
        x = np.asarray(x, dtype=np.float64) + drift
        cloud = self._fractal_sum(x, y, self.offsets.height, self.cloud_params, signed=True, slice_=slice_)
        return inverse_lerp(-1.0, 1.0, cloud)

    def get_fields(self, x, y, slice_=None) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Height, humidity and temperature for the given cells."""
        height = self.get_height(x, y, slice_=slice_)
        humidity = self.get_humidity(x, y, height, slice_=slice_)
        temperature = self.get_temperature(x, y, height, slice_=slice_)
        return height, humidity, temperature

    def get_coordinate_grid(self, row_start: int, row_stop: int):
        """
        Integer cell coordinates for rows [row_start, row_stop) across the
        full map width, as a pair of (rows, dimension) arrays.
        """
        x_coords = np.arange(self.map_dimension, dtype=np.float64)
        y_coords = np.arange(row_start, row_stop, dtype=np.float64)
        return np.meshgrid(x_coords, y_coords)
