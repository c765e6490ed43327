# biome_generator/pipeline.py

"""
================================================================================
MAP DRIVER
================================================================================
Runs the field synthesis and color classification over the whole grid and
hands each finished pixel buffer to the image writer.

Every map product (composite biome map, single-field maps, animated frames)
is the same pipeline with a different output stage, selected by name.

Data Contract:
---------------
- Inputs:
    - config (dict): Generator overrides (see config.py).
    - products (list[str]): Any of PRODUCTS.
    - workers (int): 1 computes in-process; more uses a process pool that
      computes row bands in parallel.
- Outputs:
    - PNG files under the output directory, plus generation_config.json.
- Side Effects: Writes files and logs progress.
- Invariants: Cells are independent, so the band split and the number of
  workers never change the output. Offsets are derived before any band runs.
================================================================================
"""
import json
import logging
import multiprocessing
import os
import time

import numpy as np
from tqdm import tqdm

from . import color_maps
from . import image_io
from .errors import ConfigurationError
from .generator import BiomeMapGenerator

PRODUCTS = ('composite', 'temperature', 'humidity', 'height', 'clouds', 'terrain_slices')
# Products rendered once per animation frame.
ANIMATED_PRODUCTS = ('clouds', 'terrain_slices')

OUTPUT_NAMES = {
    'composite': 'biome_map.png',
    'temperature': 'temperature_map.png',
    'humidity': 'humidity_map.png',
    'height': 'height_map.png',
    'clouds': os.path.join('clouds', 'cloud_frame_{frame:03d}.png'),
    'terrain_slices': os.path.join('slices', 'terrain_slice_{frame:03d}.png'),
}


def resolve_color_tables(settings: dict, logger: logging.Logger) -> color_maps.ColorTables:
    """
    Loads every table that has an image path configured and builds the
    built-in default for the rest.
    """
    lookup_size = settings['lookup_table_size']
    gradient_length = settings['gradient_length']
    defaults = {
        'water': color_maps.create_water_gradient,
        'temperature': color_maps.create_temperature_gradient,
        'humidity': color_maps.create_humidity_gradient,
        'cloud': color_maps.create_cloud_gradient,
    }

    if settings['biome_table_path']:
        logger.info(f"Loading biome lookup table from '{settings['biome_table_path']}'")
        biome = image_io.load_color_table(settings['biome_table_path'])
    else:
        biome = color_maps.create_biome_lookup_table(lookup_size)

    gradients = {}
    for name, builder in defaults.items():
        path = settings[f'{name}_gradient_path']
        if path:
            logger.info(f"Loading {name} gradient from '{path}'")
            gradients[name] = image_io.load_gradient(path, name)
        else:
            gradients[name] = builder(gradient_length)

    tables = color_maps.ColorTables(biome=biome, **gradients)
    tables.validate()
    return tables


def frame_slice(settings: dict, frame: int) -> float:
    return frame * settings['slice_step']


def render_band(generator: BiomeMapGenerator, tables: color_maps.ColorTables, product: str,
                row_start: int, row_stop: int, frame: int = 0) -> np.ndarray:
    """Computes the RGBA colors of rows [row_start, row_stop) for one product."""
    settings = generator.settings
    wx_grid, wy_grid = generator.get_coordinate_grid(row_start, row_stop)

    if product == 'height':
        height = generator.get_height(wx_grid, wy_grid)
        return color_maps.get_height_colors(generator.normalize_height(height))

    terrain_slice = frame_slice(settings, frame) if product == 'terrain_slices' else None
    height, humidity, temperature = generator.get_fields(wx_grid, wy_grid, slice_=terrain_slice)

    if product == 'temperature':
        return color_maps.get_temperature_colors(temperature, tables.temperature, settings['temperature_range_c'])
    if product == 'humidity':
        return color_maps.get_humidity_colors(humidity, height, tables.humidity, settings['water_height'])

    colors = color_maps.classify_biomes(height, humidity, temperature, tables, settings)
    if product == 'clouds':
        cloud_noise = generator.get_cloud_noise(
            wx_grid, wy_grid, frame_slice(settings, frame), drift=frame * settings['cloud_drift']
        )
        colors = color_maps.apply_clouds(colors, cloud_noise, tables.cloud, settings)
    return colors


# --- Global variables for worker processes ---
worker_generator = None
worker_tables = None

def init_worker(config, tables, sampler):
    """Initializes the global state for each worker process."""
    global worker_generator, worker_tables

    worker_logger = logging.getLogger(f"Worker-{os.getpid()}")
    worker_generator = BiomeMapGenerator(config=config, logger=worker_logger, sampler=sampler)
    worker_tables = tables

def process_band(task):
    """Computes a single row band inside a worker. Returns the rows with their colors."""
    product, frame, row_start, row_stop = task
    colors = render_band(worker_generator, worker_tables, product, row_start, row_stop, frame)
    return row_start, row_stop, colors


def render_product(generator: BiomeMapGenerator, tables: color_maps.ColorTables, product: str,
                   frame: int = 0, pool=None, progress: bool = False) -> np.ndarray:
    """
    Assembles the full (dimension, dimension, 4) buffer for one product.
    Bands are computed in-process unless a worker pool is given.
    """
    if product not in PRODUCTS:
        raise ConfigurationError(f"Unknown product '{product}', expected one of {PRODUCTS}")

    dimension = generator.map_dimension
    rows_per_band = generator.settings['rows_per_band']
    bands = [(start, min(start + rows_per_band, dimension)) for start in range(0, dimension, rows_per_band)]
    buffer = np.empty((dimension, dimension, 4))

    if pool is None:
        results = (
            (start, stop, render_band(generator, tables, product, start, stop, frame))
            for start, stop in bands
        )
    else:
        tasks = [(product, frame, start, stop) for start, stop in bands]
        results = pool.imap_unordered(process_band, tasks)

    for row_start, row_stop, colors in tqdm(results, total=len(bands), desc=f"{product} #{frame}", disable=not progress):
        buffer[row_start:row_stop] = colors
    return buffer


def bake_map(config: dict, output_dir: str, products, logger: logging.Logger,
             workers: int = 1, sampler=None, progress: bool = False) -> dict:
    """
    Generates every requested product and writes it under `output_dir`.
    Returns a mapping of product name to the list of written paths.

    Raises:
        ConfigurationError: Before any work starts, for bad parameters,
            tables or product names.
        OSError: If the image writer fails.
    """
    unknown = [p for p in products if p not in PRODUCTS]
    if unknown:
        raise ConfigurationError(f"Unknown products {unknown}, expected any of {PRODUCTS}")
    if workers < 1:
        raise ConfigurationError(f"workers must be >= 1, got {workers}")

    generator = BiomeMapGenerator(config=config, logger=logger, sampler=sampler)
    logger.info("Preparing color tables...")
    tables = resolve_color_tables(generator.settings, logger)

    start_time = time.perf_counter()
    written = {}

    pool = None
    if workers > 1:
        logger.info(f"Using {workers} worker processes.")
        pool = multiprocessing.Pool(processes=workers, initializer=init_worker, initargs=(config, tables, sampler))

    try:
        for product in products:
            frames = range(generator.settings['animation_frames']) if product in ANIMATED_PRODUCTS else [0]
            logger.info(f"Generating '{product}' ({len(frames)} image(s))...")
            written[product] = []
            for frame in frames:
                buffer = render_product(generator, tables, product, frame=frame, pool=pool, progress=progress)
                path = os.path.join(output_dir, OUTPUT_NAMES[product].format(frame=frame))
                image_io.save_pixel_buffer(buffer, path)
                written[product].append(path)
            if written[product]:
                logger.info(f"Saved '{product}' to {os.path.dirname(written[product][0]) or '.'}")
            else:
                logger.warning(f"No frames requested, nothing written for '{product}'.")
    finally:
        if pool is not None:
            pool.close()
            pool.join()

    # Save the "birth certificate" of this map next to the images.
    os.makedirs(output_dir, exist_ok=True)
    gen_config_path = os.path.join(output_dir, "generation_config.json")
    with open(gen_config_path, 'w') as f:
        json.dump(generator.settings, f, indent=4)

    end_time = time.perf_counter()
    logger.info(f"Generation complete! Total time: {end_time - start_time:.2f} seconds.")
    return written
