# bake_map.py

"""
================================================================================
BIOME MAP BAKER SCRIPT
================================================================================
This script is a command-line tool for generating a world's biome map and its
companion maps (temperature, humidity, height, animated cloud frames) and
saving them as PNG images.

Usage:
    python bake_map.py --config path/to/your/config.json --output out_dir
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import multiprocessing

# Add project root to Python path to allow importing from biome_generator
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from biome_generator import config as DEFAULTS
from biome_generator.errors import ConfigurationError
from biome_generator.pipeline import PRODUCTS, bake_map


def run(config_path: str, output_dir: str, products: list, workers: int, frames: int = None) -> int:
    """
    Loads a configuration and bakes the requested products.
    Returns a process exit code.
    """
    # 1. --- Setup Logging ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("Baker")

    # 2. --- Load Configuration ---
    map_params = {}
    if config_path:
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, 'r') as f:
                config = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            logger.critical(f"Failed to load or parse config file: {e}")
            return 1
        map_params = config.get('biome_map_parameters', {})
    else:
        logger.info("No configuration given, using internal defaults.")

    if frames is not None:
        map_params['animation_frames'] = frames
    seed = map_params.get('seed', DEFAULTS.DEFAULT_SEED)
    output_dir = output_dir or os.path.join("baked_maps", f"seed_{seed}")

    # 3. --- Generate ---
    try:
        written = bake_map(map_params, output_dir, products, logger, workers=workers, progress=True)
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        return 2
    except OSError as e:
        logger.critical(f"Failed to write output: {e}")
        return 3

    total = sum(len(paths) for paths in written.values())
    logger.info(f"{total} image(s) and generation_config.json saved to: {output_dir}")
    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Biome map baker.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON file with a 'biome_map_parameters' object."
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory. Defaults to baked_maps/seed_<seed>."
    )
    parser.add_argument(
        "--products",
        nargs="+",
        choices=PRODUCTS,
        default=["composite"],
        help="Which maps to generate."
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=max(1, multiprocessing.cpu_count() - 1),
        help="Number of worker processes computing row bands."
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=None,
        help="Number of frames for the animated products."
    )
    args = parser.parse_args()

    sys.exit(run(args.config, args.output, args.products, args.workers, args.frames))
