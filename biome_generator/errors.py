# biome_generator/errors.py

class ConfigurationError(ValueError):
    """Raised before generation starts when a parameter or table is unusable."""
