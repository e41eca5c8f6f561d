"""Configuration module — exports Settings and load_config."""

from poczytajmy.config.loader import generation_params, load_config
from poczytajmy.config.settings import Settings

__all__ = ["Settings", "generation_params", "load_config"]
