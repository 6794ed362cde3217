"""Configuration loading and schema."""

from blamediff.config.loader import ConfigError, load_config
from blamediff.config.schema import BlameDiffConfig

__all__ = [
    "BlameDiffConfig",
    "ConfigError",
    "load_config",
]
