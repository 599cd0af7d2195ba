"""Configuration loading, schema, and defaults."""

from reporules.config.loader import ConfigError, load_config, parse_raw_rules
from reporules.config.schema import ReporulesConfig

__all__ = [
    "ConfigError",
    "ReporulesConfig",
    "load_config",
    "parse_raw_rules",
]
