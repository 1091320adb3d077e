"""
Configuration management for tppctl.

This module builds the explicit Settings object that is passed to every
component, from required environment variables and an optional YAML file.
"""

from tppctl.config.settings import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_EDITOR,
    Settings,
    get_config_path,
    load_config,
)
from tppctl.errors import ConfigurationError

__all__ = [
    "Settings",
    "load_config",
    "get_config_path",
    "ConfigurationError",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_EDITOR",
]
