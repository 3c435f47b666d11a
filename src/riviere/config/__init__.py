"""
riviere.config - Configuration loading and defaults
"""

from riviere.config.defaults import CONFIG_FILENAME, DEFAULT_CONFIG
from riviere.config.loader import (
    apply_env_overrides,
    find_config_file,
    get_config,
    load_config,
    merge_configs,
    parse_toml_document,
    validate_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "apply_env_overrides",
    "find_config_file",
    "get_config",
    "load_config",
    "merge_configs",
    "parse_toml_document",
    "validate_config",
]
