"""
riviere.config.loader - Locate, parse and merge configuration.

Configuration comes from three layers, later layers winning:
1. DEFAULT_CONFIG
2. The nearest .riviere.toml, found by walking up from a start directory
3. RIVIERE_<SECTION>_<KEY> environment variables
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError

from riviere.config.defaults import CONFIG_FILENAME, DEFAULT_CONFIG, ENV_PREFIX
from riviere.errors import ConfigError

logger = logging.getLogger(__name__)


def find_config_file(start: Path) -> Path | None:
    """Find the nearest config file at or above ``start``.

    Args:
        start: Directory to start searching from.

    Returns:
        Path to .riviere.toml, or None if no ancestor has one.
    """
    current = Path(start).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def parse_toml_document(text: str) -> dict[str, Any]:
    """Parse TOML text into plain Python containers.

    Raises:
        ConfigError: If the text is not valid TOML.
    """
    try:
        document = tomlkit.parse(text)
    except ParseError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
    return document.unwrap()


def merge_configs(defaults: dict[str, Any], user: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``user`` over ``defaults`` without modifying either."""
    merged = copy.deepcopy(defaults)
    for key, value in user.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(path: Path) -> dict[str, Any]:
    """Load a config file merged over the defaults.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
    logger.debug("Loaded configuration from %s", path)
    return merge_configs(DEFAULT_CONFIG, parse_toml_document(text))


def _try_parse_env_value(value: str) -> Any:
    """Interpret an environment variable value.

    JSON arrays and objects are decoded, true/false become booleans and
    integers and floats become numbers. Anything else, including malformed
    JSON, is returned unchanged.
    """
    stripped = value.strip()
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    lowered = stripped.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        return float(stripped)
    except ValueError:
        return value


def apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply RIVIERE_<SECTION>_<KEY> environment variables to ``config``.

    The part after the prefix is split at the first underscore: the first
    word names the section and the rest the key, both lowercased. Missing
    sections are created.
    """
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        section, _, key = name[len(ENV_PREFIX) :].lower().partition("_")
        if not section or not key:
            continue
        config.setdefault(section, {})[key] = _try_parse_env_value(raw)
    return config


def validate_config(config: dict[str, Any]) -> list[str]:
    """Check configuration values.

    Returns:
        Human-readable problems; empty when the config is usable.
    """
    errors: list[str] = []
    graph_path = config.get("graph", {}).get("path")
    if not isinstance(graph_path, str) or not graph_path:
        errors.append("graph.path must be a non-empty string")

    suggestions = config.get("suggestions", {})
    threshold = suggestions.get("threshold")
    if not isinstance(threshold, (int, float)) or isinstance(threshold, bool):
        errors.append("suggestions.threshold must be a number")
    elif not 0.0 <= threshold <= 1.0:
        errors.append("suggestions.threshold must be between 0 and 1")
    limit = suggestions.get("limit")
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        errors.append("suggestions.limit must be a positive integer")
    return errors


def get_config(
    config_path: Path | None = None,
    start: Path | None = None,
) -> dict[str, Any]:
    """Resolve the effective configuration.

    Args:
        config_path: Explicit config file; skips discovery.
        start: Directory to start discovery from (default: cwd).

    Returns:
        Defaults, merged with the config file if one is found, with
        environment overrides applied.

    Raises:
        ConfigError: If the config file is unreadable or the result is
            invalid.
    """
    path = config_path or find_config_file(start or Path.cwd())
    config = load_config(path) if path else copy.deepcopy(DEFAULT_CONFIG)
    config = apply_env_overrides(config)
    errors = validate_config(config)
    if errors:
        raise ConfigError("; ".join(errors))
    return config


__all__ = [
    "find_config_file",
    "parse_toml_document",
    "merge_configs",
    "load_config",
    "apply_env_overrides",
    "validate_config",
    "get_config",
]
