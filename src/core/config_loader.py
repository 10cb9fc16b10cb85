#!/usr/bin/env python3
"""
Loader for the safe-outputs configuration.

The workflow compiler hands the collector a mapping of allowed output
types, either inline as a JSON string or as the path of a JSON/YAML file.
"""

import json
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Add file size limit to prevent DoS (1MB max for config files)
MAX_CONFIG_SIZE = 1024 * 1024


class ConfigError(ValueError):
    """Raised when the safe-outputs configuration cannot be loaded."""


def _ensure_mapping(data: Any, source: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Safe-outputs config from {source} must be a mapping, "
            f"got {type(data).__name__}"
        )
    return data


def load_config_file(filepath: str) -> Dict[str, Any]:
    """
    Load a safe-outputs config file (JSON or YAML).

    Args:
        filepath: Path to the config file

    Returns:
        Mapping of output type name to its settings
    """
    try:
        file_path = Path(filepath)
        file_size = file_path.stat().st_size

        if file_size > MAX_CONFIG_SIZE:
            raise ConfigError(
                f"Config file too large: {file_size} bytes (max: {MAX_CONFIG_SIZE})"
            )

        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(f"Failed to read config file {filepath}: {e}") from e

    try:
        # JSON is tried first; yaml rejects some valid JSON (tabs)
        data = json.loads(content) if content.strip() else None
    except ValueError:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {filepath}: {e}") from e

    return _ensure_mapping(data, filepath)


def load_safe_outputs_config(value: Optional[str]) -> Dict[str, Any]:
    """
    Resolve the safe-outputs configuration from an environment value.

    Args:
        value: Inline JSON object, or a path to a JSON/YAML file, or empty

    Returns:
        Mapping of output type name to True/False or a settings mapping.
        An empty value yields an empty mapping, which rejects every type.
    """
    if value is None or not value.strip():
        warnings.warn(
            "No safe-outputs config provided; every output type will be rejected",
            RuntimeWarning,
            stacklevel=2,
        )
        return {}

    text = value.strip()
    if text.startswith("{"):
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ConfigError(f"Could not parse safe-outputs config: {e}") from e
        return _ensure_mapping(data, "inline JSON")

    try:
        is_file = Path(text).is_file()
    except OSError:
        is_file = False
    if is_file:
        return load_config_file(text)

    raise ConfigError(
        "Safe-outputs config must be a JSON object or the path of an existing file"
    )
