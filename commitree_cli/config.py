"""
CLI Configuration

Settings for the commitree command line, read from a JSON file and
overridden by COMMITREE_* environment variables.

File lookup when --config is not given (first match wins):
    ./commitree.json
    ./.commitree.json
    ~/.config/commitree/config.json
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from commitree.schemas.errors import ConfigException


ENV_PREFIX = "COMMITREE_"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # None defers to commitree.config (COMMITREE_HASH_FUNCTION or keccak256)
    hash_function: str | None = None

    log_level: str = "WARNING"
    log_file: str | None = None

    default_output_format: str = "human"  # "human" or "json"


# config field -> environment variable
_ENV_VARS = {
    "hash_function": f"{ENV_PREFIX}HASH_FUNCTION",
    "log_level": f"{ENV_PREFIX}LOG_LEVEL",
    "log_file": f"{ENV_PREFIX}LOG_FILE",
    "default_output_format": f"{ENV_PREFIX}OUTPUT_FORMAT",
}

# keys that may be null in the config file
_NULLABLE = {"hash_function", "log_file"}


def _default_paths() -> list[Path]:
    return [
        Path.cwd() / "commitree.json",
        Path.cwd() / ".commitree.json",
        Path.home() / ".config" / "commitree" / "config.json",
    ]


def load_config_from_env(base: CLIConfig | None = None) -> CLIConfig:
    """``base`` (or the defaults) with every set COMMITREE_* variable applied."""
    overrides = {name: os.environ[var] for name, var in _ENV_VARS.items() if os.environ.get(var)}
    return replace(base or CLIConfig(), **overrides)


def load_config_from_file(path: Path) -> CLIConfig:
    """
    Read a JSON config file. Keys missing from the file keep their defaults;
    keys CLIConfig does not know are ignored.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigException: If the file is not a JSON object or a value is not a
            string (null is allowed for hash_function and log_file)
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data: Any = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigException(f"Invalid JSON in config file: {e}", path=str(path)) from e
    if not isinstance(data, dict):
        raise ConfigException("Config file must contain a JSON object", path=str(path))

    values = {k: v for k, v in data.items() if k in _ENV_VARS}
    for key, value in values.items():
        if value is None and key in _NULLABLE:
            continue
        if not isinstance(value, str):
            raise ConfigException(
                f"Config key {key!r} must be a string, got {type(value).__name__}",
                path=str(path),
                details={"key": key},
            )
    return CLIConfig(**values)


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load the effective CLI configuration.

    An explicit ``config_path`` must exist. Otherwise the first default
    location that exists is used, or the built-in defaults if none does.
    Environment variables win over the file.
    """
    if config_path is None:
        config_path = next((p for p in _default_paths() if p.exists()), None)

    config = load_config_from_file(config_path) if config_path is not None else CLIConfig()
    return load_config_from_env(config)


def get_default_config_template() -> str:
    """Contents written by `commitree config --init`."""
    return json.dumps(
        {
            "hash_function": "keccak256",
            "log_level": "WARNING",
            "log_file": None,
            "default_output_format": "human",
        },
        indent=2,
    ) + "\n"
