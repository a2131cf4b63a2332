"""
Runtime Configuration

Library-wide defaults for tree construction. Today that is the hash
function used when MerkleTree.build() and friends get none.

Sources, lowest to highest precedence:
    RuntimeConfig() defaults -> YAML file or dict -> COMMITREE_* env vars

A .env file in the working directory is loaded on import.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from commitree.schemas.errors import ConfigException

load_dotenv()


ENV_PREFIX = "COMMITREE_"

DEFAULT_HASH_FUNCTION = "keccak256"

# config field -> environment variable
_ENV_VARS = {
    "hash_function": f"{ENV_PREFIX}HASH_FUNCTION",
}


@dataclass
class RuntimeConfig:
    """
    Runtime configuration for commitree.

    Attributes:
        hash_function: Registered name of the hash used when a tree is
            built without an explicit hash function
        extra: Free-form settings for callers
    """
    hash_function: str = DEFAULT_HASH_FUNCTION
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        return {
            name: os.environ[var]
            for name, var in _ENV_VARS.items()
            if os.environ.get(var)
        }

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Defaults overlaid with COMMITREE_* environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """
        Load a YAML mapping of config fields. An empty file gives the defaults.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigException: On invalid YAML, a non-mapping document or unknown keys
        """
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            data = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ConfigException(f"Invalid YAML in config file: {e}", path=str(path)) from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigException("Config file must contain a mapping", path=str(path))
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Build from a (possibly partial) dict; unknown keys are an error."""
        unknown = sorted(set(data) - {f.name for f in fields(cls)})
        if unknown:
            raise ConfigException(
                f"Unknown configuration keys: {', '.join(unknown)}",
                details={"keys": unknown},
            )
        return cls(**data)

    def with_env_overrides(self) -> "RuntimeConfig":
        """A copy with environment variables applied on top (self if none are set)."""
        overrides = self._get_env_overrides()
        if not overrides:
            return self
        return replace(self, extra=dict(self.extra), **overrides)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """The process-wide config, read from the environment on first use."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig | None) -> None:
    """Replace the process-wide config; None re-reads the environment on next use."""
    global _default_config
    _default_config = config
