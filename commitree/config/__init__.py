"""
Runtime Configuration Module

Provides configuration loading and management for commitree.
"""

from .runtime import (
    DEFAULT_HASH_FUNCTION,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "DEFAULT_HASH_FUNCTION",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
