"""
CLI command modules.
"""

from commitree_cli.commands import build, config, prove, verify

__all__ = ["build", "config", "prove", "verify"]
