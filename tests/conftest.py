"""
Pytest configuration and shared fixtures for commitree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from fixtures.common import (  # noqa: E402
    LETTERS,
    make_address,
    make_leaves,
)

from commitree.config import set_default_config  # noqa: E402
from commitree.crypto.hash_functions import Keccak256, Sha256  # noqa: E402
from commitree.merkle.merkle_tree import MerkleTree  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _reset_default_config(monkeypatch):
    """Every test starts from the built-in defaults, not the caller's env."""
    for name in ("HASH_FUNCTION", "LOG_LEVEL", "LOG_FILE", "OUTPUT_FORMAT"):
        monkeypatch.delenv(f"COMMITREE_{name}", raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture
def keccak():
    """Keccak-256 hash function."""
    return Keccak256()


@pytest.fixture
def sha():
    """SHA-256 hash function."""
    return Sha256()


@pytest.fixture
def letters_tree(keccak):
    """Tree over b"a", b"b", b"c" (one odd carry at the leaf layer)."""
    return MerkleTree.build(LETTERS, keccak)


@pytest.fixture
def numbers_tree(keccak):
    """Tree over five single-byte leaves (5 -> 3 -> 2 -> 1)."""
    return MerkleTree.build(make_leaves(5, kind="bytes"), keccak)


@pytest.fixture
def addresses_tree(keccak):
    """Tree over three 20-byte addresses."""
    return MerkleTree.build([make_address(i) for i in (1, 2, 3)], keccak)


@pytest.fixture
def isolated_cli(tmp_path, monkeypatch):
    """Run CLI commands with no config files and a scratch working dir."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
