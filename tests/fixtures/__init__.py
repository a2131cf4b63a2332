"""
Test fixtures package for commitree tests.

Factory functions for leaf sets:
- common.py: leaves, addresses, records

Usage:
    from fixtures import make_leaves

    def test_something():
        leaves = make_leaves(5)
"""

from .common import (
    LETTERS,
    make_address,
    make_leaves,
    make_records,
)

__all__ = [
    "LETTERS",
    "make_address",
    "make_leaves",
    "make_records",
]
