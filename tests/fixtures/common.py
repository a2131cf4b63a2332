"""
Common leaf-set factories shared by all test modules.
"""

from __future__ import annotations

from typing import Any


LETTERS: list[bytes] = [b"a", b"b", b"c"]


def make_leaves(count: int, kind: str = "text") -> list[bytes]:
    """
    Build ``count`` distinct leaves.

    kind="text" gives b"leaf0", b"leaf1", ...; kind="bytes" gives
    single bytes 1..count (count must be < 256).
    """
    if kind == "bytes":
        return [bytes([i]) for i in range(1, count + 1)]
    return [f"leaf{i}".encode() for i in range(count)]


def make_address(value: int) -> bytes:
    """A 20-byte big-endian address holding ``value``."""
    return value.to_bytes(20, "big")


def make_records(count: int) -> list[dict[str, Any]]:
    """Simple records for canonical-JSON leaves."""
    return [{"id": i, "owner": f"user{i}", "balance": i * 10} for i in range(count)]
