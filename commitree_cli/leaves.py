"""
Leaf input helpers shared by CLI commands.

Leaves come from positional arguments and/or a file with one leaf per
line. By default each leaf is its UTF-8 text; with --hex each leaf is a
0x-prefixed hex string decoded to raw bytes.

Blank lines in a leaf file are skipped, so the empty leaf (b"") can only
be given as a "" argument.
"""

from __future__ import annotations

import logging
from argparse import Namespace
from pathlib import Path

from commitree.crypto.hash_functions import HashFunction, resolve_hash_function
from commitree.crypto.hashing import from_hex


logger = logging.getLogger(__name__)


def decode_leaf(value: str, as_hex: bool = False) -> bytes:
    """Turn one command-line leaf into bytes."""
    if as_hex:
        return from_hex(value)
    return value.encode("utf-8")


def read_leaf_file(path: Path, as_hex: bool = False) -> list[bytes]:
    """Read one leaf per line. Blank lines are skipped, never read as b""."""
    leaves = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.rstrip("\r\n")
            if not line:
                continue
            leaves.append(decode_leaf(line, as_hex))
    logger.info(f"Read {len(leaves)} leaves from {path}")
    return leaves


def collect_leaves(args: Namespace) -> list[bytes]:
    """Leaves from positional ``leaves`` plus ``--file``, in that order."""
    as_hex = getattr(args, "hex", False)
    leaves = [decode_leaf(v, as_hex) for v in (getattr(args, "leaves", None) or [])]
    leaf_file = getattr(args, "file", None)
    if leaf_file:
        leaves.extend(read_leaf_file(Path(leaf_file), as_hex))
    return leaves


def hash_function_for(args: Namespace) -> HashFunction:
    """--hash, else the CLI config, else the library default."""
    name = getattr(args, "hash", None)
    if name is None and getattr(args, "cli_config", None) is not None:
        name = args.cli_config.hash_function
    return resolve_hash_function(name)
