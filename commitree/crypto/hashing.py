"""
Digest Primitives
Raw Keccak-256 / SHA-256 digests and 0x hex conversion.

Tree code never calls these directly; it goes through a HashFunction
(see hash_functions.py) so the digest can be swapped per tree.

Note: Keccak-256 here is the Ethereum variant (original Keccak padding).
It is NOT hashlib.sha3_256, which implements the final NIST padding and
produces different digests.
"""
from __future__ import annotations

import hashlib

from eth_utils import is_0x_prefixed, keccak, remove_0x_prefix


def sha256(data: bytes) -> bytes:
    """
    SHA-256 digest of ``data``.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Keccak-256 digest of ``data`` (32 bytes).

    Example:
        >>> keccak256(b"a").hex()
        '3ac225168df54212a25c1c01fd35bebfea408fdac2e31ddd6f80a4bbf9a5f1cb'
    """
    return keccak(primitive=bytes(data))


def to_hex(data: bytes) -> str:
    """Lowercase hex with a 0x prefix; b"" becomes "0x"."""
    return "0x" + bytes(data).hex()


def from_hex(hex_string: str) -> bytes:
    """
    Decode a 0x-prefixed hex string.

    Raises:
        ValueError: On a missing prefix, an odd number of digits or a
            non-hex digit

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    # only the lowercase prefix is accepted, digits may be any case
    if not is_0x_prefixed(hex_string) or hex_string.startswith("0X"):
        raise ValueError(f"Hex string must start with '0x', got: {hex_string[:10]!r}")

    digits = remove_0x_prefix(hex_string)
    if len(digits) % 2:
        raise ValueError(f"Hex string must have even length after 0x, got {len(digits)} digits")

    try:
        return bytes.fromhex(digits)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in {hex_string[:10]!r}: {e}") from e


__all__ = [
    "sha256",
    "keccak256",
    "to_hex",
    "from_hex",
]
