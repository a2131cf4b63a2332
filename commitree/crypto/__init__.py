"""
Core cryptographic utilities.

Raw digest primitives plus the pluggable hash capability
the Merkle tree is built on.
"""
from .hashing import (
    sha256,
    keccak256,
    to_hex,
    from_hex,
)
from .hash_functions import (
    HashFunction,
    Keccak256,
    Sha256,
    available_hash_functions,
    get_hash_function,
    resolve_hash_function,
    hash_canonical,
)

__all__ = [
    "sha256",
    "keccak256",
    "to_hex",
    "from_hex",
    "HashFunction",
    "Keccak256",
    "Sha256",
    "available_hash_functions",
    "get_hash_function",
    "resolve_hash_function",
    "hash_canonical",
]
