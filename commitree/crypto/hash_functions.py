"""
Hash Capability
The pluggable digest contract the Merkle tree is generic over.

A hash function maps an arbitrary byte string to a fixed-size digest.
Digests are plain ``bytes`` of ``digest_size`` length, which gives the
tree everything it needs from a hash value:
- equality (``==``)
- a total order (byte-wise lexicographic ``<``)
- a default/zero value (``default()``)
- round trip to/from raw bytes (``to_bytes`` / ``from_bytes``)

The tree requires determinism only. Choosing a function with adequate
preimage/collision resistance is the caller's responsibility.

Usage:
    from commitree.crypto import get_hash_function

    hf = get_hash_function("keccak256")
    digest = hf.hash(b"a")
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from commitree.crypto.hashing import keccak256, sha256
from commitree.schemas.canonical import canonical_leaf_bytes
from commitree.schemas.errors import InvalidHashException, UnknownHashFunctionException


class HashFunction(ABC):
    """
    Abstract base for hash functions usable by MerkleTree.

    Subclasses set ``name`` and ``digest_size`` and implement ``hash``.
    Instances are stateless; equality is by name.
    """

    name: str = ""
    digest_size: int = 32

    @abstractmethod
    def hash(self, data: bytes) -> bytes:
        """Hash raw bytes to a ``digest_size``-byte digest."""

    def hash_pair(self, left: bytes, right: bytes) -> bytes:
        """Hash ``left || right``. Callers decide the order."""
        return self.hash(left + right)

    def default(self) -> bytes:
        """The zero hash: ``digest_size`` zero bytes."""
        return bytes(self.digest_size)

    def to_bytes(self, value: bytes) -> bytes:
        return bytes(value)

    def from_bytes(self, raw: bytes) -> bytes:
        """
        Convert raw bytes to a hash value of this function.

        Raises:
            InvalidHashException: If the length is not ``digest_size``
        """
        if len(raw) != self.digest_size:
            raise InvalidHashException(
                f"{self.name} hash must be {self.digest_size} bytes, got {len(raw)}",
                expected_size=self.digest_size,
                actual_size=len(raw),
            )
        return bytes(raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashFunction):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Keccak256(HashFunction):
    """Keccak-256, 32-byte digests. The default for commitree trees."""

    name = "keccak256"
    digest_size = 32

    def hash(self, data: bytes) -> bytes:
        return keccak256(data)


class Sha256(HashFunction):
    """SHA-256, 32-byte digests."""

    name = "sha256"
    digest_size = 32

    def hash(self, data: bytes) -> bytes:
        return sha256(data)


_REGISTRY: dict[str, type[HashFunction]] = {
    Keccak256.name: Keccak256,
    Sha256.name: Sha256,
}


def available_hash_functions() -> list[str]:
    """Names accepted by get_hash_function(), sorted."""
    return sorted(_REGISTRY)


def get_hash_function(name: str) -> HashFunction:
    """
    Look up a hash function by name (case-insensitive).

    Raises:
        UnknownHashFunctionException: If the name is not registered
    """
    cls = _REGISTRY.get(name.strip().lower())
    if cls is None:
        raise UnknownHashFunctionException(name, available=available_hash_functions())
    return cls()


def resolve_hash_function(hash_function: HashFunction | str | None = None) -> HashFunction:
    """
    Resolve an instance, a registered name, or None (configured default).
    """
    if isinstance(hash_function, HashFunction):
        return hash_function
    if hash_function is None:
        from commitree.config import get_default_config

        hash_function = get_default_config().hash_function
    return get_hash_function(hash_function)


def hash_canonical(obj: Any, hash_function: HashFunction | str | None = None) -> bytes:
    """
    Hash an object through its canonical JSON form.

    Rule: digest = hash(dumps_canonical(obj).encode("utf-8"))

    Raises:
        CanonicalizationException: If the object cannot be canonically serialized
    """
    return resolve_hash_function(hash_function).hash(canonical_leaf_bytes(obj))


__all__ = [
    "HashFunction",
    "Keccak256",
    "Sha256",
    "available_hash_functions",
    "get_hash_function",
    "resolve_hash_function",
    "hash_canonical",
]
