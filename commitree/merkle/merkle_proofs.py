"""
Merkle Proofs Convenience Wrappers
Thin class-based wrappers around the functions in merkle_tree.py.

This module provides:
- MerkleProver: Generate proofs and roots from raw leaves or records
- MerkleVerifier: Verify proofs, optionally raising on failure

Records (dicts, Pydantic models) become leaves through canonical JSON,
so the same record always lands on the same leaf.
"""
from __future__ import annotations

from typing import Any, Sequence

from commitree.crypto.hash_functions import HashFunction, resolve_hash_function
from commitree.crypto.hashing import to_hex
from commitree.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_proof,
    build_merkle_root,
    verify_merkle_proof,
    verify_proof,
)
from commitree.schemas.canonical import canonical_leaf_bytes
from commitree.schemas.errors import (
    ErrorCodes,
    InvalidHashException,
    MerkleVerificationException,
)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> proof = MerkleProver.prove([b"a", b"b", b"c"], b"b")
        >>> MerkleVerifier.verify(proof)
        True
    """

    @staticmethod
    def prove(
        leaves: Sequence[bytes],
        leaf_data: bytes,
        hash_function: HashFunction | str | None = None,
    ) -> MerkleProof:
        """
        Generate a Merkle proof for ``leaf_data`` among raw ``leaves``.

        Raises:
            LeafNotFoundException: If leaf_data is not one of the leaves
        """
        return build_merkle_proof(leaves, leaf_data, hash_function)

    @staticmethod
    def prove_object(
        objects: Sequence[Any],
        obj: Any,
        hash_function: HashFunction | str | None = None,
    ) -> MerkleProof:
        """
        Generate a Merkle proof for a record among ``objects``.

        Raises:
            LeafNotFoundException: If obj is not canonically equal to one of the objects
            CanonicalizationException: If a record cannot be serialized
        """
        leaves = [canonical_leaf_bytes(o) for o in objects]
        return build_merkle_proof(leaves, canonical_leaf_bytes(obj), hash_function)

    @staticmethod
    def compute_root(
        leaves: Sequence[bytes],
        hash_function: HashFunction | str | None = None,
    ) -> bytes:
        return build_merkle_root(leaves, hash_function)

    @staticmethod
    def compute_root_from_objects(
        objects: Sequence[Any],
        hash_function: HashFunction | str | None = None,
    ) -> bytes:
        leaves = [canonical_leaf_bytes(o) for o in objects]
        return build_merkle_root(leaves, hash_function)


class MerkleVerifier:
    """Convenience class for verifying Merkle proofs."""

    @staticmethod
    def verify(
        proof: MerkleProof,
        hash_function: HashFunction | str | None = None,
    ) -> bool:
        return verify_merkle_proof(proof, hash_function)

    @staticmethod
    def verify_leaf_in_root(
        leaf: bytes,
        siblings: Sequence[bytes],
        root: bytes,
        hash_function: HashFunction | str | None = None,
    ) -> bool:
        """
        Verify a leaf hash is included in a root using raw components.

        Args:
            leaf: The leaf hash to verify
            siblings: Sibling hashes (bottom-up)
            root: The claimed Merkle root
        """
        return verify_proof(siblings, leaf, root, hash_function)

    @staticmethod
    def verify_object_in_root(
        obj: Any,
        siblings: Sequence[bytes],
        root: bytes,
        hash_function: HashFunction | str | None = None,
    ) -> bool:
        """Verify a record is included in a root. The record is hashed canonically."""
        hf = resolve_hash_function(hash_function)
        leaf = hf.hash(canonical_leaf_bytes(obj))
        return verify_proof(siblings, leaf, root, hf)

    @staticmethod
    def check_hashes(
        proof: MerkleProof,
        hash_function: HashFunction | str | None = None,
    ) -> None:
        """
        Check that the leaf, root and every sibling are hashes of the
        function's digest size.

        Raises:
            MerkleVerificationException: With code MERKLE_PROOF_INVALID,
                details naming the offending field
        """
        hf = resolve_hash_function(hash_function)
        fields = [("leaf", proof.leaf), ("root", proof.root)]
        fields += [(f"siblings[{i}]", s) for i, s in enumerate(proof.siblings)]
        for name, value in fields:
            try:
                hf.from_bytes(value)
            except InvalidHashException as e:
                raise MerkleVerificationException(
                    f"Malformed proof: {name}: {e.message}",
                    leaf_index=proof.index,
                    details={"field": name, **e.details},
                ) from e

    @staticmethod
    def verify_or_raise(
        proof: MerkleProof,
        hash_function: HashFunction | str | None = None,
    ) -> None:
        """
        Verify a proof, raising instead of returning False.

        Raises:
            MerkleVerificationException: With code MERKLE_PROOF_INVALID if a
                hash has the wrong size, ROOT_MISMATCH if the recomputed
                root differs from the claimed one
        """
        MerkleVerifier.check_hashes(proof, hash_function)
        if not verify_merkle_proof(proof, hash_function):
            raise MerkleVerificationException(
                "Proof does not reproduce the claimed root",
                leaf_index=proof.index,
                code=ErrorCodes.ROOT_MISMATCH,
                details={"root": to_hex(proof.root), "leaf": to_hex(proof.leaf)},
            )


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
