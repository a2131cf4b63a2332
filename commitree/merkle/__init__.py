"""
Merkle Tree and Commitments
Sorted Merkle tree construction + proof generation/verification.

This module provides:
- MerkleTree: Immutable tree over a set of byte-string leaves
- MerkleProof: Dataclass representing a Merkle inclusion proof
- verify_proof: Check a sibling path against a claimed root
- render_tree: Text diagram of a tree's layers

Canonical Commitment Rules:
1. Leaves: H(data), sorted ascending, duplicates kept
2. Parent hashing: H(min(a, b) || max(a, b))
3. Odd node: carried to the next layer unchanged
4. Empty tree: root = H.default() (zero bytes)
5. Single leaf: root = H(leaf)

Usage:
    from commitree.merkle import MerkleTree, verify_proof

    tree = MerkleTree.build([b"a", b"b", b"c"])
    leaf = tree.hash_function.hash(b"b")
    proof = tree.proof(leaf)
    assert verify_proof(proof, leaf, tree.root(), tree.hash_function)
"""
from .merkle_tree import (
    EMPTY_TREE_ROOT,
    MerkleProof,
    MerkleTree,
    merkle_parent,
    build_tree,
    verify_proof,
    verify_merkle_proof,
    build_merkle_root,
    build_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)

from .rendering import render_tree


__all__ = [
    # Core types
    "MerkleTree",
    "MerkleProof",
    "EMPTY_TREE_ROOT",
    # Core functions
    "merkle_parent",
    "build_tree",
    "verify_proof",
    "verify_merkle_proof",
    "build_merkle_root",
    "build_merkle_proof",
    "compute_tree_depth",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
    # Presentation
    "render_tree",
]
