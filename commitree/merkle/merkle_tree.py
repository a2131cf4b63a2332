"""
Merkle Tree Implementation
Sorted Merkle tree construction, proof generation, and verification.

This module provides:
- MerkleTree: immutable tree built from a set of byte-string leaves
- MerkleProof: dataclass bundling a proof with its leaf and root
- Root computation, proof generation and verification helpers

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = H(data) for every input, duplicates kept
2. Leaf ordering: leaf hashes are sorted ascending (byte order), so the
   root depends only on the multiset of leaves, never on input order
3. Parent hashing: parent = H(min(a, b) || max(a, b)). Sorting the pair
   makes pairing commutative, so proofs carry no left/right flags
4. Odd node: the trailing node of an odd-length layer is carried into the
   next layer unchanged. It is NOT hashed with itself
5. Empty tree: no layers, root = H.default() (all zero bytes)
6. Single leaf: one layer, root = H(leaf)

Rule 4 differs from the common duplicate-last-node convention. It changes
roots and proof shapes and must be kept for compatibility with trees
already committed under these rules.
"""
from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass
from typing import Iterable, Sequence

from commitree.crypto.hash_functions import HashFunction, Keccak256, resolve_hash_function
from commitree.crypto.hashing import to_hex
from commitree.schemas.errors import LeafNotFoundException


logger = logging.getLogger(__name__)


# Root of a tree with no leaves under the default 32-byte hash functions
EMPTY_TREE_ROOT: bytes = Keccak256().default()

_BYTES_LIKE = (bytes, bytearray, memoryview)


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a Merkle tree.

    Attributes:
        leaf: The leaf hash being proven
        index: The 0-based position of the leaf in the sorted leaves
        siblings: Sibling hashes from bottom to top of tree
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: list[bytes]
    root: bytes

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


def merkle_parent(
    left: bytes,
    right: bytes,
    hash_function: HashFunction | str | None = None,
) -> bytes:
    """
    Compute the parent hash of two sibling nodes.

    The pair is sorted before hashing, so merkle_parent(a, b) ==
    merkle_parent(b, a).
    """
    hf = resolve_hash_function(hash_function)
    if right < left:
        left, right = right, left
    return hf.hash_pair(left, right)


def _build_layers(leaves: tuple[bytes, ...], hf: HashFunction) -> tuple[tuple[bytes, ...], ...]:
    if not leaves:
        return ()

    layers: list[tuple[bytes, ...]] = [leaves]
    nodes = leaves
    while len(nodes) > 1:
        next_layer: list[bytes] = []
        for i in range(0, len(nodes), 2):
            if i + 1 == len(nodes):
                # carried up as-is
                next_layer.append(nodes[i])
                continue
            next_layer.append(merkle_parent(nodes[i], nodes[i + 1], hf))
        nodes = tuple(next_layer)
        layers.append(nodes)

    return tuple(layers)


class MerkleTree:
    """
    Immutable sorted Merkle tree.

    Build with MerkleTree.build() from raw leaves or
    MerkleTree.from_leaf_hashes() from already-hashed leaves.
    The tree owns its leaves and layers (tuples) and cannot be changed
    after construction; any change to the leaf set means building a
    new tree. Concurrent reads need no locking.

    Example:
        >>> tree = MerkleTree.build([b"a", b"b", b"c"])
        >>> leaf = tree.hash_function.hash(b"a")
        >>> tree.verify(tree.proof(leaf), leaf, tree.root())
        True
    """

    __slots__ = ("_hash_function", "_leaves", "_layers")

    def __init__(
        self,
        leaf_hashes: Iterable[bytes],
        hash_function: HashFunction | str | None = None,
    ) -> None:
        hf = resolve_hash_function(hash_function)
        leaves = tuple(sorted(hf.from_bytes(h) for h in leaf_hashes))
        layers = _build_layers(leaves, hf)

        object.__setattr__(self, "_hash_function", hf)
        object.__setattr__(self, "_leaves", leaves)
        object.__setattr__(self, "_layers", layers)

        logger.debug(
            "Built %s tree: %d leaves, %d layers, root=%s",
            hf.name, len(leaves), len(layers), to_hex(self.root()),
        )

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def build(
        cls,
        leaves: Iterable[bytes],
        hash_function: HashFunction | str | None = None,
    ) -> "MerkleTree":
        """
        Build a tree from raw byte-string leaves.

        Each leaf is hashed, the hashes are sorted, then layers are built
        by sorted-pair hashing with odd nodes carried up. Never fails for
        byte-string input, including an empty sequence.

        Args:
            leaves: Raw leaf data
            hash_function: HashFunction instance, registered name, or None
                for the configured default

        Returns:
            The constructed MerkleTree
        """
        hf = resolve_hash_function(hash_function)
        return cls((hf.hash(bytes(leaf)) for leaf in leaves), hf)

    @classmethod
    def from_leaf_hashes(
        cls,
        leaf_hashes: Iterable[bytes],
        hash_function: HashFunction | str | None = None,
    ) -> "MerkleTree":
        """
        Build a tree from leaves that are already hashed.

        Raises:
            InvalidHashException: If a leaf hash has the wrong length
        """
        return cls(leaf_hashes, hash_function)

    @property
    def hash_function(self) -> HashFunction:
        return self._hash_function

    @property
    def leaves(self) -> tuple[bytes, ...]:
        """Leaf hashes in ascending order (not the caller's order)."""
        return self._leaves

    @property
    def layers(self) -> tuple[tuple[bytes, ...], ...]:
        """All layers, leaves first, root layer last."""
        return self._layers

    @property
    def height(self) -> int:
        """Number of layers (0 for an empty tree)."""
        return len(self._layers)

    def __len__(self) -> int:
        return len(self._leaves)

    def root(self) -> bytes:
        """The root hash, or the hash function's zero value for an empty tree."""
        if not self._layers:
            return self._hash_function.default()
        return self._layers[-1][0]

    def find_leaf(self, leaf: bytes) -> int | None:
        """
        Index of ``leaf`` in the sorted leaves, or None if absent.

        With duplicate leaves the lowest matching index is returned.
        """
        index = bisect_left(self._leaves, leaf)
        if index < len(self._leaves) and self._leaves[index] == leaf:
            return index
        return None

    def proof(self, leaf: bytes) -> list[bytes]:
        """
        Sibling hashes from the leaf up to the root.

        At each layer the sibling of index i is i - 1 when i is odd and
        i + 1 otherwise; it is skipped when outside the layer (carried
        odd node). Then i becomes i // 2.

        An absent leaf yields []. So does the only leaf of a single-leaf
        tree. Use build_proof() to tell the two apart.
        """
        index = self.find_leaf(leaf)
        if index is None:
            return []

        siblings: list[bytes] = []
        for layer in self._layers:
            sibling_index = index - 1 if index % 2 == 1 else index + 1
            if sibling_index < len(layer):
                siblings.append(layer[sibling_index])
            index //= 2

        return siblings

    def build_proof(self, leaf: bytes) -> MerkleProof:
        """
        Proof for ``leaf`` as a MerkleProof.

        Raises:
            LeafNotFoundException: If the leaf is not in the tree
        """
        index = self.find_leaf(leaf)
        if index is None:
            raise LeafNotFoundException("Leaf is not part of the tree", leaf=to_hex(leaf))
        return MerkleProof(
            leaf=leaf,
            index=index,
            siblings=self.proof(leaf),
            root=self.root(),
        )

    def verify(self, proof: Sequence[bytes], leaf: bytes, root: bytes) -> bool:
        """Verify ``proof`` for ``leaf`` against ``root`` with this tree's hash."""
        return verify_proof(proof, leaf, root, self._hash_function)

    def layers_hex_encoded(self) -> list[list[str]]:
        return [[to_hex(node) for node in layer] for layer in self._layers]

    def __str__(self) -> str:
        from commitree.merkle.rendering import render_tree

        return render_tree(self.layers_hex_encoded())

    def __repr__(self) -> str:
        return (
            f"MerkleTree(hash_function={self._hash_function.name!r}, "
            f"leaves={len(self._leaves)}, root={to_hex(self.root())!r})"
        )


def build_tree(
    leaves: Iterable[bytes],
    hash_function: HashFunction | str | None = None,
) -> MerkleTree:
    """Alias for MerkleTree.build()."""
    return MerkleTree.build(leaves, hash_function)


def verify_proof(
    proof: Sequence[bytes],
    leaf: bytes,
    root: bytes,
    hash_function: HashFunction | str | None = None,
) -> bool:
    """
    Verify a membership proof.

    Starting from ``leaf``, each proof element is combined with the
    accumulator by sorted-pair hashing. The proof is valid iff the final
    accumulator equals ``root``.

    Total: returns False (never raises) for wrong, truncated, extended
    or substituted proofs, for a proof that is not a sequence, and for a
    leaf, root or sibling that is not bytes-like (bytes, bytearray,
    memoryview).

    Note that an empty proof verifies exactly when leaf == root, which
    covers the single-leaf tree and the degenerate empty tree
    (verify_proof([], H.default(), H.default()) is True).
    """
    if not isinstance(leaf, _BYTES_LIKE) or not isinstance(root, _BYTES_LIKE):
        return False
    if isinstance(proof, (str, *_BYTES_LIKE)) or not isinstance(proof, Iterable):
        return False

    hf = resolve_hash_function(hash_function)
    current = bytes(leaf)
    for node in proof:
        if not isinstance(node, _BYTES_LIKE):
            return False
        current = merkle_parent(current, bytes(node), hf)

    return current == bytes(root)


def verify_merkle_proof(
    proof: MerkleProof,
    hash_function: HashFunction | str | None = None,
) -> bool:
    """Verify a MerkleProof against its own claimed root."""
    return verify_proof(proof.siblings, proof.leaf, proof.root, hash_function)


def build_merkle_root(
    leaves: Iterable[bytes],
    hash_function: HashFunction | str | None = None,
) -> bytes:
    """
    Compute the root for raw leaves without keeping the tree.

    Example:
        >>> build_merkle_root([]) == EMPTY_TREE_ROOT
        True
    """
    return MerkleTree.build(leaves, hash_function).root()


def build_merkle_proof(
    leaves: Iterable[bytes],
    leaf_data: bytes,
    hash_function: HashFunction | str | None = None,
) -> MerkleProof:
    """
    Build a tree from raw leaves and return the proof for ``leaf_data``.

    Raises:
        LeafNotFoundException: If leaf_data is not among the leaves
    """
    hf = resolve_hash_function(hash_function)
    tree = MerkleTree.build(leaves, hf)
    return tree.build_proof(hf.hash(leaf_data))


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of layers of a tree with ``num_leaves`` leaves.

    Odd nodes are carried, so each layer has ceil(n / 2) nodes.

    Returns:
        Tree depth (0 for empty tree, 1 for a single leaf)
    """
    if num_leaves <= 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1

    return depth


__all__ = [
    "EMPTY_TREE_ROOT",
    "MerkleProof",
    "MerkleTree",
    "merkle_parent",
    "build_tree",
    "verify_proof",
    "verify_merkle_proof",
    "build_merkle_root",
    "build_merkle_proof",
    "compute_tree_depth",
]
