"""
Schemas & Canonicalization
File: proof.py

Purpose: Portable JSON document for a single membership proof.

A proof document carries everything a verifier needs besides trust in
the root: the hash function name, the leaf hash, the bottom-up sibling
hashes and the claimed root, all as 0x-prefixed hex strings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from commitree.crypto.hashing import from_hex, to_hex

if TYPE_CHECKING:
    from commitree.merkle.merkle_tree import MerkleProof


PROOF_SCHEMA_VERSION = "1.0"


def _validate_hex(value: str) -> str:
    # from_hex raises ValueError, which pydantic reports as a validation error
    from_hex(value)
    return value.lower()


class ProofDocument(BaseModel):
    """
    Serializable form of a MerkleProof.

    Example:
        >>> doc = ProofDocument.from_proof(proof, "keccak256")
        >>> ProofDocument.model_validate_json(doc.model_dump_json()).to_proof() == proof
        True
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: str = Field(default=PROOF_SCHEMA_VERSION)
    hash_function: str = Field(..., description="Registered hash function name", min_length=1)
    leaf: str = Field(..., description="Leaf hash, 0x hex")
    index: int = Field(..., description="Position of the leaf in the sorted leaves", ge=0)
    siblings: list[str] = Field(default_factory=list, description="Sibling hashes, bottom-up")
    root: str = Field(..., description="Claimed Merkle root, 0x hex")

    @field_validator("leaf", "root")
    @classmethod
    def _check_hash_hex(cls, value: str) -> str:
        return _validate_hex(value)

    @field_validator("siblings")
    @classmethod
    def _check_siblings_hex(cls, value: list[str]) -> list[str]:
        return [_validate_hex(item) for item in value]

    @classmethod
    def from_proof(cls, proof: "MerkleProof", hash_function: str) -> "ProofDocument":
        return cls(
            hash_function=hash_function,
            leaf=to_hex(proof.leaf),
            index=proof.index,
            siblings=[to_hex(s) for s in proof.siblings],
            root=to_hex(proof.root),
        )

    def to_proof(self) -> "MerkleProof":
        from commitree.merkle.merkle_tree import MerkleProof

        return MerkleProof(
            leaf=from_hex(self.leaf),
            index=self.index,
            siblings=[from_hex(s) for s in self.siblings],
            root=from_hex(self.root),
        )
