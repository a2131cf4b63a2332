"""
Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    CommitreeError,
    CommitreeException,
    ConfigException,
    ErrorCodes,
    InvalidHashException,
    LeafNotFoundException,
    MerkleVerificationException,
    SchemaValidationException,
    UnknownHashFunctionException,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_leaf_bytes,
    canonicalize_value,
    dumps_canonical,
    format_datetime_canonical,
)

# Proof document
from .proof import (
    PROOF_SCHEMA_VERSION,
    ProofDocument,
)

__all__ = [
    # Errors
    "CanonicalizationException",
    "CommitreeError",
    "CommitreeException",
    "ConfigException",
    "ErrorCodes",
    "InvalidHashException",
    "LeafNotFoundException",
    "MerkleVerificationException",
    "SchemaValidationException",
    "UnknownHashFunctionException",
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_leaf_bytes",
    "canonicalize_value",
    "dumps_canonical",
    "format_datetime_canonical",
    # Proof
    "PROOF_SCHEMA_VERSION",
    "ProofDocument",
]
