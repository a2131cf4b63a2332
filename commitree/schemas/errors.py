"""
Schemas & Canonicalization
File: errors.py

Purpose: Error taxonomy for commitree.

Building a tree, generating a proof and verifying one never raise for
well-typed input. Exceptions only come from the edges: decoding hashes,
looking up hash functions by name, strict proof lookup, reading config
files and proof documents, and serializing records into leaves.

Each exception can be turned into a CommitreeError pydantic model when
it has to be reported as data (CLI --json output) instead of raised.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class ErrorCodes:
    """Stable machine-readable error codes."""

    # Input decoding
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    INVALID_HASH = "INVALID_HASH"
    UNKNOWN_HASH_FUNCTION = "UNKNOWN_HASH_FUNCTION"

    # Membership
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"
    ROOT_MISMATCH = "ROOT_MISMATCH"

    CONFIG_ERROR = "CONFIG_ERROR"


class CommitreeError(BaseModel):
    """An error reported as data."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    code: str = Field(..., description="Stable machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)

    def to_exception(self) -> "CommitreeException":
        return CommitreeException(self.message, code=self.code, details=dict(self.details))


class CommitreeException(Exception):
    """
    Base exception for all commitree errors.

    Subclasses set ``default_code``. Keyword context passed to a subclass
    (leaf, path, field_path, ...) is folded into ``details`` when not None.
    """

    default_code: ClassVar[str] = "COMMITREE_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = dict(details or {})
        self.details.update({k: v for k, v in context.items() if v is not None})

    def to_error_model(self) -> CommitreeError:
        return CommitreeError(code=self.code, message=self.message, details=self.details)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(CommitreeException):
    """A record could not be serialized to canonical JSON."""

    default_code = ErrorCodes.CANONICALIZATION_ERROR


class SchemaValidationException(CommitreeException):
    """A document (e.g. a proof document) failed schema validation."""

    default_code = ErrorCodes.SCHEMA_VALIDATION_ERROR

    def __init__(self, message: str, field_path: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=details, field_path=field_path)


class InvalidHashException(CommitreeException):
    """Raw bytes have the wrong length for the hash function."""

    default_code = ErrorCodes.INVALID_HASH

    def __init__(
        self,
        message: str,
        expected_size: int | None = None,
        actual_size: int | None = None,
    ) -> None:
        super().__init__(message, expected_size=expected_size, actual_size=actual_size)


class UnknownHashFunctionException(CommitreeException):
    """No hash function is registered under the requested name."""

    default_code = ErrorCodes.UNKNOWN_HASH_FUNCTION

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        super().__init__(
            f"Unknown hash function: {name!r}",
            details={"name": name, "available": available or []},
        )


class LeafNotFoundException(CommitreeException):
    """A proof was requested for a leaf that is not in the tree."""

    default_code = ErrorCodes.LEAF_NOT_FOUND

    def __init__(self, message: str, leaf: str | None = None) -> None:
        super().__init__(message, leaf=leaf)


class MerkleVerificationException(CommitreeException):
    """A proof is malformed or does not reproduce the expected root."""

    default_code = ErrorCodes.MERKLE_PROOF_INVALID

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code=code, details=details, leaf_index=leaf_index)


class ConfigException(CommitreeException):
    """Configuration could not be loaded."""

    default_code = ErrorCodes.CONFIG_ERROR

    def __init__(self, message: str, path: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=details, path=path)
