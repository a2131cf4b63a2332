"""
CLI Verify Command

Verify a proof document offline:
- Recompute the root from the leaf and siblings
- Compare with the claimed root (or a trusted --root)
- Optionally check that raw --leaf data is the proven leaf

Usage:
    commitree verify proof.json [--leaf DATA] [--hex] [--root 0x...] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from commitree.crypto.hash_functions import get_hash_function
from commitree.crypto.hashing import from_hex, to_hex
from commitree.merkle.merkle_proofs import MerkleVerifier
from commitree.merkle.merkle_tree import verify_proof
from commitree.schemas.errors import (
    CommitreeException,
    InvalidHashException,
    MerkleVerificationException,
    SchemaValidationException,
)
from commitree.schemas.proof import ProofDocument
from commitree_cli.leaves import decode_leaf


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    hash_function: str = ""
    leaf: str = ""
    root: str = ""
    siblings: int = 0
    valid: bool = False
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["errors"]:
            del d["errors"]
        return d


def load_proof_document(path: str) -> ProofDocument:
    """
    Read a proof document from a file, or stdin for "-".

    Raises:
        SchemaValidationException: If the JSON is malformed or a field is invalid
    """
    if path == "-":
        raw = sys.stdin.read()
    else:
        raw = Path(path).read_text(encoding="utf-8")
    try:
        return ProofDocument.model_validate_json(raw)
    except ValidationError as e:
        first = e.errors()[0]
        raise SchemaValidationException(
            f"Invalid proof document: {first['msg']}",
            field_path=".".join(str(part) for part in first["loc"]) or None,
            details={"error_count": e.error_count()},
        ) from e


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"proof: {summary.proof_path}")
    print(f"hash_function: {summary.hash_function}")
    print(f"leaf: {summary.leaf}")
    print(f"root: {summary.root}")
    print(f"siblings: {summary.siblings}")
    print(f"valid: {str(summary.valid).lower()}")
    for err in summary.errors:
        print(f"  ✗ {err}")


def _report_error(error: CommitreeException, as_json: bool) -> None:
    if as_json:
        print(json.dumps(error.to_error_model().model_dump(), indent=2))
        return
    where = error.details.get("field_path") or error.details.get("field")
    suffix = f" (at {where})" if where else ""
    print(f"Error: {error.message}{suffix}", file=sys.stderr)


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    if args.proof_path != "-" and not Path(args.proof_path).exists():
        print(f"Error: Proof not found: {args.proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        document = load_proof_document(args.proof_path)
        hf = get_hash_function(document.hash_function)
        proof = document.to_proof()
        MerkleVerifier.check_hashes(proof, hf)
        root = hf.from_bytes(from_hex(args.root)) if args.root else proof.root
    except (SchemaValidationException, MerkleVerificationException, InvalidHashException) as e:
        _report_error(e, args.json)
        return EXIT_RUNTIME_ERROR

    leaf = proof.leaf

    summary = VerifySummary(
        proof_path=args.proof_path,
        hash_function=hf.name,
        leaf=to_hex(leaf),
        root=to_hex(root),
        siblings=len(proof.siblings),
    )

    if args.leaf is not None:
        data_leaf = hf.hash(decode_leaf(args.leaf, args.hex))
        if data_leaf != proof.leaf:
            summary.errors.append("Leaf data does not match the proven leaf")
        leaf = data_leaf
        summary.leaf = to_hex(leaf)

    if args.root and root != proof.root:
        summary.errors.append("Proof root differs from the trusted root")

    summary.valid = verify_proof(proof.siblings, leaf, root, hf) and not summary.errors
    if not summary.valid and not summary.errors:
        summary.errors.append("Recomputed root does not match")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.valid:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
