"""
CLI Prove Command

Generate a membership proof for one leaf of a leaf set and emit it as a
proof document (JSON), to stdout or a file.

Usage:
    commitree prove b --leaves a b c [--file leaves.txt] [--hex] [--hash NAME] [--out proof.json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from commitree.crypto.hashing import to_hex
from commitree.merkle.merkle_tree import MerkleTree
from commitree.schemas.errors import LeafNotFoundException
from commitree.schemas.proof import ProofDocument
from commitree_cli.leaves import collect_leaves, decode_leaf, hash_function_for


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (1 if the leaf is not part of the set)
    """
    leaves = collect_leaves(args)
    hf = hash_function_for(args)
    target = hf.hash(decode_leaf(args.leaf, args.hex))

    tree = MerkleTree.build(leaves, hf)
    try:
        proof = tree.build_proof(target)
    except LeafNotFoundException as e:
        print(f"Error: {e.message}: {to_hex(target)}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    document = ProofDocument.from_proof(proof, hf.name)
    payload = document.model_dump_json(indent=2)

    if args.out:
        Path(args.out).write_text(payload + "\n", encoding="utf-8")
        logger.info(f"Wrote proof with {len(proof.siblings)} siblings to {args.out}")
        if not args.json:
            print(f"proof written: {args.out}")
            print(f"root: {document.root}")
    else:
        print(payload)

    return EXIT_SUCCESS
