"""
CLI Build and Render Commands

Build a tree from leaves and report its root:
- Hash and sort leaves
- Print root, sorted leaves and layer sizes
- Optionally print the tree diagram

Usage:
    commitree build a b c [--file leaves.txt] [--hex] [--hash sha256] [--tree] [--json]
    commitree render a b c [--file leaves.txt] [--hex] [--hash sha256]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from typing import Any

from commitree.crypto.hashing import to_hex
from commitree.merkle.merkle_tree import MerkleTree
from commitree_cli.leaves import collect_leaves, hash_function_for


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class BuildSummary:
    """Summary of a built tree for CLI output."""
    hash_function: str = ""
    root: str = ""
    leaf_count: int = 0
    layer_sizes: list[int] = field(default_factory=list)
    leaves: list[str] = field(default_factory=list)
    tree: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.tree is None:
            del d["tree"]
        return d


def build_summary(tree: MerkleTree, include_tree: bool = False) -> BuildSummary:
    return BuildSummary(
        hash_function=tree.hash_function.name,
        root=to_hex(tree.root()),
        leaf_count=len(tree),
        layer_sizes=[len(layer) for layer in tree.layers],
        leaves=[to_hex(leaf) for leaf in tree.leaves],
        tree=str(tree) if include_tree else None,
    )


def print_summary_human(summary: BuildSummary) -> None:
    """Print summary in human-readable format."""
    print(f"hash_function: {summary.hash_function}")
    print(f"root: {summary.root}")
    print(f"leaves: {summary.leaf_count}")
    print(f"layers: {' -> '.join(str(n) for n in summary.layer_sizes) or '0'}")
    for leaf in summary.leaves:
        print(f"  {leaf}")
    if summary.tree is not None:
        print("\ntree:")
        print(summary.tree, end="")


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    leaves = collect_leaves(args)
    hf = hash_function_for(args)

    logger.info(f"Building {hf.name} tree over {len(leaves)} leaves")
    tree = MerkleTree.build(leaves, hf)
    summary = build_summary(tree, include_tree=args.tree)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS


def render_cmd(args: Namespace) -> int:
    """Execute the render command: print only the tree diagram."""
    tree = MerkleTree.build(collect_leaves(args), hash_function_for(args))
    print(str(tree), end="")
    return EXIT_SUCCESS
