"""
commitree CLI

Command-line interface for building sorted Merkle trees and
generating/verifying membership proofs.

Usage:
    python -m commitree_cli build a b c --tree
    python -m commitree_cli prove b --leaves a b c --out proof.json
    python -m commitree_cli verify proof.json
    python -m commitree_cli render a b c
    python -m commitree_cli config --init
"""
