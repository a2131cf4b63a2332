"""
commitree - sorted Merkle tree commitments.

Build a root digest over a set of byte strings, then produce and verify
compact membership proofs against it.
"""

__version__ = "0.1.0"
