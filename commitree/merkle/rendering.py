"""
Tree Rendering
Text diagram of a tree's layers, for debugging only.

Reads hex-encoded layers (see MerkleTree.layers_hex_encoded) and draws
the root first with children indented below it:

    └─ 0x<root>
       ├─ 0x<left>
       |  ├─ ...
       └─ 0x<right>

Node j of layer i has children 2j and 2j + 1 of layer i - 1 (one child
for a carried odd node, which therefore appears twice: once as itself
and once as its own child). Traversal uses an explicit stack so deep
trees do not hit the recursion limit.
"""
from __future__ import annotations

from typing import Sequence

INDENTATION = "  "
BRANCH = "├"
LAST_BRANCH = "└"


def render_tree(layers_hex: Sequence[Sequence[str]]) -> str:
    """
    Render hex-encoded layers as an indented diagram.

    Args:
        layers_hex: Layers bottom-up, leaves first, each a list of hex strings

    Returns:
        The diagram, one node per line ("" for an empty tree)
    """
    if not layers_hex:
        return ""

    top = len(layers_hex) - 1
    lines: list[str] = []

    # (layer, index, depth, peers, is_last); peers counts non-last ancestors
    stack: list[tuple[int, int, int, int, bool]] = []
    top_count = len(layers_hex[top])
    for j in reversed(range(top_count)):
        stack.append((top, j, 0, 0, j == top_count - 1))

    while stack:
        layer, index, depth, peers, is_last = stack.pop()

        indent = "".join(
            ("|" if 0 < level <= peers else " ") + INDENTATION
            for level in range(depth)
        )
        prefix = LAST_BRANCH if is_last else BRANCH
        lines.append(f"{indent}{prefix}─ {layers_hex[layer][index]}")

        if layer == 0:
            continue

        below = layers_hex[layer - 1]
        children = [c for c in (2 * index, 2 * index + 1) if c < len(below)]
        child_peers = peers if is_last else peers + 1
        for position in reversed(range(len(children))):
            stack.append((
                layer - 1,
                children[position],
                depth + 1,
                child_peers,
                position == len(children) - 1,
            ))

    return "\n".join(lines) + "\n"


__all__ = ["render_tree"]
