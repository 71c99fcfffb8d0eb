"""
Batch tree construction.

Canonical Construction Rules:
1. Leaf digest: content.calculate_hash()
2. Odd leaf count: append one duplicate leaf cloning the last real leaf
3. Parent digest: hash(left.digest + right.digest)
4. Odd internal level: the last node is paired with itself (no new node)
5. Repeat until a single root remains

Example: [a, b, c]
    Level 0: [a, b, c, c']          (c' is a duplicate leaf)
    Level 1: [ab, cc']
    Level 2: [root]
"""
from __future__ import annotations

import logging
from typing import Sequence

from merkletree.crypto.hashing import HashStrategy
from merkletree.merkle.node import Node
from merkletree.schemas.content import Content, content_digest
from merkletree.schemas.errors import EmptyInputError

logger = logging.getLogger(__name__)


def build_leaves(contents: Sequence[Content]) -> list[Node]:
    """
    Hash every content item into a leaf, padding an odd count with a duplicate.

    Raises:
        EmptyInputError: If contents is empty
        ContentHashError: If any item's digest fails (aborts the whole build)
    """
    if len(contents) == 0:
        raise EmptyInputError()

    leaves = [Node.leaf(c, content_digest(c)) for c in contents]
    if len(leaves) % 2 == 1:
        leaves.append(Node.duplicate_of(leaves[-1]))
    return leaves


def build_levels(nodes: Sequence[Node], strategy: HashStrategy) -> Node:
    """
    Pair nodes level by level until one root remains.

    Args:
        nodes: The bottom level, at least two nodes
        strategy: Hash strategy of the tree

    Returns:
        The root node
    """
    current_level: list[Node] = list(nodes)

    while True:
        next_level: list[Node] = []
        for i in range(0, len(current_level), 2):
            left = current_level[i]
            right = current_level[i + 1] if i + 1 < len(current_level) else left
            next_level.append(Node.branch(left, right, strategy))
        if len(next_level) == 1:
            return next_level[0]
        current_level = next_level


def build_tree(contents: Sequence[Content], strategy: HashStrategy) -> tuple[Node, list[Node]]:
    """
    Build a complete tree from an ordered batch of content.

    Nothing outside the returned structure is touched, so a failure leaves
    any existing tree intact.

    Returns:
        (root, leaves) with leaves in content order, duplicate included
    """
    leaves = build_leaves(contents)
    root = build_levels(leaves, strategy)
    logger.debug(f"built tree: {len(contents)} items, {len(leaves)} leaves, root {root.digest.hex()}")
    return root, leaves
