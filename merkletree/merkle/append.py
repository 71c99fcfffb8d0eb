"""
Incremental append engine.

Two strategies extend a tree by one content item in O(log n) digest
recomputations. A tree must use one of them for its whole lifetime; the
MerkleTree facade enforces this with its append mode.

Implicit-duplicate append (append_implicit):
    Odd levels are balanced by a self-paired parent (hash(x + x)). After the
    first append no duplicate leaf exists; a builder-made duplicate leaf is
    released into a self-pairing, which leaves every digest unchanged.

Explicit-duplicate append (append_explicit):
    Keeps the builder's shape literally: an odd leaf count always carries a
    duplicate leaf, which the next append replaces in place. After any
    sequence of appends the tree equals a fresh build of the same contents.

Both strategies are two-phase: every digest is computed before the first
link or digest of the existing tree is changed, so a failing content or
hash strategy leaves the tree as it was.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from merkletree.crypto.hashing import HashStrategy, hash_concat
from merkletree.merkle.builder import build_tree
from merkletree.merkle.node import Node
from merkletree.schemas.content import content_digest
from merkletree.schemas.errors import EmptyTreeError

logger = logging.getLogger(__name__)


def _plan_ancestors(node: Node, digest: bytes, strategy: HashStrategy) -> list[tuple[Node, bytes]]:
    """New digests of every ancestor of ``node`` once its digest becomes ``digest``."""
    updates: list[tuple[Node, bytes]] = []
    while node.parent is not None:
        parent = node.parent
        left = digest if parent.left is node else parent.left.digest
        right = digest if parent.right is node else parent.right.digest
        digest = hash_concat(left, right, strategy)
        updates.append((parent, digest))
        node = parent
    return updates


def _merge_upward(current: Node, last: Node, count: int, strategy: HashStrategy) -> Optional[Node]:
    """
    Merge a detached subtree into the tree.

    Args:
        current: Root of the new subtree, sitting one position after ``last``
        last: Previous last node of the level ``current`` joins
        count: Number of nodes on that level before the append
        strategy: Hash strategy of the tree

    Returns:
        The new root if the tree grew a level, otherwise None (the existing
        root was kept and its digest updated)
    """
    # An even count leaves the new node alone on its level: self-pair it.
    while count % 2 == 0:
        current = Node.branch(current, current, strategy)
        last = last.parent
        count //= 2

    if count == 1:
        # ``last`` is the old root; it becomes the left child of a new root.
        digest = hash_concat(last.digest, current.digest, strategy)
        new_root = Node(digest=digest, left=last, right=current)
        last.parent = new_root
        current.parent = new_root
        return new_root

    # Odd count: ``last`` was self-paired (or paired with its duplicate leaf).
    parent = last.parent
    parent_digest = hash_concat(last.digest, current.digest, strategy)
    updates = [(parent, parent_digest), *_plan_ancestors(parent, parent_digest, strategy)]

    parent.right = current
    current.parent = parent
    for node, digest in updates:
        node.digest = digest
    return None


def append_implicit(root: Node, leaves: list[Node], content: Any, strategy: HashStrategy) -> Node:
    """
    Append one item without materializing duplicate leaves.

    ``leaves`` is updated in place.

    Returns:
        The root after the append (the same object unless the tree grew a level)

    Raises:
        EmptyTreeError: If the tree has no leaves; build it from a batch first
        ContentHashError: If the item's digest fails
        HashWriteError: If the hash strategy fails
    """
    if not leaves:
        logger.warning("rejected append on a tree with no leaves")
        raise EmptyTreeError("cannot append to a tree with no leaves", operation="append")

    digest = content_digest(content)
    new_leaf = Node.leaf(content, digest)
    has_duplicate = leaves[-1].is_duplicate
    real_count = len(leaves) - 1 if has_duplicate else len(leaves)

    # A depth-one tree is cheaper to rebuild than to special-case.
    if real_count < 2:
        contents = [leaf.content for leaf in leaves if not leaf.is_duplicate]
        contents.append(content)
        new_root, new_leaves = build_tree(contents, strategy)
        leaves[:] = new_leaves
        logger.debug(f"append rebuilt a {len(contents)}-item tree")
        return new_root

    new_root = _merge_upward(new_leaf, leaves[real_count - 1], real_count, strategy)
    if has_duplicate:
        leaves.pop()
    leaves.append(new_leaf)
    logger.debug(f"appended leaf {real_count} ({digest.hex()})")
    return new_root or root


def append_explicit(root: Optional[Node], leaves: list[Node], content: Any, strategy: HashStrategy) -> Node:
    """
    Append one item keeping materialized duplicates, so the shape always
    equals a fresh build of the same contents.

    ``leaves`` is updated in place. Works on an empty tree.

    Returns:
        The root after the append

    Raises:
        ContentHashError: If the item's digest fails
        HashWriteError: If the hash strategy fails
    """
    digest = content_digest(content)
    new_leaf = Node.leaf(content, digest)

    if not leaves:
        duplicate = Node.duplicate_of(new_leaf)
        new_root = Node.branch(new_leaf, duplicate, strategy)
        leaves.extend([new_leaf, duplicate])
        logger.debug(f"started tree with leaf {digest.hex()}")
        return new_root

    last_leaf = leaves[-1]
    if last_leaf.is_duplicate:
        # The duplicate was a placeholder: the new leaf takes its slot.
        parent = last_leaf.parent
        parent_digest = hash_concat(parent.left.digest, digest, strategy)
        updates = [(parent, parent_digest), *_plan_ancestors(parent, parent_digest, strategy)]

        parent.right = new_leaf
        new_leaf.parent = parent
        for node, node_digest in updates:
            node.digest = node_digest
        leaves[-1] = new_leaf
        logger.debug(f"replaced duplicate leaf {len(leaves) - 1} ({digest.hex()})")
        return root

    duplicate = Node.duplicate_of(new_leaf)
    subtree = Node.branch(new_leaf, duplicate, strategy)
    new_root = _merge_upward(subtree, last_leaf.parent, len(leaves) // 2, strategy)
    leaves.extend([new_leaf, duplicate])
    logger.debug(f"appended leaf {len(leaves) - 2} with duplicate ({digest.hex()})")
    return new_root or root
