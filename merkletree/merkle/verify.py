"""
Tree verification.

verify_tree:    recomputes every leaf from its live content and composes
                upward; O(n). Fails on content mutated after insertion and
                on any cached node digest that no longer matches its
                recomputed value.
verify_path:    checks only the ancestors of one leaf, recomputing each from
                its children's cached digests (leaf children are rehashed
                from content). Sibling subtrees are trusted beyond one level,
                which makes it an inclusion-proof style check costing O(depth).
"""
from __future__ import annotations

import logging
from typing import Optional

from merkletree.crypto.hashing import HashStrategy, hash_concat
from merkletree.merkle.node import Node
from merkletree.schemas.content import content_digest

logger = logging.getLogger(__name__)


def recompute_digest(node: Node, strategy: HashStrategy, stale: Optional[list[Node]] = None) -> bytes:
    """
    Digest of ``node`` recomputed from the live content of its leaves.

    Nodes whose cached digest differs from the recomputed one are collected
    into ``stale`` when given.
    """
    if node.is_leaf:
        digest = content_digest(node.content)
    else:
        left = recompute_digest(node.left, strategy, stale)
        right = left if node.is_self_paired else recompute_digest(node.right, strategy, stale)
        digest = hash_concat(left, right, strategy)
    if stale is not None and digest != node.digest:
        stale.append(node)
    return digest


def verify_tree(root: Node, merkle_root: bytes, strategy: HashStrategy) -> bool:
    """Recompute the whole tree and compare against the stored root digest."""
    stale: list[Node] = []
    calculated = recompute_digest(root, strategy, stale)
    if calculated != merkle_root:
        logger.info(f"tree verification failed: stored {merkle_root.hex()}, calculated {calculated.hex()}")
        return False
    if stale:
        logger.info(f"tree verification failed: {len(stale)} stale cached digest(s)")
        return False
    return True


def _cached_digest(node: Node) -> bytes:
    if node.is_leaf:
        return content_digest(node.content)
    return node.digest


def verify_path(leaf: Node, strategy: HashStrategy) -> bool:
    """Check every ancestor of ``leaf`` against its children, stopping at the first mismatch."""
    for depth, parent in enumerate(leaf.ancestors(), start=1):
        left = _cached_digest(parent.left)
        right = left if parent.is_self_paired else _cached_digest(parent.right)
        if hash_concat(left, right, strategy) != parent.digest:
            logger.info(f"path verification failed {depth} level(s) above leaf {leaf.digest.hex()}")
            return False
    return True
