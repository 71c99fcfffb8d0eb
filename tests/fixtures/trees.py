"""
Tree fixtures shared by the merkle tests.

Provides:
- ItemContent: mutable test content hashed with SHA-256
- Content and hash strategy doubles that fail on demand
- reference_root: independent level-by-level root computation
- assert_tree_invariants / tree_shape: structural checks
"""

import hashlib
from typing import Any, Optional

from merkletree.crypto.hashing import DEFAULT_HASH_STRATEGY, HashStrategy
from merkletree.merkle import MerkleTree, Node


# =============================================================================
# Content doubles
# =============================================================================

class ItemContent:
    """Content wrapping a string; ``value`` may be mutated to simulate tampering."""

    def __init__(self, value: str) -> None:
        self.value = value

    def calculate_hash(self) -> bytes:
        return hashlib.sha256(self.value.encode("utf-8")).digest()

    def equals(self, other: Any) -> bool:
        return isinstance(other, ItemContent) and self.value == other.value

    def __repr__(self) -> str:
        return f"ItemContent({self.value!r})"


class FailingHashContent(ItemContent):
    """Content whose digest function always fails."""

    def calculate_hash(self) -> bytes:
        raise RuntimeError(f"cannot hash {self.value}")


class FailingEqualsContent(ItemContent):
    """Content whose equality check always fails."""

    def equals(self, other: Any) -> bool:
        raise RuntimeError("comparison unavailable")


class _BrokenHash:
    def update(self, data: bytes) -> None:
        raise OSError("hash sink closed")

    def digest(self) -> bytes:
        return b""


class SwitchableStrategy:
    """SHA-256 strategy that starts rejecting input once ``broken`` is set."""

    def __init__(self) -> None:
        self.broken = False
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.broken:
            return _BrokenHash()
        return hashlib.sha256()


# =============================================================================
# Factories
# =============================================================================

def make_items(count: int, prefix: str = "item") -> list[ItemContent]:
    """Create ``count`` distinct items: item0, item1, ..."""
    return [ItemContent(f"{prefix}{i}") for i in range(count)]


def make_tree(count: int, **kwargs: Any) -> MerkleTree:
    """Build a tree over make_items(count)."""
    return MerkleTree.build(make_items(count), **kwargs)


def h(data: bytes, strategy: HashStrategy = DEFAULT_HASH_STRATEGY) -> bytes:
    hasher = strategy()
    hasher.update(data)
    return hasher.digest()


def reference_root(contents: list[Any], strategy: HashStrategy = DEFAULT_HASH_STRATEGY) -> bytes:
    """
    Root computed with plain lists: duplicate the last digest of every odd
    level and keep pairing until one digest remains (at least one pairing).
    """
    level = [c.calculate_hash() for c in contents]
    while True:
        if len(level) % 2 == 1:
            level.append(level[-1])
        level = [h(level[i] + level[i + 1], strategy) for i in range(0, len(level), 2)]
        if len(level) == 1:
            return level[0]


# =============================================================================
# Structural checks
# =============================================================================

def assert_tree_invariants(tree: MerkleTree, strategy: Optional[HashStrategy] = None) -> None:
    """
    Walk the whole tree and assert:
    - internal nodes have two children, leaves none
    - every child points back at its parent; the root has no parent
    - cached digests compose correctly
    - every leaf in the leaf sequence is reachable and at the same depth
    """
    strategy = strategy or tree.hash_strategy
    root = tree.root
    assert root is not None
    assert root.parent is None
    assert tree.merkle_root == root.digest

    reachable_leaves: list[Node] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_leaf:
            assert node.left is None and node.right is None
            assert node.digest == node.content.calculate_hash()
            if node not in reachable_leaves:
                reachable_leaves.append(node)
            continue
        assert node.left is not None and node.right is not None
        assert node.left.parent is node
        assert node.right.parent is node
        assert node.digest == h(node.left.digest + node.right.digest, strategy)
        stack.append(node.right)
        if not node.is_self_paired:
            stack.append(node.left)

    assert len(reachable_leaves) == len(tree.leaves)
    assert all(any(leaf is r for r in reachable_leaves) for leaf in tree.leaves)
    assert len({leaf.depth() for leaf in tree.leaves}) == 1


def tree_shape(node: Node) -> tuple:
    """Nested description of a subtree: leaf flags and digests, self-pairing."""
    if node.is_leaf:
        return ("leaf", node.is_duplicate, node.digest)
    if node.is_self_paired:
        return ("self", tree_shape(node.left), node.digest)
    return ("pair", tree_shape(node.left), tree_shape(node.right), node.digest)
