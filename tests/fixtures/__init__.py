"""
Test fixtures package for merkletree tests.

Usage:
    from fixtures import make_items, reference_root

    def test_something():
        items = make_items(5)
        assert MerkleTree.build(items).merkle_root == reference_root(items)
"""

from .trees import (
    FailingEqualsContent,
    FailingHashContent,
    ItemContent,
    SwitchableStrategy,
    assert_tree_invariants,
    h,
    make_items,
    make_tree,
    reference_root,
    tree_shape,
)

__all__ = [
    "FailingEqualsContent",
    "FailingHashContent",
    "ItemContent",
    "SwitchableStrategy",
    "assert_tree_invariants",
    "h",
    "make_items",
    "make_tree",
    "reference_root",
    "tree_shape",
]
