"""
Inclusion proofs.

A Merkle path lists, from the leaf upward, the digest of the sibling at each
level together with a side marker:

    0 (SIBLING_LEFT)  - the sibling is on the left:  parent = hash(sibling + current)
    1 (SIBLING_RIGHT) - the sibling is on the right: parent = hash(current + sibling)

Replaying the path from a content item's digest yields the root digest, so a
third party holding only the root, the content and the path can check
inclusion without the tree.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from merkletree.crypto.hashing import DEFAULT_HASH_STRATEGY, HashStrategy, hash_concat
from merkletree.merkle.node import SIBLING_LEFT, SIBLING_RIGHT, Node
from merkletree.schemas.content import content_digest, content_equals


@dataclass(frozen=True)
class MerkleProof:
    """
    An inclusion proof for a single content item.

    Attributes:
        leaf: Digest of the proven content item
        siblings: Sibling digests from the leaf level up to the root's children
        indexes: Side marker per sibling (SIBLING_LEFT or SIBLING_RIGHT)
        root: The root digest this proof is against
    """
    leaf: bytes
    siblings: list[bytes] = field(default_factory=list)
    indexes: list[int] = field(default_factory=list)
    root: bytes = b""

    def __post_init__(self) -> None:
        if len(self.siblings) != len(self.indexes):
            raise ValueError(
                f"siblings and indexes differ in length: {len(self.siblings)} != {len(self.indexes)}"
            )
        for marker in self.indexes:
            if marker not in (SIBLING_LEFT, SIBLING_RIGHT):
                raise ValueError(f"side marker must be 0 or 1, got {marker}")

    @property
    def depth(self) -> int:
        return len(self.siblings)


def find_leaf(leaves: Sequence[Node], content: Any) -> Optional[Node]:
    """
    First leaf, in leaf order, whose content equals ``content``.

    Raises:
        ContentEqualityError: If an equality check fails (aborts the search)
    """
    for i, leaf in enumerate(leaves):
        if content_equals(leaf.content, content, leaf_index=i):
            return leaf
    return None


def path_from_leaf(leaf: Node) -> tuple[list[bytes], list[int]]:
    """Sibling digests and side markers from ``leaf`` up to the root."""
    siblings: list[bytes] = []
    indexes: list[int] = []
    node = leaf
    while node.parent is not None:
        sibling, side = node.sibling()
        siblings.append(sibling.digest)
        indexes.append(side)
        node = node.parent
    return siblings, indexes


def get_merkle_path(leaves: Sequence[Node], content: Any) -> tuple[list[bytes], list[int]]:
    """
    Merkle path of the first leaf matching ``content``.

    Returns:
        (siblings, indexes); both empty when no leaf matches
    """
    leaf = find_leaf(leaves, content)
    if leaf is None:
        return [], []
    return path_from_leaf(leaf)


def compute_root_from_path(
    leaf: bytes,
    siblings: Sequence[bytes],
    indexes: Sequence[int],
    strategy: HashStrategy = DEFAULT_HASH_STRATEGY,
) -> bytes:
    """
    Replay a Merkle path from a leaf digest.

    Raises:
        ValueError: If siblings and indexes differ in length, or a side
            marker is not 0 or 1
        HashWriteError: If the hash strategy fails
    """
    if len(siblings) != len(indexes):
        raise ValueError(
            f"siblings and indexes differ in length: {len(siblings)} != {len(indexes)}"
        )
    current = leaf
    for sibling, side in zip(siblings, indexes):
        if side not in (SIBLING_LEFT, SIBLING_RIGHT):
            raise ValueError(f"side marker must be 0 or 1, got {side}")
        if side == SIBLING_LEFT:
            current = hash_concat(sibling, current, strategy)
        else:
            current = hash_concat(current, sibling, strategy)
    return current


def verify_merkle_proof(proof: MerkleProof, strategy: HashStrategy = DEFAULT_HASH_STRATEGY) -> bool:
    """Check that a proof's path leads from its leaf to its root."""
    return compute_root_from_path(proof.leaf, proof.siblings, proof.indexes, strategy) == proof.root


def verify_content_in_root(
    content: Any,
    siblings: Sequence[bytes],
    indexes: Sequence[int],
    root: bytes,
    strategy: HashStrategy = DEFAULT_HASH_STRATEGY,
) -> bool:
    """
    Check a content item against a published root and its Merkle path.

    The content is hashed through its own calculate_hash().
    """
    return compute_root_from_path(content_digest(content), siblings, indexes, strategy) == root
