"""
Tree node model.

A node is a leaf (wraps one content item), a duplicate leaf (a distinct
node cloning the preceding leaf's content and digest) or an internal node
with exactly two children. A self-paired internal node has the same node
object as both children.

Children are owned by their parent; ``parent`` is only an upward index used
for walks from a leaf to the root.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from merkletree.crypto.hashing import HashStrategy, hash_concat

# Side markers recorded in a Merkle path.
SIBLING_LEFT = 0
SIBLING_RIGHT = 1


@dataclass(eq=False)
class Node:
    digest: bytes
    left: Optional[Node] = None
    right: Optional[Node] = None
    parent: Optional[Node] = None
    content: Any = None
    is_leaf: bool = False
    is_duplicate: bool = False

    @classmethod
    def leaf(cls, content: Any, digest: bytes, duplicate: bool = False) -> Node:
        return cls(digest=digest, content=content, is_leaf=True, is_duplicate=duplicate)

    @classmethod
    def duplicate_of(cls, node: Node) -> Node:
        """A new duplicate leaf sharing ``node``'s content and digest."""
        return cls.leaf(node.content, node.digest, duplicate=True)

    @classmethod
    def branch(cls, left: Node, right: Node, strategy: HashStrategy) -> Node:
        """
        Create the parent of ``left`` and ``right`` and link both children to it.

        Passing the same node twice produces a self-paired parent.
        """
        node = cls(digest=hash_concat(left.digest, right.digest, strategy), left=left, right=right)
        left.parent = node
        right.parent = node
        return node

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_self_paired(self) -> bool:
        return self.left is not None and self.left is self.right

    def sibling(self) -> tuple[Node, int]:
        """
        Return this node's sibling and the side it sits on.

        Raises:
            ValueError: If called on the root
        """
        parent = self.parent
        if parent is None:
            raise ValueError("root node has no sibling")
        if parent.left is self:
            return parent.right, SIBLING_RIGHT
        return parent.left, SIBLING_LEFT

    def ancestors(self) -> Iterator[Node]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def depth(self) -> int:
        """Number of edges between this node and the root."""
        return sum(1 for _ in self.ancestors())

    def __repr__(self) -> str:
        return f"{self.is_leaf} {self.is_duplicate} {self.digest.hex()} {self.content!r}"
