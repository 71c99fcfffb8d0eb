"""
Merkle Tree
An incrementally-updatable binary hash tree over an ordered list of content items.

The tree owns its root, its leaves (in insertion order, duplicates included)
and the last computed root digest. That stored digest is kept apart from the
root node's own digest field; full verification compares a fresh recompute
against it.

Usage:
    from merkletree import MerkleTree, BytesContent

    tree = MerkleTree.build([BytesContent(b"a"), BytesContent(b"b")])
    tree.append(BytesContent(b"c"))
    siblings, indexes = tree.get_merkle_path(BytesContent(b"c"))
    assert tree.verify_tree()

Thread Safety:
    Every public method runs under one re-entrant lock, so a tree admits a
    single operation at a time.
"""
from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Optional, Sequence, Union

from merkletree.crypto.hashing import DEFAULT_HASH_STRATEGY, HashStrategy, strategy_name, to_hex
from merkletree.merkle.append import append_explicit, append_implicit
from merkletree.merkle.builder import build_tree
from merkletree.merkle.node import Node
from merkletree.merkle.proofs import MerkleProof, find_leaf, get_merkle_path, path_from_leaf
from merkletree.merkle.verify import verify_path
from merkletree.merkle.verify import verify_tree as _verify_tree
from merkletree.schemas.content import Content
from merkletree.schemas.errors import AppendModeError, EmptyTreeError
from merkletree.schemas.tree import AppendMode, TreeSummary

if TYPE_CHECKING:
    from merkletree.config.runtime import RuntimeConfig

logger = logging.getLogger(__name__)


class MerkleTree:
    """
    Container for the tree.

    Create a tree from a batch with MerkleTree.build(); MerkleTree() alone is
    an empty tree that only append_with_duplicate() can grow.

    Args:
        hash_strategy: Zero-argument hash factory used for every internal node;
            defaults to SHA-256. Content digests should use the same algorithm.
        append_mode: Append strategy this tree commits to. When omitted the
            first append decides.

    Raises:
        ConfigurationException: If append_mode names no known mode
    """

    def __init__(
        self,
        hash_strategy: Optional[HashStrategy] = None,
        append_mode: Union[AppendMode, str, None] = None,
    ) -> None:
        self.hash_strategy: HashStrategy = hash_strategy or DEFAULT_HASH_STRATEGY
        self.append_mode: Optional[AppendMode] = AppendMode.parse(append_mode) if append_mode is not None else None
        self.root: Optional[Node] = None
        self._leaves: list[Node] = []
        self._merkle_root: Optional[bytes] = None
        self._lock = threading.RLock()

    @classmethod
    def build(
        cls,
        contents: Sequence[Content],
        hash_strategy: Optional[HashStrategy] = None,
        append_mode: Union[AppendMode, str, None] = None,
    ) -> MerkleTree:
        """
        Build a tree from an ordered batch of content.

        Raises:
            EmptyInputError: If contents is empty
            ContentHashError: If any item's digest fails
            HashWriteError: If the hash strategy fails
        """
        tree = cls(hash_strategy=hash_strategy, append_mode=append_mode)
        tree.rebuild_with(contents)
        return tree

    @classmethod
    def from_config(cls, config: RuntimeConfig, contents: Optional[Sequence[Content]] = None) -> MerkleTree:
        """Create a tree with the hash strategy and append mode named by ``config``."""
        hash_strategy = config.hash_strategy()
        append_mode = config.tree.resolved_append_mode()
        if contents is None:
            return cls(hash_strategy=hash_strategy, append_mode=append_mode)
        return cls.build(contents, hash_strategy=hash_strategy, append_mode=append_mode)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def merkle_root(self) -> Optional[bytes]:
        """The stored, unverified root digest; None for an empty tree."""
        return self._merkle_root

    @property
    def leaves(self) -> tuple[Node, ...]:
        """Leaf nodes in insertion order, duplicates included."""
        with self._lock:
            return tuple(self._leaves)

    @property
    def depth(self) -> int:
        with self._lock:
            if not self._leaves:
                return 0
            return self._leaves[0].depth()

    def contents(self) -> list[Any]:
        """Real (non-duplicate) contents in leaf order."""
        with self._lock:
            return [leaf.content for leaf in self._leaves if not leaf.is_duplicate]

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for leaf in self._leaves if not leaf.is_duplicate)

    def _set_root(self, root: Node) -> None:
        self.root = root
        self._merkle_root = root.digest

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def rebuild(self) -> None:
        """
        Rebuild the tree from the contents it holds.

        Every internal and duplicate node is discarded and re-derived.

        Raises:
            EmptyInputError: If the tree holds no content
        """
        with self._lock:
            self.rebuild_with(self.contents())

    def rebuild_with(self, contents: Sequence[Content]) -> None:
        """
        Replace the tree's contents and rebuild completely.

        The tree object survives; on failure it is left untouched.

        Raises:
            EmptyInputError: If contents is empty
        """
        with self._lock:
            try:
                root, leaves = build_tree(contents, self.hash_strategy)
            except Exception:
                logger.warning(f"rebuild of {len(contents)} item(s) failed")
                raise
            self._leaves = leaves
            self._set_root(root)
            logger.info(f"built tree with {len(contents)} item(s), root {root.digest.hex()}")

    # -------------------------------------------------------------------------
    # Incremental append
    # -------------------------------------------------------------------------

    def _check_mode(self, requested: AppendMode) -> None:
        if self.append_mode is not None and self.append_mode != requested:
            logger.warning(f"rejected {requested.value} append on a tree committed to {self.append_mode.value}")
            raise AppendModeError(
                f"tree is committed to {self.append_mode.value} append",
                committed=self.append_mode.value,
                requested=requested.value,
            )

    def append(self, content: Content) -> None:
        """
        Append one item, balancing odd levels by self-pairing (no duplicate leaves).

        Raises:
            EmptyTreeError: If the tree has no leaves
            AppendModeError: If the tree is committed to append_with_duplicate
            ContentHashError: If the item's digest fails
            HashWriteError: If the hash strategy fails
        """
        with self._lock:
            self._check_mode(AppendMode.IMPLICIT)
            root = append_implicit(self.root, self._leaves, content, self.hash_strategy)
            self.append_mode = AppendMode.IMPLICIT
            self._set_root(root)

    def append_with_duplicate(self, content: Content) -> None:
        """
        Append one item keeping materialized duplicates; the tree always equals
        a fresh build of the same content sequence. Works on an empty tree.

        Raises:
            AppendModeError: If the tree is committed to append
            ContentHashError: If the item's digest fails
            HashWriteError: If the hash strategy fails
        """
        with self._lock:
            self._check_mode(AppendMode.EXPLICIT)
            root = append_explicit(self.root, self._leaves, content, self.hash_strategy)
            self.append_mode = AppendMode.EXPLICIT
            self._set_root(root)

    # -------------------------------------------------------------------------
    # Proofs and verification
    # -------------------------------------------------------------------------

    def get_merkle_path(self, content: Any) -> tuple[list[bytes], list[int]]:
        """
        Sibling digests and side markers from the first leaf matching ``content``
        up to the root.

        Returns:
            (siblings, indexes); both empty when no leaf matches

        Raises:
            ContentEqualityError: If an equality check fails
        """
        with self._lock:
            return get_merkle_path(self._leaves, content)

    def get_proof(self, content: Any) -> Optional[MerkleProof]:
        """Self-contained inclusion proof for ``content``; None when not found."""
        with self._lock:
            leaf = find_leaf(self._leaves, content)
            if leaf is None:
                return None
            siblings, indexes = path_from_leaf(leaf)
            return MerkleProof(
                leaf=leaf.digest,
                siblings=siblings,
                indexes=indexes,
                root=self._merkle_root,
            )

    def verify_tree(self) -> bool:
        """
        Recompute every digest from live content and compare with the stored root.

        Raises:
            EmptyTreeError: If the tree has no leaves
            ContentHashError: If a content digest fails
        """
        with self._lock:
            if self.root is None:
                logger.warning("rejected verify_tree on a tree with no leaves")
                raise EmptyTreeError("cannot verify a tree with no leaves", operation="verify_tree")
            return _verify_tree(self.root, self._merkle_root, self.hash_strategy)

    def verify_content(self, content: Any) -> bool:
        """
        Check the path from the first leaf matching ``content`` to the root.

        Returns False when no leaf matches. Sibling subtrees are trusted
        beyond one level; use verify_tree() for a full audit.

        Raises:
            ContentEqualityError: If an equality check fails
            ContentHashError: If a content digest fails
        """
        with self._lock:
            leaf = find_leaf(self._leaves, content)
            if leaf is None:
                return False
            return verify_path(leaf, self.hash_strategy)

    # -------------------------------------------------------------------------
    # Presentation
    # -------------------------------------------------------------------------

    def summary(self) -> TreeSummary:
        with self._lock:
            return TreeSummary(
                merkle_root=to_hex(self._merkle_root) if self._merkle_root is not None else None,
                leaf_count=len(self._leaves),
                content_count=len(self),
                depth=self.depth,
                hash_algorithm=strategy_name(self.hash_strategy),
                append_mode=self.append_mode,
            )

    def __str__(self) -> str:
        """One line per leaf."""
        with self._lock:
            return "".join(f"{leaf!r}\n" for leaf in self._leaves)
