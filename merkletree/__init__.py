"""
merkletree - incrementally-updatable Merkle trees with inclusion proofs.

Builds a binary hash tree over an ordered list of content items, extends it
one item at a time without full rebuilds, and produces and checks inclusion
proofs for individual items.
"""
from merkletree.crypto.hashing import DEFAULT_HASH_STRATEGY, HashStrategy, get_hash_strategy
from merkletree.merkle import (
    MerkleProof,
    MerkleTree,
    Node,
    compute_root_from_path,
    verify_content_in_root,
    verify_merkle_proof,
)
from merkletree.schemas import (
    AppendMode,
    AppendModeError,
    BytesContent,
    CanonicalContent,
    Content,
    ContentEqualityError,
    ContentHashError,
    EmptyInputError,
    EmptyTreeError,
    FileMeta,
    HashWriteError,
    MerkleTreeException,
    TreeSummary,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_HASH_STRATEGY",
    "HashStrategy",
    "get_hash_strategy",
    "MerkleProof",
    "MerkleTree",
    "Node",
    "compute_root_from_path",
    "verify_content_in_root",
    "verify_merkle_proof",
    "AppendMode",
    "AppendModeError",
    "BytesContent",
    "CanonicalContent",
    "Content",
    "ContentEqualityError",
    "ContentHashError",
    "EmptyInputError",
    "EmptyTreeError",
    "FileMeta",
    "HashWriteError",
    "MerkleTreeException",
    "TreeSummary",
]
