"""
Merkle tree engine: node model, batch builder, incremental append
strategies, inclusion proofs and verification.

Canonical Commitment Rules:
1. Leaf digest: content.calculate_hash()
2. Parent digest: hash(left + right), left first, no separator
3. Odd leaf count: a duplicate leaf clones the last real leaf
4. Odd internal level: the last node is paired with itself
5. Single item: root = hash(a + a)

Usage:
    from merkletree.merkle import MerkleTree, verify_merkle_proof

    tree = MerkleTree.build(contents)
    proof = tree.get_proof(contents[2])
    assert verify_merkle_proof(proof)
"""
from .builder import build_levels, build_leaves, build_tree
from .merkle_tree import MerkleTree
from .node import SIBLING_LEFT, SIBLING_RIGHT, Node
from .proofs import (
    MerkleProof,
    compute_root_from_path,
    get_merkle_path,
    verify_content_in_root,
    verify_merkle_proof,
)

__all__ = [
    # Core types
    "MerkleTree",
    "Node",
    "MerkleProof",
    "SIBLING_LEFT",
    "SIBLING_RIGHT",
    # Construction
    "build_leaves",
    "build_levels",
    "build_tree",
    # Proofs
    "compute_root_from_path",
    "get_merkle_path",
    "verify_content_in_root",
    "verify_merkle_proof",
]
