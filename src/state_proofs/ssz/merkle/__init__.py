"""
SSZ Merkle Tree Operations

This package provides the generalized index merkle proof engine:
- gindex: Generalized index composition across nested containers
- proof: Proof extraction from a tree and root reconstruction/verification
- tree: Tree building from 32-byte chunks
"""

# Generalized index composition
from .gindex import (
    MerkleProofError,
    InvalidLayout,
    cover_depth,
    to_gindex,
    compose_gindex,
    concat_gindices,
    gindex_depth,
    gindex_bits,
)

# Proof generation and verification
from .proof import (
    TraversalError,
    ProofMismatch,
    TreeNode,
    MerkleProof,
    extract_proof,
    compute_root_from_proof,
    verify_merkle_proof,
)

# Tree building utilities
from .tree import (
    build_tree,
    merkle_root_from_chunks,
    leaf_gindex,
)

__all__ = [
    # Generalized indices
    "MerkleProofError",
    "InvalidLayout",
    "cover_depth",
    "to_gindex",
    "compose_gindex",
    "concat_gindices",
    "gindex_depth",
    "gindex_bits",
    # Proofs
    "TraversalError",
    "ProofMismatch",
    "TreeNode",
    "MerkleProof",
    "extract_proof",
    "compute_root_from_proof",
    "verify_merkle_proof",
    # Trees
    "build_tree",
    "merkle_root_from_chunks",
    "leaf_gindex",
]
