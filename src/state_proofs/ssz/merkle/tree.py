"""
Merkle Tree Building Utilities

Builds balanced binary hash trees out of 32-byte chunks, using the same
node types the SSZ decoder produces, so any list of chunks can be walked
and proven exactly like a decoded container.
"""

from hashlib import sha256
from typing import List, Optional

from remerkleable.tree import Node, PairNode, RootNode, zero_node

from .gindex import to_gindex


def build_tree(chunks: List[bytes], depth: Optional[int] = None) -> Node:
    """
    Build a balanced merkle tree over 32-byte chunks.

    Missing leaves are filled with zero chunks, and whole missing subtrees
    with the matching zero-hash node.

    Args:
        chunks: Leaf chunks, left to right
        depth: Tree depth; defaults to the smallest depth that fits all chunks

    Returns:
        Root node of the tree

    Examples:
        >>> root = build_tree([b'\\x01' * 32, b'\\x02' * 32])
        >>> root.merkle_root() == sha256(b'\\x01' * 32 + b'\\x02' * 32).digest()
    """
    if depth is None:
        depth = (len(chunks) - 1).bit_length() if chunks else 0
    if len(chunks) > (1 << depth):
        raise ValueError(f"Too many chunks: {len(chunks)} > {1 << depth}")

    for chunk in chunks:
        if len(chunk) != 32:
            raise ValueError("Each chunk must be 32 bytes")

    return _subtree(chunks, depth)


def _subtree(chunks: List[bytes], depth: int) -> Node:
    if not chunks:
        return zero_node(depth)
    if depth == 0:
        return RootNode(bytes(chunks[0]))
    half = 1 << (depth - 1)
    return PairNode(_subtree(chunks[:half], depth - 1), _subtree(chunks[half:], depth - 1))


def merkle_root_from_chunks(chunks: List[bytes]) -> bytes:
    """
    Compute the merkle root of chunks padded to the next power of two.

    This hashes level by level without building node objects and is
    useful as an independent check of `build_tree`.

    Args:
        chunks: List of 32-byte chunks

    Returns:
        32-byte merkle root
    """
    n = len(chunks)
    if n == 0:
        return b"\x00" * 32

    m = 1 << (n - 1).bit_length()
    level = list(chunks) + [b"\x00" * 32] * (m - n)
    while len(level) > 1:
        level = [sha256(level[i] + level[i + 1]).digest() for i in range(0, len(level), 2)]
    return level[0]


def leaf_gindex(position: int, depth: int) -> int:
    """Generalized index of the leaf at `position` in a tree of `depth`."""
    return to_gindex(position, depth)
