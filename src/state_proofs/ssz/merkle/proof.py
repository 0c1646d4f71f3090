"""
Merkle Proof Generation and Verification

This module walks a binary hash tree from its root down to the node named by
a generalized index, collecting the sibling hash at every level, and performs
the inverse operation of rebuilding the root from a leaf and its siblings.

Proof generation is strict: any navigation failure or leaf mismatch aborts
with an exception and no proof is returned. Verification never raises; a
forged or stale proof simply verifies as False.
"""

import logging
from dataclasses import dataclass, field
from hashlib import sha256
from typing import List, Protocol, Sequence

from remerkleable.tree import NavigationError

from .gindex import MerkleProofError, gindex_bits, gindex_depth

logger = logging.getLogger(__name__)

HASH_SIZE = 32


class TraversalError(MerkleProofError):
    """Raised when the tree is shallower than the generalized index implies."""
    pass


class ProofMismatch(MerkleProofError):
    """Raised when the leaf reached by a walk differs from the expected value."""
    pass


class TreeNode(Protocol):
    """A navigable binary merkle tree node."""

    def get_left(self) -> "TreeNode":
        ...

    def get_right(self) -> "TreeNode":
        ...

    def merkle_root(self) -> bytes:
        ...


@dataclass(frozen=True)
class MerkleProof:
    """
    A single-leaf merkle proof.

    Attributes:
        root: 32-byte root of the tree
        leaf: 32-byte value of the proven node
        index: Generalized index of the proven node
        siblings: Sibling hashes ordered from the level nearest the root
            to the level nearest the leaf
    """
    root: bytes
    leaf: bytes
    index: int
    siblings: List[bytes] = field(default_factory=list)

    def branch(self) -> List[bytes]:
        """Siblings ordered leaf-to-root, as consumed by is_valid_merkle_branch."""
        return list(reversed(self.siblings))

    def verify(self) -> bool:
        return verify_merkle_proof(self.root, self.leaf, self.index, self.siblings)


def extract_proof(root_node: TreeNode, index: int, expected_leaf: bytes) -> MerkleProof:
    """
    Walk from `root_node` to the node at generalized `index` and build its proof.

    At every level the child that is not descended into (the complement)
    contributes its merkle root to the proof. Once the index is exhausted the
    walk sits on the target node, whose root must equal `expected_leaf`.

    Args:
        root_node: Root of the tree to prove against
        index: Generalized index of the target node
        expected_leaf: Independently computed 32-byte value of the target

    Returns:
        MerkleProof with siblings in root-to-leaf order

    Raises:
        TraversalError: If a node along the path has no children
        ProofMismatch: If the reached node does not match `expected_leaf`
    """
    decisions = gindex_bits(index)
    collected: List[bytes] = []
    node = root_node

    for level, right in enumerate(decisions):
        try:
            if right:
                complement, node = node.get_left(), node.get_right()
            else:
                complement, node = node.get_right(), node.get_left()
        except NavigationError as e:
            raise TraversalError(
                f"Tree ends at level {level} while walking to generalized index "
                f"{index} (depth {len(decisions)}): {e}"
            ) from e

        sibling = bytes(complement.merkle_root())
        logger.debug(f"Level {level}: descend {'right' if right else 'left'}, sibling 0x{sibling.hex()}")
        # deepest sibling first
        collected.insert(0, sibling)

    leaf = bytes(node.merkle_root())
    if leaf != bytes(expected_leaf):
        raise ProofMismatch(
            f"Expected leaf 0x{bytes(expected_leaf).hex()}, got 0x{leaf.hex()} "
            f"at generalized index {index}"
        )

    collected.reverse()
    return MerkleProof(
        root=bytes(root_node.merkle_root()),
        leaf=leaf,
        index=index,
        siblings=collected,
    )


def compute_root_from_proof(leaf: bytes, index: int, siblings: Sequence[bytes]) -> bytes:
    """
    Rebuild the merkle root from a leaf, its generalized index and its siblings.

    Args:
        leaf: 32-byte value of the proven node
        index: Generalized index of the proven node
        siblings: Sibling hashes in root-to-leaf order

    Returns:
        The reconstructed 32-byte root

    Raises:
        ValueError: If the sibling count does not match the index depth
    """
    decisions = gindex_bits(index)
    if len(siblings) != len(decisions):
        raise ValueError(
            f"Generalized index {index} needs {len(decisions)} siblings, got {len(siblings)}"
        )

    current = bytes(leaf)
    for right, sibling in zip(reversed(decisions), reversed(siblings)):
        if right:
            # our node was the right child
            current = sha256(bytes(sibling) + current).digest()
        else:
            current = sha256(current + bytes(sibling)).digest()
    return current


def verify_merkle_proof(root: bytes, leaf: bytes, index: int, siblings: Sequence[bytes]) -> bool:
    """
    Verify a generalized-index merkle proof against a known root.

    Malformed input (index < 1, wrong sibling count, values that are not
    32 bytes) is reported as an invalid proof rather than an error.

    Args:
        root: Expected 32-byte root
        leaf: 32-byte value of the proven node
        index: Generalized index of the proven node
        siblings: Sibling hashes in root-to-leaf order

    Returns:
        True if the proof reconstructs `root`
    """
    if index < 1 or len(siblings) != gindex_depth(index):
        logger.debug(f"Proof shape mismatch: index {index}, {len(siblings)} siblings")
        return False
    if any(not isinstance(value, (bytes, bytearray)) or len(value) != HASH_SIZE
           for value in (root, leaf, *siblings)):
        logger.debug("Proof contains a value that is not 32 bytes")
        return False
    return compute_root_from_proof(leaf, index, siblings) == bytes(root)
