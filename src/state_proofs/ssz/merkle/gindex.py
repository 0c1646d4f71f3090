"""
Generalized Index Composition

A generalized index encodes a root-to-leaf path in a binary merkle tree as
the bits of a single integer. The most significant set bit is a sentinel;
every bit after it, read high to low, says whether to descend right (1) or
left (0).

SSZ containers are merkleized as balanced binary trees whose leaf count is
the next power of two >= the container's field count, so a field several
containers deep can be addressed by shifting and OR-ing field positions
together, one container level at a time.

References:
- SSZ merkle proofs: https://github.com/ethereum/consensus-specs/blob/dev/ssz/merkle-proofs.md
"""

from typing import List, Sequence, Tuple


class MerkleProofError(Exception):
    """Base class for fatal proof generation errors."""
    pass


class InvalidLayout(MerkleProofError):
    """Raised when a container layout is inconsistent with a field path."""
    pass


def cover_depth(field_count: int) -> int:
    """
    Calculate the depth of the smallest balanced tree holding `field_count` leaves.

    Args:
        field_count: Number of fields in the container (must be positive)

    Returns:
        Minimal depth d such that 2**d >= field_count

    Examples:
        >>> cover_depth(1)   # Returns 0
        >>> cover_depth(5)   # Returns 3
        >>> cover_depth(17)  # Returns 5
    """
    if field_count < 1:
        raise InvalidLayout(f"Container field count must be positive, got {field_count}")
    return (field_count - 1).bit_length()


def to_gindex(position: int, depth: int) -> int:
    """
    Convert a leaf position at a given depth to its generalized index.

    Args:
        position: 0-based position of the leaf
        depth: Depth of the tree the leaf lives in

    Returns:
        Generalized index (2**depth + position)

    Raises:
        InvalidLayout: If the position does not fit in the tree
    """
    if position < 0 or position >= (1 << depth):
        raise InvalidLayout(
            f"Field position {position} does not fit in a tree of depth {depth}"
        )
    return (1 << depth) | position


def compose_gindex(path: Sequence[Tuple[int, int]]) -> int:
    """
    Compose a generalized index for a field nested several containers deep.

    Each path element is a (field_position, container_field_count) pair,
    outermost container first. The running index starts at the outermost
    field's generalized index and, for every nested level, is shifted left
    by that level's cover depth with the next field position OR-ed in.

    Args:
        path: Ordered (field_position, container_field_count) pairs

    Returns:
        Composite generalized index of the innermost field

    Raises:
        InvalidLayout: If the path is empty or any position exceeds its
            container's cover depth

    Examples:
        >>> compose_gindex([(4, 5), (9, 12), (2, 17)])  # Returns 6434
    """
    if not path:
        raise InvalidLayout("Cannot compose a generalized index from an empty path")

    gindex = 1
    for position, field_count in path:
        depth = cover_depth(field_count)
        # validates position < 2**depth
        to_gindex(position, depth)
        gindex = (gindex << depth) | position
    return gindex


def concat_gindices(*indices: int) -> int:
    """
    Concatenate full generalized indices of successively nested subtrees.

    The result addresses, from the outermost root, the node reached by
    following each index inside the subtree selected by the previous one.

    Args:
        *indices: Generalized indices, outermost first (each >= 1)

    Returns:
        Combined generalized index
    """
    result = 1
    for index in indices:
        if index < 1:
            raise InvalidLayout(f"Generalized index must be >= 1, got {index}")
        depth = gindex_depth(index)
        result = (result << depth) | (index ^ (1 << depth))
    return result


def gindex_depth(index: int) -> int:
    """Number of tree levels between the root and the node at `index`."""
    return index.bit_length() - 1


def gindex_bits(index: int) -> List[bool]:
    """
    Derive the root-to-leaf descent decisions from a generalized index.

    The sentinel bit is stripped and the remaining bits are read
    most-significant first.

    Args:
        index: Generalized index (must be >= 1)

    Returns:
        List of decisions, True meaning "descend right"

    Examples:
        >>> gindex_bits(0b1101)  # Returns [True, False, True]
    """
    if index < 1:
        raise ValueError(f"Generalized index must be >= 1, got {index}")
    depth = gindex_depth(index)
    return [bool((index >> shift) & 1) for shift in range(depth - 1, -1, -1)]
