"""
SSZ Container Utilities

Decoding of signed beacon blocks per fork, and the `ContainerNode` wrapper
that gives the proof builder indexed field access over a decoded container
together with the container's backing merkle tree.
"""

import logging
from typing import Any, Dict, List, Type

from remerkleable.complex import Container
from remerkleable.tree import Node

from ..merkle.gindex import InvalidLayout
from .deneb import SignedDenebBeaconBlock
from .electra import SignedElectraBeaconBlock

logger = logging.getLogger(__name__)

SIGNED_BLOCK_TYPES: Dict[str, Type[Container]] = {
    "deneb": SignedDenebBeaconBlock,
    "electra": SignedElectraBeaconBlock,
    "fulu": SignedElectraBeaconBlock,
}


class ContainerNode:
    """
    Indexed access to the fields of a decoded SSZ container.

    Fields are addressed by position, in declaration order, which is also
    their leaf order in the container's merkle tree.
    """

    def __init__(self, view: Container):
        if not isinstance(view, Container):
            raise TypeError(f"Expected an SSZ container, got {type(view).__name__}")
        self.view = view

    @property
    def type_name(self) -> str:
        return type(self.view).__name__

    @property
    def field_names(self) -> List[str]:
        return list(type(self.view).fields().keys())

    def field_count(self) -> int:
        return len(self.field_names)

    def field_at(self, position: int) -> Any:
        """
        Get the field view at `position`.

        Raises:
            InvalidLayout: If the container has no field at that position
        """
        names = self.field_names
        if position < 0 or position >= len(names):
            raise InvalidLayout(
                f"{self.type_name} has {len(names)} fields, no field at position {position}"
            )
        return getattr(self.view, names[position])

    def container_at(self, position: int) -> "ContainerNode":
        """Get the field at `position`, which must itself be a container."""
        value = self.field_at(position)
        if not isinstance(value, Container):
            raise InvalidLayout(
                f"Field {self.field_names[position]} of {self.type_name} is not a container"
            )
        return ContainerNode(value)

    def merkle_root(self) -> bytes:
        return bytes(self.view.hash_tree_root())

    @property
    def backing(self) -> Node:
        """Root node of the container's merkle tree."""
        return self.view.get_backing()


def get_signed_block_type(fork: str) -> Type[Container]:
    """
    Look up the signed beacon block SSZ type for a fork.

    Raises:
        InvalidLayout: If the fork has no block decoder
    """
    try:
        return SIGNED_BLOCK_TYPES[fork.lower()]
    except KeyError:
        raise InvalidLayout(
            f"No beacon block decoder for fork '{fork}'. "
            f"Supported forks: {', '.join(sorted(SIGNED_BLOCK_TYPES))}"
        )


def decode_signed_block(data: bytes, fork: str) -> Container:
    """
    Decode SSZ bytes of a signed beacon block.

    Args:
        data: Raw SSZ-encoded SignedBeaconBlock
        fork: Fork whose schema the bytes follow

    Returns:
        Decoded SignedBeaconBlock view

    Raises:
        InvalidLayout: If the fork is not supported
        ValueError: If the bytes do not decode under the fork's schema
    """
    block_type = get_signed_block_type(fork)
    try:
        signed_block = block_type.decode_bytes(data)
    except Exception as e:
        raise ValueError(f"Failed to decode {len(data)} bytes as {block_type.__name__}: {e}") from e

    logger.info(f"Decoded {block_type.__name__} at slot {int(signed_block.message.slot)}")
    return signed_block
