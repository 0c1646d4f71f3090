"""
State Proofs - Beacon proof generation module

This module builds the beacon half of the proof chain: an SSZ merkle proof
that an execution state root is a leaf of a beacon block root. It is used by
both the CLI and API interfaces.

Path proven: BeaconBlock.body -> BeaconBlockBody.execution_payload ->
ExecutionPayload.state_root. The execution block number and timestamp are
read from the same payload and carried alongside the proof as metadata.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from remerkleable.complex import Container

from .config import ContainerLayout, get_layout
from .ssz import (
    ContainerNode,
    InvalidLayout,
    ProofMismatch,
    decode_signed_block,
    extract_proof,
    verify_merkle_proof,
)

if TYPE_CHECKING:
    from .api.beacon_client import BeaconAPIClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BeaconProofResult:
    """
    Container for beacon proof generation results.

    Attributes:
        root: Beacon block root (hash_tree_root of the BeaconBlock)
        leaf: Execution state root proven under `root`
        index: Generalized index of the state root in the BeaconBlock tree
        proof: Sibling hashes, root-to-leaf order
        block_number: Execution block number from the same payload
        timestamp: Execution block timestamp from the same payload
        slot: Beacon slot of the block
        fork: Fork layout used to build the proof
    """
    root: bytes
    leaf: bytes
    index: int
    proof: List[bytes]
    block_number: int
    timestamp: int
    slot: Optional[int] = None
    fork: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def branch(self) -> List[bytes]:
        """Siblings ordered leaf-to-root."""
        return list(reversed(self.proof))

    def verify(self) -> bool:
        return verify_merkle_proof(self.root, self.leaf, self.index, self.proof)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": f"0x{self.root.hex()}",
            "leaf": f"0x{self.leaf.hex()}",
            "index": self.index,
            "proof": [f"0x{step.hex()}" for step in self.proof],
            "branch": [f"0x{step.hex()}" for step in self.branch()],
            "block_number": self.block_number,
            "timestamp": self.timestamp,
            "slot": self.slot,
            "fork": self.fork,
        }


def build_beacon_proof(block: Container, layout: ContainerLayout) -> BeaconProofResult:
    """
    Build the proof that the execution state root is a leaf of a beacon block.

    Args:
        block: Decoded BeaconBlock (the message of a SignedBeaconBlock)
        layout: Container layout of the block's fork

    Returns:
        BeaconProofResult for the execution state root

    Raises:
        InvalidLayout: If the layout does not match the decoded containers
        TraversalError: If the block tree is shallower than the index implies
        ProofMismatch: If the walk does not end on the state root
    """
    block_node = ContainerNode(block)
    body = block_node.container_at(layout.body_position)
    payload = body.container_at(layout.execution_payload_position)
    layout.validate_field_counts(block_node.field_count(), body.field_count(), payload.field_count())

    state_root_view = payload.field_at(layout.state_root_position)
    expected_leaf = bytes(state_root_view.hash_tree_root())

    gindex = layout.state_root_gindex()
    logger.info(f"Proving execution state root at generalized index {gindex} ({layout.fork} layout)")

    proof = extract_proof(block_node.backing, gindex, expected_leaf)

    root = block_node.merkle_root()
    if proof.root != root:
        raise ProofMismatch(f"Proof root 0x{proof.root.hex()} differs from block root 0x{root.hex()}")

    block_number = int(payload.field_at(layout.block_number_position))
    timestamp = int(payload.field_at(layout.timestamp_position))

    return BeaconProofResult(
        root=root,
        leaf=proof.leaf,
        index=proof.index,
        proof=proof.siblings,
        block_number=block_number,
        timestamp=timestamp,
        slot=int(block.slot),
        fork=layout.fork,
        metadata={
            "proof_length": len(proof.siblings),
            "proposer_index": int(block.proposer_index),
            "parent_root": f"0x{bytes(block.parent_root).hex()}",
            "beacon_state_root": f"0x{bytes(block.state_root).hex()}",
            "execution_block_hash": f"0x{bytes(payload.view.block_hash).hex()}",
        },
    )


def generate_beacon_proof(client: "BeaconAPIClient", block_id: str, fork: Optional[str]) -> BeaconProofResult:
    """
    Fetch a beacon block, decode it under the configured fork and prove it.

    Args:
        client: Beacon API client
        block_id: Block identifier ("head", "finalized", slot or 0x root)
        fork: Fork layout name

    Returns:
        BeaconProofResult for the execution state root

    Raises:
        InvalidLayout: If the fork is unknown or disagrees with the node
        BeaconAPIError: If the block cannot be fetched
    """
    layout = get_layout(fork)

    response = client.get_block_ssz(block_id)
    if response.consensus_version and response.consensus_version.lower() != layout.fork:
        raise InvalidLayout(
            f"Beacon node reports fork '{response.consensus_version}' for block {block_id}, "
            f"but the configured fork is '{layout.fork}'"
        )

    signed_block = decode_signed_block(response.data, layout.fork)
    return build_beacon_proof(signed_block.message, layout)


def log_beacon_proof(result: BeaconProofResult) -> bool:
    """Log every field of a beacon proof and whether it verifies."""
    logger.info(f"Beacon root: 0x{result.root.hex()}")
    logger.info(f"Beacon slot: {result.slot}")
    logger.info(f"Beacon timestamp: {result.timestamp}")
    logger.info(f"Execution block number: {result.block_number}")
    logger.info(f"Execution state root: 0x{result.leaf.hex()}")
    logger.info(f"Proof index: {result.index}")
    logger.info(f"SSZ Beacon proof: {[step.hex() for step in result.proof]}")
    is_valid = result.verify()
    logger.info(f"SSZ Beacon proof is valid: {is_valid}")
    return is_valid
