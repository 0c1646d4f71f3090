"""
Proof Service Module

This module provides a service layer that chains the beacon proof and the
execution storage proof for the same execution block, shared by the CLI and
the REST API.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..config import Settings
from ..main import BeaconProofResult, generate_beacon_proof
from .beacon_client import BeaconAPIClient
from .execution_client import ExecutionClient, ProofData

logger = logging.getLogger(__name__)


class ProofLinkageError(Exception):
    """Raised when a beacon proof and an execution proof describe different blocks."""
    pass


@dataclass(frozen=True)
class ChainedProof:
    """Beacon and execution proof bundles linked by block number and state root."""
    beacon: BeaconProofResult
    execution: ProofData

    def to_dict(self) -> Dict[str, Any]:
        return {
            "beacon": self.beacon.to_dict(),
            "execution": self.execution.to_dict(),
        }


def check_proof_linkage(beacon: BeaconProofResult, execution: ProofData) -> None:
    """
    Check that both proof bundles are anchored to the same execution block.

    Raises:
        ProofLinkageError: If the block numbers or state roots differ
    """
    if beacon.block_number != execution.block_number:
        raise ProofLinkageError(
            f"Beacon proof is for execution block {beacon.block_number}, "
            f"storage proof is for block {execution.block_number}"
        )
    if beacon.leaf != execution.state_root:
        raise ProofLinkageError(
            f"Beacon proof leaf 0x{beacon.leaf.hex()} does not match "
            f"execution state root 0x{execution.state_root.hex()} at block {execution.block_number}"
        )


class ProofService:
    """Service for generating beacon, storage and chained proofs."""

    def __init__(self, beacon_client: Optional[BeaconAPIClient] = None,
                 execution_client: Optional[ExecutionClient] = None):
        """
        Initialize the proof service.

        Args:
            beacon_client: BeaconAPIClient instance. If None, a new client is
                created from the environment when first needed.
            execution_client: ExecutionClient instance. If None, a new client is
                created from the environment when first needed.
        """
        self.beacon_client = beacon_client
        self.execution_client = execution_client

    def _beacon(self) -> BeaconAPIClient:
        if self.beacon_client is None:
            self.beacon_client = BeaconAPIClient()
        return self.beacon_client

    def _execution(self) -> ExecutionClient:
        if self.execution_client is None:
            self.execution_client = ExecutionClient()
        return self.execution_client

    def health(self) -> Dict[str, bool]:
        """Report which configured nodes are reachable."""
        status = {}
        for name, factory in (("beacon_api", self._beacon), ("execution_api", self._execution)):
            try:
                status[name] = factory().health_check()
            except ValueError as e:
                logger.warning(f"{name} not configured: {e}")
                status[name] = False
        return status

    def get_beacon_proof(self, block_id: str = "finalized", fork: Optional[str] = None) -> BeaconProofResult:
        """Prove the execution state root of a beacon block. Falls back to BEACON_FORK."""
        return generate_beacon_proof(self._beacon(), block_id, fork or Settings.from_env().fork)

    def get_storage_proof(self, address: str, slot: int,
                          block_number: Optional[int] = None) -> ProofData:
        """Collect the storage proof for a contract slot at an execution block."""
        return self._execution().get_storage_proof(address, slot, block_number)

    def get_chained_proof(self, address: str, slot: int, block_id: str = "finalized",
                          fork: Optional[str] = None) -> ChainedProof:
        """
        Generate both proofs for the execution block anchored in a beacon block.

        The beacon proof is built first; its execution block number selects
        the block the storage proof is taken at, and the two bundles must
        agree on block number and state root.

        Args:
            address: Contract address
            slot: Storage slot
            block_id: Beacon block identifier
            fork: Fork layout name

        Returns:
            ChainedProof with both bundles

        Raises:
            ProofLinkageError: If the bundles are not anchored to the same block
        """
        beacon = self.get_beacon_proof(block_id, fork)
        logger.info(
            f"Beacon block {beacon.slot} anchors execution block {beacon.block_number}, "
            f"collecting storage proof"
        )
        execution = self.get_storage_proof(address, slot, beacon.block_number)
        check_proof_linkage(beacon, execution)
        return ChainedProof(beacon=beacon, execution=execution)
