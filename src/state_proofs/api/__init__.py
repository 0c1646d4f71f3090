"""
Node API Integration Package

This package provides the network-facing collaborators of the proof engine:

- BeaconAPIClient: fetches SSZ-encoded beacon blocks from a beacon node
- ExecutionClient: collects storage proofs and block headers from an execution node
- ProofService: chains both into a linked proof

Usage:
    from state_proofs.api import ProofService

    service = ProofService()
    chained = service.get_chained_proof("0x45b9...", 0, "finalized", fork="electra")
"""

from .beacon_client import BeaconAPIClient, BeaconAPIError
from .execution_client import ExecutionClient, ExecutionProofError, ProofData
from .proof_service import ChainedProof, ProofLinkageError, ProofService, check_proof_linkage

__all__ = [
    'BeaconAPIClient',
    'BeaconAPIError',
    'ExecutionClient',
    'ExecutionProofError',
    'ProofData',
    'ChainedProof',
    'ProofLinkageError',
    'ProofService',
    'check_proof_linkage',
]
