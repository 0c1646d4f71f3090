"""
API Models Package

This package contains request and response models for the proof API.
It includes Pydantic models for validation and serialization of:

- Proof requests (block id, fork, contract address, storage slot)
- Proof bundles (root, leaf, generalized index, sibling hashes)
- Error responses and status models

Usage:
    from state_proofs.models import BeaconProofBundle

    bundle = BeaconProofBundle.model_validate_json(saved_json)
    assert bundle.verify()
"""

from .api_models import (
    BeaconProofBundle,
    BeaconProofRequest,
    ChainedProofRequest,
    ChainedProofResponse,
    ErrorResponse,
    HealthResponse,
    StorageProofRequest,
    StorageProofResponse,
    VerifyResponse,
)

__all__ = [
    "BeaconProofBundle",
    "BeaconProofRequest",
    "ChainedProofRequest",
    "ChainedProofResponse",
    "ErrorResponse",
    "HealthResponse",
    "StorageProofRequest",
    "StorageProofResponse",
    "VerifyResponse",
]
