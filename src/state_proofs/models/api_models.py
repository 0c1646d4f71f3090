"""
API Models

This module defines Pydantic models for API requests and responses. The
proof bundle models double as the interchange format for saved proofs:
32-byte values are 0x-prefixed hex, sibling lists are root-to-leaf.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from ..api.beacon_client import validate_block_id
from ..main import BeaconProofResult
from ..ssz import hex_to_bytes32, parse_int, verify_merkle_proof


def _check_bytes32(value: str) -> str:
    if not isinstance(value, str) or not value.startswith("0x") or len(value) != 66:
        raise ValueError("Must be a 32-byte hex string starting with '0x'")
    hex_to_bytes32(value)
    return value.lower()


def _check_address(value: str) -> str:
    if not value.startswith("0x") or len(value) != 42:
        raise ValueError("address must be a 20-byte hex string starting with '0x'")
    return value


def _check_slot(value: Union[int, str]) -> int:
    slot = parse_int(value)
    if slot < 0 or slot >= 2**256:
        raise ValueError("slot must be a uint256")
    return slot


class ErrorResponse(BaseModel):
    """
    Response model for API errors.

    Attributes:
        error: Error message
        code: Error code (string identifier)
        details: Additional error details
    """
    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")
    details: Optional[dict] = Field(default=None, description="Additional error details")


class HealthResponse(BaseModel):
    """
    Response model for health check endpoint.

    Attributes:
        status: Service status
        beacon_api: Beacon API connectivity status
        execution_api: Execution API connectivity status
        version: Service version
        timestamp: Response timestamp
    """
    status: str = Field(..., description="Service status")
    beacon_api: bool = Field(..., description="Beacon API connectivity")
    execution_api: bool = Field(..., description="Execution API connectivity")
    version: str = Field(default="0.1.0", description="Service version")
    timestamp: Optional[str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Response timestamp",
    )


class BeaconProofRequest(BaseModel):
    """
    Request model for beacon proof generation.

    Attributes:
        block_id: Beacon block identifier ("head", "finalized", slot or root)
        fork: Fork layout to decode the block with (falls back to BEACON_FORK)
    """
    block_id: str = Field(default="finalized", description="Beacon block identifier")
    fork: Optional[str] = Field(default=None, description="Fork layout name")

    @field_validator("block_id")
    @classmethod
    def validate_block_id(cls, v):
        return validate_block_id(v)


class StorageProofRequest(BaseModel):
    """
    Request model for execution storage proof collection.

    Attributes:
        address: Contract address
        slot: Storage slot, decimal or 0x hex
        block_number: Execution block number (latest if omitted)
    """
    address: str = Field(..., description="Contract address (0x-prefixed)")
    slot: Union[int, str] = Field(..., description="Storage slot, decimal or 0x hex")
    block_number: Optional[int] = Field(default=None, ge=0, description="Execution block number")

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        return _check_address(v)

    @field_validator("slot")
    @classmethod
    def validate_slot(cls, v):
        return _check_slot(v)


class ChainedProofRequest(BaseModel):
    """Request model for a beacon proof chained to a storage proof."""
    address: str = Field(..., description="Contract address (0x-prefixed)")
    slot: Union[int, str] = Field(..., description="Storage slot, decimal or 0x hex")
    block_id: str = Field(default="finalized", description="Beacon block identifier")
    fork: Optional[str] = Field(default=None, description="Fork layout name")

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        return _check_address(v)

    @field_validator("slot")
    @classmethod
    def validate_slot(cls, v):
        return _check_slot(v)

    @field_validator("block_id")
    @classmethod
    def validate_block_id(cls, v):
        return validate_block_id(v)


class BeaconProofBundle(BaseModel):
    """
    Beacon proof bundle: execution state root proven under a beacon block root.

    Attributes:
        root: Beacon block root
        leaf: Execution state root
        index: Generalized index of the leaf
        proof: Sibling hashes, root-to-leaf
        branch: Same siblings, leaf-to-root
        block_number: Execution block number
        timestamp: Execution block timestamp
        slot: Beacon slot
        fork: Fork layout used
    """
    root: str = Field(..., description="Beacon block root")
    leaf: str = Field(..., description="Execution state root")
    index: int = Field(..., ge=1, description="Generalized index of the leaf")
    proof: List[str] = Field(..., description="Sibling hashes, root-to-leaf")
    branch: Optional[List[str]] = Field(default=None, description="Sibling hashes, leaf-to-root")
    block_number: int = Field(..., ge=0, description="Execution block number")
    timestamp: int = Field(..., ge=0, description="Execution block timestamp")
    slot: Optional[int] = Field(default=None, description="Beacon slot")
    fork: Optional[str] = Field(default=None, description="Fork layout used")

    @field_validator("root", "leaf")
    @classmethod
    def validate_hash(cls, v):
        return _check_bytes32(v)

    @field_validator("proof", "branch")
    @classmethod
    def validate_siblings(cls, v):
        if v is None:
            return v
        return [_check_bytes32(step) for step in v]

    @model_validator(mode="after")
    def check_branch_matches_proof(self):
        if self.branch is not None and self.branch != list(reversed(self.proof)):
            raise ValueError("branch must list the proof siblings in reverse order")
        return self

    @classmethod
    def from_result(cls, result: BeaconProofResult) -> "BeaconProofBundle":
        return cls(**result.to_dict())

    def verify(self) -> bool:
        return verify_merkle_proof(
            hex_to_bytes32(self.root),
            hex_to_bytes32(self.leaf),
            self.index,
            [hex_to_bytes32(step) for step in self.proof],
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "root": "0x5a3b4c0b8c9c1e3ff41e6dd1b1b7e2c93b6a5b1d3c4e5f60718293a4b5c6d7e8",
                "leaf": "0x0b8d1f6d8c0a5e2e8b7e3a6f9c4d2b1a0f9e8d7c6b5a4938271605f4e3d2c1b0",
                "index": 6434,
                "proof": ["0x1234...", "0x5678..."],
                "block_number": 7105432,
                "timestamp": 1735689600,
                "slot": 6543210,
                "fork": "electra",
            }
        }
    }


class StorageProofResponse(BaseModel):
    """Execution storage proof bundle."""
    block_hash: str = Field(..., description="Execution block hash")
    block_number: int = Field(..., description="Execution block number")
    header_rlp: str = Field(..., description="RLP-encoded block header")
    state_root: str = Field(..., description="Execution state root")
    proof: Dict[str, Any] = Field(default_factory=dict, description="eth_getProof result")


class ChainedProofResponse(BaseModel):
    """Beacon proof and storage proof anchored to the same execution block."""
    beacon: BeaconProofBundle
    execution: StorageProofResponse


class VerifyResponse(BaseModel):
    """Result of re-verifying a beacon proof bundle."""
    valid: bool = Field(..., description="Whether the proof reconstructs the root")
    root: str = Field(..., description="Root the proof was checked against")
    index: int = Field(..., description="Generalized index of the leaf")
