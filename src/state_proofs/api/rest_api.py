"""
REST API for State Proofs

This module provides a FastAPI-based REST API for generating the chained
beacon/execution proofs with full OpenAPI documentation.
"""

import logging
import traceback

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..ssz import MerkleProofError
from .beacon_client import BeaconAPIError
from .execution_client import ExecutionProofError
from .proof_service import ProofLinkageError, ProofService
from ..models.api_models import (
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

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="State Proofs API",
    description="""
    Generate chained proofs binding contract storage to a beacon block root.

    ## Proof Chain
    - **Beacon proof**: SSZ merkle proof that the execution state root is a
      leaf of the beacon block root (generalized index 6434)
    - **Storage proof**: eth_getProof account and storage proofs plus the
      RLP-encoded header of the same execution block
    - **Chained proof**: both, checked to share block number and state root

    ## Proof Format
    Sibling hashes are 0x-prefixed 32-byte hex. `proof` lists them
    root-to-leaf, `branch` leaf-to-root.
    """,
    version=__version__,
    license_info={"name": "MIT", "url": "https://opensource.org/licenses/MIT"},
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global proof service instance
proof_service = None


def get_proof_service() -> ProofService:
    """Dependency to get the proof service instance."""
    global proof_service
    if proof_service is None:
        proof_service = ProofService()
    return proof_service


def _error_response(status_code: int, exc: Exception, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=str(exc),
            code=code,
            details={"error_type": type(exc).__name__},
        ).model_dump(),
    )


@app.exception_handler(MerkleProofError)
async def merkle_proof_exception_handler(request, exc: MerkleProofError):
    """Handle proof generation errors (layout, traversal, mismatch)."""
    logger.error(f"Proof generation error: {exc}")
    return _error_response(400, exc, "PROOF_GENERATION_ERROR")


@app.exception_handler(ValueError)
async def value_error_handler(request, exc: ValueError):
    """Handle invalid input detected past request validation."""
    logger.error(f"Invalid input: {exc}")
    return _error_response(400, exc, "INVALID_INPUT")


@app.exception_handler(BeaconAPIError)
async def beacon_api_exception_handler(request, exc: BeaconAPIError):
    """Handle beacon API errors."""
    logger.error(f"Beacon API error: {exc}")
    return _error_response(502, exc, "BEACON_API_ERROR")


@app.exception_handler(ExecutionProofError)
async def execution_exception_handler(request, exc: ExecutionProofError):
    """Handle execution node errors."""
    logger.error(f"Execution node error: {exc}")
    return _error_response(502, exc, "EXECUTION_API_ERROR")


@app.exception_handler(ProofLinkageError)
async def linkage_exception_handler(request, exc: ProofLinkageError):
    """Handle beacon and storage proofs anchored to different blocks."""
    logger.error(f"Proof linkage error: {exc}")
    return _error_response(409, exc, "PROOF_LINKAGE_ERROR")


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unexpected error: {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code="INTERNAL_ERROR",
            details={"error_type": type(exc).__name__},
        ).model_dump(),
    )


@app.get("/", response_model=dict)
async def root():
    """API root endpoint with basic information."""
    return {
        "name": "State Proofs API",
        "version": __version__,
        "description": "Chained beacon and execution storage proofs",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health", response_model=HealthResponse)
def health_check(service: ProofService = Depends(get_proof_service)):
    """
    Health check endpoint.

    Checks the status of the API and node connectivity.
    """
    status = service.health()
    healthy = status["beacon_api"] and status["execution_api"]
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        beacon_api=status["beacon_api"],
        execution_api=status["execution_api"],
        version=__version__,
    )


@app.post("/proofs/beacon", response_model=BeaconProofBundle)
def generate_beacon_proof(
    request: BeaconProofRequest, service: ProofService = Depends(get_proof_service)
):
    """
    Prove the execution state root of a beacon block.

    The block is fetched as SSZ, decoded under the requested fork and the
    state root is proven at generalized index 6434. The block number and
    timestamp from the same execution payload are returned alongside.
    """
    result = service.get_beacon_proof(block_id=request.block_id, fork=request.fork)
    return BeaconProofBundle.from_result(result)


@app.post("/proofs/storage", response_model=StorageProofResponse)
def generate_storage_proof(
    request: StorageProofRequest, service: ProofService = Depends(get_proof_service)
):
    """
    Collect the storage proof for a contract slot.

    Returns the eth_getProof result and the RLP-encoded header of the block
    the proof was taken at (latest if no block number is given).
    """
    data = service.get_storage_proof(request.address, request.slot, request.block_number)
    return StorageProofResponse(**data.to_dict())


@app.post("/proofs/chained", response_model=ChainedProofResponse)
def generate_chained_proof(
    request: ChainedProofRequest, service: ProofService = Depends(get_proof_service)
):
    """
    Generate a beacon proof and a storage proof for the same execution block.

    Responds 409 if the two proofs do not share block number and state root.
    """
    chained = service.get_chained_proof(
        request.address, request.slot, block_id=request.block_id, fork=request.fork
    )
    return ChainedProofResponse(
        beacon=BeaconProofBundle.from_result(chained.beacon),
        execution=StorageProofResponse(**chained.execution.to_dict()),
    )


@app.post("/proofs/verify", response_model=VerifyResponse)
def verify_beacon_proof(bundle: BeaconProofBundle):
    """Re-verify a beacon proof bundle by reconstructing its root."""
    return VerifyResponse(valid=bundle.verify(), root=bundle.root, index=bundle.index)


def run_server(host: str = "127.0.0.1", port: int = 8000, dev: bool = False):
    """
    Run the API server.

    Args:
        host: Host to bind to
        port: Port to bind to
        dev: Enable development mode with auto-reload
    """
    logger.info(f"Starting State Proofs API server on {host}:{port}")
    uvicorn.run(
        "state_proofs.api.rest_api:app",
        host=host,
        port=port,
        reload=dev,
        log_level="info",
    )


if __name__ == "__main__":
    run_server(dev=True)
