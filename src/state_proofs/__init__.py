"""
State Proofs

Chained proofs binding a contract storage value to a beacon block root:
an SSZ merkle proof of the execution state root under the beacon block
root, and the execution layer's storage proof under that state root.
"""

__version__ = "0.1.0"

from .config import ContainerLayout, FORK_LAYOUTS, get_layout
from .main import BeaconProofResult, build_beacon_proof, generate_beacon_proof, log_beacon_proof
from .ssz import verify_merkle_proof

__all__ = [
    "__version__",
    "ContainerLayout",
    "FORK_LAYOUTS",
    "get_layout",
    "BeaconProofResult",
    "build_beacon_proof",
    "generate_beacon_proof",
    "log_beacon_proof",
    "verify_merkle_proof",
]
