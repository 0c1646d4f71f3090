"""
SSZ (Simple Serialize) Support

Everything needed to prove a field of a decoded beacon block:

Modules:
- constants: Mainnet preset limits
- containers: Beacon block schemas and the ContainerNode field-access wrapper
- merkle: Generalized index composition, proof extraction and verification
- utils: Hex helpers
"""

from .constants import *

# Merkle operations
from .merkle import *

# Container definitions
from .containers import *

# Utilities
from .utils import *

__all__ = [
    # Constants
    'HASH_SIZE',
    'SYNC_COMMITTEE_SIZE',
    'MAX_BLOB_COMMITMENTS_PER_BLOCK',

    # Generalized indices
    'MerkleProofError',
    'InvalidLayout',
    'cover_depth',
    'to_gindex',
    'compose_gindex',
    'concat_gindices',
    'gindex_depth',
    'gindex_bits',

    # Proofs
    'TraversalError',
    'ProofMismatch',
    'TreeNode',
    'MerkleProof',
    'extract_proof',
    'compute_root_from_proof',
    'verify_merkle_proof',

    # Trees
    'build_tree',
    'merkle_root_from_chunks',
    'leaf_gindex',

    # Containers
    'ExecutionPayload',
    'DenebBeaconBlock',
    'SignedDenebBeaconBlock',
    'ElectraBeaconBlock',
    'SignedElectraBeaconBlock',
    'ContainerNode',
    'decode_signed_block',
    'get_signed_block_type',

    # Utility functions
    'hex_to_bytes',
    'bytes_to_hex',
    'hex_to_bytes32',
    'parse_int',
]
