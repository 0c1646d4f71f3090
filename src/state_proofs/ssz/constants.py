"""
SSZ Constants and Limits

This module contains the mainnet preset limits needed to decode beacon
blocks. Public testnets (Sepolia, Holesky, Hoodi) use the same preset.

References:
- Mainnet preset: https://github.com/ethereum/consensus-specs/tree/dev/presets/mainnet
"""

# ====================
# Phase0 Operation Limits
# ====================

MAX_PROPOSER_SLASHINGS = 16
MAX_ATTESTER_SLASHINGS = 2
MAX_ATTESTATIONS = 128
MAX_DEPOSITS = 16
MAX_VOLUNTARY_EXITS = 16

MAX_VALIDATORS_PER_COMMITTEE = 2048
MAX_COMMITTEES_PER_SLOT = 64

# Deposit proofs carry one extra node for the length mix-in
DEPOSIT_CONTRACT_TREE_DEPTH = 32

# ====================
# Altair
# ====================

SYNC_COMMITTEE_SIZE = 512

# ====================
# Execution Payload (Bellatrix - Deneb)
# ====================

BYTES_PER_LOGS_BLOOM = 256
MAX_EXTRA_DATA_BYTES = 32
MAX_BYTES_PER_TRANSACTION = 2**30
MAX_TRANSACTIONS_PER_PAYLOAD = 2**20
MAX_WITHDRAWALS_PER_PAYLOAD = 16
MAX_BLS_TO_EXECUTION_CHANGES = 16
MAX_BLOB_COMMITMENTS_PER_BLOCK = 4096

# ====================
# Electra
# ====================

MAX_ATTESTER_SLASHINGS_ELECTRA = 1
MAX_ATTESTATIONS_ELECTRA = 8
MAX_DEPOSIT_REQUESTS_PER_PAYLOAD = 8192
MAX_WITHDRAWAL_REQUESTS_PER_PAYLOAD = 16
MAX_CONSOLIDATION_REQUESTS_PER_PAYLOAD = 2

# ====================
# Cryptographic Constants
# ====================

# Standard hash output size (32 bytes for SHA256)
HASH_SIZE = 32
