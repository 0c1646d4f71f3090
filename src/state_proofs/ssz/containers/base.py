"""Base SSZ types and containers shared by every supported fork."""

from remerkleable.basic import uint64, uint256
from remerkleable.bitfields import Bitlist, Bitvector
from remerkleable.byte_arrays import ByteList, ByteVector, Bytes4, Bytes32, Bytes48, Bytes96
from remerkleable.complex import Container, List, Vector

from ..constants import (
    BYTES_PER_LOGS_BLOOM,
    DEPOSIT_CONTRACT_TREE_DEPTH,
    MAX_BYTES_PER_TRANSACTION,
    MAX_EXTRA_DATA_BYTES,
    MAX_TRANSACTIONS_PER_PAYLOAD,
    MAX_WITHDRAWALS_PER_PAYLOAD,
    SYNC_COMMITTEE_SIZE,
)

Bytes20 = ByteVector[20]

# Type aliases
Slot = uint64
Epoch = uint64
CommitteeIndex = uint64
ValidatorIndex = uint64
Gwei = uint64
Root = Bytes32
Hash32 = Bytes32
Version = Bytes4
BLSPubkey = Bytes48
BLSSignature = Bytes96
ExecutionAddress = Bytes20
WithdrawalIndex = uint64
KZGCommitment = ByteVector[48]

Transaction = ByteList[MAX_BYTES_PER_TRANSACTION]


class Checkpoint(Container):
    epoch: Epoch
    root: Root


class Eth1Data(Container):
    deposit_root: Root
    deposit_count: uint64
    block_hash: Hash32


class BeaconBlockHeader(Container):
    slot: Slot
    proposer_index: ValidatorIndex
    parent_root: Root
    state_root: Root
    body_root: Root


class SignedBeaconBlockHeader(Container):
    message: BeaconBlockHeader
    signature: BLSSignature


class ProposerSlashing(Container):
    signed_header_1: SignedBeaconBlockHeader
    signed_header_2: SignedBeaconBlockHeader


class AttestationData(Container):
    slot: Slot
    index: CommitteeIndex
    beacon_block_root: Root
    source: Checkpoint
    target: Checkpoint


class DepositData(Container):
    pubkey: BLSPubkey
    withdrawal_credentials: Bytes32
    amount: Gwei
    signature: BLSSignature


class Deposit(Container):
    proof: Vector[Bytes32, DEPOSIT_CONTRACT_TREE_DEPTH + 1]
    data: DepositData


class VoluntaryExit(Container):
    epoch: Epoch
    validator_index: ValidatorIndex


class SignedVoluntaryExit(Container):
    message: VoluntaryExit
    signature: BLSSignature


class SyncAggregate(Container):
    sync_committee_bits: Bitvector[SYNC_COMMITTEE_SIZE]
    sync_committee_signature: BLSSignature


class Withdrawal(Container):
    index: WithdrawalIndex
    validator_index: ValidatorIndex
    address: ExecutionAddress
    amount: Gwei


class BLSToExecutionChange(Container):
    validator_index: ValidatorIndex
    from_bls_pubkey: BLSPubkey
    to_execution_address: ExecutionAddress


class SignedBLSToExecutionChange(Container):
    message: BLSToExecutionChange
    signature: BLSSignature


class ExecutionPayload(Container):
    """Deneb ExecutionPayload, unchanged through Electra and Fulu."""
    parent_hash: Hash32
    fee_recipient: ExecutionAddress
    state_root: Bytes32
    receipts_root: Bytes32
    logs_bloom: ByteVector[BYTES_PER_LOGS_BLOOM]
    prev_randao: Bytes32
    block_number: uint64
    gas_limit: uint64
    gas_used: uint64
    timestamp: uint64
    extra_data: ByteList[MAX_EXTRA_DATA_BYTES]
    base_fee_per_gas: uint256
    block_hash: Hash32
    transactions: List[Transaction, MAX_TRANSACTIONS_PER_PAYLOAD]
    withdrawals: List[Withdrawal, MAX_WITHDRAWALS_PER_PAYLOAD]
    blob_gas_used: uint64
    excess_blob_gas: uint64


__all__ = [
    "uint64", "uint256",
    "Bitlist", "Bitvector",
    "ByteList", "ByteVector", "Bytes4", "Bytes20", "Bytes32", "Bytes48", "Bytes96",
    "Container", "List", "Vector",
    "Slot", "Epoch", "CommitteeIndex", "ValidatorIndex", "Gwei",
    "Root", "Hash32", "Version", "BLSPubkey", "BLSSignature",
    "ExecutionAddress", "WithdrawalIndex", "KZGCommitment", "Transaction",
    "Checkpoint", "Eth1Data", "BeaconBlockHeader", "SignedBeaconBlockHeader",
    "ProposerSlashing", "AttestationData", "DepositData", "Deposit",
    "VoluntaryExit", "SignedVoluntaryExit", "SyncAggregate", "Withdrawal",
    "BLSToExecutionChange", "SignedBLSToExecutionChange", "ExecutionPayload",
]
