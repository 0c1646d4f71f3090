"""Electra beacon block SSZ types (also used for Fulu, whose block is unchanged)."""

from .base import (
    Container, List, Bitlist, Bitvector,
    BLSPubkey, BLSSignature, Bytes32, ExecutionAddress, KZGCommitment, Root, Slot,
    ValidatorIndex, uint64,
    AttestationData, Deposit, Eth1Data, ExecutionPayload, ProposerSlashing,
    SignedBLSToExecutionChange, SignedVoluntaryExit, SyncAggregate,
)
from ..constants import (
    MAX_ATTESTATIONS_ELECTRA,
    MAX_ATTESTER_SLASHINGS_ELECTRA,
    MAX_BLOB_COMMITMENTS_PER_BLOCK,
    MAX_BLS_TO_EXECUTION_CHANGES,
    MAX_COMMITTEES_PER_SLOT,
    MAX_CONSOLIDATION_REQUESTS_PER_PAYLOAD,
    MAX_DEPOSIT_REQUESTS_PER_PAYLOAD,
    MAX_DEPOSITS,
    MAX_PROPOSER_SLASHINGS,
    MAX_VALIDATORS_PER_COMMITTEE,
    MAX_VOLUNTARY_EXITS,
    MAX_WITHDRAWAL_REQUESTS_PER_PAYLOAD,
)


class ElectraAttestation(Container):
    aggregation_bits: Bitlist[MAX_VALIDATORS_PER_COMMITTEE * MAX_COMMITTEES_PER_SLOT]
    data: AttestationData
    signature: BLSSignature
    committee_bits: Bitvector[MAX_COMMITTEES_PER_SLOT]


class ElectraIndexedAttestation(Container):
    attesting_indices: List[ValidatorIndex, MAX_VALIDATORS_PER_COMMITTEE * MAX_COMMITTEES_PER_SLOT]
    data: AttestationData
    signature: BLSSignature


class ElectraAttesterSlashing(Container):
    attestation_1: ElectraIndexedAttestation
    attestation_2: ElectraIndexedAttestation


class DepositRequest(Container):
    pubkey: BLSPubkey
    withdrawal_credentials: Bytes32
    amount: uint64
    signature: BLSSignature
    index: uint64


class WithdrawalRequest(Container):
    source_address: ExecutionAddress
    validator_pubkey: BLSPubkey
    amount: uint64


class ConsolidationRequest(Container):
    source_address: ExecutionAddress
    source_pubkey: BLSPubkey
    target_pubkey: BLSPubkey


class ExecutionRequests(Container):
    deposits: List[DepositRequest, MAX_DEPOSIT_REQUESTS_PER_PAYLOAD]
    withdrawals: List[WithdrawalRequest, MAX_WITHDRAWAL_REQUESTS_PER_PAYLOAD]
    consolidations: List[ConsolidationRequest, MAX_CONSOLIDATION_REQUESTS_PER_PAYLOAD]


class ElectraBeaconBlockBody(Container):
    randao_reveal: BLSSignature
    eth1_data: Eth1Data
    graffiti: Bytes32
    proposer_slashings: List[ProposerSlashing, MAX_PROPOSER_SLASHINGS]
    attester_slashings: List[ElectraAttesterSlashing, MAX_ATTESTER_SLASHINGS_ELECTRA]
    attestations: List[ElectraAttestation, MAX_ATTESTATIONS_ELECTRA]
    deposits: List[Deposit, MAX_DEPOSITS]
    voluntary_exits: List[SignedVoluntaryExit, MAX_VOLUNTARY_EXITS]
    sync_aggregate: SyncAggregate
    execution_payload: ExecutionPayload
    bls_to_execution_changes: List[SignedBLSToExecutionChange, MAX_BLS_TO_EXECUTION_CHANGES]
    blob_kzg_commitments: List[KZGCommitment, MAX_BLOB_COMMITMENTS_PER_BLOCK]
    execution_requests: ExecutionRequests


class ElectraBeaconBlock(Container):
    slot: Slot
    proposer_index: ValidatorIndex
    parent_root: Root
    state_root: Root
    body: ElectraBeaconBlockBody


class SignedElectraBeaconBlock(Container):
    message: ElectraBeaconBlock
    signature: BLSSignature


__all__ = [
    "ElectraAttestation",
    "ElectraIndexedAttestation",
    "ElectraAttesterSlashing",
    "DepositRequest",
    "WithdrawalRequest",
    "ConsolidationRequest",
    "ExecutionRequests",
    "ElectraBeaconBlockBody",
    "ElectraBeaconBlock",
    "SignedElectraBeaconBlock",
]
