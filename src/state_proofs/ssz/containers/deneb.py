"""Deneb beacon block SSZ types."""

from .base import (
    Container, List, Bitlist,
    BLSSignature, Bytes32, KZGCommitment, Root, Slot, ValidatorIndex,
    AttestationData, Deposit, Eth1Data, ExecutionPayload, ProposerSlashing,
    SignedBLSToExecutionChange, SignedVoluntaryExit, SyncAggregate,
)
from ..constants import (
    MAX_ATTESTATIONS,
    MAX_ATTESTER_SLASHINGS,
    MAX_BLOB_COMMITMENTS_PER_BLOCK,
    MAX_BLS_TO_EXECUTION_CHANGES,
    MAX_DEPOSITS,
    MAX_PROPOSER_SLASHINGS,
    MAX_VALIDATORS_PER_COMMITTEE,
    MAX_VOLUNTARY_EXITS,
)


class IndexedAttestation(Container):
    attesting_indices: List[ValidatorIndex, MAX_VALIDATORS_PER_COMMITTEE]
    data: AttestationData
    signature: BLSSignature


class AttesterSlashing(Container):
    attestation_1: IndexedAttestation
    attestation_2: IndexedAttestation


class Attestation(Container):
    aggregation_bits: Bitlist[MAX_VALIDATORS_PER_COMMITTEE]
    data: AttestationData
    signature: BLSSignature


class DenebBeaconBlockBody(Container):
    randao_reveal: BLSSignature
    eth1_data: Eth1Data
    graffiti: Bytes32
    proposer_slashings: List[ProposerSlashing, MAX_PROPOSER_SLASHINGS]
    attester_slashings: List[AttesterSlashing, MAX_ATTESTER_SLASHINGS]
    attestations: List[Attestation, MAX_ATTESTATIONS]
    deposits: List[Deposit, MAX_DEPOSITS]
    voluntary_exits: List[SignedVoluntaryExit, MAX_VOLUNTARY_EXITS]
    sync_aggregate: SyncAggregate
    execution_payload: ExecutionPayload
    bls_to_execution_changes: List[SignedBLSToExecutionChange, MAX_BLS_TO_EXECUTION_CHANGES]
    blob_kzg_commitments: List[KZGCommitment, MAX_BLOB_COMMITMENTS_PER_BLOCK]


class DenebBeaconBlock(Container):
    slot: Slot
    proposer_index: ValidatorIndex
    parent_root: Root
    state_root: Root
    body: DenebBeaconBlockBody


class SignedDenebBeaconBlock(Container):
    message: DenebBeaconBlock
    signature: BLSSignature


__all__ = [
    "IndexedAttestation",
    "AttesterSlashing",
    "Attestation",
    "DenebBeaconBlockBody",
    "DenebBeaconBlock",
    "SignedDenebBeaconBlock",
]
