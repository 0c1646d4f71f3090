"""
Synthetic beacon blocks and execution node responses shared by the tests.
"""

from hexbytes import HexBytes

from state_proofs.ssz.containers import (
    DenebBeaconBlock,
    DenebBeaconBlockBody,
    ElectraBeaconBlock,
    ElectraBeaconBlockBody,
    ExecutionPayload,
    SignedDenebBeaconBlock,
    SignedElectraBeaconBlock,
)

STATE_ROOT = bytes.fromhex("0b8d1f6d8c0a5e2e8b7e3a6f9c4d2b1a0f9e8d7c6b5a4938271605f4e3d2c1b0")
BLOCK_HASH = bytes.fromhex("9f1c" + "ab" * 30)
BLOCK_NUMBER = 7105432
TIMESTAMP = 1735689600
SLOT = 6543210
PROPOSER_INDEX = 42


def make_payload(state_root: bytes = STATE_ROOT, block_number: int = BLOCK_NUMBER,
                 timestamp: int = TIMESTAMP) -> ExecutionPayload:
    return ExecutionPayload(
        parent_hash=b"\x11" * 32,
        fee_recipient=b"\x22" * 20,
        state_root=state_root,
        receipts_root=b"\x33" * 32,
        prev_randao=b"\x44" * 32,
        block_number=block_number,
        gas_limit=30_000_000,
        gas_used=12_345_678,
        timestamp=timestamp,
        base_fee_per_gas=7,
        block_hash=BLOCK_HASH,
        blob_gas_used=131072,
    )


def make_deneb_block(**payload_fields) -> DenebBeaconBlock:
    return DenebBeaconBlock(
        slot=SLOT,
        proposer_index=PROPOSER_INDEX,
        parent_root=b"\x55" * 32,
        state_root=b"\x66" * 32,
        body=DenebBeaconBlockBody(
            graffiti=b"\x77" * 32,
            execution_payload=make_payload(**payload_fields),
        ),
    )


def make_electra_block(**payload_fields) -> ElectraBeaconBlock:
    return ElectraBeaconBlock(
        slot=SLOT,
        proposer_index=PROPOSER_INDEX,
        parent_root=b"\x55" * 32,
        state_root=b"\x66" * 32,
        body=ElectraBeaconBlockBody(
            graffiti=b"\x77" * 32,
            execution_payload=make_payload(**payload_fields),
        ),
    )


def signed_block_bytes(fork: str = "deneb", **payload_fields) -> bytes:
    if fork == "deneb":
        signed = SignedDenebBeaconBlock(message=make_deneb_block(**payload_fields))
    else:
        signed = SignedElectraBeaconBlock(message=make_electra_block(**payload_fields))
    return signed.encode_bytes()


def make_execution_block(**overrides) -> dict:
    """An eth_getBlockByNumber result, as web3 returns it, for a Prague block."""
    block = {
        "parentHash": HexBytes("0x" + "11" * 32),
        "sha3Uncles": HexBytes("0x1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347"),
        "miner": "0x" + "22" * 20,
        "stateRoot": HexBytes(STATE_ROOT),
        "transactionsRoot": HexBytes("0x" + "33" * 32),
        "receiptsRoot": HexBytes("0x" + "44" * 32),
        "logsBloom": HexBytes(b"\x00" * 256),
        "difficulty": 0,
        "number": BLOCK_NUMBER,
        "gasLimit": 30_000_000,
        "gasUsed": 12_345_678,
        "timestamp": TIMESTAMP,
        "extraData": HexBytes("0x"),
        "mixHash": HexBytes("0x" + "55" * 32),
        "nonce": HexBytes("0x0000000000000000"),
        "baseFeePerGas": 7,
        "withdrawalsRoot": HexBytes("0x" + "66" * 32),
        "blobGasUsed": 131072,
        "excessBlobGas": 0,
        "parentBeaconBlockRoot": HexBytes("0x" + "77" * 32),
        "requestsHash": HexBytes("0x" + "88" * 32),
    }
    block.update(overrides)
    return block
