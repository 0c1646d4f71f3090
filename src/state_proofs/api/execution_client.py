"""
Execution Layer Client

This module collects everything needed to verify a Merkle-Patricia-Trie
storage proof for one contract storage slot: the eth_getProof account and
storage proofs, and the RLP-encoded header of the exact block the proof was
taken at. `eth_getProof` and `eth_getBlockByNumber` each give part of the
data, but neither returns the full RLP-encoded header.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

import rlp
from hexbytes import HexBytes
from web3 import Web3

from ..config import Settings

logger = logging.getLogger(__name__)

# Header fields present since genesis, in RLP order
BASE_HEADER_FIELDS = [
    "parentHash",
    "sha3Uncles",
    "miner",
    "stateRoot",
    "transactionsRoot",
    "receiptsRoot",
    "logsBloom",
    "difficulty",
    "number",
    "gasLimit",
    "gasUsed",
    "timestamp",
    "extraData",
    "mixHash",
    "nonce",
]

# Fields appended by later forks, London through Prague
OPTIONAL_HEADER_FIELDS = [
    "baseFeePerGas",
    "withdrawalsRoot",
    "blobGasUsed",
    "excessBlobGas",
    "parentBeaconBlockRoot",
    "requestsHash",
]

INTEGER_HEADER_FIELDS = {
    "difficulty", "number", "gasLimit", "gasUsed", "timestamp",
    "baseFeePerGas", "blobGasUsed", "excessBlobGas",
}


class ExecutionProofError(Exception):
    """Exception raised when execution layer proof data cannot be collected."""
    pass


@dataclass(frozen=True)
class ProofData:
    """
    Execution layer proof bundle for a storage slot.

    Attributes:
        block_hash: Hash of the block the proof was taken at
        block_number: Number of that block
        header_rlp: RLP-encoded block header (keccak256 of it is block_hash)
        state_root: State root from the header
        account_proof: eth_getProof result, hex-encoded for JSON
    """
    block_hash: bytes
    block_number: int
    header_rlp: bytes
    state_root: bytes
    account_proof: Dict[str, Any] = field(default_factory=dict)

    @property
    def storage_value(self) -> Optional[str]:
        storage = self.account_proof.get("storageProof") or []
        return storage[0].get("value") if storage else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_hash": f"0x{self.block_hash.hex()}",
            "block_number": self.block_number,
            "header_rlp": f"0x{self.header_rlp.hex()}",
            "state_root": f"0x{self.state_root.hex()}",
            "proof": self.account_proof,
        }


def to_json_value(value: Any) -> Any:
    """Recursively convert web3 results (HexBytes, AttributeDict) to JSON values."""
    if isinstance(value, (bytes, bytearray)):
        return f"0x{bytes(value).hex()}"
    if isinstance(value, Mapping):
        return {key: to_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    return value


def _header_value(name: str, value: Any) -> Union[int, bytes]:
    if name in INTEGER_HEADER_FIELDS:
        return int(value)
    return bytes(HexBytes(value))


def encode_header(block: Mapping[str, Any]) -> bytes:
    """
    RLP-encode an execution block header from an eth_getBlockByNumber result.

    Fork-dependent trailing fields are included when present; they must be
    contiguous, since a header cannot skip a field introduced earlier.

    Args:
        block: Block as returned by web3 (or any mapping with the same keys)

    Returns:
        RLP-encoded header bytes

    Raises:
        ExecutionProofError: If a required field is missing or optional
            fields are not contiguous
    """
    items: List[Union[int, bytes]] = []
    for name in BASE_HEADER_FIELDS:
        if block.get(name) is None:
            raise ExecutionProofError(f"Block is missing header field '{name}'")
        items.append(_header_value(name, block[name]))

    present = [name for name in OPTIONAL_HEADER_FIELDS if block.get(name) is not None]
    expected = OPTIONAL_HEADER_FIELDS[:len(present)]
    if present != expected:
        raise ExecutionProofError(
            f"Header fields {present} are not a contiguous prefix of {OPTIONAL_HEADER_FIELDS}"
        )
    items.extend(_header_value(name, block[name]) for name in present)

    return rlp.encode(items)


class ExecutionClient:
    """
    Client for an execution node's JSON-RPC API.

    Wraps web3 to collect MPT storage proofs for a contract slot.
    """

    def __init__(self, rpc_url: Optional[str] = None, w3: Optional[Web3] = None,
                 timeout: Optional[int] = None):
        """
        Initialize the execution client.

        Args:
            rpc_url: JSON-RPC URL. If None, uses EXECUTION_RPC_URL.
            w3: Preconfigured Web3 instance (takes precedence over rpc_url).
            timeout: Request timeout in seconds. If None, uses REQUEST_TIMEOUT.
        """
        if w3 is not None:
            self.w3 = w3
            self.rpc_url = rpc_url
        else:
            settings = Settings.from_env()
            self.rpc_url = rpc_url or settings.execution_rpc_url
            if not self.rpc_url:
                raise ValueError("Execution node URL is not set. Pass --execution-url or set EXECUTION_RPC_URL")
            self.w3 = Web3(Web3.HTTPProvider(
                self.rpc_url,
                request_kwargs={"timeout": timeout or settings.request_timeout},
            ))
            logger.info(f"Initialized ExecutionClient with rpc_url: {self.rpc_url}")

    def get_storage_proof(self, address: str, slot: int,
                          block_number: Optional[int] = None) -> ProofData:
        """
        Collect the storage proof and block header for a contract slot.

        Args:
            address: Contract address (0x-prefixed hex)
            slot: Storage slot
            block_number: Block to prove at. If None, uses the latest block.

        Returns:
            ProofData for the slot at that block

        Raises:
            ValueError: If the address or slot is invalid
            ExecutionProofError: If there is no code at the address, the RPC
                calls fail, or the encoded header does not hash to the block hash
        """
        if not Web3.is_address(address):
            raise ValueError(f"Invalid contract address: {address}")
        if slot < 0 or slot >= 2**256:
            raise ValueError(f"Storage slot out of range: {slot}")

        contract = Web3.to_checksum_address(address)
        block_identifier = block_number if block_number is not None else "latest"

        try:
            # Confirm that there's actually contract code at the provided address
            code = self.w3.eth.get_code(contract, block_identifier=block_identifier)
            if len(code) == 0:
                raise ExecutionProofError(f"No code at given address {contract} (block {block_identifier})")

            block = self.w3.eth.get_block(block_identifier)
            number = int(block["number"])
            logger.info(f"Fetching storage proof for {contract} slot {hex(slot)} at block {number}")
            result = self.w3.eth.get_proof(contract, [slot], block_identifier=number)
        except ExecutionProofError:
            raise
        except Exception as e:
            raise ExecutionProofError(f"Execution RPC request failed: {e}") from e

        header_rlp = encode_header(block)
        block_hash = bytes(HexBytes(block["hash"]))
        computed_hash = bytes(Web3.keccak(header_rlp))
        if computed_hash != block_hash:
            raise ExecutionProofError(
                f"Encoded header hashes to 0x{computed_hash.hex()}, but block {number} "
                f"has hash 0x{block_hash.hex()}"
            )

        return ProofData(
            block_hash=block_hash,
            block_number=number,
            header_rlp=header_rlp,
            state_root=bytes(HexBytes(block["stateRoot"])),
            account_proof=to_json_value(result),
        )

    def health_check(self) -> bool:
        """
        Check if the execution node answers JSON-RPC requests.

        Returns:
            True if the node is reachable, False otherwise
        """
        try:
            return bool(self.w3.is_connected())
        except Exception as e:
            logger.warning(f"Execution health check failed: {e}")
            return False


def log_proof_data(data: ProofData) -> None:
    """Log every field of an execution proof bundle."""
    logger.info(f"Block number: {data.block_number}")
    logger.info(f"Block hash: 0x{data.block_hash.hex()}")
    logger.info(f"State root: 0x{data.state_root.hex()}")
    logger.info(f"Header RLP: {data.header_rlp.hex()}")
    logger.info(f"Proof:\n{json.dumps(data.account_proof, indent=2)}")
