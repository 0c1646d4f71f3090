"""
Configuration

Fork container layouts, given as data, and environment-driven settings for
the beacon and execution node endpoints.

The fork is never guessed: it must be supplied by the caller (CLI option,
BEACON_FORK environment variable or API request) and is validated against
the decoded block before any proof is built.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from dotenv import load_dotenv

from .ssz.merkle.gindex import InvalidLayout, compose_gindex

# Load environment variables
load_dotenv()

# Field positions along the proven path
BEACON_BLOCK_BODY_POSITION = 4
EXECUTION_PAYLOAD_POSITION = 9
EXECUTION_STATE_ROOT_POSITION = 2

# Metadata fields read from the execution payload
EXECUTION_BLOCK_NUMBER_POSITION = 6
EXECUTION_TIMESTAMP_POSITION = 9

DEFAULT_REQUEST_TIMEOUT = 30


@dataclass(frozen=True)
class ContainerLayout:
    """
    Field counts of the containers crossed by the execution state root path.

    Attributes:
        fork: Fork name
        beacon_block_fields: Field count of BeaconBlock
        beacon_block_body_fields: Field count of BeaconBlockBody
        execution_payload_fields: Field count of ExecutionPayload
    """
    fork: str
    beacon_block_fields: int
    beacon_block_body_fields: int
    execution_payload_fields: int
    body_position: int = BEACON_BLOCK_BODY_POSITION
    execution_payload_position: int = EXECUTION_PAYLOAD_POSITION
    state_root_position: int = EXECUTION_STATE_ROOT_POSITION
    block_number_position: int = EXECUTION_BLOCK_NUMBER_POSITION
    timestamp_position: int = EXECUTION_TIMESTAMP_POSITION

    def state_root_path(self) -> List[Tuple[int, int]]:
        """(field_position, container_field_count) pairs, outermost first."""
        return [
            (self.body_position, self.beacon_block_fields),
            (self.execution_payload_position, self.beacon_block_body_fields),
            (self.state_root_position, self.execution_payload_fields),
        ]

    def state_root_gindex(self) -> int:
        return compose_gindex(self.state_root_path())

    def validate_field_counts(self, block_fields: int, body_fields: int, payload_fields: int) -> None:
        """
        Check the layout against the field counts of decoded containers.

        Raises:
            InvalidLayout: If any count differs
        """
        expected = (self.beacon_block_fields, self.beacon_block_body_fields, self.execution_payload_fields)
        actual = (block_fields, body_fields, payload_fields)
        if expected != actual:
            raise InvalidLayout(
                f"Layout '{self.fork}' expects (BeaconBlock, BeaconBlockBody, ExecutionPayload) "
                f"field counts {expected}, decoded block has {actual}"
            )


FORK_LAYOUTS: Dict[str, ContainerLayout] = {
    "deneb": ContainerLayout("deneb", 5, 12, 17),
    "electra": ContainerLayout("electra", 5, 13, 17),
    "fulu": ContainerLayout("fulu", 5, 13, 17),
}


def get_layout(fork: Optional[str]) -> ContainerLayout:
    """
    Resolve a fork name to its container layout.

    Args:
        fork: Fork name (case-insensitive)

    Returns:
        ContainerLayout for the fork

    Raises:
        InvalidLayout: If no fork is given or the fork is unknown
    """
    if not fork:
        raise InvalidLayout(
            "No fork configured. Pass --fork or set BEACON_FORK "
            f"(one of: {', '.join(sorted(FORK_LAYOUTS))})"
        )
    try:
        return FORK_LAYOUTS[fork.lower()]
    except KeyError:
        raise InvalidLayout(
            f"Unknown fork '{fork}'. Supported forks: {', '.join(sorted(FORK_LAYOUTS))}"
        )


@dataclass
class Settings:
    """Endpoint settings read from the environment."""
    beacon_rpc_url: Optional[str] = None
    execution_rpc_url: Optional[str] = None
    fork: Optional[str] = None
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_env(cls) -> "Settings":
        timeout = os.getenv("REQUEST_TIMEOUT")
        try:
            request_timeout = int(timeout) if timeout else DEFAULT_REQUEST_TIMEOUT
        except ValueError:
            raise ValueError(f"REQUEST_TIMEOUT must be an integer number of seconds, got '{timeout}'")

        return cls(
            beacon_rpc_url=os.getenv("BEACON_RPC_URL") or None,
            execution_rpc_url=os.getenv("EXECUTION_RPC_URL") or None,
            fork=os.getenv("BEACON_FORK") or None,
            request_timeout=request_timeout,
        )
