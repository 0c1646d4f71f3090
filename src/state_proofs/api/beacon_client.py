"""
Beacon API Client

This module provides a client for the standard beacon node REST API. It
fetches signed beacon blocks as raw SSZ bytes together with the fork name
the node reports for them.
"""

import re
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from ..config import Settings

logger = logging.getLogger(__name__)

SSZ_CONTENT_TYPE = "application/octet-stream"
CONSENSUS_VERSION_HEADER = "Eth-Consensus-Version"

_NAMED_BLOCK_IDS = ("head", "genesis", "finalized", "justified")
_BLOCK_ROOT_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


class BeaconAPIError(Exception):
    """Exception raised for beacon API related errors."""
    pass


@dataclass(frozen=True)
class BeaconBlockResponse:
    """Raw SSZ block bytes and the fork the node says they belong to."""
    block_id: str
    data: bytes
    consensus_version: Optional[str] = None


def validate_block_id(block_id: str) -> str:
    """
    Validate a beacon block identifier.

    Args:
        block_id: "head", "genesis", "finalized", "justified", a slot number
            or a 0x-prefixed 32-byte block root

    Returns:
        The identifier, normalized to lower case

    Raises:
        ValueError: If the identifier has none of these forms
    """
    block_id = str(block_id).strip()
    if block_id.lower() in _NAMED_BLOCK_IDS or block_id.isdigit() or _BLOCK_ROOT_RE.match(block_id):
        return block_id.lower()
    raise ValueError(
        f"Invalid block id '{block_id}'. Must be one of {', '.join(_NAMED_BLOCK_IDS)}, "
        f"a slot number or a 0x-prefixed block root"
    )


class BeaconAPIClient:
    """
    Client for a beacon node's REST API.

    Provides methods for fetching SSZ-encoded beacon blocks with proper
    error handling.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the beacon API client.

        Args:
            base_url: Base URL of the beacon node. If None, uses BEACON_RPC_URL.
            timeout: Request timeout in seconds. If None, uses REQUEST_TIMEOUT.
            session: Optional requests session to reuse.
        """
        settings = Settings.from_env()
        self.base_url = (base_url or settings.beacon_rpc_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("Beacon node URL is not set. Pass --beacon-url or set BEACON_RPC_URL")

        self.timeout = timeout or settings.request_timeout
        self.session = session or requests.Session()

        logger.info(f"Initialized BeaconAPIClient with base_url: {self.base_url}")

    def get_block_ssz(self, block_id: str = "finalized") -> BeaconBlockResponse:
        """
        Fetch a signed beacon block as SSZ bytes.

        Args:
            block_id: Block identifier ("head", "finalized", slot or root)

        Returns:
            BeaconBlockResponse with the raw bytes and reported fork

        Raises:
            BeaconAPIError: If the request fails or returns no data
        """
        block_id = validate_block_id(block_id)
        url = f"{self.base_url}/eth/v2/beacon/blocks/{block_id}"

        try:
            logger.info(f"Fetching beacon block: {block_id}")
            response = self.session.get(url, headers={"Accept": SSZ_CONTENT_TYPE}, timeout=self.timeout)
            response.raise_for_status()
        except requests.ConnectionError as e:
            raise BeaconAPIError(
                f"Failed to connect to beacon API at {self.base_url}. "
                f"Please check the beacon node is running and the URL is correct. "
                f"Original error: {e}"
            ) from e
        except requests.Timeout as e:
            raise BeaconAPIError(
                f"Timeout fetching block {block_id} from beacon API at {self.base_url}. "
                f"Original error: {e}"
            ) from e
        except requests.RequestException as e:
            raise BeaconAPIError(f"Request for block {block_id} failed: {e}") from e

        content_type = response.headers.get("Content-Type", "")
        if SSZ_CONTENT_TYPE not in content_type:
            raise BeaconAPIError(
                f"Beacon node returned '{content_type or 'no content type'}' for block {block_id}, "
                f"expected SSZ ({SSZ_CONTENT_TYPE})"
            )
        if not response.content:
            raise BeaconAPIError(f"Beacon node returned an empty body for block {block_id}")

        version = response.headers.get(CONSENSUS_VERSION_HEADER)
        logger.info(f"Fetched {len(response.content)} bytes for block {block_id} (fork: {version or 'unknown'})")

        return BeaconBlockResponse(block_id=block_id, data=response.content, consensus_version=version)

    def health_check(self) -> bool:
        """
        Check if the beacon API is accessible.

        Returns:
            True if API is accessible, False otherwise
        """
        try:
            url = f"{self.base_url}/eth/v1/node/health"
            response = self.session.get(url, timeout=10)
            return response.status_code in (200, 206)
        except requests.RequestException as e:
            logger.warning(f"Beacon health check failed: {e}")
            return False
