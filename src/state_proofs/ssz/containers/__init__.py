"""
SSZ Containers Package

This package provides the beacon block SSZ schemas for the supported forks
and utilities for decoding them:

- Base containers shared across forks (ExecutionPayload, SyncAggregate, ...)
- Deneb and Electra/Fulu beacon block bodies and blocks
- ContainerNode: indexed field access over a decoded container and its tree
"""

from .base import ExecutionPayload, BeaconBlockHeader, Eth1Data, SyncAggregate, Withdrawal
from .deneb import DenebBeaconBlockBody, DenebBeaconBlock, SignedDenebBeaconBlock
from .electra import (
    ExecutionRequests,
    ElectraBeaconBlockBody,
    ElectraBeaconBlock,
    SignedElectraBeaconBlock,
)
from .utils import (
    SIGNED_BLOCK_TYPES,
    ContainerNode,
    get_signed_block_type,
    decode_signed_block,
)

__all__ = [
    # Shared containers
    'ExecutionPayload',
    'BeaconBlockHeader',
    'Eth1Data',
    'SyncAggregate',
    'Withdrawal',

    # Deneb
    'DenebBeaconBlockBody',
    'DenebBeaconBlock',
    'SignedDenebBeaconBlock',

    # Electra / Fulu
    'ExecutionRequests',
    'ElectraBeaconBlockBody',
    'ElectraBeaconBlock',
    'SignedElectraBeaconBlock',

    # Utilities
    'SIGNED_BLOCK_TYPES',
    'ContainerNode',
    'get_signed_block_type',
    'decode_signed_block',
]
