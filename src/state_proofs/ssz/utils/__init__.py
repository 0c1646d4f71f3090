"""
SSZ Utility Functions

This package provides hex string helpers used when moving 32-byte roots
between bytes, JSON and command line arguments.
"""

from .hex_helpers import (
    hex_to_bytes,
    bytes_to_hex,
    hex_to_bytes32,
    parse_int,
)

__all__ = [
    'hex_to_bytes',
    'bytes_to_hex',
    'hex_to_bytes32',
    'parse_int',
]
