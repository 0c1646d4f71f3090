"""
Hex String Utilities

This module converts between bytes and the 0x-prefixed hex strings used by
beacon/execution node APIs, the CLI and saved proof bundles.
"""

from typing import Union


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert a hex string to bytes.

    Args:
        hex_str: Hex string (with or without '0x' prefix)

    Returns:
        Bytes representation of the hex string

    Raises:
        ValueError: If the string contains non-hex characters

    Examples:
        >>> hex_to_bytes("0x1234")
        b'\x12\x34'
        >>> hex_to_bytes("1234")
        b'\x12\x34'
    """
    if hex_str.startswith(("0x", "0X")):
        hex_str = hex_str[2:]

    # Pad to even length
    if len(hex_str) % 2 == 1:
        hex_str = "0" + hex_str

    return bytes.fromhex(hex_str)


def bytes_to_hex(data: bytes, prefix: bool = True) -> str:
    """
    Convert bytes to a hex string.

    Args:
        data: Bytes to convert
        prefix: Whether to include '0x' prefix

    Returns:
        Hex string representation

    Examples:
        >>> bytes_to_hex(b'\x12\x34')
        "0x1234"
        >>> bytes_to_hex(b'\x12\x34', prefix=False)
        "1234"
    """
    hex_str = bytes(data).hex()
    return f"0x{hex_str}" if prefix else hex_str


def hex_to_bytes32(hex_str: str) -> bytes:
    """
    Convert a hex string that must encode exactly 32 bytes.

    Raises:
        ValueError: If the decoded value is not 32 bytes long
    """
    value = hex_to_bytes(hex_str)
    if len(value) != 32:
        raise ValueError(f"Expected 32 bytes, got {len(value)} bytes: {hex_str}")
    return value


def parse_int(value: Union[str, int]) -> int:
    """
    Parse an integer given in decimal or 0x-prefixed hex.

    Examples:
        >>> parse_int("0x10")  # Returns 16
        >>> parse_int("10")    # Returns 10
    """
    if isinstance(value, int):
        return value
    return int(value, 0)
