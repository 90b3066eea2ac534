"""Encoding and hashing helpers for bitcoinkey."""

import hashlib

from ..types.common import Digest

__all__ = [
    "bytes_to_hex",
    "int_to_bytes",
    "bytes_to_int",
    "byte_length",
    "sha256",
    "double_sha256",
]


def bytes_to_hex(data: bytes, prefix: bool = False) -> str:
    """
    Convert bytes to hex string.
    
    Args:
        data: Bytes to encode
        prefix: Add 0x prefix
        
    Returns:
        Hex string
    """
    hex_str = data.hex()
    if prefix:
        hex_str = f"0x{hex_str}"
    return hex_str


def int_to_bytes(value: int, length: int) -> bytes:
    """
    Convert a non-negative integer to fixed-width big-endian bytes.
    
    Args:
        value: Integer value
        length: Number of bytes (output is left-padded with zeros)
        
    Returns:
        Encoded bytes
        
    Raises:
        OverflowError: If value does not fit in length bytes
    """
    return value.to_bytes(length, byteorder="big")


def bytes_to_int(data: bytes) -> int:
    """Decode big-endian unsigned bytes."""
    return int.from_bytes(data, byteorder="big")


def byte_length(value: int) -> int:
    """Natural byte length of a non-negative integer (0 for zero)."""
    return (value.bit_length() + 7) // 8


def sha256(data: bytes) -> Digest:
    """Single SHA256."""
    return Digest(hashlib.sha256(data).digest())


def double_sha256(data: bytes) -> Digest:
    """Perform double SHA256 hash, the Bitcoin transaction digest."""
    return sha256(sha256(data))
