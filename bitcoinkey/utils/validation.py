"""Validation utilities for bitcoinkey."""

from typing import Any, Union

from ..constants import (
    COMPRESSED_PREFIXES,
    COMPRESSED_PUBKEY_SIZE,
    DIGEST_SIZE,
    SECP256K1_N,
    UNCOMPRESSED_PREFIXES,
    UNCOMPRESSED_PUBKEY_SIZE,
)
from ..exceptions import InvalidInputError, InvalidPointError
from ..types.common import Digest, PublicKeyBytes

__all__ = [
    "ensure_bytes",
    "validate_digest",
    "is_valid_scalar",
    "is_valid_public_key",
    "validate_public_key",
]

BytesLike = Union[bytes, bytearray, memoryview]


def ensure_bytes(value: Any, name: str = "value") -> bytes:
    """
    Return an immutable copy of a bytes-like argument.
    
    Args:
        value: bytes, bytearray or memoryview
        name: Argument name used in the error message
        
    Returns:
        bytes copy of value
        
    Raises:
        InvalidInputError: If value is not bytes-like
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise InvalidInputError(f"Argument '{name}' must be bytes, got {type(value).__name__}")


def validate_digest(digest: Any) -> Digest:
    """
    Validate a message digest.
    
    Args:
        digest: 32-byte hash
        
    Returns:
        Digest as bytes
        
    Raises:
        InvalidInputError: If digest is not bytes or not 32 bytes long
    """
    data = ensure_bytes(digest, "hash")
    if len(data) != DIGEST_SIZE:
        raise InvalidInputError(
            f"Argument 'hash' must be {DIGEST_SIZE} bytes, got {len(data)}"
        )
    return Digest(data)


def is_valid_scalar(value: int) -> bool:
    """Check a private scalar lies in [1, n-1]."""
    return 0 < value < SECP256K1_N


def is_valid_public_key(key: BytesLike) -> bool:
    """
    Check SEC1 public key framing (length and prefix byte).
    
    This does not check that the point lies on the curve.
    """
    if len(key) == COMPRESSED_PUBKEY_SIZE:
        return key[0] in COMPRESSED_PREFIXES
    if len(key) == UNCOMPRESSED_PUBKEY_SIZE:
        return key[0] in UNCOMPRESSED_PREFIXES
    return False


def validate_public_key(key: Any) -> PublicKeyBytes:
    """
    Validate SEC1 public key framing and return as bytes.
    
    Args:
        key: Public key bytes (33 or 65 bytes)
        
    Returns:
        Public key bytes
        
    Raises:
        InvalidPointError: If key is not bytes or its framing is invalid
    """
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise InvalidPointError(f"Public key must be bytes, got {type(key).__name__}")
    data = bytes(key)

    if len(data) not in (COMPRESSED_PUBKEY_SIZE, UNCOMPRESSED_PUBKEY_SIZE):
        raise InvalidPointError(f"Public key must be 33 or 65 bytes, got {len(data)}")
    if not is_valid_public_key(data):
        raise InvalidPointError(f"Invalid SEC1 prefix 0x{data[0]:02x} for {len(data)} byte public key")

    return PublicKeyBytes(data)
