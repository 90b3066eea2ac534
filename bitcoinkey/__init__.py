"""
bitcoinkey

secp256k1 key management with ECDSA signing and verification, including
verification offloaded to worker threads for asyncio callers.
"""

from .constants import CURVE_NAME
from .exceptions import (
    BitcoinKeyError,
    CryptoError,
    CurveInitError,
    RandomnessError,
    SigningError,
    PreconditionError,
    ValidationError,
    InvalidInputError,
    InvalidPointError,
    SerializationError,
    DecodeError,
    EncodingError,
)
from .crypto import Key, SignatureVerifier, sign, verify
from .types import VerifyResult

__version__ = "1.0.0"

__all__ = [
    "CURVE_NAME",
    "generate",
    "from_der",

    # Keys
    "Key",
    "sign",
    "verify",
    "SignatureVerifier",
    "VerifyResult",

    # Exceptions
    "BitcoinKeyError",
    "CryptoError",
    "CurveInitError",
    "RandomnessError",
    "SigningError",
    "PreconditionError",
    "ValidationError",
    "InvalidInputError",
    "InvalidPointError",
    "SerializationError",
    "DecodeError",
    "EncodingError",
]


def generate() -> Key:
    """
    Generate a new key pair.
    
    Example:
        >>> key = bitcoinkey.generate()
        >>> der = key.to_der()
    """
    return Key.generate()


def from_der(data: bytes) -> Key:
    """Import a key from DER-encoded EC private key bytes."""
    return Key.from_der(data)
