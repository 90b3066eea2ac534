"""Common type definitions for bitcoinkey."""

from enum import Enum
from typing import NewType

__all__ = [
    "PrivateKeyBytes",
    "PublicKeyBytes",
    "Digest",
    "Signature",
    "DERBytes",
    "VerifyResult",
]

# Crypto types
PrivateKeyBytes = NewType("PrivateKeyBytes", bytes)
"""32-byte big-endian private scalar."""

PublicKeyBytes = NewType("PublicKeyBytes", bytes)
"""33 or 65 byte SEC1 public key."""

Digest = NewType("Digest", bytes)
"""32-byte message hash."""

Signature = NewType("Signature", bytes)
"""DER-encoded (r, s) signature."""

DERBytes = NewType("DERBytes", bytes)
"""DER-encoded EC private key."""


class VerifyResult(Enum):
    """
    Three-way outcome of an ECDSA verification.

    INDETERMINATE means the check could not run, typically because the
    signature is not valid DER. Only VALID is truthy.
    """

    VALID = 1
    INVALID = 0
    INDETERMINATE = -1

    @classmethod
    def from_code(cls, code: int) -> "VerifyResult":
        """Map a 1 / 0 / -1 verify code to a result."""
        try:
            return cls(code)
        except ValueError:
            return cls.INDETERMINATE

    @property
    def is_valid(self) -> bool:
        return self is VerifyResult.VALID

    def __bool__(self) -> bool:
        return self is VerifyResult.VALID
