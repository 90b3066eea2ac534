"""Type definitions for bitcoinkey."""

from ..types.common import (
    PrivateKeyBytes,
    PublicKeyBytes,
    Digest,
    Signature,
    DERBytes,
    VerifyResult,
)

__all__ = [
    "PrivateKeyBytes",
    "PublicKeyBytes",
    "Digest",
    "Signature",
    "DERBytes",
    "VerifyResult",
]
