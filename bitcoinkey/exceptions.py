"""Exception hierarchy for bitcoinkey."""

from typing import Any, Optional

__all__ = [
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


class BitcoinKeyError(Exception):
    """Base exception for all bitcoinkey errors."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Optional[Any] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class CryptoError(BitcoinKeyError):
    """Raised when a cryptographic primitive fails."""
    pass


class CurveInitError(CryptoError):
    """Raised when the secp256k1 curve cannot be instantiated."""
    pass


class RandomnessError(CryptoError):
    """Raised when the entropy source fails during key generation."""
    pass


class SigningError(CryptoError):
    """Raised when the signing primitive fails. Retrying may succeed."""
    pass


class PreconditionError(BitcoinKeyError):
    """Raised when an operation needs key material the key does not hold."""
    pass


class ValidationError(BitcoinKeyError):
    """Raised when validation fails."""
    pass


class InvalidInputError(ValidationError):
    """Raised when an argument is malformed (wrong type or length)."""
    pass


class InvalidPointError(InvalidInputError):
    """Raised when bytes do not decode to a point on the curve."""
    pass


class SerializationError(BitcoinKeyError):
    """Raised when serialization/deserialization fails."""
    pass


class DecodeError(SerializationError):
    """Raised when DER input cannot be decoded."""
    pass


class EncodingError(SerializationError):
    """Raised when key material cannot be encoded."""
    pass
