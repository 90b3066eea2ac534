"""ECDSA signing and verification over 32-byte digests."""

import logging
from typing import TYPE_CHECKING, Any, Tuple

from coincurve import PrivateKey as SecpPrivateKey, PublicKey as SecpPublicKey
from ecdsa import der

from ..constants import SECP256K1_N
from ..exceptions import DecodeError, EncodingError, PreconditionError, SigningError
from ..types.common import Signature, VerifyResult
from ..utils.validation import ensure_bytes, validate_digest

if TYPE_CHECKING:
    from .keys import Key

__all__ = [
    "sign",
    "verify",
    "verify_digest",
    "parse_der_signature",
    "encode_der_signature",
    "normalize_s",
]

logger = logging.getLogger(__name__)


def sign(key: "Key", digest: Any) -> Signature:
    """
    Sign a 32-byte digest with the key's private scalar.
    
    Nonces are derived per RFC 6979 and the signature is low-S, so the
    same key and digest always give the same signature.
    
    Args:
        key: Key holding a private scalar
        digest: 32-byte message hash
        
    Returns:
        DER-encoded signature
        
    Raises:
        PreconditionError: If key has no private scalar
        InvalidInputError: If digest is not 32 bytes
        SigningError: If the signing primitive fails
    """
    if not key.has_private:
        raise PreconditionError("Key does not have a private key set")
    digest = validate_digest(digest)

    with key._secret_copy() as secret:
        try:
            signer = SecpPrivateKey(secret.to_bytes())
        except (EncodingError, ValueError) as e:
            # Scalar outside [1, n-1]; keep the value out of the message
            raise SigningError("Signing failed: invalid private scalar") from e
    try:
        return Signature(signer.sign(digest, hasher=None))
    except ValueError as e:
        raise SigningError(f"Signing failed: {e}") from e


def verify(key: "Key", digest: Any, signature: Any) -> VerifyResult:
    """
    Verify a DER signature against the key's public point.
    
    Args:
        key: Key holding a public point
        digest: 32-byte message hash
        signature: DER-encoded (r, s)
        
    Returns:
        VerifyResult.VALID, INVALID, or INDETERMINATE for malformed DER
        
    Raises:
        PreconditionError: If key has no public point
        InvalidInputError: If digest is not 32 bytes or signature is not bytes
    """
    if not key.has_public:
        raise PreconditionError("Key does not have a public key set")
    digest = validate_digest(digest)
    signature = ensure_bytes(signature, "sig")
    return verify_digest(key._public_key, digest, signature)


def verify_digest(public_key: SecpPublicKey, digest: bytes, signature: bytes) -> VerifyResult:
    """
    Verify without precondition checks. Total over any signature bytes.
    
    High-S signatures are folded to low-S first: libsecp256k1 only accepts
    the lower form, while (r, s) and (r, n - s) are both valid ECDSA.
    """
    try:
        r, s = parse_der_signature(signature)
    except DecodeError as e:
        logger.debug("Indeterminate verification: %s", e)
        return VerifyResult.INDETERMINATE

    if not (0 < r < SECP256K1_N and 0 < s < SECP256K1_N):
        return VerifyResult.INVALID

    try:
        ok = public_key.verify(encode_der_signature(r, normalize_s(s)), digest, hasher=None)
    except ValueError as e:
        logger.debug("Indeterminate verification: %s", e)
        return VerifyResult.INDETERMINATE

    return VerifyResult.VALID if ok else VerifyResult.INVALID


def normalize_s(s: int) -> int:
    """Return the low-S form of s."""
    if s > SECP256K1_N // 2:
        return SECP256K1_N - s
    return s


def parse_der_signature(signature: bytes) -> Tuple[int, int]:
    """
    Parse strict DER-encoded signature.
    
    Args:
        signature: DER SEQUENCE of two INTEGERs
        
    Returns:
        Tuple of (r, s)
        
    Raises:
        DecodeError: If signature is not strict DER
    """
    try:
        body, rest = der.remove_sequence(signature)
        if rest:
            raise DecodeError("Invalid DER signature: trailing data")
        r, body = der.remove_integer(body)
        s, body = der.remove_integer(body)
        if body:
            raise DecodeError("Invalid DER signature: extra data in sequence")
    except (der.UnexpectedDER, ValueError, IndexError) as e:
        raise DecodeError(f"Invalid DER signature: {e}") from e
    return r, s


def encode_der_signature(r: int, s: int) -> Signature:
    """
    Encode signature as DER.
    
    Args:
        r: Signature r value
        s: Signature s value
        
    Returns:
        DER-encoded signature
    """
    return Signature(der.encode_sequence(der.encode_integer(r), der.encode_integer(s)))
