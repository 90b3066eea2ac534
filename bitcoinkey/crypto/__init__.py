"""Cryptographic primitives for bitcoinkey."""

from ..crypto.curve import Curve, SECP256K1, load_curve
from ..crypto.secret import SecretScalar
from ..crypto.keys import Key
from ..crypto.der import encode_private_key, decode_private_key
from ..crypto.signature import (
    sign,
    verify,
    verify_digest,
    parse_der_signature,
    encode_der_signature,
    normalize_s,
)
from ..crypto.verifier import SignatureRequest, SignatureVerifier

__all__ = [
    # Curve
    "Curve",
    "SECP256K1",
    "load_curve",

    # Keys
    "Key",
    "SecretScalar",
    "encode_private_key",
    "decode_private_key",

    # Signatures
    "sign",
    "verify",
    "verify_digest",
    "parse_der_signature",
    "encode_der_signature",
    "normalize_s",

    # Offloaded verification
    "SignatureRequest",
    "SignatureVerifier",
]
